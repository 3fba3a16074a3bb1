from typing import Optional
import argparse
import logging
import secrets

from fastapi import FastAPI, APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
import uvicorn

from .access import gws
from .config import Settings
from .errors import (EventSheetsError, CompanyNotFoundError, CompanyDisabledError, EventNotFoundError,
                     EventDisabledError, AlreadyRegisteredError)
from .events import EventService
from .forms import RegistrationForm, CompanyCreate, EventCreate, StatusUpdate, first_error_message
from .sheets import GoogleSpreadSheet

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

router = APIRouter(prefix="/api")

# failures a registration attempt can answer with; anything else is a 500
REGISTRATION_ERRORS = (CompanyNotFoundError, CompanyDisabledError, EventNotFoundError,
                       EventDisabledError, AlreadyRegisteredError)


def get_service(request: Request) -> EventService:
    return request.app.state.service


def require_admin(request: Request, x_admin_key: Optional[str] = Header(None, alias="X-Admin-Key")) -> bool:
    expected = request.app.state.settings.admin_key
    if not expected or not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin credentials")
    return True


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/events")
def list_events(company: str = Query(default=""), service: EventService = Depends(get_service)):
    if not company.strip():
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Company name is required"})
    events = service.list_events(company.strip())
    return {"events": [e.to_dict() for e in events]}


@router.post("/events/register")
def register(form: RegistrationForm, service: EventService = Depends(get_service)):
    try:
        registration = service.register(form)
    except REGISTRATION_ERRORS:
        raise
    except Exception:
        logger.exception("Error registering for event %s / %s", form.companyName, form.eventName)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            content={"error": "Failed to register for event"})
    return {"success": True, "message": "Registration successful", "registration": registration}


@router.get("/events/{company}/{event}")
def get_event(company: str, event: str, service: EventService = Depends(get_service)):
    return {"event": service.get_event(company, event).to_dict()}


@router.post("/events", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_event(form: EventCreate, service: EventService = Depends(get_service)):
    return {"event": service.create_event(form).to_dict()}


@router.patch("/events/{company}/{event}/status", dependencies=[Depends(require_admin)])
def set_event_status(company: str, event: str, body: StatusUpdate,
                     service: EventService = Depends(get_service)):
    return {"event": service.set_event_status(company, event, body.enabled).to_dict()}


@router.delete("/events/{company}/{event}", dependencies=[Depends(require_admin)])
def delete_event(company: str, event: str, service: EventService = Depends(get_service)):
    service.delete_event(company, event)
    return {"success": True}


@router.get("/events/{company}/{event}/registrations", dependencies=[Depends(require_admin)])
def list_registrations(company: str, event: str, service: EventService = Depends(get_service)):
    return {"registrations": [r.to_dict() for r in service.list_registrations(company, event)]}


@router.get("/companies", dependencies=[Depends(require_admin)])
def list_companies(service: EventService = Depends(get_service)):
    return {"companies": [c.to_dict() for c in service.list_companies()]}


@router.post("/companies", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_company(form: CompanyCreate, service: EventService = Depends(get_service)):
    return {"company": service.create_company(form).to_dict()}


@router.patch("/companies/{company}/status", dependencies=[Depends(require_admin)])
def set_company_status(company: str, body: StatusUpdate, service: EventService = Depends(get_service)):
    return {"company": service.set_company_status(company, body.enabled).to_dict()}


async def _eventsheets_error(request: Request, exc: EventSheetsError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": first_error_message(exc)})


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Internal server error"})


def create_app(settings: Settings|None = None, service: EventService|None = None) -> FastAPI:
    """
    Build the application.  Without an explicit service one is made from the
    settings, which then must name the spreadsheet.
    """
    settings = settings or Settings.from_env()
    if service is None:
        settings.validate()
        gws.configure(settings)
        service = EventService(GoogleSpreadSheet(settings.spreadsheet_id), settings.companies_sheet)

    app = FastAPI(title="eventsheets API", version="0.1.0")
    app.state.settings = settings
    app.state.service = service
    app.include_router(router)
    app.add_exception_handler(EventSheetsError, _eventsheets_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(HTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)
    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


def main(argv: list[str]|None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the event registration API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--env-file", default=None, help="path to a .env file")
    args = parser.parse_args(argv)

    settings = Settings.from_env(args.env_file)
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)
    app = create_app(settings)
    logger.info("Serving spreadsheet %s on %s:%d", settings.spreadsheet_id, args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
