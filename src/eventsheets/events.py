"""
Companies, events and registrations on top of the spreadsheet.

The 'companies' sheet is a plain list: a header row and one row per company.
Every company has a sheet of its own named after it, holding one table per
event (see sheets.tables for the table layout).  An event table's columns
are EVENT_HEADERS.  Its settings row reuses them for the event's own
details: Name is the display name, RegistrationDate the event date, Image
the event image, plus Description and EventStatus.  Registrations are data
rows of the first thirteen columns.
"""
from dataclasses import dataclass, field, asdict, fields
from datetime import datetime, timezone
import logging
import uuid

from googleapiclient.errors import HttpError

from .sheets import GoogleSpreadSheet, SheetTables, TableLocation
from .sheets.tables import find_table_start, locate_table, is_marker_row
from .forms import RegistrationForm, CompanyCreate, EventCreate
from .config import DEFAULT_COMPANIES_SHEET
from .errors import (CompanyNotFoundError, CompanyExistsError, CompanyDisabledError,
                     EventNotFoundError, EventExistsError, EventDisabledError, AlreadyRegisteredError,
                     TableNotFoundError)

logger = logging.getLogger(__name__)

ENABLED = "enabled"
DISABLED = "disabled"

COMPANY_HEADERS = ["Id", "Name", "Email", "Description", "CreatedAt", "Status"]

REGISTRATION_HEADERS = ["Name", "Phone", "Email", "Gender", "College", "Status", "NationalId",
                        "RegistrationDate", "Image", "Age", "University", "Level", "Faculty"]
EVENT_HEADERS = REGISTRATION_HEADERS + ["Description", "EventStatus"]

# row offsets from an event table's marker row
SETTINGS_ROW_OFFSET = 2


def _now_iso() -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _cell(row: list, index: int) -> str:
    return str(row[index]) if 0 <= index < len(row) else ""


def _column(headers: list, name: str, default: int) -> int:
    """Index of a named column, falling back to its standard position."""
    try:
        return headers.index(name)
    except ValueError:
        return default


def _not_found_status(e: HttpError) -> bool:
    # the API answers a range on a missing sheet with 400 'Unable to parse range'
    return getattr(e.resp, "status", None) in (400, 404)


@dataclass
class Company:
    id: str = field(default="")
    name: str = field(default="")
    email: str = field(default="")
    description: str = field(default="")
    createdAt: str = field(default="")
    status: str = field(default=ENABLED)

    @classmethod
    def from_row(cls, row: list) -> "Company":
        values = [_cell(row, i) for i in range(len(COMPANY_HEADERS))]
        if not values[5]:
            values[5] = ENABLED
        return cls(*values)

    def to_row(self) -> list[str]:
        return [getattr(self, f.name) for f in fields(self)]

    @property
    def enabled(self) -> bool:
        return self.status != DISABLED

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Registration:
    name: str = field(default="")
    phone: str = field(default="")
    email: str = field(default="")
    gender: str = field(default="")
    college: str = field(default="")
    status: str = field(default="")
    nationalId: str = field(default="")
    registrationDate: str = field(default="")
    image: str = field(default="")
    age: str = field(default="")
    university: str = field(default="")
    level: str = field(default="")
    faculty: str = field(default="")

    @classmethod
    def from_form(cls, form: RegistrationForm, registration_date: str) -> "Registration":
        return cls(name=form.name, phone=form.phone, email=form.email, gender=form.gender,
                   college=form.college, status=form.status, nationalId=form.nationalId,
                   registrationDate=registration_date, image="", age=form.age,
                   university=form.university, level=form.level or "", faculty=form.faculty)

    @classmethod
    def from_row(cls, row: list) -> "Registration":
        return cls(*[_cell(row, i) for i in range(len(REGISTRATION_HEADERS))])

    def to_row(self) -> list[str]:
        return [getattr(self, f.name) for f in fields(self)]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EventSummary:
    """What the public pages show about an event."""
    id: str
    name: str
    image: str|None
    description: str
    date: str
    registrations: int
    status: str
    companyStatus: str

    @classmethod
    def from_table(cls, table_name: str, table_rows: list[list[str]], company_status: str) -> "EventSummary":
        """
        table_rows is what getTableData() returns: headers, settings, data.
        """
        headers = table_rows[0] if table_rows else []
        settings = table_rows[1] if len(table_rows) > 1 else []
        data = [r for r in table_rows[2:] if any(str(v).strip() for v in r)]
        return cls(
            id=table_name,
            name=_cell(settings, _column(headers, "Name", 0)) or table_name,
            image=_cell(settings, _column(headers, "Image", 8)) or None,
            description=_cell(settings, _column(headers, "Description", 13)),
            date=_cell(settings, _column(headers, "RegistrationDate", 7)),
            registrations=len(data),
            status=_cell(settings, _column(headers, "EventStatus", 14)) or ENABLED,
            companyStatus=company_status,
        )

    def to_dict(self) -> dict:
        return asdict(self)


def event_settings_row(form: EventCreate) -> list[str]:
    row = [""] * len(EVENT_HEADERS)
    row[EVENT_HEADERS.index("Name")] = form.displayName or form.name
    row[EVENT_HEADERS.index("RegistrationDate")] = form.date
    row[EVENT_HEADERS.index("Image")] = form.image
    row[EVENT_HEADERS.index("Description")] = form.description
    row[EVENT_HEADERS.index("EventStatus")] = ENABLED if form.enabled else DISABLED
    return row


class EventService():
    """
    The application's operations.  Stateless apart from the handles to the
    spreadsheet: every call reads what it needs fresh from the sheets.
    """
    def __init__(self, spreadsheet: GoogleSpreadSheet,
                 companies_sheet: str = DEFAULT_COMPANIES_SHEET) -> None:
        self._spreadsheet = spreadsheet
        self._tables = SheetTables(spreadsheet)
        self._companies_sheet = companies_sheet

    @property
    def spreadsheet(self) -> GoogleSpreadSheet:
        return self._spreadsheet

    @property
    def tables(self) -> SheetTables:
        return self._tables

    # companies

    def _companies_rows(self) -> list[list[str]]:
        try:
            return self._spreadsheet.getSheetData(self._companies_sheet)
        except HttpError as e:
            if _not_found_status(e):
                logger.warning("Companies sheet %s does not exist", self._companies_sheet)
                return []
            raise

    def list_companies(self) -> list[Company]:
        rows = self._companies_rows()
        return [Company.from_row(r) for r in rows[1:] if any(str(v).strip() for v in r)]

    def get_company(self, name: str) -> Company|None:
        for c in self.list_companies():
            if c.name == name:
                return c
        return None

    def create_company(self, form: CompanyCreate) -> Company:
        self._spreadsheet.get()
        if form.name in self._spreadsheet or self.get_company(form.name) is not None:
            raise CompanyExistsError()
        if self._companies_sheet not in self._spreadsheet:
            self._spreadsheet.createSheet(self._companies_sheet)
            self._spreadsheet.appendToSheet(self._companies_sheet, [COMPANY_HEADERS])
        self._spreadsheet.createSheet(form.name)
        company = Company(id=str(uuid.uuid4()), name=form.name, email=form.email,
                          description=form.description, createdAt=_now_iso(), status=ENABLED)
        self._spreadsheet.appendToSheet(self._companies_sheet, [company.to_row()])
        logger.info("Created company %s", company.name)
        return company

    def set_company_status(self, name: str, enabled: bool) -> Company:
        rows = self._companies_rows()
        for i, row in enumerate(rows[1:], start=1):
            if _cell(row, 1) == name:
                company = Company.from_row(row)
                company.status = ENABLED if enabled else DISABLED
                self._spreadsheet.updateRow(self._companies_sheet, i, company.to_row())
                logger.info("Company %s is now %s", name, company.status)
                return company
        raise CompanyNotFoundError()

    def _company_status(self, name: str) -> str:
        company = self.get_company(name)
        return company.status if company is not None else ENABLED

    def _company_rows(self, company: str) -> list[list[str]]:
        """All rows of a company's sheet; a missing sheet is an unknown company."""
        try:
            return self._spreadsheet.getSheetData(company)
        except HttpError as e:
            if _not_found_status(e):
                logger.error("Company sheet %s does not exist", company)
                raise CompanyNotFoundError() from e
            raise

    # events

    def list_events(self, company: str) -> list[EventSummary]:
        rows = self._company_rows(company)
        company_status = self._company_status(company)
        if company_status == DISABLED:
            raise CompanyDisabledError("Company is disabled")
        events = []
        for i, row in enumerate(rows):
            if is_marker_row(row):
                location = locate_table(rows, row[0], company)
                if location.start != i:
                    # a later duplicate of a name already listed
                    continue
                events.append(EventSummary.from_table(location.name, location.rows_of(rows), company_status))
        return events

    def get_event(self, company: str, event_id: str) -> EventSummary:
        wanted = event_id.strip().lower()
        for e in self.list_events(company):
            if e.id.strip().lower() == wanted:
                return e
        logger.error("Event %s not found for company %s", event_id, company)
        raise EventNotFoundError()

    def create_event(self, form: EventCreate) -> EventSummary:
        rows = self._company_rows(form.company)
        if find_table_start(rows, form.name) >= 0:
            raise EventExistsError(f"Event {form.name} already exists")
        settings = event_settings_row(form)
        self._tables.createTable(form.company, form.name, EVENT_HEADERS, settings)
        logger.info("Created event %s for company %s", form.name, form.company)
        return EventSummary.from_table(form.name, [EVENT_HEADERS, settings],
                                       self._company_status(form.company))

    def _locate_event(self, company: str, event: str) -> tuple[TableLocation, list[list[str]]]:
        rows = self._company_rows(company)
        try:
            return locate_table(rows, event, company), rows
        except TableNotFoundError as e:
            raise EventNotFoundError() from e

    def set_event_status(self, company: str, event: str, enabled: bool) -> EventSummary:
        location, rows = self._locate_event(company, event)
        table_rows = location.rows_of(rows)
        if len(table_rows) < 2:
            raise EventNotFoundError("Event data not found")
        headers = table_rows[0]
        settings = list(table_rows[1])
        idx = _column(headers, "EventStatus", EVENT_HEADERS.index("EventStatus"))
        settings += [""] * (idx + 1 - len(settings))
        settings[idx] = ENABLED if enabled else DISABLED
        self._tables.updateTableRow(company, location.name, SETTINGS_ROW_OFFSET, settings)
        logger.info("Event %s of %s is now %s", location.name, company, settings[idx])
        table_rows[1] = settings
        return EventSummary.from_table(location.name, table_rows, self._company_status(company))

    def delete_event(self, company: str, event: str) -> None:
        location, _ = self._locate_event(company, event)
        self._tables.deleteTable(company, location.name)
        logger.info("Deleted event %s of %s", location.name, company)

    def list_registrations(self, company: str, event: str) -> list[Registration]:
        location, rows = self._locate_event(company, event)
        data = location.rows_of(rows)[2:]
        return [Registration.from_row(r) for r in data if any(str(v).strip() for v in r)]

    # registration

    def register(self, form: RegistrationForm) -> dict:
        """
        Record a registration.  Between reading the table and inserting the
        row nothing is locked, so a concurrent registration with the same
        email can slip through the duplicate check.
        """
        company = form.companyName
        logger.info("Registration request for %s / %s from %s", company, form.eventName, form.email)

        rows = self._company_rows(company)
        if not rows:
            logger.error("Company sheet %s is empty", company)
            raise CompanyNotFoundError()

        if self._company_status(company) == DISABLED:
            raise CompanyDisabledError()

        start = find_table_start(rows, form.eventName)
        if start < 0:
            logger.error("Event %s not found in company %s", form.eventName, company)
            raise EventNotFoundError()
        location = locate_table(rows, rows[start][0], company)

        table_rows = location.rows_of(rows)
        if not table_rows:
            raise EventNotFoundError("Event data not found")

        headers = table_rows[0]
        status_index = _column(headers, "EventStatus", -1)
        if status_index >= 0 and len(table_rows) > 1:
            if _cell(table_rows[1], status_index) == DISABLED:
                raise EventDisabledError()

        email = form.email.lower()
        for row in table_rows[2:]:
            if _cell(row, 2).lower() == email or _cell(row, 1) == form.phone:
                raise AlreadyRegisteredError()

        registration = Registration.from_form(form, _now_iso())
        self._tables.addToTable(company, location.name, registration.to_row())
        logger.info("Registered %s for %s / %s", form.email, company, location.name)

        return {
            "name": registration.name,
            "email": registration.email,
            "age": registration.age,
            "university": registration.university,
            "eventName": location.name,
            "registrationDate": registration.registrationDate,
        }
