"""
Exception types raised by the spreadsheet layer and the event service.
Every error carries the HTTP status the API should answer with so the
route handlers only need a single translation point.
"""


class EventSheetsError(Exception):
    """Base for everything raised on purpose by this package."""
    status_code: int = 500

    def __init__(self, message: str = "", status_code: int|None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ConfigurationError(EventSheetsError):
    status_code = 500


class ServiceUnavailableError(EventSheetsError):
    """No credentials, so no service could be built."""
    status_code = 503


class SheetNotFoundError(EventSheetsError):
    status_code = 404


class TableNotFoundError(EventSheetsError):
    status_code = 404


class TableExistsError(EventSheetsError):
    status_code = 409


class CompanyNotFoundError(EventSheetsError):
    status_code = 404

    def __init__(self, message: str = "Company not found") -> None:
        super().__init__(message)


class CompanyExistsError(EventSheetsError):
    status_code = 409

    def __init__(self, message: str = "Company already exists") -> None:
        super().__init__(message)


class CompanyDisabledError(EventSheetsError):
    status_code = 403

    def __init__(self, message: str = "Company is disabled, registration is not available") -> None:
        super().__init__(message)


class EventNotFoundError(EventSheetsError):
    status_code = 404

    def __init__(self, message: str = "Event not found") -> None:
        super().__init__(message)


class EventDisabledError(EventSheetsError):
    status_code = 403

    def __init__(self, message: str = "Event registration is currently disabled") -> None:
        super().__init__(message)


class AlreadyRegisteredError(EventSheetsError):
    status_code = 400

    def __init__(self, message: str = "You are already registered for this event") -> None:
        super().__init__(message)


class EventExistsError(EventSheetsError):
    status_code = 409

    def __init__(self, message: str = "Event already exists") -> None:
        super().__init__(message)
