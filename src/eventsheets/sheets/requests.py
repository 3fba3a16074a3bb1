from dataclasses import dataclass, field
from typing import List
import re

from ..resources import SheetsResourceBase
from .resources import DimensionRange, GridCoordinate, RowData, Spreadsheet


class GoogleSheetsUpdateRequestBase(SheetsResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format.
    """
    _NAME_RE = re.compile(r"^([a-zA-Z])([a-zA-Z]+)Request$")

    def to_request(self) -> dict[str, dict]:
        # the request key is the class name with the trailing 'Request'
        # stripped and the first letter lower cased
        m = self._NAME_RE.match(self.__class__.__name__)
        if not m:
            raise RuntimeError("Invalid Google Sheets request format for class name")
        return {m.group(1).lower() + m.group(2): self.to_base()}


@dataclass
class AddSheetRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#addsheetrequest
    Only the title is set, everything else takes the API defaults.
    """
    title: str

    def to_base(self) -> dict:
        return {'properties': {'title': self.title}}


@dataclass
class DeleteDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletedimensionrequest
    The 'range' indirection makes this a bit complicated, we want the DimensionRange
    initializer but park it in the range object.
    """
    range: DimensionRange = field(init=False)

    def __init__(self, sheetId: int, dimension: str,
                 startIndex: int|None = None,
                 endIndex: int|None = None) -> None:
        self.range = DimensionRange(sheetId, dimension, startIndex, endIndex)

    def to_base(self) -> dict:
        return {'range': self.range.to_base()}


@dataclass
class InsertDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#insertdimensionrequest
    """
    range: DimensionRange = field(init=False)
    inheritFromBefore: bool = field(default=False)

    def __init__(self, sheetId: int, dimension: str,
                 startIndex: int, endIndex: int,
                 inheritFromBefore: bool = False) -> None:
        self.range = DimensionRange(sheetId, dimension, startIndex, endIndex)
        self.inheritFromBefore = inheritFromBefore

    def to_base(self) -> dict:
        return {'range': self.range.to_base(), 'inheritFromBefore': self.inheritFromBefore}


@dataclass
class UpdateCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatecellsrequest
    Writes rows of user entered values starting at a single coordinate.
    """
    start: GridCoordinate
    rows: List[RowData] = field(default_factory=list)
    fields: str = field(default="userEnteredValue")

    def to_base(self) -> dict:
        return {'start': self.start.to_base(),
                'rows': [r.to_base() for r in self.rows],
                'fields': self.fields}


@dataclass
class UpdateSheetPropertiesRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
    Only renames are needed so the field mask is fixed to the title.
    """
    sheetId: int
    title: str

    def to_base(self) -> dict:
        return {'properties': {'sheetId': self.sheetId, 'title': self.title},
                'fields': 'title'}


@dataclass
class GoogleSheetsUpdateRequest(SheetsResourceBase):
    """
    Batch Update request body.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#request-body
    """
    requests: List[GoogleSheetsUpdateRequestBase|dict]
    includeSpreadsheetInResponse: bool = field(default=False)

    def to_base(self) -> dict:
        return {'requests': [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else dict(r)
                             for r in self.requests],
                'includeSpreadsheetInResponse': self.includeSpreadsheetInResponse}


@dataclass
class GoogleSheetsUpdateRequestResponse(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    replies: List[dict] = field(default_factory=list)
    updatedSpreadsheet: Spreadsheet|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def fixup(self) -> None:
        self.replies = list(self.replies or [])
        if not isinstance(self.updatedSpreadsheet, Spreadsheet):
            self.updatedSpreadsheet = Spreadsheet.from_response(self.updatedSpreadsheet)
