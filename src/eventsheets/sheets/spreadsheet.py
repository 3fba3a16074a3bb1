import logging

from .resources import Spreadsheet, AppendValuesResponse, UpdateValuesResponse
from .requests import GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestResponse, AddSheetRequest
from .a1 import GoogleSheetsA1Notation
from .sheet import GoogleSheet
from . import ops
from ..errors import SheetNotFoundError

logger = logging.getLogger(__name__)


class GoogleSpreadSheet():
    """
    The one spreadsheet backing the application.  Every method is a direct
    call to the API, nothing is cached apart from the sheet properties which
    are re-fetched whenever a sheet is looked up, since the sheets can be
    changed from under us at any time.
    """
    def __init__(self, spreadsheet_id: str) -> None:
        self._spreadsheet = Spreadsheet(spreadsheetId=str(spreadsheet_id))

    def __bool__(self) -> bool:
        return bool(self._spreadsheet)

    def __str__(self) -> str:
        return str(self._spreadsheet)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __len__(self) -> int:
        """
        Number of sheets as of the last get().
        """
        return len(self._spreadsheet.sheets)

    def __contains__(self, val: str|int) -> bool:
        """
        Is the sheet in this spreadsheet?
        val can be either a string (title) or int (sheet ID)
        """
        return self.find_sheet(val) is not None

    def __getitem__(self, item: str|int) -> GoogleSheet:
        """
        Look up a sheet by title, or by sheet ID for an int.
        """
        s = self.find_sheet(item)
        if s is None:
            raise SheetNotFoundError(f"Sheet {item} not found")
        return s

    @property
    def id(self) -> str:
        return self._spreadsheet.spreadsheetId

    @property
    def spreadsheet(self) -> Spreadsheet:
        return self._spreadsheet

    @property
    def title(self) -> str:
        return self._spreadsheet.properties.title or 'unconnected'

    def find_sheet(self, val: str|int) -> GoogleSheet|None:
        if isinstance(val, int):
            match = [s for s in self._spreadsheet.sheets if s.properties.sheetId == val]
        else:
            match = [s for s in self._spreadsheet.sheets if s.properties.title == val]
        return GoogleSheet(self.id, match[0]) if match else None

    def get(self) -> Spreadsheet:
        """Refresh the spreadsheet properties, including the list of sheets."""
        spreadsheet = ops.get(self.id)
        if spreadsheet:
            self._spreadsheet = spreadsheet
        return spreadsheet

    def getSpreadsheet(self) -> Spreadsheet:
        return self.get()

    def getAllSheets(self) -> list[GoogleSheet]:
        self.get()
        return [GoogleSheet(self.id, s) for s in self._spreadsheet.sheets]

    def getSheet(self, title: str) -> GoogleSheet:
        """
        Fresh lookup of a sheet by title.
        Raises SheetNotFoundError when there is no such sheet.
        """
        self.get()
        return self[title]

    def batchUpdate(self, request: GoogleSheetsUpdateRequest|dict) -> GoogleSheetsUpdateRequestResponse:
        return ops.batchUpdate(self.id, request)

    def getSheetData(self, title: str) -> list[list[str]]:
        """
        Every value of a sheet as rows of strings.  Trailing empty cells of a
        row are not returned by the API so rows can have different lengths.
        """
        return ops.getValues(self.id, GoogleSheetsA1Notation.generate_a1(title)).rows

    def appendToSheet(self, title: str, values: list[list]) -> AppendValuesResponse:
        return ops.appendValues(self.id, GoogleSheetsA1Notation.generate_a1(title), values, "USER_ENTERED")

    def createSheet(self, title: str) -> GoogleSheetsUpdateRequestResponse:
        logger.info("Creating sheet %s", title)
        response = self.batchUpdate(GoogleSheetsUpdateRequest([AddSheetRequest(str(title))]))
        self.get()
        return response

    def renameSheet(self, old_title: str, new_title: str) -> GoogleSheetsUpdateRequestResponse:
        logger.info("Renaming sheet %s to %s", old_title, new_title)
        response = self.getSheet(old_title).updateRequests().rename(new_title).execute()
        self.get()
        return response

    def deleteRow(self, title: str, row_index: int) -> GoogleSheetsUpdateRequestResponse:
        """Remove a single row, 0-based."""
        return self.getSheet(title).updateRequests().deleteDimension(row_index, row_index + 1).execute()

    def updateRow(self, title: str, row_index: int, values: list) -> UpdateValuesResponse:
        """Overwrite a row from column A, 0-based row index."""
        a1 = GoogleSheetsA1Notation.cell(title, 'A', row_index + 1)
        return ops.updateValues(self.id, a1, [list(values)], "USER_ENTERED")
