from typing import Self

from .resources import Sheet, SheetProperties, GoogleSheetsEnum, GridCoordinate, RowData
from .requests import (GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestResponse,
                       DeleteDimensionRequest, InsertDimensionRequest,
                       UpdateCellsRequest, UpdateSheetPropertiesRequest)
from . import ops


class GoogleSheet():
    """
    Class representation of a sheet.  In Google Sheets parlance a 'sheet' is
    an individual tab within a parent 'spreadsheet'.  Requests to a sheet are
    addressed with the spreadsheetId of the parent and the sheetId, which is
    the constant identifier of the tab (the title and index can change).
    In this application a sheet is a company, or the companies list itself.
    """
    def __init__(self, spreadsheetid: str,
                 sheet: Sheet|dict) -> None:
        self._spreadsheetid = spreadsheetid
        self._sheet = sheet if isinstance(sheet, Sheet) else Sheet.from_response(sheet)
        self._props: SheetProperties = self._sheet.properties

    def __str__(self) -> str:
        return str(self._props)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __bool__(self) -> bool:
        return bool(self._props)

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheetid

    @property
    def sheet(self) -> Sheet:
        return self._sheet

    @property
    def title(self) -> str:
        return self._props.title

    @property
    def index(self) -> int:
        """Position of the tab within the spreadsheet, can shift."""
        return self._props.index

    @property
    def sheet_id(self) -> int:
        """Constant identifier of the sheet, 0 for the first one created."""
        return self._props.sheetId

    @property
    def rows(self) -> int:
        return self._props.gridProperties.rowCount

    @property
    def cols(self) -> int:
        return self._props.gridProperties.columnCount

    def batchUpdate(self, request: GoogleSheetsUpdateRequest|dict) -> GoogleSheetsUpdateRequestResponse:
        return ops.batchUpdate(self._spreadsheetid, request)

    def updateRequests(self) -> "_SheetUpdateChain":
        """
        Start a batchUpdate() chain, makes it easy to append operations to pack
        into a single request before sending it.
        """
        return _SheetUpdateChain(self)


class _SheetUpdateChain():
    """
    Utility class for building up a chain of update requests.
    The spreadsheet batchUpdate method takes a list of requests which are
    applied in order, atomically.  That matters for inserting a row and then
    filling it: both happen or neither does.
    response = sheet.updateRequests().insertDimension(...).updateCells(...).execute()
    """
    def __init__(self, sheet: GoogleSheet) -> None:
        if not sheet:
            raise ValueError("Must be a valid sheet for an update operation")
        self._sheet = sheet
        self._requests = []

    def __len__(self) -> int:
        return len(self._requests)

    @property
    def requests(self) -> list:
        return list(self._requests)

    def execute(self) -> GoogleSheetsUpdateRequestResponse:
        """
        Terminate a request chain and send the actual batchUpdate
        """
        if self._requests:
            return self._sheet.batchUpdate(GoogleSheetsUpdateRequest(self._requests))
        return GoogleSheetsUpdateRequestResponse(self._sheet.spreadsheet_id)

    def insertDimension(self, index: int, num: int = 1,
                        dimension: str = "ROWS",
                        inheritFromBefore: bool = False) -> Self:
        """
        Insert num rows/cols at the 0-based index.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#insertdimensionrequest
        """
        if index < 0:
            raise ValueError("insertDimension(): index must be >= 0")
        if num > 0:
            dim = GoogleSheetsEnum.dimension(dimension)
            if not dim:
                raise ValueError(f"insertDimension() dimension parameter must be 'ROWS' or 'COLS' not: {dimension}")
            self._requests.append(InsertDimensionRequest(self._sheet.sheet_id, dim,
                                                         index, index + num, inheritFromBefore))
        return self

    def deleteDimension(self, start: int, end: int|None = None, dimension: str = "ROWS") -> Self:
        """
        Remove rows or columns [start, end), 0-based.  An end of None means
        through the end of the sheet.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletedimensionrequest
        """
        if start < 0:
            raise ValueError("deleteDimension(): start must be >= 0")
        if end is not None and end <= start:
            return self
        dim = GoogleSheetsEnum.dimension(dimension)
        if not dim:
            raise ValueError(f"deleteDimension() dimension parameter must be 'ROWS' or 'COLS' not: {dimension}")
        self._requests.append(DeleteDimensionRequest(self._sheet.sheet_id, dim, start, end))
        return self

    def updateCells(self, rowIndex: int, rows: list[list], columnIndex: int = 0) -> Self:
        """
        Write rows of values as user entered strings starting at the 0-based
        coordinate.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatecellsrequest
        """
        if rows:
            start = GridCoordinate(self._sheet.sheet_id, rowIndex, columnIndex)
            self._requests.append(UpdateCellsRequest(start, [RowData.from_values(r) for r in rows]))
        return self

    def rename(self, title: str) -> Self:
        """
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
        """
        if not title:
            raise ValueError("rename(): title must not be empty")
        self._requests.append(UpdateSheetPropertiesRequest(self._sheet.sheet_id, str(title)))
        return self
