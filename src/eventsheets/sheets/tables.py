"""
Tables within a sheet.

A sheet can hold several tables stacked vertically.  Each one is a run of rows:

    <name>                      the marker row, a single non-empty cell
    <header> <header> ...
    <setting> <setting> ...     the settings row
    <value> <value> ...         data rows, newest first
    ...

and runs until the next marker row or the end of the sheet's data.  The
API trims trailing empty cells from each row so a marker row is simply a
row of length one.  Nothing enforces the layout: a data row that happens
to have only its first cell filled in will be taken for the start of the
next table.
"""
from dataclasses import dataclass
import logging

from .spreadsheet import GoogleSpreadSheet
from .resources import AppendValuesResponse, UpdateValuesResponse
from .requests import GoogleSheetsUpdateRequestResponse
from ..errors import SheetNotFoundError, TableNotFoundError, TableExistsError

logger = logging.getLogger(__name__)

# rows of a table before the data: name, headers, settings
TABLE_PREAMBLE_ROWS = 3


def is_marker_row(row: list) -> bool:
    return len(row) == 1 and str(row[0]) != ""


def _normalize(name: str) -> str:
    return str(name).strip().lower()


def find_table_start(rows: list[list[str]], name: str) -> int:
    """
    Index of the marker row for name, or -1.  An exact match wins over a
    case and whitespace insensitive one, whichever comes first in the sheet.
    """
    for i, row in enumerate(rows):
        if is_marker_row(row) and row[0] == name:
            return i
    wanted = _normalize(name)
    for i, row in enumerate(rows):
        if is_marker_row(row) and _normalize(row[0]) == wanted:
            return i
    return -1


def find_table_end(rows: list[list[str]], start: int) -> int:
    """Index of the next marker row after start, or len(rows)."""
    for i in range(start + 1, len(rows)):
        if is_marker_row(rows[i]):
            return i
    return len(rows)


def list_table_names(rows: list[list[str]]) -> list[str]:
    return [row[0] for row in rows if is_marker_row(row)]


@dataclass(frozen=True)
class TableLocation:
    """
    Where a table sits in its sheet, as 0-based row indexes.
    name is the marker text exactly as found in the sheet, which can differ
    in case from what was asked for.
    """
    name: str
    start: int
    end: int

    @property
    def header_index(self) -> int:
        return self.start + 1

    @property
    def settings_index(self) -> int:
        return self.start + 2

    @property
    def insert_position(self) -> int:
        """
        Row index a new data row goes in at: straight after the settings row,
        or at the end when the table is short of a full preamble.
        """
        return min(self.start + TABLE_PREAMBLE_ROWS, self.end)

    def rows_of(self, rows: list[list[str]]) -> list[list[str]]:
        """The table's rows from the header row on, the marker excluded."""
        return rows[self.start + 1:self.end]


def locate_table(rows: list[list[str]], name: str, sheet: str = "") -> TableLocation:
    start = find_table_start(rows, name)
    if start < 0:
        logger.error("Table %s not found in sheet %s, available tables: %s",
                     name, sheet, ", ".join(list_table_names(rows)))
        raise TableNotFoundError(f"Table {name} not found in sheet {sheet}")
    end = find_table_end(rows, start)
    logger.debug("Table %s spans rows %d to %d of sheet %s", rows[start][0], start, end - 1, sheet)
    return TableLocation(rows[start][0], start, end)


class SheetTables():
    """
    The table operations against the live spreadsheet.  Each call reads the
    whole sheet and scans it, there is no caching and no locking, so two
    writers adding rows to the same sheet at once can interleave.
    """
    def __init__(self, spreadsheet: GoogleSpreadSheet) -> None:
        self._spreadsheet = spreadsheet

    @property
    def spreadsheet(self) -> GoogleSpreadSheet:
        return self._spreadsheet

    def _sheet_rows(self, sheet: str) -> list[list[str]]:
        rows = self._spreadsheet.getSheetData(sheet)
        if not rows:
            logger.error("Sheet %s is empty or does not exist", sheet)
            raise SheetNotFoundError(f"Sheet {sheet} is empty or does not exist")
        return rows

    def locate(self, sheet: str, name: str) -> tuple[TableLocation, list[list[str]]]:
        """Find a table, returning its location and the rows it was found in."""
        rows = self._sheet_rows(sheet)
        return locate_table(rows, name, sheet), rows

    def listTables(self, sheet: str) -> list[str]:
        return list_table_names(self._spreadsheet.getSheetData(sheet))

    def createTable(self, sheet: str, name: str, headers: list[str],
                    settings: list|None = None) -> AppendValuesResponse:
        """
        Append a new table at the bottom of the sheet.  Fails if any row of
        the sheet already starts with the name.
        """
        rows = self._spreadsheet.getSheetData(sheet)
        if any(row and row[0] == name for row in rows):
            raise TableExistsError(f"Table {name} already exists in sheet {sheet}")
        values = [[name], list(headers)]
        if settings is not None:
            values.append(list(settings))
        logger.info("Creating table %s in sheet %s", name, sheet)
        return self._spreadsheet.appendToSheet(sheet, values)

    def getTableData(self, sheet: str, name: str) -> list[list[str]]:
        """
        The table's rows, header row first, then the settings row and the data.
        """
        location, rows = self.locate(sheet, name)
        return location.rows_of(rows)

    def addToTable(self, sheet: str, name: str, row: list) -> GoogleSheetsUpdateRequestResponse:
        """
        Insert a data row directly below the settings row.  The insert and the
        write of the values go in one batchUpdate.
        """
        location, _ = self.locate(sheet, name)
        target = self._spreadsheet.getSheet(sheet)
        position = location.insert_position
        logger.debug("Inserting into table %s of sheet %s at row %d", location.name, sheet, position)
        return (target.updateRequests()
                .insertDimension(position, 1, "ROWS", inheritFromBefore=False)
                .updateCells(position, [["" if v is None else v for v in row]])
                .execute())

    def deleteTable(self, sheet: str, name: str) -> GoogleSheetsUpdateRequestResponse:
        """
        Remove every row of the table, marker included.  Unlike the other
        lookups the name has to match exactly.
        """
        rows = self._sheet_rows(sheet)
        start = next((i for i, r in enumerate(rows) if is_marker_row(r) and r[0] == name), -1)
        if start < 0:
            raise TableNotFoundError(f"Table {name} not found in sheet {sheet}")
        end = find_table_end(rows, start)
        target = self._spreadsheet.getSheet(sheet)
        logger.info("Deleting table %s (rows %d-%d) from sheet %s", name, start, end - 1, sheet)
        return target.updateRequests().deleteDimension(start, end, "ROWS").execute()

    def updateTableRow(self, sheet: str, name: str, offset: int, values: list) -> UpdateValuesResponse:
        """
        Overwrite a row addressed relative to the table's marker row,
        offset 2 being the settings row.
        """
        location, _ = self.locate(sheet, name)
        row_index = location.start + offset
        if offset < 1 or row_index >= location.end:
            raise IndexError(f"Row offset {offset} is outside table {location.name}")
        return self._spreadsheet.updateRow(sheet, row_index, values)
