"""
Class implementations of the sheets resources the service reads and writes.
As these are just logical groupings of data fields we use dataclasses
to implement.  dataclasses.asdict() gives the dict the client wants but
there is no inverse, so resources with nested resources convert their
dict fields in fixup() which runs from __post_init__.
Only the resources actually needed are modelled.
"""
from dataclasses import dataclass, field, asdict
from typing import List

from ..resources import SheetsResourceBase


class GoogleSheetsEnum():
    """
    An 'enum' in the sheets client is just a string so this is
    just to translate and validate input.
    """
    _VALID_VALUE_RENDER_OPTIONS = {
        "FORMATTED": "FORMATTED_VALUE",
        "FORMATTED_VALUE": "FORMATTED_VALUE",
        "UNFORMATTED": "UNFORMATTED_VALUE",
        "UNFORMATTED_VALUE": "UNFORMATTED_VALUE",
        "FORMULA": "FORMULA"
    }
    _VALID_DIMENSION_OPTIONS = {
        "ROWS": "ROWS",
        "ROW": "ROWS",
        "R": "ROWS",
        "C": "COLUMNS",
        "COLS": "COLUMNS",
        "COLUMNS": "COLUMNS"
    }
    _VALID_VALUE_INPUT_OPTIONS = {
        "RAW": "RAW",
        "USER": "USER_ENTERED",
        "USER_ENTERED": "USER_ENTERED"
    }
    _VALID_INSERT_DATA_OPTIONS = {
        "OVERWRITE": "OVERWRITE",
        "INSERT_ROWS": "INSERT_ROWS",
        "INSERT": "INSERT_ROWS"
    }

    @classmethod
    def valueRenderOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/ValueRenderOption"""
        return cls._VALID_VALUE_RENDER_OPTIONS.get(str(option).upper(), "")

    @classmethod
    def dimension(cls, dim: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/Dimension"""
        return cls._VALID_DIMENSION_OPTIONS.get(str(dim).upper(), "")

    @classmethod
    def valueInputOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/ValueInputOption"""
        return cls._VALID_VALUE_INPUT_OPTIONS.get(str(option).upper(), "")

    @classmethod
    def insertDataOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append#InsertDataOption"""
        return cls._VALID_INSERT_DATA_OPTIONS.get(str(option).upper(), "")


@dataclass
class SpreadsheetProperties(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#SpreadsheetProperties
    """
    title: str = field(default="")
    locale: str = field(default="")
    timeZone: str = field(default="")

    def __bool__(self) -> bool:
        return bool(self.title)


@dataclass
class GridProperties(SheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int = field(default=-1)
    columnCount: int = field(default=-1)
    frozenRowCount: int = field(default=0)
    frozenColumnCount: int = field(default=0)

    def __bool__(self) -> bool:
        return self.rowCount >= 0 and self.columnCount >= 0


@dataclass
class SheetProperties(SheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int|None = field(default=None)
    title: str = field(default="")
    index: int = field(default=-1)
    sheetType: str = field(default="GRID")
    gridProperties: GridProperties|dict = field(default_factory=dict)
    hidden: bool = field(default=False)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if not isinstance(self.gridProperties, GridProperties):
            self.gridProperties = GridProperties.from_response(self.gridProperties)

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['gridProperties'] = self.gridProperties.to_base()
        return b

    def __bool__(self) -> bool:
        """
        Valid when it has an ID and a title.  Note sheet ID 0 is the
        first sheet of every spreadsheet and perfectly valid.
        """
        return self.sheetId is not None and self.sheetId >= 0 and bool(self.title)

    def __str__(self) -> str:
        if self:
            return f"{self.title}({self.sheetId}[{self.index}])"
        return "<invalid sheet>"


@dataclass
class Sheet(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheet
    Representation of a sheet within a spreadsheet, properties only.
    """
    properties: SheetProperties|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if not isinstance(self.properties, SheetProperties):
            self.properties = SheetProperties.from_response(self.properties)

    def to_base(self) -> dict:
        self.fixup()
        return {'properties': self.properties.to_base()}

    def __bool__(self) -> bool:
        return bool(self.properties)

    def __str__(self) -> str:
        return str(self.properties)


@dataclass
class Spreadsheet(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#resource:-spreadsheet
    """
    spreadsheetId: str = field(default="")
    properties: SpreadsheetProperties|dict = field(default_factory=dict)
    sheets: List[Sheet|dict] = field(default_factory=list)
    spreadsheetUrl: str = field(default="")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if not isinstance(self.properties, SpreadsheetProperties):
            self.properties = SpreadsheetProperties.from_response(self.properties)
        self.sheets = [s if isinstance(s, Sheet) else Sheet.from_response(s) for s in self.sheets]

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['properties'] = self.properties.to_base()
        b['sheets'] = [s.to_base() for s in self.sheets]
        return b

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def __str__(self) -> str:
        if not self.spreadsheetId:
            return 'unconnected'
        titles = ','.join(str(s) for s in self.sheets)
        return f"{self.properties.title or self.spreadsheetId}[{titles}]"


@dataclass
class DimensionRange(SheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/DimensionRange"""
    sheetId: int = field(default=-1)
    dimension: str = field(default="")
    startIndex: int|None = field(default=None)
    endIndex: int|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if self.dimension:
            d = str(self.dimension)
            self.dimension = GoogleSheetsEnum.dimension(d)
            if not self.dimension:
                raise ValueError(f"Invalid dimension value: {d}")

    def to_base(self) -> dict:
        self.fixup()
        b = {'sheetId': self.sheetId, 'dimension': self.dimension}
        # open ended bounds are left out rather than sent as null
        if self.startIndex is not None:
            b['startIndex'] = self.startIndex
        if self.endIndex is not None:
            b['endIndex'] = self.endIndex
        return b

    def __bool__(self) -> bool:
        return self.sheetId >= 0 and bool(self.dimension)


@dataclass
class GridCoordinate(SheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#gridcoordinate"""
    sheetId: int = field(default=0)
    rowIndex: int = field(default=0)
    columnIndex: int = field(default=0)


@dataclass
class CellData(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#celldata
    Only the user entered value, and only as a string since that is how
    every value in this spreadsheet is stored.
    """
    stringValue: str = field(default="")

    @classmethod
    def from_value(cls, value) -> "CellData":
        return cls("" if value is None else str(value))

    def to_base(self) -> dict:
        return {'userEnteredValue': {'stringValue': self.stringValue}}


@dataclass
class RowData(SheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#rowdata"""
    values: List[CellData] = field(default_factory=list)

    @classmethod
    def from_values(cls, values: list) -> "RowData":
        return cls([CellData.from_value(v) for v in values])

    def to_base(self) -> dict:
        return {'values': [c.to_base() for c in self.values]}


@dataclass
class ValueRange(SheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values#resource:-valuerange"""
    range: str = field(default="")
    majorDimension: str = field(default="ROWS")
    values: list[list] = field(default_factory=list)

    def __post_init__(self):
        self.fixup()

    def fixup(self) -> None:
        if self.majorDimension:
            self.majorDimension = GoogleSheetsEnum.dimension(str(self.majorDimension))
        # the API omits 'values' entirely for an empty range and may hand back null
        self.values = [list(r) for r in (self.values or [])]

    def __bool__(self) -> bool:
        return bool(self.range) and bool(self.majorDimension)

    @property
    def rows(self) -> list[list[str]]:
        """Values with every cell as a string, the way the tables are scanned."""
        return [["" if v is None else str(v) for v in r] for r in self.values]


@dataclass
class UpdateValuesResponse(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/UpdateValuesResponse
    """
    spreadsheetId: str = field(default="")
    updatedRange: str = field(default="")
    updatedRows: int = field(default=0)
    updatedColumns: int = field(default=0)
    updatedCells: int = field(default=0)
    updatedData: ValueRange|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if not isinstance(self.updatedData, ValueRange):
            self.updatedData = ValueRange.from_response(self.updatedData)

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId) and bool(self.updatedRange)

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['updatedData'] = self.updatedData.to_base()
        return b


@dataclass
class AppendValuesResponse(SheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append#response-body
    """
    spreadsheetId: str = field(default="")
    tableRange: str = field(default="")
    updates: UpdateValuesResponse|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if not isinstance(self.updates, UpdateValuesResponse):
            self.updates = UpdateValuesResponse.from_response(self.updates)

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['updates'] = self.updates.to_base()
        return b
