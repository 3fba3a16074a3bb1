import re

from typing import Self

# can address up to 'ZZZ'
GoogleSheetsMaxColumns = 18278


def quote_sheet(title: str) -> str:
    """
    Quote a sheet title for use in A1 notation.
    Titles that are a plain identifier can go bare, anything else (spaces,
    punctuation, a leading digit) must be wrapped in single quotes with any
    embedded single quote doubled.
    """
    t = str(title)
    # bare titles that could be read as an A1 or R1C1 reference need quotes too
    if (re.match(r"^[A-Za-z_][A-Za-z0-9_]*$", t) and not re.match(r"^[A-Za-z]{1,3}\d*$", t)
            and not re.match(r"^[Rr]\d+[Cc]\d+$", t)):
        return t
    return "'" + t.replace("'", "''") + "'"


def unquote_sheet(title: str) -> str:
    """Inverse of quote_sheet()."""
    t = str(title)
    if len(t) >= 2 and t[0] == "'" and t[-1] == "'":
        return t[1:-1].replace("''", "'")
    return t


class GoogleSheetsA1Notation():
    """
    Class representation of a Google Sheets A1 cell range notation.
    See https://developers.google.com/sheets/api/guides/concepts#cell
    A general A1 has the form:

    <sheet>!<start col><start row>:<end col><end row>

        All rows are integers, and are 1 based.
        All cols are alphabetical A-ZZZ.
        Start/end cols/rows may not be present, which means 'unbounded':
            Sheet1          all cells of the sheet
            Sheet1!A:B      all rows in columns A and B
            Sheet1!1:6      all cols of rows 1 through 6
            Sheet1!C2:S     cols C through S from row 2 to the end
            Sheet1!A45      the single cell A45
        sheet:  The sheet title.  When it is not a plain identifier it is quoted
                with single quotes, 'Acme Corp'!A1.  May be absent, meaning the
                first sheet.

    Because indexing is 1-based a value of 0 (or '' for a column) signals 'unbounded'.
    """
    _A1REGEXSTR = (r"^\s*((?P<sheet>[A-Za-z_]\w*|'(?:[^']|'')+')!)?"
                   r"(?P<start_col>[A-Z]{0,3})(?P<start_row>\d*)"
                   r"(?P<tail>:(?P<end_col>[A-Z]{0,3})(?P<end_row>\d*))?\s*$")
    _A1COLREGEXSTR = r"^[A-Z]{1,3}$"
    _A1SHEETREGEXSTR = r"^\s*([A-Za-z_]\w*|'(?:[^']|'')+')\s*$"
    _A1RANGEREGEXSTR = r"^[A-Z]{0,3}\d*(:[A-Z]{0,3}\d*)?$"

    _a1_re = re.compile(_A1REGEXSTR)
    _a1_range_re = re.compile(_A1RANGEREGEXSTR)
    _a1_col_re = re.compile(_A1COLREGEXSTR)
    _a1_sheet_re = re.compile(_A1SHEETREGEXSTR)

    def __init__(self, a1: str = ""):
        self.reset()
        if a1:
            self.set_a1(a1)

    def __str__(self) -> str:
        if self._a1:
            return self._a1
        return "<invalid>"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    def __eq__(self, value: object) -> bool:
        """Equal if the A1 strings match exactly"""
        if isinstance(value, GoogleSheetsA1Notation):
            return self._a1 == value.a1
        return self._a1 == value

    def __hash__(self) -> int:
        return hash(self._a1)

    def __iadd__(self, rows: int) -> Self:
        """Self += X means appending X rows to the end"""
        self.append_rows(rows)
        return self

    def __isub__(self, rows: int) -> Self:
        """Self -= X means reducing X rows from the end"""
        self.reduce_rows(rows)
        return self

    def valid(self) -> bool:
        """If the A1 is present its been validated"""
        return bool(self._a1)

    def __bool__(self) -> bool:
        return self.valid()

    def __len__(self) -> int:
        """
        Number of cells in a bounded range.  Unbounded ranges can't be sized
        without knowing the sheet dimensions so those are 0.
        """
        if self.bounded:
            return self.num_rows * self.num_cols
        return 0

    def __contains__(self, value: str|Self) -> bool:
        return self.contains(value)

    def reset(self) -> None:
        """
        Empty _a1 means invalid.
        Empty/0 cols/rows means unbounded (assuming _a1 is valid)
        """
        self._a1 = ""
        self._sheet = ""
        self._start_col = ""
        self._end_col = ""
        self._start_row = 0
        self._end_row = 0

    @classmethod
    def col_to_int(cls, column: str) -> int:
        """
        Convert a column label A-ZZZ to its 1-based index, 'A' -> 1.
        Returns 0 for an invalid label.
        """
        c = str(column).upper()
        num = 0
        if cls._a1_col_re.match(c):
            for ch in c:
                num = num * 26 + (ord(ch) - 64)
        return num

    @classmethod
    def int_to_col(cls, index: int) -> str:
        """
        Translate a 1-based column index to its label A-ZZZ.
        Returns an empty string for an index out of range.
        """
        i = int(index)
        if i < 1 or i > GoogleSheetsMaxColumns:
            return ""
        col = ""
        while i:
            i, r = divmod(i - 1, 26)
            col = chr(r + 65) + col
        return col

    @classmethod
    def generate_a1(cls, sheet: str = "",
                    start_col: str|int = "", start_row: int = 0,
                    end_col: str|int = "", end_row: int = 0) -> str:
        """
        Generate the A1 string from its parts.
        sheet:      Sheet title, quoted as needed.  Can be empty.
        start_col:  int index or label, empty or 0 means unbounded.
        start_row:  1-based row, 0 means unbounded.
        end_col:    int index or label, empty or 0 means unbounded.
        end_row:    1-based row, 0 means unbounded.

        returns:    A1 string or empty string if the parts are not valid.
        """
        sc = cls.int_to_col(start_col) if isinstance(start_col, int) and start_col else str(start_col or "")
        ec = cls.int_to_col(end_col) if isinstance(end_col, int) and end_col else str(end_col or "")
        sr = int(start_row or 0)
        er = int(end_row or 0)
        if (sc and not cls._a1_col_re.match(sc)) or (ec and not cls._a1_col_re.match(ec)):
            return ""
        if sr < 0 or er < 0:
            return ""
        title = ""
        if sheet:
            s = str(sheet)
            # already quoted titles pass through untouched
            title = s if (len(s) >= 2 and s[0] == "'" and s[-1] == "'") else quote_sheet(s)
        start = f"{sc}{sr if sr else ''}"
        end = f"{ec}{er if er else ''}"
        if not start and not end:
            return title
        if not start:
            return ""
        rng = start if not end or (end == start and sr) else f"{start}:{end}"
        return f"{title}!{rng}" if title else rng

    @classmethod
    def extract_a1(cls, a1: str) -> tuple[str, str, int, str, int]:
        """
        Split an A1 string into (sheet, start col, start row, end col, end row).
        The sheet is returned unquoted.  Any part that is absent comes back
        empty or 0.  A single cell like A5 is returned as A5:A5.
        Returns None if the string is not A1 at all.
        """
        s = str(a1).strip()
        if '!' not in s and not cls._a1_range_re.match(s) and cls._a1_sheet_re.match(s):
            # just a sheet title, which means every cell of it
            return (unquote_sheet(s), "", 0, "", 0)
        if s.endswith('!'):
            return None
        m = cls._a1_re.match(s)
        if not m:
            return None
        sheet = unquote_sheet(m.group('sheet')) if m.group('sheet') else ""
        sc = m.group('start_col') or ""
        sr = int(m.group('start_row')) if m.group('start_row') else 0
        ec = m.group('end_col') or ""
        er = int(m.group('end_row')) if m.group('end_row') else 0
        if m.group('tail') is None and sc and sr:
            ec, er = sc, sr
        return (sheet, sc, sr, ec, er)

    @classmethod
    def valid_dimensions(cls, dims: tuple[str, str, int, str, int]|None, has_colon: bool = True) -> bool:
        """
        Validity of extracted parts: something must be present, there can't
        be an end without a start, and columns must be increasing.
        Rows do not need to be, A5:B2 is accepted by the API.
        """
        if dims is None:
            return False
        sheet, sc, sr, ec, er = dims
        if not sc and not sr:
            return bool(sheet) and not (ec or er) and not has_colon
        if (sc and not ec and not er) or (sr and not sc and not ec and not er):
            # 'A' or '5' alone is not a range
            return has_colon
        if sc and ec:
            return cls.col_to_int(ec) >= cls.col_to_int(sc)
        return True

    @classmethod
    def cell(cls, sheet: str, col: str|int, row: int) -> Self:
        """A1 for a single cell, row is 1-based."""
        c = cls.int_to_col(col) if isinstance(col, int) else str(col)
        return cls(cls.generate_a1(sheet, c, row, c, row))

    @classmethod
    def row_range(cls, sheet: str, start_row: int, end_row: int|None = None) -> Self:
        """
        A1 for whole rows starting at column A, open ended to the right.
        end_row defaults to start_row.
        """
        er = start_row if end_row is None else end_row
        return cls(f"{cls.generate_a1(sheet)}!A{int(start_row)}:{int(er)}" if sheet else f"A{int(start_row)}:{int(er)}")

    def set_a1(self, a1: str) -> bool:
        """
        Set the internal state to the supplied A1 string.
        return: True if successful, False if a1 is invalid.
        """
        dims = self.extract_a1(a1)
        if not self.valid_dimensions(dims, ':' in str(a1).split('!')[-1]):
            return False
        sheet, sc, sr, ec, er = dims
        self._a1 = str(a1).strip()
        self._sheet = sheet
        self._start_col = sc
        self._start_row = sr
        self._end_col = ec
        self._end_row = er
        return True

    def update(self, sheet: str|None = None,
               start_col: str|int|None = None, start_row: int|None = None,
               end_col: str|int|None = None, end_row: int|None = None) -> bool:
        """
        Update parts of the current A1.  None means leave that part alone.
        return: True if the result is valid and has been applied.
        """
        s = self._sheet if sheet is None else str(sheet)
        sc = self._start_col if start_col is None else start_col
        ec = self._end_col if end_col is None else end_col
        sr = self._start_row if start_row is None else int(start_row)
        er = self._end_row if end_row is None else int(end_row)
        a1 = self.generate_a1(s, sc, sr, ec, er)
        return self.set_a1(a1) if a1 else False

    @property
    def a1(self) -> str:
        """Current A1 string, if empty the object is invalid"""
        return self._a1

    @a1.setter
    def a1(self, value: str) -> None:
        if not self.set_a1(value):
            raise ValueError(f"invalid A1 notation: {value}")

    @property
    def sheet(self) -> str:
        """Unquoted sheet title, empty means the first sheet"""
        return self._sheet

    @sheet.setter
    def sheet(self, value: str) -> None:
        if not self.update(sheet=value):
            raise ValueError(f"invalid sheet title for A1: {value}")

    @property
    def start_col(self) -> str:
        return self._start_col

    @property
    def end_col(self) -> str:
        return self._end_col

    @property
    def start_col_int(self) -> int:
        return self.col_to_int(self._start_col) if self._start_col else 0

    @property
    def end_col_int(self) -> int:
        return self.col_to_int(self._end_col) if self._end_col else 0

    @property
    def start_row(self) -> int:
        return self._start_row

    @property
    def end_row(self) -> int:
        return self._end_row

    @property
    def rows_bounded(self) -> bool:
        return bool(self._start_row) and bool(self._end_row)

    @property
    def cols_bounded(self) -> bool:
        return bool(self._start_col) and bool(self._end_col)

    @property
    def bounded(self) -> bool:
        return self.rows_bounded and self.cols_bounded

    @property
    def num_rows(self) -> int:
        """Inclusive row count, 0 when unbounded"""
        return abs(self._end_row - self._start_row) + 1 if self.rows_bounded else 0

    @property
    def num_cols(self) -> int:
        """Inclusive column count, 0 when unbounded"""
        return self.end_col_int - self.start_col_int + 1 if self.cols_bounded else 0

    def contains(self, a1: str|Self) -> bool:
        """
        Does the supplied range sit completely inside this one?
        Both must be valid and on the same sheet.  An unbounded dimension
        of this range contains anything in that dimension.
        """
        a = a1 if isinstance(a1, GoogleSheetsA1Notation) else GoogleSheetsA1Notation(str(a1))
        if not (a and self._a1) or a.sheet != self._sheet:
            return False
        if self.rows_bounded:
            if not a.rows_bounded:
                return False
            lo, hi = sorted((self._start_row, self._end_row))
            alo, ahi = sorted((a.start_row, a.end_row))
            if alo < lo or ahi > hi:
                return False
        if self.cols_bounded:
            if not a.cols_bounded:
                return False
            if a.start_col_int < self.start_col_int or a.end_col_int > self.end_col_int:
                return False
        return True

    def append_rows(self, rows: int) -> bool:
        """
        Grow (or with a negative count shrink) the range by rows at the end.
        return: False when that would take the end row below 1.
        """
        if self.rows_bounded and rows:
            new_end_row = self._end_row + rows
            return self.update(end_row=new_end_row) if new_end_row > 0 else False
        return True

    def reduce_rows(self, rows: int) -> bool:
        return self.append_rows(-rows)
