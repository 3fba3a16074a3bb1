"""
Classes to work with the backing Google Sheets spreadsheet
"""

from .a1 import GoogleSheetsA1Notation, GoogleSheetsMaxColumns, quote_sheet, unquote_sheet
from .resources import *
from .requests import *
from .sheet import GoogleSheet
from .spreadsheet import GoogleSpreadSheet
from .tables import (SheetTables, TableLocation, locate_table, find_table_start,
                     find_table_end, list_table_names, is_marker_row)
