from functools import partial
import logging

from googleapiclient.errors import HttpError

from .resources import (GoogleSheetsEnum, Spreadsheet, ValueRange,
                        AppendValuesResponse, UpdateValuesResponse)
from .requests import GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestResponse
from .a1 import GoogleSheetsA1Notation
from ..access import gws
from ..errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

# module level rather than a class instance, it achieves the same thing
_get_service = partial(gws.get_service, "sheets", "v4")


def _service():
    s = _get_service()
    if s is None:
        raise ServiceUnavailableError("Google Sheets service is not available, check the credentials")
    return s


def _value_input(option: str) -> str:
    value_input = GoogleSheetsEnum.valueInputOption(option)
    if not value_input:
        raise ValueError(f"Invalid valueInputOption value: {option}")
    return value_input


def get(spreadsheetId: str) -> Spreadsheet:
    """
    Wrapper for the spreadsheets.get() method, properties only.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
    """
    try:
        response = _service().spreadsheets().get(spreadsheetId=spreadsheetId,
                                                 includeGridData=False).execute()
    except HttpError:
        logger.exception("Error getting spreadsheet %s", spreadsheetId)
        raise
    return Spreadsheet.from_response(response) if response else Spreadsheet()


def batchUpdate(spreadsheetId: str, request: GoogleSheetsUpdateRequest|dict) -> GoogleSheetsUpdateRequestResponse:
    """
    Wrapper for the spreadsheets.batchUpdate() method.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    Structural changes: adding sheets, inserting or deleting rows, writing cells.
    """
    body = request.to_base() if isinstance(request, GoogleSheetsUpdateRequest) else request
    try:
        response = _service().spreadsheets().batchUpdate(spreadsheetId=spreadsheetId, body=body).execute()
    except HttpError:
        logger.exception("Error running batchUpdate on %s", spreadsheetId)
        raise
    if response:
        return GoogleSheetsUpdateRequestResponse.from_response(response)
    return GoogleSheetsUpdateRequestResponse()


def getValues(spreadsheetId: str,
              range: str|GoogleSheetsA1Notation,
              dimension: str = "ROWS",
              valueRenderOption: str = "FORMATTED") -> ValueRange:
    """
    Wrapper for the values.get() method.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get
    Trailing empty rows and cells are not returned by the API, and an empty
    range has no 'values' at all, which comes back here as an empty list.
    """
    dim = GoogleSheetsEnum.dimension(dimension)
    if not dim:
        raise ValueError(f"Invalid majorDimension value: {dimension}")
    value_render = GoogleSheetsEnum.valueRenderOption(valueRenderOption)
    if not value_render:
        raise ValueError(f"Invalid valueRenderOption value: {valueRenderOption}")
    try:
        r = _service().spreadsheets().values().get(spreadsheetId=spreadsheetId,
                                                   range=str(range),
                                                   majorDimension=dim,
                                                   valueRenderOption=value_render).execute()
    except HttpError:
        logger.exception("Error getting values %s from %s", range, spreadsheetId)
        raise
    return ValueRange.from_response(r or {"range": str(range)})


def appendValues(spreadsheetId: str,
                 range: str|GoogleSheetsA1Notation,
                 values: list[list],
                 valueInputOption: str = "USER",
                 insertDataOption: str = "OVERWRITE") -> AppendValuesResponse:
    """
    Wrapper for the values.append() method.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append
    The API finds the last row of data in the range and writes after it.
    """
    insert_data = GoogleSheetsEnum.insertDataOption(insertDataOption)
    if not insert_data:
        raise ValueError(f"Invalid insertDataOption value: {insertDataOption}")
    body = {"values": [list(v) for v in values]}
    try:
        r = _service().spreadsheets().values().append(spreadsheetId=spreadsheetId,
                                                      range=str(range),
                                                      valueInputOption=_value_input(valueInputOption),
                                                      insertDataOption=insert_data,
                                                      body=body).execute()
    except HttpError:
        logger.exception("Error appending values to %s in %s", range, spreadsheetId)
        raise
    return AppendValuesResponse.from_response(r) if r else AppendValuesResponse()


def updateValues(spreadsheetId: str,
                 range: str|GoogleSheetsA1Notation,
                 values: list[list],
                 valueInputOption: str = "USER") -> UpdateValuesResponse:
    """
    Wrapper for the values.update() method.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/update
    Values are written starting at the top left of the range.
    """
    body = {"range": str(range), "majorDimension": "ROWS", "values": [list(v) for v in values]}
    try:
        r = _service().spreadsheets().values().update(spreadsheetId=spreadsheetId,
                                                      range=str(range),
                                                      valueInputOption=_value_input(valueInputOption),
                                                      body=body).execute()
    except HttpError:
        logger.exception("Error updating values %s in %s", range, spreadsheetId)
        raise
    return UpdateValuesResponse.from_response(r) if r else UpdateValuesResponse()
