import pytest

from eventsheets.errors import SheetNotFoundError, ServiceUnavailableError
from eventsheets.sheets import ops
from eventsheets.sheets import (AddSheetRequest, DeleteDimensionRequest, InsertDimensionRequest,
                                UpdateCellsRequest, UpdateSheetPropertiesRequest, GoogleSheetsUpdateRequest,
                                GridCoordinate, RowData, SheetProperties, ValueRange, GoogleSheetsEnum,
                                Spreadsheet)

def test_enums():
    assert(GoogleSheetsEnum.dimension("rows") == "ROWS")
    assert(GoogleSheetsEnum.dimension("cols") == "COLUMNS")
    assert(GoogleSheetsEnum.dimension("diagonal") == "")
    assert(GoogleSheetsEnum.valueInputOption("user") == "USER_ENTERED")
    assert(GoogleSheetsEnum.valueRenderOption("formatted") == "FORMATTED_VALUE")
    assert(GoogleSheetsEnum.insertDataOption("insert") == "INSERT_ROWS")

def test_request_keys():
    assert(AddSheetRequest("Acme Corp").to_request() == {"addSheet": {"properties": {"title": "Acme Corp"}}})
    assert(UpdateSheetPropertiesRequest(3, "Initech").to_request() ==
           {"updateSheetProperties": {"properties": {"sheetId": 3, "title": "Initech"}, "fields": "title"}})

def test_dimension_requests():
    insert = InsertDimensionRequest(5, "rows", 3, 4).to_request()
    assert(insert == {"insertDimension": {"range": {"sheetId": 5, "dimension": "ROWS",
                                                    "startIndex": 3, "endIndex": 4},
                                          "inheritFromBefore": False}})
    # open ended, through the end of the sheet
    delete = DeleteDimensionRequest(0, "ROWS", 2).to_request()
    assert(delete == {"deleteDimension": {"range": {"sheetId": 0, "dimension": "ROWS", "startIndex": 2}}})

    with pytest.raises(ValueError):
        DeleteDimensionRequest(0, "sideways", 2)

def test_update_cells_request():
    request = UpdateCellsRequest(GridCoordinate(1, 3, 0), [RowData.from_values(["a", None, 3])])
    assert(request.to_request() == {"updateCells": {
        "start": {"sheetId": 1, "rowIndex": 3, "columnIndex": 0},
        "rows": [{"values": [{"userEnteredValue": {"stringValue": "a"}},
                             {"userEnteredValue": {"stringValue": ""}},
                             {"userEnteredValue": {"stringValue": "3"}}]}],
        "fields": "userEnteredValue"}})

    body = GoogleSheetsUpdateRequest([AddSheetRequest("x"), {"raw": {}}]).to_base()
    assert(body["requests"] == [{"addSheet": {"properties": {"title": "x"}}}, {"raw": {}}])
    assert(body["includeSpreadsheetInResponse"] is False)

def test_resources():
    # sheet 0 is the first sheet of every spreadsheet
    assert(SheetProperties(sheetId=0, title="companies"))
    assert(not SheetProperties(title="companies"))
    assert(not SheetProperties(sheetId=0))

    vr = ValueRange.from_response({"range": "companies", "majorDimension": "ROWS"})
    assert(vr.rows == [])
    vr = ValueRange.from_response({"range": "x", "values": [["a", 1, None]], "unknownField": 1})
    assert(vr.rows == [["a", "1", ""]])

    ss = Spreadsheet.from_response({"spreadsheetId": "abc",
                                    "sheets": [{"properties": {"sheetId": 0, "title": "companies"}}]})
    assert(ss.sheets[0].properties.title == "companies")
    assert(ss.to_base()["sheets"][0]["properties"]["sheetId"] == 0)

def test_no_service(monkeypatch):
    monkeypatch.setattr(ops, "_get_service", lambda: None)
    with pytest.raises(ServiceUnavailableError):
        ops.get("abc")

def test_spreadsheet_sheets(populated, spreadsheet):
    sheets = spreadsheet.getAllSheets()
    assert([s.title for s in sheets] == ["companies", "Acme Corp", "Globex"])
    assert(len(spreadsheet) == 3)
    assert("Acme Corp" in spreadsheet)
    assert(0 in spreadsheet)
    assert("Initech" not in spreadsheet)
    assert(spreadsheet["Globex"].sheet_id == 2)
    assert(spreadsheet.title == "Events")
    with pytest.raises(SheetNotFoundError):
        spreadsheet["Initech"]
    with pytest.raises(SheetNotFoundError):
        spreadsheet.getSheet("Initech")

def test_spreadsheet_values(populated, spreadsheet):
    rows = spreadsheet.getSheetData("companies")
    assert(rows[1][1] == "Acme Corp")

    spreadsheet.appendToSheet("companies", [["c3", "Initech"]])
    assert(populated.rows("companies")[-1] == ["c3", "Initech"])
    _, a1, body = populated.calls[-1]
    assert(a1 == "companies")

    spreadsheet.updateRow("companies", 3, ["c3", "Initech", "it@initech.test"])
    assert(populated.rows("companies")[3] == ["c3", "Initech", "it@initech.test"])

    spreadsheet.deleteRow("companies", 3)
    assert(len(populated.rows("companies")) == 3)

def test_spreadsheet_structure(fake_service, spreadsheet):
    spreadsheet.createSheet("Acme Corp")
    assert("Acme Corp" in spreadsheet)
    assert(fake_service.rows("Acme Corp") == [])

    spreadsheet.renameSheet("Acme Corp", "Acme Inc")
    assert("Acme Inc" in spreadsheet)
    assert("Acme Corp" not in spreadsheet)

def test_update_chain(populated, spreadsheet):
    sheet = spreadsheet.getSheet("Acme Corp")
    calls = len(populated.calls)
    chain = sheet.updateRequests()
    # nothing queued, nothing sent
    response = chain.execute()
    assert(response.spreadsheetId == spreadsheet.id)
    assert(len(populated.calls) == calls)

    chain.deleteDimension(4, 4).insertDimension(2, 0).updateCells(0, [])
    assert(len(chain) == 0)
    with pytest.raises(ValueError):
        chain.insertDimension(-1)
    with pytest.raises(ValueError):
        chain.insertDimension(1, 1, "sideways")
    with pytest.raises(ValueError):
        chain.rename("")
