import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from eventsheets.sheets import GoogleSheetsA1Notation, GoogleSpreadSheet
from eventsheets.sheets import ops
from eventsheets.events import EventService, EVENT_HEADERS, COMPANY_HEADERS

SPREADSHEET_ID = "test-spreadsheet"


def http_error(status: int, message: str) -> HttpError:
    resp = httplib2.Response({"status": str(status)})
    resp.reason = message
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(resp, content)


class _Call():
    def __init__(self, fn):
        self._fn = fn

    def execute(self):
        return self._fn()


class FakeSheetsService():
    """
    In-memory stand in for the discovery built sheets v4 service, covering
    the calls the package makes.  Like the real API it trims trailing empty
    cells and rows from values responses.
    """
    def __init__(self, spreadsheet_id: str = SPREADSHEET_ID) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.sheets = {}
        self.calls = []
        self._next_id = 0

    # setup helpers

    def add_sheet(self, title: str, rows: list[list]|None = None) -> int:
        sheet_id = self._next_id
        self._next_id += 1
        self.sheets[title] = {"sheetId": sheet_id, "index": len(self.sheets),
                              "rows": [[str(v) for v in r] for r in (rows or [])]}
        return sheet_id

    def rows(self, title: str) -> list[list[str]]:
        return self._trimmed(self.sheets[title]["rows"])

    # discovery resource chain

    def spreadsheets(self):
        return self

    def values(self):
        return _FakeValues(self)

    def get(self, spreadsheetId, includeGridData=False, **kwargs):
        self.calls.append(("get", spreadsheetId))

        def _get():
            return {
                "spreadsheetId": spreadsheetId,
                "properties": {"title": "Events", "locale": "en_US"},
                "sheets": [{"properties": {"sheetId": s["sheetId"], "title": t, "index": s["index"],
                                           "sheetType": "GRID",
                                           "gridProperties": {"rowCount": 1000, "columnCount": 26}}}
                           for t, s in self.sheets.items()],
            }
        return _Call(_get)

    def batchUpdate(self, spreadsheetId, body):
        self.calls.append(("batchUpdate", body))
        return _Call(lambda: self._apply(spreadsheetId, body))

    # internals

    @staticmethod
    def _trimmed(rows: list[list[str]]) -> list[list[str]]:
        out = []
        for r in rows:
            r = list(r)
            while r and r[-1] == "":
                r.pop()
            out.append(r)
        while out and not out[-1]:
            out.pop()
        return out

    def _sheet(self, title: str) -> dict:
        if title not in self.sheets:
            raise http_error(400, f"Unable to parse range: {title}")
        return self.sheets[title]

    def _by_id(self, sheet_id: int) -> dict:
        for s in self.sheets.values():
            if s["sheetId"] == sheet_id:
                return s
        raise http_error(400, f"No grid with id: {sheet_id}")

    def _apply(self, spreadsheetId, body):
        replies = []
        for request in body["requests"]:
            (kind, args), = request.items()
            if kind == "addSheet":
                title = args["properties"]["title"]
                if title in self.sheets:
                    raise http_error(400, f"A sheet with the name \"{title}\" already exists")
                sheet_id = self.add_sheet(title)
                replies.append({"addSheet": {"properties": {"sheetId": sheet_id, "title": title}}})
                continue
            if kind == "insertDimension":
                rng = args["range"]
                rows = self._by_id(rng["sheetId"])["rows"]
                while len(rows) < rng["startIndex"]:
                    rows.append([])
                for _ in range(rng["endIndex"] - rng["startIndex"]):
                    rows.insert(rng["startIndex"], [])
            elif kind == "updateCells":
                start = args["start"]
                rows = self._by_id(start["sheetId"])["rows"]
                for offset, row in enumerate(args["rows"]):
                    r = start["rowIndex"] + offset
                    while len(rows) <= r:
                        rows.append([])
                    cells = [c["userEnteredValue"]["stringValue"] for c in row["values"]]
                    target = rows[r]
                    while len(target) < start["columnIndex"] + len(cells):
                        target.append("")
                    target[start["columnIndex"]:start["columnIndex"] + len(cells)] = cells
            elif kind == "deleteDimension":
                rng = args["range"]
                rows = self._by_id(rng["sheetId"])["rows"]
                end = rng.get("endIndex", len(rows))
                del rows[rng["startIndex"]:end]
            elif kind == "updateSheetProperties":
                props = args["properties"]
                for title, s in list(self.sheets.items()):
                    if s["sheetId"] == props["sheetId"]:
                        self.sheets[props["title"]] = self.sheets.pop(title)
            else:
                raise http_error(400, f"Unsupported request {kind}")
            replies.append({})
        return {"spreadsheetId": spreadsheetId, "replies": replies}


class _FakeValues():
    def __init__(self, service: FakeSheetsService) -> None:
        self._service = service

    def get(self, spreadsheetId, range, majorDimension="ROWS", valueRenderOption="FORMATTED_VALUE", **kwargs):
        self._service.calls.append(("values.get", range))

        def _get():
            a1 = GoogleSheetsA1Notation(range)
            sheet = self._service._sheet(a1.sheet)
            response = {"range": range, "majorDimension": majorDimension}
            rows = self._service._trimmed(sheet["rows"])
            if rows:
                response["values"] = rows
            return response
        return _Call(_get)

    def append(self, spreadsheetId, range, valueInputOption, body, insertDataOption="OVERWRITE", **kwargs):
        self._service.calls.append(("values.append", range, body))

        def _append():
            a1 = GoogleSheetsA1Notation(range)
            sheet = self._service._sheet(a1.sheet)
            rows = sheet["rows"]
            last = len(self._service._trimmed(rows))
            del rows[last:]
            for v in body["values"]:
                rows.append([str(c) for c in v])
            return {"spreadsheetId": spreadsheetId, "tableRange": range,
                    "updates": {"spreadsheetId": spreadsheetId, "updatedRange": range,
                                "updatedRows": len(body["values"])}}
        return _Call(_append)

    def update(self, spreadsheetId, range, valueInputOption, body, **kwargs):
        self._service.calls.append(("values.update", range, body))

        def _update():
            a1 = GoogleSheetsA1Notation(range)
            sheet = self._service._sheet(a1.sheet)
            rows = sheet["rows"]
            col = a1.start_col_int - 1
            for offset, v in enumerate(body["values"]):
                r = a1.start_row - 1 + offset
                while len(rows) <= r:
                    rows.append([])
                target = rows[r]
                while len(target) < col + len(v):
                    target.append("")
                target[col:col + len(v)] = [str(c) for c in v]
            return {"spreadsheetId": spreadsheetId, "updatedRange": range,
                    "updatedRows": len(body["values"])}
        return _Call(_update)


@pytest.fixture
def fake_service(monkeypatch) -> FakeSheetsService:
    fake = FakeSheetsService()
    monkeypatch.setattr(ops, "_get_service", lambda: fake)
    return fake


@pytest.fixture
def spreadsheet(fake_service) -> GoogleSpreadSheet:
    return GoogleSpreadSheet(SPREADSHEET_ID)


def settings_row(display_name: str = "", status: str = "enabled", date: str = "2026-11-01",
                 description: str = "A day of talks", image: str = "") -> list[str]:
    row = [""] * len(EVENT_HEADERS)
    row[0] = display_name
    row[7] = date
    row[8] = image
    row[13] = description
    row[14] = status
    return row


def registration_row(name: str, phone: str, email: str) -> list[str]:
    return [name, phone, email, "female", "Engineering", "student", "29801011234567",
            "2026-10-01T10:00:00.000Z", "", "21", "Cairo University", "3", "Computers"]


def registration_data(**kwargs) -> dict:
    data = {
        "companyName": "Acme Corp",
        "eventName": "Tech Day",
        "name": "Sara Hassan",
        "phone": "01012345678",
        "email": "sara@example.com",
        "gender": "female",
        "college": "Engineering",
        "status": "student",
        "nationalId": "29901011234567",
        "age": "22",
        "university": "Cairo University",
        "level": "4",
        "faculty": "Computers",
    }
    data.update(kwargs)
    return data


@pytest.fixture
def form_data():
    """Valid registration form fields, with keyword overrides."""
    return registration_data


@pytest.fixture
def populated(fake_service) -> FakeSheetsService:
    """
    A spreadsheet with two companies.  Acme Corp has two events, the
    second one disabled, and Globex is disabled as a whole.
    """
    fake_service.add_sheet("companies", [
        COMPANY_HEADERS,
        ["c1", "Acme Corp", "hr@acme.test", "Widgets", "2026-01-01T00:00:00.000Z", "enabled"],
        ["c2", "Globex", "hr@globex.test", "", "2026-01-02T00:00:00.000Z", "disabled"],
    ])
    fake_service.add_sheet("Acme Corp", [
        ["Tech Day"],
        EVENT_HEADERS,
        settings_row("Tech Day 2026"),
        registration_row("Mona Ali", "01000000001", "mona@example.com"),
        ["Career Fair"],
        EVENT_HEADERS,
        settings_row("Career Fair", status="disabled", description="Meet employers"),
    ])
    fake_service.add_sheet("Globex", [
        ["Open Day"],
        EVENT_HEADERS,
        settings_row("Open Day"),
    ])
    return fake_service


@pytest.fixture
def event_service(populated, spreadsheet) -> EventService:
    return EventService(spreadsheet)
