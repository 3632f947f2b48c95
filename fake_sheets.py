"""
fake_sheets.py — In-memory stand-in for the Sheets API spreadsheets() resource.
Used by the tests; supports get, getByDataFilter and batchUpdate with
addSheet / updateCells / appendCells requests.
"""

from unittest.mock import MagicMock

from googleapiclient.errors import HttpError


def http_error(status: int = 500, reason: str = "backend error") -> HttpError:
    return HttpError(MagicMock(status=status, reason=reason), reason.encode("utf-8"))


class _Request:
    def __init__(self, fn):
        self._fn = fn

    def execute(self):
        return self._fn()


class FakeSpreadsheets:
    """Tabs are dicts: {"id", "title", "rows"}; rows are lists of cell dicts or None."""

    def __init__(self, tabs=None):
        self.tabs = []
        self.calls = []
        self.fail = {}
        self._next_id = 1000
        for title, tab_id, values in tabs or [("Sheet1", 0, [])]:
            self.add_tab(title, tab_id, values)

    # ── helpers ──
    def add_tab(self, title, tab_id=None, values=None):
        if tab_id is None:
            tab_id = self._next_id
            self._next_id += 1
        rows = [[{"value": str(v), "format": None} for v in row] for row in values or []]
        tab = {"id": tab_id, "title": title, "rows": rows}
        self.tabs.append(tab)
        return tab

    def tab(self, title):
        for t in self.tabs:
            if t["title"] == title:
                return t
        return None

    def values(self, title):
        """Plain cell values of a tab, row by row."""
        return [[c["value"] if c else "" for c in row] for row in self.tab(title)["rows"]]

    def requests_of(self, kind):
        out = []
        for method, kwargs in self.calls:
            if method == "batchUpdate":
                out.extend(r[kind] for r in kwargs["body"]["requests"] if kind in r)
        return out

    def _call(self, method, kwargs, fn):
        self.calls.append((method, kwargs))
        if method in self.fail:
            exc = self.fail[method]

            def raise_it():
                raise exc
            return _Request(raise_it)
        return _Request(fn)

    # ── API surface ──
    def get(self, spreadsheetId, **kwargs):
        def run():
            return {
                "spreadsheetId": spreadsheetId,
                "sheets": [
                    {"properties": {"sheetId": t["id"], "title": t["title"], "index": i}}
                    for i, t in enumerate(self.tabs)
                ],
            }
        return self._call("get", {"spreadsheetId": spreadsheetId, **kwargs}, run)

    def getByDataFilter(self, spreadsheetId, body):
        def run():
            sheets = []
            for i, t in enumerate(self.tabs):
                grid = {}
                if t["rows"]:
                    grid["rowData"] = [
                        {"values": [
                            {"formattedValue": c["value"],
                             "userEnteredValue": {"stringValue": c["value"]},
                             **({"userEnteredFormat": c["format"]} if c["format"] else {})}
                            if c else {}
                            for c in row
                        ]} if row else {}
                        for row in t["rows"]
                    ]
                sheets.append({
                    "properties": {"sheetId": t["id"], "title": t["title"], "index": i},
                    "data": [grid],
                })
            return {"spreadsheetId": spreadsheetId, "sheets": sheets}
        return self._call("getByDataFilter", {"spreadsheetId": spreadsheetId, "body": body}, run)

    def batchUpdate(self, spreadsheetId, body):
        def run():
            replies = []
            for req in body["requests"]:
                if "addSheet" in req:
                    title = req["addSheet"]["properties"]["title"]
                    if self.tab(title):
                        raise http_error(400, f'A sheet with the name "{title}" already exists.')
                    tab = self.add_tab(title)
                    replies.append({"addSheet": {"properties": {"sheetId": tab["id"], "title": title}}})
                elif "updateCells" in req:
                    self._update_cells(req["updateCells"])
                    replies.append({})
                elif "appendCells" in req:
                    self._append_cells(req["appendCells"])
                    replies.append({})
                else:
                    raise http_error(400, f"unsupported request {list(req)}")
            return {"spreadsheetId": spreadsheetId, "replies": replies}
        return self._call("batchUpdate", {"spreadsheetId": spreadsheetId, "body": body}, run)

    def _by_id(self, tab_id):
        for t in self.tabs:
            if t["id"] == tab_id:
                return t
        raise http_error(400, f"No grid with id: {tab_id}")

    @staticmethod
    def _cell(cell):
        return {
            "value": cell["userEnteredValue"]["stringValue"],
            "format": cell.get("userEnteredFormat"),
        }

    def _update_cells(self, req):
        start = req["start"]
        tab = self._by_id(start["sheetId"])
        for i, row in enumerate(req["rows"]):
            r = start["rowIndex"] + i
            while len(tab["rows"]) <= r:
                tab["rows"].append([])
            for j, cell in enumerate(row["values"]):
                c = start["columnIndex"] + j
                target = tab["rows"][r]
                while len(target) <= c:
                    target.append(None)
                target[c] = self._cell(cell)

    def _append_cells(self, req):
        tab = self._by_id(req["sheetId"])
        for row in req["rows"]:
            tab["rows"].append([self._cell(cell) for cell in row["values"]])
