"""
Tests for Google Sheets client using a mocked transport
"""

import json
import httpx
import pytest
from src.api.google_sheets_client import GoogleSheetsClient, a1_range, column_letter
from src.config.tracker_config import TrackerConfig
from src.utils.error_handler import APIError

SHEETS_METADATA = {"sheets": [{"properties": {"sheetId": 42, "title": "Tasks"}}]}


class FakeSheetsAPI:
    """Records requests and replies from a queue or a default handler"""

    def __init__(self, responses=None, metadata=None):
        self.requests = []
        self.responses = list(responses or [])
        self.metadata = metadata or SHEETS_METADATA

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, type) and issubclass(response, httpx.RequestError):
                raise response("connection lost", request=request)
            return response
        if request.method == "GET" and request.url.path.endswith("/spreadsheets/sheet-1"):
            return httpx.Response(200, json=self.metadata)
        return httpx.Response(200, json={})

    def bodies(self):
        return [json.loads(request.content) for request in self.requests if request.content]


def make_client(api):
    return GoogleSheetsClient(
        "sheet-1",
        "token-abc",
        transport=httpx.MockTransport(api),
        retry_delay=0,
    )


def test_column_letter():
    assert column_letter(0) == "A"
    assert column_letter(8) == "I"
    assert column_letter(25) == "Z"
    assert column_letter(26) == "AA"


def test_a1_range():
    assert a1_range("Tasks") == "'Tasks'"
    assert a1_range("Tasks", 0) == "'Tasks'!A1"
    assert a1_range("Bob's", 1, 2) == "'Bob''s'!C2"


@pytest.mark.asyncio
async def test_sheet_exists_sends_bearer_token():
    """Test metadata lookup and auth header"""
    api = FakeSheetsAPI()
    client = make_client(api)

    assert await client.sheet_exists("Tasks") is True
    assert await client.sheet_exists("Other") is False

    request = api.requests[0]
    assert request.headers["Authorization"] == "Bearer token-abc"
    assert request.url.params["fields"] == "sheets(properties(sheetId,title),conditionalFormats)"
    await client.close()


@pytest.mark.asyncio
async def test_create_sheet_remembers_sheet_id():
    """Test that the id from addSheet is reused for row deletion"""
    api = FakeSheetsAPI([
        httpx.Response(200, json={"replies": [{"addSheet": {"properties": {"sheetId": 7, "title": "New"}}}]}),
    ])
    client = make_client(api)

    await client.create_sheet("New")
    await client.delete_row("New", 3)

    add, delete = api.bodies()
    assert add == {"requests": [{"addSheet": {"properties": {"title": "New"}}}]}
    assert delete["requests"][0]["deleteDimension"]["range"] == {
        "sheetId": 7,
        "dimension": "ROWS",
        "startIndex": 3,
        "endIndex": 4,
    }
    assert api.requests[1].url.path.endswith(":batchUpdate")
    await client.close()


@pytest.mark.asyncio
async def test_append_rows():
    """Test append endpoint, options and body"""
    api = FakeSheetsAPI()
    client = make_client(api)

    await client.append_rows("Tasks", [[1, "Task"], [2, "Other"]])

    request = api.requests[0]
    assert request.method == "POST"
    assert request.url.path.endswith("/values/'Tasks'!A1:append")
    assert request.url.params["valueInputOption"] == "RAW"
    assert request.url.params["insertDataOption"] == "INSERT_ROWS"
    assert json.loads(request.content)["values"] == [[1, "Task"], [2, "Other"]]
    await client.close()


@pytest.mark.asyncio
async def test_set_values_and_clear():
    api = FakeSheetsAPI()
    client = make_client(api)

    await client.set_values("Tasks", 4, 2, [["Completed"]])
    await client.clear("Tasks")

    update, clear = api.requests
    assert update.method == "PUT"
    assert update.url.path.endswith("/values/'Tasks'!C5")
    assert json.loads(update.content)["values"] == [["Completed"]]
    assert clear.url.path.endswith("/values/'Tasks':clear")
    await client.close()


@pytest.mark.asyncio
async def test_get_values():
    """Test unformatted read and empty sheet"""
    api = FakeSheetsAPI([
        httpx.Response(200, json={"range": "Tasks!A1:I2", "values": [["ID"], [1.0]]}),
        httpx.Response(200, json={"range": "Tasks!A1:I1"}),
    ])
    client = make_client(api)

    assert await client.get_values("Tasks") == [["ID"], [1.0]]
    assert await client.get_values("Tasks") == []
    assert api.requests[0].url.params["valueRenderOption"] == "UNFORMATTED_VALUE"
    await client.close()


@pytest.mark.asyncio
async def test_retries_on_server_error():
    """Test that 503 is retried and then succeeds"""
    api = FakeSheetsAPI([
        httpx.Response(503, text="unavailable"),
        httpx.Response(429, text="slow down"),
        httpx.Response(200, json={"values": [["ID"]]}),
    ])
    client = make_client(api)

    assert await client.get_values("Tasks") == [["ID"]]
    assert len(api.requests) == 3
    await client.close()


@pytest.mark.asyncio
async def test_client_error_is_not_retried():
    """Test that 400 raises immediately"""
    api = FakeSheetsAPI([httpx.Response(400, json={"error": {"message": "bad range"}})])
    client = make_client(api)

    with pytest.raises(APIError) as exc_info:
        await client.append_rows("Tasks", [[1]])

    assert exc_info.value.error_code == "400"
    assert len(api.requests) == 1
    await client.close()


@pytest.mark.asyncio
async def test_retries_exhausted():
    api = FakeSheetsAPI([httpx.Response(500) for _ in range(3)])
    client = make_client(api)

    with pytest.raises(APIError) as exc_info:
        await client.get_values("Tasks")

    assert exc_info.value.error_code == "500"
    assert len(api.requests) == 3
    await client.close()


@pytest.mark.asyncio
async def test_delete_row_unknown_sheet():
    api = FakeSheetsAPI()
    client = make_client(api)

    with pytest.raises(APIError, match="not found"):
        await client.delete_row("Missing", 1)
    await client.close()


@pytest.mark.asyncio
async def test_apply_layout():
    """Test header style, frozen row, widths and dropdowns"""
    api = FakeSheetsAPI()
    config = TrackerConfig()
    client = make_client(api)

    await client.apply_layout("Tasks", config)

    body = api.bodies()[-1]
    kinds = [next(iter(request)) for request in body["requests"]]
    assert "deleteConditionalFormatRule" not in kinds
    assert kinds.count("repeatCell") == 1
    assert kinds.count("updateSheetProperties") == 1
    assert kinds.count("updateDimensionProperties") == len(config.column_widths)
    validations = [r["setDataValidation"] for r in body["requests"] if "setDataValidation" in r]
    assert [v["range"]["startColumnIndex"] for v in validations] == [2, 3, 5]
    assert [o["userEnteredValue"] for o in validations[0]["rule"]["condition"]["values"]] == list(
        config.status_options
    )
    assert validations[2]["rule"]["condition"]["type"] == "DATE_IS_VALID"
    highlights = [r["addConditionalFormatRule"] for r in body["requests"] if "addConditionalFormatRule" in r]
    assert [h["rule"]["booleanRule"]["condition"]["values"][0]["userEnteredValue"] for h in highlights] == [
        "Critical",
        "Completed",
        "Blocked",
    ]
    await client.close()


@pytest.mark.asyncio
async def test_apply_layout_again_replaces_highlights():
    """Test that a second layout removes the rules the first one added"""
    api = FakeSheetsAPI()
    config = TrackerConfig()
    client = make_client(api)

    await client.apply_layout("Tasks", config)
    api.metadata = {
        "sheets": [{
            "properties": {"sheetId": 42, "title": "Tasks"},
            "conditionalFormats": [{"ranges": [], "booleanRule": {}} for _ in range(3)],
        }]
    }
    await client.apply_layout("Tasks", config)

    requests = api.bodies()[-1]["requests"]
    assert requests[:3] == [{"deleteConditionalFormatRule": {"sheetId": 42, "index": 0}}] * 3
    kinds = [next(iter(request)) for request in requests]
    assert kinds.count("deleteConditionalFormatRule") == 3
    assert kinds.count("addConditionalFormatRule") == 3
    await client.close()


@pytest.mark.asyncio
async def test_lost_delete_response_is_not_resent():
    """Test that a row delete whose response was lost raises instead of deleting another row"""
    api = FakeSheetsAPI()
    client = make_client(api)
    await client.sheet_exists("Tasks")
    api.responses = [httpx.ReadTimeout]

    with pytest.raises(APIError, match="failed"):
        await client.delete_row("Tasks", 3)

    deletes = [body for body in api.bodies() if "deleteDimension" in body["requests"][0]]
    assert len(deletes) == 1
    await client.close()


@pytest.mark.asyncio
async def test_lost_append_response_is_not_resent():
    """Test that an append whose response was lost is not written twice"""
    api = FakeSheetsAPI([httpx.ReadTimeout])
    client = make_client(api)

    with pytest.raises(APIError):
        await client.append_rows("Tasks", [[1, "Task"]])

    assert len(api.requests) == 1
    await client.close()


@pytest.mark.asyncio
async def test_unapplied_write_is_retried():
    """Test that writes are resent after 503 or a refused connection"""
    api = FakeSheetsAPI([
        httpx.Response(503, text="unavailable"),
        httpx.ConnectError,
        httpx.Response(200, json={}),
    ])
    client = make_client(api)

    await client.append_rows("Tasks", [[1, "Task"]])

    assert len(api.requests) == 3
    assert all(request.url.path.endswith(":append") for request in api.requests)
    await client.close()


@pytest.mark.asyncio
async def test_write_server_error_is_not_retried():
    """Test that a 500 on a batch update is reported without resending"""
    api = FakeSheetsAPI()
    client = make_client(api)
    await client.sheet_exists("Tasks")
    api.responses = [httpx.Response(500)]

    with pytest.raises(APIError) as exc_info:
        await client.delete_row("Tasks", 1)

    assert exc_info.value.error_code == "500"
    assert len(api.requests) == 2
    await client.close()


@pytest.mark.asyncio
async def test_read_and_clear_retry_after_timeout():
    """Test that idempotent requests are resent after a lost response"""
    api = FakeSheetsAPI([
        httpx.ReadTimeout,
        httpx.Response(200, json={"values": [["ID"]]}),
        httpx.ReadTimeout,
        httpx.Response(200, json={}),
    ])
    client = make_client(api)

    assert await client.get_values("Tasks") == [["ID"]]
    await client.clear("Tasks")

    assert len(api.requests) == 4
    assert api.requests[3].url.path.endswith("/values/'Tasks':clear")
    await client.close()
