from datetime import datetime, timezone

from restman.models import (
    Accepted,
    EnvironmentsConfig,
    HistoryEntry,
    Rejected,
    RequestOptions,
    Response,
    SavedRequest,
    dump,
    validate_entry,
)


def _history_raw(**overrides):
    raw = {
        "id": 1,
        "timestamp": "2026-01-02T03:04:05Z",
        "request": {"method": "GET", "url": "http://h/", "headers": {}},
        "status": 200,
        "statusText": "OK",
        "time": 12,
    }
    raw.update(overrides)
    return raw


def test_validate_entry_accepts_valid_history() -> None:
    result = validate_entry(HistoryEntry, _history_raw())

    assert isinstance(result, Accepted)
    assert result.value.status_text == "OK"
    assert result.value.request.url == "http://h/"


def test_validate_entry_rejects_missing_fields() -> None:
    raw = _history_raw()
    del raw["timestamp"]

    result = validate_entry(HistoryEntry, raw)

    assert isinstance(result, Rejected)
    assert "timestamp" in result.reason
    assert result.raw is raw


def test_validate_entry_rejects_malformed_request() -> None:
    result = validate_entry(HistoryEntry, _history_raw(request={"method": "GET", "url": "http://h/"}))
    assert isinstance(result, Rejected)
    assert "headers" in result.reason


def test_validate_entry_rejects_non_objects() -> None:
    result = validate_entry(SavedRequest, ["not", "a", "dict"])
    assert isinstance(result, Rejected)
    assert "list" in result.reason


def test_saved_request_requires_name() -> None:
    raw = {
        "id": 3,
        "name": "",
        "timestamp": "2026-01-02T03:04:05Z",
        "request": {"method": "GET", "url": "http://h/", "headers": {}},
    }
    assert isinstance(validate_entry(SavedRequest, raw), Rejected)


def test_dump_uses_camel_case_aliases() -> None:
    config = EnvironmentsConfig(active_environment_id=None, environments=[])
    assert dump(config, exclude_none=False) == {"activeEnvironmentId": None, "environments": []}

    entry = HistoryEntry(
        id=1,
        timestamp=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        request=RequestOptions(method="GET", url="http://h/", headers={}),
    )
    data = dump(entry)
    assert "status" not in data
    assert data["request"] == {"method": "GET", "url": "http://h/", "headers": {}}


def test_response_transport_error() -> None:
    assert Response(status=0, status_text="Error").is_transport_error
    assert not Response(status=500, statusText="Internal Server Error").is_transport_error
