import json
import logging

from shelfwise.logging import JsonFormatter, MaskingFilter, mask


def test_request_id_header_and_propagation(client):
    resp = client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_request_id_generated_when_absent(client):
    resp = client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID")) == 32


def test_logs_include_request_id_attribute(client, caplog):
    caplog.set_level("INFO")
    resp = client.get("/__log", headers={"X-Request-ID": "rid-abc"})
    assert resp.status_code == 200
    assert any(getattr(r, "request_id", "") == "rid-abc" for r in caplog.records)


def test_mask_descends_into_nested_payloads():
    masked = mask({"channel": "EBAY", "credentials": {"api_key": "k", "token": "t"}})
    assert masked == {"channel": "EBAY", "credentials": {"api_key": "[REDACTED]", "token": "[REDACTED]"}}


def test_sensitive_fields_masked_in_info(app, caplog):
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logging.getLogger("mask_test").info({"event": "listing_sync", "token": "abc", "item_id": 4})
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert record.msg["token"] == "[REDACTED]"
    assert record.msg["item_id"] == 4


def test_sensitive_fields_visible_in_debug(app, caplog, monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logging.getLogger("mask_test_debug").debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert record.msg["password"] == "secret"


def test_json_formatter_merges_event_dicts():
    record = logging.LogRecord("shelfwise", logging.INFO, __file__, 1, {"event": "lot_created", "lot_number": 7}, None, None)
    record.request_id = "rid-1"
    line = json.loads(JsonFormatter().format(record))
    assert line["event"] == "lot_created"
    assert line["lot_number"] == 7
    assert line["request_id"] == "rid-1"
    assert line["level"] == "INFO"
