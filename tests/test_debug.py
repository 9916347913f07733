"""デバッグ表示とログ出力のテスト。"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import pytest

from restclient import Endpoint, RequestConfig, RestClient
from restclient.debug import debug_request, debug_response, format_bytes, is_sensitive_header


@dataclass
class UploadEndpoint(Endpoint):
    def pagename(self, config: RequestConfig) -> str:
        return "upload"

    def headers(self, config: RequestConfig) -> list[tuple[str, str]]:
        return [("Authorization", f"Bearer {config.key}")]

    def payload(self, config: RequestConfig) -> Any:
        return "hello"


def _dumps(directory: Path, prefix: str) -> list[Path]:
    return sorted(directory.glob(f"{prefix}*.dump"))


def test_format_bytes_units() -> None:
    assert format_bytes(512) == "512 B"
    assert format_bytes(2048) == "2.000 KiB"
    assert format_bytes(3 * 1024 * 1024) == "3.000 MiB"


def test_debug_request_and_response_spool_bodies(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    text = debug_request("POST", "https://example.invalid/x", [("Accept", "*/*")], b"abc")
    assert text.startswith("[POST] 3 B (saved to ")
    assert "       Accept: */*" in text
    [body_dump] = _dumps(tmp_path, "rest-body-")
    assert body_dump.read_bytes() == b"abc"
    assert str(body_dump) in text

    assert debug_request("GET", "https://example.invalid/x", []) == "[GET] https://example.invalid/x"

    ok = debug_response("https://example.invalid/x", 200, b"payload")
    assert ok.startswith("[200] 7 B (saved to ")
    [response_dump] = _dumps(tmp_path, "rest-response-")
    assert response_dump.read_bytes() == b"payload"

    failed = debug_response("https://example.invalid/x", 500, b"oops")
    assert failed == "[500] 4 B error response from https://example.invalid/x"


def test_each_request_gets_its_own_dump(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    debug_request("POST", "https://example.invalid/a", [], b"first")
    debug_request("POST", "https://example.invalid/b", [], b"second")

    assert [path.read_bytes() for path in _dumps(tmp_path, "rest-body-")] in (
        [b"first", b"second"],
        [b"second", b"first"],
    )


def test_debug_request_masks_credentials() -> None:
    headers = [
        ("Authorization", "Bearer secret-value"),
        ("X-Api-Key", "k-123"),
        ("X-Auth-Token", "t-456"),
        ("Accept", "application/json"),
    ]

    text = debug_request("GET", "https://example.invalid/x", headers)

    assert "secret-value" not in text
    assert "k-123" not in text
    assert "t-456" not in text
    assert "       Authorization: ***" in text
    assert "       Accept: application/json" in text
    assert is_sensitive_header("cookie")
    assert not is_sensitive_header("Content-Type")


def test_client_emits_debug_trace(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    caplog.set_level(logging.DEBUG, logger="restclient")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"ok", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    with RestClient("https://example.invalid", key="k-secret", http_client=http_client) as client:
        assert client.post(UploadEndpoint()) == b"ok"

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("[POST] 5 B") for message in messages)
    assert any(message.startswith("[200] 2 B") for message in messages)
    assert not any("k-secret" in message for message in messages)
    [body_dump] = _dumps(tmp_path, "rest-body-")
    assert body_dump.read_bytes() == b"hello"
