"""要求・応答のデバッグ表示。

人が読むための情報で、形式に互換性の約束はない。本文は要求ごとに
一時ディレクトリの別ファイルへ書き出し、認証系ヘッダの値は伏せる。
"""

from __future__ import annotations

import tempfile
from collections.abc import Iterable
from pathlib import Path

REQUEST_DUMP_PREFIX = "rest-body-"
RESPONSE_DUMP_PREFIX = "rest-response-"
DUMP_SUFFIX = ".dump"
MASK = "***"

SENSITIVE_HEADERS = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie", "x-api-key"}
)
SENSITIVE_MARKERS = ("token", "secret", "apikey", "api-key", "password")


def format_bytes(size: int) -> str:
    """バイト数を読みやすい単位で表す。"""

    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{int(value)} {unit}" if unit == "B" else f"{value:.3f} {unit}"
        value /= 1024
    return f"{size} B"


def spool(content: bytes, prefix: str) -> Path:
    """本文を一時ディレクトリの新しいファイルへ書き出してパスを返す。"""

    with tempfile.NamedTemporaryFile(prefix=prefix, suffix=DUMP_SUFFIX, delete=False) as handle:
        handle.write(content)
    return Path(handle.name)


def is_sensitive_header(name: str) -> bool:
    """資格情報を含み得るヘッダ名か。"""

    lowered = name.lower()
    return lowered in SENSITIVE_HEADERS or any(marker in lowered for marker in SENSITIVE_MARKERS)


def debug_request(
    method: str,
    url: str,
    headers: Iterable[tuple[str, str]],
    body: bytes | None = None,
) -> str:
    """送信内容の説明文を作る。"""

    if body is None:
        bodyinfo = ""
    else:
        path = spool(body, REQUEST_DUMP_PREFIX)
        bodyinfo = f"{format_bytes(len(body))} (saved to {path}) sent to "
    lines = [f"[{method}] {bodyinfo}{url}"]
    lines.extend(
        f"       {name}: {MASK if is_sensitive_header(name) else value}"
        for name, value in headers
    )
    return "\n".join(lines)


def debug_response(url: str, status: int, body: bytes) -> str:
    """受信内容の説明文を作る。"""

    if not 200 <= status <= 299:
        return f"[{status}] {format_bytes(len(body))} error response from {url}"
    path = spool(body, RESPONSE_DUMP_PREFIX)
    return f"[{status}] {format_bytes(len(body))} (saved to {path}) from {url}"
