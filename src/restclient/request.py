"""要求の組み立てと応答の解釈。"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from restclient.codecs import decode_payload, encode_payload
from restclient.enums import Method
from restclient.errors import RestDecodeError, RestValidationError
from restclient.http import build_request_headers
from restclient.urls import build_url

if TYPE_CHECKING:
    from restclient.config import RequestConfig
    from restclient.endpoint import Endpoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Request:
    """設定・エンドポイント・メソッドの組。

    1回の呼び出しごとに生成し、再試行でも同じ値を使う。

    Attributes:
        config: 要求共通設定。
        endpoint: エンドポイント。
        method: HTTPメソッド。
        client: 実行したクライアント。ページ送りで次の要求を出すのに使う。
    """

    config: RequestConfig
    endpoint: Endpoint
    method: Method = Method.GET
    client: Any = field(default=None, compare=False, repr=False)

    def with_endpoint(self, endpoint: Endpoint) -> "Request":
        """エンドポイントだけを差し替えた要求を返す。"""

        return replace(self, endpoint=endpoint)


@dataclass(slots=True)
class PreparedCall:
    """送信直前のHTTP呼び出し内容。

    Attributes:
        method: HTTPメソッド。
        url: 完全URL。
        headers: 送信ヘッダ。
        body: 本文。本文なしはNone。
    """

    method: Method
    url: str
    headers: list[tuple[str, str]]
    body: bytes | None = None


def format_payload(endpoint: Endpoint, value: Any) -> bytes | None:
    """エンドポイントの payload を送信本文へ変換する。

    bytes/str/ファイルオブジェクトはそのまま送り、その他の値は
    ``endpoint.dataformat(type(value))`` の形式で符号化する。
    """

    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    read = getattr(value, "read", None)
    if callable(read):
        content = read()
        return content.encode("utf-8") if isinstance(content, str) else bytes(content)
    return encode_payload(endpoint.dataformat(type(value)), value)


def prepare_call(request: Request) -> PreparedCall:
    """検証・URL構築・本文符号化を行い送信内容を確定する。

    Raises:
        RestValidationError: validate がFalseを返した場合。
        RestConfigurationError: ベースURLや形式の設定不備。
    """

    config, endpoint = request.config, request.endpoint
    if not endpoint.validate(config):
        raise RestValidationError(
            f"要求が不正です: {type(endpoint).__qualname__}",
            endpoint=endpoint,
        )
    url = build_url(config, endpoint)
    headers = build_request_headers(config.user_agent, endpoint.headers(config))
    body = format_payload(endpoint, endpoint.payload(config)) if request.method.has_body else None
    return PreparedCall(method=request.method, url=url, headers=headers, body=body)


def handle_response(request: Request, body: bytes, *, url: str | None = None) -> Any:
    """応答本文を宣言型へ復号し後処理する。"""

    endpoint = request.endpoint
    tp = endpoint.responsetype()
    fmt = endpoint.dataformat(tp)
    try:
        data = decode_payload(body, fmt, tp)
    except RestDecodeError as exc:
        if url is not None and exc.context.request_url is None:
            exc.context.request_url = url
        raise
    logger.debug("Decoded %s response from %s as %s", fmt, url, getattr(tp, "__qualname__", tp))
    return endpoint.postprocess(request, data)
