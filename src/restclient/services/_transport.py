"""HTTP呼び出しの実行。"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from restclient.debug import debug_request, debug_response
from restclient.errors import RestRateLimitError, RestRequestError, RestTransportError
from restclient.http import RATE_LIMIT_STATUSES
from restclient.request import PreparedCall, Request, handle_response, prepare_call

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 2048


def _log_request(call: PreparedCall) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(debug_request(call.method.value, call.url, call.headers, call.body))


def _check_response(response: httpx.Response, *, url: str) -> bytes:
    """応答を検査し、2xx以外なら例外を送出する。"""

    content = response.content
    status = int(response.status_code)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(debug_response(url, status, content))
    if 200 <= status <= 299:
        return content
    klass = RestRateLimitError if status in RATE_LIMIT_STATUSES else RestRequestError
    raise klass(
        f"HTTP {status} {response.reason_phrase}: {url}",
        status=status,
        headers=response.headers,
        request_url=url,
        raw_response_excerpt=response.text[:EXCERPT_LENGTH],
    )


def send_sync_call(client: httpx.Client, call: PreparedCall, *, timeout: float | None) -> bytes:
    """1回のHTTP呼び出しを行い本文を返す。

    Raises:
        RestRequestError: 2xx以外の応答。
        RestTransportError: 通信失敗。
    """

    _log_request(call)
    try:
        response = client.request(
            call.method.value,
            call.url,
            headers=call.headers,
            content=call.body,
            timeout=timeout,
        )
    except httpx.HTTPError as exc:
        raise RestTransportError(str(exc) or type(exc).__name__, request_url=call.url) from exc
    return _check_response(response, url=call.url)


async def send_async_call(
    client: httpx.AsyncClient,
    call: PreparedCall,
    *,
    timeout: float | None,
) -> bytes:
    """1回の非同期HTTP呼び出しを行い本文を返す。"""

    _log_request(call)
    try:
        response = await client.request(
            call.method.value,
            call.url,
            headers=call.headers,
            content=call.body,
            timeout=timeout,
        )
    except httpx.HTTPError as exc:
        raise RestTransportError(str(exc) or type(exc).__name__, request_url=call.url) from exc
    return _check_response(response, url=call.url)


def perform_sync_request(client: httpx.Client, request: Request) -> Any:
    """要求を検証・送信・復号・後処理して結果を返す。

    送信はレート制限協調器を通して行う。
    """

    call = prepare_call(request)
    config = request.config
    body = config.limiter.run(
        lambda: send_sync_call(client, call, timeout=config.httpx_timeout)
    )
    return handle_response(request, body, url=call.url)


async def perform_async_request(client: httpx.AsyncClient, request: Request) -> Any:
    """perform_sync_request の非同期版。"""

    call = prepare_call(request)
    config = request.config
    body = await config.async_limiter.run(
        lambda: send_async_call(client, call, timeout=config.httpx_timeout)
    )
    return handle_response(request, body, url=call.url)
