"""公開クライアント実装。"""

from __future__ import annotations

from typing import Any

import httpx

from restclient.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, RequestConfig
from restclient.endpoint import Endpoint
from restclient.enums import Method, normalize_method
from restclient.request import Request
from restclient.services._transport import perform_async_request, perform_sync_request


def _build_config(
    *,
    config: RequestConfig | None,
    base_url: str | None,
    key: str | None,
    timeout: float,
    user_agent: str | None,
) -> RequestConfig:
    if config is not None:
        return config
    if timeout <= 0:
        raise ValueError("timeout は0より大きい値を指定してください。")
    return RequestConfig(
        base_url=base_url or "",
        key=key,
        timeout=timeout,
        user_agent=user_agent,
    )


def _client_kwargs(
    *,
    http2: bool,
    proxy: str | None,
    limits: httpx.Limits | None,
) -> dict[str, Any]:
    client_kwargs: dict[str, Any] = {"http2": http2}
    if proxy is not None:
        client_kwargs["proxy"] = proxy
    if limits is not None:
        client_kwargs["limits"] = limits
    return client_kwargs


class RestClient:
    """REST APIの同期クライアント。

    同じクライアント（すなわち同じ RequestConfig）から出した要求は
    レート制限のバックオフを共有する。
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = DEFAULT_USER_AGENT,
        config: RequestConfig | None = None,
        http_client: httpx.Client | None = None,
        http2: bool = False,
        proxy: str | None = None,
        limits: httpx.Limits | None = None,
    ) -> None:
        """クライアントを初期化する。

        Args:
            base_url: APIベースURL。
            key: APIキー。
            timeout: HTTPタイムアウト秒。既定は無制限。
            user_agent: User-Agent。
            config: 構築済み設定。指定時は base_url/key/timeout/user_agent を無視する。
            http_client: 外部httpx.Client。
            http2: HTTP/2有効化。
            proxy: プロキシ。
            limits: httpx接続制御。
        """

        self.config = _build_config(
            config=config,
            base_url=base_url,
            key=key,
            timeout=timeout,
            user_agent=user_agent,
        )
        self._owns_client = http_client is None
        if http_client is None:
            self._http_client = httpx.Client(**_client_kwargs(http2=http2, proxy=proxy, limits=limits))
        else:
            self._http_client = http_client

    def request(self, method: Method | str, endpoint: Endpoint) -> Request:
        """このクライアントに紐づく要求を作る。"""

        return Request(
            config=self.config,
            endpoint=endpoint,
            method=normalize_method(method),
            client=self,
        )

    def perform(self, method: Method | str, endpoint: Endpoint) -> Any:
        """要求を実行し後処理済みの結果を返す。

        Raises:
            RestValidationError: validate がFalseを返した場合。
            RestConfigurationError: 設定不備。
            RestUnrecoverableRateLimitError: 待機秒を決定できないレート制限。
            RestRequestError: その他の2xx以外の応答。
            RestTransportError: 通信失敗。
        """

        return perform_sync_request(self._http_client, self.request(method, endpoint))

    def get(self, endpoint: Endpoint) -> Any:
        """GET要求を実行する。"""

        return self.perform(Method.GET, endpoint)

    def post(self, endpoint: Endpoint) -> Any:
        """POST要求を実行する。"""

        return self.perform(Method.POST, endpoint)

    def put(self, endpoint: Endpoint) -> Any:
        """PUT要求を実行する。"""

        return self.perform(Method.PUT, endpoint)

    def patch(self, endpoint: Endpoint) -> Any:
        """PATCH要求を実行する。"""

        return self.perform(Method.PATCH, endpoint)

    def delete(self, endpoint: Endpoint) -> Any:
        """DELETE要求を実行する。"""

        return self.perform(Method.DELETE, endpoint)

    def close(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> "RestClient":
        """コンテキスト開始。"""

        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """コンテキスト終了。"""

        self.close()


class AsyncRestClient:
    """REST APIの非同期クライアント。"""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str | None = DEFAULT_USER_AGENT,
        config: RequestConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        http2: bool = False,
        proxy: str | None = None,
        limits: httpx.Limits | None = None,
    ) -> None:
        """非同期クライアントを初期化する。"""

        self.config = _build_config(
            config=config,
            base_url=base_url,
            key=key,
            timeout=timeout,
            user_agent=user_agent,
        )
        self._owns_client = http_client is None
        if http_client is None:
            self._http_client = httpx.AsyncClient(**_client_kwargs(http2=http2, proxy=proxy, limits=limits))
        else:
            self._http_client = http_client

    def request(self, method: Method | str, endpoint: Endpoint) -> Request:
        """このクライアントに紐づく要求を作る。"""

        return Request(
            config=self.config,
            endpoint=endpoint,
            method=normalize_method(method),
            client=self,
        )

    async def perform(self, method: Method | str, endpoint: Endpoint) -> Any:
        """要求を実行し後処理済みの結果を返す。"""

        return await perform_async_request(self._http_client, self.request(method, endpoint))

    async def get(self, endpoint: Endpoint) -> Any:
        """GET要求を実行する。"""

        return await self.perform(Method.GET, endpoint)

    async def post(self, endpoint: Endpoint) -> Any:
        """POST要求を実行する。"""

        return await self.perform(Method.POST, endpoint)

    async def put(self, endpoint: Endpoint) -> Any:
        """PUT要求を実行する。"""

        return await self.perform(Method.PUT, endpoint)

    async def patch(self, endpoint: Endpoint) -> Any:
        """PATCH要求を実行する。"""

        return await self.perform(Method.PATCH, endpoint)

    async def delete(self, endpoint: Endpoint) -> Any:
        """DELETE要求を実行する。"""

        return await self.perform(Method.DELETE, endpoint)

    async def aclose(self) -> None:
        """内部Clientをクローズする。"""

        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "AsyncRestClient":
        """非同期コンテキスト開始。"""

        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """非同期コンテキスト終了。"""

        await self.aclose()


def api_get(client: RestClient, endpoint: Endpoint) -> Any:
    """client で endpoint へGET要求を出す。"""

    return client.get(endpoint)


def api_post(client: RestClient, endpoint: Endpoint) -> Any:
    """client で endpoint へPOST要求を出す。"""

    return client.post(endpoint)
