"""例外定義。"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(slots=True)
class RestErrorContext:
    """例外に付随する共通コンテキスト。

    Attributes:
        request_url: リクエストURL。
        status: HTTPステータス。
        headers: レスポンスヘッダ（キーは小文字）。
        raw_response_excerpt: レスポンス抜粋。
    """

    request_url: str | None = None
    status: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    raw_response_excerpt: str | None = None


class RestError(Exception):
    """ライブラリ例外の基底クラス。

    Attributes:
        origin: 例外発生元。
        context: 追加コンテキスト。
    """

    def __init__(
        self,
        message: str,
        *,
        origin: str,
        context: RestErrorContext | None = None,
    ) -> None:
        super().__init__(message)
        self.origin = origin
        self.context = context or RestErrorContext()


class RestConfigurationError(RestError):
    """設定不備（ベースURL未設定、形式未登録、contents解決不能など）。"""

    def __init__(self, message: str) -> None:
        super().__init__(message, origin="configuration")


class RestValidationError(RestError):
    """送信前バリデーションで要求が拒否された。"""

    def __init__(self, message: str, *, endpoint: object) -> None:
        super().__init__(message, origin="client_validation")
        self.endpoint = endpoint


class RestTransportError(RestError):
    """HTTP通信層の例外。"""

    def __init__(
        self,
        message: str,
        *,
        request_url: str | None = None,
        context: RestErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            origin="transport",
            context=context or RestErrorContext(request_url=request_url),
        )


class RestRequestError(RestTransportError):
    """2xx以外のHTTP応答。

    Attributes:
        status: HTTPステータス。
        headers: レスポンスヘッダ（キーは小文字）。
    """

    def __init__(
        self,
        message: str,
        *,
        status: int,
        headers: Mapping[str, str],
        request_url: str,
        raw_response_excerpt: str | None = None,
    ) -> None:
        lowered = {str(k).lower(): str(v) for k, v in headers.items()}
        super().__init__(
            message,
            context=RestErrorContext(
                request_url=request_url,
                status=status,
                headers=lowered,
                raw_response_excerpt=raw_response_excerpt,
            ),
        )
        self.status = status
        self.headers = lowered


class RestRateLimitError(RestRequestError):
    """STATUS=403/429のレート制限応答。"""


class RestUnrecoverableRateLimitError(RestRateLimitError):
    """待機秒を決定できないレート制限応答。"""

    def __init__(self, source: RestRequestError) -> None:
        super().__init__(
            f"レート制限を受けましたが待機秒を決定できません: status={source.status}",
            status=source.status,
            headers=source.headers,
            request_url=source.context.request_url or "",
            raw_response_excerpt=source.context.raw_response_excerpt,
        )


class RestDecodeError(RestError):
    """レスポンス本文の解釈失敗。"""

    def __init__(self, message: str, *, request_url: str | None = None) -> None:
        super().__init__(
            message,
            origin="server_response",
            context=RestErrorContext(request_url=request_url),
        )
