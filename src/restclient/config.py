"""設定値定義。"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from restclient.http import AsyncRateLimitCoordinator, RateLimitCoordinator

DEFAULT_USER_AGENT = "restclient/0.1.0"
DEFAULT_TIMEOUT = math.inf


@dataclass(frozen=True, slots=True)
class RequestConfig:
    """エンドポイントに依存しない要求共通設定。

    生成後は不変。協調器だけが可変で、レート制限の待機調整にのみ使う。
    同じ設定を共有する要求同士がバックオフを共有する。

    Attributes:
        base_url: APIベースURL（末尾スラッシュなし）。
        key: APIキー。エンドポイントが headers/parameters で利用する。
        timeout: HTTPタイムアウト秒。math.inf で無制限。
        user_agent: User-Agent。Noneで送信しない。
        limiter: スレッド用レート制限協調器。
        async_limiter: 非同期用レート制限協調器。
    """

    base_url: str
    key: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str | None = DEFAULT_USER_AGENT
    limiter: RateLimitCoordinator = field(
        default_factory=RateLimitCoordinator,
        compare=False,
        repr=False,
    )
    async_limiter: AsyncRateLimitCoordinator = field(
        default_factory=AsyncRateLimitCoordinator,
        compare=False,
        repr=False,
    )

    @property
    def httpx_timeout(self) -> float | None:
        """httpxへ渡すタイムアウト値。"""

        return None if math.isinf(self.timeout) else self.timeout
