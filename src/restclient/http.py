"""HTTP実行補助とレート制限協調。"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
import time
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TypeVar

from restclient.errors import RestRequestError, RestUnrecoverableRateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMIT_STATUSES = frozenset({403, 429})


def parse_retry_after(value: str | None) -> int | None:
    """Retry-Afterヘッダを整数秒へ変換する。

    HTTP日付形式は扱わず、整数として解釈できない値はNoneとする。
    """

    if value is None:
        return None
    try:
        return max(0, int(value.strip()))
    except ValueError:
        return None


def ratelimit_delay(headers: Mapping[str, str], *, now: float) -> int | None:
    """レート制限応答ヘッダから待機秒を決定する。

    優先順位は retry-after、次に x-ratelimit-remaining が0のときの
    x-ratelimit-reset（エポック秒）までの残り時間。

    Args:
        headers: レスポンスヘッダ（キーは小文字）。
        now: 現在時刻（エポック秒）。

    Returns:
        待機秒。決定できない場合はNone。
    """

    retry_after = parse_retry_after(headers.get("retry-after"))
    if retry_after is not None:
        return retry_after
    try:
        remaining = int(headers.get("x-ratelimit-remaining", "-1"))
    except ValueError:
        return None
    if remaining != 0:
        return None
    try:
        reset = int(headers.get("x-ratelimit-reset", ""))
    except ValueError:
        return None
    return max(0, math.ceil(reset - now))


def is_ratelimit_error(exc: BaseException) -> bool:
    """例外がレート制限応答か判定する。"""

    return isinstance(exc, RestRequestError) and exc.status in RATE_LIMIT_STATUSES


class RateLimitCoordinator:
    """同一設定を共有する要求間で待機を揃えるレート制限協調器（スレッド用）。

    レート制限を受けた要求がロックを保持したまま待機し、その間に到着した
    要求はロック解放まで待ってから送信する。再試行回数に上限はない。
    """

    def __init__(
        self,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.Lock()
        self._sleep = sleep
        self._clock = clock
        self._generation = 0

    def locked(self) -> bool:
        """待機中のバックオフがあるか。"""

        return self._lock.locked()

    def _wait_released(self) -> None:
        if self._lock.locked():
            with self._lock:
                pass

    def run(self, action: Callable[[], T]) -> T:
        """レート制限を考慮して action を実行する。

        Args:
            action: HTTP呼び出し本体。

        Returns:
            action の戻り値。

        Raises:
            RestUnrecoverableRateLimitError: 待機秒を決定できない403/429。
            Exception: action が送出したその他の例外。
        """

        while True:
            self._wait_released()
            generation = self._generation
            try:
                return action()
            except Exception as exc:
                # 実行中に別要求のバックオフが始まった
                if self._lock.locked():
                    continue
                if not is_ratelimit_error(exc):
                    raise
                # 実行中に別要求のバックオフが終わった
                if self._generation != generation:
                    continue
                with self._lock:
                    if self._generation != generation:
                        continue
                    delay = ratelimit_delay(exc.headers, now=self._clock())  # type: ignore[attr-defined]
                    if delay is None:
                        raise RestUnrecoverableRateLimitError(exc) from exc  # type: ignore[arg-type]
                    logger.info(
                        "Rate limited (status=%s), waiting %d seconds before retrying %s",
                        exc.status,  # type: ignore[attr-defined]
                        delay,
                        exc.context.request_url,  # type: ignore[attr-defined]
                    )
                    self._sleep(delay)
                    self._generation += 1


class AsyncRateLimitCoordinator:
    """非同期用のレート制限協調器。

    ``asyncio.Lock`` はイベントループに束縛されるため、ループごとに
    ロックを持つ。同じ設定を複数回の ``asyncio.run`` で使い回せる。
    """

    def __init__(
        self,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._locks: dict[asyncio.AbstractEventLoop, asyncio.Lock] = {}
        self._sleep = sleep
        self._clock = clock
        self._generation = 0

    def _loop_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        lock = self._locks.get(loop)
        if lock is None:
            for stale in [other for other in self._locks if other.is_closed()]:
                del self._locks[stale]
            lock = self._locks[loop] = asyncio.Lock()
        return lock

    def locked(self) -> bool:
        """実行中のイベントループで待機中のバックオフがあるか。"""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False
        lock = self._locks.get(loop)
        return lock is not None and lock.locked()

    async def run(self, action: Callable[[], Awaitable[T]]) -> T:
        """レート制限を考慮して action を実行する。"""

        lock = self._loop_lock()
        while True:
            if lock.locked():
                async with lock:
                    pass
            generation = self._generation
            try:
                return await action()
            except Exception as exc:
                if lock.locked():
                    continue
                if not is_ratelimit_error(exc):
                    raise
                if self._generation != generation:
                    continue
                async with lock:
                    if self._generation != generation:
                        continue
                    delay = ratelimit_delay(exc.headers, now=self._clock())  # type: ignore[attr-defined]
                    if delay is None:
                        raise RestUnrecoverableRateLimitError(exc) from exc  # type: ignore[arg-type]
                    logger.info(
                        "Rate limited (status=%s), waiting %d seconds before retrying %s",
                        exc.status,  # type: ignore[attr-defined]
                        delay,
                        exc.context.request_url,  # type: ignore[attr-defined]
                    )
                    await self._sleep(delay)
                    self._generation += 1


def build_request_headers(
    user_agent: str | None,
    extra: Iterable[tuple[str, str]] = (),
) -> list[tuple[str, str]]:
    """標準ヘッダとエンドポイント宣言ヘッダを結合する。

    エンドポイント側で同名ヘッダを宣言した場合はそちらを優先する。
    """

    declared = list(extra)
    names = {name.lower() for name, _ in declared}
    headers: list[tuple[str, str]] = []
    if user_agent and "user-agent" not in names:
        headers.append(("User-Agent", user_agent))
    headers.extend(declared)
    return headers
