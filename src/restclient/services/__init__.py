"""サービス層モジュール。"""

from restclient.services._transport import perform_async_request, perform_sync_request

__all__ = ["perform_async_request", "perform_sync_request"]
