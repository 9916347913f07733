"""エンドポイント契約。

API操作ごとに ``Endpoint`` を継承した値型（通常は dataclass）を定義し、
``pagename`` だけを必ず実装する。その他のフックは既定実装を持つ。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from restclient.codecs import format_for
from restclient.enums import EndpointKind, Format
from restclient.models import List, ListResponse, Single, SingleResponse

if TYPE_CHECKING:
    from restclient.config import RequestConfig
    from restclient.request import Request


class Endpoint:
    """API操作1件の記述。

    フック一覧::

        pagename(config) -> str                       必須
        headers(config) -> list[tuple[str, str]]
        parameters(config) -> list[tuple[str, str]]
        payload(config) -> Any | None
        responsetype() -> type
        dataformat(tp) -> Format
        validate(config) -> bool
        postprocess(request, data) -> Any
        nextpage(page) / thispagenumber(page) / remainingpages(page)
    """

    kind: ClassVar[EndpointKind] = EndpointKind.OTHER

    def pagename(self, config: RequestConfig) -> str:
        """ベースURLからの相対パス（クエリ文字列を含まない）を返す。"""

        raise NotImplementedError(f"{type(self).__qualname__} は pagename を実装していません。")

    def headers(self, config: RequestConfig) -> list[tuple[str, str]]:
        """送信ヘッダを返す。"""

        return []

    def parameters(self, config: RequestConfig) -> list[tuple[str, str]]:
        """クエリパラメータを宣言順で返す。"""

        return []

    def payload(self, config: RequestConfig) -> Any | None:
        """本文を伴うメソッドで送る値を返す。"""

        return None

    def responsetype(self) -> Any:
        """応答の型を返す。bytes のときは復号しない。"""

        return bytes

    def dataformat(self, tp: Any) -> Format:
        """型 tp がこのエンドポイントでどの形式で表現されるかを返す。"""

        return format_for(tp)

    def validate(self, config: RequestConfig) -> bool:
        """送信前に要求が妥当か判定する。Falseで送信を中止する。"""

        return True

    def postprocess(self, request: Request, data: Any) -> Any:
        """復号済みの値を呼び出し側へ返す形に変換する。

        ListEndpoint が ListResponse を受けたときは List、
        SingleEndpoint が SingleResponse を受けたときは Single で包む。
        """

        if self.kind is EndpointKind.LIST and isinstance(data, ListResponse):
            return List(request=request, items=tuple(data.contents()), metadata=data.metadata())
        if self.kind is EndpointKind.SINGLE and isinstance(data, SingleResponse):
            return Single(request=request, data=data.contents(), metadata=data.metadata())
        return data

    def nextpage(self, page: List[Any]) -> Any:
        """次ページの List を返す。未対応または最終ページならNone。"""

        return None

    def thispagenumber(self, page: List[Any]) -> int | None:
        """現在のページ番号を返す。"""

        return None

    def remainingpages(self, page: List[Any]) -> int | None:
        """残りページ数を返す。"""

        return None


class SingleEndpoint(Endpoint):
    """単一値を返すエンドポイント。"""

    kind = EndpointKind.SINGLE


class ListEndpoint(Endpoint):
    """値の列を返すエンドポイント。"""

    kind = EndpointKind.LIST
