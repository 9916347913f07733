"""返却モデル。"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from functools import cache
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, get_args, get_origin, get_type_hints, overload

from restclient.enums import EndpointKind
from restclient.errors import RestConfigurationError

if TYPE_CHECKING:
    from restclient.request import Request

T = TypeVar("T")

_SEQUENCE_ORIGINS = (list, tuple, Sequence)


class SingleResponse(Generic[T]):
    """単一の T と（任意の）メタデータを含む応答型の基底。

    ``contents_field`` で本体フィールド名を明示できる。未指定のときは
    型注釈が T のフィールドがちょうど1つである必要がある。
    """

    contents_field: ClassVar[str | None] = None

    def contents(self) -> T:
        """応答本体を返す。"""

        return getattr(self, resolve_contents_field(type(self)))

    def metadata(self) -> dict[str, Any]:
        """応答メタデータを返す。既定は空。"""

        return {}


class ListResponse(Generic[T]):
    """T の列と（任意の）メタデータを含む応答型の基底。

    ``contents_field`` 未指定のときは型注釈が ``list[T]`` のフィールドが
    ちょうど1つである必要がある。
    """

    contents_field: ClassVar[str | None] = None

    def contents(self) -> Sequence[T]:
        """要素列を返す。"""

        return getattr(self, resolve_contents_field(type(self)))

    def metadata(self) -> dict[str, Any]:
        """応答メタデータを返す。既定は空。"""

        return {}


def _element_type(cls: type, base: type) -> Any:
    for klass in cls.__mro__:
        for orig in klass.__dict__.get("__orig_bases__", ()):
            if get_origin(orig) is base:
                args = get_args(orig)
                if args and not isinstance(args[0], TypeVar):
                    return args[0]
    return None


def _matches(hint: Any, element: Any, *, sequence: bool) -> bool:
    if not sequence:
        return hint == element
    if get_origin(hint) not in _SEQUENCE_ORIGINS:
        return False
    args = get_args(hint)
    return bool(args) and args[0] == element


@cache
def resolve_contents_field(cls: type) -> str:
    """応答型の本体フィールド名を解決する。

    Args:
        cls: SingleResponse または ListResponse のサブクラス。

    Returns:
        フィールド名。

    Raises:
        RestConfigurationError: 候補が0個または複数の場合。
    """

    if cls.contents_field is not None:  # type: ignore[attr-defined]
        return cls.contents_field  # type: ignore[attr-defined]

    sequence = issubclass(cls, ListResponse)
    base = ListResponse if sequence else SingleResponse
    element = _element_type(cls, base)
    if element is None:
        raise RestConfigurationError(
            f"{cls.__qualname__} の要素型を特定できません。"
            f"{base.__name__}[T] を継承するか contents_field を指定してください。"
        )

    try:
        hints = get_type_hints(cls)
    except NameError as exc:
        raise RestConfigurationError(
            f"{cls.__qualname__} の型注釈を解決できません: {exc}"
        ) from exc
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    else:
        names = [name for name in hints if get_origin(hints[name]) is not ClassVar]
    candidates = [name for name in names if _matches(hints.get(name), element, sequence=sequence)]

    label = f"list[{getattr(element, '__qualname__', element)}]" if sequence else getattr(
        element, "__qualname__", repr(element)
    )
    if not candidates:
        raise RestConfigurationError(
            f"{cls.__qualname__} に {label} 型のフィールドがありません。contents_field を指定してください。"
        )
    if len(candidates) > 1:
        raise RestConfigurationError(
            f"{cls.__qualname__} に {label} 型のフィールドが複数あります "
            f"({', '.join(candidates)})。contents_field を指定してください。"
        )
    return candidates[0]


def _check_kind(request: Request, expected: EndpointKind, wrapper: str) -> None:
    kind = getattr(request.endpoint, "kind", EndpointKind.OTHER)
    if kind is not expected:
        raise RestConfigurationError(
            f"{wrapper} は {expected} 区分のエンドポイントにのみ使えます: "
            f"{type(request.endpoint).__qualname__} ({kind})"
        )


@dataclass(frozen=True, slots=True)
class Single(Generic[T]):
    """単一値の応答と要求情報・メタデータ。

    Attributes:
        request: 取得元の要求。
        data: 応答本体。
        metadata: サーバ由来のメタデータ。
    """

    request: Request
    data: T
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_kind(self.request, EndpointKind.SINGLE, "Single")

    def __repr__(self) -> str:
        return f"Single({self.data!r})"


@dataclass(frozen=True, slots=True)
class List(Generic[T]):
    """値の列の応答と要求情報・メタデータ。

    Attributes:
        request: 取得元の要求。
        items: 要素列。
        metadata: サーバ由来のメタデータ。
    """

    request: Request
    items: tuple[T, ...]
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_kind(self.request, EndpointKind.LIST, "List")
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[T, ...]: ...

    def __getitem__(self, index: int | slice) -> T | tuple[T, ...]:
        return self.items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def nextpage(self) -> Any:
        """次ページを取得する。未対応または最終ページならNone。"""

        return self.request.endpoint.nextpage(self)

    def thispagenumber(self) -> int | None:
        """現在のページ番号。不明ならNone。"""

        return self.request.endpoint.thispagenumber(self)

    def remainingpages(self) -> int | None:
        """残りページ数。不明ならNone。"""

        return self.request.endpoint.remainingpages(self)

    def __repr__(self) -> str:
        element = type(self.items[0]).__qualname__ if self.items else "Any"
        count = len(self.items)
        text = f"List[{element}] holding {count} item{'' if count == 1 else 's'}"
        page, remaining = self.thispagenumber(), self.remainingpages()
        if page is not None and remaining is not None:
            text += f", page {page} of {page + remaining}"
        return text

    def to_records(self) -> list[Any]:
        """要素をdict（dataclassの場合）のリストへ変換する。"""

        return [
            dataclasses.asdict(item)
            if dataclasses.is_dataclass(item) and not isinstance(item, type)
            else item
            for item in self.items
        ]

    def to_pandas(self) -> Any:
        """pandas.DataFrameへ変換する。"""

        try:
            import pandas as pd
        except ImportError as exc:
            raise RuntimeError("pandas が必要です。pip install 'restclient[pandas]' を実行してください。") from exc
        return pd.DataFrame(self.to_records())

    def to_polars(self) -> Any:
        """polars.DataFrameへ変換する。"""

        try:
            import polars as pl
        except ImportError as exc:
            raise RuntimeError("polars が必要です。pip install 'restclient[polars]' を実行してください。") from exc
        return pl.DataFrame(self.to_records())
