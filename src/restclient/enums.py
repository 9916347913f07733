"""列挙型定義。"""

from __future__ import annotations

from enum import StrEnum


class Method(StrEnum):
    """HTTPメソッドを表す列挙型。

    Attributes:
        GET: 取得。
        POST: 作成。
        PUT: 置換。
        PATCH: 部分更新。
        DELETE: 削除。
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        """本文を送信するメソッドか。"""

        return self in {Method.POST, Method.PUT, Method.PATCH}


class Format(StrEnum):
    """ワイヤ形式タグを表す列挙型。

    Attributes:
        RAW: 解釈しないバイト列。
        JSON: JSON形式。
        XML: XML形式。
    """

    RAW = "RAW"
    JSON = "JSON"
    XML = "XML"


class EndpointKind(StrEnum):
    """エンドポイントの返却区分。

    Attributes:
        OTHER: 区分なし（後処理は値をそのまま返す）。
        SINGLE: 単一値を返す。
        LIST: 値の列を返す。
    """

    OTHER = "other"
    SINGLE = "single"
    LIST = "list"


def normalize_method(value: Method | str) -> Method:
    """HTTPメソッド指定を正規化する。

    Args:
        value: 列挙値または文字列。

    Returns:
        正規化済みメソッド。

    Raises:
        ValueError: 未知のメソッドの場合。
    """

    if isinstance(value, Method):
        return value
    try:
        return Method(value.strip().upper())
    except ValueError as exc:
        raise ValueError(f"未対応のHTTPメソッドです: {value!r}") from exc


def normalize_format(value: Format | str) -> Format:
    """形式タグ指定を正規化する。"""

    if isinstance(value, Format):
        return value
    try:
        return Format(value.strip().upper())
    except ValueError as exc:
        raise ValueError(f"未対応の形式です: {value!r}") from exc
