"""JSONコーデック。

型付きの復号と符号化は msgspec に任せる。対象型は ``msgspec.Struct``、
dataclass、標準コンテナ、およびそれらの組み合わせ。JSONキーと属性名を
変える場合は ``msgspec.field(name=...)`` か Struct の ``rename`` を使う。
"""

from __future__ import annotations

from typing import Any

import msgspec

from restclient.errors import RestConfigurationError, RestDecodeError


def _type_label(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


def decode_json(data: bytes, tp: Any) -> Any:
    """JSON本文を型 tp の値へ復号する。

    Args:
        data: 応答本文。
        tp: 目標型。``Any`` のときは型検査なしで復号する。

    Returns:
        復号済みの値。

    Raises:
        RestDecodeError: 本文がJSONでない、または型と一致しない場合。
        RestConfigurationError: tp が msgspec で扱えない型の場合。
    """

    try:
        if tp is Any:
            return msgspec.json.decode(data)
        return msgspec.json.decode(data, type=tp)
    except msgspec.ValidationError as exc:
        raise RestDecodeError(f"JSON本文が {_type_label(tp)} と一致しません: {exc}") from exc
    except msgspec.DecodeError as exc:
        raise RestDecodeError(f"JSON本文を解析できませんでした: {exc}") from exc
    except TypeError as exc:
        raise RestConfigurationError(f"{_type_label(tp)} はJSONで復号できない型です: {exc}") from exc


def encode_json(value: Any) -> bytes:
    """値をJSON本文へ符号化する。

    Raises:
        RestConfigurationError: 値が msgspec で符号化できない場合。
    """

    try:
        return msgspec.json.encode(value)
    except TypeError as exc:
        raise RestConfigurationError(
            f"{type(value).__qualname__} はJSONへ符号化できません: {exc}"
        ) from exc
