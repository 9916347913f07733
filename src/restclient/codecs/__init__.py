"""ワイヤ形式コーデックの登録と振り分け。"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from restclient.codecs.json_codec import decode_json, encode_json
from restclient.codecs.xml_codec import decode_xml, encode_xml
from restclient.enums import Format, normalize_format
from restclient.errors import RestConfigurationError

T = TypeVar("T")

Decoder = Callable[[bytes, Any], Any]
Encoder = Callable[[Any], bytes]


@dataclass(slots=True)
class Codec:
    """形式タグに対応する符号化・復号関数の組。

    Attributes:
        decode: (本文, 型) -> 値。
        encode: 値 -> 本文。
    """

    decode: Decoder
    encode: Encoder


def _decode_raw(data: bytes, tp: Any) -> Any:
    if tp is str:
        return data.decode("utf-8", errors="replace")
    return data


def _encode_raw(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return str(value).encode("utf-8")


class CodecRegistry:
    """型→形式タグの対応表と形式タグ→コーデックの対応表。

    型の対応は完全一致のみで引き、未登録は設定エラーとする。
    """

    def __init__(self) -> None:
        self._formats: dict[Any, Format] = {}
        self._codecs: dict[Format, Codec] = {}
        self.register_codec(Format.RAW, decode=_decode_raw, encode=_encode_raw)
        for raw_type in (bytes, bytearray, str):
            self.register_format(raw_type, Format.RAW)

    def register_format(self, tp: Any, fmt: Format | str) -> None:
        """型の形式タグを登録する。

        Raises:
            RestConfigurationError: 同じ型に別の形式が登録済みの場合。
        """

        fmt = normalize_format(fmt)
        existing = self._formats.get(tp)
        if existing is not None and existing != fmt:
            raise RestConfigurationError(
                f"{_type_name(tp)} には既に形式 {existing} が登録されています。"
            )
        self._formats[tp] = fmt

    def format_for(self, tp: Any) -> Format:
        """型の形式タグを返す。"""

        try:
            return self._formats[tp]
        except KeyError:
            raise RestConfigurationError(
                f"{_type_name(tp)} の形式が登録されていません。"
                "register_format で登録するか dataformat を上書きしてください。"
            ) from None

    def register_codec(self, fmt: Format | str, *, decode: Decoder, encode: Encoder) -> None:
        """形式タグのコーデックを登録する。"""

        fmt = normalize_format(fmt)
        self._codecs[fmt] = Codec(decode=decode, encode=encode)

    def codec_for(self, fmt: Format) -> Codec:
        """形式タグのコーデックを返す。"""

        try:
            return self._codecs[fmt]
        except KeyError:
            raise RestConfigurationError(f"形式 {fmt} のコーデックが登録されていません。") from None

    def decode(self, data: bytes, fmt: Format, tp: Any) -> Any:
        """本文を形式タグに従って型 tp の値へ復号する。"""

        return self.codec_for(fmt).decode(data, tp)

    def encode(self, fmt: Format, value: Any) -> bytes:
        """値を形式タグに従って本文へ符号化する。"""

        return self.codec_for(fmt).encode(value)


def _type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


def _build_default_registry() -> CodecRegistry:
    registry = CodecRegistry()
    registry.register_codec(Format.JSON, decode=decode_json, encode=encode_json)
    registry.register_codec(Format.XML, decode=decode_xml, encode=encode_xml)
    return registry


default_registry = _build_default_registry()


def register_format(tp: Any, fmt: Format | str) -> None:
    """既定レジストリに型の形式タグを登録する。"""

    default_registry.register_format(tp, fmt)


def format_for(tp: Any) -> Format:
    """既定レジストリから型の形式タグを返す。"""

    return default_registry.format_for(tp)


def register_codec(fmt: Format | str, *, decode: Decoder, encode: Encoder) -> None:
    """既定レジストリにコーデックを登録する。"""

    default_registry.register_codec(fmt, decode=decode, encode=encode)


def decode_payload(data: bytes, fmt: Format, tp: Any) -> Any:
    """既定レジストリで本文を復号する。"""

    return default_registry.decode(data, fmt, tp)


def encode_payload(fmt: Format, value: Any) -> bytes:
    """既定レジストリで値を符号化する。"""

    return default_registry.encode(fmt, value)


def json_format(cls: type[T]) -> type[T]:
    """クラスをJSON形式として登録するデコレータ。"""

    register_format(cls, Format.JSON)
    return cls


def xml_format(cls: type[T]) -> type[T]:
    """クラスをXML形式として登録するデコレータ。"""

    register_format(cls, Format.XML)
    return cls


__all__ = [
    "Codec",
    "CodecRegistry",
    "decode_payload",
    "default_registry",
    "encode_payload",
    "format_for",
    "json_format",
    "register_codec",
    "register_format",
    "xml_format",
]
