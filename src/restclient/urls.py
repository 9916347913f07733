"""URLとクエリ文字列の構築。"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from restclient.errors import RestConfigurationError

if TYPE_CHECKING:
    from restclient.config import RequestConfig
    from restclient.endpoint import Endpoint

# RFC3986 2.3 unreserved
_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)


def encode_uri_component(text: str) -> str:
    """文字列をRFC3986 2.3の非予約文字以外すべてパーセント符号化する。

    UTF-8バイト単位で符号化するため、多バイト文字は複数の ``%XX`` になる。

    Examples:
        >>> encode_uri_component("Hello, world!")
        'Hello%2C%20world%21'
    """

    return "".join(
        chr(byte) if byte in _UNRESERVED else f"%{byte:02X}"
        for byte in text.encode("utf-8")
    )


def decode_uri_component(text: str) -> str:
    """encode_uri_component の逆変換。

    Raises:
        ValueError: 不正な ``%`` 列を含む場合。
    """

    buffer = bytearray()
    index = 0
    while index < len(text):
        char = text[index]
        if char == "%":
            hex_digits = text[index + 1 : index + 3]
            if len(hex_digits) != 2:
                raise ValueError(f"不正なパーセント符号化です: {text!r}")
            buffer.append(int(hex_digits, 16))
            index += 3
            continue
        buffer.extend(char.encode("utf-8"))
        index += 1
    return buffer.decode("utf-8")


def url_parameters(params: Iterable[tuple[str, str]]) -> str:
    """キー・値の列からクエリ文字列を構築する。

    Returns:
        ``?k1=v1&k2=v2`` 形式。空なら空文字列。
    """

    pairs = [
        f"{encode_uri_component(str(key))}={encode_uri_component(str(value))}"
        for key, value in params
    ]
    if not pairs:
        return ""
    return "?" + "&".join(pairs)


def build_url(config: RequestConfig, endpoint: Endpoint) -> str:
    """設定とエンドポイントから完全なURLを構築する。

    Raises:
        RestConfigurationError: ベースURLが未設定の場合。
    """

    if not config.base_url:
        raise RestConfigurationError("ベースURLが設定されていません。")
    path = endpoint.pagename(config)
    query = url_parameters(endpoint.parameters(config))
    return f"{config.base_url}/{path}{query}"
