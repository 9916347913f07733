"""XMLコーデック。

XML形式の型は ``from_xml(element)`` クラスメソッドで復号し、
``to_xml()`` が返す要素で符号化する。
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from restclient.errors import RestDecodeError


def xml_text(element: ET.Element | None, path: str | None = None) -> str | None:
    """要素（または path で選んだ子要素）の本文を返す。見つからなければNone。"""

    if element is None:
        return None
    target = element if path is None else element.find(path)
    if target is None:
        return None
    return target.text


def xml_attr(element: ET.Element | None, attr: str, path: str | None = None) -> str | None:
    """要素（または path で選んだ子要素）の属性値を返す。"""

    if element is None:
        return None
    target = element if path is None else element.find(path)
    if target is None:
        return None
    return target.get(attr)


def decode_xml(data: bytes, tp: Any) -> Any:
    """XML本文を型 tp の値へ復号する。

    Raises:
        RestDecodeError: 本文がXMLでない、または型が from_xml を持たない場合。
    """

    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise RestDecodeError(f"XML本文を解析できませんでした: {exc}") from exc
    if tp is ET.Element:
        return root
    from_xml = getattr(tp, "from_xml", None)
    if not callable(from_xml):
        raise RestDecodeError(f"{getattr(tp, '__qualname__', tp)} は from_xml を定義していません。")
    return from_xml(root)


def encode_xml(value: Any) -> bytes:
    """値をXML本文へ符号化する。"""

    element = value if isinstance(value, ET.Element) else value.to_xml()
    return ET.tostring(element, encoding="utf-8", xml_declaration=True)
