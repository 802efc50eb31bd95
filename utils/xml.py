from __future__ import annotations

from uml_types import XmlValue


def xml_text(v: XmlValue) -> str:
    return "" if v is None else str(v)


def xml_bool(v: XmlValue, default: bool = False) -> bool:
    if v is None or v == "":
        return default
    return xml_text(v).strip().lower() in ("true", "1", "yes")


__all__ = ["xml_text", "xml_bool"]
