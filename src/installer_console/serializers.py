"""
Configuration serializers: one encoder per supported output format.

Every serializer writes UTF-8 bytes for a properties mapping to a binary
stream. Unsupported value types raise SerializationError; callers do not
recover from it.
"""

import json
import logging
from enum import Enum
from typing import Any, BinaryIO, Dict, List, Mapping, Optional
from xml.sax.saxutils import escape as xml_escape

logger = logging.getLogger(__name__)


class SerializationError(ValueError):
    """A configuration value cannot be expressed in the requested format."""


class Format(str, Enum):
    JSON = "JSON"
    CONFIG = "CONFIG"
    PROPERTIES = "PROPERTIES"
    PROPERTIES_XML = "PROPERTIES_XML"

    @property
    def label(self) -> str:
        return _FORMAT_LABELS[self]


_FORMAT_LABELS = {
    Format.JSON: "OSGi Configurator JSON",
    Format.CONFIG: "Apache Felix Config",
    Format.PROPERTIES: "Java Properties",
    Format.PROPERTIES_XML: "Java Properties (XML)",
}

DEFAULT_FORMAT = Format.JSON


def resolve_format(value: Optional[str]) -> Format:
    """Map a request parameter to a Format. Blank gives the default; unknown names log and fall back."""
    if value is None or not value.strip():
        return DEFAULT_FORMAT
    try:
        return Format[value]
    except KeyError:
        logger.warning("Illegal parameter 'format' given: %r, using %s", value, DEFAULT_FORMAT.value)
        return DEFAULT_FORMAT


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

_SCALARS = (str, bool, int, float)


def _check_value(key: str, value: Any) -> None:
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, _SCALARS):
                raise SerializationError(
                    f"Unsupported value type {type(item).__name__} in '{key}'")
    elif not isinstance(value, _SCALARS):
        raise SerializationError(f"Unsupported value type {type(value).__name__} for '{key}'")


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flat_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_scalar_text(v) for v in value)
    return _scalar_text(value)


def _sorted_items(properties: Mapping[str, Any]) -> List[tuple]:
    items = sorted(properties.items())
    for key, value in items:
        _check_value(key, value)
    return items


# ---------------------------------------------------------------------------
# Serializers
# ---------------------------------------------------------------------------

class ConfigurationSerializer:
    format: Format

    def serialize(self, properties: Mapping[str, Any], out: BinaryIO) -> None:
        out.write(self.dumps(properties).encode("utf-8"))

    def dumps(self, properties: Mapping[str, Any]) -> str:
        raise NotImplementedError


class JsonSerializer(ConfigurationSerializer):
    format = Format.JSON

    def dumps(self, properties: Mapping[str, Any]) -> str:
        _sorted_items(properties)
        try:
            text = json.dumps(dict(properties), indent=2, sort_keys=True,
                              ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            raise SerializationError(f"Value not representable in JSON: {e}") from e
        return text + "\n"


class ConfigSerializer(ConfigurationSerializer):
    """Apache Felix ``.config`` format: ``key=<type>"value"`` per line."""

    format = Format.CONFIG

    def dumps(self, properties: Mapping[str, Any]) -> str:
        lines = []
        for key, value in _sorted_items(properties):
            lines.append(f"{_felix_key(key)}={_felix_value(value)}")
        return "".join(line + "\n" for line in lines)


def _felix_type(value: Any) -> str:
    if isinstance(value, bool):
        return "B"
    if isinstance(value, int):
        return "L"
    if isinstance(value, float):
        return "D"
    return ""


def _felix_quote(text: str) -> str:
    out = ['"']
    for ch in text:
        if ch in ('"', "\\"):
            out.append("\\" + ch)
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\f":
            out.append("\\f")
        elif ch == "\b":
            out.append("\\b")
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _felix_key(key: str) -> str:
    return "".join("\\" + ch if ch in (" ", "=", "\\", '"', "[", "(", "{") else ch for ch in key)


def _felix_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        code = _felix_type(value[0]) if value else ""
        return code + "[" + ",".join(_felix_quote(_scalar_text(v)) for v in value) + "]"
    return _felix_type(value) + _felix_quote(_scalar_text(value))


class PropertiesSerializer(ConfigurationSerializer):
    """Java properties text; non-Latin-1 characters become unicode escapes."""

    format = Format.PROPERTIES

    def dumps(self, properties: Mapping[str, Any]) -> str:
        lines = []
        for key, value in _sorted_items(properties):
            lines.append(f"{_java_escape(key, escape_space=True)}={_java_escape(_flat_text(value))}")
        return "".join(line + "\n" for line in lines)


_JAVA_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


def _java_escape(text: str, escape_space: bool = False) -> str:
    out = []
    for i, ch in enumerate(text):
        if ch == " ":
            out.append("\\ " if i == 0 or escape_space else " ")
        elif ch in _JAVA_ESCAPES:
            out.append(_JAVA_ESCAPES[ch])
        elif ch in "=:#!\\":
            out.append("\\" + ch)
        elif ord(ch) < 0x20 or ord(ch) > 0x7E:
            out.append(_unicode_escape(ch))
        else:
            out.append(ch)
    return "".join(out)


def _unicode_escape(ch: str) -> str:
    code = ord(ch)
    if code > 0xFFFF:
        code -= 0x10000
        return f"\\u{0xD800 + (code >> 10):04X}\\u{0xDC00 + (code & 0x3FF):04X}"
    return f"\\u{code:04X}"


class PropertiesXmlSerializer(ConfigurationSerializer):
    """Java properties XML, the layout written by ``Properties.storeToXML``."""

    format = Format.PROPERTIES_XML

    def dumps(self, properties: Mapping[str, Any]) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
            '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">',
            "<properties>",
        ]
        for key, value in _sorted_items(properties):
            lines.append(
                f'<entry key="{xml_escape(key, {chr(34): "&quot;"})}">'
                f"{xml_escape(_flat_text(value))}</entry>"
            )
        lines.append("</properties>")
        return "".join(line + "\n" for line in lines)


_SERIALIZERS: Dict[Format, type] = {
    Format.JSON: JsonSerializer,
    Format.CONFIG: ConfigSerializer,
    Format.PROPERTIES: PropertiesSerializer,
    Format.PROPERTIES_XML: PropertiesXmlSerializer,
}


def create(fmt: Format) -> ConfigurationSerializer:
    """Return the serializer for a format."""
    return _SERIALIZERS[fmt]()
