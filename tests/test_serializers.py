"""Tests for configuration serializers and format resolution."""

import io
import json
import logging

import pytest

from installer_console.serializers import (
    Format,
    SerializationError,
    create,
    resolve_format,
)


# ---------------------------------------------------------------------------
# resolve_format
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value", [None, "", "   "])
def test_resolve_blank_is_json_without_warning(value, caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_format(value) is Format.JSON
    assert caplog.records == []


@pytest.mark.parametrize("fmt", list(Format))
def test_resolve_known_names(fmt):
    assert resolve_format(fmt.value) is fmt


@pytest.mark.parametrize("value", ["BOGUS", "properties", "Json"])
def test_resolve_unknown_logs_and_falls_back(value, caplog):
    with caplog.at_level(logging.WARNING, logger="installer_console.serializers"):
        assert resolve_format(value) is Format.JSON
    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING


# ---------------------------------------------------------------------------
# Encoders
# ---------------------------------------------------------------------------

def test_serialize_writes_utf8_bytes():
    buf = io.BytesIO()
    create(Format.JSON).serialize({"name": "café"}, buf)
    assert buf.getvalue() == '{\n  "name": "café"\n}\n'.encode("utf-8")


def test_json_sorted_and_typed():
    text = create(Format.JSON).dumps({"b": 2, "a": True, "c": ["x", "y"]})
    assert json.loads(text) == {"a": True, "b": 2, "c": ["x", "y"]}
    assert text.index('"a"') < text.index('"b"') < text.index('"c"')


@pytest.mark.parametrize("value", [float("nan"), float("inf"), [1.0, float("-inf")]])
def test_json_rejects_non_finite_floats(value):
    with pytest.raises(SerializationError):
        create(Format.JSON).dumps({"x": value})


def test_properties_simple():
    assert create(Format.PROPERTIES).dumps({"x": "1"}) == "x=1\n"


def test_properties_escaping():
    text = create(Format.PROPERTIES).dumps({
        "a key": "x=y:z",
        "lead": " v w",
        "uni": "é\u20ac",
        "path": "C:\\tmp\n#1!",
    })
    assert text.splitlines() == [
        "a\\ key=x\\=y\\:z",
        "lead=\\ v w",
        "path=C\\:\\\\tmp\\n\\#1\\!",
        "uni=\\u00E9\\u20AC",
    ]


def test_properties_non_bmp_uses_surrogates():
    assert create(Format.PROPERTIES).dumps({"e": "\U0001F600"}) == "e=\\uD83D\\uDE00\n"


def test_properties_values_flattened():
    text = create(Format.PROPERTIES).dumps({"flag": False, "list": ["a", "b"], "n": 3})
    assert text == "flag=false\nlist=a,b\nn=3\n"


def test_felix_config():
    text = create(Format.CONFIG).dumps({
        "s": 'say "hi"',
        "n": 5,
        "b": True,
        "f": 1.5,
        "arr": ["a", "b"],
        "ints": [1, 2],
        "empty": [],
    })
    assert text.splitlines() == [
        'arr=["a","b"]',
        'b=B"true"',
        "empty=[]",
        'f=D"1.5"',
        'ints=L["1","2"]',
        'n=L"5"',
        's="say \\"hi\\""',
    ]


def test_felix_config_escapes_key():
    assert create(Format.CONFIG).dumps({"a b=c": "v"}) == 'a\\ b\\=c="v"\n'


def test_properties_xml():
    text = create(Format.PROPERTIES_XML).dumps({'q"': "1", "k": "a<b&c"})
    assert text.splitlines() == [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        '<!DOCTYPE properties SYSTEM "http://java.sun.com/dtd/properties.dtd">',
        "<properties>",
        '<entry key="k">a&lt;b&amp;c</entry>',
        '<entry key="q&quot;">1</entry>',
        "</properties>",
    ]


@pytest.mark.parametrize("fmt", list(Format))
def test_unsupported_value_raises(fmt):
    with pytest.raises(SerializationError):
        create(fmt).dumps({"nested": {"a": 1}})
    with pytest.raises(SerializationError):
        create(fmt).dumps({"items": [object()]})
