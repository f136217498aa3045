"""Round-trip tests for TOON encode/decode."""

import sys
from pathlib import Path

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from toonify import DecodeOptions, EncodeOptions, decode, encode


def roundtrip(data, indent=2, delimiter=","):
    """Encode then decode, returning the result."""
    encoded = encode(data, EncodeOptions(indent=indent, delimiter=delimiter))
    return decode(encoded, DecodeOptions(indent=indent))


TRICKY_STRINGS = [
    "",
    " ",
    "null",
    "true",
    "false",
    "42",
    "-7",
    "3.5",
    "1e5",
    "007",
    "a:b",
    "a,b",
    "a|b",
    'say "hi"',
    'a\\"b',
    "line\nbreak",
    "cr\rhere",
    "tab\there",
    " lead",
    "trail ",
    "{}",
    "[]",
    "-",
    "- item",
    "[2]{a}:",
    "C:\\path\\",
    "ünïcödé",
]


class TestRoundtripPrimitives:
    """Test round-trip for primitive values."""

    def test_null(self):
        assert roundtrip(None) is None

    def test_booleans(self):
        assert roundtrip(True) is True
        assert roundtrip(False) is False

    def test_integers(self):
        for value in (0, 42, -17, 2**63 - 1, -(2**63)):
            result = roundtrip(value)
            assert result == value
            assert isinstance(result, int)

    def test_floats(self):
        for value in (3.14, -2.5, 0.1, 1e-7, 1e20, 1.5e300):
            assert roundtrip(value) == value

    @pytest.mark.parametrize("value", TRICKY_STRINGS)
    def test_strings(self, value):
        assert roundtrip(value) == value


class TestQuotingIdempotence:
    """Strings that need quoting survive every position they can appear in."""

    @pytest.mark.parametrize("value", TRICKY_STRINGS)
    def test_as_object_value(self, value):
        assert roundtrip({"k": value}) == {"k": value}

    @pytest.mark.parametrize("value", TRICKY_STRINGS)
    def test_as_object_key(self, value):
        assert roundtrip({value: 1}) == {value: 1}

    @pytest.mark.parametrize("value", TRICKY_STRINGS)
    def test_as_list_item(self, value):
        assert roundtrip([value, "x"]) == [value, "x"]

    @pytest.mark.parametrize("delimiter", [",", "|", "\t"])
    @pytest.mark.parametrize("value", TRICKY_STRINGS)
    def test_as_tabular_cell(self, value, delimiter):
        data = [{"v": value, "n": 1}, {"v": "x", "n": 2}]
        assert roundtrip(data, delimiter=delimiter) == data


class TestRoundtripObjects:
    """Test round-trip for objects."""

    def test_simple_object(self):
        data = {"name": "Alice", "age": 30}
        assert roundtrip(data) == data

    def test_nested_object(self):
        data = {"user": {"name": "Bob", "role": "admin"}}
        assert roundtrip(data) == data

    def test_empty_containers(self):
        data = {"obj": {}, "arr": [], "nested": {"inner": {}}}
        assert roundtrip(data) == data

    def test_deeply_nested(self):
        data = {"a": {"b": {"c": {"d": {"e": 1}}}}}
        assert roundtrip(data) == data

    def test_empty_root_object(self):
        assert roundtrip({}) == {}


class TestRoundtripArrays:
    """Test round-trip for arrays."""

    def test_primitive_list(self):
        data = {"items": [1, "two", True, None, 2.5]}
        assert roundtrip(data) == data

    def test_tabular_array(self):
        data = [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
        assert roundtrip(data) == data

    def test_tabular_with_reordered_keys(self):
        data = [{"id": 1, "name": "Alice"}, {"name": "Bob", "id": 2}]
        assert roundtrip(data) == data

    def test_tabular_with_nulls(self):
        data = {"rows": [{"a": None, "b": 1}, {"a": "x", "b": None}]}
        assert roundtrip(data) == data

    def test_list_of_lists(self):
        data = [[1, 2], [], [[3]], [{"a": 1}]]
        assert roundtrip(data) == data

    def test_non_uniform_objects(self):
        data = [{"a": 1}, {"b": {"c": [1, 2]}}, {}]
        assert roundtrip(data) == data


class TestRoundtripComplex:
    """Test round-trip for mixed documents."""

    DATA = {
        "users": [
            {"id": 1, "name": "Alice", "role": "admin"},
            {"id": 2, "name": "Bob", "role": "user"},
        ],
        "active": True,
        "count": 2,
        "meta": {"tags": ["a", "b"], "owner": None, "ratio": 0.75},
        "matrix": [[1, 2], [3, 4]],
    }

    def test_default_options(self):
        assert roundtrip(self.DATA) == self.DATA

    @pytest.mark.parametrize("indent", [1, 3, 4, 8])
    def test_indent(self, indent):
        assert roundtrip(self.DATA, indent=indent) == self.DATA

    @pytest.mark.parametrize("delimiter", ["|", "\t"])
    def test_delimiter(self, delimiter):
        assert roundtrip(self.DATA, delimiter=delimiter) == self.DATA

    def test_encoding_is_deterministic(self):
        assert encode(self.DATA) == encode(dict(self.DATA))
