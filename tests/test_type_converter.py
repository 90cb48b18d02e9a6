"""Tests for value coercion and structure walking."""

import json
from decimal import Decimal

import pytest

from message_resolver.lib.type_converter import TypeConverter, dumps


class TestCoerceLeaf:
    """Tests for coerce_leaf."""

    def test_blank_returned_unchanged(self, converter):
        """Test blank text is returned as given."""
        assert converter.coerce_leaf("") == ""
        assert converter.coerce_leaf("   ") == "   "
        assert converter.coerce_leaf(None) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("TRUE", True),
            ("False", False),
            (" false ", False),
        ],
    )
    def test_booleans_case_insensitive(self, converter, raw, expected):
        """Test boolean literals in any case."""
        assert converter.coerce_leaf(raw) is expected

    @pytest.mark.parametrize("raw", ["yes", "no", "t", "truthy"])
    def test_boolean_like_words_stay_text(self, converter, raw):
        """Test only true/false are booleans."""
        assert converter.coerce_leaf(raw) == raw

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("42", Decimal("42")),
            ("-3.5", Decimal("-3.5")),
            ("+7", Decimal("7")),
            (".5", Decimal("0.5")),
            ("1e3", Decimal("1000")),
            (" 12 ", Decimal("12")),
        ],
    )
    def test_numbers(self, converter, raw, expected):
        """Test plain decimal literals become Decimals."""
        result = converter.coerce_leaf(raw)
        assert isinstance(result, Decimal)
        assert result == expected

    def test_number_precision_kept(self, converter):
        """Test decimal fractions and large integers are exact."""
        assert converter.coerce_leaf("0.1") == Decimal("0.1")
        big = "123456789012345678901234567890"
        assert converter.coerce_leaf(big) == int(big)

    @pytest.mark.parametrize("raw", ["1,000", "NaN", "Infinity", "1_000", "12abc", "0x1F", "1.2.3"])
    def test_number_like_text_stays_text(self, converter, raw):
        """Test text that is not a plain decimal literal is not a number."""
        assert converter.coerce_leaf(raw) == raw

    def test_double_quotes_stripped(self, converter):
        """Test one pair of surrounding double quotes is removed."""
        assert converter.coerce_leaf('"hello"') == "hello"
        assert converter.coerce_leaf('""') == ""
        assert converter.coerce_leaf('""x""') == '"x"'

    def test_single_quote_char_kept(self, converter):
        """Test a lone double quote is not a quoted string."""
        assert converter.coerce_leaf('"') == '"'

    def test_quoted_number_stays_string(self, converter):
        """Test quoting protects a value from number coercion."""
        assert converter.coerce_leaf('"42"') == "42"

    def test_plain_text_returned_untrimmed(self, converter):
        """Test text that matches nothing comes back as given."""
        assert converter.coerce_leaf(" hello world ") == " hello world "

    def test_json_object(self, converter):
        """Test embedded JSON objects are parsed and walked."""
        assert converter.coerce_leaf('{"a": "1", "b": [true, "false"]}') == {"a": 1, "b": [True, False]}

    def test_json_array(self, converter):
        """Test embedded JSON arrays are parsed and walked."""
        assert converter.coerce_leaf("[1, 2, 3]") == [1, 2, 3]

    def test_json_with_smart_quotes(self, converter):
        """Test decorative quotes inside embedded JSON are normalized."""
        assert converter.coerce_leaf("{“a”: 1}") == {"a": 1}

    def test_invalid_json_stays_text(self, converter):
        """Test bracketed text that is not JSON is kept."""
        assert converter.coerce_leaf("{not json}") == "{not json}"
        assert converter.coerce_leaf("[1, 2") == "[1, 2"

    def test_json_disabled(self, converter):
        """Test allow_json=False leaves JSON text alone."""
        assert converter.coerce_leaf("[1,2]", allow_json=False) == "[1,2]"

    def test_relaxed_json_value(self, converter):
        """Test hand-written JSON values are parsed."""
        assert converter.coerce_leaf("{name: 'bob', ids: ['1', 2,]}") == {"name": "bob", "ids": [1, 2]}

    def test_relaxed_grammar_values_only(self, converter):
        """Test whole documents are read with the standard grammars only."""
        value_names = [strategy.name for strategy in converter.strategies]
        document_names = [strategy.name for strategy in converter.document_strategies]

        assert value_names == ["strict", "lenient", "relaxed"]
        assert document_names == ["strict", "lenient"]


class TestWalk:
    """Tests for walk."""

    def test_scalars_pass_through(self, converter):
        """Test non-string leaves are unchanged."""
        assert converter.walk(None) is None
        assert converter.walk(True) is True
        assert converter.walk(5) == 5

    def test_string_leaves_coerced(self, converter):
        """Test strings inside documents are re-coerced."""
        document = {"count": "42", "flag": "TRUE", "items": ["1", "x"], "name": "alice"}
        assert converter.walk(document) == {"count": 42, "flag": True, "items": [1, "x"], "name": "alice"}

    def test_key_order_kept(self, converter):
        """Test walking keeps key order."""
        document = {"z": "1", "a": "2", "m": "3"}
        assert list(converter.walk(document)) == ["z", "a", "m"]

    def test_does_not_mutate_input(self, converter):
        """Test a new document is built."""
        document = {"a": "1", "b": ["2"]}
        converter.walk(document)
        assert document == {"a": "1", "b": ["2"]}

    def test_nested_string_json_unpacked(self, converter):
        """Test JSON encoded inside strings is unpacked at every level."""
        inner = json.dumps({"c": "7"})
        middle = json.dumps({"b": inner})
        assert converter.walk({"a": middle}) == {"a": {"b": {"c": 7}}}

    def test_max_depth_limits_unpacking(self):
        """Test string JSON deeper than max_depth stays text."""
        inner = json.dumps({"c": 1})
        middle = json.dumps({"b": inner})

        shallow = TypeConverter(max_depth=1)
        assert shallow.walk({"a": middle}) == {"a": {"b": inner}}

        deeper = TypeConverter(max_depth=2)
        assert deeper.walk({"a": middle}) == {"a": {"b": {"c": 1}}}

    def test_leaves_still_coerced_past_max_depth(self):
        """Test the depth limit only stops JSON unpacking."""
        converter = TypeConverter(max_depth=1)
        middle = json.dumps({"b": json.dumps({"c": 1}), "n": "5"})
        assert converter.walk({"a": middle})["a"]["n"] == 5


class TestToNative:
    """Tests for to_native."""

    def test_integral_decimal_becomes_int(self):
        """Test whole-number Decimals become ints."""
        value = TypeConverter.to_native(Decimal("42"))
        assert value == 42
        assert type(value) is int

    def test_positive_exponent_becomes_int(self):
        """Test Decimals written with an exponent still become ints."""
        assert TypeConverter.to_native(Decimal("1E+2")) == 100

    def test_fraction_becomes_float(self):
        """Test fractional Decimals become floats."""
        value = TypeConverter.to_native(Decimal("1.50"))
        assert value == 1.5
        assert type(value) is float

    def test_out_of_range_kept_as_text(self):
        """Test a Decimal no float can hold is kept as its decimal string."""
        assert TypeConverter.to_native(Decimal("1E+5000")) == "1E+5000"

    def test_nested(self):
        """Test containers are converted recursively."""
        value = {"a": [Decimal("1"), {"b": Decimal("0.25")}], "c": "x", "d": True}
        assert TypeConverter.to_native(value) == {"a": [1, {"b": 0.25}], "c": "x", "d": True}


def test_dumps():
    """Test serialization of structured values."""
    assert dumps({"a": Decimal("1.5"), "b": [Decimal("2")], "c": None}) == '{"a": 1.5, "b": [2], "c": null}'


def test_dumps_keeps_unicode():
    """Test non-ASCII text is written as is."""
    assert dumps({"city": "Zürich"}) == '{"city": "Zürich"}'


def test_dumps_plain_string():
    """Test pass-through messages serialize as JSON strings."""
    assert dumps("plain") == '"plain"'
