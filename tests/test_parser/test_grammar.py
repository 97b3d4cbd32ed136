# tests/test_parser/test_grammar.py

import pytest

from gencad.parser import GrammarError
from gencad.parser import grammar
from gencad.types import (
    Attribute,
    CircleRef,
    CircularArcRef,
    Dimension,
    DimensionUnit,
    EllipticalArcRef,
    InsertType,
    Layer,
    LayerName,
    LineRef,
    Mirror,
    PadType,
    RectangleRef,
    Text,
    TextPar,
    XYRef,
)


class TestNumbers:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0.0),
        ("-100", -100.0),
        ("+2.5", 2.5),
        ("1.", 1.0),
        ("-.5", -0.5),
        ("9.52527", 9.52527),
        ("1e3", 1000.0),
        ("2.5E-2", 0.025),
    ])
    def test_number_accepts_decimal_forms(self, text, expected):
        value, remainder = grammar.number(text)
        assert value == pytest.approx(expected)
        assert remainder == ""

    def test_number_leaves_the_rest_of_the_parameter(self):
        assert grammar.number("12 34") == (12.0, " 34")

    @pytest.mark.parametrize("text", ["nan", "NaN", "inf", "-inf", "infinity", "Infinity", "", "abc", "."])
    def test_number_rejects_non_numeric_and_non_finite_tokens(self, text):
        with pytest.raises(GrammarError) as excinfo:
            grammar.number(text)
        assert excinfo.value.expected == "number"
        assert excinfo.value.remainder == text

    @pytest.mark.parametrize("text", ["1e400", "-1e400", "1" * 400])
    def test_number_rejects_overflow_to_infinity(self, text):
        with pytest.raises(GrammarError) as excinfo:
            grammar.number(text)
        assert excinfo.value.expected == "finite number"
        assert excinfo.value.remainder == text

    def test_positive_integer_bounds(self):
        assert grammar.positive_integer("0") == (0, "")
        assert grammar.positive_integer("65535") == (65535, "")
        assert grammar.positive_integer("+7 x") == (7, " x")

    def test_positive_integer_rejects_negative_values(self):
        with pytest.raises(GrammarError) as excinfo:
            grammar.positive_integer("-1")
        assert excinfo.value.expected == "positive integer"

    def test_positive_integer_rejects_values_above_16_bits(self):
        with pytest.raises(GrammarError) as excinfo:
            grammar.positive_integer("65536")
        assert "0-65535" in excinfo.value.expected


class TestStrings:

    def test_unquoted_string_stops_at_the_first_space(self):
        assert grammar.string("p102_4 TOP") == ("p102_4", " TOP")

    def test_quoted_string_keeps_spaces(self):
        assert grammar.string('"BIS 9600" rest') == ("BIS 9600", " rest")

    def test_quoted_string_unescapes_double_quotes(self):
        value, remainder = grammar.quoted_string(r'"say \"hi\" now"')
        assert value == 'say "hi" now'
        assert remainder == ""

    def test_lone_backslash_is_literal(self):
        assert grammar.quoted_string(r'"C:\temp"') == ("C:\\temp", "")

    def test_empty_quoted_string(self):
        assert grammar.quoted_string('""') == ("", "")

    def test_unterminated_quoted_string(self):
        with pytest.raises(GrammarError) as excinfo:
            grammar.quoted_string('"never closed')
        assert excinfo.value.expected == "closing double quote"
        assert excinfo.value.remainder == ""

    def test_unquoted_string_may_not_start_with_a_quote(self):
        with pytest.raises(GrammarError):
            grammar.unquoted_string('"abc')

    def test_text_tail_takes_the_rest_of_the_parameter(self):
        assert grammar.text_tail("Device PANEL") == ("Device PANEL", "")
        assert grammar.text_tail("HEADER 2X10P G/F 2.54 BLK/C//LONG SHOUNG/1102014270") == (
            "HEADER 2X10P G/F 2.54 BLK/C//LONG SHOUNG/1102014270", ""
        )

    def test_text_tail_prefers_a_quoted_string(self):
        assert grammar.text_tail('"Rev 566g" ') == ("Rev 566g", " ")


class TestEnumerations:

    @pytest.mark.parametrize("text, expected", [
        ("0", Mirror.NOT),
        ("MIRRORX", Mirror.MIRRORX),
        ("MIRRORY", Mirror.MIRRORY),
    ])
    def test_mirror(self, text, expected):
        assert grammar.mirror(text) == (expected, "")

    def test_mirror_rejects_unknown_names(self):
        with pytest.raises(GrammarError) as excinfo:
            grammar.mirror("MIRRORZ")
        assert "mirror" in excinfo.value.expected

    def test_pad_type_and_insert_type(self):
        assert grammar.pad_type("RECTANGULAR 0") == (PadType.RECTANGULAR, " 0")
        assert grammar.insert_type("SMD") == (InsertType.SMD, "")

    def test_flip_and_filled_flags(self):
        assert grammar.flip("FLIP") == (True, "")
        assert grammar.flip("0") == (False, "")
        assert grammar.filled("YES") == (True, "")
        with pytest.raises(GrammarError):
            grammar.flip("1")
        with pytest.raises(GrammarError):
            grammar.filled("NO")

    @pytest.mark.parametrize("text, expected", [
        ("TOP", Layer(LayerName.TOP)),
        ("SOLDERMASK_BOTTOM", Layer(LayerName.SOLDERMASK_BOTTOM)),
        ("INNER", Layer(LayerName.INNER)),
        ("INNER2", Layer(LayerName.INNER, 2)),
        ("POWER1", Layer(LayerName.POWER, 1)),
        ("GROUND3", Layer(LayerName.GROUND, 3)),
        ("LAYER12", Layer(LayerName.LAYER, 12)),
        ("LAYERSET4", Layer(LayerName.LAYERSET, 4)),
    ])
    def test_layer(self, text, expected):
        assert grammar.layer(text) == (expected, "")

    @pytest.mark.parametrize("text", ["POWER", "LAYER", "TOP1", "MIDDLE", "LAYER65536"])
    def test_layer_rejects_malformed_names(self, text):
        with pytest.raises(GrammarError):
            grammar.layer(text)

    def test_dimension(self):
        assert grammar.dimension("INCH") == (Dimension(DimensionUnit.INCH), "")
        assert grammar.dimension("MM100") == (Dimension(DimensionUnit.MM100), "")
        assert grammar.dimension("USER 1200") == (Dimension(DimensionUnit.USER, 1200), "")
        assert grammar.dimension("USERMM 10") == (Dimension(DimensionUnit.USERMM, 10), "")

    def test_user_dimension_requires_a_count(self):
        with pytest.raises(GrammarError):
            grammar.dimension("USER")
        with pytest.raises(GrammarError):
            grammar.dimension("FURLONG")


class TestCombinators:

    def test_parse_parameter_allows_trailing_spaces(self):
        assert grammar.parse_parameter("1 2   ", grammar.number, grammar.number) == (1.0, 2.0)

    def test_parse_parameter_rejects_leftover_text(self):
        with pytest.raises(GrammarError) as excinfo:
            grammar.parse_parameter("1 2 3", grammar.number, grammar.number)
        assert excinfo.value.expected == "end of parameter"
        assert excinfo.value.remainder == " 3"

    def test_values_need_a_separating_space(self):
        with pytest.raises(GrammarError) as excinfo:
            grammar.parse_parameter("1", grammar.number, grammar.number)
        assert excinfo.value.expected == "space"

    def test_parameter_builds_the_target_type(self):
        decode = grammar.parameter(grammar.number, grammar.number, into=XYRef)
        assert decode("3 -4") == XYRef(3.0, -4.0)

    def test_value_unwraps_a_single_value(self):
        assert grammar.value(grammar.number)("42") == 42.0


class TestGeometry:

    def test_line_circle_and_rectangle(self):
        assert grammar.value(grammar.line_ref)("1000 2000 1200 2000") == LineRef(XYRef(1000, 2000), XYRef(1200, 2000))
        assert grammar.value(grammar.circle_ref)("0 0 30") == CircleRef(XYRef(0, 0), 30)
        assert grammar.value(grammar.rectangle_ref)("-5.2 -5.2 10.4 10.4") == RectangleRef(XYRef(-5.2, -5.2), 10.4, 10.4)

    def test_line_with_missing_coordinate(self):
        with pytest.raises(GrammarError):
            grammar.value(grammar.line_ref)("1 2 3")

    def test_arc_with_six_numbers_is_circular(self):
        arc = grammar.value(grammar.arc_ref)("1200 2000 1200 3000 1180 2500")
        assert arc == CircularArcRef(XYRef(1200, 2000), XYRef(1200, 3000), XYRef(1180, 2500))

    def test_arc_with_eight_numbers_is_elliptical(self):
        arc = grammar.value(grammar.arc_ref)("0 0 10 0 5 0 5 2")
        assert arc == EllipticalArcRef(XYRef(0, 0), XYRef(10, 0), XYRef(5, 0), 5.0, 2.0)

    @pytest.mark.parametrize("text", ["0 0 10 0 5", "0 0 10 0 5 0 5", "0 0 10 0 5 0 5 2 1"])
    def test_arc_with_any_other_arity_is_rejected(self, text):
        with pytest.raises(GrammarError):
            grammar.value(grammar.arc_ref)(text)

    def test_attribute(self):
        assert grammar.value(grammar.attribute)('alpha m_part "BIS 9600"') == Attribute("alpha", "m_part", "BIS 9600")

    def test_attribute_needs_three_strings(self):
        with pytest.raises(GrammarError):
            grammar.value(grammar.attribute)("alpha m_part")

    def test_text_line(self):
        text = grammar.value(grammar.text_line)("50 -50 100 90 0 TOP D102 42 -50 500 200")
        assert text == Text(
            XYRef(50, -50),
            TextPar(100, 90, Mirror.NOT, Layer(LayerName.TOP), "D102", RectangleRef(XYRef(42, -50), 500, 200)),
        )
