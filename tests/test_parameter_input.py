import pytest

from kamayan.parameter_input import ParameterInput

DECK = """
# leading comment
<block1>
var0 = hello   # trailing comment
var1 = 8
var2 = true
var3 = -4.6
<block2>
flag = 0
name = Mixed Case
"""


@pytest.fixture
def pin():
    deck = ParameterInput()
    deck.load_from_string(DECK)
    return deck


def test_reads_existing_values(pin):
    assert pin.get_or_add_string("block1", "var0", "world") == "hello"
    assert pin.get_or_add_integer("block1", "var1", 0) == 8
    assert pin.get_or_add_boolean("block1", "var2", False) is True
    assert pin.get_or_add_real("block1", "var3", 131.68) == -4.6
    assert pin.get_or_add_boolean("block2", "flag", True) is False
    assert pin.get_or_add_string("block2", "name", "x") == "Mixed Case"


def test_missing_values_are_added(pin):
    assert ("block0", "def1") not in pin
    assert pin.get_or_add_integer("block0", "def1", 5) == 5
    assert ("block0", "def1") in pin
    assert pin.get_or_add_integer("block0", "def1", 9) == 5


def test_real_round_trip(pin):
    value = 1.7976931348623157e308
    assert pin.get_or_add_real("time", "tlim", value) == value
    assert pin.get_or_add_real("time", "tlim", 0.0) == value


def test_boolean_round_trip(pin):
    assert pin.get_or_add_boolean("b", "on", True) is True
    assert pin.get_or_add_boolean("b", "on", False) is True
    assert pin.get_or_add_boolean("b", "off", False) is False
    assert pin.get_or_add_boolean("b", "off", True) is False


def test_invalid_boolean_raises(pin):
    pin.load_from_string("<b>\nx = maybe\n")
    with pytest.raises(ValueError):
        pin.get_or_add_boolean("b", "x", True)


def test_invalid_integer_raises(pin):
    with pytest.raises(ValueError):
        pin.get_or_add_integer("block1", "var0", 0)


def test_line_without_equals_raises():
    deck = ParameterInput()
    with pytest.raises(ValueError):
        deck.load_from_string("<b>\njust words\n")


def test_parameter_outside_block_raises():
    deck = ParameterInput()
    with pytest.raises(ValueError):
        deck.load_from_string("x = 1\n")


def test_unclosed_block_raises():
    deck = ParameterInput()
    with pytest.raises(ValueError):
        deck.load_from_string("<b\nx = 1\n")


def test_missing_string_raises(pin):
    with pytest.raises(KeyError):
        pin.get_string("nope", "x")


def test_load_from_file(tmp_path):
    path = tmp_path / "deck.in"
    path.write_text(DECK, encoding="utf-8")
    deck = ParameterInput()
    deck.load_from_file(path)
    assert deck.get_string("block1", "var1") == "8"
    assert list(deck.blocks()) == ["block1", "block2"]