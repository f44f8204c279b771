import pytest

from neotx.stack_item_type import StackItemType


def test_from_string_lower_case():
    assert StackItemType.from_string("integer") is StackItemType.INTEGER


def test_from_string_ignores_case():
    assert StackItemType.from_string("ByteString") is StackItemType.BYTE_STRING
    assert StackItemType.from_string("INTEROPINTERFACE") is StackItemType.INTEROP_INTERFACE


def test_display_name():
    assert str(StackItemType.from_string("interopinterface")) == "InteropInterface"
    assert str(StackItemType.from_string("bytestring")) == "ByteString"


def test_values_fixed_by_format():
    assert StackItemType.from_string("bytestring") == 0x28
    assert StackItemType.from_string("map") == 0x48
    assert StackItemType(0x41) is StackItemType.from_string("struct")


@pytest.mark.parametrize("member", list(StackItemType))
def test_round_trip_through_name(member):
    assert StackItemType.from_string(str(member)) is member


def test_unknown_name_raises():
    with pytest.raises(ValueError):
        StackItemType.from_string("float")