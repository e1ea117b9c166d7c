import pytest

from dissect.sym.exception import InvalidTypeError
from dissect.sym.helpers.c_sym import c_sym
from dissect.sym.helpers.types import Type


def test_type_base_only() -> None:
    type_ = Type.decode(0x0004)

    assert type_.base == c_sym.Base.INT
    assert type_.mods == ()
    assert type_.narrays == 0
    assert str(type_) == "INT"


def test_type_modifier_order() -> None:
    # Slot 0 is PTR, slot 1 is FCN: pointer to function returning int
    type_ = Type.decode(0x0094)

    assert type_.base == c_sym.Base.INT
    assert type_.mods == (c_sym.TypeMod.PTR, c_sym.TypeMod.FCN)
    assert str(type_) == "PTR FCN INT"

    # Function returning pointer to int
    assert Type.decode(0x0064).mods == (c_sym.TypeMod.FCN, c_sym.TypeMod.PTR)


def test_type_arrays() -> None:
    type_ = Type.decode(0x00F3)

    assert type_.base == c_sym.Base.SHORT
    assert type_.mods == (c_sym.TypeMod.ARY, c_sym.TypeMod.ARY)
    assert type_.narrays == 2
    assert str(type_) == "ARY ARY SHORT"

    assert Type.decode(0x00D4).narrays == 1  # PTR ARY INT


def test_type_all_slots() -> None:
    value = 0x0002
    for slot in range(6):
        value |= 0x1 << (4 + slot * 2)

    type_ = Type.decode(value)
    assert type_.mods == (c_sym.TypeMod.PTR,) * 6
    assert type_.base == c_sym.Base.CHAR


@pytest.mark.parametrize(
    "value, tag_kind",
    [
        (0x0008, c_sym.Base.STRUCT),
        (0x0019, c_sym.Base.UNION),
        (0x003A, c_sym.Base.ENUM),
        (0x0004, None),
        (0x000C, None),
    ],
)
def test_type_tag_reference(value: int, tag_kind) -> None:
    type_ = Type.decode(value)

    assert type_.tag_kind == tag_kind
    assert type_.is_tag_reference is (tag_kind is not None)


def test_type_unsigned_bases() -> None:
    assert str(Type.decode(0x000C)) == "UCHAR"
    assert str(Type.decode(0x000D)) == "USHORT"
    assert str(Type.decode(0x000E)) == "UINT"
    assert str(Type.decode(0x000F)) == "ULONG"


def test_type_modifier_after_empty_slot() -> None:
    # Slot 0 empty, slot 1 PTR
    with pytest.raises(InvalidTypeError) as exc:
        Type.decode(0x0044)

    assert exc.value.value == 0x0044
    assert isinstance(exc.value, ValueError)


def test_type_too_wide() -> None:
    with pytest.raises(InvalidTypeError):
        Type.decode(0x10004)


def test_type_int() -> None:
    assert int(Type.decode(0x0034)) == 0x0034
    assert Type.decode(0x0034) == Type.decode(0x0034)
