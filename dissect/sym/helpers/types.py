from __future__ import annotations

from dataclasses import dataclass

from dissect.sym.exception import InvalidTypeError
from dissect.sym.helpers.c_sym import c_sym

TYPE_MASK = 0xFFFF
BASE_MASK = 0xF

# Six 2-bit modifier slots follow the base type
MOD_SHIFT = 4
MOD_BITS = 2
MOD_MASK = 0x3
MOD_SLOTS = 6

TAG_BASES = (c_sym.Base.STRUCT, c_sym.Base.UNION, c_sym.Base.ENUM)


def decode_mods(value: int) -> tuple:
    """Decode the modifier stack of an encoded type value.

    The first slot is the outermost modifier, i.e. the one closest to the declared name. The stack ends at the first
    empty slot; a modifier following an empty slot can not be produced by the toolchain.

    Args:
        value: The 16-bit encoded type value.

    Returns:
        A `tuple` of `TypeMod` values in read order.

    Raises:
        InvalidTypeError if a modifier follows an empty slot.
    """

    mods = []
    for slot in range(MOD_SLOTS):
        mod = (value >> (MOD_SHIFT + slot * MOD_BITS)) & MOD_MASK
        if mod == 0:
            if value >> (MOD_SHIFT + slot * MOD_BITS):
                raise InvalidTypeError(value, f"modifier after empty slot {slot}")
            break
        mods.append(c_sym.TypeMod(mod))

    return tuple(mods)


@dataclass(frozen=True)
class Type:
    """A decoded type value, the base type plus the modifiers applied to it.

    Args:
        value: The raw 16-bit value.
        base: The `Base` type, STRUCT, UNION and ENUM refer to a tag defined by other symbols.
        mods: The `TypeMod` values in read order, outermost first.
    """

    value: int
    base: int
    mods: tuple = ()

    @classmethod
    def decode(cls, value: int) -> Type:
        """Decode a 16-bit encoded type value.

        Raises:
            InvalidTypeError if the value is not a valid encoding.
        """

        if not 0 <= value <= TYPE_MASK:
            raise InvalidTypeError(value, "value exceeds 16 bits")

        return cls(value=value, base=c_sym.Base(value & BASE_MASK), mods=decode_mods(value))

    @property
    def narrays(self) -> int:
        """The number of array modifiers in the modifier stack."""
        return sum(1 for mod in self.mods if mod == c_sym.TypeMod.ARY)

    @property
    def is_tag_reference(self) -> bool:
        return self.base in TAG_BASES

    @property
    def tag_kind(self) -> int | None:
        """The tag reference base type (STRUCT, UNION or ENUM), or `None` for other base types."""
        return self.base if self.is_tag_reference else None

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        # ARY ARY SHORT
        return " ".join([mod.name for mod in self.mods] + [self.base.name])
