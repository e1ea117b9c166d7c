from __future__ import annotations

import logging
from operator import attrgetter
from typing import TYPE_CHECKING, Iterable

from dissect.sym.c import types as c_types
from dissect.sym.helpers.c_sym import MEMBER_CLASSES, TAG_CLASSES, c_sym, class_label
from dissect.sym.helpers.symbol import Def, Def2

if TYPE_CHECKING:
    from dissect.sym.helpers.symbol import Symbol
    from dissect.sym.helpers.types import Type

log = logging.getLogger(__name__)

BASE_TYPES = {
    c_sym.Base.NULL: c_types.INT,
    c_sym.Base.VOID: c_types.VOID,
    c_sym.Base.CHAR: c_types.CHAR,
    c_sym.Base.SHORT: c_types.SHORT,
    c_sym.Base.INT: c_types.INT,
    c_sym.Base.LONG: c_types.LONG,
    c_sym.Base.FLOAT: c_types.FLOAT,
    c_sym.Base.DOUBLE: c_types.DOUBLE,
    c_sym.Base.MOE: c_types.INT,
    c_sym.Base.UCHAR: c_types.UCHAR,
    c_sym.Base.USHORT: c_types.USHORT,
    c_sym.Base.UINT: c_types.UINT,
    c_sym.Base.ULONG: c_types.ULONG,
}

# Tag classes and tag reference base types map onto the same aggregate types
TAG_TYPES = {
    c_sym.Class.STRTAG: c_sym.Base.STRUCT,
    c_sym.Class.UNTAG: c_sym.Base.UNION,
    c_sym.Class.ENTAG: c_sym.Base.ENUM,
}

AGGREGATE_TYPES = {
    c_sym.Base.STRUCT: c_types.StructType,
    c_sym.Base.UNION: c_types.UnionType,
    c_sym.Base.ENUM: c_types.EnumType,
}


class CBuilder:
    """Build C types and declarations out of the definitions of a symbol stream.

    Struct, union and enum definitions are opened by a tag symbol (STRTAG, UNTAG, ENTAG), followed by their members
    and closed by an EOS symbol. Aggregates are referenced by their tag, an aggregate referenced before it is defined
    is created empty and filled in once its definition is seen.
    """

    def __init__(self):
        self.tags: dict[tuple[int, str], c_types.CType] = {}
        self.aggregates: list[c_types.CType] = []
        self.typedefs: list[c_types.Typedef] = []
        self.declarations: list[c_types.Field] = []
        self._current = None

    def add_symbols(self, symbols: Iterable[Symbol]) -> CBuilder:
        for symbol in symbols:
            self.add_symbol(symbol)
        return self

    def add_symbol(self, symbol: Symbol) -> None:
        """Add a single symbol, symbols that do not carry a definition are skipped."""

        body = symbol.body
        if not isinstance(body, (Def, Def2)):
            log.debug("Skipping symbol without definition at 0x%x", symbol.offset)
            return

        sclass = body.sclass
        if sclass in TAG_CLASSES:
            self._open_aggregate(TAG_TYPES[sclass], body.name, body.size)
        elif sclass == c_sym.Class.EOS:
            self._current = None
        elif sclass in MEMBER_CLASSES:
            self._add_field(symbol)
        elif sclass == c_sym.Class.MOE:
            self._add_member(symbol)
        elif sclass == c_sym.Class.TPDEF:
            self.typedefs.append(c_types.Typedef(type=self.convert(body), name=body.name))
        else:
            self.declarations.append(
                c_types.Field(offset=symbol.value, size=body.size, type=self.convert(body), name=body.name)
            )

    def convert(self, body: Def | Def2) -> c_types.CType:
        """Convert the encoded type of a definition to a C type.

        The modifiers are applied innermost first. Every array modifier takes its length from the dimension group at
        the same position among the array modifiers, the last length of the group being the array length.
        """

        if isinstance(body, Def2):
            return build_type(body.type, self._base_type(body.type, body.tag), body.dims)
        return build_type(body.type, self._base_type(body.type, ""), ())

    def header(self) -> str:
        """Return the C syntax of all definitions, declarations are ordered by address."""

        blocks = []
        for aggregate in self.aggregates:
            # Anonymous structs and unions are inlined where they are used, enums are referenced by tag
            if not (isinstance(aggregate, c_types.StructType) and c_types.is_fake_tag(aggregate.tag)):
                blocks.append(f"{aggregate.definition()};")

        for typedef in self.typedefs:
            blocks.append(typedef.definition())

        for declaration in sorted(self.declarations, key=attrgetter("offset")):
            blocks.append(f"// address: 0x{declaration.offset:08X}\n{declaration};")

        return "\n\n".join(blocks) + "\n" if blocks else ""

    def _base_type(self, type_: Type, tag: str) -> c_types.CType:
        if type_.is_tag_reference:
            return self._tagged(type_.base, tag)
        return BASE_TYPES[type_.base]

    def tag(self, base: int, name: str) -> c_types.CType | None:
        """Return the struct, union or enum registered under a tag, or `None` if the tag was never seen."""
        return self.tags.get(_tag_key(base, name))

    def _tagged(self, base: int, tag: str) -> c_types.CType:
        key = _tag_key(base, tag)
        if key not in self.tags:
            log.debug("Creating %s %r before its definition", base.name.lower(), tag)
            self.tags[key] = AGGREGATE_TYPES[base](tag=tag)
        return self.tags[key]

    def _open_aggregate(self, base: int, tag: str, size: int) -> None:
        aggregate = self._tagged(base, tag)
        if aggregate in self.aggregates:
            # The same tag is defined again by another compilation unit, keep the first definition
            log.debug("Ignoring redefinition of %s", aggregate)
            aggregate = AGGREGATE_TYPES[base](tag=tag)
        else:
            self.aggregates.append(aggregate)

        if isinstance(aggregate, c_types.StructType):
            aggregate.size = size
        self._current = aggregate

    def _add_field(self, symbol: Symbol) -> None:
        body = symbol.body
        field = c_types.Field(offset=symbol.value, size=body.size, type=self.convert(body), name=body.name)
        if isinstance(self._current, c_types.StructType):
            self._current.fields.append(field)
        else:
            log.debug("Member %s of class %s outside of struct or union", body.name, class_label(body.sclass))
            self.declarations.append(field)

    def _add_member(self, symbol: Symbol) -> None:
        member = c_types.EnumMember(name=symbol.body.name, value=symbol.value)
        if isinstance(self._current, c_types.EnumType):
            self._current.members.append(member)
        else:
            log.debug("Enum member %s outside of enum", member.name)


def _tag_key(base: int, tag: str) -> tuple[int, str]:
    # cstruct enum members do not hash like the plain integers they compare equal to
    return (int(base), tag)


def build_type(type_: Type, base: c_types.CType, dims: Iterable[tuple[int, ...]]) -> c_types.CType:
    """Wrap ``base`` in the modifiers of ``type_``.

    Args:
        type_: The decoded type, its modifiers are in read order (outermost first).
        base: The C type of the base type of ``type_``.
        dims: The dimension groups belonging to the array modifiers, in read order.
    """

    dims = iter(dims)
    lengths = []
    for mod in type_.mods:
        if mod == c_sym.TypeMod.ARY:
            group = next(dims, ())
            lengths.append(group[-1] if group else 0)
        else:
            lengths.append(None)

    result = base
    for mod, length in reversed(list(zip(type_.mods, lengths))):
        if mod == c_sym.TypeMod.PTR:
            result = c_types.PointerType(elem=result)
        elif mod == c_sym.TypeMod.FCN:
            result = c_types.FuncType(ret=result)
        else:
            result = c_types.ArrayType(elem=result, length=length)

    return result
