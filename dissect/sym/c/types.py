from __future__ import annotations

from dataclasses import dataclass, field
from operator import attrgetter
from typing import Optional

FAKE_TAG_PREFIX = "_"
FAKE_TAG_SUFFIX = "fake"


class CType:
    """Base class of the C types.

    ``str(t)`` returns the short form used when the type is referenced from another type, ``t.definition()`` the C
    syntax of the definition of the type.
    """

    def definition(self) -> str:
        return str(self)


@dataclass(frozen=True)
class BaseType(CType):
    """A base type such as ``int`` or ``unsigned char``."""

    name: str

    def __str__(self) -> str:
        return self.name


VOID = BaseType("void")
CHAR = BaseType("char")
SHORT = BaseType("short")
INT = BaseType("int")
LONG = BaseType("long")
FLOAT = BaseType("float")
DOUBLE = BaseType("double")
UCHAR = BaseType("unsigned char")
USHORT = BaseType("unsigned short")
UINT = BaseType("unsigned int")
ULONG = BaseType("unsigned long")


@dataclass(eq=False)
class Typedef(CType):
    """A type definition.

    Args:
        type: The underlying type.
        name: The name of the type definition.
    """

    type: Optional[CType]
    name: str

    def __str__(self) -> str:
        return self.name

    def definition(self) -> str:
        if isinstance(self.type, BaseType):
            return f"typedef {self.type} {self.name};"
        return f"typedef {declare(self.type, self.name)};"


@dataclass(eq=False)
class PointerType(CType):
    elem: Optional[CType]

    def __str__(self) -> str:
        return f"{_ref(self.elem)}*"


@dataclass(eq=False)
class ArrayType(CType):
    elem: Optional[CType]
    length: int = 0

    def __str__(self) -> str:
        return f"{_ref(self.elem)}[{self.length}]"


@dataclass(eq=False)
class FuncType(CType):
    """A function type.

    Args:
        ret: The return type.
        params: The function parameters as `Field` objects.
        variadic: Whether the function takes a variable number of arguments.
    """

    ret: Optional[CType]
    params: list[Field] = field(default_factory=list)
    variadic: bool = False

    def __str__(self) -> str:
        # int (*)(int a, int b)
        return f"{_ref(self.ret)} (*)({_params(self)})"


@dataclass
class Field:
    """A function parameter, or a field of a struct or union.

    Args:
        offset: The offset of the field in bytes (optional).
        size: The size of the field in bytes (optional).
        type: The type of the field.
        name: The name of the field.
    """

    offset: int = 0
    size: int = 0
    type: Optional[CType] = None
    name: str = ""

    def __str__(self) -> str:
        return declare(self.type, self.name)


@dataclass(eq=False)
class StructType(CType):
    """A struct type.

    Args:
        tag: The struct tag, empty for anonymous structs.
        size: The size in bytes, 0 if unknown.
        fields: The struct fields.
    """

    tag: str = ""
    size: int = 0
    fields: list[Field] = field(default_factory=list)

    keyword = "struct"

    def __str__(self) -> str:
        return f"{self.keyword} {self.tag}" if self.tag else self.keyword

    def definition(self) -> str:
        lines = []
        if self.size > 0:
            lines.append(f"// size = 0x{self.size:X}")

        lines.append(f"{self} {{")
        lines.extend(_field_lines(self.fields, indent=1))
        lines.append("}")
        return "\n".join(lines)


@dataclass(eq=False)
class UnionType(StructType):
    """A union type, rendered the same way as a struct."""

    keyword = "union"


@dataclass
class EnumMember:
    name: str
    value: int


@dataclass(eq=False)
class EnumType(CType):
    """An enum type.

    The members are printed in ascending order of their value, the member list itself keeps its order.
    """

    tag: str = ""
    members: list[EnumMember] = field(default_factory=list)

    def __str__(self) -> str:
        return f"enum {self.tag}" if self.tag else "enum"

    def definition(self) -> str:
        lines = [f"{self} {{"]
        members = sorted(self.members, key=attrgetter("value"))
        width = max((len(member.name) for member in members), default=0)
        for member in members:
            lines.append(f"\t{member.name:<{width}} = {member.value},")
        lines.append("}")
        return "\n".join(lines)


def is_fake_tag(tag: str) -> bool:
    """Return whether the tag was made up by the compiler for a struct, union or enum without a tag, e.g. ``_12fake``."""
    if len(tag) <= len(FAKE_TAG_PREFIX) + len(FAKE_TAG_SUFFIX):
        return False

    if not tag.startswith(FAKE_TAG_PREFIX) or not tag.endswith(FAKE_TAG_SUFFIX):
        return False

    number = tag[len(FAKE_TAG_PREFIX) : -len(FAKE_TAG_SUFFIX)]
    # A single plus sign is accepted in front of the number, a minus sign is not
    if number.startswith("+"):
        number = number[1:]
    return number.isascii() and number.isdigit()


def declare(type_: CType | None, name: str, indent: int = 0) -> str:
    """Return the C declaration of ``name`` with type ``type_``.

    The declarator is built from the inside out: pointers prepend ``*`` to the name, arrays append ``[len]`` and
    functions append the parameter list, until a type without element type is reached. Structs and unions with a fake
    tag are inlined as anonymous bodies, one level deeper than ``indent``.

    Args:
        type_: The type to declare, `None` is printed as ``void``.
        name: The declared name, may be empty for abstract declarators.
        indent: The indentation level of the line the declaration is printed on.
    """

    if isinstance(type_, PointerType):
        return declare(type_.elem, f"*{name}", indent)

    if isinstance(type_, ArrayType):
        if name.startswith("*"):
            name = f"({name})"
        return declare(type_.elem, f"{name}[{type_.length}]", indent)

    if isinstance(type_, FuncType):
        return declare(type_.ret, f"({name})({_params(type_)})", indent)

    if isinstance(type_, StructType) and is_fake_tag(type_.tag):
        return _join(_inline_body(type_, indent), name)

    return _join(_ref(type_), name)


def _join(type_name: str, name: str) -> str:
    return f"{type_name} {name}" if name else type_name


def _ref(type_: CType | None) -> str:
    return "void" if type_ is None else str(type_)


def _params(func: FuncType) -> str:
    params = [str(param) for param in func.params]
    if func.variadic:
        params.append("...")
    return ", ".join(params)


def _field_lines(fields: list[Field], indent: int) -> list[str]:
    pad = "\t" * indent
    lines = []
    for field_ in fields:
        if field_.size > 0:
            lines.append(f"{pad}// offset: {field_.offset:04X} ({field_.size} bytes)")
        elif len(fields) > 1 and fields[1].offset > 0:
            # The second field tells whether the offsets are meaningful at all
            lines.append(f"{pad}// offset: {field_.offset:04X}")
        lines.append(f"{pad}{declare(field_.type, field_.name, indent)};")
    return lines


def _inline_body(type_: StructType, indent: int) -> str:
    header = f"{type_.keyword} {{"
    if type_.size > 0:
        header += f" // size = 0x{type_.size:X}"

    lines = [header]
    lines.extend(_field_lines(type_.fields, indent=indent + 1))
    lines.append("\t" * indent + "}")
    return "\n".join(lines)
