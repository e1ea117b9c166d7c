from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import count
from typing import BinaryIO, Callable, Iterator, Union

from dissect.sym.exception import (
    InvalidTypeError,
    SymbolError,
    TruncatedSymbolError,
    UnknownKindError,
)
from dissect.sym.helpers.c_sym import (
    DEF_HEADER_SIZE,
    DIMENSION_SIZE,
    OVERLAY_SIZE,
    STRING_LENGTH_SIZE,
    SYMBOL_HEADER_SIZE,
    c_sym,
    class_label,
    kind_label,
)
from dissect.sym.helpers.types import Type

log = logging.getLogger(__name__)


def read_string(fh: BinaryIO) -> str:
    """Read a string prefixed by its 8-bit length."""
    return c_sym.String(fh).value.decode("latin-1")


def read_dimensions(fh: BinaryIO) -> tuple[int, ...]:
    """Read a group of array lengths.

    A group is a sequence of 16-bit lengths terminated by a 0 value, the terminator is not part of the group.

    Raises:
        EOFError if the stream ends before the terminator.
    """

    return tuple(c_sym.uint16[None](fh))


def string_size(value: str) -> int:
    return STRING_LENGTH_SIZE + len(value)


@dataclass(frozen=True)
class Name:
    """Body of the NAME1 and NAME2 symbols, the name of the address in the symbol header."""

    name: str

    def __len__(self) -> int:
        return string_size(self.name)

    def __str__(self) -> str:
        # $00000000 1 __RHS2_data_size
        return self.name


@dataclass(frozen=True)
class Def:
    """Body of the DEF symbol, the class, type, size and name of a definition.

    Args:
        sclass: The storage `Class` of the definition.
        type: The decoded `Type` of the definition.
        size: The size of the definition in bytes.
        name: The name of the definition.
    """

    sclass: int
    type: Type
    size: int
    name: str

    def __len__(self) -> int:
        return DEF_HEADER_SIZE + string_size(self.name)

    def __str__(self) -> str:
        # $00000000 94 Def class TPDEF type UCHAR size 0 name u_char
        return f"class {class_label(self.sclass)} type {self.type} size {self.size} name {self.name}"


@dataclass(frozen=True)
class Def2:
    """Body of the DEF2 symbol, a definition extended with array dimensions and a tag.

    Args:
        sclass: The storage `Class` of the definition.
        type: The decoded `Type` of the definition.
        size: The size of the definition in bytes.
        dims: One group of array lengths per array modifier of the type, at least one group.
        tag: The struct, union or enum tag of the definition, empty if there is none.
        name: The name of the definition.
    """

    sclass: int
    type: Type
    size: int
    dims: tuple[tuple[int, ...], ...]
    tag: str
    name: str

    def __len__(self) -> int:
        dims_size = sum(DIMENSION_SIZE * (len(group) + 1) for group in self.dims)
        return DEF_HEADER_SIZE + dims_size + string_size(self.tag) + string_size(self.name)

    def __str__(self) -> str:
        # $00000000 96 Def2 class MOS type ARY INT size 4 dims 1 tag  name r
        dims = " ".join(" ".join(map(str, group)) if group else "0" for group in self.dims)
        return (
            f"class {class_label(self.sclass)} type {self.type} size {self.size} dims {dims} "
            f"tag {self.tag} name {self.name}"
        )


@dataclass(frozen=True)
class Overlay:
    """Body of the OVERLAY symbol, describes a relocatable overlay (e.g. a shared library).

    The value of the symbol header is the base address at which the overlay is loaded.
    """

    length: int
    id: int

    def __len__(self) -> int:
        return OVERLAY_SIZE

    def __str__(self) -> str:
        # $800b031c overlay length $000009e4 id $4
        return f"length ${self.length:08x} id ${self.id:x}"


SymbolBody = Union[Name, Def, Def2, Overlay]


@dataclass(frozen=True)
class Symbol:
    """A single symbol record.

    Args:
        offset: The stream offset of the symbol header.
        value: The address or value of the symbol.
        kind: The `Kind` of the symbol, determines the type of the body.
        body: The symbol body.
    """

    offset: int
    value: int
    kind: int
    body: SymbolBody

    def __len__(self) -> int:
        return SYMBOL_HEADER_SIZE + len(self.body)

    def __str__(self) -> str:
        return f"${self.value:08x} {kind_label(self.kind)} {self.body}"


def parse_name(fh: BinaryIO) -> Name:
    return Name(name=read_string(fh))


def parse_def(fh: BinaryIO) -> Def:
    header = c_sym.DefHeader(fh)
    type_ = Type.decode(header.type)
    return Def(sclass=header.sclass, type=type_, size=header.size, name=read_string(fh))


def parse_def2(fh: BinaryIO) -> Def2:
    """Parse the body of a DEF2 symbol.

    The number of dimension groups follows from the array modifiers of the type. A type without array modifiers still
    carries a single, usually empty, group.
    """

    header = c_sym.DefHeader(fh)
    type_ = Type.decode(header.type)

    dims = tuple(read_dimensions(fh) for _ in range(max(1, type_.narrays)))
    tag = read_string(fh)
    name = read_string(fh)

    return Def2(sclass=header.sclass, type=type_, size=header.size, dims=dims, tag=tag, name=name)


def parse_overlay(fh: BinaryIO) -> Overlay:
    overlay = c_sym.Overlay(fh)
    return Overlay(length=overlay.length, id=overlay.id)


BODY_PARSERS: dict[int, Callable[[BinaryIO], SymbolBody]] = {
    c_sym.Kind.NAME1: parse_name,
    c_sym.Kind.NAME2: parse_name,
    c_sym.Kind.DEF: parse_def,
    c_sym.Kind.DEF2: parse_def2,
    c_sym.Kind.OVERLAY: parse_overlay,
}


def parse_symbol(fh: BinaryIO) -> Symbol | None:
    """Parse a single symbol from the current position of the stream.

    Args:
        fh: A file-like object positioned at the start of a symbol header.

    Returns:
        The parsed `Symbol`, or `None` if the stream ends exactly at the start of the header.

    Raises:
        TruncatedSymbolError if the stream ends within the symbol.
        UnknownKindError if the kind of the header is unknown, no body bytes are consumed in that case.
        InvalidTypeError if the encoded type of a definition is invalid.
    """

    offset = fh.tell()
    data = fh.read(SYMBOL_HEADER_SIZE)
    if not data:
        return None

    if len(data) < SYMBOL_HEADER_SIZE:
        raise TruncatedSymbolError(
            f"Truncated symbol header, {len(data)} of {SYMBOL_HEADER_SIZE} bytes", offset=offset
        )

    header = c_sym.SymbolHeader(data)
    parse_body = BODY_PARSERS.get(header.kind)
    if parse_body is None:
        raise UnknownKindError(int(header.kind), offset=offset)

    try:
        body = parse_body(fh)
    except InvalidTypeError as e:
        e.offset = offset
        raise
    except EOFError as e:
        raise TruncatedSymbolError(f"Truncated {kind_label(header.kind)} symbol", offset=offset) from e

    log.debug("Parsed symbol at 0x%x: %s", offset, kind_label(header.kind))
    return Symbol(offset=offset, value=header.value, kind=header.kind, body=body)


def iter_symbols(fh: BinaryIO) -> Iterator[Symbol]:
    """Parse symbols until the stream ends at a symbol boundary.

    Yields:
        Every `Symbol` in stream order.

    Raises:
        SymbolError for the first symbol that can not be parsed, with the index of that symbol set.
    """

    for index in count():
        try:
            symbol = parse_symbol(fh)
        except SymbolError as e:
            e.index = index
            raise

        if symbol is None:
            return

        yield symbol
