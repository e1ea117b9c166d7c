from dissect.sym.c.builder import CBuilder
from dissect.sym.exception import (
    Error,
    InvalidSignatureError,
    InvalidTypeError,
    SymbolError,
    TruncatedSymbolError,
    UnknownKindError,
)
from dissect.sym.helpers.symbol import (
    Def,
    Def2,
    Name,
    Overlay,
    Symbol,
    iter_symbols,
    parse_symbol,
)
from dissect.sym.helpers.types import Type
from dissect.sym.sym import SYM

__all__ = [
    "SYM",
    "CBuilder",
    "Def",
    "Def2",
    "Error",
    "InvalidSignatureError",
    "InvalidTypeError",
    "Name",
    "Overlay",
    "Symbol",
    "SymbolError",
    "TruncatedSymbolError",
    "Type",
    "UnknownKindError",
    "iter_symbols",
    "parse_symbol",
]
