from dissect.sym.c.types import (
    ArrayType,
    BaseType,
    CType,
    EnumMember,
    EnumType,
    Field,
    FuncType,
    PointerType,
    StructType,
    Typedef,
    UnionType,
    declare,
    is_fake_tag,
)

__all__ = [
    "ArrayType",
    "BaseType",
    "CType",
    "EnumMember",
    "EnumType",
    "Field",
    "FuncType",
    "PointerType",
    "StructType",
    "Typedef",
    "UnionType",
    "declare",
    "is_fake_tag",
]
