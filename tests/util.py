from __future__ import annotations

# Kinds
NAME1 = 0x01
NAME2 = 0x02
DEF = 0x94
DEF2 = 0x96
OVERLAY = 0x98

# Classes
EXT = 0x02
STAT = 0x03
MOS = 0x08
STRTAG = 0x0A
MOU = 0x0B
UNTAG = 0x0C
TPDEF = 0x0D
ENTAG = 0x0F
MOE = 0x10
EOS = 0x66


def u16(value: int) -> bytes:
    return value.to_bytes(2, "little")


def u32(value: int) -> bytes:
    return value.to_bytes(4, "little")


def string(value: bytes) -> bytes:
    return bytes([len(value)]) + value


def header(value: int, kind: int) -> bytes:
    return u32(value) + bytes([kind])


def name_symbol(value: int, name: bytes, kind: int = NAME1) -> bytes:
    return header(value, kind) + string(name)


def def_symbol(value: int, sclass: int, type_: int, size: int, name: bytes) -> bytes:
    return header(value, DEF) + u16(sclass) + u16(type_) + u32(size) + string(name)


def def2_symbol(
    value: int, sclass: int, type_: int, size: int, dims: list[list[int]], tag: bytes, name: bytes
) -> bytes:
    data = header(value, DEF2) + u16(sclass) + u16(type_) + u32(size)
    for group in dims:
        data += b"".join(u16(length) for length in group) + u16(0)
    return data + string(tag) + string(name)


def overlay_symbol(value: int, length: int, id_: int) -> bytes:
    return header(value, OVERLAY) + u32(length) + u32(id_)


def sym_file(*symbols: bytes, version: int = 1, target_unit: int = 0) -> bytes:
    return b"MND" + bytes([version, target_unit]) + b"\x00" * 3 + b"".join(symbols)
