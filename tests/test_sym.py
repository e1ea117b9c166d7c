from io import BytesIO
from pathlib import Path

import pytest

from dissect.sym import SYM
from dissect.sym.exception import InvalidSignatureError, UnknownKindError
from dissect.sym.sym import main

from .util import (
    EOS,
    EXT,
    MOS,
    STRTAG,
    def2_symbol,
    def_symbol,
    header,
    name_symbol,
    overlay_symbol,
    sym_file,
)

SYMBOLS = [
    name_symbol(0x80010000, b"main", kind=0x02),
    def2_symbol(0, STRTAG, 0x0008, 4, [[]], b"", b"Foo"),
    def_symbol(0, MOS, 0x0004, 4, b"a"),
    def_symbol(4, EOS, 0x0000, 4, b".eos"),
    def2_symbol(0x80020000, EXT, 0x0018, 4, [[]], b"Foo", b"foo"),
    overlay_symbol(0x800B031C, 0x9E4, 4),
]


def test_sym_header() -> None:
    sym = SYM(BytesIO(sym_file(*SYMBOLS, version=1, target_unit=0)))

    assert sym.header.signature == b"MND"
    assert sym.version == 1
    assert sym.target_unit == 0
    assert sym.offset == 8


def test_sym_invalid_signature() -> None:
    with pytest.raises(InvalidSignatureError):
        SYM(BytesIO(b"ELF" + b"\x00" * 5))


def test_sym_too_small() -> None:
    with pytest.raises(InvalidSignatureError):
        SYM(BytesIO(b"MN"))


def test_sym_symbols() -> None:
    fh = BytesIO(sym_file(*SYMBOLS))
    sym = SYM(fh)
    fh.seek(3)

    symbols = list(sym.symbols())

    assert len(symbols) == len(SYMBOLS)
    assert symbols[0].offset == 8
    assert str(symbols[0]) == "$80010000 2 main"
    assert str(symbols[-1]) == "$800b031c overlay length $000009e4 id $4"
    # The offset of the caller is retained
    assert fh.tell() == 3

    # Symbols can be iterated again
    assert len(list(sym.symbols())) == len(SYMBOLS)


def test_sym_types() -> None:
    sym = SYM(BytesIO(sym_file(*SYMBOLS)))
    builder = sym.types()

    assert builder.header() == (
        "// size = 0x4\n"
        "struct Foo {\n"
        "\t// offset: 0000 (4 bytes)\n"
        "\tint a;\n"
        "};\n"
        "\n"
        "// address: 0x80020000\n"
        "struct Foo *foo;\n"
    )


def test_sym_unknown_kind() -> None:
    sym = SYM(BytesIO(sym_file(name_symbol(0, b"a"), header(0, 0x80))))

    with pytest.raises(UnknownKindError) as exc:
        list(sym.symbols())

    assert exc.value.index == 1
    assert exc.value.offset == 8 + len(name_symbol(0, b"a"))


def test_main_dump(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "MAIN.SYM"
    path.write_bytes(sym_file(*SYMBOLS))

    assert main([str(path)]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "SYM version 1 target unit 0"
    assert lines[1] == "000008: $80010000 2 main"
    assert lines[2] == "000012: $00000000 96 Def2 class STRTAG type STRUCT size 4 dims 0 tag  name Foo"
    assert len(lines) == 1 + len(SYMBOLS)


def test_main_c_header(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "MAIN.SYM"
    path.write_bytes(sym_file(*SYMBOLS))

    assert main(["-c", str(path)]) == 0

    out = capsys.readouterr().out
    assert "struct Foo {\n" in out
    assert out.endswith("struct Foo *foo;\n")


def test_main_error(tmp_path: Path) -> None:
    path = tmp_path / "BROKEN.SYM"
    path.write_bytes(sym_file(name_symbol(0, b"a"), b"\x00\x00"))

    assert main([str(path)]) == 1

    path.write_bytes(b"not a sym file")
    assert main(["-c", str(path)]) == 1
