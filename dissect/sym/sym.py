from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, Iterator

from dissect.sym.c.builder import CBuilder
from dissect.sym.exception import Error, InvalidSignatureError
from dissect.sym.helpers.c_sym import SYM_SIGNATURE, c_sym
from dissect.sym.helpers.symbol import Symbol, iter_symbols
from dissect.sym.helpers.utils import retain_file_offset

log = logging.getLogger(__name__)


class SYM:
    """Class for parsing SYM debug symbol files.

    A SYM file starts with a short header, followed by symbol records up to the end of the file.

    Args:
        fh: A file-like object of a SYM file.
    """

    def __init__(self, fh: BinaryIO):
        self.fh = fh

        try:
            self.header = c_sym.FileHeader(fh)
        except EOFError as e:
            raise InvalidSignatureError("File too small for a SYM header") from e

        if self.header.signature != SYM_SIGNATURE:
            raise InvalidSignatureError(f"Invalid SYM signature: {self.header.signature!r}")

        # Offset of the first symbol record
        self.offset = fh.tell()

    @property
    def version(self) -> int:
        return self.header.version

    @property
    def target_unit(self) -> int:
        return self.header.target_unit

    def symbols(self) -> Iterator[Symbol]:
        """Parse the symbol records of the file.

        The offset of the file-like object is restored once the iteration stops.

        Yields:
            The `Symbol` objects in file order.

        Raises:
            SymbolError if a symbol can not be parsed.
        """

        with retain_file_offset(self.fh, self.offset):
            yield from iter_symbols(self.fh)

    def types(self) -> CBuilder:
        """Return a `CBuilder` filled with the definitions of this file."""
        return CBuilder().add_symbols(self.symbols())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dump the symbols of a SYM debug symbol file.")
    parser.add_argument("file", help="SYM file to parse.")
    parser.add_argument(
        "-c", "--c-header", action="store_true", help="Print the definitions as C declarations instead of symbols."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    with open(args.file, "rb") as fh:
        try:
            sym = SYM(fh)
            if args.c_header:
                print(sym.types().header(), end="")
            else:
                print(f"SYM version {sym.version} target unit {sym.target_unit}")
                for symbol in sym.symbols():
                    print(f"{symbol.offset:06x}: {symbol}")
        except Error as e:
            log.error("Unable to parse %s: %s", args.file, e)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
