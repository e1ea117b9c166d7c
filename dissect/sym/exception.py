from __future__ import annotations


class Error(Exception):
    """Base exception for this module.

    Args:
        message: Description of the error.
        offset: Stream offset of the record that was being decoded, if known.
        index: Index of that record within the symbol stream, if known.
    """

    def __init__(self, message: str, offset: int | None = None, index: int | None = None):
        super().__init__(message)
        self.offset = offset
        self.index = index

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.index is not None:
            context.append(f"record {self.index}")
        if self.offset is not None:
            context.append(f"offset 0x{self.offset:x}")

        if context:
            return f"{message} ({', '.join(context)})"
        return message


class InvalidSignatureError(Error):
    """Exception that occurs if the magic in the header does not match."""


class SymbolError(Error):
    """Exception that occurs if a symbol record can not be decoded."""


class TruncatedSymbolError(SymbolError, EOFError):
    """The stream ended in the middle of a symbol record."""


class UnknownKindError(SymbolError):
    """The kind of a symbol header has no known body layout."""

    def __init__(self, kind: int, offset: int | None = None, index: int | None = None):
        super().__init__(f"Support for symbol kind 0x{kind:02X} not yet implemented", offset=offset, index=index)
        self.kind = kind


class InvalidTypeError(SymbolError, ValueError):
    """An encoded type value does not describe a valid type."""

    def __init__(self, value: int, reason: str, offset: int | None = None, index: int | None = None):
        super().__init__(f"Invalid type 0x{value:04X}: {reason}", offset=offset, index=index)
        self.value = value
