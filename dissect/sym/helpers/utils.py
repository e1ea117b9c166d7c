from contextlib import contextmanager
from typing import BinaryIO, Iterator


@contextmanager
def retain_file_offset(fh: BinaryIO, offset: int) -> Iterator[BinaryIO]:
    """Move ``fh`` to the absolute ``offset`` of the first symbol record for the duration of the block.

    The position ``fh`` had on entry is put back on exit, also when reading the records raised.
    """

    saved = fh.tell()
    fh.seek(offset)
    try:
        yield fh
    finally:
        fh.seek(saved)
