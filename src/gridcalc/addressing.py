"""Cell address and range resolution against fixed grid bounds."""

from __future__ import annotations

import re
from collections.abc import Iterator

from gridcalc.formulas.errors import InvalidAddressError, InvalidRangeError

_ADDR_RE = re.compile(r"^([A-Z]+)([0-9]+)$")
_RANGE_RE = re.compile(r"^([A-Z]+[0-9]+):([A-Z]+[0-9]+)$")

MAX_COLS = 26


def col_letter_to_index(letters: str) -> int:
    """Convert a single column letter to a 0-based index.  A=0, ..., Z=25.

    Raises InvalidAddressError for anything but one letter A-Z.
    """
    if len(letters) != 1 or not ("A" <= letters <= "Z"):
        raise InvalidAddressError(letters, f"Only columns A..Z supported, got {letters!r}")
    return ord(letters) - ord("A")


def index_to_col_letter(idx: int) -> str:
    """Convert a 0-based column index to its letter.  0=A, 25=Z."""
    if not 0 <= idx < MAX_COLS:
        raise ValueError(f"Column index out of range: {idx}")
    return chr(ord("A") + idx)


def make_addr(row: int, col: int) -> str:
    """Build cell address from 0-based row/col."""
    return f"{index_to_col_letter(col)}{row + 1}"


def iter_range(
    r1: int, c1: int, r2: int, c2: int
) -> Iterator[tuple[int, int]]:
    """Yield every (row, col) of a normalized range in row-major order."""
    for r in range(r1, r2 + 1):
        for c in range(c1, c2 + 1):
            yield r, c


class AddressResolver:
    """Resolves ``B2``-style addresses and ``A1:C3`` ranges for one grid.

    Parameters
    ----------
    rows : int
        Number of rows in the grid.
    cols : int
        Number of columns in the grid.
    """

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols

    def parse_address(self, addr: str) -> tuple[int, int]:
        """Parse 'B2' -> (1, 1), 0-based.

        Raises:
            InvalidAddressError: If the address is malformed, uses more
                than one column letter, or lies outside the grid.
        """
        if addr is None:
            raise InvalidAddressError("None", "null address")
        s = addr.strip().upper()
        m = _ADDR_RE.match(s)
        if not m:
            raise InvalidAddressError(addr)
        col = col_letter_to_index(m.group(1))
        digits = m.group(2).lstrip("0") or "0"
        if len(digits) > len(str(self.rows)):
            raise InvalidAddressError(addr, f"Address out of bounds: {addr!r}")
        row = int(digits) - 1

        if row < 0 or row >= self.rows or col >= self.cols:
            raise InvalidAddressError(addr, f"Address out of bounds: {addr!r}")
        return row, col

    def parse_range(self, text: str) -> tuple[int, int, int, int]:
        """Parse 'A1:C3' into (r1, c1, r2, c2), top-left to bottom-right.

        The corners may be given in any order.

        Raises:
            InvalidRangeError: If *text* is not two addresses joined by ``:``.
            InvalidAddressError: If either corner is out of bounds.
        """
        s = text.strip().upper()
        m = _RANGE_RE.match(s)
        if not m:
            raise InvalidRangeError(text)
        ra, ca = self.parse_address(m.group(1))
        rb, cb = self.parse_address(m.group(2))
        return min(ra, rb), min(ca, cb), max(ra, rb), max(ca, cb)

    def cells_in_range(self, text: str) -> Iterator[tuple[int, int]]:
        """Yield the coordinates covered by range *text*, row-major."""
        return iter_range(*self.parse_range(text))
