"""
Simpletron - 100-Word Memory

Memory map:
  00..99  instructions and data, interchangeably (von Neumann)

Every cell holds a signed integer. Program loading keeps cells inside
[-9999, 9999]; writes during execution (STORE, READ delivery) are taken
as-is and may fall outside that range.

Alongside the words, Memory keeps the inline comment typed next to each
address in the program source, so a listing can show it again.
"""

from typing import List, Tuple

from ..errors import MemoryAddressError

MEMORY_SIZE = 100


class Memory:
    """Fixed-size word memory with a per-address comment table."""

    def __init__(self, size: int = MEMORY_SIZE):
        self._words: List[int] = [0] * size
        self._comments: List[str] = [""] * size

    def __len__(self) -> int:
        return len(self._words)

    def _check(self, addr: int) -> int:
        if not 0 <= addr < len(self._words):
            raise MemoryAddressError(addr)
        return addr

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        return self._words[self._check(addr)]

    def write(self, addr: int, value: int):
        """Store value at addr. The value is not range-checked."""
        self._words[self._check(addr)] = value

    def words(self) -> Tuple[int, ...]:
        """Read-only snapshot of all cells."""
        return tuple(self._words)

    def clear(self):
        """Zero every cell and forget every comment."""
        for i in range(len(self._words)):
            self._words[i] = 0
            self._comments[i] = ""

    # --- Source comments ---

    def comment_at(self, addr: int) -> str:
        """Comment recorded for addr, or "" for addresses outside memory."""
        if 0 <= addr < len(self._comments):
            return self._comments[addr]
        return ""

    def set_comment(self, addr: int, text: str):
        self._comments[self._check(addr)] = text

    # --- Dump ---

    def dump(self, columns: int = 10) -> str:
        """Grid dump: column header, then one row per `columns` cells."""
        header = "    " + "".join(f"   {i}  " for i in range(columns))
        lines = [header]
        for base in range(0, len(self._words), columns):
            row = self._words[base:base + columns]
            cells = "".join(f"{w:+05d} " for w in row)
            lines.append(f"{base:2d}  {cells}")
        return "\n".join(lines)
