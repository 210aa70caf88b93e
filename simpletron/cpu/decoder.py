"""
Simpletron - SML Opcode Table / Instruction Decoder

Maps the high two decimal digits of a memory word to an SML operation.

Word layout (decimal, not binary):
  +CCOO   CC = operation code (10..43)
          OO = operand, a memory address (00..99)

  1007  ->  READ   07
  2109  ->  STORE  09
  4300  ->  HALT   00

Decoding uses truncating division (toward zero), so the code and the
operand both carry the sign of the word: -2005 splits into (-20, -5).
No negative code is in the table, which makes every negative word an
illegal instruction.
"""

from enum import IntEnum
from typing import NamedTuple, Tuple

from .alu import trunc_div, trunc_mod


class Opcode(IntEnum):
    READ = 10
    WRITE = 11
    LOAD = 20
    STORE = 21
    ADD = 30
    SUBTRACT = 31
    DIVIDE = 32
    MULTIPLY = 33
    BRANCH = 40
    BRANCHNEG = 41
    BRANCHZERO = 42
    HALT = 43


# ──────────────────────────────────────────────
# Operation groups
# ──────────────────────────────────────────────

IO_OPS = frozenset({Opcode.READ, Opcode.WRITE})
ARITHMETIC_OPS = frozenset({
    Opcode.ADD, Opcode.SUBTRACT, Opcode.DIVIDE, Opcode.MULTIPLY,
})
BRANCH_OPS = frozenset({Opcode.BRANCH, Opcode.BRANCHNEG, Opcode.BRANCHZERO})

_BY_CODE = {op.value: op for op in Opcode}


class Instruction(NamedTuple):
    """A decoded word: operation, operand address and the raw word."""
    opcode: Opcode
    operand: int
    word: int

    def __str__(self) -> str:
        return f"{self.opcode.name} {self.operand:02d}"


class IllegalOpcode(Exception):
    """Raised when a word's operation code is not in the SML table."""

    def __init__(self, code: int, word: int):
        super().__init__(f"Unknown operation code {code:02d} in word {word:+05d}")
        self.code = code
        self.word = word


def split_word(word: int) -> Tuple[int, int]:
    """Split a word into (operation_code, operand), truncating toward zero."""
    return trunc_div(word, 100), trunc_mod(word, 100)


def decode_word(word: int) -> Instruction:
    """Decode a memory word into an Instruction.

    Raises IllegalOpcode if the operation code is not one of the twelve
    SML operations.
    """
    code, operand = split_word(word)
    opcode = _BY_CODE.get(code)
    if opcode is None:
        raise IllegalOpcode(code, word)
    return Instruction(opcode, operand, word)


def encode(opcode: int, operand: int = 0) -> int:
    """Build a word from an operation code and an operand address."""
    if not 0 <= operand <= 99:
        raise ValueError(f"Operand out of range: {operand}")
    return int(opcode) * 100 + operand


def mnemonic(word: int) -> str:
    """Disassemble a word for listings; non-instructions render as data."""
    try:
        return str(decode_word(word))
    except IllegalOpcode:
        return "DATA"
