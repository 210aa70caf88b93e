"""
Simpletron - Register Set

Register model:
  accumulator          - the single arithmetic register
  instruction_counter  - address of the next instruction to fetch (0..100,
                         100 means execution ran off the end of memory)
  instruction_register - the last fetched word
  operation_code       - instruction_register / 100 (truncated)
  operand              - instruction_register % 100 (truncated)

The accumulator may briefly hold a value outside the word range after
arithmetic; it is left as-is so the overflow can be inspected.
"""


class Registers:
    """Simpletron register set. All registers start at zero."""

    __slots__ = ('accumulator', 'instruction_counter', 'instruction_register',
                 'operation_code', 'operand')

    def __init__(self):
        self.accumulator: int = 0
        self.instruction_counter: int = 0
        self.instruction_register: int = 0
        self.operation_code: int = 0
        self.operand: int = 0

    def reset(self):
        """Zero every register."""
        self.accumulator = 0
        self.instruction_counter = 0
        self.instruction_register = 0
        self.operation_code = 0
        self.operand = 0

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.__slots__}

    def display(self) -> str:
        """One-line register summary for traces."""
        return (f"ACC={self.accumulator:+05d} IC={self.instruction_counter:02d} "
                f"IR={self.instruction_register:+05d} "
                f"OP={self.operation_code:02d} OPR={self.operand:02d}")
