"""
Simpletron - Exception Hierarchy

Load-time problems and accessor misuse raise SimpletronError subclasses.
Runtime faults (divide by zero, illegal opcode, overflow) are never
raised; Machine.step() reports them as negative return codes.
"""

from typing import Optional


class SimpletronError(Exception):
    """Base class for all Simpletron errors."""


class ProgramLoadError(SimpletronError):
    """Raised when program text cannot be loaded into memory.

    str(err) is the consumer-facing message; line_number is 1-based and
    None when the failure is not tied to a single line.
    """

    def __init__(self, message: str, line_number: Optional[int] = None,
                 text: str = ""):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.text = text


class ProgramTooLargeError(ProgramLoadError):
    def __init__(self, line_count: int):
        super().__init__(
            "Error: the program is too large! "
            "A maximum of 100 instructions is allowed.")
        self.line_count = line_count


class InvalidInstructionError(ProgramLoadError):
    def __init__(self, line_number: int, text: str):
        super().__init__(
            f"Error on line {line_number}: the text '{text}' "
            f"is not a valid instruction.", line_number, text)


class InstructionRangeError(ProgramLoadError):
    def __init__(self, line_number: int, text: str, value: int):
        super().__init__(
            f"Error on line {line_number}: the instruction '{text}' "
            f"is outside the allowed range [-9999, 9999].", line_number, text)
        self.value = value


class MemoryAddressError(SimpletronError, IndexError):
    """Raised when an accessor is given an address outside 0..99."""

    def __init__(self, address: int):
        super().__init__(f"Memory address out of range: {address}")
        self.address = address


class MachineStateError(SimpletronError):
    """Raised when an operation does not fit the machine's current state."""


class InputError(SimpletronError):
    """Raised by the driver when READ input is rejected."""
