"""
Simpletron - Machine

Integrates:
  - Register set (cpu/regs.py)
  - 100-word memory (mem/memory.py)
  - Opcode decoder (cpu/decoder.py)
  - Accumulator arithmetic (cpu/alu.py)

Execution model, one step():
  1. Stop if the instruction counter has run off the end of memory
  2. Fetch memory[IC] into the instruction register
  3. Decode operation code and operand (truncating toward zero)
  4. Execute the handler
  5. Advance IC unless the handler branched
  6. Report accumulator overflow

Return codes:
  10..43  the operation code just executed (READ, WRITE, ..., HALT)
  -1      divide by zero          (IC not advanced)
  -2      invalid operation code  (IC not advanced)
  -3      accumulator overflow    (accumulator left unclamped)

The machine does no I/O. After a READ step the driver delivers the value
with provide_input() (or write_memory() on the operand address); after a
WRITE step it pulls memory[operand] with read_memory().

Usage:
    m = Machine()
    m.load(["1007", "1008", "2007", "3008", "2109", "1109", "4300"])
    code = m.step()                 # Opcode.READ
    m.provide_input(5)
"""

import logging
from enum import Enum, IntEnum
from typing import Iterable, Optional, Tuple, Union

from .cpu.regs import Registers
from .cpu.decoder import Opcode, IllegalOpcode, decode_word, split_word
from .cpu import alu
from .mem.memory import Memory, MEMORY_SIZE
from .program import parse_line, parse_int, split_lines
from .errors import (
    ProgramLoadError, ProgramTooLargeError, InvalidInstructionError,
    InstructionRangeError, MachineStateError,
)

log = logging.getLogger(__name__)

HALT = Opcode.HALT


class StepFault(IntEnum):
    DIVIDE_BY_ZERO = -1
    INVALID_OPCODE = -2
    ACCUMULATOR_OVERFLOW = -3


class MachineState(Enum):
    READY = 'READY'
    RUNNING = 'RUNNING'
    AWAITING_INPUT = 'AWAITING_INPUT'
    HALTED = 'HALTED'
    FAULTED = 'FAULTED'


class Machine:
    """Simpletron virtual machine.

    One instance is driven by one caller at a time; there is no internal
    locking. All state is private and reached through the accessors.
    """

    def __init__(self):
        self._regs = Registers()
        self._mem = Memory(MEMORY_SIZE)
        self._state = MachineState.READY
        self._fault: Optional[StepFault] = None
        self._pending_read: Optional[int] = None
        self._steps = 0

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def reset(self):
        """Zero memory, comments and all registers."""
        self._regs.reset()
        self._mem.clear()
        self._state = MachineState.READY
        self._fault = None
        self._pending_read = None
        self._steps = 0

    def load(self, lines: Union[str, Iterable[str]]):
        """Reset, then load program lines into memory[0..].

        Accepts a sequence of lines or a whole program as one string.
        Raises ProgramLoadError (or a subclass) on the first bad line.
        Words stored before the failing line stay in memory so the
        caller can show how far loading got.
        """
        self.reset()
        if isinstance(lines, str):
            lines = split_lines(lines)
        lines = list(lines)

        try:
            if len(lines) > len(self._mem):
                raise ProgramTooLargeError(len(lines))
            words = 0
            for addr, line in enumerate(lines):
                src = parse_line(line, addr + 1)
                self._mem.set_comment(addr, src.comment)
                if src.is_blank:
                    continue
                value = parse_int(src.code)
                if value is None:
                    raise InvalidInstructionError(src.line_num, src.raw)
                if not alu.in_word_range(value):
                    raise InstructionRangeError(src.line_num, src.raw, value)
                self._mem.write(addr, value)
                words += 1
        except ProgramLoadError as e:
            log.warning("Load failed: %s", e)
            raise

        log.info("Program loaded: %d lines, %d words", len(lines), words)

    def try_load(self, lines: Union[str, Iterable[str]]) -> Optional[str]:
        """Like load(), but returns the error message instead of raising.

        Returns None when the program loaded cleanly.
        """
        try:
            self.load(lines)
        except ProgramLoadError as e:
            return str(e)
        return None

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> int:
        """Execute one instruction and return its code (see module doc).

        Never raises for program faults. Once a fault has been reported
        the machine stays faulted, and every further step() returns the
        same code until reset() or load().
        """
        if self._state is MachineState.FAULTED:
            return self._fault
        if self._state is MachineState.HALTED:
            return HALT

        regs = self._regs
        if self._state is MachineState.AWAITING_INPUT:
            log.warning("READ at %02d resumed without input; memory[%02d] unchanged",
                        regs.instruction_counter - 1, self._pending_read)
            self._pending_read = None

        if regs.instruction_counter >= len(self._mem):
            self._state = MachineState.HALTED
            return HALT
        self._state = MachineState.RUNNING

        # Fetch + decode
        pc = regs.instruction_counter
        word = self._mem.read(pc)
        regs.instruction_register = word
        regs.operation_code, regs.operand = split_word(word)

        try:
            instr = decode_word(word)
        except IllegalOpcode as e:
            log.debug("%02d: %s", pc, e)
            return self._enter_fault(StepFault.INVALID_OPCODE)

        # Execute
        try:
            branched = self._dispatch[instr.opcode](instr.operand)
        except _HaltException:
            self._steps += 1
            self._state = MachineState.HALTED
            log.debug("%02d: HALT  %s", pc, regs.display())
            return HALT
        except ZeroDivisionError:
            return self._enter_fault(StepFault.DIVIDE_BY_ZERO)

        if not branched:
            regs.instruction_counter += 1
        self._steps += 1

        if not alu.in_word_range(regs.accumulator):
            return self._enter_fault(StepFault.ACCUMULATOR_OVERFLOW)

        if instr.opcode is Opcode.READ:
            self._state = MachineState.AWAITING_INPUT
            self._pending_read = instr.operand

        log.debug("%02d: %-13s %s", pc, instr, regs.display())
        return instr.opcode

    def provide_input(self, value: int):
        """Deliver the value for the pending READ and resume.

        The value is stored as-is; an out-of-range value surfaces later
        as an overflow fault if it is ever used arithmetically.
        """
        if self._state is not MachineState.AWAITING_INPUT:
            raise MachineStateError(
                f"No READ is waiting for input (state {self._state.value})")
        self._mem.write(self._pending_read, value)
        self._pending_read = None
        self._state = MachineState.RUNNING

    def _enter_fault(self, fault: StepFault) -> StepFault:
        self._fault = fault
        self._state = MachineState.FAULTED
        log.warning("Fault %d (%s) at %02d: %s", fault, fault.name,
                    self._regs.instruction_counter, self._regs.display())
        return fault

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(operand) -> True if IC was set by a branch

    def _build_dispatch(self) -> dict:
        return {
            Opcode.READ:       self._op_read,
            Opcode.WRITE:      self._op_write,
            Opcode.LOAD:       self._op_load,
            Opcode.STORE:      self._op_store,
            Opcode.ADD:        self._op_add,
            Opcode.SUBTRACT:   self._op_subtract,
            Opcode.DIVIDE:     self._op_divide,
            Opcode.MULTIPLY:   self._op_multiply,
            Opcode.BRANCH:     self._op_branch,
            Opcode.BRANCHNEG:  self._op_branchneg,
            Opcode.BRANCHZERO: self._op_branchzero,
            Opcode.HALT:       self._op_halt,
        }

    # ── I/O: the driver does the transfer between steps ──

    def _op_read(self, operand):
        return False

    def _op_write(self, operand):
        return False

    # ── Load/Store ──

    def _op_load(self, operand):
        self._regs.accumulator = self._mem.read(operand)
        return False

    def _op_store(self, operand):
        self._mem.write(operand, self._regs.accumulator)
        return False

    # ── Arithmetic ──

    def _op_add(self, operand):
        self._regs.accumulator = alu.add(self._regs.accumulator, self._mem.read(operand))
        return False

    def _op_subtract(self, operand):
        self._regs.accumulator = alu.sub(self._regs.accumulator, self._mem.read(operand))
        return False

    def _op_divide(self, operand):
        self._regs.accumulator = alu.div(self._regs.accumulator, self._mem.read(operand))
        return False

    def _op_multiply(self, operand):
        self._regs.accumulator = alu.mul(self._regs.accumulator, self._mem.read(operand))
        return False

    # ── Control ──

    def _op_branch(self, operand):
        self._regs.instruction_counter = operand
        return True

    def _op_branchneg(self, operand):
        if self._regs.accumulator < 0:
            self._regs.instruction_counter = operand
            return True
        return False

    def _op_branchzero(self, operand):
        if self._regs.accumulator == 0:
            self._regs.instruction_counter = operand
            return True
        return False

    def _op_halt(self, operand):
        raise _HaltException()

    # ══════════════════════════════════════════════
    # Accessors
    # ══════════════════════════════════════════════

    @property
    def accumulator(self) -> int:
        return self._regs.accumulator

    @property
    def instruction_counter(self) -> int:
        return self._regs.instruction_counter

    @property
    def instruction_register(self) -> int:
        return self._regs.instruction_register

    @property
    def operation_code(self) -> int:
        return self._regs.operation_code

    @property
    def operand(self) -> int:
        return self._regs.operand

    @property
    def memory(self) -> Tuple[int, ...]:
        """Snapshot of all 100 words."""
        return self._mem.words()

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def fault(self) -> Optional[StepFault]:
        """The fault that stopped the machine, or None."""
        return self._fault

    @property
    def steps_executed(self) -> int:
        """Instructions completed since the last reset/load."""
        return self._steps

    @property
    def pending_read(self) -> Optional[int]:
        """Address the pending READ will fill, or None."""
        return self._pending_read

    def read_memory(self, addr: int) -> int:
        return self._mem.read(addr)

    def write_memory(self, addr: int, value: int):
        """Raw write, used by drivers to deliver READ input.

        Writing the address of a pending READ completes that READ.
        """
        self._mem.write(addr, value)
        if self._state is MachineState.AWAITING_INPUT and addr == self._pending_read:
            self._pending_read = None
            self._state = MachineState.RUNNING

    def comment_at(self, addr: int) -> str:
        """Inline source comment for addr ("" if none or out of range)."""
        return self._mem.comment_at(addr)

    def dump_memory(self) -> str:
        return self._mem.dump()


# Internal exception for flow control
class _HaltException(Exception):
    pass
