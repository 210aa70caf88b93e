"""
Simpletron
==========
An educational virtual machine for the Simpletron Machine Language (SML):
a 100-word memory, one accumulator, twelve instructions.

Architecture:
    ┌───────────┐    ┌───────────┐    ┌───────────┐    ┌───────────┐
    │ SML text  │───>│  Machine  │<──>│  Runner   │───>│  Report   │
    │ (.sml)    │    │ load/step │    │ READ/WRITE│    │ dump/log  │
    └───────────┘    └───────────┘    └───────────┘    └───────────┘

    - machine.py:  load(), reset(), step() and register/memory accessors
    - cpu/:        registers, opcode table, truncating arithmetic
    - mem/:        100-word memory with per-address source comments
    - runner.py:   run loop; does the I/O the machine leaves to its caller
    - report.py:   register/memory dump and execution report text
    - cli.py:      command line front end
"""

__version__ = "1.0.0"

from .cpu.decoder import Opcode, Instruction, IllegalOpcode, decode_word, encode
from .errors import (
    SimpletronError, ProgramLoadError, ProgramTooLargeError,
    InvalidInstructionError, InstructionRangeError, MemoryAddressError,
    MachineStateError, InputError,
)
from .machine import Machine, MachineState, StepFault, HALT
from .runner import Runner, RunResult, StopReason, sequence_input
