"""
Simpletron - Run Driver

Drives a Machine until it stops, doing the I/O the machine leaves to its
caller:

  READ   ask the input provider for text, validate it, provide_input()
  WRITE  pull memory[operand] and hand it to the output sink
  HALT   stop normally
  <0     stop on the fault

Termination reasons:
  - HALT:             HALT executed, or IC ran off the end of memory
  - FAULT:            divide by zero / invalid opcode / overflow
  - INPUT_ERROR:      READ input was not a number or out of range
  - INPUT_EXHAUSTED:  the input provider had nothing more to give
  - STEP_LIMIT:       max_steps executed without stopping

Usage:
    m = Machine()
    m.load(source)
    result = Runner(m, input_provider=sequence_input([5, 3])).run()
    print(result.outputs)           # [8]
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Union

from .cpu.alu import in_word_range
from .cpu.decoder import Opcode
from .errors import InputError
from .machine import Machine, StepFault
from .program import parse_int

log = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.0          # seconds between steps
DEFAULT_MAX_STEPS = 100_000

START_MESSAGE = "Starting execution..."
HALT_MESSAGE = "*** Execution finished normally. ***"
READ_PROMPT = "Enter a value for the READ instruction"
INVALID_INPUT_MESSAGE = "Invalid input. Execution was aborted."
INPUT_RANGE_MESSAGE = "Input value outside the range [-9999, 9999]."

FAULT_MESSAGES = {
    StepFault.DIVIDE_BY_ZERO: "Fatal error: attempted division by zero.",
    StepFault.INVALID_OPCODE: "Fatal error: invalid operation code.",
    StepFault.ACCUMULATOR_OVERFLOW: "Fatal error: accumulator overflow.",
}

InputProvider = Callable[[str, int], Optional[Union[str, int]]]
OutputSink = Callable[[int], None]


class StopReason(Enum):
    HALT = 'HALT'
    FAULT = 'FAULT'
    INPUT_ERROR = 'INPUT_ERROR'
    INPUT_EXHAUSTED = 'INPUT_EXHAUSTED'
    STEP_LIMIT = 'STEP_LIMIT'


@dataclass
class RunResult:
    """Outcome of a run."""
    reason: StopReason
    steps: int = 0
    outputs: List[int] = field(default_factory=list)
    fault: Optional[StepFault] = None
    message: str = ""
    console: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.reason is StopReason.HALT

    @property
    def console_text(self) -> str:
        return "\n".join(self.console) + "\n"


def parse_input(text: Union[str, int]) -> int:
    """Validate one READ value. Raises InputError with the console message."""
    if isinstance(text, int):
        value = text
    else:
        value = parse_int(text)
        if value is None:
            raise InputError(INVALID_INPUT_MESSAGE)
    if not in_word_range(value):
        raise InputError(INPUT_RANGE_MESSAGE)
    return value


def sequence_input(values: Iterable[Union[str, int]]) -> InputProvider:
    """Input provider that hands out values in order, then None."""
    it = iter(values)

    def provider(prompt: str, address: int):
        return next(it, None)

    return provider


def console_input(input_fn: Callable[[str], str] = input) -> InputProvider:
    """Input provider reading from the terminal; EOF means no more input."""
    def provider(prompt: str, address: int):
        try:
            return input_fn(f"{prompt} (memory[{address:02d}]): ")
        except EOFError:
            return None

    return provider


def chain_input(*providers: InputProvider) -> InputProvider:
    """Ask each provider in turn until one has a value."""
    def provider(prompt: str, address: int):
        for p in providers:
            value = p(prompt, address)
            if value is not None:
                return value
        return None

    return provider


class Runner:
    """Run loop for one Machine.

    The machine must already be loaded. interval > 0 paces execution
    (the delay is injected through `sleep` so tests can skip it).
    """

    def __init__(self, machine: Machine,
                 input_provider: Optional[InputProvider] = None,
                 output_sink: Optional[OutputSink] = None,
                 interval: float = DEFAULT_INTERVAL,
                 max_steps: int = DEFAULT_MAX_STEPS,
                 sleep: Callable[[float], None] = time.sleep):
        self.machine = machine
        self.input_provider = input_provider
        self.output_sink = output_sink
        self.interval = interval
        self.max_steps = max_steps
        self._sleep = sleep
        self.result: Optional[RunResult] = None

    def run(self) -> RunResult:
        """Run until a termination condition and return the result."""
        for _ in self.iter_steps():
            pass
        return self.result

    def iter_steps(self) -> Iterator[int]:
        """Generator form of run(): yields each step's code.

        I/O for the step is already done when the code is yielded. When
        the generator finishes, self.result holds the RunResult.
        """
        m = self.machine
        start = m.steps_executed
        console = [START_MESSAGE]
        outputs: List[int] = []
        self.result = None
        log.info("Run started (interval=%.3fs, max_steps=%d)",
                 self.interval, self.max_steps)

        def finish(reason, message, fault=None):
            console.append(message)
            self.result = RunResult(
                reason=reason, steps=m.steps_executed - start,
                outputs=outputs, fault=fault, message=message,
                console=console)
            log.info("Run stopped: %s after %d steps", reason.value,
                     self.result.steps)

        calls = 0
        while True:
            if calls >= self.max_steps:
                finish(StopReason.STEP_LIMIT,
                       f"Step limit reached ({self.max_steps} steps). "
                       f"Execution was aborted.")
                return
            code = m.step()
            calls += 1

            if code < 0:
                fault = StepFault(code)
                finish(StopReason.FAULT, FAULT_MESSAGES[fault], fault)
                yield code
                return

            if code == Opcode.HALT:
                finish(StopReason.HALT, HALT_MESSAGE)
                yield code
                return

            if code == Opcode.READ:
                addr = m.operand
                text = (self.input_provider(READ_PROMPT, addr)
                        if self.input_provider else None)
                if text is None:
                    finish(StopReason.INPUT_EXHAUSTED,
                           f"No input available for READ into memory[{addr:02d}]. "
                           f"Execution was aborted.")
                    yield code
                    return
                try:
                    value = parse_input(text)
                except InputError as e:
                    log.warning("Rejected input %r for memory[%02d]", text, addr)
                    finish(StopReason.INPUT_ERROR, str(e))
                    yield code
                    return
                m.provide_input(value)
                console.append(f"Input: {value}")

            elif code == Opcode.WRITE:
                value = m.read_memory(m.operand)
                outputs.append(value)
                console.append(f"Output: {value}")
                if self.output_sink:
                    self.output_sink(value)

            yield code

            if self.interval > 0:
                self._sleep(self.interval)
