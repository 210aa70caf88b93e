"""
Simpletron - Execution Report / Machine Dump

Text formats for the state of a Machine after (or during) a run:

  format_registers()  the five registers, one per line
  format_memory()     10x10 grid of signed words
  format_dump()       both of the above
  format_listing()    loaded program, one instruction per line
  build_report()      banner + source + console log + final dump

append_report() adds a report to a log file, keeping earlier reports.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from .cpu.decoder import mnemonic
from .machine import Machine

log = logging.getLogger(__name__)

DEFAULT_REPORT_FILE = "simpletron_report.log.txt"
TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
BANNER = "=" * 46


def format_registers(machine: Machine) -> str:
    return "\n".join([
        f"accumulator:          {machine.accumulator:+05d}",
        f"instructionCounter:   {machine.instruction_counter:02d}",
        f"instructionRegister:  {machine.instruction_register:+05d}",
        f"operationCode:        {machine.operation_code:02d}",
        f"operand:              {machine.operand:02d}",
    ])


def format_memory(machine: Machine) -> str:
    return machine.dump_memory()


def format_dump(machine: Machine) -> str:
    return ("REGISTERS:\n" + format_registers(machine) + "\n\n"
            "MEMORY:\n" + format_memory(machine) + "\n")


def format_listing(machine: Machine) -> str:
    """Listing of non-empty addresses with their source comments."""
    lines = []
    for addr, word in enumerate(machine.memory):
        comment = machine.comment_at(addr)
        if word == 0 and not comment:
            continue
        line = f"{addr:02d}  {word:+05d}  {mnemonic(word):<13s}"
        if comment:
            line += f" // {comment}"
        lines.append(line.rstrip())
    return "\n".join(lines)


def build_report(source: str, console: Union[str, Iterable[str]],
                 machine: Machine, when: Optional[datetime] = None) -> str:
    """Full execution report text."""
    when = when or datetime.now()
    if not isinstance(console, str):
        console = "\n".join(console)
    return (
        f"{BANNER}\n"
        f"   SIMPLETRON EXECUTION REPORT\n"
        f"{BANNER}\n\n"
        f"Execution date/time: {when.strftime(TIMESTAMP_FORMAT)}\n\n"
        f"--- SML CODE EXECUTED ---\n"
        f"{source.rstrip()}\n\n"
        f"--- CONSOLE LOG (INPUT/OUTPUT) ---\n"
        f"{console.rstrip()}\n\n"
        f"--- FINAL MACHINE DUMP ---\n"
        f"{format_dump(machine)}"
    )


def append_report(path: Union[str, Path], report: str) -> Path:
    """Append report to path (created if missing); returns the absolute path."""
    path = Path(path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(report)
        f.write("\n\n")
    log.info("Report appended to %s", path)
    return path
