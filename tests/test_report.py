"""
Report / dump text tests. These formats are read by people and diffed
by golden-output checks, so the exact layout matters.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime

from simpletron.machine import Machine
from simpletron.runner import Runner, sequence_input
from simpletron.report import (
    format_registers, format_memory, format_dump, format_listing,
    build_report, append_report, BANNER,
)

SUM_TWO = ("1007 // read A\n1008 // read B\n2007\n3008\n"
           "2109 // sum\n1109\n4300 // done\n")


def _ran_machine():
    m = Machine()
    m.load(SUM_TWO)
    result = Runner(m, input_provider=sequence_input([5, 3])).run()
    return m, result


class TestDump:

    def test_registers_after_run(self):
        """Register block after sum-two halts."""
        m, _ = _ran_machine()
        assert format_registers(m) == (
            "accumulator:          +0008\n"
            "instructionCounter:   06\n"
            "instructionRegister:  +4300\n"
            "operationCode:        43\n"
            "operand:              00"
        )

    def test_registers_negative_accumulator(self):
        """Negative accumulator keeps its sign and padding."""
        m = Machine()
        m.load(["2002", "4300", "-45"])
        m.step()
        assert format_registers(m).splitlines()[0] == "accumulator:          -0045"

    def test_memory_grid(self):
        """Rows are prefixed by their base address."""
        m, _ = _ran_machine()
        lines = format_memory(m).splitlines()
        assert lines[1] == (" 0  +1007 +1008 +2007 +3008 +2109 +1109 +4300 "
                            "+0005 +0003 +0008 ")
        assert lines[10] == "90  " + "+0000 " * 10

    def test_dump_sections(self):
        """REGISTERS block, blank line, MEMORY block."""
        m, _ = _ran_machine()
        dump = format_dump(m)
        assert dump.startswith("REGISTERS:\naccumulator:")
        assert "\n\nMEMORY:\n    " in dump
        assert dump.endswith("\n")


class TestListing:

    def test_listing_shows_comments(self):
        """Listing lines carry mnemonic and source comment."""
        m, _ = _ran_machine()
        lines = format_listing(m).splitlines()
        assert lines[0] == "00  +1007  READ 07       // read A"
        assert lines[2] == "02  +2007  LOAD 07"
        assert lines[6] == "06  +4300  HALT 00       // done"
        assert lines[7] == "07  +0005  DATA"
        assert len(lines) == 10

    def test_listing_keeps_comment_only_slots(self):
        """A zero word with a comment is still listed."""
        m = Machine()
        m.load(["// title", "4300"])
        assert format_listing(m).splitlines() == [
            "00  +0000  DATA          // title",
            "01  +4300  HALT 00",
        ]

    def test_empty_listing(self):
        """Empty memory lists nothing."""
        assert format_listing(Machine()) == ""


class TestReport:

    def test_build_report(self):
        """Report has banner, timestamp and all three sections."""
        m, result = _ran_machine()
        report = build_report(SUM_TWO, result.console, m,
                              when=datetime(2026, 3, 7, 14, 5, 9))
        lines = report.splitlines()
        assert lines[0] == BANNER
        assert lines[1] == "   SIMPLETRON EXECUTION REPORT"
        assert "Execution date/time: 07/03/2026 14:05:09" in report
        assert "--- SML CODE EXECUTED ---\n1007 // read A\n" in report
        assert "--- CONSOLE LOG (INPUT/OUTPUT) ---\nStarting execution...\n" in report
        assert "Output: 8\n" in report
        assert "--- FINAL MACHINE DUMP ---\nREGISTERS:\n" in report

    def test_console_as_text(self):
        """Console log may be passed as one string."""
        m = Machine()
        report = build_report("4300", "Output: 1\n", m,
                              when=datetime(2026, 1, 1))
        assert "--- CONSOLE LOG (INPUT/OUTPUT) ---\nOutput: 1\n\n" in report

    def test_append_report(self, tmp_path):
        """Reports accumulate in the same file."""
        m, result = _ran_machine()
        target = tmp_path / "logs" / "report.txt"
        report = build_report(SUM_TWO, result.console, m)
        path = append_report(target, report)
        assert path == target.resolve()
        append_report(target, report)
        text = target.read_text(encoding="utf-8")
        assert text.count("SIMPLETRON EXECUTION REPORT") == 2
        assert text.endswith("\n\n")
