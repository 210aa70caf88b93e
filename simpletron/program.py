"""
Simpletron - SML Program Text

Program text is line oriented, one memory address per line:

    1007   // read A
    1008   // read B
           // a blank slot, memory[2] stays 0
    2007

Everything from the first "//" to the end of the line is a comment. What
remains, trimmed, is either empty or a base-10 integer with an optional
sign. Only ASCII digits are accepted; int() would also take underscores
and non-ASCII digits, which are not part of the format.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

COMMENT_MARKER = "//"

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class SourceLine:
    """One parsed program line."""
    line_num: int                  # 1-based
    raw: str                       # line with surrounding whitespace removed
    code: str = ""                 # instruction text before the comment
    comment: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.code


def parse_int(text: str) -> Optional[int]:
    """Parse a signed decimal literal; None if text is not one."""
    text = text.strip()
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def parse_line(line: str, line_num: int) -> SourceLine:
    """Split a program line into instruction text and comment.

    The code is not parsed here; Machine.load() parses and range-checks
    it so that the failure can be reported against the line number.
    """
    raw = line.strip()
    code, comment = raw, ""
    pos = raw.find(COMMENT_MARKER)
    if pos >= 0:
        code = raw[:pos]
        comment = raw[pos + len(COMMENT_MARKER):].strip()
    return SourceLine(line_num=line_num, raw=raw, code=code.strip(),
                      comment=comment)


def split_lines(text: str) -> List[str]:
    """Split program text into lines the way a text editor shows them."""
    return text.splitlines()
