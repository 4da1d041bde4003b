"""Linemarker directives, as emitted by a GCC-style preprocessor.

See https://gcc.gnu.org/onlinedocs/cpp/Preprocessor-Output.html. A
linemarker has the form::

    # <line> "<filename>" <flags>...

and means the *following* physical line is line ``<line>`` of
``<filename>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LINEMARKER_RE = re.compile(r'#\s*(\d+)\s+"((?:[^"\\]|\\.)+)"((?:\s+\d+)*)\s*')
_ESCAPE_RE = re.compile(r"\\(.)")


@dataclass(frozen=True, slots=True)
class Linemarker:
    line: int
    unit: str
    flags: tuple[int, ...] = ()


def parse_linemarker(text: str) -> Linemarker | None:
    """Parse a full directive line; return None if it is not a linemarker."""
    m = _LINEMARKER_RE.fullmatch(text.rstrip("\r"))
    if m is None:
        return None
    line, unit, flags = m.groups()
    # The preprocessor escapes backslashes and quotes in file names
    unit = _ESCAPE_RE.sub(r"\1", unit)
    return Linemarker(int(line), unit, tuple(int(f) for f in flags.split()))
