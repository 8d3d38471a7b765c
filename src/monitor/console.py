"""
Operator terminal I/O used by the calibration procedure.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO


class OperatorConsole:
    def __init__(self, stream_in: Optional[TextIO] = None, stream_out: Optional[TextIO] = None):
        self._in = stream_in if stream_in is not None else sys.stdin
        self._out = stream_out if stream_out is not None else sys.stdout

    def write_line(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()

    def read_line(self) -> str:
        """
        Block until the operator enters a line. The content is only a gate.

        Raises:
            EOFError: If the input stream is closed.
        """
        line = self._in.readline()
        if line == "":
            raise EOFError("operator input closed")
        return line.rstrip("\n")
