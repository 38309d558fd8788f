"""State shared between a driver and the interpreters it runs.

The runtime owns the global scope and is the sink for reported errors. The
interpreter reports every runtime error here and carries on with the next
top-level statement; drivers inspect the flags afterwards to decide on an
exit status.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .environment import Environment
from .errors import LoxError, LoxRuntimeError, ParseError


class Runtime:
    def __init__(self, stderr: Optional[TextIO] = None):
        self.globals = Environment()
        self.stderr = stderr
        self.had_error = False
        self.had_runtime_error = False
        self.errors: List[LoxError] = []

    def _write(self, text: str):
        print(text, file=self.stderr if self.stderr is not None else sys.stderr)

    def error(self, err: ParseError):
        self.errors.append(err)
        self.had_error = True
        self._write(str(err))

    def runtime_error(self, err: LoxRuntimeError):
        self.errors.append(err)
        self.had_runtime_error = True
        self._write(str(err))

    def reset(self):
        """Forget previous errors, e.g. between REPL lines."""
        self.had_error = False
        self.had_runtime_error = False
        self.errors.clear()
