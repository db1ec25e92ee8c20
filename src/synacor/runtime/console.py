import sys
import logging as lg
import termios
import tty
from contextlib import contextmanager
from typing import TextIO

from synacor.common.hwconf import MAX_LITERAL
from synacor.runtime.errors import InputError


class Console:
    ''' Character I/O for the `in` and `out` instructions '''

    inp: TextIO
    out: TextIO

    def __init__(self, inp: TextIO | None = None, out: TextIO | None = None):
        self.inp = sys.stdin if inp is None else inp
        self.out = sys.stdout if out is None else out

    def is_terminal(self) -> bool:
        try:
            return self.inp.isatty()
        except ValueError:
            # Closed stream
            return False

    @contextmanager
    def raw_mode(self):
        ''' Unbuffered, non-canonical input for the duration of the block '''

        if not self.is_terminal():
            yield
            return

        fd = self.inp.fileno()
        saved = termios.tcgetattr(fd)
        lg.debug('Entering raw input mode')

        try:
            tty.setcbreak(fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
            lg.debug('Terminal mode restored')

    def read(self) -> int:
        try:
            ch = self.inp.read(1)
        except UnicodeDecodeError as e:
            raise InputError(f'Undecodable input {e.object[e.start:e.end]!r}') from e

        if ch == '':
            raise InputError('End of input')

        code = ord(ch)

        if code > MAX_LITERAL:
            raise InputError(f'Character code {code} does not fit in a word')

        return code

    def write(self, code: int):
        self.out.write(chr(code))
        self.out.flush()
