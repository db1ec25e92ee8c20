import logging as lg
from typing import Sequence


class Tracer:
    ''' Diagnostic sink; observes the machine without affecting it '''

    def on_fetch(self, address: int, word: int):
        pass

    def on_peek(self, address: int, words: Sequence[int]):
        pass


class LogTracer(Tracer):
    def on_fetch(self, address: int, word: int):
        lg.debug(f'[PC {address:05}] word {word}')

    def on_peek(self, address: int, words: Sequence[int]):
        lg.debug(f'Peek @{address:05}: {" ".join(map(str, words))}')
