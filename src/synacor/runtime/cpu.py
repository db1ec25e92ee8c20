import logging as lg
from array import array
from enum import Enum
from typing import Callable, Sequence

import synacor.common.ops as ops
from synacor.common.hwconf import (
    MAX_LITERAL, MODULUS, WORD_MASK, MEMORY_SIZE, REGISTERS, REGISTER_BASE, REGISTER_LIMIT
)
from synacor.runtime.console import Console
from synacor.runtime.trace import Tracer
from synacor.runtime.errors import (
    LoadError, UndefinedOpcode, InvalidInstruction, InvalidRegisterAddress,
    InvalidAddress, DivisionByZero, StackUnderflow
)


class Outcome(Enum):
    RUNNING = 'running'
    HALTED = 'halted'            # halt executed
    STACK_EMPTY = 'stack-empty'  # pop or ret on an empty stack

    def is_terminal(self) -> bool:
        return self is not Outcome.RUNNING


class Stack:
    def __init__(self):
        self.items: list[int] = []

    def __len__(self):
        return len(self.items)

    def push(self, val: int):
        self.items.append(val)

    def pop(self) -> int:
        if not self.items:
            raise StackUnderflow()

        return self.items.pop()


def is_register(word: int) -> bool:
    return REGISTER_BASE <= word < REGISTER_LIMIT


class CPU():
    ip: int            # Instruction pointer
    gp: list[int]      # General purpose registers
    memory: array
    stack: Stack

    def __init__(self, console: Console | None = None, tracer: Tracer | None = None):
        self.console = Console() if console is None else console
        self.tracer = Tracer() if tracer is None else tracer

        self.memory = array('H', bytes(MEMORY_SIZE * 2))
        self.gp = [0] * REGISTERS
        self.stack = Stack()
        self.ip = 0

    def load(self, words: Sequence[int]):
        if len(words) > MEMORY_SIZE:
            raise LoadError(f'Image of {len(words)} words does not fit in {MEMORY_SIZE} words of memory')

        for addr, word in enumerate(words):
            if not 0 <= word <= 0xFFFF:
                raise LoadError(f'Word {word} at {addr} is not a 16-bit value')

        self.memory[0:len(words)] = array('H', words)
        self.ip = 0
        lg.debug(f'Loaded {len(words)} words')

    # - Helpers - #

    def debug_dump(self):
        state = [f'IP:{self.ip}', f'SP:{len(self.stack)}']
        state.extend([f'R{i}:{self.gp[i]}' for i in range(REGISTERS)])
        lg.debug(' '.join(state))

    def peek(self, count: int) -> list[int]:
        start = min(self.ip, MEMORY_SIZE)
        words = list(self.memory[start:start + count])
        self.tracer.on_peek(start, words)
        return words

    def fetch_raw(self) -> int:
        addr = self.ip

        if not 0 <= addr < MEMORY_SIZE:
            raise InvalidAddress(f'Instruction pointer {addr} is outside memory')

        word = self.memory[addr]
        self.tracer.on_fetch(addr, word)
        self.ip += 1
        return word

    def resolve_value(self) -> int:
        word = self.fetch_raw()

        if word <= MAX_LITERAL:
            return word

        if is_register(word):
            return self.gp[word - REGISTER_BASE]

        raise InvalidInstruction(f'Invalid value {word} at {self.ip - 1}')

    def resolve_register_target(self) -> int:
        word = self.fetch_raw()

        if not is_register(word):
            raise InvalidRegisterAddress(f'Invalid register address {word} at {self.ip - 1}')

        return word - REGISTER_BASE

    def resolve_address(self) -> int:
        addr = self.resolve_value()

        if not 0 <= addr < MEMORY_SIZE:
            raise InvalidAddress(f'Invalid memory address {addr} at {self.ip - 1}')

        return addr

    def arithm_pair(self, op: Callable[[int, int], int]):
        target = self.resolve_register_target()
        a = self.resolve_value()
        b = self.resolve_value()
        self.gp[target] = op(a, b)

    # - Operations - #

    def halt(self):
        return Outcome.HALTED

    def set(self):
        target = self.resolve_register_target()
        self.gp[target] = self.resolve_value()

    def push(self):
        self.stack.push(self.resolve_value())

    def pop(self):
        target = self.resolve_register_target()

        try:
            self.gp[target] = self.stack.pop()
        except StackUnderflow:
            lg.warning('The stack is empty on pop')
            return Outcome.STACK_EMPTY

    def eq(self):
        self.arithm_pair(lambda a, b: 1 if a == b else 0)

    def gt(self):
        self.arithm_pair(lambda a, b: 1 if a > b else 0)

    def jmp(self):
        self.ip = self.resolve_value()

    def jt(self):
        val = self.resolve_value()
        addr = self.resolve_value()

        if val != 0:
            self.ip = addr

    def jf(self):
        val = self.resolve_value()
        addr = self.resolve_value()

        if val == 0:
            self.ip = addr

    def add(self):
        self.arithm_pair(lambda a, b: (a + b) % MODULUS)

    def mult(self):
        self.arithm_pair(lambda a, b: (a * b) % MODULUS)

    def mod(self):
        def remainder(a: int, b: int):
            if b == 0:
                raise DivisionByZero(f'Division by zero at {self.ip - 4}')

            return a % b

        self.arithm_pair(remainder)

    def band(self):
        self.arithm_pair(lambda a, b: a & b)

    def bor(self):
        self.arithm_pair(lambda a, b: a | b)

    def inv(self):
        target = self.resolve_register_target()
        self.gp[target] = ~self.resolve_value() & WORD_MASK

    def rmem(self):
        target = self.resolve_register_target()
        addr = self.resolve_address()
        # Raw word, copied unchanged
        self.gp[target] = self.memory[addr]

    def wmem(self):
        addr = self.resolve_address()
        self.memory[addr] = self.resolve_value()

    def call(self):
        # The operand word is not fetched yet
        ret_addr = self.ip + 1
        self.stack.push(ret_addr)
        self.jmp()

    def ret(self):
        try:
            self.ip = self.stack.pop()
        except StackUnderflow:
            lg.warning('The stack is empty on ret')
            return Outcome.STACK_EMPTY

    def out(self):
        self.console.write(self.resolve_value())

    def inp(self):
        with self.console.raw_mode():
            code = self.console.read()

        # Either a register or a plain memory address
        word = self.fetch_raw()

        if is_register(word):
            self.gp[word - REGISTER_BASE] = code
        elif word < MEMORY_SIZE:
            self.memory[word] = code
        else:
            raise InvalidInstruction(f'Invalid input destination {word} at {self.ip - 1}')

    def noop(self):
        pass

    HANDLERS = {
        ops.HALT: halt,
        ops.SET: set,
        ops.PUSH: push,
        ops.POP: pop,
        ops.EQ: eq,
        ops.GT: gt,
        ops.JMP: jmp,
        ops.JT: jt,
        ops.JF: jf,
        ops.ADD: add,
        ops.MULT: mult,
        ops.MOD: mod,
        ops.AND: band,
        ops.OR: bor,
        ops.NOT: inv,
        ops.RMEM: rmem,
        ops.WMEM: wmem,
        ops.CALL: call,
        ops.RET: ret,
        ops.OUT: out,
        ops.IN: inp,
        ops.NOOP: noop
    }

    # -- Implementation -- #

    def exec_next(self) -> Outcome:
        addr = self.ip
        op = self.fetch_raw()
        handler = self.HANDLERS.get(op)

        if handler is None:
            raise UndefinedOpcode(f'Undefined opcode {op} at {addr}')

        outcome = handler(self)
        return Outcome.RUNNING if outcome is None else outcome

    def run(self) -> Outcome:
        while True:
            outcome = self.exec_next()

            if outcome.is_terminal():
                return outcome
