import io

import pytest

import synacor.common.ops as ops
import synacor.runtime.cpu as cpu
import synacor.runtime.errors as errors
from synacor.runtime.console import Console

from unit_utils import make_cpu, output_of

R0, R1, R2, R3 = 32768, 32769, 32770, 32771


def run_words(words, text=''):
    proc = make_cpu(words, text)
    outcome = proc.run()
    return proc, outcome


def test_halt():
    proc, outcome = run_words([ops.HALT])
    assert outcome is cpu.Outcome.HALTED
    assert proc.ip == 1


def test_step_outcomes():
    proc = make_cpu([ops.NOOP, ops.HALT])
    assert proc.exec_next() is cpu.Outcome.RUNNING
    assert proc.exec_next() is cpu.Outcome.HALTED


def test_set():
    proc, _ = run_words([ops.SET, R1, 1234, ops.SET, R2, R1, ops.HALT])
    assert proc.gp[1] == 1234
    assert proc.gp[2] == 1234


def test_set_requires_register_target():
    with pytest.raises(errors.InvalidRegisterAddress):
        run_words([ops.SET, 5, 1, ops.HALT])


@pytest.mark.parametrize('b, c, expected', [
    (60, 5, 65),
    (32758, 15, 5),
    (32767, 32767, 32766),
    (0, 0, 0)
])
def test_add_modulo(b, c, expected):
    proc, _ = run_words([ops.ADD, R0, b, c, ops.HALT])
    assert proc.gp[0] == expected


@pytest.mark.parametrize('b, c, expected', [
    (6, 7, 42),
    (32767, 32767, 1),
    (16384, 2, 0),
    (300, 300, 90000 % 32768)
])
def test_mult_modulo(b, c, expected):
    proc, _ = run_words([ops.MULT, R0, b, c, ops.HALT])
    assert proc.gp[0] == expected


def test_mod():
    proc, _ = run_words([ops.MOD, R0, 17, 5, ops.HALT])
    assert proc.gp[0] == 2


def test_mod_by_zero():
    with pytest.raises(errors.DivisionByZero):
        run_words([ops.MOD, R0, 17, 0, ops.HALT])


def test_bitwise():
    proc, _ = run_words([
        ops.AND, R0, 0b1100, 0b1010,
        ops.OR, R1, 0b1100, 0b1010,
        ops.HALT
    ])
    assert proc.gp[0] == 0b1000
    assert proc.gp[1] == 0b1110


@pytest.mark.parametrize('b, expected', [
    (0, 32767),
    (32767, 0),
    (0b101, 32767 - 0b101),
    (21845, 10922)
])
def test_not_masks_to_15_bits(b, expected):
    proc, _ = run_words([ops.NOT, R0, b, ops.HALT])
    assert proc.gp[0] == expected


def test_comparisons():
    proc, _ = run_words([
        ops.EQ, R0, 7, 7,
        ops.EQ, R1, 7, 8,
        ops.GT, R2, 8, 7,
        ops.GT, R3, 7, 7,
        ops.HALT
    ])
    assert proc.gp[0:4] == [1, 0, 1, 0]


def test_operands_from_registers():
    proc, _ = run_words([
        ops.SET, R0, 100,
        ops.SET, R1, 23,
        ops.ADD, R2, R0, R1,
        ops.HALT
    ])
    assert proc.gp[2] == 123


def test_push_pop_lifo():
    proc, outcome = run_words([
        ops.PUSH, 1,
        ops.PUSH, 2,
        ops.PUSH, 3,
        ops.POP, R0,
        ops.POP, R1,
        ops.POP, R2,
        ops.HALT
    ])
    assert outcome is cpu.Outcome.HALTED
    assert proc.gp[0:3] == [3, 2, 1]
    assert len(proc.stack) == 0


def test_push_register_value():
    proc, _ = run_words([ops.SET, R3, 77, ops.PUSH, R3, ops.HALT])
    assert proc.stack.items == [77]


def test_pop_underflow_is_graceful(caplog):
    proc, outcome = run_words([ops.SET, R0, 9, ops.POP, R0, ops.HALT])
    assert outcome is cpu.Outcome.STACK_EMPTY
    assert proc.gp[0] == 9
    assert 'The stack is empty on pop' in caplog.text


def test_ret_underflow_is_graceful(caplog):
    _, outcome = run_words([ops.RET, ops.HALT])
    assert outcome is cpu.Outcome.STACK_EMPTY
    assert 'The stack is empty on ret' in caplog.text


def test_stack_underflow():
    stack = cpu.Stack()

    with pytest.raises(errors.StackUnderflow):
        stack.pop()


def test_jmp():
    proc, _ = run_words([ops.JMP, 3, ops.HALT, ops.SET, R0, 1, ops.HALT])
    assert proc.gp[0] == 1


def test_jmp_through_register():
    proc, _ = run_words([ops.SET, R0, 6, ops.JMP, R0, ops.HALT, ops.SET, R1, 1, ops.HALT])
    assert proc.gp[1] == 1


@pytest.mark.parametrize('op, flag, jumped', [
    (ops.JT, 1, True),
    (ops.JT, 0, False),
    (ops.JF, 0, True),
    (ops.JF, 5, False)
])
def test_conditional_jumps(op, flag, jumped):
    proc, _ = run_words([op, flag, 7, ops.SET, R0, 1, ops.HALT, ops.SET, R0, 2, ops.HALT])
    assert proc.gp[0] == (2 if jumped else 1)


def test_rmem_wmem():
    proc, _ = run_words([
        ops.WMEM, 100, 4242,
        ops.SET, R1, 100,
        ops.RMEM, R0, R1,
        ops.HALT
    ])
    assert proc.memory[100] == 4242
    assert proc.gp[0] == 4242


def test_rmem_copies_raw_word():
    # Data words above the literal range are not normalized
    proc, _ = run_words([ops.RMEM, R0, 4, ops.HALT, 40000])
    assert proc.gp[0] == 40000


def test_rmem_invalid_address():
    # r0 <- 40000, then read through r0
    with pytest.raises(errors.InvalidAddress, match='Invalid memory address 40000 at 5'):
        run_words([ops.RMEM, R0, 7, ops.RMEM, R1, R0, ops.HALT, 40000])


def test_wmem_invalid_address():
    with pytest.raises(errors.InvalidAddress, match='40000'):
        run_words([ops.RMEM, R0, 7, ops.WMEM, R0, 1, ops.HALT, 40000])


def test_wmem_can_rewrite_program():
    # Replaces the noop at 4 with a halt before it is reached
    proc, outcome = run_words([ops.WMEM, 4, ops.HALT, ops.NOOP, ops.NOOP, ops.OUT, 65])
    assert outcome is cpu.Outcome.HALTED
    assert output_of(proc) == ''


def test_call_pushes_return_address():
    # 0: call 5; 2: set r0 1; 5: halt
    proc = make_cpu([ops.CALL, 5, ops.SET, R0, 1, ops.HALT])
    proc.exec_next()
    assert proc.ip == 5
    assert proc.stack.items == [2]


def test_call_through_register_return_address():
    proc = make_cpu([ops.SET, R0, 6, ops.CALL, R0, ops.HALT, ops.HALT])
    proc.exec_next()
    proc.exec_next()
    assert proc.ip == 6
    assert proc.stack.items == [5]


def test_call_ret():
    proc, outcome = run_words([
        ops.CALL, 6,            # 0
        ops.SET, R1, 2,         # 2
        ops.HALT,               # 5
        ops.SET, R0, 1,         # 6
        ops.RET                 # 9
    ])
    assert outcome is cpu.Outcome.HALTED
    assert proc.gp[0:2] == [1, 2]
    assert proc.ip == 6


def test_out():
    proc, _ = run_words([ops.OUT, 72, ops.SET, R0, 105, ops.OUT, R0, ops.OUT, 10, ops.HALT])
    assert output_of(proc) == 'Hi\n'


def test_in_register():
    proc, _ = run_words([ops.IN, R2, ops.IN, R3, ops.HALT], text='ok')
    assert proc.gp[2:4] == [ord('o'), ord('k')]


def test_in_memory_address():
    proc, _ = run_words([ops.IN, 200, ops.HALT], text='z')
    assert proc.memory[200] == ord('z')
    assert proc.gp == [0] * 8


def test_in_reads_one_char_at_a_time():
    proc = make_cpu([ops.IN, R0, ops.HALT], text='abc\n')
    proc.run()
    assert proc.console.inp.read() == 'bc\n'


def test_in_invalid_destination():
    with pytest.raises(errors.InvalidInstruction):
        run_words([ops.IN, 40000, ops.HALT], text='x')


def test_in_end_of_input():
    with pytest.raises(errors.InputError):
        run_words([ops.IN, R0, ops.HALT], text='')


class FakeConsole(Console):
    def __init__(self, text: str):
        super().__init__(io.StringIO(text), io.StringIO())
        self.events: list[str] = []

    def raw_mode(self):
        console = self

        class Scope:
            def __enter__(self):
                console.events.append('enter')

            def __exit__(self, *exc):
                console.events.append('exit')
                return False

        return Scope()


def test_in_scopes_raw_mode():
    console = FakeConsole('ab')
    proc = cpu.CPU(console)
    proc.load([ops.IN, R0, ops.IN, R1, ops.HALT])
    proc.run()

    assert console.events == ['enter', 'exit', 'enter', 'exit']


def test_in_restores_mode_on_failure():
    console = FakeConsole('')
    proc = cpu.CPU(console)
    proc.load([ops.IN, R0, ops.HALT])

    with pytest.raises(errors.InputError):
        proc.run()

    assert console.events == ['enter', 'exit']


def test_noop():
    proc, outcome = run_words([ops.NOOP, ops.NOOP, ops.HALT])
    assert outcome is cpu.Outcome.HALTED
    assert proc.ip == 3


@pytest.mark.parametrize('op', [22, 100, 32767, 32768])
def test_undefined_opcode(op):
    with pytest.raises(errors.UndefinedOpcode, match=str(op)):
        run_words([op])


def test_debug_dump(caplog):
    proc = make_cpu([ops.HALT])
    proc.gp[3] = 17

    with caplog.at_level('DEBUG'):
        proc.debug_dump()

    assert 'R3:17' in caplog.text
