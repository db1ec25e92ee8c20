import sys
import traceback
from pathlib import Path
import logging as lg

import click

from synacor.runtime.console import Console
from synacor.runtime.trace import Tracer, LogTracer
from synacor.runtime.image import unpack_image
import synacor.runtime.errors as errors
import synacor.runtime.cpu as cpu


EXIT_HALT = 0
EXIT_LOAD_ERROR = 1
EXIT_KEYBOARD = 3
EXIT_EXEC_ERROR = 100

EXIT_CODES = {
    errors.UndefinedOpcode: 101,
    errors.InvalidInstruction: 102,
    errors.InvalidRegisterAddress: 103,
    errors.InvalidAddress: 104,
    errors.DivisionByZero: 105,
    errors.InputError: 106
}

PEEK_WORDS = 4


def create(binary: bytes, console: Console | None = None, tracer: Tracer | None = None) -> cpu.CPU:
    words = unpack_image(binary)
    proc = cpu.CPU(console, tracer)
    proc.load(words)
    return proc


def execute(binary: bytes, console: Console | None = None, tracer: Tracer | None = None) -> cpu.Outcome:
    proc = create(binary, console, tracer)
    return proc.run()


def exit_code(e: errors.ExecutionError) -> int:
    return EXIT_CODES.get(type(e), EXIT_EXEC_ERROR)


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-t', '--trace', is_flag=True, help='Logs every fetched word')
@click.argument('image_filename', type=Path)
def run(verbose: bool, trace: bool, image_filename: Path):
    lg.basicConfig(level=lg.DEBUG if verbose or trace else lg.INFO)
    lg.info('SYNACOR VM')

    tracer = LogTracer() if trace else Tracer()

    try:
        binary = image_filename.read_bytes()
        proc = create(binary, tracer=tracer)

    except (OSError, errors.LoadError) as e:
        lg.error(f'Unable to load {image_filename}: {e}')
        sys.exit(EXIT_LOAD_ERROR)

    try:
        outcome = proc.run()

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except errors.ExecutionError as e:
        lg.error(f'Execution halted on {type(e).__name__}: {e}')
        proc.debug_dump()
        proc.peek(PEEK_WORDS)
        sys.exit(exit_code(e))

    except Exception as e:
        lg.error(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)

    if outcome is cpu.Outcome.STACK_EMPTY:
        lg.info('Execution halted on empty stack')
    else:
        lg.info('Execution halted gracefully')

    sys.exit(EXIT_HALT)


if __name__ == '__main__':
    run()
