import logging as lg

from synacor.common.hwconf import MEMORY_SIZE
from synacor.runtime.image import pack_image
from synacor.sasm.fpp import AsmError
import synacor.sasm.mfpp as mfpp
import synacor.sasm.mgrammar as mgrammar


class CompilationItem:
    package: str | None = None
    modulename: str
    contents: str

    def namespace(self) -> str:
        if self.package is None:
            return f'{self.modulename}'

        return f'{self.package}.{self.modulename}'

    def set_package(self, package: str):
        self.package = package
        return self


def compile_items(compile_items: list[CompilationItem]) -> bytes:
    # First pass
    first_pass = mfpp.MacroFPP()

    for compile_item in compile_items:
        lg.info(f'Processing {compile_item.namespace()}')
        first_pass.namespace = compile_item.namespace()
        actions = mgrammar.program.parse_string(compile_item.contents, parse_all=True)

        for (func, arg) in actions:  # type: ignore
            func(first_pass, arg)

    # Second pass
    words: list[int] = []

    for (t, d) in first_pass.cmd_list:
        if t == 'word':
            words.append(int(d))

        if t == 'ref':
            if d not in first_pass.label_dict:
                raise AsmError(f'Unknown label {d}')

            words.append(first_pass.label_dict[str(d)])

    if len(words) > MEMORY_SIZE:
        raise AsmError(f'Program of {len(words)} words does not fit in memory')

    lg.info(f'Assembled {len(words)} words')
    return pack_image(words)
