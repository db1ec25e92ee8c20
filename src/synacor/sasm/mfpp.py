''' First-pass macroprocessor '''

import logging as lg

from synacor.sasm.fpp import FPP, Tokens


class MacroFPP(FPP):
    # DW <name> [* <count>]
    def issue_dw(self, tokens: Tokens):
        self.on_label(tokens[0:1])

        if len(tokens) == 2:
            multiplicity = int(tokens[1])
        else:
            multiplicity = 1

        for _ in range(multiplicity):
            self.issue_word(0)

    # DT <name> "<text>"
    # Zero-terminated
    def issue_dt(self, tokens: Tokens):
        self.on_label(tokens[0:1])
        text = tokens[1]
        lg.debug(f'Text {tokens[0]} of {len(text)} chars')

        for char in text:
            self.on_char(char)

        self.issue_word(0)
