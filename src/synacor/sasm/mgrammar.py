# type: ignore
import pyparsing as pp

from synacor.sasm.mfpp import MacroFPP as MFPP
from synacor.sasm.fpp import FPP

from synacor.sasm.grammar import id, comment, label, asm_cmd

# Data macros
multi = pp.Optional(pp.Suppress('*') + pp.Regex('[1-9][0-9]*'))
dw = (pp.Suppress(pp.Keyword('DW')) + id + multi).set_parse_action(lambda r: (MFPP.issue_dw, r.as_list()))
text = pp.QuotedString('"', esc_char='\\')
dt = (pp.Suppress(pp.Keyword('DT')) + id + text).set_parse_action(lambda r: (MFPP.issue_dt, r.as_list()))

# Fail on unknown command
unknown = pp.Regex(r'[^\n]*\S').set_parse_action(lambda r: (FPP.on_fail, r.as_list()))

cmd = asm_cmd \
    ^ dw \
    ^ dt

statement = pp.Optional(label) + pp.Optional(comment) + cmd + pp.ZeroOrMore(comment)

program = pp.ZeroOrMore(statement ^ label ^ comment ^ unknown)
