# type: ignore
''' Basic grammar '''

import pyparsing as pp

import synacor.common.ops as ops
from synacor.sasm.fpp import FPP


def g_cmd(literal, op):
    return pp.Keyword(literal).set_parse_action(lambda _: (FPP.issue_op, op))


id = pp.Word(pp.alphas + '_', pp.alphanums + '_')
ns_id = pp.Word(pp.alphas + '_', pp.alphanums + '_.')
comment = pp.Suppress(pp.Regex(r'//[^\n]*'))

label = (id + pp.Suppress(':')).set_parse_action(lambda r: (FPP.on_label, r.as_list()))

reg_indices = {
    'a': 0,
    'b': 1,
    'c': 2,
    'd': 3,
    'e': 4,
    'f': 5,
    'g': 6,
    'h': 7
}

reg_ref = pp.Or([pp.Keyword(x) for x in reg_indices])


def g_reg_action(func):
    return pp.And([reg_ref]).set_parse_action(lambda r: (func, reg_indices[r[0]]))


reg_op = g_reg_action(FPP.on_reg)

us_dec_const = pp.Regex('[0-9]+').set_parse_action(lambda r: (FPP.on_uconst, r.as_list()))
char_const = pp.QuotedString("'", esc_char='\\').set_parse_action(lambda r: (FPP.on_char, r[0]))

# [namespace::]name
refname = pp.Optional(ns_id + pp.Suppress('::')) + id
ref = (pp.Suppress('&') + refname).set_parse_action(lambda r: (FPP.on_ref, r.as_list()))

value_op = reg_op ^ us_dec_const ^ char_const ^ ref
address_op = reg_op ^ us_dec_const ^ ref


def g_cmd_1(literal, op):
    return g_cmd(literal, op) + value_op


def g_cmd_2(literal, op):
    return g_cmd(literal, op) + value_op + value_op


# Register target + values
def g_cmd_t1(literal, op):
    return g_cmd(literal, op) + reg_op + value_op


def g_cmd_t2(literal, op):
    return g_cmd(literal, op) + reg_op + value_op + value_op


halt_cmd = g_cmd('halt', ops.HALT)
set_cmd = g_cmd_t1('set', ops.SET)
push_cmd = g_cmd_1('push', ops.PUSH)
pop_cmd = g_cmd('pop', ops.POP) + reg_op
eq_cmd = g_cmd_t2('eq', ops.EQ)
gt_cmd = g_cmd_t2('gt', ops.GT)
jmp_cmd = g_cmd_1('jmp', ops.JMP)
jt_cmd = g_cmd_2('jt', ops.JT)
jf_cmd = g_cmd_2('jf', ops.JF)
add_cmd = g_cmd_t2('add', ops.ADD)
mult_cmd = g_cmd_t2('mult', ops.MULT)
mod_cmd = g_cmd_t2('mod', ops.MOD)
and_cmd = g_cmd_t2('and', ops.AND)
or_cmd = g_cmd_t2('or', ops.OR)
not_cmd = g_cmd_t1('not', ops.NOT)
rmem_cmd = g_cmd_t1('rmem', ops.RMEM)
wmem_cmd = g_cmd_2('wmem', ops.WMEM)
call_cmd = g_cmd_1('call', ops.CALL)
ret_cmd = g_cmd('ret', ops.RET)
out_cmd = g_cmd_1('out', ops.OUT)
in_cmd = g_cmd('in', ops.IN) + address_op
noop_cmd = g_cmd('noop', ops.NOOP)

asm_cmd = halt_cmd \
    ^ set_cmd \
    ^ push_cmd \
    ^ pop_cmd \
    ^ eq_cmd \
    ^ gt_cmd \
    ^ jmp_cmd \
    ^ jt_cmd \
    ^ jf_cmd \
    ^ add_cmd \
    ^ mult_cmd \
    ^ mod_cmd \
    ^ and_cmd \
    ^ or_cmd \
    ^ not_cmd \
    ^ rmem_cmd \
    ^ wmem_cmd \
    ^ call_cmd \
    ^ ret_cmd \
    ^ out_cmd \
    ^ in_cmd \
    ^ noop_cmd
