# type: ignore
''' Grammar of the program and sample text formats '''

import pyparsing as pp

import elfcpu.common.ops as ops
from elfcpu.common.hwconf import IP_DIRECTIVE


integer = pp.Regex('[+-]?[0-9]+').set_parse_action(lambda r: int(r[0]))

mnemonic = pp.one_of(ops.MNEMONICS, as_keyword=True)

# #ip <register>
ip_directive = pp.Suppress(pp.Keyword(IP_DIRECTIVE)) + integer

# <mnemonic> <a> <b> <c>
text_instruction = mnemonic + integer + integer + integer

# <numeral> <a> <b> <c>
raw_instruction = pp.Group(integer + integer + integer + integer)

# [r0, r1, ...]
registers = pp.Group(
    pp.Suppress('[') + pp.DelimitedList(integer) + pp.Suppress(']')
)

before = pp.Suppress(pp.Literal('Before') + ':') + registers('before')
after = pp.Suppress(pp.Literal('After') + ':') + registers('after')

sample = before + raw_instruction('instruction') + after
