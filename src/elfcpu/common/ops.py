# Numerals (fixed wire encoding)
BORI = 0   # R1 |  U2 -> R3
MULI = 1   # R1 *  U2 -> R3
BANR = 2   # R1 &  R2 -> R3
BANI = 3   # R1 &  U2 -> R3
GTIR = 4   # U1 >  R2 -> R3
SETR = 5   # R1       -> R3
ADDR = 6   # R1 +  R2 -> R3
EQIR = 7   # U1 == R2 -> R3
SETI = 8   # U1       -> R3
ADDI = 9   # R1 +  U2 -> R3
EQRR = 10  # R1 == R2 -> R3
EQRI = 11  # R1 == U2 -> R3
BORR = 12  # R1 |  R2 -> R3
GTRR = 13  # R1 >  R2 -> R3
MULR = 14  # R1 *  R2 -> R3
GTRI = 15  # R1 >  U2 -> R3

# Slot kinds
REG = 'r'
IMM = 'i'

# Operation kinds
ADD = 'add'
MUL = 'mul'
AND = 'and'
OR = 'or'
SET = 'set'
GT = 'gt'
EQ = 'eq'

OPERATIONS = {
    ADD: lambda a, b: a + b,
    MUL: lambda a, b: a * b,
    AND: lambda a, b: a & b,
    OR: lambda a, b: a | b,
    SET: lambda a, _: a,
    GT: lambda a, b: int(a > b),
    EQ: lambda a, b: int(a == b),
}


class OpSpec:
    mnemonic: str
    a: str      # Slot kind of A
    b: str      # Slot kind of B
    kind: str   # Operation kind

    def __init__(self, mnemonic: str, a: str, b: str, kind: str):
        self.mnemonic = mnemonic
        self.a = a
        self.b = b
        self.kind = kind

    def __repr__(self) -> str:
        return f'OpSpec({self.mnemonic}, {self.a}{self.b}, {self.kind})'


OPCODES: dict[int, OpSpec] = {
    BORI: OpSpec('bori', REG, IMM, OR),
    MULI: OpSpec('muli', REG, IMM, MUL),
    BANR: OpSpec('banr', REG, REG, AND),
    BANI: OpSpec('bani', REG, IMM, AND),
    GTIR: OpSpec('gtir', IMM, REG, GT),
    SETR: OpSpec('setr', REG, REG, SET),
    ADDR: OpSpec('addr', REG, REG, ADD),
    EQIR: OpSpec('eqir', IMM, REG, EQ),
    SETI: OpSpec('seti', IMM, REG, SET),
    ADDI: OpSpec('addi', REG, IMM, ADD),
    EQRR: OpSpec('eqrr', REG, REG, EQ),
    EQRI: OpSpec('eqri', REG, IMM, EQ),
    BORR: OpSpec('borr', REG, REG, OR),
    GTRR: OpSpec('gtrr', REG, REG, GT),
    MULR: OpSpec('mulr', REG, REG, MUL),
    GTRI: OpSpec('gtri', REG, IMM, GT),
}

# Mnemonic -> numeral
NUMERALS: dict[str, int] = {spec.mnemonic: numeral for numeral, spec in OPCODES.items()}

MNEMONICS = sorted(NUMERALS)
