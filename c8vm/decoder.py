#!/usr/bin/env python3

"""
Instruction Decoder

Splits a 16-bit instruction word into its nibbles and operand fields, and
names the operation it encodes.

    nnn = address (low 12 bits)
    kk  = byte (low 8 bits)
    x/y = register (second/third nibble, 0-15)
    n   = nibble (fourth nibble)

Decoding never fails.  Words that match no known pattern decode to
Op.UNKNOWN, and it is up to the CPU to refuse them.

Like the CPU's old lookup table, the operation is found by masking the word
according to its first nibble, then looking up the masked value:
    0x0       exact match (0xFFFF)
    0x5/8/9   0xF00F
    0xE/F     0xF0FF
    others    0xF000
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from enum import IntEnum


class Op(IntEnum):
    UNKNOWN = -1
    NOP = 0x0000         # 0000
    CLS = 0x00E0         # 00E0
    RET = 0x00EE         # 00EE
    JP = 0x1000          # 1nnn
    CALL = 0x2000        # 2nnn
    SE_BYTE = 0x3000     # 3xkk
    SNE_BYTE = 0x4000    # 4xkk
    SE_REG = 0x5000      # 5xy0
    LD_BYTE = 0x6000     # 6xkk
    ADD_BYTE = 0x7000    # 7xkk
    LD_REG = 0x8000      # 8xy0
    OR = 0x8001          # 8xy1
    AND = 0x8002         # 8xy2
    XOR = 0x8003         # 8xy3
    ADD_REG = 0x8004     # 8xy4
    SUB = 0x8005         # 8xy5
    SHR = 0x8006         # 8xy6
    SUBN = 0x8007        # 8xy7
    SHL = 0x800E         # 8xyE
    SNE_REG = 0x9000     # 9xy0
    LD_I = 0xA000        # Annn
    JP_V0 = 0xB000       # Bnnn
    RND = 0xC000         # Cxkk
    DRW = 0xD000         # Dxyn
    SKP = 0xE09E         # Ex9E
    SKNP = 0xE0A1        # ExA1
    LD_VX_DT = 0xF007    # Fx07
    LD_VX_K = 0xF00A     # Fx0A
    LD_DT_VX = 0xF015    # Fx15
    LD_ST_VX = 0xF018    # Fx18
    ADD_I = 0xF01E       # Fx1E
    LD_F = 0xF029        # Fx29
    LD_B = 0xF033        # Fx33
    LD_MEM_VX = 0xF055   # Fx55
    LD_VX_MEM = 0xF065   # Fx65


# Bitmask applied to a word before lookup, indexed by first nibble
OP_MASKS = (
    0xFFFF, 0xF000, 0xF000, 0xF000,
    0xF000, 0xF00F, 0xF000, 0xF000,
    0xF00F, 0xF00F, 0xF000, 0xF000,
    0xF000, 0xF000, 0xF0FF, 0xF0FF
)

OP_LOOKUP = {op.value: op for op in Op if op is not Op.UNKNOWN}

MNEMONICS = {
    Op.UNKNOWN: "???",
    Op.NOP: "NOP",
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03x}",
    Op.CALL: "CALL 0x{nnn:03x}",
    Op.SE_BYTE: "SE V{x:01x}, 0x{kk:02x}",
    Op.SNE_BYTE: "SNE V{x:01x}, 0x{kk:02x}",
    Op.SE_REG: "SE V{x:01x}, V{y:01x}",
    Op.LD_BYTE: "LD V{x:01x}, 0x{kk:02x}",
    Op.ADD_BYTE: "ADD V{x:01x}, 0x{kk:02x}",
    Op.LD_REG: "LD V{x:01x}, V{y:01x}",
    Op.OR: "OR V{x:01x}, V{y:01x}",
    Op.AND: "AND V{x:01x}, V{y:01x}",
    Op.XOR: "XOR V{x:01x}, V{y:01x}",
    Op.ADD_REG: "ADD V{x:01x}, V{y:01x}",
    Op.SUB: "SUB V{x:01x}, V{y:01x}",
    Op.SHR: "SHR V{x:01x}, V{y:01x}",
    Op.SUBN: "SUBN V{x:01x}, V{y:01x}",
    Op.SHL: "SHL V{x:01x}, V{y:01x}",
    Op.SNE_REG: "SNE V{x:01x}, V{y:01x}",
    Op.LD_I: "LD I, 0x{nnn:03x}",
    Op.JP_V0: "JP V0, 0x{nnn:03x}",
    Op.RND: "RND V{x:01x}, 0x{kk:02x}",
    Op.DRW: "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    Op.SKP: "SKP V{x:01x}",
    Op.SKNP: "SKNP V{x:01x}",
    Op.LD_VX_DT: "LD V{x:01x}, DT",
    Op.LD_VX_K: "LD V{x:01x}, K",
    Op.LD_DT_VX: "LD DT, V{x:01x}",
    Op.LD_ST_VX: "LD ST, V{x:01x}",
    Op.ADD_I: "ADD I, V{x:01x}",
    Op.LD_F: "LD F, V{x:01x}",
    Op.LD_B: "LD B, V{x:01x}",
    Op.LD_MEM_VX: "LD [I], V{x:01x}",
    Op.LD_VX_MEM: "LD V{x:01x}, [I]"
}


class Instruction(namedtuple("Instruction", "word op nibbles nnn kk x y n")):
    __slots__ = ()

    def mnemonic(self):
        return MNEMONICS[self.op].format(nnn=self.nnn, kk=self.kk, x=self.x, y=self.y, n=self.n)


def decode(word):
    word &= 0xFFFF
    nibbles = ((word & 0xF000) >> 12, (word & 0xF00) >> 8, (word & 0xF0) >> 4, word & 0xF)
    op = OP_LOOKUP.get(word & OP_MASKS[nibbles[0]], Op.UNKNOWN)

    return Instruction(
        word=word,
        op=op,
        nibbles=nibbles,
        nnn=word & 0xFFF,
        kk=word & 0xFF,
        x=nibbles[1],
        y=nibbles[2],
        n=nibbles[3]
    )
