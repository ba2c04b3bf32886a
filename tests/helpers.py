"""Tiny instruction encoders and a run helper shared by the tests."""

import io

from mips_iss import CPU, Machine

ZERO, V0, A0, T0, T1, T2, T3 = 0, 2, 4, 8, 9, 10, 11


def r_type(funct, rd=0, rs=0, rt=0):
    return (rs << 21) | (rt << 16) | (rd << 11) | funct


def i_type(op, rt, rs, imm):
    return (op << 26) | (rs << 21) | (rt << 16) | (imm & 0xFFFF)


def add(rd, rs, rt):   return r_type(0x20, rd, rs, rt)
def sub(rd, rs, rt):   return r_type(0x22, rd, rs, rt)
def and_(rd, rs, rt):  return r_type(0x24, rd, rs, rt)
def or_(rd, rs, rt):   return r_type(0x25, rd, rs, rt)
def slt(rd, rs, rt):   return r_type(0x2A, rd, rs, rt)
def syscall():         return r_type(0x0C)

def addiu(rt, rs, imm):  return i_type(0x09, rt, rs, imm)
def andi(rt, rs, imm):   return i_type(0x0C, rt, rs, imm)
def ori(rt, rs, imm):    return i_type(0x0D, rt, rs, imm)
def lui(rt, imm):        return i_type(0x0F, rt, 0, imm)
def lw(rt, offset, base):  return i_type(0x23, rt, base, offset)
def sw(rt, offset, base):  return i_type(0x2B, rt, base, offset)
def beq(rs, rt, offset):   return i_type(0x04, rt, rs, offset)
def bne(rs, rt, offset):   return i_type(0x05, rt, rs, offset)
def j(target):             return (0x02 << 26) | (target & 0x03FFFFFF)


def li(reg, value):
    """lui/ori pair loading a full 32-bit constant."""
    value &= 0xFFFFFFFF
    return [lui(reg, value >> 16), ori(reg, reg, value & 0xFFFF)]


def make_cpu(text, data=(), stdin="", max_steps=1000):
    out = io.StringIO()
    cpu = CPU(Machine.from_images(text, data), stdout=out,
              stdin=io.StringIO(stdin), max_steps=max_steps)
    return cpu, out


def run_program(text, data=(), stdin="", max_steps=1000):
    cpu, out = make_cpu(text, data, stdin, max_steps)
    cpu.run()
    return cpu, out.getvalue()
