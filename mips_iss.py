"""
MIPS Instruction-Set Simulator
============================================================
A single-cycle, pure-Python simulation of a 32-bit MIPS-like processor.

  Decoder       — bit-field extraction from 32-bit instruction words
  ALU / Control — single-cycle datapath (R-type, I-type, branch, jump)
  Memory        — sparse, byte-addressable, little-endian
  Syscalls      — print int / print string / read int / exit
  Loader        — hex text and data images

Exactly one instruction is fetched and retired per step; there is no
pipeline, cache or branch prediction.

Run:
    python3 mips_iss.py text.hex data.hex            # run a program
    python3 mips_iss.py text.hex data.hex --dump     # plus final state
    python3 mips_iss.py text.hex data.hex --verbose  # per-instruction trace
"""

from __future__ import annotations
import argparse
import enum
import logging
import re
import struct
import sys
from typing import Dict, Iterable, Iterator, List, Optional, TextIO, Tuple

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Architectural constants
# ─────────────────────────────────────────────────────────────────────────────

TEXT_SEGMENT_BASE = 0x00400000
DATA_SEGMENT_BASE = 0x10010000

NUM_REGISTERS = 32
WORD_SIZE     = 4

# Register indices with a fixed role
REG_V0 = 2    # syscall service number / read-int result
REG_A0 = 4    # syscall argument
REG_GP = 28
REG_SP = 29

GP_INIT = 0x10008000
SP_INIT = 0x7FFFEFFC

# Syscall service numbers (value of $v0)
SYSCALL_PRINT_INT    = 1
SYSCALL_PRINT_STRING = 4
SYSCALL_READ_INT     = 5
SYSCALL_EXIT         = 10

INT32_MIN = -0x80000000
INT32_MAX = 0x7FFFFFFF

EXIT_BANNER               = "\n-- program is finished running --\n"
DROPPED_OFF_BOTTOM_BANNER = "\n-- program is finished running (dropped off bottom) --\n"

# ─────────────────────────────────────────────────────────────────────────────
# Utility helpers
# ─────────────────────────────────────────────────────────────────────────────

def sign_extend(value: int, bits: int) -> int:
    """Sign-extend a *bits*-wide integer to a full Python int."""
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value

def to_unsigned_32(value: int) -> int:
    """Clamp to unsigned 32-bit."""
    return value & 0xFFFFFFFF

def to_signed_32(value: int) -> int:
    """Interpret an unsigned 32-bit value as signed."""
    v = value & 0xFFFFFFFF
    if v & 0x80000000:
        return v - 0x100000000
    return v

def get_bits(word: int, left: int, right: int) -> int:
    """
    Return bits *left* down to *right* (inclusive, bit 0 = LSB) of a
    32-bit word as an unsigned integer.
    """
    if not 31 >= left >= right >= 0:
        raise ValueError(f"invalid bit range [{left}:{right}]")
    return (to_unsigned_32(word) >> right) & ((1 << (left - right + 1)) - 1)

# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class SimulatorError(Exception):
    """Base class for every fatal condition; a run never recovers from one."""


class ExecutionError(SimulatorError):
    """A fatal condition raised while executing the instruction at *pc*."""

    def __init__(self, message: str, instruction: int, pc: int):
        self.message = message
        self.instruction = to_unsigned_32(instruction)
        self.pc = to_unsigned_32(pc)
        super().__init__(message)

    def __str__(self):
        return (f"{self.message} (instruction = {self.instruction:x}, "
                f"pc = {self.pc:x})")


class DecodeError(ExecutionError):
    """Unrecognized opcode or function code."""


class SyscallError(ExecutionError):
    """Unrecognized syscall service or malformed syscall input."""


class StepLimitExceeded(ExecutionError):
    """The run did not halt within the configured number of steps."""


class MemoryAccessError(SimulatorError):
    """Read of an address that was never written."""

    def __init__(self, address: int, message: str = "Unmapped memory access"):
        self.message = message
        self.address = to_unsigned_32(address)
        self.pc: Optional[int] = None  # filled in by the CPU
        super().__init__(message)

    def __str__(self):
        if self.pc is None:
            return f"{self.message} (address = {self.address:x})"
        return (f"{self.message} (address = {self.address:x}, "
                f"pc = {self.pc:x})")


class LoaderError(SimulatorError):
    """A text or data image could not be read or parsed."""

# ─────────────────────────────────────────────────────────────────────────────
# Instruction Decoder
# ─────────────────────────────────────────────────────────────────────────────

class DecodedInstruction:
    """Decoded MIPS instruction fields. All fields are views of ``raw``."""

    __slots__ = ("raw", "op", "rs", "rt", "rd", "funct",
                 "imm", "imm_sign", "target")

    def __init__(self, raw: int):
        self.raw      = to_unsigned_32(raw)
        self.op       = get_bits(self.raw, 31, 26)
        self.rs       = get_bits(self.raw, 25, 21)
        self.rt       = get_bits(self.raw, 20, 16)
        self.rd       = get_bits(self.raw, 15, 11)
        self.funct    = get_bits(self.raw, 5, 0)
        self.imm      = get_bits(self.raw, 15, 0)   # also the load/store/branch offset
        self.imm_sign = sign_extend(self.imm, 16)
        self.target   = get_bits(self.raw, 25, 0)

    @property
    def is_r_type(self) -> bool:
        return self.op == 0

    def __repr__(self):
        return (f"Instr(raw={self.raw:#010x} op={self.op} rs={self.rs} "
                f"rt={self.rt} rd={self.rd} fn={self.funct} "
                f"imm={self.imm_sign})")

# ─────────────────────────────────────────────────────────────────────────────
# ALU
# ─────────────────────────────────────────────────────────────────────────────

class ALU:
    """
    32-bit ALU for the supported instruction set:
        ADD, SUB, AND, OR, SLT, LUI
    Operands and results are signed 32-bit values; arithmetic wraps.
    Returns (result, zero_flag).
    """

    ADD  = 0x0
    AND  = 0x1
    OR   = 0x2
    SLT  = 0x3
    SUB  = 0x4
    LUI  = 0x5

    @staticmethod
    def execute(a: int, b: int, op: int) -> Tuple[int, bool]:
        a, b = to_signed_32(a), to_signed_32(b)
        if op == ALU.ADD:
            result = a + b
        elif op == ALU.SUB:
            result = a - b
        elif op == ALU.AND:
            result = a & b
        elif op == ALU.OR:
            result = a | b
        elif op == ALU.SLT:
            result = 1 if a < b else 0
        elif op == ALU.LUI:
            result = (b & 0xFFFF) << 16
        else:
            raise ValueError(f"unknown ALU operation {op}")
        result = to_signed_32(result)
        return result, (result == 0)

# ─────────────────────────────────────────────────────────────────────────────
# Control Unit
# ─────────────────────────────────────────────────────────────────────────────

OP_RTYPE = 0x00
OP_J     = 0x02
OP_BEQ   = 0x04
OP_BNE   = 0x05
OP_ADDIU = 0x09
OP_ANDI  = 0x0C
OP_ORI   = 0x0D
OP_LUI   = 0x0F
OP_LW    = 0x23
OP_SW    = 0x2B

FUNCT_SYSCALL = 0x0C
FUNCT_ADD     = 0x20
FUNCT_SUB     = 0x22
FUNCT_AND     = 0x24
FUNCT_OR      = 0x25
FUNCT_SLT     = 0x2A

_FUNCT_ALU_OPS = {
    FUNCT_ADD: ALU.ADD, FUNCT_SUB: ALU.SUB, FUNCT_AND: ALU.AND,
    FUNCT_OR:  ALU.OR,  FUNCT_SLT: ALU.SLT,
}


class ControlSignals:
    """Control signals generated by the single-cycle controller."""

    __slots__ = ("reg_dst", "branch", "branch_ne", "reg_write", "alu_src",
                 "mem_read", "mem_write", "mem_to_reg", "alu_op", "jump",
                 "syscall")

    def __init__(self):
        self.reg_dst    = 0
        self.branch     = 0
        self.branch_ne  = 0   # 1 = take branch when operands differ
        self.reg_write  = 0
        self.alu_src    = 0   # 0=reg, 1=sign-ext imm, 2=zero-ext imm
        self.mem_read   = 0
        self.mem_write  = 0
        self.mem_to_reg = 0
        self.alu_op     = ALU.ADD
        self.jump       = 0
        self.syscall    = 0

    @staticmethod
    def decode(inst: DecodedInstruction, pc: int) -> "ControlSignals":
        """Map opcode/funct to control signals; raise DecodeError if unknown."""
        c = ControlSignals()
        op, fn = inst.op, inst.funct
        if op == OP_RTYPE:
            if fn == FUNCT_SYSCALL:
                c.syscall = 1
            elif fn in _FUNCT_ALU_OPS:
                c.reg_dst = 1
                c.reg_write = 1
                c.alu_op = _FUNCT_ALU_OPS[fn]
            else:
                raise DecodeError("Invalid function code", inst.raw, pc)
        elif op == OP_ADDIU:
            c.reg_write = 1; c.alu_src = 1; c.alu_op = ALU.ADD
        elif op == OP_ANDI:
            c.reg_write = 1; c.alu_src = 2; c.alu_op = ALU.AND
        elif op == OP_ORI:
            c.reg_write = 1; c.alu_src = 2; c.alu_op = ALU.OR
        elif op == OP_LUI:
            c.reg_write = 1; c.alu_src = 2; c.alu_op = ALU.LUI
        elif op == OP_LW:
            c.reg_write = 1; c.alu_src = 1; c.mem_read = 1; c.mem_to_reg = 1
            c.alu_op = ALU.ADD
        elif op == OP_SW:
            c.alu_src = 1; c.mem_write = 1; c.alu_op = ALU.ADD
        elif op == OP_BEQ:
            c.branch = 1; c.alu_op = ALU.SUB
        elif op == OP_BNE:
            c.branch = 1; c.branch_ne = 1; c.alu_op = ALU.SUB
        elif op == OP_J:
            c.jump = 1
        else:
            raise DecodeError("Invalid opcode", inst.raw, pc)
        return c

# ─────────────────────────────────────────────────────────────────────────────
# Memory
# ─────────────────────────────────────────────────────────────────────────────

class Memory:
    """
    Sparse byte-addressable memory shared by the text and data segments.
    Addresses wrap to 32 bits; words are stored little-endian. Reading a
    byte that was never written raises MemoryAccessError.
    """

    def __init__(self):
        self.bytes: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.bytes)

    def __contains__(self, addr: int) -> bool:
        return to_unsigned_32(addr) in self.bytes

    def read_byte(self, addr: int) -> int:
        addr = to_unsigned_32(addr)
        try:
            return self.bytes[addr]
        except KeyError:
            raise MemoryAccessError(addr) from None

    def write_byte(self, addr: int, value: int):
        self.bytes[to_unsigned_32(addr)] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a signed 32-bit little-endian word starting at *addr*."""
        raw = bytes(self.read_byte(addr + i) for i in range(WORD_SIZE))
        return struct.unpack("<i", raw)[0]

    def write_word(self, addr: int, value: int):
        """Write *value* as a 32-bit little-endian word starting at *addr*."""
        for i, b in enumerate(struct.pack("<I", to_unsigned_32(value))):
            self.bytes[to_unsigned_32(addr + i)] = b

    def load_words(self, base_addr: int, words: Iterable[int]):
        """Lay out *words* consecutively from *base_addr*, 4 bytes apart."""
        for i, word in enumerate(words):
            self.write_word(base_addr + i * WORD_SIZE, word)

    def read_string(self, addr: int) -> str:
        """Read a zero-terminated byte string; the terminator is not included."""
        chars = []
        while True:
            b = self.read_byte(addr)
            if b == 0:
                break
            chars.append(chr(b))
            addr += 1
        return "".join(chars)

    def mapped_words(self, start: int = 0) -> Iterator[Tuple[int, int]]:
        """
        Yield (address, unsigned word) for every word-aligned address at or
        above *start* that has at least one mapped byte. Unmapped bytes
        inside such a word read as zero; this is for display only.
        """
        bases = sorted({a & ~0x3 for a in self.bytes if a >= start})
        for base in bases:
            word = 0
            for i in range(WORD_SIZE):
                word |= self.bytes.get(base + i, 0) << (8 * i)
            yield base, word

# ─────────────────────────────────────────────────────────────────────────────
# Register File
# ─────────────────────────────────────────────────────────────────────────────

class RegisterFile:
    """
    32 signed 32-bit general-purpose registers. Register 0 is an ordinary
    register here: writes to it are kept.
    """

    NAMES = (
        "$zero", "$at", "$v0", "$v1", "$a0", "$a1", "$a2", "$a3",
        "$t0", "$t1", "$t2", "$t3", "$t4", "$t5", "$t6", "$t7",
        "$s0", "$s1", "$s2", "$s3", "$s4", "$s5", "$s6", "$s7",
        "$t8", "$t9", "$k0", "$k1", "$gp", "$sp", "$fp", "$ra",
    )

    def __init__(self):
        self.regs: List[int] = [0] * NUM_REGISTERS
        self.regs[REG_GP] = GP_INIT
        self.regs[REG_SP] = SP_INIT

    def __getitem__(self, index: int) -> int:
        return self.regs[index]

    def __setitem__(self, index: int, value: int):
        self.regs[index] = to_signed_32(value)

    def __len__(self) -> int:
        return NUM_REGISTERS

    def snapshot(self) -> List[int]:
        return list(self.regs)

# ─────────────────────────────────────────────────────────────────────────────
# Machine state
# ─────────────────────────────────────────────────────────────────────────────

class Machine:
    """Memory, register file and program counter of one simulated machine."""

    def __init__(self, memory: Optional[Memory] = None,
                 registers: Optional[RegisterFile] = None,
                 pc: int = TEXT_SEGMENT_BASE):
        self.memory = memory if memory is not None else Memory()
        self.registers = registers if registers is not None else RegisterFile()
        self.pc = to_unsigned_32(pc)

    @classmethod
    def from_images(cls, text_words: Iterable[int],
                    data_words: Iterable[int] = ()) -> "Machine":
        """Build a machine with the instruction and data images loaded."""
        machine = cls()
        machine.memory.load_words(TEXT_SEGMENT_BASE, text_words)
        machine.memory.load_words(DATA_SEGMENT_BASE, data_words)
        return machine

# ─────────────────────────────────────────────────────────────────────────────
# Syscalls
# ─────────────────────────────────────────────────────────────────────────────

_INT_LINE = re.compile(r"[+-]?[0-9]+")


class SyscallHandler:
    """Services the SYSCALL instruction: service in $v0, argument in $a0."""

    def __init__(self, stdout: TextIO, stdin: TextIO):
        self.stdout = stdout
        self.stdin = stdin
        self.services = {
            SYSCALL_PRINT_INT:    self._print_int,
            SYSCALL_PRINT_STRING: self._print_string,
            SYSCALL_READ_INT:     self._read_int,
            SYSCALL_EXIT:         self._exit,
        }

    def dispatch(self, machine: Machine, inst: DecodedInstruction,
                 pc: int) -> bool:
        """Run one syscall. Returns True when the program asked to exit."""
        service = machine.registers[REG_V0]
        handler = self.services.get(service)
        if handler is None:
            raise SyscallError("Invalid syscall", inst.raw, pc)
        logger.debug("syscall %d at pc=%#010x", service, pc)
        return handler(machine, inst, pc)

    def _print_int(self, machine: Machine, inst: DecodedInstruction,
                   pc: int) -> bool:
        self.stdout.write(str(machine.registers[REG_A0]))
        return False

    def _print_string(self, machine: Machine, inst: DecodedInstruction,
                      pc: int) -> bool:
        self.stdout.write(machine.memory.read_string(machine.registers[REG_A0]))
        return False

    def _read_int(self, machine: Machine, inst: DecodedInstruction,
                  pc: int) -> bool:
        # Anything already printed is a prompt for this line.
        self.stdout.flush()
        text = self.stdin.readline().rstrip("\r\n")
        if not _INT_LINE.fullmatch(text):
            raise SyscallError("Invalid input for read integer", inst.raw, pc)
        value = int(text)
        if not INT32_MIN <= value <= INT32_MAX:
            raise SyscallError("Invalid input for read integer", inst.raw, pc)
        machine.registers[REG_V0] = value
        return False

    def _exit(self, machine: Machine, inst: DecodedInstruction,
              pc: int) -> bool:
        self.stdout.write(EXIT_BANNER)
        return True

# ─────────────────────────────────────────────────────────────────────────────
# Single-cycle CPU
# ─────────────────────────────────────────────────────────────────────────────

class HaltReason(enum.Enum):
    DROPPED_OFF_BOTTOM = "dropped off bottom"
    EXIT_SYSCALL = "exit syscall"


class CPU:
    """
    Single-cycle MIPS CPU. Each step fetches, decodes, executes and retires
    exactly one instruction against ``machine``. The CPU is RUNNING until
    ``halt_reason`` is set; fatal conditions propagate as SimulatorError.
    """

    def __init__(self, machine: Optional[Machine] = None,
                 stdout: Optional[TextIO] = None,
                 stdin: Optional[TextIO] = None,
                 max_steps: Optional[int] = None):
        self.machine = machine if machine is not None else Machine()
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stdin = stdin if stdin is not None else sys.stdin
        self.syscalls = SyscallHandler(self.stdout, self.stdin)
        self.max_steps = max_steps
        self.halt_reason: Optional[HaltReason] = None

        # Stats
        self.instr_count = 0
        self.branches_taken = 0
        self.jump_count = 0
        self.load_count = 0
        self.store_count = 0
        self.syscall_count = 0

    @property
    def halted(self) -> bool:
        return self.halt_reason is not None

    def _halt(self, reason: HaltReason) -> HaltReason:
        self.halt_reason = reason
        logger.info("halted (%s) after %d instructions",
                    reason.value, self.instr_count)
        return reason

    # ── Main cycle ──────────────────────────────────────────────────────

    def step(self) -> Optional[HaltReason]:
        """Execute one instruction. Returns the halt reason once halted."""
        if self.halted:
            return self.halt_reason

        machine = self.machine
        pc = machine.pc

        # Fetch
        if pc not in machine.memory:
            self.stdout.write(DROPPED_OFF_BOTTOM_BANNER)
            return self._halt(HaltReason.DROPPED_OFF_BOTTOM)
        try:
            raw = to_unsigned_32(machine.memory.read_word(pc))
        except MemoryAccessError as exc:
            exc.pc = pc
            raise

        if self.max_steps is not None and self.instr_count >= self.max_steps:
            raise StepLimitExceeded("Step limit exceeded", raw, pc)

        # Decode
        inst = DecodedInstruction(raw)
        ctrl = ControlSignals.decode(inst, pc)
        logger.debug("pc=%#010x %r", pc, inst)

        # Execute / memory / writeback
        try:
            next_pc = self._execute(inst, ctrl, pc)
        except MemoryAccessError as exc:
            exc.pc = pc
            raise

        self.instr_count += 1
        machine.pc = next_pc
        return self.halt_reason

    def _execute(self, inst: DecodedInstruction, ctrl: ControlSignals,
                 pc: int) -> int:
        """Carry out one decoded instruction and return the next PC."""
        machine = self.machine
        regs = machine.registers
        next_pc = to_unsigned_32(pc + 4)

        if ctrl.syscall:
            self.syscall_count += 1
            if self.syscalls.dispatch(machine, inst, pc):
                self._halt(HaltReason.EXIT_SYSCALL)
            return next_pc

        if ctrl.jump:
            self.jump_count += 1
            return inst.target << 2

        rs_val = regs[inst.rs]
        rt_val = regs[inst.rt]

        # ALU input B selection
        if ctrl.alu_src == 1:
            alu_b = inst.imm_sign
        elif ctrl.alu_src == 2:
            alu_b = inst.imm
        else:
            alu_b = rt_val

        alu_result, zero = ALU.execute(rs_val, alu_b, ctrl.alu_op)

        if ctrl.branch:
            taken = (not zero) if ctrl.branch_ne else zero
            if taken:
                self.branches_taken += 1
                next_pc = to_unsigned_32(next_pc + (inst.imm_sign << 2))
            return next_pc

        mem_data = 0
        if ctrl.mem_read:
            self.load_count += 1
            mem_data = machine.memory.read_word(alu_result)
        if ctrl.mem_write:
            self.store_count += 1
            machine.memory.write_word(alu_result, rt_val)

        if ctrl.reg_write:
            write_reg = inst.rd if ctrl.reg_dst else inst.rt
            regs[write_reg] = mem_data if ctrl.mem_to_reg else alu_result

        return next_pc

    def run(self) -> HaltReason:
        """Step until the program halts."""
        while not self.halted:
            self.step()
        return self.halt_reason

    # ── Debug / display ─────────────────────────────────────────────────

    def dump_registers(self):
        print("\n═══ Register File ═══", file=self.stdout)
        regs = self.machine.registers
        for i in range(0, NUM_REGISTERS, 4):
            row = "  ".join(
                f"{RegisterFile.NAMES[i+j]:<5s}={to_unsigned_32(regs[i+j]):#010x}"
                for j in range(4)
            )
            print(f"  {row}", file=self.stdout)
        print(f"  pc   ={self.machine.pc:#010x}", file=self.stdout)

    def dump_memory(self, limit: int = 32):
        print("\n═══ Data Memory (non-zero) ═══", file=self.stdout)
        count = 0
        for addr, word in self.machine.memory.mapped_words(DATA_SEGMENT_BASE):
            if word == 0:
                continue
            print(f"  [{addr:#010x}] = {word:#010x}  ({to_signed_32(word)})",
                  file=self.stdout)
            count += 1
            if count >= limit:
                print("  ... (truncated)", file=self.stdout)
                break
        if count == 0:
            print("  (empty)", file=self.stdout)

    def dump_stats(self):
        print("\n═══ Simulation Statistics ═══", file=self.stdout)
        reason = self.halt_reason.value if self.halt_reason else "running"
        print(f"  Halt reason:          {reason}", file=self.stdout)
        print(f"  Instructions:         {self.instr_count}", file=self.stdout)
        print(f"  Branches taken:       {self.branches_taken}", file=self.stdout)
        print(f"  Jumps:                {self.jump_count}", file=self.stdout)
        print(f"  Loads / stores:       {self.load_count}/{self.store_count}",
              file=self.stdout)
        print(f"  Syscalls:             {self.syscall_count}", file=self.stdout)

# ─────────────────────────────────────────────────────────────────────────────
# Loader
# ─────────────────────────────────────────────────────────────────────────────

_HEX_WORD = re.compile(r"(?:0[xX])?[0-9a-fA-F]{1,8}")


def parse_hex_words(lines: Iterable[str], source: str = "<input>") -> List[int]:
    """Parse one hex word per non-blank line into unsigned 32-bit ints."""
    words = []
    for lineno, line in enumerate(lines, 1):
        token = line.strip()
        if not token:
            continue
        if not _HEX_WORD.fullmatch(token):
            raise LoaderError(
                f"{source}:{lineno}: not a 32-bit hex word: {token!r}")
        words.append(int(token, 16))
    return words


def read_hex_file(path: str) -> List[int]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            words = parse_hex_words(f, source=path)
    except OSError as exc:
        raise LoaderError(f"cannot read {path}: {exc.strerror}") from exc
    except UnicodeDecodeError as exc:
        raise LoaderError(f"cannot read {path}: not a text file") from exc
    logger.debug("loaded %d words from %s", len(words), path)
    return words

# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────

def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Single-cycle MIPS instruction-set simulator"
    )
    parser.add_argument("text_file",
                        help="Hex file with one instruction word per line")
    parser.add_argument("data_file",
                        help="Hex file with one data word per line")
    parser.add_argument("--max-steps", "-n", type=_positive_int, default=None,
                        help="Fail if the program runs more instructions "
                             "than this (default: unlimited)")
    parser.add_argument("--dump", "-d", action="store_true",
                        help="Print registers, data memory and stats at the end")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Trace every instruction on stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        machine = Machine.from_images(read_hex_file(args.text_file),
                                       read_hex_file(args.data_file))
    except LoaderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    cpu = CPU(machine, max_steps=args.max_steps)
    try:
        cpu.run()
    except SimulatorError as exc:
        logger.debug("fatal: %r", exc)
        print(f"Error: {exc}")
        return 1
    finally:
        if args.dump:
            cpu.dump_registers()
            cpu.dump_memory()
            cpu.dump_stats()

    return 0


if __name__ == "__main__":
    sys.exit(main())
