from collections import deque
from dataclasses import dataclass, field
from enum import IntFlag
from string import Template
from typing import Callable, Dict, Final, Protocol

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from runes.errors import CoverageGap, IllegalOpcode
from runes.util.OpCodes import INSTRUCTIONS, AddressingMode, Instruction, OpCodes, Operation

# Template
TEMPLATE: Final[Template] = Template(
    "${PC}  ${BYTES}  ${ASM}  A:${A} X:${X} Y:${Y} SP:${SP} P:${N}${V}${U}${B}${D}${I}${Z}${C}"
)


class CpuBus(Protocol):
    def read(self, addr: int, read_only: bool = False) -> int: ...

    def write(self, addr: int, value: int) -> None: ...


class StatusFlag(IntFlag):
    C = 1 << 0  # Carry
    Z = 1 << 1  # Zero
    I = 1 << 2  # Interrupt disable
    D = 1 << 3  # Decimal (stored, never used by ADC/SBC)
    B = 1 << 4  # Break
    U = 1 << 5  # Unused
    V = 1 << 6  # Overflow
    N = 1 << 7  # Negative


class Flags:
    """Packed status register, one bitarray bit per flag (index 0 = Carry)."""

    def __init__(self, value: int = 0) -> None:
        self._bits = int2ba(int(value) & 0xFF, length=8, endian="little")

    def get(self, flag: StatusFlag) -> bool:
        return bool(self._bits[int(flag).bit_length() - 1])

    def set(self, flag: StatusFlag, v: bool) -> None:
        self._bits[int(flag).bit_length() - 1] = bool(v)

    @property
    def Carry(self) -> bool:
        return self.get(StatusFlag.C)

    @Carry.setter
    def Carry(self, v: bool) -> None:
        self.set(StatusFlag.C, v)

    @property
    def Zero(self) -> bool:
        return self.get(StatusFlag.Z)

    @Zero.setter
    def Zero(self, v: bool) -> None:
        self.set(StatusFlag.Z, v)

    @property
    def InterruptDisable(self) -> bool:
        return self.get(StatusFlag.I)

    @InterruptDisable.setter
    def InterruptDisable(self, v: bool) -> None:
        self.set(StatusFlag.I, v)

    @property
    def Decimal(self) -> bool:
        return self.get(StatusFlag.D)

    @Decimal.setter
    def Decimal(self, v: bool) -> None:
        self.set(StatusFlag.D, v)

    @property
    def Break(self) -> bool:
        return self.get(StatusFlag.B)

    @Break.setter
    def Break(self, v: bool) -> None:
        self.set(StatusFlag.B, v)

    @property
    def Unused(self) -> bool:
        return self.get(StatusFlag.U)

    @Unused.setter
    def Unused(self, v: bool) -> None:
        self.set(StatusFlag.U, v)

    @property
    def Overflow(self) -> bool:
        return self.get(StatusFlag.V)

    @Overflow.setter
    def Overflow(self, v: bool) -> None:
        self.set(StatusFlag.V, v)

    @property
    def Negative(self) -> bool:
        return self.get(StatusFlag.N)

    @Negative.setter
    def Negative(self, v: bool) -> None:
        self.set(StatusFlag.N, v)

    def to_byte(self) -> int:
        return ba2int(self._bits)

    def from_byte(self, v: int) -> None:
        self._bits = int2ba(int(v) & 0xFF, length=8, endian="little")


@dataclass
class Architecture:
    A: int = 0
    X: int = 0
    Y: int = 0
    StackPointer: int = 0
    ProgramCounter: int = 0
    flags: Flags = field(default_factory=Flags)
    OpCode: int = 0
    Cycles: int = 0  # remaining cycles of the current instruction, never negative
    Fetched: int = 0  # working ALU input
    AddrAbs: int = 0  # resolved effective address
    AddrRel: int = 0  # sign-extended branch offset
    ClockCount: int = 0


@dataclass(frozen=True)
class Registers:
    A: int
    X: int
    Y: int
    SP: int
    PC: int
    status: int
    opcode: int
    cycles: int
    clock_count: int


class CPU:
    """
    MOS 6502 core stepped one clock pulse at a time.

    The whole instruction is executed on the pulse that fetches it; the
    remaining pulses only count down ``Architecture.Cycles``. The CPU keeps
    no reference to the bus: every pulse borrows it through ``clock(bus)``.
    """

    STACK_BASE: Final[int] = 0x0100
    NMI_VECTOR: Final[int] = 0xFFFA
    RESET_VECTOR: Final[int] = 0xFFFC
    IRQ_VECTOR: Final[int] = 0xFFFE

    def __init__(self, *, halt_on_illegal: bool = False, trace: bool = False) -> None:
        self.Architecture: Architecture = Architecture()
        self.halt_on_illegal: bool = halt_on_illegal
        self.trace: bool = trace
        self.tracelog: deque[str] = deque(maxlen=2024)

        self._addressing: Dict[AddressingMode, Callable[[CpuBus], bool]] = {
            AddressingMode.IMP: self._do_read_operands_Implied,
            AddressingMode.IMM: self._do_read_operands_Immediate,
            AddressingMode.ZP0: self._do_read_operands_ZeroPage,
            AddressingMode.ZPX: self._do_read_operands_ZeroPage_XIndexed,
            AddressingMode.ZPY: self._do_read_operands_ZeroPage_YIndexed,
            AddressingMode.REL: self._do_read_operands_Relative,
            AddressingMode.ABS: self._do_read_operands_AbsoluteAddressed,
            AddressingMode.ABX: self._do_read_operands_AbsoluteAddressed_XIndexed,
            AddressingMode.ABY: self._do_read_operands_AbsoluteAddressed_YIndexed,
            AddressingMode.IND: self._do_read_operands_IndirectAddressed,
            AddressingMode.IZX: self._do_read_operands_IndirectAddressed_XIndexed,
            AddressingMode.IZY: self._do_read_operands_IndirectAddressed_YIndexed,
        }
        self._operations: Dict[Operation, Callable[[CpuBus], bool]] = {
            operation: handler
            for operation in Operation
            if (handler := getattr(self, f"_do_op_{operation.name}", None)) is not None
        }
        self._check_coverage()

    def _check_coverage(self) -> None:
        for entry in INSTRUCTIONS:
            if entry.mode not in self._addressing:
                raise CoverageGap(f"No addressing handler for ${entry.opcode:02X} ({entry.mode.name})")
            if entry.operation not in self._operations:
                raise CoverageGap(f"No operation handler for ${entry.opcode:02X} ({entry.operation.name})")

    @property
    def registers(self) -> Registers:
        arch = self.Architecture
        return Registers(
            A=arch.A,
            X=arch.X,
            Y=arch.Y,
            SP=arch.StackPointer,
            PC=arch.ProgramCounter,
            status=arch.flags.to_byte(),
            opcode=arch.OpCode,
            cycles=arch.Cycles,
            clock_count=arch.ClockCount,
        )

    def complete(self) -> bool:
        """True on an instruction boundary (the next pulse fetches)."""
        return self.Architecture.Cycles == 0

    # EXTERNAL SIGNALS

    def reset(self, bus: CpuBus) -> None:
        """Power-on state: A=X=Y=0, SP=$FD, status=U, PC from $FFFC/$FFFD, 8 cycles."""
        arch = self.Architecture
        arch.A = 0
        arch.X = 0
        arch.Y = 0
        arch.StackPointer = 0xFD
        arch.flags = Flags(StatusFlag.U)

        low = bus.read(self.RESET_VECTOR)
        high = bus.read(self.RESET_VECTOR + 1)
        arch.ProgramCounter = (high << 8) | low

        arch.AddrRel = 0
        arch.AddrAbs = 0
        arch.Fetched = 0
        arch.Cycles = 8

    def irq(self, bus: CpuBus) -> None:
        """Maskable interrupt request; ignored while InterruptDisable is set."""
        if not self.Architecture.flags.InterruptDisable:
            self._do_interrupt(bus, self.IRQ_VECTOR, 7)

    def nmi(self, bus: CpuBus) -> None:
        self._do_interrupt(bus, self.NMI_VECTOR, 8)

    def _do_interrupt(self, bus: CpuBus, vector: int, cycles: int) -> None:
        arch = self.Architecture
        self._do_push(bus, (arch.ProgramCounter >> 8) & 0xFF)
        self._do_push(bus, arch.ProgramCounter & 0xFF)
        # B clear, U set on the pushed copy
        self._do_push(bus, (arch.flags.to_byte() & ~int(StatusFlag.B)) | int(StatusFlag.U))
        arch.flags.InterruptDisable = True

        low = bus.read(vector)
        high = bus.read(vector + 1)
        arch.ProgramCounter = (high << 8) | low
        arch.Cycles = cycles

    # CLOCK

    def clock(self, bus: CpuBus) -> None:
        arch = self.Architecture

        if arch.Cycles == 0:
            arch.OpCode = bus.read(arch.ProgramCounter)
            if self.trace:
                self._tracelogger(bus)
            arch.ProgramCounter = (arch.ProgramCounter + 1) & 0xFFFF
            arch.flags.Unused = True

            entry = INSTRUCTIONS[arch.OpCode]
            arch.Cycles = entry.cycles
            # only modes and operations that both allow it pay for a page cross
            extra_address_cycle = self._addressing[entry.mode](bus)
            extra_operation_cycle = self._operations[entry.operation](bus)
            arch.Cycles += int(extra_address_cycle and extra_operation_cycle)

            arch.flags.Unused = True

        arch.Cycles -= 1
        arch.ClockCount += 1

    def _tracelogger(self, bus: CpuBus) -> None:
        arch = self.Architecture
        pc = arch.ProgramCounter
        entry: Instruction = OpCodes.GetEntry(arch.OpCode)
        operands = [bus.read((pc + i) & 0xFFFF, read_only=True) for i in range(1, entry.bytes)]
        flags = arch.flags

        line = TEMPLATE.substitute(
            PC=f"{pc:04X}",
            BYTES=" ".join(f"{b:02X}" for b in [arch.OpCode, *operands]).ljust(8),
            ASM=OpCodes.DisassembleBytes(arch.OpCode, operands).ljust(14),
            A=f"{arch.A:02X}",
            X=f"{arch.X:02X}",
            Y=f"{arch.Y:02X}",
            SP=f"{arch.StackPointer:02X}",
            N="N" if flags.Negative else "-",
            V="V" if flags.Overflow else "-",
            U="U" if flags.Unused else "-",
            B="B" if flags.Break else "-",
            D="D" if flags.Decimal else "-",
            I="I" if flags.InterruptDisable else "-",
            Z="Z" if flags.Zero else "-",
            C="C" if flags.Carry else "-",
        )
        self.tracelog.append(line)

    # HELPERS

    def _do_fetch(self, bus: CpuBus) -> int:
        """Load the operand; implied instructions already hold A in Fetched."""
        if INSTRUCTIONS[self.Architecture.OpCode].mode is not AddressingMode.IMP:
            self.Architecture.Fetched = bus.read(self.Architecture.AddrAbs)
        return self.Architecture.Fetched

    def _do_read_word(self, bus: CpuBus) -> int:
        arch = self.Architecture
        low = bus.read(arch.ProgramCounter)
        arch.ProgramCounter = (arch.ProgramCounter + 1) & 0xFFFF
        high = bus.read(arch.ProgramCounter)
        arch.ProgramCounter = (arch.ProgramCounter + 1) & 0xFFFF
        return (high << 8) | low

    def _do_read_byte(self, bus: CpuBus) -> int:
        arch = self.Architecture
        value = bus.read(arch.ProgramCounter)
        arch.ProgramCounter = (arch.ProgramCounter + 1) & 0xFFFF
        return value

    def _do_push(self, bus: CpuBus, value: int) -> None:
        arch = self.Architecture
        bus.write(self.STACK_BASE + arch.StackPointer, int(value) & 0xFF)
        arch.StackPointer = (arch.StackPointer - 1) & 0xFF

    def _do_pop(self, bus: CpuBus) -> int:
        arch = self.Architecture
        arch.StackPointer = (arch.StackPointer + 1) & 0xFF
        return bus.read(self.STACK_BASE + arch.StackPointer)

    def _do_update_zero_and_negative_flags(self, value: int) -> None:
        self.Architecture.flags.Zero = (value & 0xFF) == 0x00
        self.Architecture.flags.Negative = bool(value & 0x80)

    def _do_store_result(self, bus: CpuBus, value: int) -> None:
        """Write a read-modify-write result back to A (implied) or memory."""
        if INSTRUCTIONS[self.Architecture.OpCode].mode is AddressingMode.IMP:
            self.Architecture.A = value & 0xFF
        else:
            bus.write(self.Architecture.AddrAbs, value & 0xFF)

    def _do_branch(self, condition: bool) -> bool:
        """Taken branches cost one cycle, plus one more if the target is on another page."""
        arch = self.Architecture
        if condition:
            arch.Cycles += 1
            arch.AddrAbs = (arch.ProgramCounter + arch.AddrRel) & 0xFFFF
            if (arch.AddrAbs & 0xFF00) != (arch.ProgramCounter & 0xFF00):
                arch.Cycles += 1
            arch.ProgramCounter = arch.AddrAbs
        return False

    # ADDRESSING MODES
    # Each returns True when the mode may need an extra cycle (page crossed).

    def _do_read_operands_Implied(self, bus: CpuBus) -> bool:
        self.Architecture.Fetched = self.Architecture.A
        return False

    def _do_read_operands_Immediate(self, bus: CpuBus) -> bool:
        arch = self.Architecture
        arch.AddrAbs = arch.ProgramCounter
        arch.ProgramCounter = (arch.ProgramCounter + 1) & 0xFFFF
        return False

    def _do_read_operands_ZeroPage(self, bus: CpuBus) -> bool:
        self.Architecture.AddrAbs = self._do_read_byte(bus) & 0x00FF
        return False

    def _do_read_operands_ZeroPage_XIndexed(self, bus: CpuBus) -> bool:
        self.Architecture.AddrAbs = (self._do_read_byte(bus) + self.Architecture.X) & 0x00FF
        return False

    def _do_read_operands_ZeroPage_YIndexed(self, bus: CpuBus) -> bool:
        self.Architecture.AddrAbs = (self._do_read_byte(bus) + self.Architecture.Y) & 0x00FF
        return False

    def _do_read_operands_Relative(self, bus: CpuBus) -> bool:
        offset = self._do_read_byte(bus)
        if offset & 0x80:
            offset |= 0xFF00
        self.Architecture.AddrRel = offset
        return False

    def _do_read_operands_AbsoluteAddressed(self, bus: CpuBus) -> bool:
        self.Architecture.AddrAbs = self._do_read_word(bus)
        return False

    def _do_read_operands_AbsoluteAddressed_XIndexed(self, bus: CpuBus) -> bool:
        base_addr = self._do_read_word(bus)
        self.Architecture.AddrAbs = (base_addr + self.Architecture.X) & 0xFFFF
        return (self.Architecture.AddrAbs & 0xFF00) != (base_addr & 0xFF00)

    def _do_read_operands_AbsoluteAddressed_YIndexed(self, bus: CpuBus) -> bool:
        base_addr = self._do_read_word(bus)
        self.Architecture.AddrAbs = (base_addr + self.Architecture.Y) & 0xFFFF
        return (self.Architecture.AddrAbs & 0xFF00) != (base_addr & 0xFF00)

    def _do_read_operands_IndirectAddressed(self, bus: CpuBus) -> bool:
        ptr = self._do_read_word(bus)
        low = bus.read(ptr)
        # Hardware bug: a pointer at $xxFF takes its high byte from $xx00
        if ptr & 0x00FF == 0x00FF:
            high = bus.read(ptr & 0xFF00)
        else:
            high = bus.read((ptr + 1) & 0xFFFF)
        self.Architecture.AddrAbs = (high << 8) | low
        return False

    def _do_read_operands_IndirectAddressed_XIndexed(self, bus: CpuBus) -> bool:
        zp_addr = (self._do_read_byte(bus) + self.Architecture.X) & 0xFF
        low = bus.read(zp_addr)
        high = bus.read((zp_addr + 1) & 0xFF)
        self.Architecture.AddrAbs = (high << 8) | low
        return False

    def _do_read_operands_IndirectAddressed_YIndexed(self, bus: CpuBus) -> bool:
        zp_addr = self._do_read_byte(bus)
        low = bus.read(zp_addr)
        high = bus.read((zp_addr + 1) & 0xFF)
        base_addr = (high << 8) | low
        self.Architecture.AddrAbs = (base_addr + self.Architecture.Y) & 0xFFFF
        return (self.Architecture.AddrAbs & 0xFF00) != (base_addr & 0xFF00)

    # OPERATIONS
    # Each returns True when it takes the page-cross penalty of its addressing mode.

    def _do_op_ADC(self, bus: CpuBus) -> bool:
        """Add with carry. Decimal mode is ignored on this CPU."""
        self._do_add(self._do_fetch(bus))
        return True

    def _do_op_SBC(self, bus: CpuBus) -> bool:
        """Subtract with borrow: ADC with the operand inverted."""
        self._do_add(self._do_fetch(bus) ^ 0xFF)
        return True

    def _do_add(self, value: int) -> None:
        arch = self.Architecture
        result = arch.A + value + int(arch.flags.Carry)
        arch.flags.Carry = result > 0xFF
        # Overflow if both inputs share a sign that the result does not
        arch.flags.Overflow = bool(~(arch.A ^ value) & (arch.A ^ result) & 0x80)
        arch.A = result & 0xFF
        self._do_update_zero_and_negative_flags(arch.A)

    def _do_op_AND(self, bus: CpuBus) -> bool:
        self.Architecture.A &= self._do_fetch(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return True

    def _do_op_EOR(self, bus: CpuBus) -> bool:
        self.Architecture.A ^= self._do_fetch(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return True

    def _do_op_ORA(self, bus: CpuBus) -> bool:
        self.Architecture.A |= self._do_fetch(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return True

    def _do_op_ASL(self, bus: CpuBus) -> bool:
        result = self._do_fetch(bus) << 1
        self.Architecture.flags.Carry = result > 0xFF
        self._do_update_zero_and_negative_flags(result)
        self._do_store_result(bus, result)
        return False

    def _do_op_LSR(self, bus: CpuBus) -> bool:
        value = self._do_fetch(bus)
        self.Architecture.flags.Carry = bool(value & 0x01)
        result = value >> 1
        self._do_update_zero_and_negative_flags(result)
        self._do_store_result(bus, result)
        return False

    def _do_op_ROL(self, bus: CpuBus) -> bool:
        result = (self._do_fetch(bus) << 1) | int(self.Architecture.flags.Carry)
        self.Architecture.flags.Carry = result > 0xFF
        self._do_update_zero_and_negative_flags(result)
        self._do_store_result(bus, result)
        return False

    def _do_op_ROR(self, bus: CpuBus) -> bool:
        value = self._do_fetch(bus)
        result = (int(self.Architecture.flags.Carry) << 7) | (value >> 1)
        self.Architecture.flags.Carry = bool(value & 0x01)
        self._do_update_zero_and_negative_flags(result)
        self._do_store_result(bus, result)
        return False

    def _do_op_BIT(self, bus: CpuBus) -> bool:
        value = self._do_fetch(bus)
        flags = self.Architecture.flags
        flags.Zero = (self.Architecture.A & value) == 0
        flags.Negative = bool(value & 0x80)
        flags.Overflow = bool(value & 0x40)
        return False

    def _do_compare(self, register: int, value: int) -> None:
        self.Architecture.flags.Carry = register >= value
        self._do_update_zero_and_negative_flags((register - value) & 0xFF)

    def _do_op_CMP(self, bus: CpuBus) -> bool:
        self._do_compare(self.Architecture.A, self._do_fetch(bus))
        return True

    def _do_op_CPX(self, bus: CpuBus) -> bool:
        self._do_compare(self.Architecture.X, self._do_fetch(bus))
        return False

    def _do_op_CPY(self, bus: CpuBus) -> bool:
        self._do_compare(self.Architecture.Y, self._do_fetch(bus))
        return False

    def _do_op_DEC(self, bus: CpuBus) -> bool:
        result = (self._do_fetch(bus) - 1) & 0xFF
        bus.write(self.Architecture.AddrAbs, result)
        self._do_update_zero_and_negative_flags(result)
        return False

    def _do_op_INC(self, bus: CpuBus) -> bool:
        result = (self._do_fetch(bus) + 1) & 0xFF
        bus.write(self.Architecture.AddrAbs, result)
        self._do_update_zero_and_negative_flags(result)
        return False

    def _do_op_DEX(self, bus: CpuBus) -> bool:
        self.Architecture.X = (self.Architecture.X - 1) & 0xFF
        self._do_update_zero_and_negative_flags(self.Architecture.X)
        return False

    def _do_op_DEY(self, bus: CpuBus) -> bool:
        self.Architecture.Y = (self.Architecture.Y - 1) & 0xFF
        self._do_update_zero_and_negative_flags(self.Architecture.Y)
        return False

    def _do_op_INX(self, bus: CpuBus) -> bool:
        self.Architecture.X = (self.Architecture.X + 1) & 0xFF
        self._do_update_zero_and_negative_flags(self.Architecture.X)
        return False

    def _do_op_INY(self, bus: CpuBus) -> bool:
        self.Architecture.Y = (self.Architecture.Y + 1) & 0xFF
        self._do_update_zero_and_negative_flags(self.Architecture.Y)
        return False

    def _do_op_LDA(self, bus: CpuBus) -> bool:
        self.Architecture.A = self._do_fetch(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return True

    def _do_op_LDX(self, bus: CpuBus) -> bool:
        self.Architecture.X = self._do_fetch(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.X)
        return True

    def _do_op_LDY(self, bus: CpuBus) -> bool:
        self.Architecture.Y = self._do_fetch(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.Y)
        return True

    def _do_op_STA(self, bus: CpuBus) -> bool:
        bus.write(self.Architecture.AddrAbs, self.Architecture.A)
        return False

    def _do_op_STX(self, bus: CpuBus) -> bool:
        bus.write(self.Architecture.AddrAbs, self.Architecture.X)
        return False

    def _do_op_STY(self, bus: CpuBus) -> bool:
        bus.write(self.Architecture.AddrAbs, self.Architecture.Y)
        return False

    # BRANCH INSTRUCTIONS
    def _do_op_BCC(self, bus: CpuBus) -> bool:
        return self._do_branch(not self.Architecture.flags.Carry)

    def _do_op_BCS(self, bus: CpuBus) -> bool:
        return self._do_branch(self.Architecture.flags.Carry)

    def _do_op_BEQ(self, bus: CpuBus) -> bool:
        return self._do_branch(self.Architecture.flags.Zero)

    def _do_op_BNE(self, bus: CpuBus) -> bool:
        return self._do_branch(not self.Architecture.flags.Zero)

    def _do_op_BMI(self, bus: CpuBus) -> bool:
        return self._do_branch(self.Architecture.flags.Negative)

    def _do_op_BPL(self, bus: CpuBus) -> bool:
        return self._do_branch(not self.Architecture.flags.Negative)

    def _do_op_BVC(self, bus: CpuBus) -> bool:
        return self._do_branch(not self.Architecture.flags.Overflow)

    def _do_op_BVS(self, bus: CpuBus) -> bool:
        return self._do_branch(self.Architecture.flags.Overflow)

    # FLAG INSTRUCTIONS
    def _do_op_CLC(self, bus: CpuBus) -> bool:
        self.Architecture.flags.Carry = False
        return False

    def _do_op_CLD(self, bus: CpuBus) -> bool:
        self.Architecture.flags.Decimal = False
        return False

    def _do_op_CLI(self, bus: CpuBus) -> bool:
        self.Architecture.flags.InterruptDisable = False
        return False

    def _do_op_CLV(self, bus: CpuBus) -> bool:
        self.Architecture.flags.Overflow = False
        return False

    def _do_op_SEC(self, bus: CpuBus) -> bool:
        self.Architecture.flags.Carry = True
        return False

    def _do_op_SED(self, bus: CpuBus) -> bool:
        self.Architecture.flags.Decimal = True
        return False

    def _do_op_SEI(self, bus: CpuBus) -> bool:
        self.Architecture.flags.InterruptDisable = True
        return False

    # TRANSFER INSTRUCTIONS
    def _do_op_TAX(self, bus: CpuBus) -> bool:
        self.Architecture.X = self.Architecture.A
        self._do_update_zero_and_negative_flags(self.Architecture.X)
        return False

    def _do_op_TAY(self, bus: CpuBus) -> bool:
        self.Architecture.Y = self.Architecture.A
        self._do_update_zero_and_negative_flags(self.Architecture.Y)
        return False

    def _do_op_TSX(self, bus: CpuBus) -> bool:
        self.Architecture.X = self.Architecture.StackPointer
        self._do_update_zero_and_negative_flags(self.Architecture.X)
        return False

    def _do_op_TXA(self, bus: CpuBus) -> bool:
        self.Architecture.A = self.Architecture.X
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return False

    def _do_op_TXS(self, bus: CpuBus) -> bool:
        self.Architecture.StackPointer = self.Architecture.X
        return False

    def _do_op_TYA(self, bus: CpuBus) -> bool:
        self.Architecture.A = self.Architecture.Y
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return False

    # STACK INSTRUCTIONS
    def _do_op_PHA(self, bus: CpuBus) -> bool:
        self._do_push(bus, self.Architecture.A)
        return False

    def _do_op_PHP(self, bus: CpuBus) -> bool:
        # pushed copy always carries B and U
        self._do_push(bus, self.Architecture.flags.to_byte() | StatusFlag.B | StatusFlag.U)
        return False

    def _do_op_PLA(self, bus: CpuBus) -> bool:
        self.Architecture.A = self._do_pop(bus)
        self._do_update_zero_and_negative_flags(self.Architecture.A)
        return False

    def _do_op_PLP(self, bus: CpuBus) -> bool:
        self.Architecture.flags.from_byte(self._do_pop(bus))
        self.Architecture.flags.Unused = True
        return False

    # CONTROL FLOW
    def _do_op_BRK(self, bus: CpuBus) -> bool:
        arch = self.Architecture
        # padding byte after BRK is skipped
        arch.ProgramCounter = (arch.ProgramCounter + 1) & 0xFFFF
        self._do_push(bus, (arch.ProgramCounter >> 8) & 0xFF)
        self._do_push(bus, arch.ProgramCounter & 0xFF)
        self._do_push(bus, arch.flags.to_byte() | StatusFlag.B | StatusFlag.U)
        arch.flags.InterruptDisable = True

        low = bus.read(self.IRQ_VECTOR)
        high = bus.read(self.IRQ_VECTOR + 1)
        arch.ProgramCounter = (high << 8) | low
        return False

    def _do_op_JMP(self, bus: CpuBus) -> bool:
        self.Architecture.ProgramCounter = self.Architecture.AddrAbs
        return False

    def _do_op_JSR(self, bus: CpuBus) -> bool:
        arch = self.Architecture
        # return address is the last byte of the JSR instruction
        ret_addr = (arch.ProgramCounter - 1) & 0xFFFF
        self._do_push(bus, (ret_addr >> 8) & 0xFF)
        self._do_push(bus, ret_addr & 0xFF)
        arch.ProgramCounter = arch.AddrAbs
        return False

    def _do_op_RTS(self, bus: CpuBus) -> bool:
        low = self._do_pop(bus)
        high = self._do_pop(bus)
        self.Architecture.ProgramCounter = (((high << 8) | low) + 1) & 0xFFFF
        return False

    def _do_op_RTI(self, bus: CpuBus) -> bool:
        flags = self.Architecture.flags
        flags.from_byte(self._do_pop(bus))
        flags.Break = False
        flags.Unused = True
        low = self._do_pop(bus)
        high = self._do_pop(bus)
        self.Architecture.ProgramCounter = (high << 8) | low
        return False

    def _do_op_NOP(self, bus: CpuBus) -> bool:
        return False

    def _do_op_XXX(self, bus: CpuBus) -> bool:
        """Undefined opcode: a one-byte no-op unless the CPU is set to halt on it."""
        if self.halt_on_illegal:
            raise IllegalOpcode(self.Architecture.OpCode, (self.Architecture.ProgramCounter - 1) & 0xFFFF)
        return False
