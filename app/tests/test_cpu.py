import pytest

from runes.cpu import CPU, Flags, StatusFlag
from runes.errors import CoverageGap, IllegalOpcode

START = 0x0400


def run(cpu, bus) -> int:
    """Clock one instruction to completion; returns the pulses it took."""
    pulses = 0
    while True:
        cpu.clock(bus)
        pulses += 1
        if cpu.complete():
            return pulses


@pytest.fixture
def cpu(flat_bus):
    flat_bus.load(0xFFFC, bytes([START & 0xFF, START >> 8]))
    cpu = CPU()
    cpu.reset(flat_bus)
    run(cpu, flat_bus)  # reset sequence
    return cpu


@pytest.fixture
def bus(flat_bus):
    return flat_bus


def test_reset_state(flat_bus):
    flat_bus.load(0xFFFC, bytes([0x34, 0x12]))
    cpu = CPU()
    cpu.Architecture.A = 0x11
    cpu.Architecture.X = 0x22
    cpu.Architecture.Y = 0x33

    cpu.reset(flat_bus)

    regs = cpu.registers
    assert (regs.A, regs.X, regs.Y) == (0, 0, 0)
    assert regs.SP == 0xFD
    assert regs.status == StatusFlag.U
    assert regs.PC == 0x1234
    assert regs.cycles == 8
    assert not cpu.complete()


def test_reset_takes_eight_pulses(flat_bus):
    cpu = CPU()
    cpu.reset(flat_bus)
    assert run(cpu, flat_bus) == 8
    assert cpu.registers.clock_count == 8


def test_lda_immediate(cpu, bus):
    # LDA #$80
    bus.load(START, bytes([0xA9, 0x80]))
    assert run(cpu, bus) == 2

    regs = cpu.registers
    assert regs.A == 0x80
    assert regs.PC == START + 2
    assert cpu.Architecture.flags.Negative
    assert not cpu.Architecture.flags.Zero


def test_lda_zero_sets_zero_flag(cpu, bus):
    # LDA #$00
    bus.load(START, bytes([0xA9, 0x00]))
    run(cpu, bus)
    assert cpu.Architecture.flags.Zero
    assert not cpu.Architecture.flags.Negative


def test_absolute_x_page_cross_costs_one_cycle_for_reads(cpu, bus):
    # LDA $04FF,X with X=1 -> $0500
    cpu.Architecture.X = 0x01
    bus.write(0x0500, 0x42)
    bus.load(START, bytes([0xBD, 0xFF, 0x04]))
    assert run(cpu, bus) == 5
    assert cpu.registers.A == 0x42


def test_absolute_x_without_page_cross(cpu, bus):
    # LDA $0480,X with X=1
    cpu.Architecture.X = 0x01
    bus.load(START, bytes([0xBD, 0x80, 0x04]))
    assert run(cpu, bus) == 4


def test_store_never_takes_page_cross_cycle(cpu, bus):
    # STA $04FF,X with X=1
    cpu.Architecture.A = 0x99
    cpu.Architecture.X = 0x01
    bus.load(START, bytes([0x9D, 0xFF, 0x04]))
    assert run(cpu, bus) == 5
    assert bus.read(0x0500) == 0x99


def test_indirect_jump_wraps_within_page(cpu, bus):
    # JMP ($10FF): high byte comes from $1000, not $1100
    bus.write(0x10FF, 0x34)
    bus.write(0x1000, 0x12)
    bus.write(0x1100, 0x56)
    bus.load(START, bytes([0x6C, 0xFF, 0x10]))
    assert run(cpu, bus) == 5
    assert cpu.registers.PC == 0x1234


def test_indirect_jump_without_wrap(cpu, bus):
    bus.write(0x1080, 0x34)
    bus.write(0x1081, 0x12)
    bus.load(START, bytes([0x6C, 0x80, 0x10]))
    run(cpu, bus)
    assert cpu.registers.PC == 0x1234


def test_zero_page_x_wraps(cpu, bus):
    # LDA $FF,X with X=1 -> $0000
    cpu.Architecture.X = 0x01
    bus.write(0x0000, 0x77)
    bus.load(START, bytes([0xB5, 0xFF]))
    assert run(cpu, bus) == 4
    assert cpu.registers.A == 0x77


def test_indexed_indirect_pointer_wraps_in_zero_page(cpu, bus):
    # LDA ($FE,X) with X=1: pointer at $FF/$00
    cpu.Architecture.X = 0x01
    bus.write(0x00FF, 0x00)
    bus.write(0x0000, 0x03)
    bus.write(0x0300, 0x99)
    bus.load(START, bytes([0xA1, 0xFE]))
    assert run(cpu, bus) == 6
    assert cpu.registers.A == 0x99


def test_indirect_indexed_page_cross(cpu, bus):
    # LDA ($10),Y with ($10)=$05FF, Y=1 -> $0600
    cpu.Architecture.Y = 0x01
    bus.write(0x0010, 0xFF)
    bus.write(0x0011, 0x05)
    bus.write(0x0600, 0x42)
    bus.load(START, bytes([0xB1, 0x10]))
    assert run(cpu, bus) == 6
    assert cpu.registers.A == 0x42


def test_indirect_indexed_pointer_wraps_in_zero_page(cpu, bus):
    # LDA ($FF),Y with Y=0: pointer high byte comes from $00
    cpu.Architecture.Y = 0x00
    bus.write(0x00FF, 0x00)
    bus.write(0x0000, 0x03)
    bus.write(0x0100, 0x07)
    bus.write(0x0300, 0x5A)
    bus.load(START, bytes([0xB1, 0xFF]))
    assert run(cpu, bus) == 5
    assert cpu.registers.A == 0x5A


def test_zero_page_y_wraps(cpu, bus):
    # LDX $FF,Y with Y=1 -> $0000
    cpu.Architecture.Y = 0x01
    bus.write(0x0000, 0x66)
    bus.write(0x0100, 0x11)
    bus.load(START, bytes([0xB6, 0xFF]))
    assert run(cpu, bus) == 4
    assert cpu.registers.X == 0x66


def test_absolute_y_page_cross_costs_one_cycle(cpu, bus):
    # LDA $05FF,Y with Y=1 -> $0600
    cpu.Architecture.Y = 0x01
    bus.write(0x0600, 0x55)
    bus.load(START, bytes([0xB9, 0xFF, 0x05]))
    assert run(cpu, bus) == 5
    assert cpu.registers.A == 0x55


def test_absolute_y_without_page_cross(cpu, bus):
    # LDA $0580,Y with Y=1
    cpu.Architecture.Y = 0x01
    bus.write(0x0581, 0x44)
    bus.load(START, bytes([0xB9, 0x80, 0x05]))
    assert run(cpu, bus) == 4
    assert cpu.registers.A == 0x44


def test_branch_not_taken_costs_base_cycles(cpu, bus):
    # BNE +$10 with Z set
    cpu.Architecture.flags.Zero = True
    bus.load(START, bytes([0xD0, 0x10]))
    assert run(cpu, bus) == 2
    assert cpu.registers.PC == START + 2


def test_branch_taken_same_page(cpu, bus):
    cpu.Architecture.flags.Zero = False
    bus.load(START, bytes([0xD0, 0x10]))
    assert run(cpu, bus) == 3
    assert cpu.registers.PC == START + 2 + 0x10


def test_branch_taken_across_page(cpu, bus):
    cpu.Architecture.ProgramCounter = 0x04FD
    cpu.Architecture.flags.Zero = False
    bus.load(0x04FD, bytes([0xD0, 0x10]))
    assert run(cpu, bus) == 4
    assert cpu.registers.PC == 0x050F


def test_branch_backwards_across_page(cpu, bus):
    # BCS -16 from $0402 lands on $03F2
    cpu.Architecture.flags.Carry = True
    bus.load(START, bytes([0xB0, 0xF0]))
    assert run(cpu, bus) == 4
    assert cpu.registers.PC == 0x03F2


def test_adc_sets_overflow(cpu, bus):
    # CLC; LDA #$50; ADC #$50
    bus.load(START, bytes([0x18, 0xA9, 0x50, 0x69, 0x50]))
    for _ in range(3):
        run(cpu, bus)

    flags = cpu.Architecture.flags
    assert cpu.registers.A == 0xA0
    assert flags.Overflow
    assert flags.Negative
    assert not flags.Carry


def test_adc_carry_out(cpu, bus):
    # SEC; LDA #$FF; ADC #$01
    bus.load(START, bytes([0x38, 0xA9, 0xFF, 0x69, 0x01]))
    for _ in range(3):
        run(cpu, bus)

    flags = cpu.Architecture.flags
    assert cpu.registers.A == 0x01
    assert flags.Carry
    assert not flags.Overflow


def test_sbc_borrow_and_overflow(cpu, bus):
    # SEC; LDA #$50; SBC #$B0
    bus.load(START, bytes([0x38, 0xA9, 0x50, 0xE9, 0xB0]))
    for _ in range(3):
        run(cpu, bus)

    flags = cpu.Architecture.flags
    assert cpu.registers.A == 0xA0
    assert not flags.Carry
    assert flags.Overflow


def test_decimal_flag_does_not_change_adc(cpu, bus):
    # SED; CLC; LDA #$09; ADC #$01
    bus.load(START, bytes([0xF8, 0x18, 0xA9, 0x09, 0x69, 0x01]))
    for _ in range(4):
        run(cpu, bus)

    assert cpu.Architecture.flags.Decimal
    assert cpu.registers.A == 0x0A


def test_asl_accumulator(cpu, bus):
    cpu.Architecture.A = 0x81
    bus.load(START, bytes([0x0A]))
    assert run(cpu, bus) == 2
    assert cpu.registers.A == 0x02
    assert cpu.Architecture.flags.Carry


def test_ror_memory(cpu, bus):
    # SEC; ROR $20
    bus.write(0x0020, 0x01)
    bus.load(START, bytes([0x38, 0x66, 0x20]))
    run(cpu, bus)
    assert run(cpu, bus) == 5
    assert bus.read(0x0020) == 0x80
    assert cpu.Architecture.flags.Carry
    assert cpu.Architecture.flags.Negative


def test_inc_wraps_to_zero(cpu, bus):
    bus.write(0x0020, 0xFF)
    bus.load(START, bytes([0xE6, 0x20]))
    run(cpu, bus)
    assert bus.read(0x0020) == 0x00
    assert cpu.Architecture.flags.Zero


def test_compare(cpu, bus):
    # LDA #$10; CMP #$10; CMP #$20
    bus.load(START, bytes([0xA9, 0x10, 0xC9, 0x10, 0xC9, 0x20]))
    run(cpu, bus)
    run(cpu, bus)
    flags = cpu.Architecture.flags
    assert flags.Zero
    assert flags.Carry

    run(cpu, bus)
    assert not flags.Zero
    assert not flags.Carry
    assert flags.Negative


def test_bit_copies_memory_bits(cpu, bus):
    cpu.Architecture.A = 0x01
    bus.write(0x0020, 0xC0)
    bus.load(START, bytes([0x24, 0x20]))
    run(cpu, bus)

    flags = cpu.Architecture.flags
    assert flags.Zero
    assert flags.Negative
    assert flags.Overflow


def test_transfers(cpu, bus):
    # LDX #$05; TXA; TAY; TSX
    bus.load(START, bytes([0xA2, 0x05, 0x8A, 0xA8, 0xBA]))
    for _ in range(4):
        run(cpu, bus)

    regs = cpu.registers
    assert regs.A == 0x05
    assert regs.Y == 0x05
    assert regs.X == 0xFD


def test_jsr_and_rts(cpu, bus):
    # JSR $0500 / $0500: RTS
    bus.load(START, bytes([0x20, 0x00, 0x05]))
    bus.write(0x0500, 0x60)

    assert run(cpu, bus) == 6
    assert cpu.registers.PC == 0x0500
    assert cpu.registers.SP == 0xFB
    # return address is the last byte of JSR
    assert bus.read(0x01FD) == 0x04
    assert bus.read(0x01FC) == 0x02

    assert run(cpu, bus) == 6
    assert cpu.registers.PC == START + 3
    assert cpu.registers.SP == 0xFD


def test_php_pushes_break_and_unused(cpu, bus):
    bus.load(START, bytes([0x08]))
    assert run(cpu, bus) == 3
    assert bus.read(0x01FD) == StatusFlag.B | StatusFlag.U
    assert cpu.registers.SP == 0xFC


def test_plp_forces_unused(cpu, bus):
    # $00 on the stack, then PLP
    cpu.Architecture.StackPointer = 0xFC
    bus.write(0x01FD, 0x00)
    bus.load(START, bytes([0x28]))
    assert run(cpu, bus) == 4
    assert cpu.registers.status == StatusFlag.U


def test_pha_pla(cpu, bus):
    # LDA #$42; PHA; LDA #$00; PLA
    bus.load(START, bytes([0xA9, 0x42, 0x48, 0xA9, 0x00, 0x68]))
    for _ in range(4):
        run(cpu, bus)
    assert cpu.registers.A == 0x42
    assert cpu.registers.SP == 0xFD


def test_stack_pointer_wraps(cpu, bus):
    cpu.Architecture.StackPointer = 0x00
    cpu.Architecture.A = 0x5A
    bus.load(START, bytes([0x48]))
    run(cpu, bus)
    assert bus.read(0x0100) == 0x5A
    assert cpu.registers.SP == 0xFF


def test_brk_and_rti(cpu, bus):
    bus.load(0xFFFE, bytes([0x00, 0x06]))
    bus.load(START, bytes([0x00]))
    bus.write(0x0600, 0x40)

    assert run(cpu, bus) == 7
    regs = cpu.registers
    assert regs.PC == 0x0600
    assert regs.SP == 0xFA
    assert cpu.Architecture.flags.InterruptDisable
    assert bus.read(0x01FD) == 0x04
    assert bus.read(0x01FC) == 0x02
    assert bus.read(0x01FB) == StatusFlag.B | StatusFlag.U

    assert run(cpu, bus) == 6
    regs = cpu.registers
    assert regs.PC == START + 2
    assert regs.SP == 0xFD
    assert regs.status == StatusFlag.U


def test_nmi_pushes_state_and_jumps(cpu, bus):
    bus.load(0xFFFA, bytes([0x00, 0x07]))
    cpu.Architecture.flags.Break = True

    cpu.nmi(bus)

    assert cpu.registers.PC == 0x0700
    assert cpu.registers.cycles == 8
    assert cpu.Architecture.flags.InterruptDisable
    assert bus.read(0x01FD) == START >> 8
    assert bus.read(0x01FC) == START & 0xFF
    # pushed status has Break cleared and Unused set
    assert bus.read(0x01FB) == StatusFlag.U
    assert run(cpu, bus) == 8


def test_irq_respects_interrupt_disable(cpu, bus):
    bus.load(0xFFFE, bytes([0x00, 0x07]))
    cpu.Architecture.flags.InterruptDisable = True
    cpu.irq(bus)
    assert cpu.registers.PC == START
    assert cpu.complete()

    cpu.Architecture.flags.InterruptDisable = False
    cpu.irq(bus)
    assert cpu.registers.PC == 0x0700
    assert cpu.registers.cycles == 7


def test_illegal_opcode_is_a_one_byte_nop(cpu, bus):
    bus.load(START, bytes([0x02]))
    assert run(cpu, bus) == 2
    assert cpu.registers.PC == START + 1


def test_illegal_opcode_can_halt(bus):
    bus.load(0xFFFC, bytes([START & 0xFF, START >> 8]))
    bus.load(START, bytes([0x02]))
    cpu = CPU(halt_on_illegal=True)
    cpu.reset(bus)
    run(cpu, bus)

    with pytest.raises(IllegalOpcode) as excinfo:
        cpu.clock(bus)
    assert excinfo.value.opcode == 0x02
    assert excinfo.value.address == START


def test_missing_handler_is_a_coverage_gap():
    class Incomplete(CPU):
        _do_op_LDA = None

    with pytest.raises(CoverageGap):
        Incomplete()


def test_trace_log(bus):
    bus.load(0xFFFC, bytes([START & 0xFF, START >> 8]))
    bus.load(START, bytes([0xA9, 0x42, 0xEA]))
    cpu = CPU(trace=True)
    cpu.reset(bus)
    run(cpu, bus)
    run(cpu, bus)
    run(cpu, bus)

    assert len(cpu.tracelog) == 2
    first = cpu.tracelog[0]
    assert first.startswith("0400  A9 42")
    assert "LDA #$42" in first
    assert "SP:FD" in first
    assert cpu.tracelog[1].startswith("0402  EA")


def test_flags_round_trip():
    flags = Flags()
    flags.Carry = True
    flags.Negative = True
    assert flags.to_byte() == 0x81
    assert flags.get(StatusFlag.C)
    assert not flags.get(StatusFlag.Z)

    flags.from_byte(0x42)
    assert flags.Zero
    assert flags.Overflow
    assert not flags.Carry

    flags.set(StatusFlag.D, True)
    assert flags.to_byte() == 0x4A
