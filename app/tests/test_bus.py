import pytest

from runes.bus import Bus
from runes.errors import FaultReporter, ProtocolViolation, UnmappedAccess, UnsupportedMapper


@pytest.fixture
def bus(cartridge):
    return Bus(cartridge)


def test_ram_mirroring(bus):
    bus.write(0x0000, 0x5A)
    assert bus.read(0x0800) == 0x5A
    assert bus.read(0x1000) == 0x5A
    assert bus.read(0x1800) == 0x5A

    bus.write(0x1FFF, 0xA5)
    assert bus.read(0x07FF) == 0xA5


def test_addresses_wrap_at_16_bits(bus):
    bus.write(0x10005, 0x42)
    assert bus.read(0x0005) == 0x42


def test_ppu_register_mirroring(cartridge):
    direct = Bus(cartridge)
    mirrored = Bus(cartridge)

    direct.write(0x2000, 0x84)
    mirrored.write(0x2008, 0x84)
    assert direct.ppu.registers == mirrored.ppu.registers

    mirrored.write(0x3FF8, 0x00)
    assert mirrored.ppu.registers.control == 0x00


def test_16k_program_is_mirrored(make_cartridge):
    bus = Bus(make_cartridge({0x8000: bytes(range(256))}))
    for offset in range(0x4000):
        assert bus.read(0x8000 + offset) == bus.read(0xC000 + offset)
    assert bus.read(0xC0FF) == 0xFF


def test_reset_vector_readable(make_cartridge):
    bus = Bus(make_cartridge(reset=0xC123))
    assert bus.read(0xFFFC) == 0x23
    assert bus.read(0xFFFD) == 0xC1


def test_unmapped_read_returns_zero_with_diagnostic(bus):
    assert bus.read(0x5000) == 0
    assert bus.diagnostics == [UnmappedAccess("read", 0x5000)]


def test_unmapped_write_is_dropped_with_diagnostic(bus):
    bus.write(0x4016, 0x01)
    assert bus.read(0x4016) == 0
    assert bus.diagnostics[0] == UnmappedAccess("write", 0x4016, 0x01)
    assert str(bus.diagnostics[0]) == "unmapped cpu write $01 at $4016"


def test_read_only_does_not_record(bus):
    assert bus.read(0x5000, read_only=True) == 0
    assert bus.diagnostics == []


def test_rom_write_is_a_protocol_violation(bus):
    with pytest.raises(ProtocolViolation) as excinfo:
        bus.write(0x8000, 0x00)
    assert excinfo.value.address == 0x8000
    assert bus.read(0x8000) == 0xEA


def test_lenient_rom_write_is_recorded(cartridge):
    bus = Bus(cartridge, FaultReporter(strict=False))
    bus.write(0x8000, 0x00)
    assert bus.read(0x8000) == 0xEA
    assert isinstance(bus.diagnostics[0], ProtocolViolation)


def test_register_direction_violations(bus):
    with pytest.raises(ProtocolViolation):
        bus.read(0x2000)
    with pytest.raises(ProtocolViolation):
        bus.write(0x2002, 0x00)


def test_diagnostics_are_bounded(cartridge):
    bus = Bus(cartridge, FaultReporter(maxlen=4))
    for addr in range(0x5000, 0x5010):
        bus.read(addr)
    assert len(bus.diagnostics) == 4
    assert bus.diagnostics[-1].address == 0x500F


def test_reset_clears_diagnostics_and_keeps_ram(bus):
    bus.write(0x0010, 0x42)
    bus.read(0x5000)
    bus.reset()
    assert bus.diagnostics == []
    assert bus.read(0x0010) == 0x42


def test_peek_ram_is_a_copy(bus):
    bus.write(0x0001, 0x11)
    ram = bus.peek_ram()
    assert len(ram) == Bus.RAM_SIZE
    assert ram[1] == 0x11
    ram[1] = 0x22
    assert bus.read(0x0001) == 0x11


def test_unsupported_mapper(make_cartridge):
    with pytest.raises(UnsupportedMapper):
        Bus(make_cartridge(flags6=0x40))
