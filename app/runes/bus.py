from typing import Final, List, Optional

import numpy as np
from numpy.typing import NDArray
from returns.result import Failure, Success

from runes.cartridge import Cartridge
from runes.errors import Diagnostic, FaultReporter
from runes.mapper import Mapper, create_mapper
from runes.ppu import PPU


class Bus:
    """
    CPU address decoder. Owns the 2KB work RAM, the cartridge (through its
    mapper) and the PPU.

        $0000-$1FFF  RAM, mirrored every $0800
        $2000-$3FFF  PPU registers, mirrored every 8 bytes
        $4000-$7FFF  unmapped (reads 0, writes dropped, both recorded)
        $8000-$FFFF  PRG ROM, read-only
    """

    RAM_SIZE: Final[int] = 0x800

    def __init__(self, cartridge: Cartridge, reporter: Optional[FaultReporter] = None) -> None:
        self.reporter: Final[FaultReporter] = reporter if reporter is not None else FaultReporter()
        self.cartridge: Final[Cartridge] = cartridge

        match create_mapper(cartridge):
            case Success(mapper):
                self.mapper: Final[Mapper] = mapper
            case Failure(error):
                raise error

        self.ppu: Final[PPU] = PPU(self.mapper, self.reporter)
        self._ram: Final[NDArray[np.uint8]] = np.zeros(self.RAM_SIZE, dtype=np.uint8)

    def reset(self) -> None:
        """Reset the PPU and drop recorded diagnostics. RAM keeps its contents."""
        self.ppu.reset()
        self.reporter.clear()

    def read(self, addr: int, read_only: bool = False) -> int:
        """
        Read one byte from the CPU address space.

        ``read_only`` gives inspectors a view without side effects: PPU register
        reads do not clear flags or move the VRAM address, and unmapped reads
        are not recorded.
        """
        addr &= 0xFFFF

        # RAM ($0000-$1FFF)
        if addr < 0x2000:
            return int(self._ram[addr & 0x07FF])

        # PPU registers ($2000-$3FFF)
        elif addr < 0x4000:
            return self.ppu.cpu_read(addr & 0x0007, read_only)

        # ROM ($8000-$FFFF)
        elif addr >= 0x8000:
            value = self.mapper.cpu_read(addr)
            if value is not None:
                return value

        if not read_only:
            self.reporter.unmapped("read", addr)
        return 0

    def write(self, addr: int, value: int) -> None:
        addr &= 0xFFFF
        value &= 0xFF

        # RAM ($0000-$1FFF)
        if addr < 0x2000:
            self._ram[addr & 0x07FF] = value

        # PPU registers ($2000-$3FFF)
        elif addr < 0x4000:
            self.ppu.cpu_write(addr & 0x0007, value)

        # ROM ($8000-$FFFF)
        elif addr >= 0x8000:
            if not self.mapper.cpu_write(addr, value):
                self.reporter.violation("Write to PRG ROM", addr)

        else:
            self.reporter.unmapped("write", addr, value)

    def peek_ram(self) -> NDArray[np.uint8]:
        """Copy of the 2KB work RAM."""
        return self._ram.copy()

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self.reporter.records)
