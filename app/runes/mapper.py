# - Mapper base class
# - Mapper000 (NROM)

from typing import Final, Optional

import numpy as np
from numpy.typing import NDArray
from returns.result import Failure, Result, Success

from runes.cartridge import Cartridge, Mirroring
from runes.errors import UnsupportedMapper


# Base Mapper
class Mapper:
    """
    Base class for cartridge mappers.

    ``cpu_read``/``ppu_read`` return None for addresses the cartridge does not
    drive; ``cpu_write``/``ppu_write`` return False when the write is refused.
    """

    def __init__(self, prg_rom_chunks: int, chr_rom_chunks: int, mirroring: Mirroring) -> None:
        self.prg_rom_chunks: int = int(prg_rom_chunks)
        self.chr_rom_chunks: int = int(chr_rom_chunks)
        self.mirroring: Mirroring = mirroring

    def cpu_read(self, addr: int) -> Optional[int]:
        raise NotImplementedError

    def cpu_write(self, addr: int, value: int) -> bool:
        raise NotImplementedError

    def ppu_read(self, addr: int) -> Optional[int]:
        raise NotImplementedError

    def ppu_write(self, addr: int, value: int) -> bool:
        raise NotImplementedError

    def get_mirroring(self) -> Mirroring:
        return self.mirroring


# Mapper 000 (NROM)
class Mapper000(Mapper):
    """NROM: no bank switching. PRG 16KB (mirrored across $8000-$FFFF) or 32KB. CHR 8KB ROM."""

    def __init__(self, prg_rom: NDArray[np.uint8], chr_rom: NDArray[np.uint8], mirroring: Mirroring) -> None:
        super().__init__(len(prg_rom) // 0x4000, len(chr_rom) // 0x2000, mirroring)
        self.prg_rom: Final[NDArray[np.uint8]] = prg_rom
        self.chr_rom: Final[NDArray[np.uint8]] = chr_rom

    def cpu_read(self, addr: int) -> Optional[int]:
        if 0x8000 <= addr <= 0xFFFF and self.prg_rom_chunks > 0:
            # 16KB images repeat at $C000, 32KB images fill the window
            mask = 0x7FFF if self.prg_rom_chunks > 1 else 0x3FFF
            return int(self.prg_rom[addr & mask])
        return None

    def cpu_write(self, addr: int, value: int) -> bool:
        return False

    def ppu_read(self, addr: int) -> Optional[int]:
        if 0x0000 <= addr <= 0x1FFF and self.chr_rom_chunks > 0:
            return int(self.chr_rom[addr])
        return None

    def ppu_write(self, addr: int, value: int) -> bool:
        return False


def create_mapper(cartridge: Cartridge) -> Result[Mapper, UnsupportedMapper]:
    match cartridge.MapperID:
        case 0:
            return Success(Mapper000(cartridge.PRGROM, cartridge.CHRROM, cartridge.MirroringMode))
        case mapper_id:
            return Failure(UnsupportedMapper(mapper_id))
