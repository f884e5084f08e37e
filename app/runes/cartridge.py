from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from returns.result import Failure, Result, Success

from runes.errors import FormatError
from runes.logger import log


class Mirroring(Enum):
    HORIZONTAL = 0
    VERTICAL = 1


@dataclass(frozen=True)
class INesHeader:
    """The 16-byte iNES header, decoded."""

    prg_rom_banks: int
    chr_rom_banks: int
    flags6: int
    flags7: int
    prg_ram_size: int
    tv_system1: int
    tv_system2: int

    @property
    def mapper_id(self) -> int:
        # high nibble from flags7, low nibble from the high nibble of flags6
        return (self.flags7 & 0xF0) | (self.flags6 >> 4)

    @property
    def mirroring(self) -> Mirroring:
        return Mirroring.VERTICAL if self.flags6 & 0x01 else Mirroring.HORIZONTAL

    @property
    def has_battery(self) -> bool:
        return bool(self.flags6 & 0x02)

    @property
    def has_trainer(self) -> bool:
        return bool(self.flags6 & 0x04)

    @property
    def four_screen(self) -> bool:
        return bool(self.flags6 & 0x08)

    @property
    def tv_system(self) -> str:
        return "PAL" if self.tv_system1 & 0x01 else "NTSC"


def _frozen(data: NDArray[np.uint8]) -> NDArray[np.uint8]:
    data = data.copy()
    data.flags.writeable = False
    return data


class Cartridge:
    """
    An iNES cartridge image: header plus immutable PRG ROM and CHR ROM buffers.

    Notes:
      - PRG ROM units: 16 KB blocks (0x4000)
      - CHR ROM units: 8 KB blocks  (0x2000)
      - Trainer presence: flags6 bit 2 (0x04), 512 bytes skipped before PRG ROM
      - Mirroring: flags6 bit 0 (0 = horizontal, 1 = vertical)
      - Mapper: high nibble from flags7 and high nibble of flags6

    Instances are only built by ``from_bytes``/``from_file`` and never change.
    """

    HEADER_SIZE: Final[int] = 0x10  # 16 bytes
    TRAINER_SIZE: Final[int] = 0x200  # 512 bytes
    PRG_BANK_SIZE: Final[int] = 0x4000
    CHR_BANK_SIZE: Final[int] = 0x2000
    MAGIC: Final[bytes] = b"NES\x1a"

    def __init__(
        self,
        header: INesHeader,
        prg_rom: NDArray[np.uint8],
        chr_rom: NDArray[np.uint8],
        trainer: Optional[NDArray[np.uint8]] = None,
        file: str = "",
    ) -> None:
        self.file: Final[str] = file
        self.header: Final[INesHeader] = header
        self.PRGROM: Final[NDArray[np.uint8]] = _frozen(prg_rom)
        self.CHRROM: Final[NDArray[np.uint8]] = _frozen(chr_rom)
        self.Trainer: Final[NDArray[np.uint8]] = _frozen(
            trainer if trainer is not None else np.zeros(0, dtype=np.uint8)
        )

    def __repr__(self) -> str:
        return (
            f"<Cartridge file={self.file!r} "
            f"PRG={len(self.PRGROM)} bytes "
            f"CHR={len(self.CHRROM)} bytes "
            f"Trainer={len(self.Trainer)} bytes "
            f"Mapper={self.MapperID} "
            f"Mirroring={self.MirroringMode.name.title()} "
            f"FourScreen={self.header.four_screen} "
            f"Battery={self.header.has_battery} "
            f"TVSystem={self.header.tv_system}>"
        )

    @property
    def MapperID(self) -> int:
        return self.header.mapper_id

    @property
    def MirroringMode(self) -> Mirroring:
        return self.header.mirroring

    @classmethod
    def from_bytes(cls, data: bytes, file: str = "") -> Result["Cartridge", FormatError]:
        """
        Parse an iNES image.

        Returns:
            Result containing either a Cartridge instance or a FormatError.
        """
        if not isinstance(data, (bytes, bytearray)):
            return Failure(FormatError(f"Expected bytes or bytearray, got {type(data).__name__}"))

        if len(data) < cls.HEADER_SIZE:
            return Failure(FormatError(f"ROM too short: {len(data)} bytes, minimum {cls.HEADER_SIZE}"))

        if bytes(data[0:4]) != cls.MAGIC:
            return Failure(FormatError(f"Invalid header magic: {bytes(data[0:4])!r}"))

        arr = np.frombuffer(bytes(data), dtype=np.uint8)
        header = INesHeader(
            prg_rom_banks=int(arr[4]),
            chr_rom_banks=int(arr[5]),
            flags6=int(arr[6]),
            flags7=int(arr[7]),
            prg_ram_size=int(arr[8]),
            tv_system1=int(arr[9]),
            tv_system2=int(arr[10]),
        )

        offset = cls.HEADER_SIZE
        trainer = None
        if header.has_trainer:
            trainer_end = offset + cls.TRAINER_SIZE
            if trainer_end > len(arr):
                return Failure(FormatError("Trainer flag set but ROM too small for trainer"))
            trainer = arr[offset:trainer_end]
            offset = trainer_end

        prg_end = offset + header.prg_rom_banks * cls.PRG_BANK_SIZE
        if prg_end > len(arr):
            return Failure(FormatError(f"PRG ROM exceeds file length ({prg_end} > {len(arr)})"))
        prg_rom = arr[offset:prg_end]
        offset = prg_end

        # CHR ROM may be zero-length; CHR RAM is not modelled
        chr_end = offset + header.chr_rom_banks * cls.CHR_BANK_SIZE
        if chr_end > len(arr):
            return Failure(FormatError(f"CHR ROM exceeds file length ({chr_end} > {len(arr)})"))
        chr_rom = arr[offset:chr_end]
        offset = chr_end

        if len(arr) > offset:
            log.warning(f"Extra {len(arr) - offset} bytes at end of ROM ignored")

        return Success(cls(header, prg_rom, chr_rom, trainer, file))

    @classmethod
    def from_file(cls, filepath: Union[Path, str]) -> Result["Cartridge", FormatError]:
        try:
            with open(filepath, "rb") as f:
                data = f.read()
        except OSError as e:
            return Failure(FormatError(f"Failed to read file {filepath}: {e}"))

        result = cls.from_bytes(data, file=str(filepath))
        return result.map(cls._log_loaded)

    @classmethod
    def is_valid_file(cls, filepath: Union[Path, str]) -> Tuple[bool, Optional[str]]:
        """
        Check if a file is a valid iNES ROM.

        Returns:
            A tuple of (is_valid, error_message).
        """
        result = cls.from_file(filepath)
        if isinstance(result, Success):
            return True, None
        return False, str(result.failure())

    @staticmethod
    def _log_loaded(cart: "Cartridge") -> "Cartridge":
        log.info(f"Loaded {cart!r}")
        return cart
