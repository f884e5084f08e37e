import sys
from pathlib import Path
from typing import Callable, Dict, Optional

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from runes.cartridge import Cartridge  # noqa: E402

PRG_BANK = 0x4000
CHR_BANK = 0x2000


def build_ines(
    program: Optional[Dict[int, bytes]] = None,
    *,
    prg_banks: int = 1,
    chr_banks: int = 1,
    flags6: int = 0,
    flags7: int = 0,
    trainer: bytes = b"",
    reset: int = 0x8000,
    nmi: int = 0x9000,
    irq: int = 0x9100,
    magic: bytes = b"NES\x1a",
) -> bytes:
    """
    Assemble an iNES image in memory.

    ``program`` maps CPU addresses ($8000-$FFFF) to code. Unused PRG bytes are
    NOP ($EA); CHR byte ``i`` holds ``i & 0xFF``.
    """
    prg = bytearray([0xEA]) * (prg_banks * PRG_BANK)
    size = len(prg)
    for addr, code in (program or {}).items():
        for i, byte in enumerate(code):
            prg[(addr - 0x8000 + i) % size] = byte

    for vector, target in ((0xFFFA, nmi), (0xFFFC, reset), (0xFFFE, irq)):
        prg[(vector - 0x8000) % size] = target & 0xFF
        prg[(vector + 1 - 0x8000) % size] = (target >> 8) & 0xFF

    if trainer:
        flags6 |= 0x04

    header = magic + bytes([prg_banks, chr_banks, flags6, flags7]) + bytes(8)
    chr_rom = bytes(i & 0xFF for i in range(chr_banks * CHR_BANK))
    return header + trainer + bytes(prg) + chr_rom


class FlatBus:
    """64KB of plain RAM, for driving the CPU without cartridge or PPU."""

    def __init__(self) -> None:
        self.memory = np.zeros(0x10000, dtype=np.uint8)

    def read(self, addr: int, read_only: bool = False) -> int:
        return int(self.memory[addr & 0xFFFF])

    def write(self, addr: int, value: int) -> None:
        self.memory[addr & 0xFFFF] = value & 0xFF

    def load(self, addr: int, data: bytes) -> None:
        for i, byte in enumerate(data):
            self.write(addr + i, byte)


@pytest.fixture
def make_ines() -> Callable[..., bytes]:
    return build_ines


@pytest.fixture
def make_cartridge() -> Callable[..., Cartridge]:
    def factory(*args, **kwargs) -> Cartridge:
        return Cartridge.from_bytes(build_ines(*args, **kwargs)).unwrap()

    return factory


@pytest.fixture
def cartridge(make_cartridge) -> Cartridge:
    return make_cartridge()


@pytest.fixture
def flat_bus() -> FlatBus:
    return FlatBus()
