from runes.__version__ import __version__, __version_string__
from runes.bus import Bus
from runes.cartridge import Cartridge, INesHeader, Mirroring
from runes.cpu import CPU, Flags, Registers, StatusFlag
from runes.errors import (
    CoverageGap,
    FaultReporter,
    FormatError,
    IllegalOpcode,
    ProtocolViolation,
    RunesError,
    UnmappedAccess,
    UnsupportedMapper,
)
from runes.machine import Machine
from runes.ppu import PPU, PPURegisters

__all__ = [
    "__version__",
    "__version_string__",
    "Bus",
    "Cartridge",
    "INesHeader",
    "Mirroring",
    "CPU",
    "Flags",
    "Registers",
    "StatusFlag",
    "CoverageGap",
    "FaultReporter",
    "FormatError",
    "IllegalOpcode",
    "ProtocolViolation",
    "RunesError",
    "UnmappedAccess",
    "UnsupportedMapper",
    "Machine",
    "PPU",
    "PPURegisters",
]
