from collections import deque
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Any, Callable, Dict, Final, FrozenSet

import numpy as np
from numpy.typing import NDArray

from runes.cartridge import Mirroring
from runes.errors import FaultReporter, RunesError
from runes.mapper import Mapper


class PPURegister(IntEnum):
    CONTROL = 0  # $2000
    MASK = 1  # $2001
    STATUS = 2  # $2002
    OAM_ADDRESS = 3  # $2003
    OAM_DATA = 4  # $2004
    SCROLL = 5  # $2005
    ADDRESS = 6  # $2006
    DATA = 7  # $2007


class ControlFlag(IntFlag):
    NAMETABLE_X = 0x01
    NAMETABLE_Y = 0x02
    INCREMENT_MODE = 0x04  # 0: +1, 1: +32
    SPRITE_PATTERN = 0x08
    BACKGROUND_PATTERN = 0x10
    SPRITE_SIZE = 0x20
    MASTER_SLAVE = 0x40
    ENABLE_NMI = 0x80


class MaskFlag(IntFlag):
    GRAYSCALE = 0x01
    SHOW_BACKGROUND_LEFT = 0x02
    SHOW_SPRITES_LEFT = 0x04
    SHOW_BACKGROUND = 0x08
    SHOW_SPRITES = 0x10
    EMPHASIZE_RED = 0x20
    EMPHASIZE_GREEN = 0x40
    EMPHASIZE_BLUE = 0x80


class StatusFlag(IntFlag):
    SPRITE_OVERFLOW = 0x20
    SPRITE_ZERO_HIT = 0x40
    VERTICAL_BLANK = 0x80


READABLE: Final[FrozenSet[PPURegister]] = frozenset({PPURegister.STATUS, PPURegister.OAM_DATA, PPURegister.DATA})
WRITABLE: Final[FrozenSet[PPURegister]] = frozenset(PPURegister) - {PPURegister.STATUS}


@dataclass(frozen=True)
class PPURegisters:
    control: int
    mask: int
    status: int
    oam_address: int
    address: int
    data_buffer: int
    scroll_x: int
    scroll_y: int
    write_toggle: bool
    scanline: int
    cycle: int
    frame: int
    nmi_pending: bool


class PPU:
    """
    PPU timing automaton and CPU-visible register bank.

    One ``clock()`` advances the (scanline, cycle) pair by one dot on the
    262 x 341 NTSC grid. Pixel output is not produced; the points where a
    renderer would work are published as events:

        - ``background_fetch`` (scanline, cycle): cycles 1-256 of visible lines
        - ``sprite_evaluation`` (scanline): cycle 257 of visible lines
        - ``tile_prefetch`` (scanline, cycle): cycles 321-336 of visible lines
        - ``vblank`` (frame): scanline 241, cycle 1
        - ``frame_complete`` (frame): wrap from scanline 261 to 0

    PPU address space:
        $0000-$1FFF pattern tables (CHR ROM through the mapper, read-only)
        $2000-$2FFF nametables (2KB VRAM folded by the mirroring mode)
        $3000-$3EFF mirror of $2000-$2EFF
        $3F00-$3FFF palette RAM (32 bytes, mirrored)
    """

    CYCLES_PER_SCANLINE: Final[int] = 341
    SCANLINES_PER_FRAME: Final[int] = 262
    VISIBLE_SCANLINES: Final[int] = 240
    VBLANK_SCANLINE: Final[int] = 241
    PRE_RENDER_SCANLINE: Final[int] = 261

    def __init__(self, mapper: Mapper, reporter: FaultReporter) -> None:
        self._mapper: Final[Mapper] = mapper
        self._reporter: Final[FaultReporter] = reporter
        self._events: Dict[str, deque[Callable[..., Any]]] = {}

        self.VRAM: NDArray[np.uint8] = np.zeros(0x800, dtype=np.uint8)
        self.OAM: NDArray[np.uint8] = np.zeros(0x100, dtype=np.uint8)
        self.PaletteRAM: NDArray[np.uint8] = np.zeros(0x20, dtype=np.uint8)

        self.PPUCTRL: int = 0
        self.PPUMASK: int = 0
        self.PPUSTATUS: int = 0
        self.OAMADDR: int = 0
        self.PPUADDR: int = 0  # always within $0000-$3FFF
        self.PPUDataBuffer: int = 0
        self.PPUSCROLL: tuple[int, int] = (0, 0)
        self.w: bool = False  # False: next $2005/$2006 write is the first (high) one

        self.Scanline: int = 0
        self.PPUCycles: int = 0
        self.Frame: int = 0
        self.nmi_pending: bool = False

    def reset(self) -> None:
        self.PPUCTRL = 0
        self.PPUMASK = 0
        self.PPUSTATUS = 0
        self.OAMADDR = 0
        self.PPUADDR = 0
        self.PPUDataBuffer = 0
        self.PPUSCROLL = (0, 0)
        self.w = False
        self.Scanline = 0
        self.PPUCycles = 0
        self.Frame = 0
        self.nmi_pending = False

    @property
    def registers(self) -> PPURegisters:
        return PPURegisters(
            control=self.PPUCTRL,
            mask=self.PPUMASK,
            status=self.PPUSTATUS,
            oam_address=self.OAMADDR,
            address=self.PPUADDR,
            data_buffer=self.PPUDataBuffer,
            scroll_x=self.PPUSCROLL[0],
            scroll_y=self.PPUSCROLL[1],
            write_toggle=self.w,
            scanline=self.Scanline,
            cycle=self.PPUCycles,
            frame=self.Frame,
            nmi_pending=self.nmi_pending,
        )

    @property
    def vblank(self) -> bool:
        return bool(self.PPUSTATUS & StatusFlag.VERTICAL_BLANK)

    @property
    def rendering_enabled(self) -> bool:
        """Background or sprite rendering switched on in the mask register."""
        return bool(self.PPUMASK & (MaskFlag.SHOW_BACKGROUND | MaskFlag.SHOW_SPRITES))

    def on(self, event_name: str):
        def decorator(func: Callable):
            self._events.setdefault(event_name, deque()).append(func)
            return func

        return decorator

    def _emit(self, event_name: str, *args: Any) -> None:
        callbacks = self._events.get(event_name)
        if not callbacks:
            return

        for callback in callbacks:
            if not callable(callback):
                raise RunesError(f"Callback {callback!r} for {event_name!r} is not callable")
            callback(*args)

    # CPU-side register access ($2000-$2007)

    def cpu_read(self, reg: int, read_only: bool = False) -> int:
        register = PPURegister(reg & 0x07)

        if read_only:
            return self._peek_register(register)

        if register not in READABLE:
            self._reporter.violation(f"Read from write-only PPU register {register.name}", 0x2000 + register)
            return 0

        match register:
            case PPURegister.STATUS:
                return self.read_status()
            case PPURegister.OAM_DATA:
                return int(self.OAM[self.OAMADDR])
            case _:
                return self.read_data()

    def cpu_write(self, reg: int, value: int) -> None:
        register = PPURegister(reg & 0x07)
        value &= 0xFF

        if register not in WRITABLE:
            self._reporter.violation(f"Write to read-only PPU register {register.name}", 0x2000 + register)
            return

        match register:
            case PPURegister.CONTROL:
                self.write_control(value)
            case PPURegister.MASK:
                self.PPUMASK = value
            case PPURegister.OAM_ADDRESS:
                self.OAMADDR = value
            case PPURegister.OAM_DATA:
                self.OAM[self.OAMADDR] = value
                self.OAMADDR = (self.OAMADDR + 1) & 0xFF
            case PPURegister.SCROLL:
                self.write_scroll(value)
            case PPURegister.ADDRESS:
                self.write_address(value)
            case PPURegister.DATA:
                self.write_data(value)

    def _peek_register(self, register: PPURegister) -> int:
        match register:
            case PPURegister.CONTROL:
                return self.PPUCTRL
            case PPURegister.MASK:
                return self.PPUMASK
            case PPURegister.STATUS:
                return (self.PPUSTATUS & 0xE0) | (self.PPUDataBuffer & 0x1F)
            case PPURegister.OAM_ADDRESS:
                return self.OAMADDR
            case PPURegister.OAM_DATA:
                return int(self.OAM[self.OAMADDR])
            case PPURegister.SCROLL:
                return self.PPUSCROLL[1] if self.w else self.PPUSCROLL[0]
            case PPURegister.ADDRESS:
                return (self.PPUADDR & 0xFF) if self.w else (self.PPUADDR >> 8)
            case _:
                return self.PPUDataBuffer

    def write_control(self, value: int) -> None:
        nmi_was_enabled = bool(self.PPUCTRL & ControlFlag.ENABLE_NMI)
        self.PPUCTRL = value & 0xFF
        # Enabling NMI during vblank raises it straight away
        if not nmi_was_enabled and self.PPUCTRL & ControlFlag.ENABLE_NMI and self.vblank:
            self.nmi_pending = True

    def read_status(self) -> int:
        # Upper 3 bits are status, lower 5 are stale buffer contents
        result = (self.PPUSTATUS & 0xE0) | (self.PPUDataBuffer & 0x1F)
        self.PPUSTATUS &= 0x7F
        self.w = False
        return result

    def write_scroll(self, value: int) -> None:
        if not self.w:
            self.PPUSCROLL = (value, self.PPUSCROLL[1])
        else:
            self.PPUSCROLL = (self.PPUSCROLL[0], value)
        self.w = not self.w

    def write_address(self, value: int) -> None:
        if not self.w:
            self.PPUADDR = ((value << 8) | (self.PPUADDR & 0x00FF)) & 0x3FFF
        else:
            self.PPUADDR = (self.PPUADDR & 0xFF00) | value
        self.w = not self.w

    def _increment_address(self) -> None:
        increment = 32 if self.PPUCTRL & ControlFlag.INCREMENT_MODE else 1
        self.PPUADDR = (self.PPUADDR + increment) & 0x3FFF

    def read_data(self) -> int:
        addr = self.PPUADDR
        if addr >= 0x3F00:
            # Palette reads are not buffered; the buffer takes the nametable byte underneath
            result = self.ppu_read(addr)
            self.PPUDataBuffer = self.ppu_read(addr - 0x1000)
        else:
            result = self.PPUDataBuffer
            self.PPUDataBuffer = self.ppu_read(addr)
        self._increment_address()
        return result

    def write_data(self, value: int) -> None:
        self.ppu_write(self.PPUADDR, value)
        self._increment_address()

    # PPU-side memory

    def mirror_nametable(self, addr: int) -> int:
        """Fold a $2000-$3EFF address onto an index into the 2KB VRAM."""
        index = (addr - 0x2000) & 0x0FFF
        table, offset = divmod(index, 0x400)
        if self._mapper.get_mirroring() is Mirroring.VERTICAL:
            bank = table & 0x01  # 0,2 -> 0 and 1,3 -> 1
        else:
            bank = table >> 1  # 0,1 -> 0 and 2,3 -> 1
        return bank * 0x400 + offset

    @staticmethod
    def mirror_palette(addr: int) -> int:
        pal_addr = addr & 0x1F
        if pal_addr in (0x10, 0x14, 0x18, 0x1C):
            pal_addr -= 0x10
        return pal_addr

    def ppu_read(self, addr: int) -> int:
        addr &= 0x3FFF
        if addr < 0x2000:
            value = self._mapper.ppu_read(addr)
            if value is None:
                self._reporter.unmapped("read", addr, space="ppu")
                return 0
            return value
        elif addr < 0x3F00:
            return int(self.VRAM[self.mirror_nametable(addr)])
        return int(self.PaletteRAM[self.mirror_palette(addr)])

    def ppu_write(self, addr: int, value: int) -> None:
        addr &= 0x3FFF
        value &= 0xFF
        if addr < 0x2000:
            if not self._mapper.ppu_write(addr, value):
                self._reporter.violation("Write to pattern table ROM", addr)
        elif addr < 0x3F00:
            self.VRAM[self.mirror_nametable(addr)] = value
        else:
            self.PaletteRAM[self.mirror_palette(addr)] = value

    # Timing

    def clock(self) -> None:
        """
        Advance one PPU cycle.

        Scanline breakdown:
            - 0-239: visible scanlines (renderer hook points)
            - 240: post-render (idle)
            - 241: vblank flag set at cycle 1, NMI raised if enabled
            - 242-260: vblank
            - 261: pre-render; after its last cycle the frame wraps and vblank clears
        """
        scanline, cycle = self.Scanline, self.PPUCycles

        if scanline < self.VISIBLE_SCANLINES:
            if 1 <= cycle <= 256:
                self._emit("background_fetch", scanline, cycle)
            elif cycle == 257:
                self._emit("sprite_evaluation", scanline)
            elif 321 <= cycle <= 336:
                self._emit("tile_prefetch", scanline, cycle)

        elif scanline == self.VBLANK_SCANLINE and cycle == 1:
            self.PPUSTATUS = int(self.PPUSTATUS | StatusFlag.VERTICAL_BLANK)
            if self.PPUCTRL & ControlFlag.ENABLE_NMI:
                self.nmi_pending = True
            self._emit("vblank", self.Frame)

        self.PPUCycles += 1
        if self.PPUCycles >= self.CYCLES_PER_SCANLINE:
            self.PPUCycles = 0
            self.Scanline += 1

            if self.Scanline > self.PRE_RENDER_SCANLINE:
                self.Scanline = 0
                # clear vblank + sprite 0 hit + overflow
                self.PPUSTATUS &= 0x1F
                self.Frame += 1
                self._emit("frame_complete", self.Frame)
