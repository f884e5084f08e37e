from pathlib import Path
from typing import Any, Callable, List, Optional, Union

import numpy as np
from numpy.typing import NDArray
from returns.result import Failure, Result, Success

from runes.bus import Bus
from runes.cartridge import Cartridge, INesHeader
from runes.cpu import CPU, Registers
from runes.errors import Diagnostic, FaultReporter, RunesError
from runes.logger import enable_file_logging, log
from runes.ppu import PPURegisters
from runes.util.config import Config, default_config


class Machine:
    """
    A cartridge wired to a bus, a CPU and a PPU, stepped together.

    This is the surface presentation layers use: stepping, reset, event
    hooks and read-only views of the machine state. The only mutation path
    is ``write``, which goes through the bus like a CPU store would.

    A new machine has already been through ``reset()``: the CPU is at the
    reset vector with the 8-cycle reset sequence pending.

    Once a step fails with a ``RunesError`` the machine is halted and every
    further step returns the same failure until ``reset()``.
    """

    PPU_CYCLES_PER_CPU_CYCLE: int = 3

    def __init__(self, cartridge: Cartridge, config: Optional[Config] = None) -> None:
        self.config: Config = config if config is not None else default_config()

        if self.config["debug"]["log_file"]:
            enable_file_logging(self.config["debug"]["log_file"])

        self.reporter: FaultReporter = FaultReporter(
            strict=self.config["halt_on"]["protocol_violation"],
            maxlen=self.config["bus"]["diagnostics_size"],
        )
        self.bus: Bus = Bus(cartridge, self.reporter)
        self.cpu: CPU = CPU(
            halt_on_illegal=self.config["halt_on"]["illegal_opcode"],
            trace=self.config["debug"]["trace"],
        )
        self._fault: Optional[RunesError] = None
        self.reset()

    @classmethod
    def from_cartridge(cls, cartridge: Cartridge, config: Optional[Config] = None) -> Result["Machine", RunesError]:
        try:
            return Success(cls(cartridge, config))
        except RunesError as e:
            log.error(f"Cannot build machine for {cartridge.file or 'cartridge'}: {e}")
            return Failure(e)

    @classmethod
    def from_file(cls, filepath: Union[Path, str], config: Optional[Config] = None) -> Result["Machine", RunesError]:
        return Cartridge.from_file(filepath).bind(lambda cartridge: cls.from_cartridge(cartridge, config))

    # CONTROL

    def reset(self) -> None:
        """Reset the PPU, then the CPU (8-cycle reset sequence), and clear any fault."""
        log.info("Resetting machine...")
        self._fault = None
        self.bus.reset()
        self.cpu.reset(self.bus)
        log.debug(f"Reset Vector: ${self.cpu.Architecture.ProgramCounter:04X}")

    def _halt(self, error: RunesError) -> Failure:
        self._fault = error
        log.error(f"Machine halted: {error}")
        return Failure(error)

    def advance_one_cpu_cycle(self) -> Result[int, RunesError]:
        """
        One CPU pulse followed by three PPU pulses.

        A pending NMI is taken only on an instruction boundary. Returns the
        total number of CPU pulses so far.
        """
        if self._fault is not None:
            return Failure(self._fault)

        try:
            ppu = self.bus.ppu
            if self.cpu.complete() and ppu.nmi_pending:
                ppu.nmi_pending = False
                self.cpu.nmi(self.bus)

            self.cpu.clock(self.bus)
            for _ in range(self.PPU_CYCLES_PER_CPU_CYCLE):
                ppu.clock()
        except RunesError as e:
            return self._halt(e)

        return Success(self.cpu.Architecture.ClockCount)

    def step_instruction(self) -> Result[int, RunesError]:
        """Advance until the current instruction (or interrupt sequence) finishes. Returns pulses taken."""
        pulses = 0
        while True:
            result = self.advance_one_cpu_cycle()
            if isinstance(result, Failure):
                return result
            pulses += 1
            if self.cpu.complete():
                return Success(pulses)

    def run_frame(self) -> Result[int, RunesError]:
        """Advance until the PPU wraps to a new frame. Returns the new frame number."""
        frame = self.bus.ppu.Frame
        while self.bus.ppu.Frame == frame:
            result = self.advance_one_cpu_cycle()
            if isinstance(result, Failure):
                return result
        return Success(self.bus.ppu.Frame)

    def on(self, event_name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a PPU timing hook, e.g. ``@machine.on("vblank")``."""
        return self.bus.ppu.on(event_name)

    # MEMORY

    def read(self, addr: int) -> int:
        """Inspect one CPU-visible byte without side effects."""
        return self.bus.read(addr, read_only=True)

    def write(self, addr: int, value: int) -> Result[None, RunesError]:
        try:
            self.bus.write(addr, value)
        except RunesError as e:
            return Failure(e)
        return Success(None)

    # VIEWS

    @property
    def registers(self) -> Registers:
        return self.cpu.registers

    @property
    def ram(self) -> NDArray[np.uint8]:
        return self.bus.peek_ram()

    @property
    def ppu_registers(self) -> PPURegisters:
        return self.bus.ppu.registers

    @property
    def prg_rom(self) -> NDArray[np.uint8]:
        return self.bus.cartridge.PRGROM

    @property
    def chr_rom(self) -> NDArray[np.uint8]:
        return self.bus.cartridge.CHRROM

    @property
    def header(self) -> INesHeader:
        return self.bus.cartridge.header

    @property
    def halted(self) -> bool:
        return self._fault is not None

    @property
    def fault(self) -> Optional[RunesError]:
        return self._fault

    @property
    def trace(self) -> List[str]:
        return list(self.cpu.tracelog)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.bus.diagnostics
