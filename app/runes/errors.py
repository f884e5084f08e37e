from collections import deque
from dataclasses import dataclass
from typing import Deque, Final, Literal, Optional, Union

from runes.logger import log


class RunesError(Exception):
    """Base exception for all runes related errors."""


class FormatError(RunesError):
    """The ROM container could not be parsed."""


class UnsupportedMapper(RunesError):
    def __init__(self, mapper_id: int):
        self.mapper_id: Final[int] = mapper_id
        super().__init__(f"Mapper {mapper_id} not supported")


class ProtocolViolation(RunesError):
    """ROM written, or a register accessed against its declared direction."""

    def __init__(self, message: str, address: int):
        self.address: Final[int] = address
        super().__init__(f"{message} at ${address:04X}")


class IllegalOpcode(RunesError):
    def __init__(self, opcode: int, address: int):
        self.opcode: Final[int] = opcode
        self.address: Final[int] = address
        super().__init__(f"Illegal opcode ${opcode:02X} at ${address:04X}")


class CoverageGap(RunesError):
    """A decode table entry has no wired operation or addressing handler."""


@dataclass(frozen=True)
class UnmappedAccess:
    kind: Literal["read", "write"]
    address: int
    value: Optional[int] = None
    space: Literal["cpu", "ppu"] = "cpu"

    def __str__(self) -> str:
        if self.kind == "read":
            return f"unmapped {self.space} read at ${self.address:04X}"
        return f"unmapped {self.space} write ${self.value or 0:02X} at ${self.address:04X}"


Diagnostic = Union[UnmappedAccess, ProtocolViolation]


class FaultReporter:
    """
    Collects bus diagnostics and applies the protocol-violation policy.

    Unmapped accesses are only recorded. Protocol violations are raised when
    ``strict`` is set, otherwise they are logged and recorded and the access
    is dropped by the caller.
    """

    def __init__(self, strict: bool = True, maxlen: int = 256) -> None:
        self.strict: bool = strict
        self.records: Deque[Diagnostic] = deque(maxlen=maxlen)

    def unmapped(
        self,
        kind: Literal["read", "write"],
        address: int,
        value: Optional[int] = None,
        space: Literal["cpu", "ppu"] = "cpu",
    ) -> None:
        record = UnmappedAccess(kind, address & 0xFFFF, value, space)
        log.debug(str(record))
        self.records.append(record)

    def violation(self, message: str, address: int) -> None:
        error = ProtocolViolation(message, address & 0xFFFF)
        if self.strict:
            raise error
        log.warning(f"Ignored protocol violation: {error}")
        self.records.append(error)

    def clear(self) -> None:
        self.records.clear()
