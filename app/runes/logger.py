import logging
import sys
from pathlib import Path
from typing import Final, List, Tuple, Union

from rich.console import Console
from rich.logging import RichHandler

console: Final[Console] = Console(stderr=True)


class RunesFileHandler(logging.Handler):
    """Append-only file handler that keeps failed records and retries them on the next emit."""

    def __init__(self, file_name: Union[str, Path]):
        super().__init__()
        self._file_name = Path(file_name)
        self._log_hold: List[Tuple[logging.LogRecord, Exception]] = []

    def _write_log_entry(self, log_entry: str) -> None:
        with open(self._file_name, "a", encoding="utf-8") as f:
            f.write(log_entry + "\n")

    def emit(self, record: logging.LogRecord) -> None:
        log_entry = self.format(record)

        self.acquire()
        try:
            if self._log_hold:
                still_failed = []
                for old_record, _ in self._log_hold:
                    try:
                        self._write_log_entry(self.format(old_record))
                    except OSError as e:
                        still_failed.append((old_record, e))
                self._log_hold = still_failed

            try:
                self._write_log_entry(log_entry)
            except OSError as e:
                self._log_hold.append((record, e))
        finally:
            self.release()


debug_mode: Final[bool] = "--debug" in sys.argv or "--realdebug" in sys.argv

level: Final[int] = logging.DEBUG if debug_mode else logging.INFO
time_format: Final[str] = "%Y-%m-%d %H:%M:%S"
file_format: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

log: Final[logging.Logger] = logging.getLogger("RUNES")
log.setLevel(level)
log.addHandler(
    RichHandler(
        rich_tracebacks=True,
        show_path=True,
        enable_link_path=True,
        tracebacks_show_locals=debug_mode,
        show_level=False,
        console=console,
    )
)


def enable_file_logging(file_name: Union[str, Path]) -> RunesFileHandler:
    """Attach a file handler to the RUNES logger, once per path."""
    path = Path(file_name).resolve()
    for handler in log.handlers:
        if isinstance(handler, RunesFileHandler) and handler._file_name.resolve() == path:
            return handler

    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RunesFileHandler(path)
    handler.setFormatter(logging.Formatter(file_format, datefmt=time_format))
    log.addHandler(handler)
    return handler
