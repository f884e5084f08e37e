from runes.logger import RunesFileHandler, enable_file_logging, log


def test_file_logging(tmp_path):
    path = tmp_path / "logs" / "runes.log"
    handler = enable_file_logging(path)
    try:
        assert isinstance(handler, RunesFileHandler)
        assert enable_file_logging(path) is handler

        log.info("cartridge loaded")
        assert "cartridge loaded" in path.read_text(encoding="utf-8")
        assert "[INFO] RUNES" in path.read_text(encoding="utf-8")
    finally:
        log.removeHandler(handler)
