import io
import logging

import pytest

from core.logging_config import get_logger, setup_logging


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_writes_to_file_and_stream(clean_root, tmp_path):
    stream = io.StringIO()
    setup_logging(logs_dir=tmp_path, log_file_name="resolver.log", stream=stream)
    logging.getLogger("core.resolver").info("Mapped testmap to workshop ID 1")
    for h in clean_root.handlers:
        h.flush()
    files = list(tmp_path.glob("resolver_*.log"))
    assert len(files) == 1
    assert "Mapped testmap" in files[0].read_text(encoding="utf-8")
    assert "Mapped testmap" in stream.getvalue()


def test_idempotent(clean_root, tmp_path):
    stream = io.StringIO()
    setup_logging(logs_dir=tmp_path, stream=stream)
    count = len(clean_root.handlers)
    setup_logging(logs_dir=tmp_path, stream=stream)
    assert len(clean_root.handlers) == count


def test_level_by_name(clean_root, tmp_path):
    setup_logging(logs_dir=tmp_path, level="debug", stream=io.StringIO())
    assert clean_root.level == logging.DEBUG


def test_get_logger():
    assert get_logger("core.host").name == "core.host"
