import logging
import os
import sys

import pytest

# Set environment BEFORE any imports that use Settings
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")
os.environ.setdefault("PRELOAD_LANGUAGES", "")

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from markup.languages import LanguageRegistry

# 2023-11-14 22:13:20 UTC, a Tuesday
FIXED_NOW = 1700000000


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def registry():
    return LanguageRegistry()


@pytest.fixture
def empty_registry():
    return LanguageRegistry(preload_core=False)


@pytest.fixture
def fake_highlighters():
    """Resolver that highlights only ``python`` by upper-casing the code."""

    class _FakeResolver:
        def __init__(self):
            self.calls = []

        def resolve(self, language_id):
            self.calls.append(language_id)
            if language_id == "python":
                return lambda code: f"<span class=\"hl\">{code.upper()}</span>"
            return None

    return _FakeResolver()


@pytest.fixture(autouse=True)
def _propagate_loguru_to_caplog():
    """Route loguru logs to stdlib logging so pytest caplog captures them."""
    from loguru import logger as loguru_logger

    class _PropagateHandler:
        def write(self, message):
            record = message.record
            level = record["level"].no
            stdlib_level = min(level, logging.CRITICAL)
            py_logger = logging.getLogger(record["name"])
            py_logger.log(stdlib_level, record["message"])

    handler_id = loguru_logger.add(_PropagateHandler(), format="{message}")
    yield
    try:
        loguru_logger.remove(handler_id)
    except ValueError:
        pass  # Handler already removed (e.g. by test_logging_config tests)
