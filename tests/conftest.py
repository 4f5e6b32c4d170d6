# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- bytes_stream: factory for in-memory ReadStreams over UTF-8 bytes
- _reset_logging: restores logging after tests that call configure_logging()

Typed-row helpers live in tests/helpers/rows.py.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Callable, Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from bigcsv.streams import ReadStream


@pytest.fixture
def bytes_stream() -> Callable[[str], ReadStream]:
    """Factory for ReadStreams over UTF-8 encoded BytesIO."""

    def _make(text: str) -> ReadStream:
        return ReadStream(io.BytesIO(text.encode("utf-8")))

    return _make


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo configure_logging() calls so later tests don't log to closed streams."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # thread pools make timing vary
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
