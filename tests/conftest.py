"""Shared test fixtures."""
from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    """Undo logging configuration and cached config between tests."""
    from libforge.cli.config import clear_config_cache

    yield
    structlog.reset_defaults()
    clear_config_cache()
