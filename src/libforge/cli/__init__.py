"""CLI module."""
from __future__ import annotations

from libforge.cli.config import LibforgeConfig, get_config
from libforge.cli.main import app

__all__ = ["LibforgeConfig", "app", "get_config"]
