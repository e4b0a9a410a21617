"""
Repository-level pytest configuration.

Provides the repo root and configures Loguru once per session from the
`logging` section of config/config.yaml. No site credentials are needed:
every suite reads public pages only.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from juku_tools.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _session_logging() -> Generator[None, None, None]:
    """Configure log sinks before the first test runs."""
    init_logger()
    yield
