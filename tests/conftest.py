from __future__ import annotations

import pytest

from cli.main import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_structlog() -> None:
    configure_logging("WARNING")
