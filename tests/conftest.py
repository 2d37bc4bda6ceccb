"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from sshkeygen.common.logging import setup_logging
from sshkeygen.common.settings import Settings, get_settings
from sshkeygen.keys import catalog
from sshkeygen.session import Session


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch):
    """Isolate settings cache and logging context between tests."""
    for name in ("SSHKEYGEN_LOG_FILE", "SSHKEYGEN_OUTPUT_DIR", "SSHKEYGEN_DEFAULT_ALGORITHM"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    setup_logging("WARNING")
    yield
    structlog.contextvars.clear_contextvars()
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Create test settings with all cosmetic delays disabled."""
    return Settings(
        output_dir=str(tmp_path),
        settle_delay=0.0,
        tick_interval=0.01,
        stage_pacing_scale=0.0,
    )


@pytest.fixture
def make_session(tmp_path: Path) -> Callable[..., Session]:
    """Factory for sessions bound to an algorithm inside tmp_path."""

    def _make(name: str = "ED25519", key_size: int | None = None, comment: str = "") -> Session:
        session = Session()
        session.bind(
            catalog.get_algorithm(name),
            key_size=key_size,
            output_dir=tmp_path,
            comment=comment,
        )
        return session

    return _make
