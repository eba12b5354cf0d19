"""
Pytest configuration and shared fixtures for scaffolder tests.
"""

import io
import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from scaffolder_core.logging import LogConfig, ScaffolderLogger  # noqa: E402
from scaffolder_core.types import LogLevel  # noqa: E402


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Run workspace with an empty template directory."""
    root = tmp_path / "run-1"
    (root / "template").mkdir(parents=True)
    return root


@pytest.fixture
def template_dir(workspace: Path) -> Path:
    return workspace / "template"


@pytest.fixture
def write_defaults(template_dir: Path):
    """Write a cookiecutter.json into the workspace template."""

    def _write(defaults: dict) -> Path:
        path = template_dir / "cookiecutter.json"
        path.write_text(json.dumps(defaults))
        return path

    return _write


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def quiet_logger(log_output: io.StringIO) -> ScaffolderLogger:
    """Logger writing everything, DEBUG included, into ``log_output``."""
    return ScaffolderLogger(LogConfig(level=LogLevel.DEBUG, output=log_output))


@pytest.fixture
def log_stream() -> io.StringIO:
    """Sink for engine output."""
    return io.StringIO()


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "security: Security tests")
    config.addinivalue_line("markers", "slow: Slow tests")
