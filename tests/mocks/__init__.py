"""Test doubles for scaffolder collaborators."""

from .fake_engine import (
    FakeCommandRunner,
    FakeContainerRunner,
    failing_probe,
    probe_returning,
    render_from_parameters,
    render_nothing,
    render_readme,
    render_two_entries,
)

__all__ = [
    "FakeCommandRunner",
    "FakeContainerRunner",
    "failing_probe",
    "probe_returning",
    "render_from_parameters",
    "render_nothing",
    "render_readme",
    "render_two_entries",
]
