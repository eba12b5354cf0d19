"""Unit tests for RunWorkspace."""

import pytest

from scaffolder_core.cookiecutter.workspace import RunWorkspace
from scaffolder_core.errors import ScaffolderError


class TestRunWorkspace:
    """Tests for the per-run directory layout."""

    def test_layout(self, tmp_path):
        """Test the three sibling directories."""
        ws = RunWorkspace(tmp_path / "run-7")

        assert ws.template_dir == tmp_path / "run-7" / "template"
        assert ws.intermediate_dir == tmp_path / "run-7" / "intermediate"
        assert ws.result_dir == tmp_path / "run-7" / "result"
        assert ws.run_id == "run-7"

    def test_prepare_creates_intermediate(self, tmp_path):
        """Test that prepare creates only the intermediate directory."""
        ws = RunWorkspace(tmp_path)

        ws.prepare()

        assert ws.intermediate_dir.is_dir()
        assert not ws.result_dir.exists()

    def test_prepare_accepts_empty_intermediate(self, tmp_path):
        """Test that an existing but empty intermediate directory is reused."""
        ws = RunWorkspace(tmp_path)
        ws.intermediate_dir.mkdir()

        ws.prepare()

        assert ws.intermediate_dir.is_dir()

    def test_prepare_rejects_leftover_output(self, tmp_path):
        """Test that stale engine output is reported before the engine runs."""
        ws = RunWorkspace(tmp_path)
        (ws.intermediate_dir / "stale-service").mkdir(parents=True)

        with pytest.raises(ScaffolderError) as exc_info:
            ws.prepare()

        assert exc_info.value.code == "INTERMEDIATE_NOT_EMPTY"
        assert "stale-service" in exc_info.value.detail

    def test_guard_discards_result_on_failure(self, tmp_path):
        """Test that a failing block leaves no result directory."""
        ws = RunWorkspace(tmp_path)

        with pytest.raises(RuntimeError):
            with ws.result_guard():
                ws.result_dir.mkdir()
                (ws.result_dir / "half.txt").write_text("partial")
                raise RuntimeError("engine crashed")

        assert not ws.result_dir.exists()

    def test_guard_keeps_result_on_success(self, tmp_path):
        """Test that a successful block keeps the result."""
        ws = RunWorkspace(tmp_path)

        with ws.result_guard():
            ws.result_dir.mkdir()

        assert ws.result_dir.is_dir()

    def test_guard_keeps_preexisting_result(self, tmp_path):
        """Test that a result from before the block is not deleted."""
        ws = RunWorkspace(tmp_path)
        ws.result_dir.mkdir()

        with pytest.raises(RuntimeError):
            with ws.result_guard():
                raise RuntimeError("boom")

        assert ws.result_dir.is_dir()

    def test_discard_without_result(self, tmp_path):
        """Test that discarding a missing result is a no-op."""
        RunWorkspace(tmp_path).discard_result()
