"""Unit tests for the fetch:cookiecutter action."""

import io
import json
from pathlib import Path

import pytest

from scaffolder_core.actions import (
    ActionContext,
    FetchCookiecutterAction,
    build_values,
    create_fetch_cookiecutter_action,
    parse_input,
    resolve_output_path,
)
from scaffolder_core.config import LoggingConfig, ScaffolderConfig
from scaffolder_core.container import DockerContainerRunner
from scaffolder_core.errors import ScaffolderError
from scaffolder_core.types import LogFormat, LogLevel
from tests.mocks import (
    FakeCommandRunner,
    FakeContainerRunner,
    probe_returning,
    render_from_parameters,
    render_readme,
)


@pytest.fixture
def template_source(tmp_path: Path) -> Path:
    """A registered template: template.yaml next to a cookiecutter tree."""
    root = tmp_path / "catalog"
    skeleton = root / "skeleton"
    skeleton.mkdir(parents=True)
    (skeleton / "cookiecutter.json").write_text(json.dumps({"name": "default", "owner": "me"}))
    (root / "template.yaml").write_text("kind: Template\n")
    return root


@pytest.fixture
def task_workspace(tmp_path: Path) -> Path:
    path = tmp_path / "task"
    path.mkdir()
    return path


def snapshot(root: Path) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in root.rglob("*") if p.is_file()}


def make_context(task_workspace, template_source, quiet_logger, tmp_path, **input_values):
    raw = {"url": "./skeleton", "values": {"name": "svc-a"}}
    raw.update(input_values)
    return ActionContext(
        workspace_path=task_workspace,
        input=raw,
        log_stream=io.StringIO(),
        logger=quiet_logger,
        base_url=f"file://{template_source / 'template.yaml'}",
        temp_root=tmp_path,
    )


def make_action(*, local=True, command_runner=None, container_runner=None):
    return FetchCookiecutterAction(
        container_runner=container_runner or FakeContainerRunner(),
        command_runner=command_runner or FakeCommandRunner(),
        command_probe=probe_returning(local),
    )


class TestParseInput:
    """Tests for action input validation."""

    def test_minimal_input(self):
        """Test that only url is required."""
        params = parse_input({"url": "./skeleton"})

        assert params.url == "./skeleton"
        assert params.target_path is None
        assert params.values == {}
        assert params.copy_without_render is None
        assert params.extensions is None
        assert params.image_name is None

    def test_wire_names(self):
        """Test the camelCase input names."""
        params = parse_input(
            {
                "url": "./skeleton",
                "targetPath": "svc",
                "copyWithoutRender": ["*.png"],
                "extensions": ["jinja2_time.TimeExtension"],
                "imageName": "acme/cookiecutter",
            }
        )

        assert params.target_path == "svc"
        assert params.copy_without_render == ["*.png"]
        assert params.extensions == ["jinja2_time.TimeExtension"]
        assert params.image_name == "acme/cookiecutter"

    def test_copy_without_render_must_be_array(self):
        """Test the copyWithoutRender array check."""
        with pytest.raises(ScaffolderError) as exc_info:
            parse_input({"url": "./skeleton", "copyWithoutRender": "*.png"})

        assert exc_info.value.code == "INPUT_INVALID"
        assert exc_info.value.message == "Fetch action input copyWithoutRender must be an Array"

    def test_extensions_must_be_array(self):
        """Test the extensions array check."""
        with pytest.raises(ScaffolderError) as exc_info:
            parse_input({"url": "./skeleton", "extensions": "jinja2_time.TimeExtension"})

        assert exc_info.value.message == "Fetch action input extensions must be an Array"

    def test_missing_url(self):
        """Test that url is required."""
        with pytest.raises(ScaffolderError) as exc_info:
            parse_input({"values": {}})

        assert exc_info.value.code == "INPUT_INVALID"
        assert "url" in exc_info.value.message


class TestBuildValues:
    """Tests for reserved value forwarding."""

    def test_reserved_keys(self):
        """Test that array inputs and image are forwarded under reserved keys."""
        params = parse_input(
            {
                "url": ".",
                "values": {"name": "svc"},
                "copyWithoutRender": ["*.png"],
                "extensions": ["ext"],
                "imageName": "img",
            }
        )

        assert build_values(params) == {
            "name": "svc",
            "_copy_without_render": ["*.png"],
            "_extensions": ["ext"],
            "imageName": "img",
        }

    def test_absent_inputs_not_forwarded(self):
        """Test that unset optional inputs do not become null parameters."""
        params = parse_input({"url": ".", "values": {"name": "svc"}})

        assert build_values(params) == {"name": "svc"}


class TestResolveOutputPath:
    """Tests for target path containment."""

    def test_default_is_workspace_root(self, tmp_path):
        assert resolve_output_path(tmp_path, None) == tmp_path

    def test_relative_subdirectory(self, tmp_path):
        assert resolve_output_path(tmp_path, "services/svc-a") == tmp_path / "services" / "svc-a"

    def test_traversal_inside_workspace(self, tmp_path):
        """Test that '..' segments that stay inside are accepted."""
        assert resolve_output_path(tmp_path, "a/../b") == tmp_path / "b"

    @pytest.mark.parametrize("target", ["../../etc", "..", "/etc", "a/../../outside"])
    def test_escape_rejected(self, tmp_path, target):
        """Test that paths leaving the workspace are rejected."""
        with pytest.raises(ScaffolderError) as exc_info:
            resolve_output_path(tmp_path / "task", target)

        assert exc_info.value.code == "TARGET_PATH_OUTSIDE_WORKSPACE"
        assert exc_info.value.http_status == 400

    def test_sibling_with_common_prefix_rejected(self, tmp_path):
        """Test that a sibling sharing the workspace name prefix is outside."""
        with pytest.raises(ScaffolderError):
            resolve_output_path(tmp_path / "task", "../task-other")


class TestHandler:
    """Tests for the full action run."""

    @pytest.mark.asyncio
    async def test_renders_into_workspace(self, task_workspace, template_source, quiet_logger, tmp_path):
        """Test fetch, render and copy into the workspace root.

        The fetched tree sits one level below the template root, so its own
        cookiecutter.json is rendered as content and only the values reach
        the engine.
        """
        ctx = make_context(task_workspace, template_source, quiet_logger, tmp_path)
        action = make_action(command_runner=FakeCommandRunner(render=render_from_parameters))

        output = await action.handler(ctx)

        assert output == task_workspace
        params = json.loads((task_workspace / "params.json").read_text())
        assert params == {"name": "svc-a"}

    @pytest.mark.asyncio
    async def test_template_fetched_into_contents_dir(
        self, task_workspace, template_source, quiet_logger, tmp_path
    ):
        """Test that the fetched tree is rendered from the 'contents' directory."""
        command_runner = FakeCommandRunner(render=render_readme("contents"))
        ctx = make_context(task_workspace, template_source, quiet_logger, tmp_path)

        await make_action(command_runner=command_runner).handler(ctx)

        template_arg = Path(command_runner.calls[0].args[3])
        assert template_arg.name == "template"
        assert (template_arg / "{{cookiecutter and 'contents'}}" / "cookiecutter.json").exists()

    @pytest.mark.asyncio
    async def test_target_path_merges_into_existing(
        self, task_workspace, template_source, quiet_logger, tmp_path
    ):
        """Test that the result is copied over an existing tree."""
        existing = task_workspace / "svc"
        existing.mkdir()
        (existing / "KEEP.md").write_text("keep")
        ctx = make_context(
            task_workspace, template_source, quiet_logger, tmp_path, targetPath="svc"
        )

        await make_action().handler(ctx)

        assert (existing / "KEEP.md").read_text() == "keep"
        assert (existing / "README.md").exists()

    @pytest.mark.asyncio
    async def test_escaping_target_path_writes_nothing(
        self, task_workspace, template_source, quiet_logger, tmp_path
    ):
        """Test that '../../etc' fails before any file is written."""
        (task_workspace / "existing.txt").write_text("x")
        before = snapshot(tmp_path)
        command_runner = FakeCommandRunner()
        ctx = make_context(
            task_workspace, template_source, quiet_logger, tmp_path, targetPath="../../etc"
        )

        with pytest.raises(ScaffolderError) as exc_info:
            await make_action(command_runner=command_runner).handler(ctx)

        assert exc_info.value.code == "TARGET_PATH_OUTSIDE_WORKSPACE"
        assert command_runner.calls == []
        assert snapshot(tmp_path) == before

    @pytest.mark.asyncio
    async def test_invalid_input_before_filesystem_work(
        self, task_workspace, template_source, quiet_logger, tmp_path
    ):
        """Test that array checks run before the temp workspace is created."""
        ctx = make_context(
            task_workspace, template_source, quiet_logger, tmp_path, extensions="not-a-list"
        )
        entries_before = sorted(p.name for p in tmp_path.iterdir())

        with pytest.raises(ScaffolderError):
            await make_action().handler(ctx)

        assert sorted(p.name for p in tmp_path.iterdir()) == entries_before

    @pytest.mark.asyncio
    async def test_container_fallback_uses_image_input(
        self, task_workspace, template_source, quiet_logger, tmp_path
    ):
        """Test that imageName reaches the container runner, not the template."""
        container = FakeContainerRunner(render=render_from_parameters)
        ctx = make_context(
            task_workspace, template_source, quiet_logger, tmp_path, imageName="acme/cc:1"
        )

        await make_action(local=False, container_runner=container).handler(ctx)

        assert container.calls[0]["image_name"] == "acme/cc:1"
        params = json.loads((task_workspace / "params.json").read_text())
        assert "imageName" not in params

    @pytest.mark.asyncio
    async def test_temporary_directories_cleaned_up(
        self, task_workspace, template_source, quiet_logger, tmp_path
    ):
        """Test that the scratch workspace belongs to the context."""
        ctx = make_context(task_workspace, template_source, quiet_logger, tmp_path)

        await make_action().handler(ctx)
        scratch = [p for p in tmp_path.iterdir() if p.name.startswith("scaffolder-")]
        assert len(scratch) == 1
        assert (scratch[0] / "result").is_dir()

        ctx.cleanup()

        assert not scratch[0].exists()


class TestActionDeclaration:
    """Tests for the action metadata."""

    def test_id_and_schema(self):
        """Test the action id and input schema names."""
        schema = FetchCookiecutterAction.schema()["input"]

        assert FetchCookiecutterAction.id == "fetch:cookiecutter"
        assert schema["required"] == ["url"]
        assert set(schema["properties"]) == {
            "url",
            "targetPath",
            "values",
            "copyWithoutRender",
            "extensions",
            "imageName",
        }

    def test_factory_defaults_to_docker(self):
        """Test that the factory wires the docker CLI runner."""
        action = create_fetch_cookiecutter_action(config=ScaffolderConfig())

        assert isinstance(action._container_runner, DockerContainerRunner)

    @pytest.mark.asyncio
    async def test_factory_applies_logging_config(
        self, task_workspace, quiet_logger, log_output, tmp_path
    ):
        """Test that the configured log format and level reach the action's logger."""
        config = ScaffolderConfig(
            logging=LoggingConfig(level=LogLevel.DEBUG, format=LogFormat.JSON)
        )
        output = io.StringIO()
        action = create_fetch_cookiecutter_action(
            container_runner=FakeContainerRunner(), config=config, log_output=output
        )
        assert action._logger.config.level == LogLevel.DEBUG
        ctx = ActionContext(
            workspace_path=task_workspace,
            input={"url": "./skeleton"},
            log_stream=io.StringIO(),
            logger=quiet_logger,
            temp_root=tmp_path,
        )

        # Without a base URL the relative template location cannot be fetched
        with pytest.raises(ScaffolderError) as exc_info:
            await action.handler(ctx)

        assert exc_info.value.code == "TEMPLATE_FETCH_FAILED"
        [entry] = [json.loads(line) for line in output.getvalue().splitlines()]
        assert entry["message"] == "Fetching and then templating using cookiecutter"
        assert entry["url"] == "./skeleton"
        assert log_output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_errors_carry_action_id(self, task_workspace, quiet_logger):
        """Test that handler errors are tagged with the action id."""
        ctx = ActionContext(
            workspace_path=task_workspace,
            input={"url": "./skeleton", "targetPath": "../outside"},
            log_stream=io.StringIO(),
            logger=quiet_logger,
        )

        with pytest.raises(ScaffolderError) as exc_info:
            await make_action().handler(ctx)

        assert exc_info.value.code == "TARGET_PATH_OUTSIDE_WORKSPACE"
        assert exc_info.value.action_id == "fetch:cookiecutter"
