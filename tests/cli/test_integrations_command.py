import uuid
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from dashboard.cli.cli import app
from dashboard.integrations.pipeline import PipelineResult
from dashboard.models.enums import IntegrationName, PipelineStatus

runner = CliRunner()

MODULE = "dashboard.cli.commands.integrations"


def _result(name, status=PipelineStatus.SUCCEEDED, **kwargs):
    return PipelineResult(integration=name, status=status, **kwargs)


def _patched(**mocks):
    return (
        patch(f"{MODULE}.init_db"),
        patch(f"{MODULE}.setup_logging"),
        *(patch(f"{MODULE}.{name}", mock) for name, mock in mocks.items()),
    )


def test_list_shows_every_integration():
    result = runner.invoke(app, ["integrations", "list"])
    assert result.exit_code == 0
    for name in ("music", "trakt", "feedly", "goodreads"):
        assert name in result.output


def test_run_success():
    user_id = uuid.uuid4()
    run_one = AsyncMock(return_value=_result(IntegrationName.FEEDLY, snapshot_id=uuid.uuid4()))
    init_db, setup_logging, run_one_patch = _patched(_run_one=run_one)

    with init_db, setup_logging, run_one_patch:
        result = runner.invoke(app, ["integrations", "run", "feedly", "--user-id", str(user_id)])

    assert result.exit_code == 0
    run_one.assert_awaited_once_with(IntegrationName.FEEDLY, user_id)


def test_run_failure_exits_non_zero():
    run_one = AsyncMock(return_value=_result(
        IntegrationName.MUSIC,
        status=PipelineStatus.FAILED,
        error_type="IntegrationConfigError",
        error_message="Missing LastFM key",
    ))
    init_db, setup_logging, run_one_patch = _patched(_run_one=run_one)

    with init_db, setup_logging, run_one_patch:
        result = runner.invoke(app, ["integrations", "run", "music"])

    assert result.exit_code == 1
    assert "failed" in result.output


def test_run_rejects_bad_user_id():
    result = runner.invoke(app, ["integrations", "run", "music", "--user-id", "nope"])
    assert result.exit_code != 0


def test_run_all_without_configuration():
    init_db, setup_logging, run_all_patch = _patched(_run_all=AsyncMock(return_value=[]))

    with init_db, setup_logging, run_all_patch:
        result = runner.invoke(app, ["integrations", "run-all"])

    assert result.exit_code == 0
    assert "No active integrations configured" in result.output


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Dashboard CLI version" in result.output
