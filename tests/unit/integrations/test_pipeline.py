"""
Unit tests for the pipeline orchestrator.
"""
import pytest
from sqlmodel import select

from dashboard.core.exceptions import PayloadShapeError, RemoteCallError
from dashboard.integrations.config_provider import LoadedConfig
from dashboard.integrations.pipeline import (
    PipelineContext,
    PipelineDefinition,
    run_pipeline,
)
from dashboard.models.enums import IntegrationName, PipelineStatus
from dashboard.models.snapshot import FeedlySnapshot
from dashboard.schemas.app_config import AppConfigData


def _context(**data):
    context = PipelineContext(integration=IntegrationName.FEEDLY, config=AppConfigData())
    return context.with_data(**data) if data else context


def _definition(*stages):
    return PipelineDefinition(
        name=IntegrationName.FEEDLY,
        stages=stages,
        build_snapshot=lambda ctx: FeedlySnapshot(feeds=ctx.get("feeds")),
    )


async def _produce_feeds(ctx):
    return ctx.with_data(feeds=[{"title": "Example"}])


async def _remote_failure(ctx):
    raise RemoteCallError("GET https://example.com returned HTTP 503")


class TestPipelineContext:

    def test_with_data_returns_new_context(self):
        first = _context(a=1)
        second = first.with_data(b=2)

        assert dict(first.data) == {"a": 1}
        assert dict(second.data) == {"a": 1, "b": 2}
        assert first is not second

    def test_data_is_read_only(self):
        context = _context(a=1)
        with pytest.raises(TypeError):
            context.data["a"] = 2

    def test_context_is_frozen(self):
        context = _context()
        with pytest.raises(AttributeError):
            context.user_id = None

    def test_get_missing_value_raises_shape_error(self):
        with pytest.raises(PayloadShapeError, match="no 'feeds' value"):
            _context().get("feeds")


class TestRunPipeline:

    @pytest.mark.asyncio
    async def test_success_persists_exactly_one_snapshot(self, session):
        config = LoadedConfig(user_id=None, data=AppConfigData())

        result = await run_pipeline(session, _definition(_produce_feeds), config=config)

        assert result.status == PipelineStatus.SUCCEEDED
        assert result.succeeded
        rows = session.exec(select(FeedlySnapshot)).all()
        assert len(rows) == 1
        assert rows[0].id == result.snapshot_id
        assert rows[0].feeds == [{"title": "Example"}]

    @pytest.mark.asyncio
    async def test_snapshot_belongs_to_config_owner(self, session, user):
        config = LoadedConfig(user_id=user.id, data=AppConfigData())

        result = await run_pipeline(session, _definition(_produce_feeds), config=config)

        row = session.get(FeedlySnapshot, result.snapshot_id)
        assert row.user_id == user.id
        assert result.user_id == user.id

    @pytest.mark.asyncio
    async def test_stage_failure_skips_remaining_stages_and_writes_nothing(self, session):
        calls = []

        async def _tracking(ctx):
            calls.append("after")
            return ctx

        config = LoadedConfig(user_id=None, data=AppConfigData())
        result = await run_pipeline(
            session,
            _definition(_produce_feeds, _remote_failure, _tracking),
            config=config,
        )

        assert result.status == PipelineStatus.FAILED
        assert result.error_type == "RemoteCallError"
        assert "503" in result.error_message
        assert result.snapshot_id is None
        assert calls == []
        assert session.exec(select(FeedlySnapshot)).all() == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_failed_result(self, session):
        async def _boom(ctx):
            raise KeyError("surprise")

        config = LoadedConfig(user_id=None, data=AppConfigData())
        result = await run_pipeline(session, _definition(_boom), config=config)

        assert result.status == PipelineStatus.FAILED
        assert result.error_type == "KeyError"
        assert session.exec(select(FeedlySnapshot)).all() == []

    @pytest.mark.asyncio
    async def test_missing_configuration_is_a_typed_failure(self, session):
        result = await run_pipeline(session, _definition(_produce_feeds))

        assert result.status == PipelineStatus.FAILED
        assert result.error_type == "IntegrationConfigError"
        assert result.error_message == "No app configuration stored"

    @pytest.mark.asyncio
    async def test_builder_failure_writes_nothing(self, session):
        config = LoadedConfig(user_id=None, data=AppConfigData())
        # No stage produces "feeds", so the builder fails
        result = await run_pipeline(session, _definition(), config=config)

        assert result.error_type == "PayloadShapeError"
        assert session.exec(select(FeedlySnapshot)).all() == []

    @pytest.mark.asyncio
    async def test_loads_config_from_database(self, session, user, store_config):
        store_config({"feedly": {"opml": "<opml/>"}}, user_id=user.id)

        result = await run_pipeline(session, _definition(_produce_feeds), user_id=user.id)

        assert result.succeeded
        assert result.user_id == user.id

    def test_result_to_dict_is_json_safe(self):
        from dashboard.integrations.pipeline import PipelineResult
        result = PipelineResult(
            integration=IntegrationName.MUSIC,
            status=PipelineStatus.FAILED,
            error_type="IntegrationConfigError",
            error_message="Missing LastFM key",
        )
        assert result.to_dict() == {
            "integration": "music",
            "status": "failed",
            "user_id": None,
            "snapshot_id": None,
            "error_type": "IntegrationConfigError",
            "error_message": "Missing LastFM key",
            "duration_ms": 0.0,
        }
