"""
Pipeline orchestration shared by every integration.

A pipeline is an ordered list of async stages. Each stage receives the
current PipelineContext and returns a new one; the context itself is never
mutated. After the last stage the definition's ``build_snapshot`` turns the
context into a snapshot row, which is persisted in a single write.

Failure handling lives in exactly one place, run_pipeline():
- the first exception ends the run and skips the remaining stages
- nothing is persisted for a failed run
- the failure is logged with the integration name
- the caller always gets a PipelineResult, never an exception
"""
import logging
import time
import uuid
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence

from sqlmodel import Session
from sqlmodel.ext.asyncio.session import AsyncSession

from dashboard.core.exceptions import PayloadShapeError, PipelineError
from dashboard.core.logging_config import log_integration_event
from dashboard.integrations.config_provider import LoadedConfig, load_config
from dashboard.integrations.persister import save_snapshot
from dashboard.models.enums import IntegrationName, PipelineStatus
from dashboard.models.snapshot import SnapshotBase
from dashboard.schemas.app_config import AppConfigData


@dataclass(frozen=True)
class PipelineContext:
    """
    Immutable state threaded through the stages of one run.

    ``data`` accumulates intermediate results (credentials, partial
    transforms, tokens). Use with_data() to derive the next context.
    """
    integration: IntegrationName
    config: AppConfigData
    user_id: Optional[uuid.UUID] = None
    data: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def with_data(self, **values: Any) -> "PipelineContext":
        """Return a copy whose ``data`` also contains ``values``."""
        return replace(self, data=MappingProxyType({**self.data, **values}))

    def get(self, key: str) -> Any:
        """
        Read an intermediate value a previous stage must have produced.

        Raises:
            PayloadShapeError: If the value is missing.
        """
        try:
            return self.data[key]
        except KeyError:
            raise PayloadShapeError(
                f"{self.integration.value} pipeline has no '{key}' value at this stage"
            ) from None


Stage = Callable[[PipelineContext], Awaitable[PipelineContext]]
SnapshotBuilder = Callable[[PipelineContext], SnapshotBase]


@dataclass(frozen=True)
class PipelineDefinition:
    """Name, ordered stages and snapshot builder of one integration."""
    name: IntegrationName
    stages: Sequence[Stage]
    build_snapshot: SnapshotBuilder


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of run_pipeline()."""
    integration: IntegrationName
    status: PipelineStatus
    user_id: Optional[uuid.UUID] = None
    snapshot_id: Optional[uuid.UUID] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == PipelineStatus.SUCCEEDED

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation (Celery results, CLI output)."""
        return {
            "integration": self.integration.value,
            "status": self.status.value,
            "user_id": str(self.user_id) if self.user_id else None,
            "snapshot_id": str(self.snapshot_id) if self.snapshot_id else None,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "duration_ms": self.duration_ms,
        }


async def run_pipeline(
    session: Session | AsyncSession,
    definition: PipelineDefinition,
    user_id: Optional[uuid.UUID] = None,
    config: Optional[LoadedConfig] = None,
) -> PipelineResult:
    """
    Run one integration end to end.

    Args:
        session: Sync or async database session used for config and persistence
        definition: The integration's pipeline definition
        user_id: Whose configuration to use; None selects the most recent one
        config: Already loaded configuration, skips the config lookup

    Returns:
        PipelineResult: ``succeeded`` with the new snapshot id, or ``failed``
        with the error type and message.
    """
    name = definition.name.value
    started = time.monotonic()
    owner = config.user_id if config else user_id

    def _elapsed() -> float:
        return round((time.monotonic() - started) * 1000, 2)

    log_integration_event(name, "Run started", user_id=owner)
    try:
        if config is None:
            config = await load_config(session, user_id)
            owner = config.user_id

        context = PipelineContext(integration=definition.name, config=config.data, user_id=owner)
        for stage in definition.stages:
            context = await stage(context)

        snapshot = definition.build_snapshot(context)
        snapshot.user_id = owner
        snapshot_id = await save_snapshot(session, snapshot)
    except PipelineError as exc:
        log_integration_event(
            name,
            f"Run failed: {exc}",
            level=logging.ERROR,
            user_id=owner,
            error_type=type(exc).__name__,
        )
        return PipelineResult(
            integration=definition.name,
            status=PipelineStatus.FAILED,
            user_id=owner,
            error_type=type(exc).__name__,
            error_message=str(exc),
            duration_ms=_elapsed(),
        )
    except Exception as exc:
        log_integration_event(
            name,
            f"Run failed with unexpected error: {exc!r}",
            level=logging.ERROR,
            exc_info=True,
            user_id=owner,
        )
        return PipelineResult(
            integration=definition.name,
            status=PipelineStatus.FAILED,
            user_id=owner,
            error_type=type(exc).__name__,
            error_message=str(exc) or type(exc).__name__,
            duration_ms=_elapsed(),
        )

    result = PipelineResult(
        integration=definition.name,
        status=PipelineStatus.SUCCEEDED,
        user_id=owner,
        snapshot_id=snapshot_id,
        duration_ms=_elapsed(),
    )
    log_integration_event(
        name,
        "Run succeeded",
        user_id=owner,
        snapshot_id=snapshot_id,
        duration_ms=result.duration_ms,
    )
    return result
