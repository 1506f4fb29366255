"""
Integration service layer and pipeline registry.

Architecture:
- PIPELINE_REGISTRY: Maps IntegrationName → pipeline definition
- run_integration(): One pipeline for one user (or the default configuration)
- run_all_integrations(): Every active, configured integration for every stored configuration

Extension Points:
- Add new integrations to PIPELINE_REGISTRY
- No changes to the orchestrator are required for new integrations
"""
import uuid
from typing import List, Optional

from sqlmodel import Session
from sqlmodel.ext.asyncio.session import AsyncSession

from dashboard.core.logging_config import log_info
from dashboard.integrations import feedly, goodreads, music, trakt
from dashboard.integrations.config_provider import list_configs
from dashboard.integrations.pipeline import PipelineDefinition, PipelineResult, run_pipeline
from dashboard.models.enums import IntegrationName

# ================================================================================
# PIPELINE REGISTRY
# ================================================================================

PIPELINE_REGISTRY = {
    IntegrationName.MUSIC: music.PIPELINE,
    IntegrationName.TRAKT: trakt.PIPELINE,
    IntegrationName.FEEDLY: feedly.PIPELINE,
    IntegrationName.GOODREADS: goodreads.PIPELINE,
}


def get_pipeline(name: IntegrationName | str) -> PipelineDefinition:
    """
    Get the pipeline definition for an integration name.
    """
    try:
        integration = IntegrationName(name)
    except ValueError:
        integration = None
    pipeline = PIPELINE_REGISTRY.get(integration)
    if not pipeline:
        raise ValueError(
            f"Integration '{name}' is not supported. "
            f"Supported integrations: {[n.value for n in PIPELINE_REGISTRY]}"
        )
    return pipeline


# ================================================================================
# SERVICE FUNCTIONS
# ================================================================================

async def run_integration(
    session: Session | AsyncSession,
    name: IntegrationName | str,
    user_id: Optional[uuid.UUID] = None,
) -> PipelineResult:
    """
    Run a single integration pipeline.

    Raises:
        ValueError: If ``name`` is not a registered integration. Pipeline
            failures are reported in the returned result instead.
    """
    return await run_pipeline(session, get_pipeline(name), user_id=user_id)


async def run_all_integrations(session: Session | AsyncSession) -> List[PipelineResult]:
    """
    Run every configured integration for every stored configuration.

    Sections switched off with ``active: false`` and integrations without a
    section are skipped. Runs are sequential; one failure does not stop the
    batch.
    """
    results: List[PipelineResult] = []
    configs = await list_configs(session)
    log_info("Starting integration batch", configurations=len(configs))

    for config in configs:
        for name, pipeline in PIPELINE_REGISTRY.items():
            section = config.data.section(name)
            if section is None or not section.active:
                continue
            results.append(await run_pipeline(session, pipeline, config=config))

    failed = sum(1 for r in results if not r.succeeded)
    log_info(
        "Completed integration batch",
        runs=len(results),
        succeeded=len(results) - failed,
        failed=failed,
    )
    return results
