"""
Integrations that poll third-party services and store dashboard snapshots.

Every integration is the same short pipeline:

    config -> fetch -> transform -> (optional secondary fetch/transform) -> persist

Architecture:
- pipeline.py: PipelineContext, PipelineDefinition, PipelineResult and run_pipeline()
- config_provider.py: Loads and decrypts the stored settings document
- fetcher.py: Single-attempt HTTP calls over the shared httpx client
- payloads.py: Pydantic schemas for third-party responses
- transforms.py: Pure reshaping helpers (top-N, rating filter, image pick, OPML, Goodreads XML)
- persister.py: Inserts one snapshot row per successful run
- {integration}.py: Stages for music, trakt, feedly and goodreads
- service.py: PIPELINE_REGISTRY plus run_integration() / run_all_integrations()
- tasks.py: Celery tasks for scheduled and manual runs

Design Principles:
- Pipelines share no in-memory state
- Stages return a new context instead of mutating the previous one
- Any failure ends the run; nothing partial is written
- run_pipeline() never raises, callers inspect the PipelineResult

Extension Points:
- Add a value to IntegrationName and a snapshot table in dashboard/models/snapshot.py
- Write a {integration}.py module exposing a PIPELINE definition
- Register it in PIPELINE_REGISTRY in service.py
"""

from dashboard.integrations.pipeline import (
    PipelineContext,
    PipelineDefinition,
    PipelineResult,
    run_pipeline,
)

__all__ = [
    "PipelineContext",
    "PipelineDefinition",
    "PipelineResult",
    "run_pipeline",
]
