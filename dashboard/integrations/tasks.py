"""
Background tasks for integration runs.

Architecture:
- run_integration_task: Run one integration for a user (or the default configuration)
- run_all_integrations_task: Run every active integration (scheduled job)
- Task wrapper: Creates a fresh event loop and AsyncSession per task

Scheduling:
    Celery Beat triggers run_all_integrations_task every
    INTEGRATION_SYNC_INTERVAL_HOURS (see core/celery_app.py).
"""
import asyncio
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from dashboard.core.celery_app import celery_app
from dashboard.core.database import create_async_session_factory, create_task_engine
from dashboard.core.http_client import close_http_client
from dashboard.core.logging_config import log_error, log_info
from dashboard.integrations.service import run_all_integrations, run_integration
from dashboard.models.enums import IntegrationName


async def _run_with_session(task_func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
    async_engine = create_task_engine()
    try:
        async with create_async_session_factory(async_engine)() as session:
            return await task_func(session, *args, **kwargs)
    finally:
        # The shared client is bound to this task's event loop
        await close_http_client()
        await async_engine.dispose()


def _run_async(task_func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
    log_info(f"Starting background task: {task_func.__name__}")
    try:
        result = asyncio.run(_run_with_session(task_func, *args, **kwargs))
        log_info(f"Completed background task: {task_func.__name__}")
        return result
    except Exception as e:
        log_error(e, task_name=task_func.__name__)
        raise


async def _run_integration_task(
    session: AsyncSession,
    integration: IntegrationName,
    user_id: Optional[uuid.UUID] = None,
) -> Dict[str, Any]:
    result = await run_integration(session, integration, user_id=user_id)
    return result.to_dict()


async def _run_all_integrations_task(session: AsyncSession) -> List[Dict[str, Any]]:
    results = await run_all_integrations(session)
    return [result.to_dict() for result in results]


@celery_app.task(name="dashboard.integrations.tasks.run_integration_task")
def run_integration_task(integration: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    try:
        integration_enum = IntegrationName(integration)
        user_uuid = uuid.UUID(user_id) if user_id else None
    except ValueError as e:
        log_error(e, integration=integration, user_id=user_id)
        return None

    return _run_async(_run_integration_task, integration=integration_enum, user_id=user_uuid)


@celery_app.task(name="dashboard.integrations.tasks.run_all_integrations_task")
def run_all_integrations_task() -> List[Dict[str, Any]]:
    return _run_async(_run_all_integrations_task)
