"""
System endpoints - Task introspection and render metrics
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from revdash.api.dependencies import get_service_container
from revdash.lifecycle.task_registry import TaskRegistry
from revdash.services.service_container import ServiceContainer

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/tasks/summary")
async def get_task_summary() -> Dict[str, Any]:
    """
    High-level task summary: totals plus running tasks per category.
    """
    registry = TaskRegistry.instance()
    return {"summary": registry.summary(), **registry.summary_dict()}


@router.get("/tasks")
async def get_all_tasks() -> Dict[str, Any]:
    """Every tracked task with its status."""
    tasks = [r.to_dict() for r in TaskRegistry.instance().list_all()]
    return {"count": len(tasks), "tasks": tasks}


@router.get("/render")
async def get_render_metrics(services: ServiceContainer = Depends(get_service_container)) -> Dict[str, Any]:
    return services.render_loop.get_metrics()
