"""
Task Registry
-------------

Every long-lived asyncio task of the application (API server, render loop,
websocket pumps) is created through create_tracked_task() so that:

- failures are logged the moment a task dies
- the ShutdownCoordinator can watch critical categories
- /api/v1/system/tasks can show what is running
"""

from __future__ import annotations

import asyncio
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from pathlib import Path
from typing import Any, Dict, List, Optional

from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    API = auto()
    SIMULATION = auto()
    RENDER = auto()
    WEBSOCKET = auto()
    SYSTEM = auto()
    BACKGROUND = auto()
    GENERAL = auto()


@dataclass(frozen=True)
class TaskInfo:
    """Metadata captured when the task is registered."""
    id: int
    category: TaskCategory
    description: str
    created_at: str  # ISO UTC
    created_timestamp: float
    created_by: Optional[str] = None  # "module:function" of the caller


@dataclass
class TaskRecord:
    """Completion state of one tracked task."""
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None
    finished_at: Optional[str] = None

    @property
    def status(self) -> str:
        if not self.task.done():
            return "running"
        if self.cancelled:
            return "cancelled"
        if self.finished_with_error is not None:
            return "failed"
        return "completed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.info.id,
            "category": self.info.category.name,
            "description": self.info.description,
            "created_at": self.info.created_at,
            "created_by": self.info.created_by,
            "status": self.status,
            "error": str(self.finished_with_error) if self.finished_with_error else None,
        }


def _caller() -> Optional[str]:
    # [-1] is _caller, [-2] register, [-3] create_tracked_task or a direct caller
    for frame in reversed(traceback.extract_stack(limit=6)[:-2]):
        if not frame.filename.endswith("task_registry.py"):
            return f"{Path(frame.filename).stem}:{frame.name}"
    return None


class TaskRegistry:
    """Process-wide registry of tracked tasks (singleton via instance())."""

    _instance: Optional["TaskRegistry"] = None

    def __init__(self) -> None:
        self._records: Dict[asyncio.Task, TaskRecord] = {}
        self._next_id = 1

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget every record (tests start from an empty registry)"""
        cls._instance = None

    # -----------------------------
    # Registration
    # -----------------------------

    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
        created_by: Optional[str] = None,
    ) -> int:
        now = datetime.now(timezone.utc)
        info = TaskInfo(
            id=self._next_id,
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
            created_by=created_by or _caller(),
        )
        self._next_id += 1
        self._records[task] = TaskRecord(task=task, info=info)

        log.debug(f"[Task {info.id}] Registered ({category.name}) - {description}")
        task.add_done_callback(self._on_task_done)
        return info.id

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = self._records.get(task)
        if record is None:
            return

        record.finished_at = datetime.now(timezone.utc).isoformat()

        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
        elif task.exception() is not None:
            record.finished_with_error = task.exception()
            log.error(
                f"[Task {record.info.id}] FAILED: {record.finished_with_error!r}",
                description=record.info.description,
                category=record.info.category.name,
            )
        else:
            record.finished_return = task.result()
            log.debug(f"[Task {record.info.id}] Completed")

    def record_for(self, task: asyncio.Task) -> Optional[TaskRecord]:
        return self._records.get(task)

    # -----------------------------
    # Queries
    # -----------------------------

    def list_all(self) -> List[TaskRecord]:
        return sorted(self._records.values(), key=lambda r: r.info.id)

    def active(self) -> List[TaskRecord]:
        return [r for r in self.list_all() if not r.task.done()]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self.list_all() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self.list_all() if r.cancelled]

    def summary(self) -> str:
        counts = self.summary_dict()
        return (
            f"Tasks: total={counts['total']}, running={counts['running']}, "
            f"failed={counts['failed']}, cancelled={counts['cancelled']}"
        )

    def summary_dict(self) -> Dict[str, Any]:
        running = self.active()
        by_category: Dict[str, int] = {}
        for record in running:
            name = record.info.category.name
            by_category[name] = by_category.get(name, 0) + 1

        return {
            "total": len(self._records),
            "running": len(running),
            "failed": len(self.failed()),
            "cancelled": len(self.cancelled()),
            "running_by_category": by_category,
        }

    def get_tasks_for_shutdown(self, exclude: Optional[List[asyncio.Task]] = None) -> List[asyncio.Task]:
        """Still-running tasks minus the excluded ones, oldest first."""
        excluded = set(exclude or ())
        tasks = [r.task for r in self.active() if r.task not in excluded]
        log.debug(f"Shutdown: {len(tasks)} tasks to cancel")
        return tasks


def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> asyncio.Task:
    """Create and register a task in a single call."""
    loop = loop or asyncio.get_running_loop()
    task = loop.create_task(coro, name=description)
    TaskRegistry.instance().register(task=task, category=category, description=description)
    return task
