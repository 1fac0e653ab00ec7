import asyncio
from typing import List, Optional

from revdash.lifecycle.shutdown_protocol import IShutdownHandler
from revdash.lifecycle.task_registry import TaskRegistry
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class AllTasksCancellationHandler(IShutdownHandler):
    """
    Cancels every tracked task still running, except the task executing
    this handler and any explicitly excluded tasks.
    """

    shutdown_priority = 30

    def __init__(self, exclude_tasks: Optional[List[asyncio.Task]] = None):
        self.exclude_tasks = exclude_tasks or []

    async def shutdown(self) -> None:
        current = asyncio.current_task()

        exclude = list(self.exclude_tasks)
        if current:
            exclude.append(current)

        tasks = TaskRegistry.instance().get_tasks_for_shutdown(exclude=exclude)
        if not tasks:
            log.debug("No tracked tasks left to cancel")
            return

        log.info(f"Cancelling {len(tasks)} background tasks", excluded=len(exclude))

        for task in tasks:
            if not task.done():
                task.cancel(msg="shutdown")
                log.debug(f"Cancelled task: {task.get_name()}")

        await asyncio.gather(*tasks, return_exceptions=True)
        log.info("All tracked tasks finished")
