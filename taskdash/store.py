import logging
from typing import List, Optional
from pydantic import ValidationError
from .errors import TaskTableError
from .schemas import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    TaskPriority,
    TaskRecord,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
)
from .table import TaskTable

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Local, newest-first copy of one owner's tasks.

    Every mutation goes to the remote table first; the local list is touched
    only after the table call succeeds. Failures are logged and leave the list
    exactly as it was. Nothing is retried.
    """

    def __init__(self, table: TaskTable, owner_id: str):
        self._table = table
        self.owner_id = owner_id
        self._tasks: List[TaskResponse] = []
        self.loaded = False

    @property
    def tasks(self) -> List[TaskResponse]:
        return list(self._tasks)

    def find(self, task_id: int) -> Optional[TaskResponse]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    async def load(self) -> bool:
        """Replace the local list with the owner's tasks from the table"""
        try:
            tasks = await self._table.query(self.owner_id)
        except TaskTableError as e:
            logger.error("Error fetching tasks owner=%s: %s", self.owner_id, e)
            return False

        self._tasks = list(tasks)
        self.loaded = True
        logger.debug("Loaded %d tasks owner=%s", len(self._tasks), self.owner_id)
        return True

    async def create(self, title: str, priority: TaskPriority = DEFAULT_PRIORITY) -> Optional[TaskResponse]:
        """Insert a pending task and prepend the stored row; None when nothing was added"""
        if not title or not title.strip():
            return None

        try:
            record = TaskRecord(
                owner_id=self.owner_id,
                title=title,
                priority=priority,
                status=DEFAULT_STATUS,
            )
        except ValidationError as e:
            logger.warning("Rejected task owner=%s: %s", self.owner_id, e.errors()[0]["msg"])
            return None

        try:
            task = await self._table.insert(record)
        except TaskTableError as e:
            logger.error("Error adding task owner=%s: %s", self.owner_id, e)
            return None

        self._tasks.insert(0, task)
        return task

    async def delete(self, task_id: int) -> bool:
        try:
            await self._table.delete(self.owner_id, task_id)
        except TaskTableError as e:
            logger.error("Error deleting task id=%s: %s", task_id, e)
            return False

        self._tasks = [task for task in self._tasks if task.id != task_id]
        return True

    async def update_status(self, task_id: int, status: TaskStatus) -> bool:
        return await self.update(task_id, TaskUpdate(status=status))

    async def update_priority(self, task_id: int, priority: TaskPriority) -> bool:
        return await self.update(task_id, TaskUpdate(priority=priority))

    async def update(self, task_id: int, patch: TaskUpdate) -> bool:
        """Send every changed field in one table call; all or nothing"""
        try:
            await self._table.update(self.owner_id, task_id, patch)
        except TaskTableError as e:
            logger.error("Error updating task id=%s: %s", task_id, e)
            return False

        changes = patch.model_dump(exclude_none=True)
        self._tasks = [
            task.model_copy(update=changes) if task.id == task_id else task
            for task in self._tasks
        ]
        return True

    def filter(
        self,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> List[TaskResponse]:
        """Filter the local list without touching the table"""
        return [
            task
            for task in self._tasks
            if (status is None or task.status == status)
            and (priority is None or task.priority == priority)
        ]
