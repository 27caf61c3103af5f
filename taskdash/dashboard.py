from collections import OrderedDict
from typing import Optional
from .schemas import DEFAULT_PRIORITY, TaskPriority, TaskResponse, TaskStatus
from .store import TaskStore
from .table import TaskTable

PRIORITY_COLORS = {
    TaskPriority.HIGH: "red",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.LOW: "green",
}

STATUS_COLORS = {
    TaskStatus.DONE: "green",
    TaskStatus.IN_PROGRESS: "blue",
    TaskStatus.PENDING: "gray",
}


def priority_color(priority: TaskPriority) -> str:
    return PRIORITY_COLORS[TaskPriority(priority)]


def status_color(status: TaskStatus) -> str:
    return STATUS_COLORS[TaskStatus(status)]


class TaskForm:
    """Pending new-task input: title text and priority selection"""

    def __init__(self):
        self.title = ""
        self.priority = DEFAULT_PRIORITY

    def reset(self):
        self.title = ""
        self.priority = DEFAULT_PRIORITY

    async def submit(
        self,
        store: TaskStore,
        title: Optional[str] = None,
        priority: Optional[TaskPriority] = None,
    ) -> Optional[TaskResponse]:
        """Create a task from the current input; the input is kept unless it succeeds"""
        if title is not None:
            self.title = title
        if priority is not None:
            self.priority = priority

        if not self.title.strip():
            return None

        task = await store.create(self.title, self.priority)
        if task is not None:
            self.reset()
        return task


class TaskRowController:
    """Controls of a single task row; every change goes straight to the store"""

    def __init__(self, store: TaskStore, task_id: int):
        self.store = store
        self.task_id = task_id

    async def set_status(self, status: TaskStatus) -> bool:
        return await self.store.update_status(self.task_id, status)

    async def set_priority(self, priority: TaskPriority) -> bool:
        return await self.store.update_priority(self.task_id, priority)

    async def delete(self) -> bool:
        return await self.store.delete(self.task_id)


class DashboardState:
    def __init__(self, store: TaskStore):
        self.store = store
        self.form = TaskForm()
        # set after a mutation so the redirected page shows the local list as is
        self.reconciled = False

    def row(self, task_id: int) -> TaskRowController:
        return TaskRowController(self.store, task_id)


class DashboardRegistry:
    """
    One DashboardState per signed-in owner.

    Entries go away on logout; beyond max_states the least recently used
    owner is evicted, so expired sessions don't pile up.
    """

    def __init__(self, table: TaskTable, max_states: int = 1000):
        self.table = table
        self.max_states = max_states
        self._states: "OrderedDict[str, DashboardState]" = OrderedDict()

    def get(self, owner_id: str) -> DashboardState:
        state = self._states.get(owner_id)
        if state is None:
            state = DashboardState(TaskStore(self.table, owner_id))
            self._states[owner_id] = state
            while len(self._states) > self.max_states:
                self._states.popitem(last=False)
        else:
            self._states.move_to_end(owner_id)
        return state

    def drop(self, owner_id: str) -> None:
        self._states.pop(owner_id, None)

    def __contains__(self, owner_id: str) -> bool:
        return owner_id in self._states

    def __len__(self):
        return len(self._states)
