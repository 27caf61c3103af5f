class TaskTableError(Exception):
    """A query or mutation against the tasks table failed"""


class TaskNotFoundError(TaskTableError):
    """No task with this id belongs to the owner"""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class LoginRequired(Exception):
    """Raised by the session gate when a protected page has no active session"""
