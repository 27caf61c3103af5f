from typing import List, Protocol
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from . import crud
from .errors import TaskNotFoundError, TaskTableError
from .schemas import TaskRecord, TaskResponse, TaskUpdate


class TaskTable(Protocol):
    """The remote tasks table, scoped to a single owner per call"""

    async def query(self, owner_id: str) -> List[TaskResponse]: ...

    async def insert(self, record: TaskRecord) -> TaskResponse: ...

    async def update(self, owner_id: str, task_id: int, patch: TaskUpdate) -> None: ...

    async def delete(self, owner_id: str, task_id: int) -> None: ...


class SqlTaskTable:
    """TaskTable backed by the Postgres database through SQLAlchemy"""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def query(self, owner_id: str) -> List[TaskResponse]:
        try:
            async with self._session_factory() as db:
                tasks = await crud.query_tasks(db, owner_id)
                return [TaskResponse.model_validate(task) for task in tasks]
        except SQLAlchemyError as e:
            raise TaskTableError(f"Query failed: {e}") from e

    async def insert(self, record: TaskRecord) -> TaskResponse:
        try:
            async with self._session_factory() as db:
                task = await crud.insert_task(db, record)
                return TaskResponse.model_validate(task)
        except SQLAlchemyError as e:
            raise TaskTableError(f"Insert failed: {e}") from e

    async def update(self, owner_id: str, task_id: int, patch: TaskUpdate) -> None:
        try:
            async with self._session_factory() as db:
                found = await crud.update_task(db, owner_id, task_id, patch)
        except SQLAlchemyError as e:
            raise TaskTableError(f"Update of task {task_id} failed: {e}") from e
        if not found:
            raise TaskNotFoundError(task_id)

    async def delete(self, owner_id: str, task_id: int) -> None:
        try:
            async with self._session_factory() as db:
                found = await crud.delete_task(db, owner_id, task_id)
        except SQLAlchemyError as e:
            raise TaskTableError(f"Delete of task {task_id} failed: {e}") from e
        if not found:
            raise TaskNotFoundError(task_id)
