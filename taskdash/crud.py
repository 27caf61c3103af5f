from typing import List
from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from .models import Task
from .schemas import TaskRecord, TaskUpdate


async def query_tasks(db: AsyncSession, owner_id: str) -> List[Task]:
    """Get every task owned by owner_id, newest first"""
    query = (
        select(Task)
        .filter(Task.owner_id == owner_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def insert_task(db: AsyncSession, record: TaskRecord) -> Task:
    """Insert a new task and return the stored row"""
    db_task = Task(**record.model_dump(mode="json"))
    db.add(db_task)
    await db.commit()
    await db.refresh(db_task)
    return db_task


async def update_task(db: AsyncSession, owner_id: str, task_id: int, patch: TaskUpdate) -> bool:
    """Apply a partial update; False when no row of owner_id matches"""
    values = patch.model_dump(mode="json", exclude_none=True)
    if not values:
        return True

    result = await db.execute(
        update(Task)
        .where(Task.id == task_id, Task.owner_id == owner_id)
        .values(**values)
    )
    await db.commit()
    return result.rowcount > 0


async def delete_task(db: AsyncSession, owner_id: str, task_id: int) -> bool:
    """Delete a task; False when no row of owner_id matches"""
    result = await db.execute(
        delete(Task).where(Task.id == task_id, Task.owner_id == owner_id)
    )
    await db.commit()
    return result.rowcount > 0
