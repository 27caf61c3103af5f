from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from ..dashboard import DashboardRegistry
from ..deps import get_registry, require_api_session
from ..schemas import Session, TaskCreate, TaskPriority, TaskResponse, TaskStatus, TaskUpdate
from ..store import TaskStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


async def get_store(
    session: Session = Depends(require_api_session),
    registry: DashboardRegistry = Depends(get_registry),
) -> TaskStore:
    store = registry.get(session.owner_id).store
    if not store.loaded and not await store.load():
        raise HTTPException(status_code=502, detail="Could not fetch tasks")
    return store


@router.get("/", response_model=List[TaskResponse])
async def get_tasks(
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    session: Session = Depends(require_api_session),
    registry: DashboardRegistry = Depends(get_registry),
):
    """Fetch the caller's tasks, newest first, optionally filtered"""
    store = registry.get(session.owner_id).store
    if not await store.load():
        raise HTTPException(status_code=502, detail="Could not fetch tasks")
    return store.filter(status=status, priority=priority)


@router.post("/", response_model=TaskResponse, status_code=201)
async def create_task(task: TaskCreate, store: TaskStore = Depends(get_store)):
    """Create a new task"""
    if not task.title.strip():
        raise HTTPException(status_code=400, detail="Task title is required")
    created = await store.create(task.title, task.priority)
    if created is None:
        raise HTTPException(status_code=502, detail="Could not create task")
    return created


@router.patch("/{task_id}", response_model=Optional[TaskResponse])
async def update_task(
    task_id: int,
    task_update: TaskUpdate,
    store: TaskStore = Depends(get_store),
):
    """Change the status and/or priority of a task"""
    if task_update.status is None and task_update.priority is None:
        raise HTTPException(status_code=400, detail="Nothing to update")

    if not await store.update(task_id, task_update):
        raise HTTPException(status_code=502, detail="Could not update task")
    return store.find(task_id)


@router.delete("/{task_id}")
async def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    """Delete a specific task"""
    if not await store.delete(task_id):
        raise HTTPException(status_code=502, detail="Could not delete task")
    return {"message": "Task deleted successfully"}
