from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"


DEFAULT_PRIORITY = TaskPriority.MEDIUM
DEFAULT_STATUS = TaskStatus.PENDING


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    priority: TaskPriority = DEFAULT_PRIORITY


class TaskRecord(BaseModel):
    """Row inserted into the tasks table"""
    owner_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    priority: TaskPriority = DEFAULT_PRIORITY
    status: TaskStatus = DEFAULT_STATUS


class TaskUpdate(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=False)

    id: int
    owner_id: str
    title: str
    priority: TaskPriority
    status: TaskStatus
    created_at: Optional[datetime] = None


# Auth related schemas
class Session(BaseModel):
    owner_id: str
    email: str = ""
    display_name: str = ""
    access_token: str


class AuthUser(BaseModel):
    id: str
    email: str = ""
    display_name: str = ""


class SignUpResult(BaseModel):
    user: Optional[AuthUser] = None
    session: Optional[Session] = None
    error: Optional[str] = None


class SignInResult(BaseModel):
    session: Optional[Session] = None
    error: Optional[str] = None
