"""Todo schemas for request/response validation."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class TodoCreate(BaseModel):
    """Schema for creating a todo."""
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class TodoUpdate(TodoCreate):
    """Schema for updating a todo.

    Mirrors a full replacement: omitted ``description`` becomes empty and
    omitted ``completed`` becomes false.
    """
    completed: Optional[bool] = None


class TodoResponse(BaseModel):
    """Schema for todo response."""
    id: int
    title: str
    description: str
    completed: bool
    owner_id: int
    username: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TodoListResponse(BaseModel):
    todos: List[TodoResponse]


class TodoMessageResponse(BaseModel):
    message: str
    todo: TodoResponse


class MessageResponse(BaseModel):
    message: str
