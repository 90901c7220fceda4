"""Todo routes.

Every route declares its operation through a permission dependency, so a
denied caller is rejected before the route body touches the database.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import (
    require_create,
    require_delete,
    require_read,
    require_toggle,
    require_update,
)
from app.database import get_db
from app.exceptions import Forbidden, NotFound
from app.policy import ReadScope, read_scope
from app.schemas.todo import (
    MessageResponse,
    TodoCreate,
    TodoListResponse,
    TodoMessageResponse,
    TodoUpdate,
)
from app.schemas.user import TokenData
from app.services import todos as todo_store

router = APIRouter(prefix="/todos", tags=["Todos"])


@router.get("", response_model=TodoListResponse)
async def list_todos(
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_read),
):
    """List todos visible to the caller's role."""
    scope = read_scope(current_user.role)
    if scope == ReadScope.ALL:
        todos = todo_store.list_todos(db)
    elif scope == ReadScope.OWN:
        todos = todo_store.list_todos(db, owner_id=current_user.id)
    else:
        raise Forbidden()
    return {"todos": todos}


@router.post("", response_model=TodoMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    todo_data: TodoCreate,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_create),
):
    """Create a todo owned by the caller (admin only)."""
    todo = todo_store.create_todo(db, todo_data, owner_id=current_user.id)
    return {"message": "Todo created successfully", "todo": todo}


@router.put("/{todo_id}", response_model=TodoMessageResponse)
async def update_todo(
    todo_id: int,
    todo_data: TodoUpdate,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_update),
):
    """Update a todo (admin or manager)."""
    todo = todo_store.get_todo(db, todo_id)
    if not todo:
        raise NotFound("Todo not found")
    todo = todo_store.update_todo(db, todo, todo_data)
    return {"message": "Todo updated successfully", "todo": todo}


@router.patch("/{todo_id}/toggle", response_model=TodoMessageResponse)
async def toggle_todo(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_toggle),
):
    """Flip the completion flag (admin or manager)."""
    todo = todo_store.toggle_todo(db, todo_id)
    if not todo:
        raise NotFound("Todo not found")
    return {"message": "Todo status updated", "todo": todo}


@router.delete("/{todo_id}", response_model=MessageResponse)
async def delete_todo(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_delete),
):
    """Delete a todo (admin or manager)."""
    if not todo_store.delete_todo(db, todo_id):
        raise NotFound("Todo not found")
    return {"message": "Todo deleted successfully"}
