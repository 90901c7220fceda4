"""Todo store.

Thin wrappers around single-row ORM statements. Visibility is applied as a
query filter through ``owner_id``; callers decide the scope.
"""
from typing import List, Optional

from sqlalchemy import not_
from sqlalchemy.orm import Session, joinedload

from app.models.todo import Todo
from app.schemas.todo import TodoCreate, TodoUpdate


def _base_query(db: Session):
    return db.query(Todo).options(joinedload(Todo.owner))


def list_todos(db: Session, owner_id: Optional[int] = None) -> List[Todo]:
    """List todos newest first, restricted to ``owner_id`` when given."""
    query = _base_query(db)
    if owner_id is not None:
        query = query.filter(Todo.owner_id == owner_id)
    return query.order_by(Todo.created_at.desc(), Todo.id.desc()).all()


def get_todo(db: Session, todo_id: int) -> Optional[Todo]:
    return _base_query(db).filter(Todo.id == todo_id).first()


def create_todo(db: Session, todo_data: TodoCreate, owner_id: int) -> Todo:
    db_todo = Todo(
        title=todo_data.title,
        description=todo_data.description or "",
        owner_id=owner_id,
    )
    db.add(db_todo)
    db.commit()
    return get_todo(db, db_todo.id)


def update_todo(db: Session, todo: Todo, todo_data: TodoUpdate) -> Todo:
    """Replace title, description and completed on an existing todo."""
    todo.title = todo_data.title
    todo.description = todo_data.description or ""
    todo.completed = bool(todo_data.completed)
    db.commit()
    return get_todo(db, todo.id)


def toggle_todo(db: Session, todo_id: int) -> Optional[Todo]:
    """Flip ``completed`` in one UPDATE. Returns None if no row matched."""
    updated = (
        db.query(Todo)
        .filter(Todo.id == todo_id)
        .update({Todo.completed: not_(Todo.completed)}, synchronize_session=False)
    )
    db.commit()
    if not updated:
        return None
    return get_todo(db, todo_id)


def delete_todo(db: Session, todo_id: int) -> bool:
    deleted = (
        db.query(Todo)
        .filter(Todo.id == todo_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
