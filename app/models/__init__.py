# Models package
from app.models.user import User, UserRole
from app.models.todo import Todo
