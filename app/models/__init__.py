"""
SQLModel table models.

Importing this package registers every table on ``SQLModel.metadata``.
"""

from app.models.review import ReviewBase, Reviews
from app.models.user import UserBase, Users

__all__ = [
    "ReviewBase",
    "Reviews",
    "UserBase",
    "Users",
]
