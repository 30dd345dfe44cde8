# skillsync/api/__init__.py

from . import admin
from . import auth
from . import booking
from . import category
from . import review
from . import student
from . import tutor

__all__ = [
    "admin",
    "auth",
    "booking",
    "category",
    "review",
    "student",
    "tutor",
]
