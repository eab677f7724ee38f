"""CLI commands for coachbook."""

from .book import book
from .clients import clients
from .init import init
from .packages import packages
from .serve import serve
from .slots import slots
from .trainers import trainers

__all__ = [
    "book",
    "clients",
    "init",
    "packages",
    "serve",
    "slots",
    "trainers",
]
