"""Core module for the forkful application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
