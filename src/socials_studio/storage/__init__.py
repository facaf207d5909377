"""Persistence layer for Socials Studio."""

from .store import ContentStore, StoredModel, CASCADE_DELETE, CASCADE_SET_NULL

__all__ = [
    "ContentStore",
    "StoredModel",
    "CASCADE_DELETE",
    "CASCADE_SET_NULL",
]
