"""Posts component port definitions."""

from __future__ import annotations

from typing import Protocol

from .models import BlogPost


class PostSourcePort(Protocol):
    """Supplies every post in the content collection, drafts included."""

    def list_posts(self) -> list[BlogPost]:
        """Return all loaded posts."""
        ...
