"""
Collaborator Protocols
Boundaries the document model talks to but does not implement.
"""

from typing import Protocol

from .models import ComponentNode


class PersistenceGateway(Protocol):
    """Saves and loads a page's component forest."""

    def save(self, page_id: str, components: list[ComponentNode]) -> bool:
        """Persist the forest; True on success."""
        ...

    def load(self, page_id: str) -> list[ComponentNode]:
        """Fetch the saved forest."""
        ...


class CodeGenerator(Protocol):
    """Turns a finalized forest into source text. Must not mutate its input."""

    def generate(self, components: list[ComponentNode]) -> str:
        ...


class PersistenceError(Exception):
    """Saved page could not be fetched or decoded."""

    pass
