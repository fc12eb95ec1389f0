"""Input validation with strong typing and Result-returning checks."""

from dataclasses import dataclass
from typing import Any, Iterable
from returns.result import Result, Success, Failure

from pydantic import BaseModel, Field, field_validator, ConfigDict


# Validation limits
MAX_PAGE_SIZE = 1024 * 1024  # 1MB
MAX_TREE_DEPTH = 32
MAX_TYPE_LENGTH = 128


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


class NodeUpdate(RequestValidator):
    """Fields an inspector edit may change on an existing node.

    Structure (id, children, parentId, order) is deliberately absent:
    it only changes through add/remove/move.
    """

    type: str | None = Field(default=None, min_length=1, max_length=MAX_TYPE_LENGTH)
    props: dict[str, Any] | None = None
    locked: bool | None = None
    hidden: bool | None = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str | None) -> str | None:
        """Ensure component type is non-empty after stripping."""
        if v is None:
            return v
        stripped = v.strip()
        if not stripped:
            raise ValueError("Component type cannot be empty")
        return stripped

    def changes(self) -> dict[str, Any]:
        """Only the fields the caller actually set to a value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


def validate_json_size(data: str, max_size: int = MAX_PAGE_SIZE, name: str = "JSON") -> None:
    """
    Validate JSON size before decoding.

    Args:
        data: JSON string to validate
        max_size: Maximum allowed size in bytes
        name: Name for error messages

    Raises:
        ValidationError: If size exceeds limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise ValidationError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = MAX_TREE_DEPTH, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent stack overflow.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)


def check_forest(roots: Iterable[Any]) -> Result[None, ValidationResult]:
    """
    Check the structural invariants of a component forest.

    Verifies that ids are unique, that every node's ``parent_id`` names
    the node whose children contain it (None for roots), and that
    sibling ``order`` values match array position. Works on any objects
    exposing ``id``, ``parent_id``, ``order`` and ``children``.

    Args:
        roots: Root-level nodes in display order

    Returns:
        Success(None) or Failure describing the first violation
    """
    seen: set[str] = set()
    # (siblings, expected parent id)
    stack: list[tuple[list[Any], str | None]] = [(list(roots), None)]

    while stack:
        siblings, parent_id = stack.pop()
        for position, node in enumerate(siblings):
            if node.id in seen:
                return Failure(ValidationResult("Duplicate component id", "id", node.id))
            seen.add(node.id)

            if node.parent_id != parent_id:
                return Failure(
                    ValidationResult(
                        f"Node {node.id} has parentId {node.parent_id!r}, expected {parent_id!r}",
                        "parentId",
                        node.parent_id,
                    )
                )

            if node.order != position:
                return Failure(
                    ValidationResult(
                        f"Node {node.id} has order {node.order}, expected {position}",
                        "order",
                        node.order,
                    )
                )

            if node.children:
                stack.append((list(node.children), node.id))

    return Success(None)
