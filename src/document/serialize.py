"""Forest (de)serialization for the page content wire format."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError
from returns.pipeline import is_successful

from core import get_logger, ValidationError
from core.json import JSONParseError, loads_json, dumps_json
from core.validate import MAX_PAGE_SIZE, MAX_TREE_DEPTH, check_forest, validate_json_depth, validate_json_size
from .models import ComponentNode

logger = get_logger(__name__)


def serialize_forest(roots: list[ComponentNode]) -> list[dict[str, Any]]:
    """Root nodes as camelCase wire objects, recursively."""
    return [root.model_dump(by_alias=True, mode="json") for root in roots]


def _normalize(siblings: list[ComponentNode], parent_id: str | None) -> None:
    # Stored order decides position; ties keep array order
    siblings.sort(key=lambda node: node.order)
    for position, node in enumerate(siblings):
        node.parent_id = parent_id
        node.order = position
        _normalize(node.children, node.id)


def deserialize_forest(data: Any, max_depth: int = MAX_TREE_DEPTH) -> list[ComponentNode]:
    """
    Build a forest from wire objects.

    Parent ids are rewritten from containment and siblings are ordered by
    their stored ``order`` then renumbered from zero. Ids are kept.

    Args:
        data: List of root node objects
        max_depth: Maximum component nesting

    Returns:
        Root nodes

    Raises:
        ValidationError: On malformed nodes, duplicate ids or excessive depth
    """
    if not isinstance(data, list):
        raise ValidationError(f"Expected a list of components, got {type(data).__name__}")

    # Each component level is a dict plus its children list
    validate_json_depth(data, max_depth=max_depth * 2 + 1)

    try:
        roots = [ComponentNode.model_validate(item) for item in data]
    except PydanticValidationError as e:
        logger.warning("invalid_components", errors=e.error_count())
        raise ValidationError(f"Invalid component data: {e}") from e

    _normalize(roots, None)

    result = check_forest(roots)
    if not is_successful(result):
        problem = result.failure()
        logger.warning("invalid_forest", field=problem.field, value=problem.value)
        raise ValidationError(f"Invalid component tree: {problem.message} ({problem.value})")
    return roots


def dumps_page(roots: list[ComponentNode]) -> str:
    """Page content document ``{"components": [...]}`` as JSON text."""
    return dumps_json({"components": serialize_forest(roots)})


def loads_page(text: str, max_size: int = MAX_PAGE_SIZE, max_depth: int = MAX_TREE_DEPTH) -> list[ComponentNode]:
    """
    Parse page content JSON text into a forest.

    Raises:
        ValidationError: If the text is too large, not JSON, or not page content
    """
    validate_json_size(text, max_size, "Page content")
    try:
        content = loads_json(text)
    except JSONParseError as e:
        raise ValidationError(str(e)) from e

    if not isinstance(content, dict) or "components" not in content:
        raise ValidationError("Page content missing required 'components' field")

    return deserialize_forest(content["components"], max_depth=max_depth)
