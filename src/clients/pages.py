"""Pages API Client - persistence gateway for builder pages."""

import httpx
import pybreaker

from core import get_logger, ValidationError
from core.json import JSONParseError, dumps_json, loads_json
from core.validate import MAX_PAGE_SIZE, MAX_TREE_DEPTH, validate_json_size
from document.models import ComponentNode
from document.serialize import deserialize_forest, serialize_forest
from document.types import PersistenceError

logger = get_logger(__name__)


class PagesClient:
    """
    Saves and loads page component trees over HTTP with circuit breaker protection.

    Save failures are reported as False so autosave can retry on its next
    tick; load failures raise PersistenceError because there is nothing to
    open.
    """

    def __init__(
        self,
        backend_url: str = "http://localhost:3000",
        timeout: float = 5.0,
        max_page_size: int = MAX_PAGE_SIZE,
        max_tree_depth: int = MAX_TREE_DEPTH,
    ) -> None:
        """
        Initialize pages client with circuit breaker.

        Args:
            backend_url: Base URL of the web app exposing /api/pages
            timeout: Request timeout in seconds
            max_page_size: Largest page response accepted on load (bytes)
            max_tree_depth: Deepest component nesting accepted on load
        """
        self.backend_url = backend_url.rstrip("/")
        self.timeout = timeout
        self.max_page_size = max_page_size
        self.max_tree_depth = max_tree_depth
        self._client = httpx.Client(timeout=timeout)

        class BreakerListener(pybreaker.CircuitBreakerListener):
            """Listener for circuit breaker state changes."""

            def state_change(self, cb, old_state, new_state):
                """Called when circuit breaker state changes."""
                logger.warning(
                    "breaker_state_change",
                    breaker=cb.name,
                    from_state=str(old_state),
                    to_state=str(new_state),
                )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=5,
            reset_timeout=30,
            name="pages-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", url=self.backend_url)

    def save(self, page_id: str, components: list[ComponentNode]) -> bool:
        """
        Save a page's component forest.

        Args:
            page_id: Page to update
            components: Root nodes

        Returns:
            True if the backend accepted the page
        """
        try:
            url = f"{self.backend_url}/api/pages"
            body = dumps_json({"id": page_id, "content": {"components": serialize_forest(components)}})

            def _make_request():
                response = self._client.patch(url, content=body, headers={"Content-Type": "application/json"})
                response.raise_for_status()
                return response

            response = self._breaker.call(_make_request)

            rejection = _rejection(response)
            if rejection is not None:
                logger.error("save_rejected", page_id=page_id, error=rejection.get("error"))
                return False

            logger.info("save_success", page_id=page_id)
            return True

        except pybreaker.CircuitBreakerError:
            logger.error("save_failed", page_id=page_id, error="Circuit breaker open")
            return False
        except httpx.HTTPError as e:
            logger.warning("save_http_error", page_id=page_id, error=str(e))
            return False

    def load(self, page_id: str) -> list[ComponentNode]:
        """
        Load a page's component forest.

        Args:
            page_id: Page to fetch

        Returns:
            Root nodes

        Raises:
            PersistenceError: If the page is unavailable or its content is malformed
        """
        try:
            url = f"{self.backend_url}/api/pages/{page_id}"

            def _make_request():
                response = self._client.get(url)
                response.raise_for_status()
                return response

            response = self._breaker.call(_make_request)
            validate_json_size(response.text, self.max_page_size, "Page response")
            data = loads_json(response.content)

        except pybreaker.CircuitBreakerError as e:
            logger.error("load_failed", page_id=page_id, error="Circuit breaker open")
            raise PersistenceError("Pages API unavailable (circuit open)") from e
        except httpx.HTTPError as e:
            logger.warning("load_http_error", page_id=page_id, error=str(e))
            raise PersistenceError(f"Failed to load page {page_id}: {e}") from e
        except (ValidationError, JSONParseError) as e:
            logger.warning("load_invalid_response", page_id=page_id, error=str(e))
            raise PersistenceError(f"Invalid response for page {page_id}") from e

        if not isinstance(data, dict) or not data.get("success", False):
            error = data.get("error") if isinstance(data, dict) else None
            logger.error("load_rejected", page_id=page_id, error=error)
            raise PersistenceError(f"Page {page_id} could not be loaded: {error or 'invalid response'}")

        content = (data.get("page") or {}).get("content") or {}
        try:
            components = deserialize_forest(content.get("components", []), max_depth=self.max_tree_depth)
        except ValidationError as e:
            logger.error("load_invalid_content", page_id=page_id, error=str(e))
            raise PersistenceError(f"Page {page_id} has invalid content: {e}") from e

        logger.info("load_success", page_id=page_id, roots=len(components))
        return components

    def health_check(self) -> bool:
        """
        Check if the pages API is reachable (bypasses circuit breaker).

        Returns:
            True if backend is healthy
        """
        try:
            response = self._client.get(f"{self.backend_url}/api/health", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def close(self) -> None:
        """Close HTTP client"""
        self._client.close()

    def __enter__(self) -> "PagesClient":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _rejection(response: httpx.Response) -> dict | None:
    """The body of an explicit ``{"success": false}`` reply, else None.

    A 2xx with an empty or non-JSON body (204 No Content) is an accepted save.
    """
    if not response.content:
        return None
    try:
        data = loads_json(response.content)
    except JSONParseError:
        return None
    if isinstance(data, dict) and data.get("success") is False:
        return data
    return None
