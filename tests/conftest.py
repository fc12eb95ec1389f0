"""Pytest configuration and fixtures."""

import os
import pytest

import respx

from core import SequentialGenerator, get_settings
from document import BuilderStore, ComponentNode


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['BUILDER_BACKEND_URL'] = 'http://localhost:3000'
    os.environ['BUILDER_LOG_LEVEL'] = 'DEBUG'
    os.environ['BUILDER_HISTORY_MAX_SIZE'] = '50'


# ============================================================================
# Fakes
# ============================================================================

class InMemoryGateway:
    """Persistence gateway keeping saved pages in a dict."""

    def __init__(self, fail: bool = False):
        self.pages: dict[str, list[ComponentNode]] = {}
        self.fail = fail
        self.save_calls = 0

    def save(self, page_id, components):
        self.save_calls += 1
        if self.fail:
            return False
        self.pages[page_id] = [node.model_copy(deep=True) for node in components]
        return True

    def load(self, page_id):
        return [node.model_copy(deep=True) for node in self.pages.get(page_id, [])]


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def ids():
    """Deterministic id generator."""
    return SequentialGenerator()


@pytest.fixture
def gateway():
    """In-memory persistence gateway."""
    return InMemoryGateway()


@pytest.fixture
def store(gateway, ids):
    """Empty store with an open (blank) page."""
    s = BuilderStore(gateway=gateway, ids=ids, max_history=50)
    s.open_page("page-1", "/pages/home.astro", [])
    return s


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def sample_components():
    """Wire-format page: hero section with heading and button, footer."""
    return [
        {
            "id": "hero",
            "type": "section",
            "props": {"paddingY": "lg", "background": "dark"},
            "parentId": None,
            "order": 0,
            "children": [
                {
                    "id": "title",
                    "type": "heading",
                    "props": {"text": "Welcome", "level": 1},
                    "parentId": "hero",
                    "order": 0,
                    "children": [],
                },
                {
                    "id": "cta",
                    "type": "button",
                    "props": {"text": "Get started", "variant": "primary"},
                    "parentId": "hero",
                    "order": 1,
                    "children": [],
                    "locked": True,
                },
            ],
        },
        {
            "id": "footer",
            "type": "footer",
            "props": {"copyright": "2026"},
            "parentId": None,
            "order": 1,
            "children": [],
        },
    ]


@pytest.fixture
def page_store(gateway, ids, sample_components):
    """Store with the sample page open."""
    s = BuilderStore(gateway=gateway, ids=ids, max_history=50)
    s.open_page("page-1", "/pages/home.astro", sample_components)
    return s


# ============================================================================
# HTTP/Network Fixtures
# ============================================================================

@pytest.fixture
def mock_httpx_client():
    """Mock httpx client."""
    with respx.mock:
        yield respx


@pytest.fixture
def mock_page_response(sample_components):
    """Pages API response for a single page."""
    return {
        "success": True,
        "page": {
            "id": "page-1",
            "title": "Home",
            "slug": "home",
            "content": {"components": sample_components},
        },
    }
