"""
Shared pytest fixtures for page builder tests.

Provides record factories, template files on disk, a fake content source
that serves paginated model data, and fast retry settings.
"""

import re
from typing import Any, Dict, List, Optional

import pytest

from builder_pages.config import Config, ApiConfig, PagesConfig, RetryConfig, set_config


SELECTION_PATTERN = re.compile(r"(\w+)\(limit: (\d+), offset: (\d+)")


def make_record(url: Optional[str], published: str = "published", **data: Any) -> Dict[str, Any]:
    """Build a record shaped like the content API's ``content`` field."""
    return {"content": {"data": {"url": url, **data}, "published": published}}


class FakeContentSource:
    """
    Serves model records the way the content API paginates them.

    Each call parses the model selections out of the query and returns the
    slice ``records[offset:offset + limit]`` for every model. Queued errors
    are raised (one per call) before any data is served.
    """

    def __init__(
        self,
        datasets: Dict[str, List[Dict[str, Any]]],
        field_name: str = "allBuilderModels",
        errors: Optional[List[Exception]] = None,
    ):
        self.datasets = datasets
        self.field_name = field_name
        self.errors = list(errors or [])
        self.queries: List[str] = []
        self.served: List[Dict[str, int]] = []

    @property
    def calls(self) -> int:
        return len(self.queries)

    async def query(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.queries.append(query)
        if self.errors:
            raise self.errors.pop(0)

        result = {}
        served = {}
        for model, limit, offset in SELECTION_PATTERN.findall(query):
            limit, offset = int(limit), int(offset)
            batch = self.datasets.get(model, [])[offset:offset + limit]
            result[model] = batch
            served[model] = len(batch)
        self.served.append(served)
        return {self.field_name: result}


# =============================================================================
# Record Fixtures
# =============================================================================

@pytest.fixture
def record_factory():
    """Factory for content records."""
    return make_record


@pytest.fixture
def content_source_factory():
    """Factory for FakeContentSource instances."""
    return FakeContentSource


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def templates(tmp_path) -> Dict[str, str]:
    """Template files for the "posts" and "pages" models."""
    template_dir = tmp_path / "templates"
    template_dir.mkdir()
    paths = {}
    for model in ("posts", "pages"):
        path = template_dir / f"{model}.js"
        path.write_text("export default () => null;\n")
        paths[model] = str(path)
    return paths


@pytest.fixture
def pages_options(templates) -> PagesConfig:
    """Page options for two models with a page size of 2."""
    return PagesConfig(templates=templates, limit=2)


@pytest.fixture
def fast_retry() -> RetryConfig:
    """Retry settings without backoff delays."""
    return RetryConfig(max_attempts=3, base_delay=0.0, max_delay=0.0, jitter=False)


@pytest.fixture
def test_config(pages_options, fast_retry) -> Config:
    """Full configuration pointing at a test endpoint."""
    return Config(
        api=ApiConfig(url="https://content.test/graphql", timeout=5.0, connect_timeout=2.0),
        retry=fast_retry,
        pages=pages_options,
    )


# =============================================================================
# Cleanup Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def cleanup_global_state():
    """Reset the global config after each test."""
    yield
    set_config(None)
