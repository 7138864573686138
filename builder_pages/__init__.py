"""
Builder.io Page Builder

Bulk-fetches content models from the Builder.io GraphQL API and turns each
published entry into a page request (path, component, context).

Usage:
    # Build pages from config.json
    python -m builder_pages.main

    # Programmatic use
    from builder_pages.main import build_pages
    registry = PageRegistry()
    stats = asyncio.run(build_pages(config, registry, hooks=PageHooks(...)))

Architecture:
    PageCoordinator → RetryingFetchExecutor → GraphQLClient (one query per round)
            ↓
    FetchRoundState (offset + exhausted flag per model)
            ↓
    RecordPipeline (qualify → filter → resolve → map context)
            ↓
    PageRegistry.create_page
"""

from builder_pages.config import Config, ApiConfig, PagesConfig, RetryConfig, get_config, load_config
from builder_pages.client import GraphQLClient
from builder_pages.coordination import BuildStats, PageCoordinator, RetryingFetchExecutor
from builder_pages.cursors import FetchRoundState, ModelCursor
from builder_pages.pipeline import PageHooks, RecordPipeline
from builder_pages.registry import PageRegistry, PageRequest
from builder_pages.dev404 import override_dev_404

__version__ = "0.1.0"

__all__ = [
    # Config
    "Config",
    "ApiConfig",
    "PagesConfig",
    "RetryConfig",
    "get_config",
    "load_config",

    # Transport
    "GraphQLClient",

    # Coordination
    "BuildStats",
    "PageCoordinator",
    "RetryingFetchExecutor",

    # Cursors
    "FetchRoundState",
    "ModelCursor",

    # Pipeline
    "PageHooks",
    "RecordPipeline",

    # Registry
    "PageRegistry",
    "PageRequest",
    "override_dev_404",
]
