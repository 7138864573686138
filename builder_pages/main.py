"""
Main entry point for the Builder.io page builder

Fetches every model listed under pages.templates from the content API and
writes the generated pages to a JSON file.

Usage:
    # Build pages with config.json in the working directory
    python -m builder_pages.main

    # Explicit config, output and API key
    python -m builder_pages.main --config site.json --output build/pages.json --api-key KEY

    # Custom record hooks (a PageHooks instance)
    python -m builder_pages.main --hooks mysite.hooks:HOOKS

    # Print the first round's query and exit
    python -m builder_pages.main --show-query
"""

import argparse
import asyncio
import importlib
import sys
from typing import Optional

import httpx

from builder_pages.client import GraphQLClient
from builder_pages.config import Config, load_config
from builder_pages.coordination import BuildStats, PageCoordinator
from builder_pages.dev404 import install_dev_404_override
from builder_pages.pipeline import PageHooks
from builder_pages.queries import build_round_query
from builder_pages.registry import PageRegistry
from builder_pages.utils.exceptions import BuilderPagesError, ConfigurationError
from builder_pages.utils.logging_config import get_logger, setup_file_logging

logger = get_logger("main")


def load_hooks(spec: str) -> PageHooks:
    """
    Import a PageHooks instance from a ``module:attribute`` reference.

    Raises:
        ConfigurationError: if the reference is malformed or does not point
            at a PageHooks instance
    """
    module_name, _, attribute = spec.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(f"Hooks must be given as module:attribute, got {spec!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import hooks module {module_name!r}: {e}") from e

    hooks = getattr(module, attribute, None)
    if not isinstance(hooks, PageHooks):
        raise ConfigurationError(f"{spec} is not a PageHooks instance")
    return hooks


async def build_pages(
    config: Config,
    registry: PageRegistry,
    hooks: Optional[PageHooks] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BuildStats:
    """
    Fetch all models and create their pages in ``registry``.

    Args:
        config: Full configuration
        registry: Receives the pages
        hooks: Optional record pipeline hooks
        transport: Optional httpx transport (used by tests)

    Returns:
        BuildStats for the run
    """
    # Fail on bad templates before opening any connection
    config.pages.validate()
    install_dev_404_override(registry, config.pages)

    async with GraphQLClient(config.api, transport=transport) as client:
        coordinator = PageCoordinator(
            options=config.pages,
            registry=registry,
            query_fn=client.query,
            hooks=hooks,
            retry_config=config.retry,
        )
        return await coordinator.create_pages()


def run_pipeline(
    config: Config,
    output: Optional[str] = None,
    hooks: Optional[PageHooks] = None,
) -> BuildStats:
    """
    Build pages synchronously and optionally write them to ``output``.
    """
    registry = PageRegistry()
    stats = asyncio.run(build_pages(config, registry, hooks=hooks))
    if output:
        registry.dump(output)
    return stats


def main():
    """Main entry point with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Builder.io page builder - generate pages from content models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Build with config.json
    python -m builder_pages.main

    # Override the page size
    python -m builder_pages.main --limit 50 --output pages.json
        """
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.json (default: ./config.json)"
    )

    parser.add_argument(
        "--output",
        default="pages.json",
        help="Where to write generated pages (default: pages.json)"
    )

    parser.add_argument(
        "--api-key",
        default=None,
        help="Builder.io public API key (overrides config)"
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Records requested per model per round (overrides config)"
    )

    parser.add_argument(
        "--hooks",
        default=None,
        help="PageHooks instance as module:attribute"
    )

    parser.add_argument(
        "--show-query",
        action="store_true",
        help="Print the first round's query and exit"
    )

    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Enable file logging to logs/builder_pages.log"
    )

    args = parser.parse_args()

    if args.log_file:
        setup_file_logging()

    config = load_config(args.config)
    if args.api_key:
        config.api.public_api_key = args.api_key
    if args.limit is not None:
        config.pages.limit = args.limit

    try:
        if args.show_query:
            config.pages.validate_names()
            offsets = {model: 0 for model in config.pages.models}
            print(build_round_query(
                config.pages.field_name,
                offsets,
                config.pages.limit,
                cache_seconds=config.pages.cache_seconds,
                stale_cache_seconds=config.pages.stale_cache_seconds,
            ))
            return

        hooks = load_hooks(args.hooks) if args.hooks else None

        logger.info(f"Starting page build: models={config.pages.models}")
        stats = run_pipeline(config, output=args.output, hooks=hooks)

        print("\n=== Page Build Complete ===")
        for key, value in stats.to_dict().items():
            print(f"  {key}: {value}")

    except KeyboardInterrupt:
        print("\n\nInterrupted by user.")
        sys.exit(130)
    except BuilderPagesError as e:
        logger.error(f"Page build failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Page build failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
