"""
Development 404 page override.

Lets pages that were published after the site was built be previewed in
development without regenerating: the dev 404 page is swapped for a
component that can render content on the fly.
"""

from typing import Optional

from builder_pages.config import PagesConfig
from builder_pages.registry import PageRegistry, PageRequest
from builder_pages.utils.logging_config import get_logger

logger = get_logger("dev404")

DEV_404_PATH = "/dev-404-page/"
HOST_DEV_404_COMPONENT = "dev-404-page"


def dev_404_component(options: PagesConfig) -> Optional[str]:
    """Component for the dev 404 page: ``custom_404_dev``, else the first model's template."""
    if isinstance(options.custom_404_dev, str):
        return options.custom_404_dev
    if options.models:
        return options.templates[options.models[0]]
    return None


def override_dev_404(page: PageRequest, registry: PageRegistry, options: PagesConfig) -> bool:
    """
    Replace the development 404 page when configured to.

    A page already rendered by the override component is left alone, so
    the replacement's own creation does not trigger another one.

    Returns:
        True if the page was replaced
    """
    if page.path != DEV_404_PATH or not options.override_dev_404:
        return False

    component = dev_404_component(options)
    if component is None or page.component == component:
        return False

    registry.delete_page(page)
    registry.create_page(
        PageRequest(
            path=page.path,
            component=component,
            context={"noStaticContent": True, **page.context},
        )
    )
    logger.info(f"Dev 404 page now rendered by {component}")
    return True


def install_dev_404_override(registry: PageRegistry, options: PagesConfig) -> None:
    """
    Run the override on every page ``registry`` creates, and create the
    dev 404 page if the registry does not have one yet.
    """
    registry.on_create(lambda page, reg: override_dev_404(page, reg, options))

    if (
        options.override_dev_404
        and DEV_404_PATH not in registry
        and dev_404_component(options) is not None
    ):
        registry.create_page(PageRequest(DEV_404_PATH, HOST_DEV_404_COMPONENT))
        return

    existing = registry.get(DEV_404_PATH)
    if existing is not None:
        override_dev_404(existing, registry, options)
