"""
Page registry - receives generated page requests.

The registry is the boundary to whatever renders the site. This in-memory
implementation keys pages by path (re-creating a path replaces the earlier
page) and can export the result as JSON for the CLI.
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from builder_pages.utils.logging_config import get_logger

logger = get_logger("registry")


@dataclass
class PageRequest:
    """A page to be created: where it lives, what renders it, and its data."""
    path: str
    component: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


CreateHook = Callable[[PageRequest, "PageRegistry"], None]


class PageRegistry:
    """
    In-memory page registry.

    Callbacks registered with ``on_create`` run after every page creation,
    including pages created by other callbacks.
    """

    def __init__(self):
        self._pages: Dict[str, PageRequest] = {}
        self._create_hooks: List[CreateHook] = []
        self.created_count = 0
        self.deleted_count = 0

    def on_create(self, hook: CreateHook) -> None:
        """Register ``hook(page, registry)`` to run after each creation."""
        self._create_hooks.append(hook)

    def create_page(self, page: PageRequest) -> None:
        if page.path in self._pages:
            logger.debug(f"Replacing existing page at {page.path}")
        self._pages[page.path] = page
        self.created_count += 1

        for hook in self._create_hooks:
            hook(page, self)

    def delete_page(self, page: PageRequest) -> None:
        if self._pages.pop(page.path, None) is not None:
            self.deleted_count += 1

    def get(self, path: str) -> Optional[PageRequest]:
        return self._pages.get(path)

    @property
    def pages(self) -> List[PageRequest]:
        return list(self._pages.values())

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, path: str) -> bool:
        return path in self._pages

    def dump(self, output_path: Union[str, Path]) -> Path:
        """
        Write all pages to a JSON file.

        Returns:
            The path written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump([page.to_dict() for page in self.pages], f, indent=2, default=str)
        logger.info(f"Wrote {len(self)} pages to {output_path}")
        return output_path
