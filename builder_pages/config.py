"""
Configuration loader for the Builder.io page builder.
Loads settings from config.json with fallback defaults.
"""

import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from builder_pages.queries import is_valid_name
from builder_pages.utils.exceptions import ConfigurationError
from builder_pages.utils.logging_config import get_logger

logger = get_logger("config")

BUILDER_GRAPHQL_BASE = "https://cdn.builder.io/api/v1/graphql"


@dataclass
class ApiConfig:
    """Content API configuration."""
    url: Optional[str] = None
    public_api_key: str = ""
    timeout: float = 30.0
    connect_timeout: float = 10.0
    use_get_for_queries: bool = True

    @property
    def endpoint(self) -> str:
        """GraphQL endpoint, derived from the public API key unless set explicitly."""
        if self.url:
            return self.url
        if not self.public_api_key:
            raise ConfigurationError("Either api.url or api.public_api_key is required")
        return f"{BUILDER_GRAPHQL_BASE}/{self.public_api_key}"


@dataclass
class RetryConfig:
    """Retry configuration for a round's fetch."""
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True


@dataclass
class PagesConfig:
    """
    Page generation options.

    Attributes:
        templates: Model name -> template component path. Every model listed
            here is fetched, and every path must exist on disk.
        limit: Page size requested per model per round
        field_name: Field all models are namespaced under in the schema
        type_name: Prefix given to the remote schema's types
        global_context: Merged into every generated page's context
        override_dev_404: Replace the development 404 page
        custom_404_dev: Component used for the development 404 page
        cache_seconds: Server-side cache hint sent with every model query
        stale_cache_seconds: Server-side stale cache hint
    """
    templates: Dict[str, str] = field(default_factory=dict)
    limit: int = 100
    field_name: str = "allBuilderModels"
    type_name: str = "builder"
    global_context: Dict[str, Any] = field(default_factory=dict)
    override_dev_404: bool = False
    custom_404_dev: Optional[str] = None
    cache_seconds: int = 2
    stale_cache_seconds: int = 2

    @property
    def models(self):
        """Configured model names, in configuration order."""
        return list(self.templates)

    def validate_names(self) -> None:
        """
        Check that field_name and every model name can appear in a query.

        Raises:
            ConfigurationError: naming the offending model or field
        """
        if not is_valid_name(self.field_name):
            raise ConfigurationError(
                "field_name must be a valid GraphQL name",
                field_name=self.field_name,
            )

        for model in self.templates:
            if not is_valid_name(model):
                raise ConfigurationError(
                    "Model names must be valid GraphQL names",
                    model=model,
                )

    def validate(self) -> None:
        """
        Check that the options can drive a page build.

        Raises:
            ConfigurationError: if the limit is not positive, a name cannot
                be queried, or a model's template does not exist on disk
        """
        if self.limit < 1:
            raise ConfigurationError(f"limit must be a positive integer, got {self.limit}")

        self.validate_names()

        for model, component in self.templates.items():
            if not component or not Path(component).exists():
                raise ConfigurationError(
                    "A valid template path is required for each model",
                    model=model,
                    template=component,
                )


@dataclass
class Config:
    """Root configuration object."""
    api: ApiConfig = field(default_factory=ApiConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    pages: PagesConfig = field(default_factory=PagesConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        return cls(
            api=ApiConfig(**data.get("api", {})),
            retry=RetryConfig(**data.get("retry", {})),
            pages=PagesConfig(**data.get("pages", {})),
        )

    def to_dict(self) -> dict:
        """Convert Config to dictionary."""
        return {
            "api": asdict(self.api),
            "retry": asdict(self.retry),
            "pages": asdict(self.pages),
        }


# Global config instance
_config: Optional[Config] = None


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to config.json. If None, looks in the working directory.

    Returns:
        Config instance with loaded or default values.
    """
    global _config

    if config_path is None:
        resolved_path = Path.cwd() / "config.json"
    else:
        resolved_path = Path(config_path)

    if resolved_path.exists():
        try:
            with open(resolved_path, "r") as f:
                data = json.load(f)
            _config = Config.from_dict(data)
            logger.info(f"Loaded configuration from {resolved_path}")
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Error loading {resolved_path}: {e}. Using defaults.")
            _config = Config()
    else:
        logger.info(f"{resolved_path} not found. Using defaults.")
        _config = Config()

    return _config


def get_config() -> Config:
    """
    Get the current configuration. Loads from file if not already loaded.

    Returns:
        Config instance.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[Config]) -> None:
    """
    Set a custom configuration (None resets to lazy loading).

    Args:
        config: Config instance to use.
    """
    global _config
    _config = config
