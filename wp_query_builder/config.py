"""
Configuration helpers for the WP Query builder.
Supports environment variables and YAML files for deployment configuration.
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigError


TAX_FIELDS = ("term_id", "slug", "name", "term_taxonomy_id")

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class BuilderConfig:
    """
    Settings shared by all builders.

    Attributes:
        meta_entity: Entity name marking a field as a post meta key
        tax_entity: Entity name marking a field as a taxonomy
        default_tax_field: Term field used when terms are not all integer IDs
        explicit_defaults: Emit operators even when WP_Query would assume them
    """
    meta_entity: str = "meta"
    tax_entity: str = "tax"
    default_tax_field: str = "slug"
    explicit_defaults: bool = False

    def __post_init__(self):
        if self.default_tax_field not in TAX_FIELDS:
            raise ConfigError(
                f"Invalid default_tax_field '{self.default_tax_field}', "
                f"expected one of: {', '.join(TAX_FIELDS)}"
            )
        if not self.meta_entity or not self.tax_entity:
            raise ConfigError("Entity names must not be empty")
        if self.meta_entity == self.tax_entity:
            raise ConfigError(f"meta_entity and tax_entity are both '{self.meta_entity}'")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BuilderConfig':
        """Create config from a dict, rejecting unknown keys."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Config:
    """
    Configuration helper that reads from environment variables or YAML.

    Environment variables:
        WP_QUERY_META_ENTITY: Entity name for meta fields (default: meta)
        WP_QUERY_TAX_ENTITY: Entity name for taxonomy fields (default: tax)
        WP_QUERY_TAX_FIELD: Default taxonomy term field (default: slug)
        WP_QUERY_EXPLICIT_DEFAULTS: Emit default operators (default: false)
    """

    @staticmethod
    def defaults() -> Dict[str, Any]:
        """Configuration with every setting at its default."""
        return BuilderConfig().to_dict()

    @staticmethod
    def from_env() -> Dict[str, Any]:
        """
        Create configuration from environment variables.

        Returns:
            Dict with configuration parameters for WpQueryArgsBuilder

        Example:
            from wp_query_builder import WpQueryArgsBuilder
            from wp_query_builder.config import Config

            config = Config.from_env()
            builder = WpQueryArgsBuilder(**config)
        """
        config = Config.defaults()

        meta_entity = os.getenv("WP_QUERY_META_ENTITY")
        tax_entity = os.getenv("WP_QUERY_TAX_ENTITY")
        tax_field = os.getenv("WP_QUERY_TAX_FIELD")
        explicit = os.getenv("WP_QUERY_EXPLICIT_DEFAULTS")

        if meta_entity:
            config["meta_entity"] = meta_entity
        if tax_entity:
            config["tax_entity"] = tax_entity
        if tax_field:
            config["default_tax_field"] = tax_field
        if explicit is not None:
            config["explicit_defaults"] = explicit.strip().lower() in _TRUE_VALUES

        # Validate before handing out
        BuilderConfig.from_dict(config)
        return config

    @staticmethod
    def from_file(config_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from a YAML file.

        Settings live under a top-level ``builder`` key; missing settings keep
        their defaults.

        Args:
            config_path: Path to the YAML file

        Returns:
            Dict with configuration parameters for WpQueryArgsBuilder

        Raises:
            ConfigError: If the file is missing, unparsable or has unknown keys
        """
        path = Path(config_path)
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        section = data.get("builder") or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'builder' section in {path} must be a mapping")

        config = Config.defaults()
        config.update(section)
        return BuilderConfig.from_dict(config).to_dict()
