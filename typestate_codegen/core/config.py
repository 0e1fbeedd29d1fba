"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


# Policies for ambiguous model states.
FIELD_COLLISION_POLICIES = {"drop", "error"}
UNNAMED_OPERATION_POLICIES = {"indexed", "error"}


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_file: Optional[str] = None

    # Prefix for addressing helper modules (`generics`, `util`, `client`)
    # from wherever the generated code lives.
    helper_module_prefix: str = "crate::"

    # Derives requested for every record type.
    derives: List[str] = field(
        default_factory=lambda: ["Debug", "Default", "Clone", "Deserialize", "Serialize"]
    )

    # Emit descriptions as doc comments
    add_comments: bool = True

    # Emit constructors, setters and completion impls along with the types
    emit_impls: bool = True

    # What to do when a field and a parameter share a name but not a type:
    # "drop" keeps the earlier declaration, "error" aborts generation.
    field_collision: str = "drop"

    # What to do when several paths exist and an operation has no ID:
    # "indexed" appends the path index to the method name, "error" aborts.
    unnamed_operations: str = "indexed"

    # Concrete type for `Any` in responses when no decoder overrides it.
    default_any_value: str = "serde_json::Value"

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


def check_policies(config: GeneratorConfig) -> None:
    """Raise ConfigError for policy values no generator understands."""
    if config.field_collision not in FIELD_COLLISION_POLICIES:
        raise ConfigError(
            f"Unknown field_collision policy {config.field_collision!r}, "
            f"expected one of {sorted(FIELD_COLLISION_POLICIES)}"
        )
    if config.unnamed_operations not in UNNAMED_OPERATION_POLICIES:
        raise ConfigError(
            f"Unknown unnamed_operations policy {config.unnamed_operations!r}, "
            f"expected one of {sorted(UNNAMED_OPERATION_POLICIES)}"
        )


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["rust"] = {
            "helper_module_prefix": "crate::",
            "add_comments": True,
            "emit_impls": True,
            "field_collision": "drop",
            "unnamed_operations": "indexed",
            "default_any_value": "serde_json::Value",
        }

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = self._configs.get(language, {}).copy()

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration from %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys end up in the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        config = GeneratorConfig(**config_args)
        check_policies(config)
        return config

    def list_languages(self) -> List[str]:
        """Get list of supported languages."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if config.field_collision not in FIELD_COLLISION_POLICIES:
            warnings.append(f"Invalid field_collision policy: {config.field_collision}")

        if config.unnamed_operations not in UNNAMED_OPERATION_POLICIES:
            warnings.append(
                f"Invalid unnamed_operations policy: {config.unnamed_operations}"
            )

        prefix = config.helper_module_prefix
        if prefix and not prefix.endswith("::"):
            warnings.append(f"helper_module_prefix should end with '::': {prefix}")

        if "Deserialize" not in config.derives or "Serialize" not in config.derives:
            warnings.append("derives should include Deserialize and Serialize")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "rust",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)
