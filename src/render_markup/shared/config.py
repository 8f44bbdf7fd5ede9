"""Configuration classes for markup compilation.

This module provides configuration objects for dispatch, tree transformation,
fragment recovery and logging. Component configurations validate themselves
in ``__post_init__``; ``CompilerConfig`` aggregates them into one immutable
object that can be overridden, serialized and restored.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

_COMPONENT_FIELDS = ("dispatch", "transform", "recovery", "global_")


@dataclass
class DispatchConfig:
    """Configuration for tag dispatch."""

    host_namespace: str = "drupal"
    default_namespace: str = "global"
    component_suffix: str = "_component"
    active_theme: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate dispatch configuration."""
        if not self.host_namespace:
            raise ValueError("host_namespace cannot be empty")
        if not self.default_namespace:
            raise ValueError("default_namespace cannot be empty")
        if self.host_namespace == self.default_namespace:
            raise ValueError("host_namespace must differ from default_namespace")
        if not self.component_suffix:
            raise ValueError("component_suffix cannot be empty")
        if self.active_theme is not None and not self.active_theme:
            raise ValueError("active_theme must be a non-empty string or None")


@dataclass
class TransformConfig:
    """Configuration for the tree transformer."""

    strict: bool = True
    deep_embed_attribute: str = "data-deep-embed"
    max_depth: int = 200
    direct_attributes: Tuple[str, ...] = ("id", "enctype", "lang")
    event_attribute_marker: str = "on"

    def __post_init__(self) -> None:
        """Validate transform configuration."""
        if not self.deep_embed_attribute:
            raise ValueError("deep_embed_attribute cannot be empty")
        if self.deep_embed_attribute.startswith("#"):
            raise ValueError("deep_embed_attribute cannot start with '#'")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        if not self.event_attribute_marker:
            raise ValueError("event_attribute_marker cannot be empty")
        self.direct_attributes = tuple(self.direct_attributes)


@dataclass
class RecoveryConfig:
    """Configuration for multi-root fragment recovery."""

    enable_missing_root_recovery: bool = True
    wrapper_tag: str = "div"
    wrapper_marker: str = "data-render-markup-wrapper"

    def __post_init__(self) -> None:
        """Validate recovery configuration."""
        if not self.wrapper_tag or ":" in self.wrapper_tag:
            raise ValueError("wrapper_tag must be a plain element name")
        if not self.wrapper_marker:
            raise ValueError("wrapper_marker cannot be empty")


@dataclass
class GlobalConfig:
    """Global settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CompilerConfig:
    """Complete configuration of a markup compiler.

    Immutable, so one instance can be shared by every compilation that uses
    the same compiler.
    """

    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    transform: TransformConfig = field(default_factory=TransformConfig)
    recovery: RecoveryConfig = field(default_factory=RecoveryConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete compiler configuration."""
        try:
            self.dispatch.__post_init__()
            self.transform.__post_init__()
            self.recovery.__post_init__()
            self.global_.__post_init__()
            self._validate_cross_component_dependencies()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def _validate_cross_component_dependencies(self) -> None:
        """Validate dependencies between component configurations."""
        if self.recovery.wrapper_marker == self.transform.deep_embed_attribute:
            raise ConfigValidationError(
                "wrapper_marker and deep_embed_attribute must differ",
                field_name="recovery.wrapper_marker",
                suggestions=["Rename recovery.wrapper_marker"],
            )

    @property
    def strict(self) -> bool:
        """Default strict-mode value for top-level calls."""
        return self.transform.strict

    def override(self, **kwargs: Any) -> "CompilerConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; ``component__field`` addresses a
                field of a component configuration

        Returns:
            New CompilerConfig instance with overrides applied

        Example:
            >>> config = CompilerConfig().override(
            ...     transform__strict=False,
            ...     dispatch__active_theme="olivero",
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENT_FIELDS:
                    raise ConfigValidationError(
                        f"Unknown configuration component {component!r}",
                        field_name=key,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in _COMPONENT_FIELDS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides and isinstance(nested_overrides[field_name], dict):
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=field_name) from e
            else:
                new_fields[field_name] = nested_overrides.get(field_name, current_config)

        for key, value in nested_overrides.items():
            if key not in _COMPONENT_FIELDS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilerConfig":
        """Create configuration from dictionary.

        Args:
            data: Dictionary as produced by ``to_dict``

        Returns:
            CompilerConfig instance created from dictionary
        """
        component_classes = {
            "dispatch": DispatchConfig,
            "transform": TransformConfig,
            "recovery": RecoveryConfig,
            "global_": GlobalConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_classes:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Section {key!r} must be a mapping", field_name=key
                    )
                try:
                    values[key] = component_classes[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("name", "description"):
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key {key!r}", field_name=key
                )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "CompilerConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def strict_mode(cls) -> "CompilerConfig":
        """Preset where unknown custom tags are fatal errors."""
        return cls(
            transform=TransformConfig(strict=True),
            name="strict",
            description="Unresolved custom tags abort compilation",
        )

    @classmethod
    def lenient(cls) -> "CompilerConfig":
        """Preset where unknown custom tags are rendered literally."""
        return cls(
            transform=TransformConfig(strict=False),
            name="lenient",
            description="Unresolved custom tags render as generic HTML tags",
        )
