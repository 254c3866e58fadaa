"""
shapedarray Config - Runtime Configuration System

Provides dataclass-based configuration for array creation and element
access. Values can be set globally, overridden per thread within a context,
or seeded from environment variables at import time:

    SHAPEDARRAY_CHECK_BOUNDS=1        enable per-access bounds checking
    SHAPEDARRAY_DEFAULT_DTYPE=float32 element type of create() and friends
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from ._dtypes import DType, DTypeLike, normalize_dtype

logger = logging.getLogger("shapedarray.config")


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class IndexingConfig:
    """Configuration for element access."""
    check_bounds: bool = False     # Validate every index passed to get/set


@dataclass
class CreationConfig:
    """Configuration for array creation."""
    default_dtype: DType = DType.float64


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def _default_indexing() -> IndexingConfig:
    return IndexingConfig(check_bounds=_env_flag('SHAPEDARRAY_CHECK_BOUNDS'))


def _default_creation() -> CreationConfig:
    name = os.environ.get('SHAPEDARRAY_DEFAULT_DTYPE')
    if name:
        return CreationConfig(default_dtype=normalize_dtype(name))
    return CreationConfig()


# =============================================================================
# Global Configuration Manager
# =============================================================================

class ArrayConfig:
    """
    Global configuration manager for shapedarray.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        shapedarray.config.indexing = IndexingConfig(check_bounds=True)

        # Local configuration (context manager)
        with shapedarray.config.local(indexing=IndexingConfig(check_bounds=True)):
            arr.get(7, 2)   # checked here
        # Back to global config
    """

    def __init__(self):
        self._global_indexing = _default_indexing()
        self._global_creation = _default_creation()

        # Thread-local storage for context overrides
        self._local = threading.local()

        # Callbacks for config changes
        self._callbacks: Dict[str, List[Callable]] = {
            "indexing": [],
            "creation": [],
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def indexing(self) -> IndexingConfig:
        """Get indexing configuration."""
        local = getattr(self._local, "indexing", None)
        if local is not None:
            return local
        return self._global_indexing

    @indexing.setter
    def indexing(self, value: IndexingConfig):
        """Set global indexing configuration."""
        self._global_indexing = value
        self._notify("indexing", value)

    @property
    def creation(self) -> CreationConfig:
        """Get creation configuration."""
        local = getattr(self._local, "creation", None)
        if local is not None:
            return local
        return self._global_creation

    @creation.setter
    def creation(self, value: CreationConfig):
        """Set global creation configuration."""
        self._global_creation = value
        self._notify("creation", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def check_bounds(self) -> bool:
        """Whether get/set validate their indices."""
        return self.indexing.check_bounds

    @property
    def default_dtype(self) -> DType:
        """Element type used when none is given."""
        return self.creation.default_dtype

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (indexing, creation)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._callbacks)
        if unknown:
            raise TypeError(f"Unknown configuration sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration, returning the previous values."""
        previous = {}
        for key, value in kwargs.items():
            previous[key] = getattr(self._local, key, None)
            if value is not None:
                setattr(self._local, key, value)
        return previous

    def _restore_local(self, previous: Dict[str, Any]):
        """Restore thread-local configuration."""
        for key, value in previous.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for configuration changes.

        Args:
            config_name: Name of config ("indexing" or "creation")
            callback: Function to call when config changes
        """
        if config_name not in self._callbacks:
            raise KeyError(f"Unknown configuration section: {config_name!r}")
        self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        logger.info("Configuration %s set to %r", config_name, value)
        for callback in self._callbacks.get(config_name, []):
            callback(value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_indexing = IndexingConfig()
        self._global_creation = CreationConfig()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "indexing": {
                "check_bounds": self.indexing.check_bounds,
            },
            "creation": {
                "default_dtype": self.creation.default_dtype.value,
            },
        }

    def __repr__(self) -> str:
        return f"ArrayConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: ArrayConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Dict[str, Any] = {}

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = ArrayConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> ArrayConfig:
    """Get the global configuration instance."""
    return config


def set_check_bounds(enabled: bool = True):
    """Enable or disable per-access bounds checking globally."""
    config.indexing = IndexingConfig(check_bounds=enabled)


def set_default_dtype(dtype: DTypeLike):
    """Set the element type used by create() when none is given."""
    config.creation = CreationConfig(default_dtype=normalize_dtype(dtype))


__all__ = [
    "IndexingConfig",
    "CreationConfig",
    "ArrayConfig",
    "config",
    "get_config",
    "set_check_bounds",
    "set_default_dtype",
]
