"""
colsparse Config - Behaviour Configuration System

Provides dataclass-based configuration for the LibSVM codec and for
element lookup, with thread-local overrides via a context manager.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Callable, Dict, Any, List, Optional
import logging
import os
import threading


logger = logging.getLogger("colsparse.config")

PRECISION_ENV_VAR = "COLSPARSE_FLOAT_PRECISION"


def _default_precision() -> int:
    raw = os.environ.get(PRECISION_ENV_VAR)
    if raw is None:
        return 17
    try:
        precision = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {PRECISION_ENV_VAR}={raw!r}: not an integer")
        return 17
    if not 1 <= precision <= 17:
        logger.warning(f"Ignoring {PRECISION_ENV_VAR}={precision}: must be in [1, 17]")
        return 17
    return precision


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class CodecConfig:
    """Configuration for LibSVM encoding/decoding."""
    delimiter: str = " "                # Field separator written between tokens
    float_precision: int = field(default_factory=_default_precision)  # Significant digits
    label_dtype: str = "float64"        # Dtype of decoded label vectors
    sort_on_load: bool = True           # Sort columns after decoding


@dataclass
class AccessConfig:
    """Configuration for element lookup."""
    binary_search: bool = True          # Bisect sorted vectors instead of scanning


# =============================================================================
# Global Configuration Manager
# =============================================================================

class SparseConfig:
    """
    Global configuration manager for colsparse.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.

    Example:
        # Global configuration
        colsparse.config.codec = CodecConfig(delimiter="\\t")

        # Local configuration (context manager)
        with colsparse.config.local(codec=CodecConfig(float_precision=10)):
            save_libsvm(stream, matrix)
        # Back to global config
    """

    _SECTIONS = ("codec", "access")

    def __init__(self):
        self._global_codec = CodecConfig()
        self._global_access = AccessConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

        # Callbacks for config changes
        self._callbacks: Dict[str, List[Callable]] = {name: [] for name in self._SECTIONS}

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def codec(self) -> CodecConfig:
        """Get codec configuration."""
        if getattr(self._local, "codec", None) is not None:
            return self._local.codec
        return self._global_codec

    @codec.setter
    def codec(self, value: CodecConfig):
        """Set global codec configuration."""
        self._global_codec = value
        self._notify("codec", value)

    @property
    def access(self) -> AccessConfig:
        """Get access configuration."""
        if getattr(self._local, "access", None) is not None:
            return self._local.access
        return self._global_access

    @access.setter
    def access(self, value: AccessConfig):
        """Set global access configuration."""
        self._global_access = value
        self._notify("access", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def float_precision(self) -> int:
        """Significant digits used when writing floats."""
        return self.codec.float_precision

    @float_precision.setter
    def float_precision(self, value: int):
        """Set float precision."""
        self._global_codec.float_precision = value

    @property
    def binary_search(self) -> bool:
        """Whether sorted vectors are searched by bisection."""
        return self.access.binary_search

    @binary_search.setter
    def binary_search(self, value: bool):
        """Set binary search."""
        self._global_access.binary_search = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (codec, access)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._SECTIONS)
        if unknown:
            raise TypeError(f"Unknown configuration section(s): {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration, returning the previous values."""
        previous = {}
        for key, value in kwargs.items():
            if value is not None:
                previous[key] = getattr(self._local, key, None)
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
            config_name: Name of config ("codec" or "access")
            callback: Function to call when config changes
        """
        if config_name in self._callbacks:
            self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        for callback in self._callbacks.get(config_name, []):
            callback(value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_codec = CodecConfig()
        self._global_access = AccessConfig()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "codec": asdict(self.codec),
            "access": asdict(self.access),
        }

    def __repr__(self) -> str:
        return f"SparseConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SparseConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._previous: Optional[Dict[str, Any]] = None

    def __enter__(self):
        self._previous = self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._previous or {})
        return False


# =============================================================================
# Global Instance
# =============================================================================

# Global configuration instance
config = SparseConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> SparseConfig:
    """Get the global configuration instance."""
    return config


def set_precision(precision: int = 17):
    """
    Set the number of significant digits written for floating values.

    Args:
        precision: Significant digits in [1, 17]
    """
    if not 1 <= precision <= 17:
        raise ValueError(f"precision must be in [1, 17], got {precision}")
    config.float_precision = precision


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    "CodecConfig",
    "AccessConfig",
    "SparseConfig",
    "config",
    "get_config",
    "set_precision",
    "PRECISION_ENV_VAR",
]
