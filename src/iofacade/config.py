from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_BUFFER_SIZE = 4096


@dataclass(frozen=True)
class AdapterConfig:
    """Configuration for :class:`iofacade.StreamAdapter`."""

    # Chunk size used when the wrapped stream doesn't report its own buffer size.
    default_buffer_size: int = DEFAULT_BUFFER_SIZE

    # Upper bound applied to a buffer size reported by the wrapped stream.
    max_buffer_size: int | None = None

    def __post_init__(self) -> None:
        if self.default_buffer_size <= 0:
            raise ValueError("default_buffer_size must be positive")
        if self.max_buffer_size is not None and self.max_buffer_size <= 0:
            raise ValueError("max_buffer_size must be positive")

    def chunk_size_for(self, reported: int | None) -> int:
        """Return the chunk size to use given a stream's reported buffer size."""
        if reported is None or reported <= 0:
            return self.default_buffer_size
        if self.max_buffer_size is not None:
            return min(reported, self.max_buffer_size)
        return reported


_default_config_var: contextvars.ContextVar[AdapterConfig] = contextvars.ContextVar(
    "iofacade_default_config", default=AdapterConfig()
)


def get_default_config() -> AdapterConfig:
    """Return the current default configuration."""
    return _default_config_var.get()


def set_default_config(config: AdapterConfig) -> None:
    """Set the default configuration for new adapters."""
    _default_config_var.set(config)


def set_default_config_fields(**kwargs: Any) -> None:
    """Replace individual fields of the default configuration."""
    config = get_default_config()
    config = replace(config, **kwargs)
    set_default_config(config)


@contextmanager
def default_config(config: AdapterConfig | None = None, **kwargs: Any):
    """Temporarily use ``config`` as the default configuration."""
    if config is None:
        config = get_default_config()

    if kwargs:
        config = replace(config, **kwargs)

    token = _default_config_var.set(config)
    try:
        yield config
    finally:
        _default_config_var.reset(token)
