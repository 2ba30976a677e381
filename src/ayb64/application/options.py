"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass

from ayb64.types import DEFAULT_CHUNK_SIZE, ExecutionMode


@dataclass(frozen=True)
class RenderOptions:
    """Formatter configuration.

    ``wrap_column`` values that are ``None`` or not positive disable wrapping.
    """

    wrap_column: int | None = None
    data_uri: bool = False
    include_metadata: bool = False

    @property
    def effective_wrap(self) -> int | None:
        """Return the wrap width, or ``None`` when wrapping is disabled."""
        if self.wrap_column is not None and self.wrap_column > 0:
            return self.wrap_column
        return None

    def cache_key(self) -> tuple[int | None, bool, bool]:
        """Return a hashable identity used by job memory lookups."""
        return (self.effective_wrap, self.data_uri, self.include_metadata)


@dataclass(frozen=True)
class EngineOptions:
    """Execution configuration for file inputs."""

    mode: ExecutionMode = "in_memory"
    chunk_size: int = DEFAULT_CHUNK_SIZE
