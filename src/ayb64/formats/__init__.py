"""Output format interfaces and registry for rendering conversion results."""

from .base import OutputFormat
from .registry import FormatRegistry, create_default_registry

__all__ = ["FormatRegistry", "OutputFormat", "create_default_registry"]
