from __future__ import annotations

from vacant.context.registry import create_default_registry
from vacant.finder import new_finder

registry = create_default_registry()

__version__ = '0.1.0'
__all__ = (
    'new_finder',
    'registry'
)
