"""
Config module - Customer-editable configuration defaults.
"""

from .settings import DEFAULT_SETTINGS, RUN_LABEL

__all__ = [
    'DEFAULT_SETTINGS',
    'RUN_LABEL',
]
