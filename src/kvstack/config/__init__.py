"""Configuration module using Pydantic Settings.

Usage:
    from kvstack.config import StoreSettings

    settings = StoreSettings(db=1)
"""

from kvstack.config.settings import StoreSettings

__all__ = [
    "StoreSettings",
]
