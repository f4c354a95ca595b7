"""
Configuration package.

Exports the settings instance for easy importing.
"""

from exam_buddy.config.settings import settings

__all__ = ["settings"]
