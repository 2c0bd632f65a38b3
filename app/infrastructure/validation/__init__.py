"""
Input validation package.
"""

from .validators import SecurityValidator, DataValidator

__all__ = [
    'SecurityValidator',
    'DataValidator',
]
