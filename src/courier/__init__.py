"""
Courier
GraphQL API server for users and their messages
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
