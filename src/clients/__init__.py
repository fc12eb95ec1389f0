"""
Client modules for external service communication
"""

from .pages import PagesClient

__all__ = ["PagesClient"]
