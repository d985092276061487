"""Stock API endpoints"""

from . import inventory, requests

__all__ = ["inventory", "requests"]
