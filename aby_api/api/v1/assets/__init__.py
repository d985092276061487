"""Asset API endpoints"""

from . import assets, requests

__all__ = ["assets", "requests"]
