# kubequest/api/v1/__init__.py
from .api import api_router

__all__ = ["api_router"]
