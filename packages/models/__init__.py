"""
Model collaborators: filesystem loader, engine routing and backends.
"""

from .loader import ModelLoader
from .router import EngineRouter
from .backends import NullEngine

__all__ = ["EngineRouter", "ModelLoader", "NullEngine"]
