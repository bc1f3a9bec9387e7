from .null_backend import NullEngine

__all__ = ["NullEngine"]
