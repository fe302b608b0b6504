from .interface import BaseConnection, BaseInterface

__all__ = ("BaseConnection", "BaseInterface")
