from .runtime import RuntimeDeps
from .settings import AppSettings
from .request import RequestState
from .connection import ConnectionState

__all__ = ["AppSettings", "ConnectionState", "RequestState", "RuntimeDeps"]
