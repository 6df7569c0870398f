from .phase import IdlePhase
from .runtime import RuntimeDeps
from .settings import AppSettings
from .snapshot import IdleSnapshot
from .envelope import EnvelopeState
from .storage import StorageChange

__all__ = ["AppSettings", "EnvelopeState", "IdlePhase", "IdleSnapshot", "RuntimeDeps", "StorageChange"]
