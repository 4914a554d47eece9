"""Engine access: protocols, lifecycle, loader, in-memory filesystem.

WHY: Everything that touches the native engine directly lives here, so
the orchestration code above it only sees a ready EngineModule.

HOW: interfaces.py defines the protocols, lifecycle.py owns the handle and
its initialization, loader.py imports a binding module, memory.py is a
dict-backed VirtualFileSystem.

RULES:
- Only EngineLifecycle holds the engine handle across calls
- Other components borrow the handle for the duration of one call
"""

from x2t_bridge.engine.interfaces import EngineLoader, EngineModule, VirtualFileSystem
from x2t_bridge.engine.lifecycle import EngineLifecycle, EngineState
from x2t_bridge.engine.memory import InMemoryFileSystem

__all__ = [
    "EngineLifecycle",
    "EngineLoader",
    "EngineModule",
    "EngineState",
    "InMemoryFileSystem",
    "VirtualFileSystem",
]
