import enum
import enum
import typing
import typing
from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32

class ResourceKind(enum.Enum):
    FIELD = "field"        # persistent / per-frame rgba32f field
#   FIELD = "field"        # persistent / per-frame rgba32f field
    SCRATCH = "scratch"    # merge ping-pong target, read only by its copy-back
#   SCRATCH = "scratch"    # merge ping-pong target, read only by its copy-back
    MASK = "mask"          # immutable obstacle field
#   MASK = "mask"          # immutable obstacle field
    STORAGE = "storage"    # shader storage buffer (agents)
#   STORAGE = "storage"    # shader storage buffer (agents)
    UNIFORM = "uniform"    # per-frame parameter block
#   UNIFORM = "uniform"    # per-frame parameter block

class ResourceHandle:
    # Opaque reference to a device object owned by a ResourceRegistry.
#   # Opaque reference to a device object owned by a ResourceRegistry.
    def __init__(self, name: str, kind: ResourceKind, size: vec2i32 | int) -> None:
#   def __init__(self, name: str, kind: ResourceKind, size: vec2i32 | int) -> None:
        self.name: str = name
#       self.name: str = name
        self.kind: ResourceKind = kind
#       self.kind: ResourceKind = kind
        self.size: vec2i32 | int = size
#       self.size: vec2i32 | int = size
        pass
#       pass

    @property
#   @property
    def is_image(self) -> bool:
#   def is_image(self) -> bool:
        return self.kind in (ResourceKind.FIELD, ResourceKind.SCRATCH)
#       return self.kind in (ResourceKind.FIELD, ResourceKind.SCRATCH)

    def __repr__(self) -> str:
#   def __repr__(self) -> str:
        return f"ResourceHandle({self.name!r}, {self.kind.value}, {self.size})"
#       return f"ResourceHandle({self.name!r}, {self.kind.value}, {self.size})"

class ResourceRegistry:
    """
    Owns every device resource created during setup. Resources live until release_all(),
#   Owns every device resource created during setup. Resources live until release_all(),
    which is called once at shutdown; nothing is freed or reallocated while frames run.
#   which is called once at shutdown; nothing is freed or reallocated while frames run.
    """

    def __init__(self) -> None:
#   def __init__(self) -> None:
        self.handles: dict[str, ResourceHandle] = {}
#       self.handles: dict[str, ResourceHandle] = {}
        self.natives: dict[str, typing.Any] = {}
#       self.natives: dict[str, typing.Any] = {}
        pass
#       pass

    def register(self, name: str, kind: ResourceKind, size: vec2i32 | int, native: typing.Any) -> ResourceHandle:
#   def register(self, name: str, kind: ResourceKind, size: vec2i32 | int, native: typing.Any) -> ResourceHandle:
        if name in self.handles:
#       if name in self.handles:
            raise ValueError(f"Resource '{name}' is already registered")
#           raise ValueError(f"Resource '{name}' is already registered")
        handle: ResourceHandle = ResourceHandle(name=name, kind=kind, size=size)
#       handle: ResourceHandle = ResourceHandle(name=name, kind=kind, size=size)
        self.handles[name] = handle
#       self.handles[name] = handle
        self.natives[name] = native
#       self.natives[name] = native
        return handle
#       return handle

    def native(self, handle: ResourceHandle) -> typing.Any:
#   def native(self, handle: ResourceHandle) -> typing.Any:
        if self.handles.get(handle.name) is not handle:
#       if self.handles.get(handle.name) is not handle:
            raise KeyError(f"Unknown or released resource: {handle!r}")
#           raise KeyError(f"Unknown or released resource: {handle!r}")
        return self.natives[handle.name]
#       return self.natives[handle.name]

    def __contains__(self, handle: ResourceHandle) -> bool:
#   def __contains__(self, handle: ResourceHandle) -> bool:
        return self.handles.get(handle.name) is handle
#       return self.handles.get(handle.name) is handle

    def __len__(self) -> int:
#   def __len__(self) -> int:
        return len(self.handles)
#       return len(self.handles)

    def release_all(self, release: typing.Callable[[typing.Any], None] | None = None) -> int:
#   def release_all(self, release: typing.Callable[[typing.Any], None] | None = None) -> int:
        count: int = len(self.handles)
#       count: int = len(self.handles)
        if release is not None:
#       if release is not None:
            for native in self.natives.values():
#           for native in self.natives.values():
                release(native)
#               release(native)
        self.handles.clear()
#       self.handles.clear()
        self.natives.clear()
#       self.natives.clear()
        return count
#       return count
