import enum
import enum
import typing
import typing
from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32
from boidlight.core.errors import FrameGraphError
from boidlight.core.errors import FrameGraphError
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.resources import ResourceHandle, ResourceKind

ACCESS_MODES: tuple[str, ...] = ("read", "write", "read_write")

class PassKind(enum.Enum):
    COMPUTE = "compute"
#   COMPUTE = "compute"
    COMPOSITE = "composite"
#   COMPOSITE = "composite"

class Binding:
    def __init__(self, slot: int, role: str, handle: ResourceHandle, access: str) -> None:
#   def __init__(self, slot: int, role: str, handle: ResourceHandle, access: str) -> None:
        if access not in ACCESS_MODES:
#       if access not in ACCESS_MODES:
            raise ValueError(f"Unknown access mode '{access}'")
#           raise ValueError(f"Unknown access mode '{access}'")
        self.slot: int = slot
#       self.slot: int = slot
        self.role: str = role
#       self.role: str = role
        self.handle: ResourceHandle = handle
#       self.handle: ResourceHandle = handle
        self.access: str = access
#       self.access: str = access
        pass
#       pass

    @property
#   @property
    def reads(self) -> bool:
#   def reads(self) -> bool:
        return self.access in ("read", "read_write")
#       return self.access in ("read", "read_write")

    @property
#   @property
    def writes(self) -> bool:
#   def writes(self) -> bool:
        return self.access in ("write", "read_write")
#       return self.access in ("write", "read_write")

class Pass:
    # One dispatch (or the final draw) recorded into the frame batch.
#   # One dispatch (or the final draw) recorded into the frame batch.
    def __init__(self, name: str, program: str, domain: vec2i32, group_size: vec2i32, bindings: list[Binding], kind: PassKind = PassKind.COMPUTE, constants: dict[str, typing.Any] | None = None) -> None:
#   def __init__(self, name: str, program: str, domain: vec2i32, group_size: vec2i32, bindings: list[Binding], kind: PassKind = PassKind.COMPUTE, constants: dict[str, typing.Any] | None = None) -> None:
        self.name: str = name
#       self.name: str = name
        self.program: str = program
#       self.program: str = program
        self.domain: vec2i32 = domain
#       self.domain: vec2i32 = domain
        self.group_size: vec2i32 = group_size
#       self.group_size: vec2i32 = group_size
        self.bindings: list[Binding] = bindings
#       self.bindings: list[Binding] = bindings
        self.kind: PassKind = kind
#       self.kind: PassKind = kind
        # Setup-time uniforms (named as in the shader), fixed for the lifetime of the pass
#       # Setup-time uniforms (named as in the shader), fixed for the lifetime of the pass
        self.constants: dict[str, typing.Any] = dict(constants or {})
#       self.constants: dict[str, typing.Any] = dict(constants or {})
        pass
#       pass

    def dispatch_size(self) -> vec2i32:
#   def dispatch_size(self) -> vec2i32:
        w, h = self.domain
#       w, h = self.domain
        gx, gy = self.group_size
#       gx, gy = self.group_size
        return ((w + gx - 1) // gx, (h + gy - 1) // gy)
#       return ((w + gx - 1) // gx, (h + gy - 1) // gy)

    def binding(self, role: str) -> Binding:
#   def binding(self, role: str) -> Binding:
        for binding in self.bindings:
#       for binding in self.bindings:
            if binding.role == role:
#           if binding.role == role:
                return binding
#               return binding
        raise KeyError(f"Pass '{self.name}' has no '{role}' binding")
#       raise KeyError(f"Pass '{self.name}' has no '{role}' binding")

    def reads(self) -> list[ResourceHandle]:
#   def reads(self) -> list[ResourceHandle]:
        return [b.handle for b in self.bindings if b.reads]
#       return [b.handle for b in self.bindings if b.reads]

    def writes(self) -> list[ResourceHandle]:
#   def writes(self) -> list[ResourceHandle]:
        return [b.handle for b in self.bindings if b.writes]
#       return [b.handle for b in self.bindings if b.writes]

    def __repr__(self) -> str:
#   def __repr__(self) -> str:
        return f"Pass({self.name!r}, program={self.program!r}, domain={self.domain})"
#       return f"Pass({self.name!r}, program={self.program!r}, domain={self.domain})"

class FrameGraph:
    """
    Ordered list of passes submitted as one batch every tick.
#   Ordered list of passes submitted as one batch every tick.
    The device executes passes in program order and makes each pass observe the completed
#   The device executes passes in program order and makes each pass observe the completed
    writes of every earlier pass in the batch, so ordering here is the whole dependency model.
#   writes of every earlier pass in the batch, so ordering here is the whole dependency model.
    """

    def __init__(self, passes: list[Pass]) -> None:
#   def __init__(self, passes: list[Pass]) -> None:
        self.passes: list[Pass] = list(passes)
#       self.passes: list[Pass] = list(passes)
        pass
#       pass

    def names(self) -> list[str]:
#   def names(self) -> list[str]:
        return [p.name for p in self.passes]
#       return [p.name for p in self.passes]

    def index(self, name: str) -> int:
#   def index(self, name: str) -> int:
        return self.names().index(name)
#       return self.names().index(name)

    def writers(self, handle: ResourceHandle) -> list[Pass]:
#   def writers(self, handle: ResourceHandle) -> list[Pass]:
        return [p for p in self.passes if handle in p.writes()]
#       return [p for p in self.passes if handle in p.writes()]

    def readers(self, handle: ResourceHandle) -> list[Pass]:
#   def readers(self, handle: ResourceHandle) -> list[Pass]:
        return [p for p in self.passes if handle in p.reads()]
#       return [p for p in self.passes if handle in p.reads()]

    def validate(self) -> None:
#   def validate(self) -> None:
        written: set[str] = set()
#       written: set[str] = set()
        for position, current in enumerate(self.passes):
#       for position, current in enumerate(self.passes):
            if current.kind is PassKind.COMPOSITE and position != len(self.passes) - 1:
#           if current.kind is PassKind.COMPOSITE and position != len(self.passes) - 1:
                raise FrameGraphError(f"Composite pass '{current.name}' must be the last pass in the batch")
#               raise FrameGraphError(f"Composite pass '{current.name}' must be the last pass in the batch")
            for binding in current.bindings:
#           for binding in current.bindings:
                handle: ResourceHandle = binding.handle
#               handle: ResourceHandle = binding.handle
                if not handle.is_image:
#               if not handle.is_image:
                    continue
#                   continue
                if binding.reads and handle in current.writes():
#               if binding.reads and handle in current.writes():
                    raise FrameGraphError(f"Pass '{current.name}' reads and writes field '{handle.name}' in one dispatch")
#                   raise FrameGraphError(f"Pass '{current.name}' reads and writes field '{handle.name}' in one dispatch")
                if binding.reads and handle.name not in written:
#               if binding.reads and handle.name not in written:
                    raise FrameGraphError(f"Pass '{current.name}' reads field '{handle.name}' before any pass wrote it this frame")
#                   raise FrameGraphError(f"Pass '{current.name}' reads field '{handle.name}' before any pass wrote it this frame")
            for handle in current.writes():
#           for handle in current.writes():
                written.add(handle.name)
#               written.add(handle.name)

        for current in self.passes:
#       for current in self.passes:
            for binding in current.bindings:
#           for binding in current.bindings:
                if binding.handle.kind is ResourceKind.SCRATCH and binding.writes:
#               if binding.handle.kind is ResourceKind.SCRATCH and binding.writes:
                    writers = self.writers(binding.handle)
#                   writers = self.writers(binding.handle)
                    readers = self.readers(binding.handle)
#                   readers = self.readers(binding.handle)
                    if len(writers) != 1 or len(readers) != 1:
#                   if len(writers) != 1 or len(readers) != 1:
                        raise FrameGraphError(f"Scratch field '{binding.handle.name}' needs exactly one writer and one reader, got {len(writers)} and {len(readers)}")
#                       raise FrameGraphError(f"Scratch field '{binding.handle.name}' needs exactly one writer and one reader, got {len(writers)} and {len(readers)}")
        pass
#       pass
