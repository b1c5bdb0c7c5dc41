import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import typing
import typing
from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32
from boidlight.renderer.resources import ResourceHandle, ResourceKind, ResourceRegistry
from boidlight.renderer.resources import ResourceHandle, ResourceKind, ResourceRegistry

if typing.TYPE_CHECKING:
    from boidlight.scene.obstacle_field import ObstacleField
#   from boidlight.scene.obstacle_field import ObstacleField
    from boidlight.renderer.frame_graph import Pass
#   from boidlight.renderer.frame_graph import Pass
    from boidlight.renderer.shader_compiler import ProgramLibrary
#   from boidlight.renderer.shader_compiler import ProgramLibrary

class Device:
    """
    Device context threaded through every stage constructor.
#   Device context threaded through every stage constructor.
    All resources are created through it during setup and registered in its ResourceRegistry;
#   All resources are created through it during setup and registered in its ResourceRegistry;
    per-frame work is handed over as an ordered list of passes in a single submit() call.
#   per-frame work is handed over as an ordered list of passes in a single submit() call.
    """

    def __init__(self, surface_size: vec2i32) -> None:
#   def __init__(self, surface_size: vec2i32) -> None:
        self.surface_size: vec2i32 = surface_size
#       self.surface_size: vec2i32 = surface_size
        self.registry: ResourceRegistry = ResourceRegistry()
#       self.registry: ResourceRegistry = ResourceRegistry()
        self.submitted_batches: int = 0
#       self.submitted_batches: int = 0
        self.presented_frames: int = 0
#       self.presented_frames: int = 0
        pass
#       pass

    # -----------------------------
#   # -----------------------------
    # Resource creation
#   # Resource creation
    # -----------------------------
#   # -----------------------------
    def create_field(self, name: str, size: vec2i32, kind: ResourceKind = ResourceKind.FIELD, linear: bool = False) -> ResourceHandle:
#   def create_field(self, name: str, size: vec2i32, kind: ResourceKind = ResourceKind.FIELD, linear: bool = False) -> ResourceHandle:
        raise NotImplementedError
#       raise NotImplementedError

    def create_mask(self, name: str, field: "ObstacleField") -> ResourceHandle:
#   def create_mask(self, name: str, field: "ObstacleField") -> ResourceHandle:
        raise NotImplementedError
#       raise NotImplementedError

    def create_storage_buffer(self, name: str, data: bytes) -> ResourceHandle:
#   def create_storage_buffer(self, name: str, data: bytes) -> ResourceHandle:
        raise NotImplementedError
#       raise NotImplementedError

    def create_uniform_buffer(self, name: str, size: int) -> ResourceHandle:
#   def create_uniform_buffer(self, name: str, size: int) -> ResourceHandle:
        raise NotImplementedError
#       raise NotImplementedError

    def load_programs(self, library: "ProgramLibrary") -> None:
#   def load_programs(self, library: "ProgramLibrary") -> None:
        raise NotImplementedError
#       raise NotImplementedError

    # -----------------------------
#   # -----------------------------
    # Data transfer
#   # Data transfer
    # -----------------------------
#   # -----------------------------
    def write_buffer(self, handle: ResourceHandle, data: bytes) -> None:
#   def write_buffer(self, handle: ResourceHandle, data: bytes) -> None:
        raise NotImplementedError
#       raise NotImplementedError

    def read_buffer(self, handle: ResourceHandle) -> bytes:
#   def read_buffer(self, handle: ResourceHandle) -> bytes:
        raise NotImplementedError
#       raise NotImplementedError

    def read_field(self, handle: ResourceHandle) -> npt.NDArray[np.float32]:
#   def read_field(self, handle: ResourceHandle) -> npt.NDArray[np.float32]:
        # (H, W, 4) float32, row 0 at the top of the surface
#       # (H, W, 4) float32, row 0 at the top of the surface
        raise NotImplementedError
#       raise NotImplementedError

    # -----------------------------
#   # -----------------------------
    # Frame
#   # Frame
    # -----------------------------
#   # -----------------------------
    def acquire_surface(self) -> None:
#   def acquire_surface(self) -> None:
        # May raise TransientFrameError when no surface image is available this tick.
#       # May raise TransientFrameError when no surface image is available this tick.
        pass
#       pass

    def submit(self, passes: list["Pass"]) -> None:
#   def submit(self, passes: list["Pass"]) -> None:
        raise NotImplementedError
#       raise NotImplementedError

    def present(self) -> None:
#   def present(self) -> None:
        self.presented_frames += 1
#       self.presented_frames += 1
        pass
#       pass

    def read_surface(self) -> npt.NDArray[np.float32]:
#   def read_surface(self) -> npt.NDArray[np.float32]:
        # (H, W, 4) float32 image of the last composited frame, row 0 at the top
#       # (H, W, 4) float32 image of the last composited frame, row 0 at the top
        raise NotImplementedError
#       raise NotImplementedError

    def release_all(self) -> int:
#   def release_all(self) -> int:
        return self.registry.release_all()
#       return self.registry.release_all()

    def check_buffer_write(self, handle: ResourceHandle, data: bytes) -> None:
#   def check_buffer_write(self, handle: ResourceHandle, data: bytes) -> None:
        if handle.kind not in (ResourceKind.STORAGE, ResourceKind.UNIFORM):
#       if handle.kind not in (ResourceKind.STORAGE, ResourceKind.UNIFORM):
            raise ValueError(f"{handle!r} is not a buffer")
#           raise ValueError(f"{handle!r} is not a buffer")
        if len(data) > typing.cast(int, handle.size):
#       if len(data) > typing.cast(int, handle.size):
            raise ValueError(f"Write of {len(data)} bytes exceeds {handle!r}")
#           raise ValueError(f"Write of {len(data)} bytes exceeds {handle!r}")
        pass
#       pass
