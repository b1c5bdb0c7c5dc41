import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import typing
import typing
from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32
from boidlight.core.errors import ShaderCompilationError
from boidlight.core.errors import ShaderCompilationError
from boidlight.core.params import unpack_params, SIM_PARAMS_DTYPE, EMIT_PARAMS_DTYPE, DIFFUSE_PARAMS_DTYPE, UPSAMPLE_PARAMS_DTYPE
from boidlight.core.params import unpack_params, SIM_PARAMS_DTYPE, EMIT_PARAMS_DTYPE, DIFFUSE_PARAMS_DTYPE, UPSAMPLE_PARAMS_DTYPE
from boidlight.renderer.device import Device
from boidlight.renderer.device import Device
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.frame_graph import Pass
from boidlight.renderer.frame_graph import Pass
from boidlight.renderer.shader_compiler import ProgramLibrary
from boidlight.renderer.shader_compiler import ProgramLibrary
from boidlight.renderer import reference_kernels as rk
from boidlight.renderer import reference_kernels as rk

if typing.TYPE_CHECKING:
    from boidlight.scene.obstacle_field import ObstacleField
#   from boidlight.scene.obstacle_field import ObstacleField

class ReferenceDevice(Device):
    """
    Headless device that runs the numpy reference kernels.
#   Headless device that runs the numpy reference kernels.
    Passes execute one after another in submission order, so every pass observes the complete
#   Passes execute one after another in submission order, so every pass observes the complete
    writes of the passes before it, the same guarantee the GL device gets from memory barriers.
#   writes of the passes before it, the same guarantee the GL device gets from memory barriers.
    """

    def __init__(self, surface_size: vec2i32) -> None:
#   def __init__(self, surface_size: vec2i32) -> None:
        super().__init__(surface_size=surface_size)
#       super().__init__(surface_size=surface_size)
        self.programs: set[str] = set()
#       self.programs: set[str] = set()
        self.surface: npt.NDArray[np.float32] = np.zeros((surface_size[1], surface_size[0], 4), dtype=np.float32)
#       self.surface: npt.NDArray[np.float32] = np.zeros((surface_size[1], surface_size[0], 4), dtype=np.float32)
        self.executed_passes: list[str] = []
#       self.executed_passes: list[str] = []
        self.kernels: dict[str, typing.Callable[[Pass], None]] = {
#       self.kernels: dict[str, typing.Callable[[Pass], None]] = {
            "simulate": self.run_simulate,
#           "simulate": self.run_simulate,
            "clear": self.run_clear,
#           "clear": self.run_clear,
            "emit": self.run_emit,
#           "emit": self.run_emit,
            "diffuse": self.run_diffuse,
#           "diffuse": self.run_diffuse,
            "upsample": self.run_upsample,
#           "upsample": self.run_upsample,
            "copy": self.run_copy,
#           "copy": self.run_copy,
            "composite": self.run_composite,
#           "composite": self.run_composite,
        }
#       }
        pass
#       pass

    def create_field(self, name: str, size: vec2i32, kind: ResourceKind = ResourceKind.FIELD, linear: bool = False) -> ResourceHandle:
#   def create_field(self, name: str, size: vec2i32, kind: ResourceKind = ResourceKind.FIELD, linear: bool = False) -> ResourceHandle:
        w, h = size
#       w, h = size
        return self.registry.register(name, kind, size, np.zeros((h, w, 4), dtype=np.float32))
#       return self.registry.register(name, kind, size, np.zeros((h, w, 4), dtype=np.float32))

    def create_mask(self, name: str, field: "ObstacleField") -> ResourceHandle:
#   def create_mask(self, name: str, field: "ObstacleField") -> ResourceHandle:
        return self.registry.register(name, ResourceKind.MASK, field.size, field.mask)
#       return self.registry.register(name, ResourceKind.MASK, field.size, field.mask)

    def create_storage_buffer(self, name: str, data: bytes) -> ResourceHandle:
#   def create_storage_buffer(self, name: str, data: bytes) -> ResourceHandle:
        return self.registry.register(name, ResourceKind.STORAGE, len(data), bytearray(data))
#       return self.registry.register(name, ResourceKind.STORAGE, len(data), bytearray(data))

    def create_uniform_buffer(self, name: str, size: int) -> ResourceHandle:
#   def create_uniform_buffer(self, name: str, size: int) -> ResourceHandle:
        return self.registry.register(name, ResourceKind.UNIFORM, size, bytearray(size))
#       return self.registry.register(name, ResourceKind.UNIFORM, size, bytearray(size))

    def load_programs(self, library: ProgramLibrary) -> None:
#   def load_programs(self, library: ProgramLibrary) -> None:
        for name in library.names():
#       for name in library.names():
            if name not in self.kernels:
#           if name not in self.kernels:
                raise ShaderCompilationError(name, "no reference kernel for this program")
#               raise ShaderCompilationError(name, "no reference kernel for this program")
            self.programs.add(name)
#           self.programs.add(name)
        pass
#       pass

    def write_buffer(self, handle: ResourceHandle, data: bytes) -> None:
#   def write_buffer(self, handle: ResourceHandle, data: bytes) -> None:
        self.check_buffer_write(handle, data)
#       self.check_buffer_write(handle, data)
        buffer: bytearray = self.registry.native(handle)
#       buffer: bytearray = self.registry.native(handle)
        buffer[:len(data)] = data
#       buffer[:len(data)] = data
        pass
#       pass

    def read_buffer(self, handle: ResourceHandle) -> bytes:
#   def read_buffer(self, handle: ResourceHandle) -> bytes:
        return bytes(self.registry.native(handle))
#       return bytes(self.registry.native(handle))

    def read_field(self, handle: ResourceHandle) -> npt.NDArray[np.float32]:
#   def read_field(self, handle: ResourceHandle) -> npt.NDArray[np.float32]:
        return np.array(self.registry.native(handle), copy=True)
#       return np.array(self.registry.native(handle), copy=True)

    def submit(self, passes: list[Pass]) -> None:
#   def submit(self, passes: list[Pass]) -> None:
        for current in passes:
#       for current in passes:
            if current.program not in self.programs:
#           if current.program not in self.programs:
                raise ShaderCompilationError(current.program, "program was not loaded")
#               raise ShaderCompilationError(current.program, "program was not loaded")
            self.kernels[current.program](current)
#           self.kernels[current.program](current)
            self.executed_passes.append(current.name)
#           self.executed_passes.append(current.name)
        self.submitted_batches += 1
#       self.submitted_batches += 1
        pass
#       pass

    def read_surface(self) -> npt.NDArray[np.float32]:
#   def read_surface(self) -> npt.NDArray[np.float32]:
        return self.surface.copy()
#       return self.surface.copy()

    # -----------------------------
#   # -----------------------------
    # Kernels
#   # Kernels
    # -----------------------------
#   # -----------------------------
    def field(self, current: Pass, role: str) -> npt.NDArray[np.float32]:
#   def field(self, current: Pass, role: str) -> npt.NDArray[np.float32]:
        return self.registry.native(current.binding(role).handle)
#       return self.registry.native(current.binding(role).handle)

    def params(self, current: Pass, dtype: np.dtype) -> typing.Any:
#   def params(self, current: Pass, dtype: np.dtype) -> typing.Any:
        return unpack_params(dtype, bytes(self.registry.native(current.binding("params").handle)))
#       return unpack_params(dtype, bytes(self.registry.native(current.binding("params").handle)))

    def agents(self, current: Pass) -> npt.NDArray[np.float32]:
#   def agents(self, current: Pass) -> npt.NDArray[np.float32]:
        data: bytearray = self.registry.native(current.binding("agents").handle)
#       data: bytearray = self.registry.native(current.binding("agents").handle)
        return np.frombuffer(bytes(data), dtype=np.float32).reshape(-1, 4)
#       return np.frombuffer(bytes(data), dtype=np.float32).reshape(-1, 4)

    def run_simulate(self, current: Pass) -> None:
#   def run_simulate(self, current: Pass) -> None:
        buffer: bytearray = self.registry.native(current.binding("agents").handle)
#       buffer: bytearray = self.registry.native(current.binding("agents").handle)
        mask: npt.NDArray[np.uint8] = self.registry.native(current.binding("mask").handle)
#       mask: npt.NDArray[np.uint8] = self.registry.native(current.binding("mask").handle)
        updated = rk.simulate_agents(self.agents(current), mask, self.params(current, SIM_PARAMS_DTYPE), probe_texels=current.constants["uProbeTexels"])
#       updated = rk.simulate_agents(self.agents(current), mask, self.params(current, SIM_PARAMS_DTYPE), probe_texels=current.constants["uProbeTexels"])
        buffer[:updated.nbytes] = updated.tobytes()
#       buffer[:updated.nbytes] = updated.tobytes()
        pass
#       pass

    def run_clear(self, current: Pass) -> None:
#   def run_clear(self, current: Pass) -> None:
        self.field(current, "target").fill(0.0)
#       self.field(current, "target").fill(0.0)
        pass
#       pass

    def run_emit(self, current: Pass) -> None:
#   def run_emit(self, current: Pass) -> None:
        rk.emit_agents(
#       rk.emit_agents(
            self.field(current, "target"),
#           self.field(current, "target"),
            self.agents(current),
#           self.agents(current),
            self.params(current, EMIT_PARAMS_DTYPE),
#           self.params(current, EMIT_PARAMS_DTYPE),
            intensity=current.constants["uIntensity"],
#           intensity=current.constants["uIntensity"],
            pulse_rate=current.constants["uPulseRate"],
#           pulse_rate=current.constants["uPulseRate"],
            pulse_depth=current.constants["uPulseDepth"],
#           pulse_depth=current.constants["uPulseDepth"],
        )
#       )
        pass
#       pass

    def run_diffuse(self, current: Pass) -> None:
#   def run_diffuse(self, current: Pass) -> None:
        params = self.params(current, DIFFUSE_PARAMS_DTYPE)
#       params = self.params(current, DIFFUSE_PARAMS_DTYPE)
        w, h = (int(v) for v in params["resolution"])
#       w, h = (int(v) for v in params["resolution"])
        mask: npt.NDArray[np.uint8] = self.registry.native(current.binding("mask").handle)
#       mask: npt.NDArray[np.uint8] = self.registry.native(current.binding("mask").handle)
        result = rk.diffuse_level(self.field(current, "source"), mask, level=int(params["level"]), size=(w, h), radius=current.constants["uRadius"])
#       result = rk.diffuse_level(self.field(current, "source"), mask, level=int(params["level"]), size=(w, h), radius=current.constants["uRadius"])
        np.copyto(self.field(current, "target"), result)
#       np.copyto(self.field(current, "target"), result)
        pass
#       pass

    def run_upsample(self, current: Pass) -> None:
#   def run_upsample(self, current: Pass) -> None:
        params = self.params(current, UPSAMPLE_PARAMS_DTYPE)
#       params = self.params(current, UPSAMPLE_PARAMS_DTYPE)
        mask: npt.NDArray[np.uint8] = self.registry.native(current.binding("mask").handle)
#       mask: npt.NDArray[np.uint8] = self.registry.native(current.binding("mask").handle)
        result = rk.upsample_merge(self.field(current, "coarse"), self.field(current, "fine"), mask, level=int(params["level"]), merge_weight=current.constants["uMergeWeight"])
#       result = rk.upsample_merge(self.field(current, "coarse"), self.field(current, "fine"), mask, level=int(params["level"]), merge_weight=current.constants["uMergeWeight"])
        np.copyto(self.field(current, "target"), result)
#       np.copyto(self.field(current, "target"), result)
        pass
#       pass

    def run_copy(self, current: Pass) -> None:
#   def run_copy(self, current: Pass) -> None:
        np.copyto(self.field(current, "target"), self.field(current, "source"))
#       np.copyto(self.field(current, "target"), self.field(current, "source"))
        pass
#       pass

    def run_composite(self, current: Pass) -> None:
#   def run_composite(self, current: Pass) -> None:
        self.surface = rk.composite_image(
#       self.surface = rk.composite_image(
            self.field(current, "source"),
#           self.field(current, "source"),
            self.surface_size,
#           self.surface_size,
            background=current.constants["uBackground"],
#           background=current.constants["uBackground"],
            exposure=current.constants["uExposure"],
#           exposure=current.constants["uExposure"],
        )
#       )
        pass
#       pass
