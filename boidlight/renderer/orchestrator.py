import enum
import enum
import time
import time
import typing
import typing
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
from boidlight.core.common_types import vec2f32, ObstacleRect
from boidlight.core.common_types import vec2f32, ObstacleRect
from boidlight.core.config import AGENT_COUNT, CASCADE_LEVEL_COUNT, MAX_DELTA_TIME
from boidlight.core.config import AGENT_COUNT, CASCADE_LEVEL_COUNT, MAX_DELTA_TIME
from boidlight.core.coordinates import pointer_to_ndc
from boidlight.core.coordinates import pointer_to_ndc
from boidlight.core.errors import TransientFrameError
from boidlight.core.errors import TransientFrameError
from boidlight.scene.obstacle_field import ObstacleField
from boidlight.scene.obstacle_field import ObstacleField
from boidlight.scene.agent_store import AgentStore, make_agent_array
from boidlight.scene.agent_store import AgentStore, make_agent_array
from boidlight.renderer.device import Device
from boidlight.renderer.device import Device
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.frame_graph import FrameGraph, Pass
from boidlight.renderer.frame_graph import FrameGraph, Pass
from boidlight.renderer.shader_compiler import ProgramLibrary
from boidlight.renderer.shader_compiler import ProgramLibrary
from boidlight.renderer.emission import EmissionStage
from boidlight.renderer.emission import EmissionStage
from boidlight.renderer.cascade import CascadePyramid, MergeStage
from boidlight.renderer.cascade import CascadePyramid, MergeStage
from boidlight.renderer.composite import CompositeStage
from boidlight.renderer.composite import CompositeStage

class OrchestratorState(enum.Enum):
    IDLE = "idle"
#   IDLE = "idle"
    ARMED = "armed"
#   ARMED = "armed"
    RUNNING = "running"
#   RUNNING = "running"

class FrameInput:
    # Everything one tick needs from the host: the latest pointer (normalized, y down) and a monotonic timestamp.
#   # Everything one tick needs from the host: the latest pointer (normalized, y down) and a monotonic timestamp.
    def __init__(self, pointer: vec2f32, timestamp: float) -> None:
#   def __init__(self, pointer: vec2f32, timestamp: float) -> None:
        self.pointer: vec2f32 = pointer
#       self.pointer: vec2f32 = pointer
        self.timestamp: float = timestamp
#       self.timestamp: float = timestamp
        pass
#       pass

def format_status(pointer: vec2f32) -> str:
    return f"x={pointer[0]:.2f}, y={pointer[1]:.2f}"
#   return f"x={pointer[0]:.2f}, y={pointer[1]:.2f}"

class FrameOrchestrator:
    """
    Owns every stage and the frame graph.
#   Owns every stage and the frame graph.

    setup() builds the Obstacle Field, creates all device resources and programs once, and
#   setup() builds the Obstacle Field, creates all device resources and programs once, and
    validates the pass order. Each tick() then only overwrites the parameter buffers in place
#   validates the pass order. Each tick() then only overwrites the parameter buffers in place
    and submits the same ordered pass list as a single batch:
#   and submits the same ordered pass list as a single batch:

        simulate -> clear -> emit -> diffuse_0..N-1 -> (upsample_i, copy_i) for i = N-2..0 -> composite
#       simulate -> clear -> emit -> diffuse_0..N-1 -> (upsample_i, copy_i) for i = N-2..0 -> composite
    """

    def __init__(
#   def __init__(
        self,
#       self,
        device: Device,
#       device: Device,
        obstacles: list[ObstacleRect] | None = None,
#       obstacles: list[ObstacleRect] | None = None,
        agent_count: int = AGENT_COUNT,
#       agent_count: int = AGENT_COUNT,
        level_count: int = CASCADE_LEVEL_COUNT,
#       level_count: int = CASCADE_LEVEL_COUNT,
        agents: npt.NDArray[np.float32] | None = None,
#       agents: npt.NDArray[np.float32] | None = None,
        seed: int | None = None,
#       seed: int | None = None,
    ) -> None:
#   ) -> None:
        self.device: Device = device
#       self.device: Device = device
        self.obstacles: list[ObstacleRect] = list(obstacles or [])
#       self.obstacles: list[ObstacleRect] = list(obstacles or [])
        self.level_count: int = level_count
#       self.level_count: int = level_count
        self.initial_agents: npt.NDArray[np.float32] = agents if agents is not None else make_agent_array(agent_count, rng=np.random.default_rng(seed))
#       self.initial_agents: npt.NDArray[np.float32] = agents if agents is not None else make_agent_array(agent_count, rng=np.random.default_rng(seed))

        self.state: OrchestratorState = OrchestratorState.IDLE
#       self.state: OrchestratorState = OrchestratorState.IDLE
        self.setup_time: float = 0.0
#       self.setup_time: float = 0.0
        self.previous_time: float = 0.0
#       self.previous_time: float = 0.0
        self.pointer: vec2f32 = (0.5, 0.5)
#       self.pointer: vec2f32 = (0.5, 0.5)
        self.status_text: str = format_status(self.pointer)
#       self.status_text: str = format_status(self.pointer)
        self.frame_count: int = 0
#       self.frame_count: int = 0
        self.skipped_frames: int = 0
#       self.skipped_frames: int = 0

        self.field: ObstacleField | None = None
#       self.field: ObstacleField | None = None
        self.mask: ResourceHandle | None = None
#       self.mask: ResourceHandle | None = None
        self.agents: AgentStore | None = None
#       self.agents: AgentStore | None = None
        self.emission: EmissionStage | None = None
#       self.emission: EmissionStage | None = None
        self.pyramid: CascadePyramid | None = None
#       self.pyramid: CascadePyramid | None = None
        self.merge: MergeStage | None = None
#       self.merge: MergeStage | None = None
        self.composite: CompositeStage | None = None
#       self.composite: CompositeStage | None = None
        self.graph: FrameGraph | None = None
#       self.graph: FrameGraph | None = None
        pass
#       pass

    # -----------------------------
#   # -----------------------------
    # Setup
#   # Setup
    # -----------------------------
#   # -----------------------------
    def setup(self, timestamp: float, library: ProgramLibrary | None = None) -> None:
#   def setup(self, timestamp: float, library: ProgramLibrary | None = None) -> None:
        if self.state is not OrchestratorState.IDLE:
#       if self.state is not OrchestratorState.IDLE:
            raise ValueError(f"setup() called in state {self.state.value}")
#           raise ValueError(f"setup() called in state {self.state.value}")
        try:
#       try:
            self.build_stages(timestamp, library)
#           self.build_stages(timestamp, library)
        except Exception:
#       except Exception:
            # Roll back whatever was created before the failure
#           # Roll back whatever was created before the failure
            released: int = self.device.release_all()
#           released: int = self.device.release_all()
            self.clear_stages()
#           self.clear_stages()
            print(f"[CLOSE] Setup failed, released {released} resources")
#           print(f"[CLOSE] Setup failed, released {released} resources")
            raise
#           raise
        pass
#       pass

    def clear_stages(self) -> None:
#   def clear_stages(self) -> None:
        self.field = None
#       self.field = None
        self.mask = None
#       self.mask = None
        self.agents = None
#       self.agents = None
        self.emission = None
#       self.emission = None
        self.pyramid = None
#       self.pyramid = None
        self.merge = None
#       self.merge = None
        self.composite = None
#       self.composite = None
        self.graph = None
#       self.graph = None
        self.state = OrchestratorState.IDLE
#       self.state = OrchestratorState.IDLE
        pass
#       pass

    def build_stages(self, timestamp: float, library: ProgramLibrary | None) -> None:
#   def build_stages(self, timestamp: float, library: ProgramLibrary | None) -> None:
        device: Device = self.device
#       device: Device = self.device
        size = device.surface_size
#       size = device.surface_size

        self.field = ObstacleField(size, self.obstacles)
#       self.field = ObstacleField(size, self.obstacles)
        self.mask = device.create_mask("obstacle_mask", self.field)
#       self.mask = device.create_mask("obstacle_mask", self.field)
        self.agents = AgentStore(device, self.initial_agents, self.mask)
#       self.agents = AgentStore(device, self.initial_agents, self.mask)
        self.emission = EmissionStage(device, size, self.agents.buffer, self.agents.count)
#       self.emission = EmissionStage(device, size, self.agents.buffer, self.agents.count)
        self.pyramid = CascadePyramid(device, size, self.emission.field, self.mask, level_count=self.level_count)
#       self.pyramid = CascadePyramid(device, size, self.emission.field, self.mask, level_count=self.level_count)
        self.merge = MergeStage(device, self.pyramid)
#       self.merge = MergeStage(device, self.pyramid)
        self.composite = CompositeStage(self.pyramid.levels[0].field, size)
#       self.composite = CompositeStage(self.pyramid.levels[0].field, size)

        device.load_programs(library if library is not None else ProgramLibrary.load())
#       device.load_programs(library if library is not None else ProgramLibrary.load())

        self.graph = FrameGraph(self.build_passes())
#       self.graph = FrameGraph(self.build_passes())
        self.graph.validate()
#       self.graph.validate()

        self.setup_time = timestamp
#       self.setup_time = timestamp
        self.previous_time = timestamp
#       self.previous_time = timestamp
        self.agents.update_params(target=pointer_to_ndc(self.pointer), dt=0.0)
#       self.agents.update_params(target=pointer_to_ndc(self.pointer), dt=0.0)
        self.state = OrchestratorState.ARMED
#       self.state = OrchestratorState.ARMED
        print(f"[SETUP] {self.agents.count} agents, {self.field.blocked_count()} blocked cells, levels {self.pyramid.sizes}, {len(self.graph.passes)} passes")
#       print(f"[SETUP] {self.agents.count} agents, {self.field.blocked_count()} blocked cells, levels {self.pyramid.sizes}, {len(self.graph.passes)} passes")
        pass
#       pass

    def build_passes(self) -> list[Pass]:
#   def build_passes(self) -> list[Pass]:
        stages = (self.agents, self.emission, self.pyramid, self.merge, self.composite)
#       stages = (self.agents, self.emission, self.pyramid, self.merge, self.composite)
        passes: list[Pass] = []
#       passes: list[Pass] = []
        for stage in stages:
#       for stage in stages:
            passes.extend(typing.cast(typing.Any, stage).passes())
#           passes.extend(typing.cast(typing.Any, stage).passes())
        return passes
#       return passes

    # -----------------------------
#   # -----------------------------
    # Frame
#   # Frame
    # -----------------------------
#   # -----------------------------
    def tick(self, frame: FrameInput) -> bool:
#   def tick(self, frame: FrameInput) -> bool:
        """
        Runs one frame. Returns False when the frame was skipped because the surface was unavailable.
#       Runs one frame. Returns False when the frame was skipped because the surface was unavailable.
        """
        if self.state is OrchestratorState.IDLE or self.graph is None:
#       if self.state is OrchestratorState.IDLE or self.graph is None:
            raise ValueError("tick() called before setup()")
#           raise ValueError("tick() called before setup()")
        agents = typing.cast(AgentStore, self.agents)
#       agents = typing.cast(AgentStore, self.agents)
        emission = typing.cast(EmissionStage, self.emission)
#       emission = typing.cast(EmissionStage, self.emission)

        dt: float = min(max(frame.timestamp - self.previous_time, 0.0), MAX_DELTA_TIME)
#       dt: float = min(max(frame.timestamp - self.previous_time, 0.0), MAX_DELTA_TIME)
        self.previous_time = frame.timestamp
#       self.previous_time = frame.timestamp
        self.pointer = frame.pointer
#       self.pointer = frame.pointer
        self.status_text = format_status(frame.pointer)
#       self.status_text = format_status(frame.pointer)
        self.state = OrchestratorState.RUNNING
#       self.state = OrchestratorState.RUNNING

        agents.update_params(target=pointer_to_ndc(frame.pointer), dt=dt)
#       agents.update_params(target=pointer_to_ndc(frame.pointer), dt=dt)
        emission.update_params(time=frame.timestamp - self.setup_time)
#       emission.update_params(time=frame.timestamp - self.setup_time)

        try:
#       try:
            self.device.acquire_surface()
#           self.device.acquire_surface()
        except TransientFrameError as error:
#       except TransientFrameError as error:
            self.skipped_frames += 1
#           self.skipped_frames += 1
            print(f"[WARN] Skipping frame: {error}")
#           print(f"[WARN] Skipping frame: {error}")
            return False
#           return False

        self.device.submit(self.graph.passes)
#       self.device.submit(self.graph.passes)
        self.device.present()
#       self.device.present()
        self.frame_count += 1
#       self.frame_count += 1
        return True
#       return True

    def shutdown(self) -> int:
#   def shutdown(self) -> int:
        released: int = self.device.release_all()
#       released: int = self.device.release_all()
        self.state = OrchestratorState.IDLE
#       self.state = OrchestratorState.IDLE
        self.graph = None
#       self.graph = None
        return released
#       return released

class FrameLoop:
    # Drives the orchestrator until stop() is called (or max_frames frames were attempted).
#   # Drives the orchestrator until stop() is called (or max_frames frames were attempted).

    def __init__(self, orchestrator: FrameOrchestrator, clock: typing.Callable[[], float] = time.perf_counter, pointer_source: typing.Callable[[], vec2f32] | None = None) -> None:
#   def __init__(self, orchestrator: FrameOrchestrator, clock: typing.Callable[[], float] = time.perf_counter, pointer_source: typing.Callable[[], vec2f32] | None = None) -> None:
        self.orchestrator: FrameOrchestrator = orchestrator
#       self.orchestrator: FrameOrchestrator = orchestrator
        self.clock: typing.Callable[[], float] = clock
#       self.clock: typing.Callable[[], float] = clock
        self.pointer_source: typing.Callable[[], vec2f32] = pointer_source if pointer_source is not None else (lambda: orchestrator.pointer)
#       self.pointer_source: typing.Callable[[], vec2f32] = pointer_source if pointer_source is not None else (lambda: orchestrator.pointer)
        self.running: bool = False
#       self.running: bool = False
        pass
#       pass

    def run(self, max_frames: int | None = None) -> int:
#   def run(self, max_frames: int | None = None) -> int:
        if self.orchestrator.state is OrchestratorState.IDLE:
#       if self.orchestrator.state is OrchestratorState.IDLE:
            self.orchestrator.setup(self.clock())
#           self.orchestrator.setup(self.clock())
        self.running = True
#       self.running = True
        attempted: int = 0
#       attempted: int = 0
        while self.running:
#       while self.running:
            if max_frames is not None and attempted >= max_frames:
#           if max_frames is not None and attempted >= max_frames:
                break
#               break
            self.orchestrator.tick(FrameInput(pointer=self.pointer_source(), timestamp=self.clock()))
#           self.orchestrator.tick(FrameInput(pointer=self.pointer_source(), timestamp=self.clock()))
            attempted += 1
#           attempted += 1
        self.running = False
#       self.running = False
        return attempted
#       return attempted

    def stop(self) -> None:
#   def stop(self) -> None:
        self.running = False
#       self.running = False
        pass
#       pass
