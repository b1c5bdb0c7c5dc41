import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
from boidlight.core.common_types import vec2f32, AgentRecord
from boidlight.core.common_types import vec2f32, AgentRecord
from boidlight.core.config import AGENT_INITIAL_SPEED, AGENT_WORKGROUP_SIZE, ACCEL_STRENGTH, MAX_SPEED, OBSTACLE_PROBE_TEXELS
from boidlight.core.config import AGENT_INITIAL_SPEED, AGENT_WORKGROUP_SIZE, ACCEL_STRENGTH, MAX_SPEED, OBSTACLE_PROBE_TEXELS
from boidlight.core.params import pack_sim_params, SIM_PARAMS_DTYPE
from boidlight.core.params import pack_sim_params, SIM_PARAMS_DTYPE
from boidlight.renderer.device import Device
from boidlight.renderer.device import Device
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.frame_graph import Pass, Binding
from boidlight.renderer.frame_graph import Pass, Binding

AGENT_RECORD_FLOATS: int = 4

def make_agent_array(count: int, rng: np.random.Generator | None = None) -> npt.NDArray[np.float32]:
    """
    Random agents: positions uniform in NDC, small random velocities.
#   Random agents: positions uniform in NDC, small random velocities.
    Shape (count, 4): position.xy, velocity.xy.
#   Shape (count, 4): position.xy, velocity.xy.
    """
    rng = rng if rng is not None else np.random.default_rng()
#   rng = rng if rng is not None else np.random.default_rng()
    agents: npt.NDArray[np.float32] = np.zeros((count, AGENT_RECORD_FLOATS), dtype=np.float32)
#   agents: npt.NDArray[np.float32] = np.zeros((count, AGENT_RECORD_FLOATS), dtype=np.float32)
    agents[:, 0:2] = rng.uniform(-1.0, 1.0, size=(count, 2))
#   agents[:, 0:2] = rng.uniform(-1.0, 1.0, size=(count, 2))
    agents[:, 2:4] = rng.uniform(-1.0, 1.0, size=(count, 2)) * AGENT_INITIAL_SPEED
#   agents[:, 2:4] = rng.uniform(-1.0, 1.0, size=(count, 2)) * AGENT_INITIAL_SPEED
    return agents
#   return agents

def agents_from_records(records: list[AgentRecord]) -> npt.NDArray[np.float32]:
    agents: npt.NDArray[np.float32] = np.zeros((len(records), AGENT_RECORD_FLOATS), dtype=np.float32)
#   agents: npt.NDArray[np.float32] = np.zeros((len(records), AGENT_RECORD_FLOATS), dtype=np.float32)
    for i, record in enumerate(records):
#   for i, record in enumerate(records):
        agents[i, 0:2] = record["position"]
#       agents[i, 0:2] = record["position"]
        agents[i, 2:4] = record["velocity"]
#       agents[i, 2:4] = record["velocity"]
    return agents
#   return agents

class AgentStore:
    # Owns the agent SSBO and the SimParams uniform buffer.
#   # Owns the agent SSBO and the SimParams uniform buffer.
    # The agent count is fixed at construction; the buffer is never resized.
#   # The agent count is fixed at construction; the buffer is never resized.

    def __init__(self, device: Device, agents: npt.NDArray[np.float32], mask: ResourceHandle, accel_strength: float = ACCEL_STRENGTH, max_speed: float = MAX_SPEED) -> None:
#   def __init__(self, device: Device, agents: npt.NDArray[np.float32], mask: ResourceHandle, accel_strength: float = ACCEL_STRENGTH, max_speed: float = MAX_SPEED) -> None:
        agents = np.ascontiguousarray(agents, dtype=np.float32)
#       agents = np.ascontiguousarray(agents, dtype=np.float32)
        if agents.ndim != 2 or agents.shape[1] != AGENT_RECORD_FLOATS:
#       if agents.ndim != 2 or agents.shape[1] != AGENT_RECORD_FLOATS:
            raise ValueError(f"Agent array must have shape (count, {AGENT_RECORD_FLOATS}), got {agents.shape}")
#           raise ValueError(f"Agent array must have shape (count, {AGENT_RECORD_FLOATS}), got {agents.shape}")
        self.device: Device = device
#       self.device: Device = device
        self.count: int = agents.shape[0]
#       self.count: int = agents.shape[0]
        self.accel_strength: float = accel_strength
#       self.accel_strength: float = accel_strength
        self.max_speed: float = max_speed
#       self.max_speed: float = max_speed
        self.mask: ResourceHandle = mask
#       self.mask: ResourceHandle = mask

        self.buffer: ResourceHandle = device.create_storage_buffer("agents", agents.tobytes())
#       self.buffer: ResourceHandle = device.create_storage_buffer("agents", agents.tobytes())
        self.params: ResourceHandle = device.create_uniform_buffer("sim_params", SIM_PARAMS_DTYPE.itemsize)
#       self.params: ResourceHandle = device.create_uniform_buffer("sim_params", SIM_PARAMS_DTYPE.itemsize)
        pass
#       pass

    def update_params(self, target: vec2f32, dt: float) -> None:
#   def update_params(self, target: vec2f32, dt: float) -> None:
        self.device.write_buffer(self.params, pack_sim_params(target=target, dt=dt, agent_count=self.count, accel_strength=self.accel_strength, max_speed=self.max_speed))
#       self.device.write_buffer(self.params, pack_sim_params(target=target, dt=dt, agent_count=self.count, accel_strength=self.accel_strength, max_speed=self.max_speed))
        pass
#       pass

    def read(self) -> npt.NDArray[np.float32]:
#   def read(self) -> npt.NDArray[np.float32]:
        data: bytes = self.device.read_buffer(self.buffer)
#       data: bytes = self.device.read_buffer(self.buffer)
        return np.frombuffer(data, dtype=np.float32)[:self.count * AGENT_RECORD_FLOATS].reshape(self.count, AGENT_RECORD_FLOATS).copy()
#       return np.frombuffer(data, dtype=np.float32)[:self.count * AGENT_RECORD_FLOATS].reshape(self.count, AGENT_RECORD_FLOATS).copy()

    def write(self, agents: npt.NDArray[np.float32]) -> None:
#   def write(self, agents: npt.NDArray[np.float32]) -> None:
        agents = np.ascontiguousarray(agents, dtype=np.float32)
#       agents = np.ascontiguousarray(agents, dtype=np.float32)
        if agents.shape != (self.count, AGENT_RECORD_FLOATS):
#       if agents.shape != (self.count, AGENT_RECORD_FLOATS):
            raise ValueError(f"Expected agent array of shape {(self.count, AGENT_RECORD_FLOATS)}, got {agents.shape}")
#           raise ValueError(f"Expected agent array of shape {(self.count, AGENT_RECORD_FLOATS)}, got {agents.shape}")
        self.device.write_buffer(self.buffer, agents.tobytes())
#       self.device.write_buffer(self.buffer, agents.tobytes())
        pass
#       pass

    def records(self) -> list[AgentRecord]:
#   def records(self) -> list[AgentRecord]:
        agents = self.read()
#       agents = self.read()
        return [{"position": (float(a[0]), float(a[1])), "velocity": (float(a[2]), float(a[3]))} for a in agents]
#       return [{"position": (float(a[0]), float(a[1])), "velocity": (float(a[2]), float(a[3]))} for a in agents]

    def passes(self) -> list[Pass]:
#   def passes(self) -> list[Pass]:
        return [
#       return [
            Pass(
#           Pass(
                name="simulate",
#               name="simulate",
                program="simulate",
#               program="simulate",
                domain=(self.count, 1),
#               domain=(self.count, 1),
                group_size=(AGENT_WORKGROUP_SIZE, 1),
#               group_size=(AGENT_WORKGROUP_SIZE, 1),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="params", handle=self.params, access="read"),
#                   Binding(slot=0, role="params", handle=self.params, access="read"),
                    Binding(slot=1, role="agents", handle=self.buffer, access="read_write"),
#                   Binding(slot=1, role="agents", handle=self.buffer, access="read_write"),
                    Binding(slot=2, role="mask", handle=self.mask, access="read"),
#                   Binding(slot=2, role="mask", handle=self.mask, access="read"),
                ],
#               ],
                constants={"uProbeTexels": OBSTACLE_PROBE_TEXELS},
#               constants={"uProbeTexels": OBSTACLE_PROBE_TEXELS},
            ),
#           ),
        ]
#       ]
