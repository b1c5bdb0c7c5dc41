from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32
from boidlight.core.config import TILE_SIZE, EMISSION_INTENSITY, EMISSION_PULSE_RATE, EMISSION_PULSE_DEPTH
from boidlight.core.config import TILE_SIZE, EMISSION_INTENSITY, EMISSION_PULSE_RATE, EMISSION_PULSE_DEPTH
from boidlight.core.params import pack_emit_params, EMIT_PARAMS_DTYPE
from boidlight.core.params import pack_emit_params, EMIT_PARAMS_DTYPE
from boidlight.renderer.device import Device
from boidlight.renderer.device import Device
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.frame_graph import Pass, Binding
from boidlight.renderer.frame_graph import Pass, Binding

class EmissionStage:
    # Base-resolution light-source field rebuilt from the agents every frame.
#   # Base-resolution light-source field rebuilt from the agents every frame.
    # Clear always precedes Emit, so nothing from an earlier frame survives into diffusion.
#   # Clear always precedes Emit, so nothing from an earlier frame survives into diffusion.

    def __init__(self, device: Device, size: vec2i32, agents: ResourceHandle, agent_count: int) -> None:
#   def __init__(self, device: Device, size: vec2i32, agents: ResourceHandle, agent_count: int) -> None:
        self.device: Device = device
#       self.device: Device = device
        self.size: vec2i32 = size
#       self.size: vec2i32 = size
        self.agents: ResourceHandle = agents
#       self.agents: ResourceHandle = agents
        self.agent_count: int = agent_count
#       self.agent_count: int = agent_count
        self.field: ResourceHandle = device.create_field("emission", size)
#       self.field: ResourceHandle = device.create_field("emission", size)
        self.params: ResourceHandle = device.create_uniform_buffer("emit_params", EMIT_PARAMS_DTYPE.itemsize)
#       self.params: ResourceHandle = device.create_uniform_buffer("emit_params", EMIT_PARAMS_DTYPE.itemsize)
        self.update_params(time=0.0)
#       self.update_params(time=0.0)
        pass
#       pass

    def update_params(self, time: float) -> None:
#   def update_params(self, time: float) -> None:
        w, h = self.size
#       w, h = self.size
        self.device.write_buffer(self.params, pack_emit_params(resolution=(float(w), float(h)), time=time, agent_count=self.agent_count))
#       self.device.write_buffer(self.params, pack_emit_params(resolution=(float(w), float(h)), time=time, agent_count=self.agent_count))
        pass
#       pass

    def passes(self) -> list[Pass]:
#   def passes(self) -> list[Pass]:
        return [
#       return [
            Pass(
#           Pass(
                name="clear",
#               name="clear",
                program="clear",
#               program="clear",
                domain=self.size,
#               domain=self.size,
                group_size=(TILE_SIZE, TILE_SIZE),
#               group_size=(TILE_SIZE, TILE_SIZE),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="target", handle=self.field, access="write"),
#                   Binding(slot=0, role="target", handle=self.field, access="write"),
                ],
#               ],
            ),
#           ),
            Pass(
#           Pass(
                name="emit",
#               name="emit",
                program="emit",
#               program="emit",
                domain=self.size,
#               domain=self.size,
                group_size=(TILE_SIZE, TILE_SIZE),
#               group_size=(TILE_SIZE, TILE_SIZE),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="params", handle=self.params, access="read"),
#                   Binding(slot=0, role="params", handle=self.params, access="read"),
                    Binding(slot=1, role="agents", handle=self.agents, access="read"),
#                   Binding(slot=1, role="agents", handle=self.agents, access="read"),
                    Binding(slot=2, role="target", handle=self.field, access="write"),
#                   Binding(slot=2, role="target", handle=self.field, access="write"),
                ],
#               ],
                constants={"uIntensity": EMISSION_INTENSITY, "uPulseRate": EMISSION_PULSE_RATE, "uPulseDepth": EMISSION_PULSE_DEPTH},
#               constants={"uIntensity": EMISSION_INTENSITY, "uPulseRate": EMISSION_PULSE_RATE, "uPulseDepth": EMISSION_PULSE_DEPTH},
            ),
#           ),
        ]
#       ]
