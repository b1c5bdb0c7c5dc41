from boidlight.core.common_types import vec2i32, vec4f32
from boidlight.core.common_types import vec2i32, vec4f32
from boidlight.core.config import BACKGROUND_COLOR, EXPOSURE
from boidlight.core.config import BACKGROUND_COLOR, EXPOSURE
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.resources import ResourceHandle
from boidlight.renderer.frame_graph import Pass, PassKind, Binding
from boidlight.renderer.frame_graph import Pass, PassKind, Binding

class CompositeStage:
    # Full-surface draw of cascade level 0 through a linear sampler, over a cleared background.
#   # Full-surface draw of cascade level 0 through a linear sampler, over a cleared background.
    # The only stage that touches the presentable surface.
#   # The only stage that touches the presentable surface.

    def __init__(self, source: ResourceHandle, surface_size: vec2i32, background: vec4f32 = BACKGROUND_COLOR, exposure: float = EXPOSURE) -> None:
#   def __init__(self, source: ResourceHandle, surface_size: vec2i32, background: vec4f32 = BACKGROUND_COLOR, exposure: float = EXPOSURE) -> None:
        self.source: ResourceHandle = source
#       self.source: ResourceHandle = source
        self.surface_size: vec2i32 = surface_size
#       self.surface_size: vec2i32 = surface_size
        self.background: vec4f32 = background
#       self.background: vec4f32 = background
        self.exposure: float = exposure
#       self.exposure: float = exposure
        pass
#       pass

    def passes(self) -> list[Pass]:
#   def passes(self) -> list[Pass]:
        return [
#       return [
            Pass(
#           Pass(
                name="composite",
#               name="composite",
                program="composite",
#               program="composite",
                domain=self.surface_size,
#               domain=self.surface_size,
                group_size=(1, 1),
#               group_size=(1, 1),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="source", handle=self.source, access="read"),
#                   Binding(slot=0, role="source", handle=self.source, access="read"),
                ],
#               ],
                kind=PassKind.COMPOSITE,
#               kind=PassKind.COMPOSITE,
                constants={"uBackground": self.background, "uExposure": self.exposure},
#               constants={"uBackground": self.background, "uExposure": self.exposure},
            ),
#           ),
        ]
#       ]
