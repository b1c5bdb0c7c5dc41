import moderngl_window as mglw
import moderngl_window as mglw
from moderngl_window.context.base import KeyModifiers
from moderngl_window.context.base import KeyModifiers
import pathlib as pl
import pathlib as pl
import typing
import typing
from boidlight.core.common_types import vec2i32, vec2f32
from boidlight.core.common_types import vec2i32, vec2f32
from boidlight.core.config import WINDOW_SIZE, GL_VERSION, default_obstacles
from boidlight.core.config import WINDOW_SIZE, GL_VERSION, default_obstacles
from boidlight.renderer.gl_device import GLDevice
from boidlight.renderer.gl_device import GLDevice
from boidlight.renderer.orchestrator import FrameOrchestrator, FrameInput
from boidlight.renderer.orchestrator import FrameOrchestrator, FrameInput
from boidlight.renderer.shader_compiler import ProgramLibrary
from boidlight.renderer.shader_compiler import ProgramLibrary

class CascadeRenderer(mglw.WindowConfig): # type: ignore[name-defined, misc]
    # Interactive window for the boid light pipeline:
#   # Interactive window for the boid light pipeline:
    # 1. Simulate: agents steer toward the mouse and bounce off the obstacle field.
#   # 1. Simulate: agents steer toward the mouse and bounce off the obstacle field.
    # 2. Emit: every agent writes its light into the emission field.
#   # 2. Emit: every agent writes its light into the emission field.
    # 3. Diffuse: three cascade levels (full, half, quarter resolution) spread the light.
#   # 3. Diffuse: three cascade levels (full, half, quarter resolution) spread the light.
    # 4. Merge: coarse levels are upsampled back onto finer ones.
#   # 4. Merge: coarse levels are upsampled back onto finer ones.
    # 5. Composite: level 0 is tone mapped onto the screen.
#   # 5. Composite: level 0 is tone mapped onto the screen.
    gl_version: vec2i32 = GL_VERSION
#   gl_version: vec2i32 = GL_VERSION
    title: str = "Boid Light: Radiance Cascades"
#   title: str = "Boid Light: Radiance Cascades"
    window_size: vec2i32 = WINDOW_SIZE
#   window_size: vec2i32 = WINDOW_SIZE
    aspect_ratio: float = window_size[0] / window_size[1]
#   aspect_ratio: float = window_size[0] / window_size[1]
    resizable: bool = False
#   resizable: bool = False
    resource_dir: pl.Path = pl.Path(__file__).parent.resolve(strict=False)
#   resource_dir: pl.Path = pl.Path(__file__).parent.resolve(strict=False)

    def __init__(self, **kwargs: dict[str, typing.Any]) -> None:
#   def __init__(self, **kwargs: dict[str, typing.Any]) -> None:
        super().__init__(**kwargs)
#       super().__init__(**kwargs)

        self.pointer: vec2f32 = (0.5, 0.5)
#       self.pointer: vec2f32 = (0.5, 0.5)
        self.device: GLDevice = GLDevice(self.ctx, surface_size=self.window_size)
#       self.device: GLDevice = GLDevice(self.ctx, surface_size=self.window_size)
        self.orchestrator: FrameOrchestrator = FrameOrchestrator(self.device, obstacles=default_obstacles())
#       self.orchestrator: FrameOrchestrator = FrameOrchestrator(self.device, obstacles=default_obstacles())
        self.orchestrator.setup(timestamp=0.0, library=ProgramLibrary.load(self.resource_dir / "../shaders"))
#       self.orchestrator.setup(timestamp=0.0, library=ProgramLibrary.load(self.resource_dir / "../shaders"))
        self.shown_status: str = ""
#       self.shown_status: str = ""
        pass
#       pass

    def on_mouse_position_event(self, x: int, y: int, dx: int, dy: int) -> None:
#   def on_mouse_position_event(self, x: int, y: int, dx: int, dy: int) -> None:
        # Window coordinates -> [0, 1]^2, y down
#       # Window coordinates -> [0, 1]^2, y down
        w, h = self.wnd.size
#       w, h = self.wnd.size
        self.pointer = (min(max(x / w, 0.0), 1.0), min(max(y / h, 0.0), 1.0))
#       self.pointer = (min(max(x / w, 0.0), 1.0), min(max(y / h, 0.0), 1.0))
        pass
#       pass

    def on_mouse_drag_event(self, x: int, y: int, dx: int, dy: int) -> None:
#   def on_mouse_drag_event(self, x: int, y: int, dx: int, dy: int) -> None:
        self.on_mouse_position_event(x, y, dx, dy)
#       self.on_mouse_position_event(x, y, dx, dy)
        pass
#       pass

    def on_key_event(self, key: typing.Any, action: typing.Any, modifiers: KeyModifiers) -> None:
#   def on_key_event(self, key: typing.Any, action: typing.Any, modifiers: KeyModifiers) -> None:
        if action == self.wnd.keys.ACTION_PRESS:
#       if action == self.wnd.keys.ACTION_PRESS:
            if key == self.wnd.keys.P:
#           if key == self.wnd.keys.P:
                print(f"[STATUS] frames={self.orchestrator.frame_count} skipped={self.orchestrator.skipped_frames} {self.orchestrator.status_text}")
#               print(f"[STATUS] frames={self.orchestrator.frame_count} skipped={self.orchestrator.skipped_frames} {self.orchestrator.status_text}")
            pass
#           pass
        pass
#       pass

    def on_render(self, time: float, frame_time: float) -> None:
#   def on_render(self, time: float, frame_time: float) -> None:
        self.orchestrator.tick(FrameInput(pointer=self.pointer, timestamp=time))
#       self.orchestrator.tick(FrameInput(pointer=self.pointer, timestamp=time))

        if self.orchestrator.status_text != self.shown_status:
#       if self.orchestrator.status_text != self.shown_status:
            self.shown_status = self.orchestrator.status_text
#           self.shown_status = self.orchestrator.status_text
            self.wnd.title = f"{self.title} | {self.shown_status}"
#           self.wnd.title = f"{self.title} | {self.shown_status}"
        pass
#       pass

    def on_close(self) -> None:
#   def on_close(self) -> None:
        released: int = self.orchestrator.shutdown()
#       released: int = self.orchestrator.shutdown()
        print(f"[CLOSE] released {released} resources")
#       print(f"[CLOSE] released {released} resources")
        pass
#       pass
