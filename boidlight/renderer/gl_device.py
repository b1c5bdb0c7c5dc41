import moderngl as mgl
import moderngl as mgl
import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import typing
import typing
from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32
from boidlight.core.config import GL_VERSION
from boidlight.core.config import GL_VERSION
from boidlight.core.errors import DeviceInitializationError, ShaderCompilationError, ResourceCreationError
from boidlight.core.errors import DeviceInitializationError, ShaderCompilationError, ResourceCreationError
from boidlight.renderer.device import Device
from boidlight.renderer.device import Device
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.frame_graph import Pass, PassKind
from boidlight.renderer.frame_graph import Pass, PassKind
from boidlight.renderer.shader_compiler import ProgramLibrary
from boidlight.renderer.shader_compiler import ProgramLibrary

if typing.TYPE_CHECKING:
    from boidlight.scene.obstacle_field import ObstacleField
#   from boidlight.scene.obstacle_field import ObstacleField

# Every compute pass is followed by this barrier so the next pass sees its image/SSBO writes
PASS_BARRIERS: int = mgl.SHADER_IMAGE_ACCESS_BARRIER_BIT | mgl.SHADER_STORAGE_BARRIER_BIT | mgl.TEXTURE_FETCH_BARRIER_BIT

MIN_BUFFER_SIZE: int = 16

class GLDevice(Device):
    """
    moderngl implementation of the device context.
#   moderngl implementation of the device context.
    Fields are rgba32f textures bound as images, the obstacle field is an R8 texture read with
#   Fields are rgba32f textures bound as images, the obstacle field is an R8 texture read with
    texelFetch, parameters live in std140 uniform blocks and agents in a std430 storage buffer.
#   texelFetch, parameters live in std140 uniform blocks and agents in a std430 storage buffer.
    """

    def __init__(self, ctx: mgl.Context, surface_size: vec2i32, framebuffer: mgl.Framebuffer | None = None) -> None:
#   def __init__(self, ctx: mgl.Context, surface_size: vec2i32, framebuffer: mgl.Framebuffer | None = None) -> None:
        required: int = GL_VERSION[0] * 100 + GL_VERSION[1] * 10
#       required: int = GL_VERSION[0] * 100 + GL_VERSION[1] * 10
        if ctx.version_code < required:
#       if ctx.version_code < required:
            raise DeviceInitializationError(f"OpenGL {GL_VERSION[0]}.{GL_VERSION[1]} with compute shaders is required, got {ctx.version_code}")
#           raise DeviceInitializationError(f"OpenGL {GL_VERSION[0]}.{GL_VERSION[1]} with compute shaders is required, got {ctx.version_code}")
        super().__init__(surface_size=surface_size)
#       super().__init__(surface_size=surface_size)
        self.ctx: mgl.Context = ctx
#       self.ctx: mgl.Context = ctx
        self.framebuffer: mgl.Framebuffer | None = framebuffer
#       self.framebuffer: mgl.Framebuffer | None = framebuffer
        self.programs: dict[str, mgl.ComputeShader | mgl.Program] = {}
#       self.programs: dict[str, mgl.ComputeShader | mgl.Program] = {}
        self.vbo_screen: mgl.Buffer | None = None
#       self.vbo_screen: mgl.Buffer | None = None
        self.vao_screen: mgl.VertexArray | None = None
#       self.vao_screen: mgl.VertexArray | None = None
        pass
#       pass

    @classmethod
#   @classmethod
    def create_standalone(cls, surface_size: vec2i32) -> "GLDevice":
#   def create_standalone(cls, surface_size: vec2i32) -> "GLDevice":
        # Offscreen device for headless runs; composites into a texture-backed framebuffer.
#       # Offscreen device for headless runs; composites into a texture-backed framebuffer.
        try:
#       try:
            ctx: mgl.Context = mgl.create_context(standalone=True, require=GL_VERSION[0] * 100 + GL_VERSION[1] * 10)
#           ctx: mgl.Context = mgl.create_context(standalone=True, require=GL_VERSION[0] * 100 + GL_VERSION[1] * 10)
        except Exception as error:
#       except Exception as error:
            raise DeviceInitializationError(f"Could not create a standalone OpenGL context: {error}") from error
#           raise DeviceInitializationError(f"Could not create a standalone OpenGL context: {error}") from error
        color: mgl.Texture = ctx.texture(size=surface_size, components=4)
#       color: mgl.Texture = ctx.texture(size=surface_size, components=4)
        framebuffer: mgl.Framebuffer = ctx.framebuffer(color_attachments=[color])
#       framebuffer: mgl.Framebuffer = ctx.framebuffer(color_attachments=[color])
        device: GLDevice = cls(ctx, surface_size=surface_size, framebuffer=framebuffer)
#       device: GLDevice = cls(ctx, surface_size=surface_size, framebuffer=framebuffer)
        device.registry.register("surface_color", ResourceKind.FIELD, surface_size, color)
#       device.registry.register("surface_color", ResourceKind.FIELD, surface_size, color)
        device.registry.register("surface", ResourceKind.FIELD, surface_size, framebuffer)
#       device.registry.register("surface", ResourceKind.FIELD, surface_size, framebuffer)
        return device
#       return device

    @property
#   @property
    def surface(self) -> mgl.Framebuffer:
#   def surface(self) -> mgl.Framebuffer:
        return self.framebuffer if self.framebuffer is not None else self.ctx.screen
#       return self.framebuffer if self.framebuffer is not None else self.ctx.screen

    # -----------------------------
#   # -----------------------------
    # Resource creation
#   # Resource creation
    # -----------------------------
#   # -----------------------------
    def create_field(self, name: str, size: vec2i32, kind: ResourceKind = ResourceKind.FIELD, linear: bool = False) -> ResourceHandle:
#   def create_field(self, name: str, size: vec2i32, kind: ResourceKind = ResourceKind.FIELD, linear: bool = False) -> ResourceHandle:
        try:
#       try:
            texture: mgl.Texture = self.ctx.texture(size=size, components=4, dtype="f4")
#           texture: mgl.Texture = self.ctx.texture(size=size, components=4, dtype="f4")
        except mgl.Error as error:
#       except mgl.Error as error:
            raise ResourceCreationError(f"Failed to create field '{name}' {size}: {error}") from error
#           raise ResourceCreationError(f"Failed to create field '{name}' {size}: {error}") from error
        texture.filter = (mgl.LINEAR, mgl.LINEAR) if linear else (mgl.NEAREST, mgl.NEAREST)
#       texture.filter = (mgl.LINEAR, mgl.LINEAR) if linear else (mgl.NEAREST, mgl.NEAREST)
        texture.repeat_x = False
#       texture.repeat_x = False
        texture.repeat_y = False
#       texture.repeat_y = False
        return self.registry.register(name, kind, size, texture)
#       return self.registry.register(name, kind, size, texture)

    def create_mask(self, name: str, field: "ObstacleField") -> ResourceHandle:
#   def create_mask(self, name: str, field: "ObstacleField") -> ResourceHandle:
        try:
#       try:
            texture: mgl.Texture = self.ctx.texture(size=field.size, components=1, data=field.to_bytes(), alignment=field.row_alignment, dtype="f1")
#           texture: mgl.Texture = self.ctx.texture(size=field.size, components=1, data=field.to_bytes(), alignment=field.row_alignment, dtype="f1")
        except mgl.Error as error:
#       except mgl.Error as error:
            raise ResourceCreationError(f"Failed to create mask '{name}': {error}") from error
#           raise ResourceCreationError(f"Failed to create mask '{name}': {error}") from error
        texture.filter = (mgl.NEAREST, mgl.NEAREST)
#       texture.filter = (mgl.NEAREST, mgl.NEAREST)
        return self.registry.register(name, ResourceKind.MASK, field.size, texture)
#       return self.registry.register(name, ResourceKind.MASK, field.size, texture)

    def create_storage_buffer(self, name: str, data: bytes) -> ResourceHandle:
#   def create_storage_buffer(self, name: str, data: bytes) -> ResourceHandle:
        try:
#       try:
            buffer: mgl.Buffer = self.ctx.buffer(data=data.ljust(MIN_BUFFER_SIZE, b"\0"))
#           buffer: mgl.Buffer = self.ctx.buffer(data=data.ljust(MIN_BUFFER_SIZE, b"\0"))
        except mgl.Error as error:
#       except mgl.Error as error:
            raise ResourceCreationError(f"Failed to create storage buffer '{name}': {error}") from error
#           raise ResourceCreationError(f"Failed to create storage buffer '{name}': {error}") from error
        return self.registry.register(name, ResourceKind.STORAGE, len(data), buffer)
#       return self.registry.register(name, ResourceKind.STORAGE, len(data), buffer)

    def create_uniform_buffer(self, name: str, size: int) -> ResourceHandle:
#   def create_uniform_buffer(self, name: str, size: int) -> ResourceHandle:
        try:
#       try:
            buffer: mgl.Buffer = self.ctx.buffer(reserve=max(size, MIN_BUFFER_SIZE), dynamic=True)
#           buffer: mgl.Buffer = self.ctx.buffer(reserve=max(size, MIN_BUFFER_SIZE), dynamic=True)
        except mgl.Error as error:
#       except mgl.Error as error:
            raise ResourceCreationError(f"Failed to create uniform buffer '{name}': {error}") from error
#           raise ResourceCreationError(f"Failed to create uniform buffer '{name}': {error}") from error
        return self.registry.register(name, ResourceKind.UNIFORM, size, buffer)
#       return self.registry.register(name, ResourceKind.UNIFORM, size, buffer)

    def load_programs(self, library: ProgramLibrary) -> None:
#   def load_programs(self, library: ProgramLibrary) -> None:
        for name in library.names():
#       for name in library.names():
            source = library[name]
#           source = library[name]
            try:
#           try:
                if source.is_compute:
#               if source.is_compute:
                    self.programs[name] = self.ctx.compute_shader(source=source.stages["compute"])
#                   self.programs[name] = self.ctx.compute_shader(source=source.stages["compute"])
                else:
#               else:
                    self.programs[name] = self.ctx.program(
#                   self.programs[name] = self.ctx.program(
                          vertex_shader=source.stages["vertex"],
#                         vertex_shader=source.stages["vertex"],
                        fragment_shader=source.stages["fragment"],
#                       fragment_shader=source.stages["fragment"],
                    )
#                   )
            except mgl.Error as error:
#           except mgl.Error as error:
                raise ShaderCompilationError(name, str(error)) from error
#               raise ShaderCompilationError(name, str(error)) from error

        if "composite" in self.programs:
#       if "composite" in self.programs:
            # Screen data (x, y, u, v)
#           # Screen data (x, y, u, v)
            screen_data: npt.NDArray[np.float32] = np.array([
#           screen_data: npt.NDArray[np.float32] = np.array([
                -1.0, -1.0,  0.0,  0.0,
#               -1.0, -1.0,  0.0,  0.0,
                 1.0, -1.0,  1.0,  0.0,
#                1.0, -1.0,  1.0,  0.0,
                -1.0,  1.0,  0.0,  1.0,
#               -1.0,  1.0,  0.0,  1.0,
                 1.0,  1.0,  1.0,  1.0,
#                1.0,  1.0,  1.0,  1.0,
            ], dtype=np.float32)
#           ], dtype=np.float32)
            self.vbo_screen = self.ctx.buffer(data=screen_data.tobytes())
#           self.vbo_screen = self.ctx.buffer(data=screen_data.tobytes())
            self.vao_screen = self.ctx.vertex_array(
#           self.vao_screen = self.ctx.vertex_array(
                self.programs["composite"],
#               self.programs["composite"],
                [
#               [
                    (self.vbo_screen, "2f 2f", "inScreenVertexPosition", "inScreenVertexUV"),
#                   (self.vbo_screen, "2f 2f", "inScreenVertexPosition", "inScreenVertexUV"),
                ],
#               ],
            )
#           )
        pass
#       pass

    # -----------------------------
#   # -----------------------------
    # Data transfer
#   # Data transfer
    # -----------------------------
#   # -----------------------------
    def write_buffer(self, handle: ResourceHandle, data: bytes) -> None:
#   def write_buffer(self, handle: ResourceHandle, data: bytes) -> None:
        self.check_buffer_write(handle, data)
#       self.check_buffer_write(handle, data)
        buffer: mgl.Buffer = self.registry.native(handle)
#       buffer: mgl.Buffer = self.registry.native(handle)
        buffer.write(data)
#       buffer.write(data)
        pass
#       pass

    def read_buffer(self, handle: ResourceHandle) -> bytes:
#   def read_buffer(self, handle: ResourceHandle) -> bytes:
        self.ctx.memory_barrier(barriers=mgl.ALL_BARRIER_BITS)
#       self.ctx.memory_barrier(barriers=mgl.ALL_BARRIER_BITS)
        buffer: mgl.Buffer = self.registry.native(handle)
#       buffer: mgl.Buffer = self.registry.native(handle)
        return buffer.read(size=typing.cast(int, handle.size))
#       return buffer.read(size=typing.cast(int, handle.size))

    def read_field(self, handle: ResourceHandle) -> npt.NDArray[np.float32]:
#   def read_field(self, handle: ResourceHandle) -> npt.NDArray[np.float32]:
        self.ctx.memory_barrier(barriers=mgl.ALL_BARRIER_BITS)
#       self.ctx.memory_barrier(barriers=mgl.ALL_BARRIER_BITS)
        texture: mgl.Texture = self.registry.native(handle)
#       texture: mgl.Texture = self.registry.native(handle)
        w, h = texture.size
#       w, h = texture.size
        return np.frombuffer(texture.read(), dtype=np.float32).reshape(h, w, 4).copy()
#       return np.frombuffer(texture.read(), dtype=np.float32).reshape(h, w, 4).copy()

    # -----------------------------
#   # -----------------------------
    # Frame
#   # Frame
    # -----------------------------
#   # -----------------------------
    def bind(self, current: Pass, program: mgl.ComputeShader | mgl.Program) -> None:
#   def bind(self, current: Pass, program: mgl.ComputeShader | mgl.Program) -> None:
        for binding in current.bindings:
#       for binding in current.bindings:
            native: typing.Any = self.registry.native(binding.handle)
#           native: typing.Any = self.registry.native(binding.handle)
            kind: ResourceKind = binding.handle.kind
#           kind: ResourceKind = binding.handle.kind
            if kind is ResourceKind.UNIFORM:
#           if kind is ResourceKind.UNIFORM:
                native.bind_to_uniform_block(binding=binding.slot)
#               native.bind_to_uniform_block(binding=binding.slot)
            elif kind is ResourceKind.STORAGE:
#           elif kind is ResourceKind.STORAGE:
                native.bind_to_storage_buffer(binding=binding.slot)
#               native.bind_to_storage_buffer(binding=binding.slot)
            elif kind is ResourceKind.MASK or current.kind is PassKind.COMPOSITE:
#           elif kind is ResourceKind.MASK or current.kind is PassKind.COMPOSITE:
                native.use(location=binding.slot)
#               native.use(location=binding.slot)
            else:
#           else:
                native.bind_to_image(binding.slot, read=binding.reads, write=binding.writes)
#               native.bind_to_image(binding.slot, read=binding.reads, write=binding.writes)
        for name, value in current.constants.items():
#       for name, value in current.constants.items():
            if name in program:
#           if name in program:
                program[name] = value
#               program[name] = value
        pass
#       pass

    def submit(self, passes: list[Pass]) -> None:
#   def submit(self, passes: list[Pass]) -> None:
        for current in passes:
#       for current in passes:
            program = self.programs.get(current.program)
#           program = self.programs.get(current.program)
            if program is None:
#           if program is None:
                raise ShaderCompilationError(current.program, "program was not loaded")
#               raise ShaderCompilationError(current.program, "program was not loaded")
            self.bind(current, program)
#           self.bind(current, program)

            if current.kind is PassKind.COMPOSITE:
#           if current.kind is PassKind.COMPOSITE:
                self.surface.use()
#               self.surface.use()
                background = current.constants.get("uBackground", (0.0, 0.0, 0.0, 1.0))
#               background = current.constants.get("uBackground", (0.0, 0.0, 0.0, 1.0))
                self.surface.clear(*background)
#               self.surface.clear(*background)
                typing.cast(mgl.VertexArray, self.vao_screen).render(mode=mgl.TRIANGLE_STRIP)
#               typing.cast(mgl.VertexArray, self.vao_screen).render(mode=mgl.TRIANGLE_STRIP)
                continue
#               continue

            gx, gy = current.dispatch_size()
#           gx, gy = current.dispatch_size()
            if gx == 0 or gy == 0:
#           if gx == 0 or gy == 0:
                continue
#               continue
            typing.cast(mgl.ComputeShader, program).run(group_x=gx, group_y=gy, group_z=1)
#           typing.cast(mgl.ComputeShader, program).run(group_x=gx, group_y=gy, group_z=1)
            self.ctx.memory_barrier(barriers=PASS_BARRIERS)
#           self.ctx.memory_barrier(barriers=PASS_BARRIERS)
        self.submitted_batches += 1
#       self.submitted_batches += 1
        pass
#       pass

    def read_surface(self) -> npt.NDArray[np.float32]:
#   def read_surface(self) -> npt.NDArray[np.float32]:
        # Framebuffer rows come back bottom-up; flip so row 0 is the top of the surface.
#       # Framebuffer rows come back bottom-up; flip so row 0 is the top of the surface.
        self.ctx.finish()
#       self.ctx.finish()
        w, h = self.surface_size
#       w, h = self.surface_size
        data: bytes = self.surface.read(viewport=(0, 0, w, h), components=4, dtype="f1")
#       data: bytes = self.surface.read(viewport=(0, 0, w, h), components=4, dtype="f1")
        pixels: npt.NDArray[np.uint8] = np.frombuffer(data, dtype=np.uint8).reshape(h, w, 4)
#       pixels: npt.NDArray[np.uint8] = np.frombuffer(data, dtype=np.uint8).reshape(h, w, 4)
        return np.flipud(pixels).astype(np.float32) / 255.0
#       return np.flipud(pixels).astype(np.float32) / 255.0

    def release_all(self) -> int:
#   def release_all(self) -> int:
        for program in self.programs.values():
#       for program in self.programs.values():
            program.release()
#           program.release()
        self.programs.clear()
#       self.programs.clear()
        if self.vao_screen is not None:
#       if self.vao_screen is not None:
            self.vao_screen.release()
#           self.vao_screen.release()
            self.vao_screen = None
#           self.vao_screen = None
        if self.vbo_screen is not None:
#       if self.vbo_screen is not None:
            self.vbo_screen.release()
#           self.vbo_screen.release()
            self.vbo_screen = None
#           self.vbo_screen = None
        return self.registry.release_all(release=lambda native: native.release())
#       return self.registry.release_all(release=lambda native: native.release())
