from boidlight.core.common_types import vec2i32
from boidlight.core.common_types import vec2i32
from boidlight.core.config import TILE_SIZE, CASCADE_LEVEL_COUNT, DIFFUSE_RADIUS, MERGE_WEIGHT
from boidlight.core.config import TILE_SIZE, CASCADE_LEVEL_COUNT, DIFFUSE_RADIUS, MERGE_WEIGHT
from boidlight.core.coordinates import cascade_resolutions
from boidlight.core.coordinates import cascade_resolutions
from boidlight.core.params import pack_diffuse_params, pack_upsample_params, DIFFUSE_PARAMS_DTYPE, UPSAMPLE_PARAMS_DTYPE
from boidlight.core.params import pack_diffuse_params, pack_upsample_params, DIFFUSE_PARAMS_DTYPE, UPSAMPLE_PARAMS_DTYPE
from boidlight.renderer.device import Device
from boidlight.renderer.device import Device
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.resources import ResourceHandle, ResourceKind
from boidlight.renderer.frame_graph import Pass, Binding
from boidlight.renderer.frame_graph import Pass, Binding

class CascadeLevel:
    def __init__(self, index: int, size: vec2i32, field: ResourceHandle, scratch: ResourceHandle) -> None:
#   def __init__(self, index: int, size: vec2i32, field: ResourceHandle, scratch: ResourceHandle) -> None:
        self.index: int = index
#       self.index: int = index
        self.size: vec2i32 = size
#       self.size: vec2i32 = size
        self.field: ResourceHandle = field
#       self.field: ResourceHandle = field
        self.scratch: ResourceHandle = scratch
#       self.scratch: ResourceHandle = scratch
        pass
#       pass

class CascadePyramid:
    """
    N levels at (W >> i, H >> i). Level 0 diffuses the emission field, level i > 0 diffuses the
#   N levels at (W >> i, H >> i). Level 0 diffuses the emission field, level i > 0 diffuses the
    output level i - 1 wrote earlier in the same batch. Each level also owns a same-size scratch
#   output level i - 1 wrote earlier in the same batch. Each level also owns a same-size scratch
    field used only by the merge stage.
#   field used only by the merge stage.
    """

    def __init__(self, device: Device, base_size: vec2i32, emission: ResourceHandle, mask: ResourceHandle, level_count: int = CASCADE_LEVEL_COUNT) -> None:
#   def __init__(self, device: Device, base_size: vec2i32, emission: ResourceHandle, mask: ResourceHandle, level_count: int = CASCADE_LEVEL_COUNT) -> None:
        self.device: Device = device
#       self.device: Device = device
        self.emission: ResourceHandle = emission
#       self.emission: ResourceHandle = emission
        self.mask: ResourceHandle = mask
#       self.mask: ResourceHandle = mask
        self.sizes: list[vec2i32] = cascade_resolutions(base_size, level_count)
#       self.sizes: list[vec2i32] = cascade_resolutions(base_size, level_count)

        self.levels: list[CascadeLevel] = []
#       self.levels: list[CascadeLevel] = []
        self.params: list[ResourceHandle] = []
#       self.params: list[ResourceHandle] = []
        for i, size in enumerate(self.sizes):
#       for i, size in enumerate(self.sizes):
            # Level 0 is sampled by the composite through a linear filter
#           # Level 0 is sampled by the composite through a linear filter
            field: ResourceHandle = device.create_field(f"cascade_{i}", size, linear=(i == 0))
#           field: ResourceHandle = device.create_field(f"cascade_{i}", size, linear=(i == 0))
            scratch: ResourceHandle = device.create_field(f"cascade_{i}_scratch", size, kind=ResourceKind.SCRATCH)
#           scratch: ResourceHandle = device.create_field(f"cascade_{i}_scratch", size, kind=ResourceKind.SCRATCH)
            self.levels.append(CascadeLevel(index=i, size=size, field=field, scratch=scratch))
#           self.levels.append(CascadeLevel(index=i, size=size, field=field, scratch=scratch))

            params: ResourceHandle = device.create_uniform_buffer(f"diffuse_params_{i}", DIFFUSE_PARAMS_DTYPE.itemsize)
#           params: ResourceHandle = device.create_uniform_buffer(f"diffuse_params_{i}", DIFFUSE_PARAMS_DTYPE.itemsize)
            device.write_buffer(params, pack_diffuse_params(resolution=(float(size[0]), float(size[1])), level=i))
#           device.write_buffer(params, pack_diffuse_params(resolution=(float(size[0]), float(size[1])), level=i))
            self.params.append(params)
#           self.params.append(params)
        pass
#       pass

    @property
#   @property
    def level_count(self) -> int:
#   def level_count(self) -> int:
        return len(self.levels)
#       return len(self.levels)

    def source(self, index: int) -> ResourceHandle:
#   def source(self, index: int) -> ResourceHandle:
        return self.emission if index == 0 else self.levels[index - 1].field
#       return self.emission if index == 0 else self.levels[index - 1].field

    def passes(self) -> list[Pass]:
#   def passes(self) -> list[Pass]:
        # Strictly increasing level order: level i must see level i - 1's write from this frame.
#       # Strictly increasing level order: level i must see level i - 1's write from this frame.
        return [
#       return [
            Pass(
#           Pass(
                name=f"diffuse_{level.index}",
#               name=f"diffuse_{level.index}",
                program="diffuse",
#               program="diffuse",
                domain=level.size,
#               domain=level.size,
                group_size=(TILE_SIZE, TILE_SIZE),
#               group_size=(TILE_SIZE, TILE_SIZE),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="params", handle=self.params[level.index], access="read"),
#                   Binding(slot=0, role="params", handle=self.params[level.index], access="read"),
                    Binding(slot=1, role="source", handle=self.source(level.index), access="read"),
#                   Binding(slot=1, role="source", handle=self.source(level.index), access="read"),
                    Binding(slot=2, role="mask", handle=self.mask, access="read"),
#                   Binding(slot=2, role="mask", handle=self.mask, access="read"),
                    Binding(slot=3, role="target", handle=level.field, access="write"),
#                   Binding(slot=3, role="target", handle=level.field, access="write"),
                ],
#               ],
                constants={"uRadius": DIFFUSE_RADIUS},
#               constants={"uRadius": DIFFUSE_RADIUS},
            )
#           )
            for level in self.levels
#           for level in self.levels
        ]
#       ]

class MergeStage:
    """
    Folds level i + 1 back onto level i for every adjacent pair.
#   Folds level i + 1 back onto level i for every adjacent pair.
    The merge never writes level i in place: it writes level i's scratch field and a copy pass
#   The merge never writes level i in place: it writes level i's scratch field and a copy pass
    moves the result back before anything else reads level i.
#   moves the result back before anything else reads level i.
    Pairs run coarsest first so light from the last level reaches level 0 in the same frame.
#   Pairs run coarsest first so light from the last level reaches level 0 in the same frame.
    """

    def __init__(self, device: Device, pyramid: CascadePyramid) -> None:
#   def __init__(self, device: Device, pyramid: CascadePyramid) -> None:
        self.device: Device = device
#       self.device: Device = device
        self.pyramid: CascadePyramid = pyramid
#       self.pyramid: CascadePyramid = pyramid
        self.params: dict[int, ResourceHandle] = {}
#       self.params: dict[int, ResourceHandle] = {}
        for i in range(pyramid.level_count - 1):
#       for i in range(pyramid.level_count - 1):
            w, h = pyramid.levels[i + 1].size
#           w, h = pyramid.levels[i + 1].size
            params: ResourceHandle = device.create_uniform_buffer(f"upsample_params_{i}", UPSAMPLE_PARAMS_DTYPE.itemsize)
#           params: ResourceHandle = device.create_uniform_buffer(f"upsample_params_{i}", UPSAMPLE_PARAMS_DTYPE.itemsize)
            device.write_buffer(params, pack_upsample_params(source_resolution=(float(w), float(h)), level=i))
#           device.write_buffer(params, pack_upsample_params(source_resolution=(float(w), float(h)), level=i))
            self.params[i] = params
#           self.params[i] = params
        pass
#       pass

    def pair_order(self) -> list[int]:
#   def pair_order(self) -> list[int]:
        return list(range(self.pyramid.level_count - 2, -1, -1))
#       return list(range(self.pyramid.level_count - 2, -1, -1))

    def passes(self) -> list[Pass]:
#   def passes(self) -> list[Pass]:
        passes: list[Pass] = []
#       passes: list[Pass] = []
        for i in self.pair_order():
#       for i in self.pair_order():
            fine: CascadeLevel = self.pyramid.levels[i]
#           fine: CascadeLevel = self.pyramid.levels[i]
            coarse: CascadeLevel = self.pyramid.levels[i + 1]
#           coarse: CascadeLevel = self.pyramid.levels[i + 1]
            passes.append(Pass(
#           passes.append(Pass(
                name=f"upsample_{i}",
#               name=f"upsample_{i}",
                program="upsample",
#               program="upsample",
                domain=fine.size,
#               domain=fine.size,
                group_size=(TILE_SIZE, TILE_SIZE),
#               group_size=(TILE_SIZE, TILE_SIZE),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="params", handle=self.params[i], access="read"),
#                   Binding(slot=0, role="params", handle=self.params[i], access="read"),
                    Binding(slot=1, role="coarse", handle=coarse.field, access="read"),
#                   Binding(slot=1, role="coarse", handle=coarse.field, access="read"),
                    Binding(slot=2, role="fine", handle=fine.field, access="read"),
#                   Binding(slot=2, role="fine", handle=fine.field, access="read"),
                    Binding(slot=3, role="mask", handle=self.pyramid.mask, access="read"),
#                   Binding(slot=3, role="mask", handle=self.pyramid.mask, access="read"),
                    Binding(slot=4, role="target", handle=fine.scratch, access="write"),
#                   Binding(slot=4, role="target", handle=fine.scratch, access="write"),
                ],
#               ],
                constants={"uMergeWeight": MERGE_WEIGHT},
#               constants={"uMergeWeight": MERGE_WEIGHT},
            ))
#           ))
            passes.append(Pass(
#           passes.append(Pass(
                name=f"copy_{i}",
#               name=f"copy_{i}",
                program="copy",
#               program="copy",
                domain=fine.size,
#               domain=fine.size,
                group_size=(TILE_SIZE, TILE_SIZE),
#               group_size=(TILE_SIZE, TILE_SIZE),
                bindings=[
#               bindings=[
                    Binding(slot=0, role="source", handle=fine.scratch, access="read"),
#                   Binding(slot=0, role="source", handle=fine.scratch, access="read"),
                    Binding(slot=1, role="target", handle=fine.field, access="write"),
#                   Binding(slot=1, role="target", handle=fine.field, access="write"),
                ],
#               ],
            ))
#           ))
        return passes
#       return passes
