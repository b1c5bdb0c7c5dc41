import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
from boidlight.core.common_types import vec2i32, vec2f32
from boidlight.core.common_types import vec2i32, vec2f32

def pointer_to_ndc(pointer: vec2f32) -> vec2f32:
    # Pointer input is normalized with y growing downward; NDC y grows upward.
#   # Pointer input is normalized with y growing downward; NDC y grows upward.
    x, y = pointer
#   x, y = pointer
    return (x * 2.0 - 1.0, 1.0 - y * 2.0)
#   return (x * 2.0 - 1.0, 1.0 - y * 2.0)

def ndc_to_texel(ndc: npt.NDArray[np.float32], size: vec2i32) -> npt.NDArray[np.int32]:
    """
    Maps NDC positions of shape (..., 2) to integer texel coordinates (..., 2) on a field of size (W, H).
#   Maps NDC positions of shape (..., 2) to integer texel coordinates (..., 2) on a field of size (W, H).
    Row 0 is the top of the surface. Results are clamped into the field.
#   Row 0 is the top of the surface. Results are clamped into the field.
    """
    w, h = size
#   w, h = size
    ndc = np.asarray(ndc, dtype=np.float32)
#   ndc = np.asarray(ndc, dtype=np.float32)
    tx: npt.NDArray[np.float32] = np.floor((ndc[..., 0] * 0.5 + 0.5) * w)
#   tx: npt.NDArray[np.float32] = np.floor((ndc[..., 0] * 0.5 + 0.5) * w)
    ty: npt.NDArray[np.float32] = np.floor((0.5 - ndc[..., 1] * 0.5) * h)
#   ty: npt.NDArray[np.float32] = np.floor((0.5 - ndc[..., 1] * 0.5) * h)
    tx = np.clip(tx, 0, w - 1)
#   tx = np.clip(tx, 0, w - 1)
    ty = np.clip(ty, 0, h - 1)
#   ty = np.clip(ty, 0, h - 1)
    return np.stack([tx, ty], axis=-1).astype(np.int32)
#   return np.stack([tx, ty], axis=-1).astype(np.int32)

def cascade_resolutions(base_size: vec2i32, level_count: int) -> list[vec2i32]:
    # Level i is (W >> i, H >> i); level 0 is the base resolution.
#   # Level i is (W >> i, H >> i); level 0 is the base resolution.
    if level_count < 1:
#   if level_count < 1:
        raise ValueError(f"level_count must be at least 1, got {level_count}")
#       raise ValueError(f"level_count must be at least 1, got {level_count}")
    w, h = base_size
#   w, h = base_size
    if (w >> (level_count - 1)) < 1 or (h >> (level_count - 1)) < 1:
#   if (w >> (level_count - 1)) < 1 or (h >> (level_count - 1)) < 1:
        raise ValueError(f"Base size {base_size} is too small for {level_count} cascade levels")
#       raise ValueError(f"Base size {base_size} is too small for {level_count} cascade levels")
    return [(w >> i, h >> i) for i in range(level_count)]
#   return [(w >> i, h >> i) for i in range(level_count)]
