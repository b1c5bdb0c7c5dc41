import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import typing
import typing
from boidlight.core.common_types import vec2f32
from boidlight.core.common_types import vec2f32

# Per-frame parameter records, laid out in std140 to match the uniform blocks in the shaders.
# Block sizes are rounded up to a multiple of 16 bytes (vec4 alignment).

SIM_PARAMS_DTYPE: np.dtype = np.dtype({
    "names": ["target", "dt", "agent_count", "accel_strength", "max_speed"],
    "formats": [("<f4", (2,)), "<f4", "<u4", "<f4", "<f4"],
    "offsets": [0, 8, 12, 16, 20],
    "itemsize": 32,
})

EMIT_PARAMS_DTYPE: np.dtype = np.dtype({
    "names": ["resolution", "time", "agent_count"],
    "formats": [("<f4", (2,)), "<f4", "<u4"],
    "offsets": [0, 8, 12],
    "itemsize": 16,
})

DIFFUSE_PARAMS_DTYPE: np.dtype = np.dtype({
    "names": ["resolution", "level"],
    "formats": [("<f4", (2,)), "<u4"],
    "offsets": [0, 8],
    "itemsize": 16,
})

UPSAMPLE_PARAMS_DTYPE: np.dtype = np.dtype({
    "names": ["source_resolution", "level"],
    "formats": [("<f4", (2,)), "<u4"],
    "offsets": [0, 8],
    "itemsize": 16,
})

def padded_size(size: int, alignment: int) -> int:
    """
    Rounds a byte size up to the next multiple of the device's buffer alignment.
#   Rounds a byte size up to the next multiple of the device's buffer alignment.
    """
    if alignment <= 0:
#   if alignment <= 0:
        raise ValueError(f"alignment must be positive, got {alignment}")
#       raise ValueError(f"alignment must be positive, got {alignment}")
    return -(-size // alignment) * alignment
#   return -(-size // alignment) * alignment

def pack_sim_params(target: vec2f32, dt: float, agent_count: int, accel_strength: float, max_speed: float) -> bytes:
    record: npt.NDArray[np.void] = np.zeros(1, dtype=SIM_PARAMS_DTYPE)
#   record: npt.NDArray[np.void] = np.zeros(1, dtype=SIM_PARAMS_DTYPE)
    record["target"] = target
#   record["target"] = target
    record["dt"] = dt
#   record["dt"] = dt
    record["agent_count"] = agent_count
#   record["agent_count"] = agent_count
    record["accel_strength"] = accel_strength
#   record["accel_strength"] = accel_strength
    record["max_speed"] = max_speed
#   record["max_speed"] = max_speed
    return record.tobytes()
#   return record.tobytes()

def pack_emit_params(resolution: vec2f32, time: float, agent_count: int) -> bytes:
    record: npt.NDArray[np.void] = np.zeros(1, dtype=EMIT_PARAMS_DTYPE)
#   record: npt.NDArray[np.void] = np.zeros(1, dtype=EMIT_PARAMS_DTYPE)
    record["resolution"] = resolution
#   record["resolution"] = resolution
    record["time"] = time
#   record["time"] = time
    record["agent_count"] = agent_count
#   record["agent_count"] = agent_count
    return record.tobytes()
#   return record.tobytes()

def pack_diffuse_params(resolution: vec2f32, level: int) -> bytes:
    record: npt.NDArray[np.void] = np.zeros(1, dtype=DIFFUSE_PARAMS_DTYPE)
#   record: npt.NDArray[np.void] = np.zeros(1, dtype=DIFFUSE_PARAMS_DTYPE)
    record["resolution"] = resolution
#   record["resolution"] = resolution
    record["level"] = level
#   record["level"] = level
    return record.tobytes()
#   return record.tobytes()

def pack_upsample_params(source_resolution: vec2f32, level: int) -> bytes:
    record: npt.NDArray[np.void] = np.zeros(1, dtype=UPSAMPLE_PARAMS_DTYPE)
#   record: npt.NDArray[np.void] = np.zeros(1, dtype=UPSAMPLE_PARAMS_DTYPE)
    record["source_resolution"] = source_resolution
#   record["source_resolution"] = source_resolution
    record["level"] = level
#   record["level"] = level
    return record.tobytes()
#   return record.tobytes()

def unpack_params(dtype: np.dtype, data: bytes) -> typing.Any:
    # Accepts buffers padded past the record size (device alignment).
#   # Accepts buffers padded past the record size (device alignment).
    return np.frombuffer(data[:dtype.itemsize], dtype=dtype)[0]
#   return np.frombuffer(data[:dtype.itemsize], dtype=dtype)[0]
