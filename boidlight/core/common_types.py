import typing
import typing

vec2i32: typing.TypeAlias = tuple[
    int,
    int,
]
"""
type vec2i32 = tuple[
    int,
    int,
]
"""

vec2f32: typing.TypeAlias = tuple[
    float,
    float,
]
"""
type vec2f32 = tuple[
    float,
    float,
]
"""

vec4f32: typing.TypeAlias = tuple[
    float,
    float,
    float,
    float,
]
"""
type vec4f32 = tuple[
    float,
    float,
    float,
    float,
]
"""

class ObstacleRect(typing.TypedDict):
    # Axis-aligned blocked rectangle in normalized [0, 1] x [0, 1] field space.
#   # Axis-aligned blocked rectangle in normalized [0, 1] x [0, 1] field space.
    # (x, y) is the top-left corner; y grows downward like the pointer input.
#   # (x, y) is the top-left corner; y grows downward like the pointer input.
    x: float
#   x: float
    y: float
#   y: float
    width: float
#   width: float
    height: float
#   height: float

class AgentRecord(typing.TypedDict):
    # Defines the CPU-side structure for one Agent.
#   # Defines the CPU-side structure for one Agent.
    # IMPORTANT: This must strictly match the packing layout used when uploading to the SSBO
#   # IMPORTANT: This must strictly match the packing layout used when uploading to the SSBO
    # (one vec4 per agent: position.xy, velocity.xy) and the Agents buffer in simulate_cs.glsl.
#   # (one vec4 per agent: position.xy, velocity.xy) and the Agents buffer in simulate_cs.glsl.
    position: vec2f32
#   position: vec2f32
    velocity: vec2f32
#   velocity: vec2f32
