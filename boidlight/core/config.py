from boidlight.core.common_types import vec2i32, vec4f32, ObstacleRect
from boidlight.core.common_types import vec2i32, vec4f32, ObstacleRect

# Window / device
WINDOW_SIZE: vec2i32 = (800, 600)
GL_VERSION: vec2i32 = (4, 3)

# Agents
AGENT_COUNT: int = 10
AGENT_WORKGROUP_SIZE: int = 64
AGENT_INITIAL_SPEED: float = 0.01
ACCEL_STRENGTH: float = 1.5
MAX_SPEED: float = 1.8
MAX_DELTA_TIME: float = 0.25
# Distance (in base texels) of the four mask samples used to find the free-space normal
OBSTACLE_PROBE_TEXELS: float = 2.0

# Field passes
TILE_SIZE: int = 8
CASCADE_LEVEL_COUNT: int = 3
DIFFUSE_RADIUS: int = 2
MERGE_WEIGHT: float = 0.75

# Emission
EMISSION_INTENSITY: float = 6.0
EMISSION_PULSE_RATE: float = 2.0
EMISSION_PULSE_DEPTH: float = 0.25

# Composite
EXPOSURE: float = 8.0
BACKGROUND_COLOR: vec4f32 = (0.0, 0.0, 0.0, 1.0)

# Obstacle mask rows are padded to this many bytes (GL unpack alignment)
OBSTACLE_ROW_ALIGNMENT: int = 4

# (x, y, width, height) in normalized field space
OBSTACLE_RECTS: list[tuple[float, float, float, float]] = [
    (0.45, 0.3, 0.05, 0.4),
    (0.2, 0.5, 0.4, 0.05),
    (0.7, 0.3, 0.05, 0.3),
]

def default_obstacles() -> list[ObstacleRect]:
    return [{"x": x, "y": y, "width": w, "height": h} for x, y, w, h in OBSTACLE_RECTS]
#   return [{"x": x, "y": y, "width": w, "height": h} for x, y, w, h in OBSTACLE_RECTS]
