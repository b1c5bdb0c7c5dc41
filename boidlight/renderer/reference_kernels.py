import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
import pyrr as rr # type: ignore[import-untyped]
import pyrr as rr
import typing
import typing
from boidlight.core.common_types import vec2i32, vec4f32
from boidlight.core.common_types import vec2i32, vec4f32
from boidlight.core.coordinates import ndc_to_texel
from boidlight.core.coordinates import ndc_to_texel

# CPU versions of the compute programs in boidlight/shaders.
# Every function mirrors the GLSL kernel of the same name texel for texel (up to float rounding).

def sample_free(mask: npt.NDArray[np.uint8], ndc: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    # 1.0 where the mask cell under each NDC position is free, 0.0 where blocked
#   # 1.0 where the mask cell under each NDC position is free, 0.0 where blocked
    h, w = mask.shape
#   h, w = mask.shape
    texels: npt.NDArray[np.int32] = ndc_to_texel(ndc, (w, h))
#   texels: npt.NDArray[np.int32] = ndc_to_texel(ndc, (w, h))
    return (mask[texels[..., 1], texels[..., 0]] != 0).astype(np.float32)
#   return (mask[texels[..., 1], texels[..., 0]] != 0).astype(np.float32)

def level_free(mask: npt.NDArray[np.uint8], level: int, size: vec2i32) -> npt.NDArray[np.float32]:
    # Mask lookup for a cascade level: base texel (q << level) + ((1 << level) >> 1), clamped
#   # Mask lookup for a cascade level: base texel (q << level) + ((1 << level) >> 1), clamped
    h_base, w_base = mask.shape
#   h_base, w_base = mask.shape
    w, h = size
#   w, h = size
    offset: int = (1 << level) >> 1
#   offset: int = (1 << level) >> 1
    xs: npt.NDArray[np.int64] = np.minimum((np.arange(w) << level) + offset, w_base - 1)
#   xs: npt.NDArray[np.int64] = np.minimum((np.arange(w) << level) + offset, w_base - 1)
    ys: npt.NDArray[np.int64] = np.minimum((np.arange(h) << level) + offset, h_base - 1)
#   ys: npt.NDArray[np.int64] = np.minimum((np.arange(h) << level) + offset, h_base - 1)
    return (mask[np.ix_(ys, xs)] != 0).astype(np.float32)
#   return (mask[np.ix_(ys, xs)] != 0).astype(np.float32)

def exceeds_speed(velocity: npt.NDArray[np.float32], max_speed: np.float32) -> npt.NDArray[np.bool_]:
    # Exact check: the float32 components are measured in float64
#   # Exact check: the float32 components are measured in float64
    return np.linalg.norm(velocity.astype(np.float64), axis=-1) > np.float64(max_speed)
#   return np.linalg.norm(velocity.astype(np.float64), axis=-1) > np.float64(max_speed)

def simulate_agents(agents: npt.NDArray[np.float32], mask: npt.NDArray[np.uint8], params: typing.Any, probe_texels: float) -> npt.NDArray[np.float32]:
    """
    One steering step for every agent. Each row only depends on its own record, the mask and the params.
#   One steering step for every agent. Each row only depends on its own record, the mask and the params.
    """
    out: npt.NDArray[np.float32] = np.array(agents, dtype=np.float32, copy=True)
#   out: npt.NDArray[np.float32] = np.array(agents, dtype=np.float32, copy=True)
    count: int = min(int(params["agent_count"]), out.shape[0])
#   count: int = min(int(params["agent_count"]), out.shape[0])
    if count == 0:
#   if count == 0:
        return out
#       return out

    position: npt.NDArray[np.float32] = out[:count, 0:2]
#   position: npt.NDArray[np.float32] = out[:count, 0:2]
    velocity: npt.NDArray[np.float32] = out[:count, 2:4]
#   velocity: npt.NDArray[np.float32] = out[:count, 2:4]
    target: npt.NDArray[np.float32] = np.asarray(params["target"], dtype=np.float32)
#   target: npt.NDArray[np.float32] = np.asarray(params["target"], dtype=np.float32)
    dt: np.float32 = np.float32(params["dt"])
#   dt: np.float32 = np.float32(params["dt"])
    accel_strength: np.float32 = np.float32(params["accel_strength"])
#   accel_strength: np.float32 = np.float32(params["accel_strength"])
    max_speed: np.float32 = np.float32(params["max_speed"])
#   max_speed: np.float32 = np.float32(params["max_speed"])

    # Steer toward the pointer
#   # Steer toward the pointer
    to_target: npt.NDArray[np.float32] = target - position
#   to_target: npt.NDArray[np.float32] = target - position
    distance: npt.NDArray[np.float32] = rr.vector.length(to_target)
#   distance: npt.NDArray[np.float32] = rr.vector.length(to_target)
    moving: npt.NDArray[np.bool_] = distance > 1.0e-6
#   moving: npt.NDArray[np.bool_] = distance > 1.0e-6
    steer: npt.NDArray[np.float32] = np.zeros_like(to_target)
#   steer: npt.NDArray[np.float32] = np.zeros_like(to_target)
    steer[moving] = to_target[moving] / distance[moving, None]
#   steer[moving] = to_target[moving] / distance[moving, None]
    velocity += steer * (accel_strength * dt)
#   velocity += steer * (accel_strength * dt)

    # Bias away from blocked cells at the prospective position
#   # Bias away from blocked cells at the prospective position
    h, w = mask.shape
#   h, w = mask.shape
    probe: npt.NDArray[np.float32] = position + velocity * dt
#   probe: npt.NDArray[np.float32] = position + velocity * dt
    blocked: npt.NDArray[np.bool_] = sample_free(mask, probe) < 0.5
#   blocked: npt.NDArray[np.bool_] = sample_free(mask, probe) < 0.5
    if np.any(blocked):
#   if np.any(blocked):
        step_x: npt.NDArray[np.float32] = np.array([probe_texels * 2.0 / w, 0.0], dtype=np.float32)
#       step_x: npt.NDArray[np.float32] = np.array([probe_texels * 2.0 / w, 0.0], dtype=np.float32)
        step_y: npt.NDArray[np.float32] = np.array([0.0, probe_texels * 2.0 / h], dtype=np.float32)
#       step_y: npt.NDArray[np.float32] = np.array([0.0, probe_texels * 2.0 / h], dtype=np.float32)
        gradient_x = sample_free(mask, probe + step_x) - sample_free(mask, probe - step_x)
#       gradient_x = sample_free(mask, probe + step_x) - sample_free(mask, probe - step_x)
        gradient_y = sample_free(mask, probe + step_y) - sample_free(mask, probe - step_y)
#       gradient_y = sample_free(mask, probe + step_y) - sample_free(mask, probe - step_y)
        normal: npt.NDArray[np.float32] = np.stack([gradient_x, gradient_y], axis=-1)
#       normal: npt.NDArray[np.float32] = np.stack([gradient_x, gradient_y], axis=-1)
        normal_length: npt.NDArray[np.float32] = rr.vector.length(normal)
#       normal_length: npt.NDArray[np.float32] = rr.vector.length(normal)
        has_normal: npt.NDArray[np.bool_] = normal_length > 0.0
#       has_normal: npt.NDArray[np.bool_] = normal_length > 0.0
        normal = normal / np.where(has_normal, normal_length, 1.0)[:, None]
#       normal = normal / np.where(has_normal, normal_length, 1.0)[:, None]
        inward: npt.NDArray[np.float32] = np.sum(velocity * normal, axis=-1)
#       inward: npt.NDArray[np.float32] = np.sum(velocity * normal, axis=-1)

        reflect: npt.NDArray[np.bool_] = blocked & has_normal & (inward < 0.0)
#       reflect: npt.NDArray[np.bool_] = blocked & has_normal & (inward < 0.0)
        velocity[reflect] -= 2.0 * inward[reflect, None] * normal[reflect]
#       velocity[reflect] -= 2.0 * inward[reflect, None] * normal[reflect]
        reverse: npt.NDArray[np.bool_] = blocked & ~has_normal
#       reverse: npt.NDArray[np.bool_] = blocked & ~has_normal
        velocity[reverse] = -velocity[reverse]
#       velocity[reverse] = -velocity[reverse]

    # Clamp speed
#   # Clamp speed
    speed: npt.NDArray[np.float32] = rr.vector.length(velocity)
#   speed: npt.NDArray[np.float32] = rr.vector.length(velocity)
    too_fast: npt.NDArray[np.bool_] = speed > max_speed
#   too_fast: npt.NDArray[np.bool_] = speed > max_speed
    velocity[too_fast] *= (max_speed / speed[too_fast])[:, None]
#   velocity[too_fast] *= (max_speed / speed[too_fast])[:, None]
    # float32 rounding can leave the scaled speed an ulp above the limit; step components toward zero until it holds
#   # float32 rounding can leave the scaled speed an ulp above the limit; step components toward zero until it holds
    over: npt.NDArray[np.bool_] = exceeds_speed(velocity, max_speed)
#   over: npt.NDArray[np.bool_] = exceeds_speed(velocity, max_speed)
    while np.any(over):
#   while np.any(over):
        velocity[over] = np.nextafter(velocity[over], np.float32(0.0))
#       velocity[over] = np.nextafter(velocity[over], np.float32(0.0))
        over = exceeds_speed(velocity, max_speed)
#       over = exceeds_speed(velocity, max_speed)

    position += velocity * dt
#   position += velocity * dt

    # Reflect off the NDC border
#   # Reflect off the NDC border
    for axis in range(2):
#   for axis in range(2):
        outside: npt.NDArray[np.bool_] = np.abs(position[:, axis]) > 1.0
#       outside: npt.NDArray[np.bool_] = np.abs(position[:, axis]) > 1.0
        position[:, axis] = np.clip(position[:, axis], -1.0, 1.0)
#       position[:, axis] = np.clip(position[:, axis], -1.0, 1.0)
        velocity[outside, axis] = -velocity[outside, axis]
#       velocity[outside, axis] = -velocity[outside, axis]
    return out
#   return out

def agent_colors(count: int) -> npt.NDArray[np.float32]:
    # Cosine palette: one hue per agent index
#   # Cosine palette: one hue per agent index
    index: npt.NDArray[np.float32] = np.arange(count, dtype=np.float32)[:, None] / np.float32(max(count, 1))
#   index: npt.NDArray[np.float32] = np.arange(count, dtype=np.float32)[:, None] / np.float32(max(count, 1))
    phase: npt.NDArray[np.float32] = np.array([0.0, 1.0 / 3.0, 2.0 / 3.0], dtype=np.float32)[None, :]
#   phase: npt.NDArray[np.float32] = np.array([0.0, 1.0 / 3.0, 2.0 / 3.0], dtype=np.float32)[None, :]
    return (0.5 + 0.5 * np.cos(2.0 * np.pi * (index + phase))).astype(np.float32)
#   return (0.5 + 0.5 * np.cos(2.0 * np.pi * (index + phase))).astype(np.float32)

def emit_agents(field: npt.NDArray[np.float32], agents: npt.NDArray[np.float32], params: typing.Any, intensity: float, pulse_rate: float, pulse_depth: float) -> None:
    # Adds each agent's light into the texel under it; field is expected to be freshly cleared.
#   # Adds each agent's light into the texel under it; field is expected to be freshly cleared.
    count: int = min(int(params["agent_count"]), agents.shape[0])
#   count: int = min(int(params["agent_count"]), agents.shape[0])
    if count == 0:
#   if count == 0:
        return
#       return
    w, h = (int(v) for v in params["resolution"])
#   w, h = (int(v) for v in params["resolution"])
    texels: npt.NDArray[np.int32] = ndc_to_texel(agents[:count, 0:2], (w, h))
#   texels: npt.NDArray[np.int32] = ndc_to_texel(agents[:count, 0:2], (w, h))
    index: npt.NDArray[np.float32] = np.arange(count, dtype=np.float32)
#   index: npt.NDArray[np.float32] = np.arange(count, dtype=np.float32)
    strength: npt.NDArray[np.float32] = (intensity * (1.0 + pulse_depth * np.sin(np.float32(params["time"]) * pulse_rate + index))).astype(np.float32)
#   strength: npt.NDArray[np.float32] = (intensity * (1.0 + pulse_depth * np.sin(np.float32(params["time"]) * pulse_rate + index))).astype(np.float32)
    contribution: npt.NDArray[np.float32] = np.zeros((count, 4), dtype=np.float32)
#   contribution: npt.NDArray[np.float32] = np.zeros((count, 4), dtype=np.float32)
    contribution[:, 0:3] = agent_colors(count) * strength[:, None]
#   contribution[:, 0:3] = agent_colors(count) * strength[:, None]
    contribution[:, 3] = strength
#   contribution[:, 3] = strength
    np.add.at(field, (texels[:, 1], texels[:, 0]), contribution)
#   np.add.at(field, (texels[:, 1], texels[:, 0]), contribution)
    pass
#   pass

def diffusion_weights(radius: int) -> npt.NDArray[np.float32]:
    offsets: npt.NDArray[np.float32] = np.arange(-radius, radius + 1, dtype=np.float32)
#   offsets: npt.NDArray[np.float32] = np.arange(-radius, radius + 1, dtype=np.float32)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
#   dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    return (1.0 / (1.0 + dx * dx + dy * dy)).astype(np.float32)
#   return (1.0 / (1.0 + dx * dx + dy * dy)).astype(np.float32)

def downsample_source(source: npt.NDArray[np.float32], level: int, size: vec2i32) -> npt.NDArray[np.float32]:
    # Level 0 reads the emission field texel for texel; deeper levels box-average 2x2 of the finer level.
#   # Level 0 reads the emission field texel for texel; deeper levels box-average 2x2 of the finer level.
    w, h = size
#   w, h = size
    if level == 0:
#   if level == 0:
        return source[:h, :w]
#       return source[:h, :w]
    return 0.25 * (
#   return 0.25 * (
        source[0:2 * h:2, 0:2 * w:2]
#       source[0:2 * h:2, 0:2 * w:2]
        + source[1:2 * h:2, 0:2 * w:2]
#       + source[1:2 * h:2, 0:2 * w:2]
        + source[0:2 * h:2, 1:2 * w:2]
#       + source[0:2 * h:2, 1:2 * w:2]
        + source[1:2 * h:2, 1:2 * w:2]
#       + source[1:2 * h:2, 1:2 * w:2]
    )
#   )

def diffuse_level(source: npt.NDArray[np.float32], mask: npt.NDArray[np.uint8], level: int, size: vec2i32, radius: int) -> npt.NDArray[np.float32]:
    w, h = size
#   w, h = size
    src: npt.NDArray[np.float32] = downsample_source(source, level, size)
#   src: npt.NDArray[np.float32] = downsample_source(source, level, size)
    free: npt.NDArray[np.float32] = level_free(mask, level, size)[..., None]
#   free: npt.NDArray[np.float32] = level_free(mask, level, size)[..., None]
    padded: npt.NDArray[np.float32] = np.pad(src * free, ((radius, radius), (radius, radius), (0, 0)))
#   padded: npt.NDArray[np.float32] = np.pad(src * free, ((radius, radius), (radius, radius), (0, 0)))

    weights: npt.NDArray[np.float32] = diffusion_weights(radius)
#   weights: npt.NDArray[np.float32] = diffusion_weights(radius)
    accumulated: npt.NDArray[np.float32] = np.zeros((h, w, 4), dtype=np.float32)
#   accumulated: npt.NDArray[np.float32] = np.zeros((h, w, 4), dtype=np.float32)
    for j in range(2 * radius + 1):
#   for j in range(2 * radius + 1):
        for i in range(2 * radius + 1):
#       for i in range(2 * radius + 1):
            accumulated += padded[j:j + h, i:i + w] * weights[j, i]
#           accumulated += padded[j:j + h, i:i + w] * weights[j, i]
    return (accumulated / np.sum(weights) * free).astype(np.float32)
#   return (accumulated / np.sum(weights) * free).astype(np.float32)

def bilinear_resample(field: npt.NDArray[np.float32], size: vec2i32) -> npt.NDArray[np.float32]:
    """
    Samples field at the texel centers of a (W, H) grid with a clamp-to-edge linear filter.
#   Samples field at the texel centers of a (W, H) grid with a clamp-to-edge linear filter.
    """
    w, h = size
#   w, h = size
    source_h, source_w = field.shape[:2]
#   source_h, source_w = field.shape[:2]
    u: npt.NDArray[np.float32] = (np.arange(w, dtype=np.float32) + 0.5) / np.float32(w) * np.float32(source_w) - 0.5
#   u: npt.NDArray[np.float32] = (np.arange(w, dtype=np.float32) + 0.5) / np.float32(w) * np.float32(source_w) - 0.5
    v: npt.NDArray[np.float32] = (np.arange(h, dtype=np.float32) + 0.5) / np.float32(h) * np.float32(source_h) - 0.5
#   v: npt.NDArray[np.float32] = (np.arange(h, dtype=np.float32) + 0.5) / np.float32(h) * np.float32(source_h) - 0.5
    x0: npt.NDArray[np.float32] = np.floor(u)
#   x0: npt.NDArray[np.float32] = np.floor(u)
    y0: npt.NDArray[np.float32] = np.floor(v)
#   y0: npt.NDArray[np.float32] = np.floor(v)
    fx: npt.NDArray[np.float32] = (u - x0)[None, :, None]
#   fx: npt.NDArray[np.float32] = (u - x0)[None, :, None]
    fy: npt.NDArray[np.float32] = (v - y0)[:, None, None]
#   fy: npt.NDArray[np.float32] = (v - y0)[:, None, None]
    xa: npt.NDArray[np.int64] = np.clip(x0, 0, source_w - 1).astype(np.int64)
#   xa: npt.NDArray[np.int64] = np.clip(x0, 0, source_w - 1).astype(np.int64)
    xb: npt.NDArray[np.int64] = np.clip(x0 + 1, 0, source_w - 1).astype(np.int64)
#   xb: npt.NDArray[np.int64] = np.clip(x0 + 1, 0, source_w - 1).astype(np.int64)
    ya: npt.NDArray[np.int64] = np.clip(y0, 0, source_h - 1).astype(np.int64)
#   ya: npt.NDArray[np.int64] = np.clip(y0, 0, source_h - 1).astype(np.int64)
    yb: npt.NDArray[np.int64] = np.clip(y0 + 1, 0, source_h - 1).astype(np.int64)
#   yb: npt.NDArray[np.int64] = np.clip(y0 + 1, 0, source_h - 1).astype(np.int64)
    top: npt.NDArray[np.float32] = field[np.ix_(ya, xa)] * (1.0 - fx) + field[np.ix_(ya, xb)] * fx
#   top: npt.NDArray[np.float32] = field[np.ix_(ya, xa)] * (1.0 - fx) + field[np.ix_(ya, xb)] * fx
    bottom: npt.NDArray[np.float32] = field[np.ix_(yb, xa)] * (1.0 - fx) + field[np.ix_(yb, xb)] * fx
#   bottom: npt.NDArray[np.float32] = field[np.ix_(yb, xa)] * (1.0 - fx) + field[np.ix_(yb, xb)] * fx
    return (top * (1.0 - fy) + bottom * fy).astype(np.float32)
#   return (top * (1.0 - fy) + bottom * fy).astype(np.float32)

def upsample_merge(coarse: npt.NDArray[np.float32], fine: npt.NDArray[np.float32], mask: npt.NDArray[np.uint8], level: int, merge_weight: float) -> npt.NDArray[np.float32]:
    h, w = fine.shape[:2]
#   h, w = fine.shape[:2]
    upsampled: npt.NDArray[np.float32] = bilinear_resample(coarse, (w, h))
#   upsampled: npt.NDArray[np.float32] = bilinear_resample(coarse, (w, h))
    free: npt.NDArray[np.float32] = level_free(mask, level, (w, h))[..., None]
#   free: npt.NDArray[np.float32] = level_free(mask, level, (w, h))[..., None]
    return (fine + merge_weight * upsampled * free).astype(np.float32)
#   return (fine + merge_weight * upsampled * free).astype(np.float32)

def composite_image(radiance: npt.NDArray[np.float32], surface_size: vec2i32, background: vec4f32, exposure: float) -> npt.NDArray[np.float32]:
    sampled: npt.NDArray[np.float32] = radiance
#   sampled: npt.NDArray[np.float32] = radiance
    if radiance.shape[1] != surface_size[0] or radiance.shape[0] != surface_size[1]:
#   if radiance.shape[1] != surface_size[0] or radiance.shape[0] != surface_size[1]:
        sampled = bilinear_resample(radiance, surface_size)
#       sampled = bilinear_resample(radiance, surface_size)
    image: npt.NDArray[np.float32] = np.empty((surface_size[1], surface_size[0], 4), dtype=np.float32)
#   image: npt.NDArray[np.float32] = np.empty((surface_size[1], surface_size[0], 4), dtype=np.float32)
    image[..., 0:3] = np.asarray(background[0:3], dtype=np.float32) + (1.0 - np.exp(-sampled[..., 0:3] * exposure))
#   image[..., 0:3] = np.asarray(background[0:3], dtype=np.float32) + (1.0 - np.exp(-sampled[..., 0:3] * exposure))
    image[..., 3] = 1.0
#   image[..., 3] = 1.0
    return np.clip(image, 0.0, 1.0)
#   return np.clip(image, 0.0, 1.0)
