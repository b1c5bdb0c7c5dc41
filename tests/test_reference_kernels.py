import numpy as np
import numpy as np
import pytest
import pytest
from boidlight.core.config import MAX_SPEED, ACCEL_STRENGTH
from boidlight.core.config import MAX_SPEED, ACCEL_STRENGTH
from boidlight.core.params import SIM_PARAMS_DTYPE, EMIT_PARAMS_DTYPE, pack_sim_params, pack_emit_params, unpack_params
from boidlight.core.params import SIM_PARAMS_DTYPE, EMIT_PARAMS_DTYPE, pack_sim_params, pack_emit_params, unpack_params
from boidlight.scene.obstacle_field import ObstacleField
from boidlight.scene.obstacle_field import ObstacleField
from boidlight.renderer import reference_kernels as rk
from boidlight.renderer import reference_kernels as rk

def sim_params(target, dt, count, max_speed=MAX_SPEED):
    return unpack_params(SIM_PARAMS_DTYPE, pack_sim_params(target=target, dt=dt, agent_count=count, accel_strength=ACCEL_STRENGTH, max_speed=max_speed))
#   return unpack_params(SIM_PARAMS_DTYPE, pack_sim_params(target=target, dt=dt, agent_count=count, accel_strength=ACCEL_STRENGTH, max_speed=max_speed))

def free_mask(size):
    return ObstacleField(size).mask
#   return ObstacleField(size).mask

def test_speed_is_clamped():
    # Enough fast agents that float32 rescaling lands above the limit for some of them
#   # Enough fast agents that float32 rescaling lands above the limit for some of them
    count = 20000
#   count = 20000
    rng = np.random.default_rng(7)
#   rng = np.random.default_rng(7)
    agents = np.zeros((count, 4), dtype=np.float32)
#   agents = np.zeros((count, 4), dtype=np.float32)
    agents[:, 0:2] = rng.uniform(-1.0, 1.0, size=(count, 2))
#   agents[:, 0:2] = rng.uniform(-1.0, 1.0, size=(count, 2))
    agents[:, 2:4] = rng.uniform(-100.0, 100.0, size=(count, 2))
#   agents[:, 2:4] = rng.uniform(-100.0, 100.0, size=(count, 2))
    mask = ObstacleField((64, 48), [{"x": 0.4, "y": 0.4, "width": 0.2, "height": 0.2}]).mask
#   mask = ObstacleField((64, 48), [{"x": 0.4, "y": 0.4, "width": 0.2, "height": 0.2}]).mask
    out = rk.simulate_agents(agents, mask, sim_params((0.9, -0.9), 0.016, count), probe_texels=2.0)
#   out = rk.simulate_agents(agents, mask, sim_params((0.9, -0.9), 0.016, count), probe_texels=2.0)
    speeds = np.linalg.norm(out[:, 2:4].astype(np.float64), axis=-1)
#   speeds = np.linalg.norm(out[:, 2:4].astype(np.float64), axis=-1)
    assert np.all(speeds <= np.float64(np.float32(MAX_SPEED)))
#   assert np.all(speeds <= np.float64(np.float32(MAX_SPEED)))

def test_steering_points_at_target():
    agents = np.array([[0.0, 0.0, 0.0, 0.0]], dtype=np.float32)
#   agents = np.array([[0.0, 0.0, 0.0, 0.0]], dtype=np.float32)
    out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((0.0, 1.0), 0.1, 1), probe_texels=2.0)
#   out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((0.0, 1.0), 0.1, 1), probe_texels=2.0)
    assert out[0, 2] == pytest.approx(0.0, abs=1e-7)
#   assert out[0, 2] == pytest.approx(0.0, abs=1e-7)
    assert out[0, 3] == pytest.approx(ACCEL_STRENGTH * 0.1, rel=1e-5)
#   assert out[0, 3] == pytest.approx(ACCEL_STRENGTH * 0.1, rel=1e-5)
    assert out[0, 1] == pytest.approx(ACCEL_STRENGTH * 0.1 * 0.1, rel=1e-5)
#   assert out[0, 1] == pytest.approx(ACCEL_STRENGTH * 0.1 * 0.1, rel=1e-5)

def test_agent_on_target_does_not_steer():
    agents = np.array([[0.25, 0.25, 0.0, 0.0]], dtype=np.float32)
#   agents = np.array([[0.25, 0.25, 0.0, 0.0]], dtype=np.float32)
    out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((0.25, 0.25), 0.1, 1), probe_texels=2.0)
#   out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((0.25, 0.25), 0.1, 1), probe_texels=2.0)
    np.testing.assert_array_equal(out, agents)
#   np.testing.assert_array_equal(out, agents)

def test_wall_reflects_inward_velocity():
    # Wall covers columns 50..59 of a 100x100 field
#   # Wall covers columns 50..59 of a 100x100 field
    mask = ObstacleField((100, 100), [{"x": 0.5, "y": 0.0, "width": 0.1, "height": 1.0}]).mask
#   mask = ObstacleField((100, 100), [{"x": 0.5, "y": 0.0, "width": 0.1, "height": 1.0}]).mask
    agents = np.array([[-0.03, 0.0, 0.5, 0.0]], dtype=np.float32)
#   agents = np.array([[-0.03, 0.0, 0.5, 0.0]], dtype=np.float32)
    out = rk.simulate_agents(agents, mask, sim_params((-0.03, 0.0), 0.1, 1), probe_texels=2.0)
#   out = rk.simulate_agents(agents, mask, sim_params((-0.03, 0.0), 0.1, 1), probe_texels=2.0)
    assert out[0, 2] == pytest.approx(-0.5, rel=1e-5)
#   assert out[0, 2] == pytest.approx(-0.5, rel=1e-5)
    assert out[0, 3] == pytest.approx(0.0, abs=1e-7)
#   assert out[0, 3] == pytest.approx(0.0, abs=1e-7)
    assert out[0, 0] < -0.03
#   assert out[0, 0] < -0.03

def test_border_reflects_and_clamps():
    agents = np.array([[0.99, 0.0, 1.0, 0.0]], dtype=np.float32)
#   agents = np.array([[0.99, 0.0, 1.0, 0.0]], dtype=np.float32)
    out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((0.99, 0.0), 0.1, 1), probe_texels=2.0)
#   out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((0.99, 0.0), 0.1, 1), probe_texels=2.0)
    assert out[0, 0] == pytest.approx(1.0)
#   assert out[0, 0] == pytest.approx(1.0)
    assert out[0, 2] == pytest.approx(-1.0)
#   assert out[0, 2] == pytest.approx(-1.0)

def test_agents_past_count_are_untouched():
    agents = np.array([[0.0, 0.0, 0.1, 0.0], [0.5, 0.5, 0.1, 0.1]], dtype=np.float32)
#   agents = np.array([[0.0, 0.0, 0.1, 0.0], [0.5, 0.5, 0.1, 0.1]], dtype=np.float32)
    out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((1.0, 1.0), 0.1, 1), probe_texels=2.0)
#   out = rk.simulate_agents(agents, free_mask((64, 48)), sim_params((1.0, 1.0), 0.1, 1), probe_texels=2.0)
    np.testing.assert_array_equal(out[1], agents[1])
#   np.testing.assert_array_equal(out[1], agents[1])

def test_emit_sums_agents_on_one_texel():
    field = np.zeros((48, 64, 4), dtype=np.float32)
#   field = np.zeros((48, 64, 4), dtype=np.float32)
    agents = np.array([[0.0, 0.0, 0.0, 0.0], [0.01, -0.01, 0.0, 0.0]], dtype=np.float32)
#   agents = np.array([[0.0, 0.0, 0.0, 0.0], [0.01, -0.01, 0.0, 0.0]], dtype=np.float32)
    params = unpack_params(EMIT_PARAMS_DTYPE, pack_emit_params(resolution=(64.0, 48.0), time=0.0, agent_count=2))
#   params = unpack_params(EMIT_PARAMS_DTYPE, pack_emit_params(resolution=(64.0, 48.0), time=0.0, agent_count=2))
    rk.emit_agents(field, agents, params, intensity=1.0, pulse_rate=0.0, pulse_depth=0.0)
#   rk.emit_agents(field, agents, params, intensity=1.0, pulse_rate=0.0, pulse_depth=0.0)
    assert np.count_nonzero(field[..., 3]) == 1
#   assert np.count_nonzero(field[..., 3]) == 1
    # Both agents land on texel (32, 24)
#   # Both agents land on texel (32, 24)
    assert field[24, 32, 3] == pytest.approx(2.0)
#   assert field[24, 32, 3] == pytest.approx(2.0)
    np.testing.assert_allclose(field[24, 32, 0:3], rk.agent_colors(2).sum(axis=0), rtol=1e-6)
#   np.testing.assert_allclose(field[24, 32, 0:3], rk.agent_colors(2).sum(axis=0), rtol=1e-6)

def test_diffuse_preserves_uniform_interior():
    source = np.ones((16, 16, 4), dtype=np.float32)
#   source = np.ones((16, 16, 4), dtype=np.float32)
    out = rk.diffuse_level(source, free_mask((16, 16)), level=0, size=(16, 16), radius=2)
#   out = rk.diffuse_level(source, free_mask((16, 16)), level=0, size=(16, 16), radius=2)
    np.testing.assert_allclose(out[2:-2, 2:-2], 1.0, rtol=1e-6)
#   np.testing.assert_allclose(out[2:-2, 2:-2], 1.0, rtol=1e-6)
    assert np.all(out[0, 0] < 1.0)
#   assert np.all(out[0, 0] < 1.0)

def test_diffuse_is_zero_in_blocked_cells():
    field = ObstacleField((16, 16), [{"x": 0.25, "y": 0.25, "width": 0.5, "height": 0.5}])
#   field = ObstacleField((16, 16), [{"x": 0.25, "y": 0.25, "width": 0.5, "height": 0.5}])
    source = np.ones((16, 16, 4), dtype=np.float32)
#   source = np.ones((16, 16, 4), dtype=np.float32)
    out = rk.diffuse_level(source, field.mask, level=0, size=(16, 16), radius=2)
#   out = rk.diffuse_level(source, field.mask, level=0, size=(16, 16), radius=2)
    assert np.all(out[4:12, 4:12] == 0.0)
#   assert np.all(out[4:12, 4:12] == 0.0)
    assert np.all(out[0:2, 0:2] > 0.0)
#   assert np.all(out[0:2, 0:2] > 0.0)

def test_diffuse_downsamples_deeper_levels():
    source = np.zeros((8, 8, 4), dtype=np.float32)
#   source = np.zeros((8, 8, 4), dtype=np.float32)
    source[0:2, 0:2] = 4.0
#   source[0:2, 0:2] = 4.0
    out = rk.diffuse_level(source, free_mask((16, 16)), level=1, size=(4, 4), radius=0)
#   out = rk.diffuse_level(source, free_mask((16, 16)), level=1, size=(4, 4), radius=0)
    assert out[0, 0, 0] == pytest.approx(4.0)
#   assert out[0, 0, 0] == pytest.approx(4.0)
    assert out[1, 1, 0] == 0.0
#   assert out[1, 1, 0] == 0.0

def test_level_free_uses_center_base_texel():
    field = ObstacleField((8, 8), [{"x": 0.375, "y": 0.375, "width": 0.125, "height": 0.125}])
#   field = ObstacleField((8, 8), [{"x": 0.375, "y": 0.375, "width": 0.125, "height": 0.125}])
    # base texel (3, 3) is blocked; at level 1 it is the lookup for q = (1, 1)
#   # base texel (3, 3) is blocked; at level 1 it is the lookup for q = (1, 1)
    free = rk.level_free(field.mask, level=1, size=(4, 4))
#   free = rk.level_free(field.mask, level=1, size=(4, 4))
    assert free[1, 1] == 0.0
#   assert free[1, 1] == 0.0
    assert np.count_nonzero(free == 0.0) == 1
#   assert np.count_nonzero(free == 0.0) == 1

def test_bilinear_resample_of_constant_is_constant():
    field = np.full((3, 5, 4), 2.5, dtype=np.float32)
#   field = np.full((3, 5, 4), 2.5, dtype=np.float32)
    np.testing.assert_allclose(rk.bilinear_resample(field, (10, 6)), 2.5, rtol=1e-6)
#   np.testing.assert_allclose(rk.bilinear_resample(field, (10, 6)), 2.5, rtol=1e-6)

def test_upsample_merge_skips_blocked_cells():
    field = ObstacleField((4, 4), [{"x": 0.0, "y": 0.0, "width": 0.5, "height": 0.5}])
#   field = ObstacleField((4, 4), [{"x": 0.0, "y": 0.0, "width": 0.5, "height": 0.5}])
    fine = np.ones((4, 4, 4), dtype=np.float32)
#   fine = np.ones((4, 4, 4), dtype=np.float32)
    coarse = np.ones((2, 2, 4), dtype=np.float32)
#   coarse = np.ones((2, 2, 4), dtype=np.float32)
    merged = rk.upsample_merge(coarse, fine, field.mask, level=0, merge_weight=0.5)
#   merged = rk.upsample_merge(coarse, fine, field.mask, level=0, merge_weight=0.5)
    np.testing.assert_allclose(merged[0:2, 0:2], 1.0)
#   np.testing.assert_allclose(merged[0:2, 0:2], 1.0)
    np.testing.assert_allclose(merged[2:4, 2:4], 1.5)
#   np.testing.assert_allclose(merged[2:4, 2:4], 1.5)

def test_composite_of_black_is_background():
    radiance = np.zeros((6, 8, 4), dtype=np.float32)
#   radiance = np.zeros((6, 8, 4), dtype=np.float32)
    image = rk.composite_image(radiance, (8, 6), background=(0.1, 0.2, 0.3, 1.0), exposure=8.0)
#   image = rk.composite_image(radiance, (8, 6), background=(0.1, 0.2, 0.3, 1.0), exposure=8.0)
    np.testing.assert_allclose(image[..., 0:3], np.broadcast_to([0.1, 0.2, 0.3], (6, 8, 3)), rtol=1e-6)
#   np.testing.assert_allclose(image[..., 0:3], np.broadcast_to([0.1, 0.2, 0.3], (6, 8, 3)), rtol=1e-6)
    assert np.all(image[..., 3] == 1.0)
#   assert np.all(image[..., 3] == 1.0)

def test_composite_saturates():
    radiance = np.full((2, 2, 4), 100.0, dtype=np.float32)
#   radiance = np.full((2, 2, 4), 100.0, dtype=np.float32)
    image = rk.composite_image(radiance, (2, 2), background=(0.0, 0.0, 0.0, 1.0), exposure=8.0)
#   image = rk.composite_image(radiance, (2, 2), background=(0.0, 0.0, 0.0, 1.0), exposure=8.0)
    np.testing.assert_allclose(image, 1.0)
#   np.testing.assert_allclose(image, 1.0)
