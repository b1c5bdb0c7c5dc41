import numpy as np
import numpy as np
import pytest
import pytest
from boidlight.core.params import SIM_PARAMS_DTYPE, EMIT_PARAMS_DTYPE, DIFFUSE_PARAMS_DTYPE, UPSAMPLE_PARAMS_DTYPE
from boidlight.core.params import SIM_PARAMS_DTYPE, EMIT_PARAMS_DTYPE, DIFFUSE_PARAMS_DTYPE, UPSAMPLE_PARAMS_DTYPE
from boidlight.core.params import padded_size, pack_sim_params, pack_emit_params, pack_diffuse_params, pack_upsample_params, unpack_params
from boidlight.core.params import padded_size, pack_sim_params, pack_emit_params, pack_diffuse_params, pack_upsample_params, unpack_params

def test_sim_params_std140_layout():
    assert SIM_PARAMS_DTYPE.itemsize == 32
#   assert SIM_PARAMS_DTYPE.itemsize == 32
    offsets = {name: SIM_PARAMS_DTYPE.fields[name][1] for name in SIM_PARAMS_DTYPE.names}
#   offsets = {name: SIM_PARAMS_DTYPE.fields[name][1] for name in SIM_PARAMS_DTYPE.names}
    assert offsets == {"target": 0, "dt": 8, "agent_count": 12, "accel_strength": 16, "max_speed": 20}
#   assert offsets == {"target": 0, "dt": 8, "agent_count": 12, "accel_strength": 16, "max_speed": 20}

def test_small_blocks_are_one_vec4():
    assert EMIT_PARAMS_DTYPE.itemsize == 16
#   assert EMIT_PARAMS_DTYPE.itemsize == 16
    assert DIFFUSE_PARAMS_DTYPE.itemsize == 16
#   assert DIFFUSE_PARAMS_DTYPE.itemsize == 16
    assert UPSAMPLE_PARAMS_DTYPE.itemsize == 16
#   assert UPSAMPLE_PARAMS_DTYPE.itemsize == 16
    assert EMIT_PARAMS_DTYPE.fields["agent_count"][1] == 12
#   assert EMIT_PARAMS_DTYPE.fields["agent_count"][1] == 12

def test_pack_sim_params_bytes():
    data = pack_sim_params(target=(0.25, -0.5), dt=0.016, agent_count=10, accel_strength=1.5, max_speed=1.8)
#   data = pack_sim_params(target=(0.25, -0.5), dt=0.016, agent_count=10, accel_strength=1.5, max_speed=1.8)
    assert len(data) == 32
#   assert len(data) == 32
    floats = np.frombuffer(data, dtype=np.float32)
#   floats = np.frombuffer(data, dtype=np.float32)
    assert floats[0] == np.float32(0.25)
#   assert floats[0] == np.float32(0.25)
    assert floats[1] == np.float32(-0.5)
#   assert floats[1] == np.float32(-0.5)
    assert floats[2] == np.float32(0.016)
#   assert floats[2] == np.float32(0.016)
    assert np.frombuffer(data[12:16], dtype=np.uint32)[0] == 10
#   assert np.frombuffer(data[12:16], dtype=np.uint32)[0] == 10
    assert floats[4] == np.float32(1.5)
#   assert floats[4] == np.float32(1.5)
    assert floats[5] == np.float32(1.8)
#   assert floats[5] == np.float32(1.8)
    assert data[24:] == bytes(8)
#   assert data[24:] == bytes(8)

def test_unpack_reads_packed_values():
    record = unpack_params(EMIT_PARAMS_DTYPE, pack_emit_params(resolution=(800.0, 600.0), time=3.5, agent_count=7))
#   record = unpack_params(EMIT_PARAMS_DTYPE, pack_emit_params(resolution=(800.0, 600.0), time=3.5, agent_count=7))
    assert tuple(record["resolution"]) == (800.0, 600.0)
#   assert tuple(record["resolution"]) == (800.0, 600.0)
    assert record["time"] == np.float32(3.5)
#   assert record["time"] == np.float32(3.5)
    assert record["agent_count"] == 7
#   assert record["agent_count"] == 7

    record = unpack_params(UPSAMPLE_PARAMS_DTYPE, pack_upsample_params(source_resolution=(200.0, 150.0), level=1))
#   record = unpack_params(UPSAMPLE_PARAMS_DTYPE, pack_upsample_params(source_resolution=(200.0, 150.0), level=1))
    assert tuple(record["source_resolution"]) == (200.0, 150.0)
#   assert tuple(record["source_resolution"]) == (200.0, 150.0)
    assert record["level"] == 1
#   assert record["level"] == 1
    assert len(pack_diffuse_params(resolution=(1.0, 1.0), level=2)) == 16
#   assert len(pack_diffuse_params(resolution=(1.0, 1.0), level=2)) == 16

@pytest.mark.parametrize("size, alignment, expected", [
    (800, 4, 800),
    (801, 4, 804),
    (1, 256, 256),
    (0, 16, 0),
    (33, 16, 48),
])
def test_padded_size(size, alignment, expected):
    assert padded_size(size, alignment) == expected
#   assert padded_size(size, alignment) == expected

def test_padded_size_rejects_bad_alignment():
    with pytest.raises(ValueError):
#   with pytest.raises(ValueError):
        padded_size(16, 0)
#       padded_size(16, 0)
