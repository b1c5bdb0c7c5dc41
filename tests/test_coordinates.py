import numpy as np
import numpy as np
import pytest
import pytest
from boidlight.core.coordinates import pointer_to_ndc, ndc_to_texel, cascade_resolutions
from boidlight.core.coordinates import pointer_to_ndc, ndc_to_texel, cascade_resolutions

def test_pointer_to_ndc_flips_y():
    assert pointer_to_ndc((0.5, 0.5)) == (0.0, 0.0)
#   assert pointer_to_ndc((0.5, 0.5)) == (0.0, 0.0)
    assert pointer_to_ndc((0.0, 0.0)) == (-1.0, 1.0)
#   assert pointer_to_ndc((0.0, 0.0)) == (-1.0, 1.0)
    assert pointer_to_ndc((1.0, 1.0)) == (1.0, -1.0)
#   assert pointer_to_ndc((1.0, 1.0)) == (1.0, -1.0)

def test_ndc_to_texel_row_zero_is_top():
    texels = ndc_to_texel(np.array([[0.0, 0.0], [-1.0, 1.0], [1.0, -1.0], [-0.5, 0.5]], dtype=np.float32), (800, 600))
#   texels = ndc_to_texel(np.array([[0.0, 0.0], [-1.0, 1.0], [1.0, -1.0], [-0.5, 0.5]], dtype=np.float32), (800, 600))
    assert texels.tolist() == [[400, 300], [0, 0], [799, 599], [200, 150]]
#   assert texels.tolist() == [[400, 300], [0, 0], [799, 599], [200, 150]]

def test_ndc_to_texel_clamps_outside_points():
    texels = ndc_to_texel(np.array([[-3.0, 5.0], [2.0, -2.0]], dtype=np.float32), (64, 48))
#   texels = ndc_to_texel(np.array([[-3.0, 5.0], [2.0, -2.0]], dtype=np.float32), (64, 48))
    assert texels.tolist() == [[0, 0], [63, 47]]
#   assert texels.tolist() == [[0, 0], [63, 47]]

def test_cascade_resolutions_halve_per_level():
    assert cascade_resolutions((800, 600), 3) == [(800, 600), (400, 300), (200, 150)]
#   assert cascade_resolutions((800, 600), 3) == [(800, 600), (400, 300), (200, 150)]
    assert cascade_resolutions((801, 601), 3) == [(801, 601), (400, 300), (200, 150)]
#   assert cascade_resolutions((801, 601), 3) == [(801, 601), (400, 300), (200, 150)]
    assert cascade_resolutions((5, 7), 1) == [(5, 7)]
#   assert cascade_resolutions((5, 7), 1) == [(5, 7)]

def test_cascade_resolutions_rejects_empty_levels():
    with pytest.raises(ValueError):
#   with pytest.raises(ValueError):
        cascade_resolutions((800, 600), 0)
#       cascade_resolutions((800, 600), 0)
    with pytest.raises(ValueError):
#   with pytest.raises(ValueError):
        cascade_resolutions((3, 600), 3)
#       cascade_resolutions((3, 600), 3)
