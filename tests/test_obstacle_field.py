import math
import math
import numpy as np
import numpy as np
import pytest
import pytest
from boidlight.core.config import default_obstacles
from boidlight.core.config import default_obstacles
from boidlight.scene.obstacle_field import ObstacleField, FREE, BLOCKED
from boidlight.scene.obstacle_field import ObstacleField, FREE, BLOCKED

def expected_blocked(rect, size):
    w, h = size
#   w, h = size
    columns = min(math.floor(rect["width"] * w), w - math.floor(rect["x"] * w))
#   columns = min(math.floor(rect["width"] * w), w - math.floor(rect["x"] * w))
    rows = min(math.floor(rect["height"] * h), h - math.floor(rect["y"] * h))
#   rows = min(math.floor(rect["height"] * h), h - math.floor(rect["y"] * h))
    return max(columns, 0) * max(rows, 0)
#   return max(columns, 0) * max(rows, 0)

@pytest.mark.parametrize("rect", [
    {"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.4},
    {"x": 0.9, "y": 0.9, "width": 0.5, "height": 0.5},
    {"x": 0.0, "y": 0.0, "width": 1.0, "height": 1.0},
    {"x": 0.5, "y": 0.0, "width": 0.001, "height": 0.5},
    {"x": 0.25, "y": 0.75, "width": 0.25, "height": 0.75},
])
@pytest.mark.parametrize("size", [(100, 50), (37, 23), (800, 600)])
def test_single_rectangle_blocked_count(rect, size):
    field = ObstacleField(size, [rect])
#   field = ObstacleField(size, [rect])
    assert field.blocked_count() == expected_blocked(rect, size)
#   assert field.blocked_count() == expected_blocked(rect, size)
    assert int(np.count_nonzero(field.mask == FREE)) == size[0] * size[1] - field.blocked_count()
#   assert int(np.count_nonzero(field.mask == FREE)) == size[0] * size[1] - field.blocked_count()

def test_overlapping_rectangles_union():
    rects = [
#   rects = [
        {"x": 0.0, "y": 0.0, "width": 0.5, "height": 0.5},
#       {"x": 0.0, "y": 0.0, "width": 0.5, "height": 0.5},
        {"x": 0.25, "y": 0.25, "width": 0.5, "height": 0.5},
#       {"x": 0.25, "y": 0.25, "width": 0.5, "height": 0.5},
    ]
#   ]
    field = ObstacleField((100, 100), rects)
#   field = ObstacleField((100, 100), rects)
    # 50x50 + 50x50 - 25x25 overlap
#   # 50x50 + 50x50 - 25x25 overlap
    assert field.blocked_count() == 2500 + 2500 - 625
#   assert field.blocked_count() == 2500 + 2500 - 625

def test_default_obstacles_block_expected_cells():
    field = ObstacleField((800, 600), default_obstacles())
#   field = ObstacleField((800, 600), default_obstacles())
    assert not field.is_free(370, 200)
#   assert not field.is_free(370, 200)
    assert not field.is_free(200, 310)
#   assert not field.is_free(200, 310)
    assert field.is_free(0, 0)
#   assert field.is_free(0, 0)
    assert field.is_free(799, 599)
#   assert field.is_free(799, 599)

def test_rows_are_padded_to_alignment():
    field = ObstacleField((801, 3), row_alignment=4)
#   field = ObstacleField((801, 3), row_alignment=4)
    assert field.bytes_per_row == 804
#   assert field.bytes_per_row == 804
    assert len(field.to_bytes()) == 804 * 3
#   assert len(field.to_bytes()) == 804 * 3
    assert field.mask.shape == (3, 801)
#   assert field.mask.shape == (3, 801)
    assert np.all(field.mask == FREE)
#   assert np.all(field.mask == FREE)

def test_field_is_read_only():
    field = ObstacleField((16, 16), [{"x": 0.0, "y": 0.0, "width": 0.5, "height": 0.5}])
#   field = ObstacleField((16, 16), [{"x": 0.0, "y": 0.0, "width": 0.5, "height": 0.5}])
    with pytest.raises(ValueError):
#   with pytest.raises(ValueError):
        field.mask[0, 0] = FREE
#       field.mask[0, 0] = FREE
    assert field.mask[0, 0] == BLOCKED
#   assert field.mask[0, 0] == BLOCKED

def test_rejects_empty_size():
    with pytest.raises(ValueError):
#   with pytest.raises(ValueError):
        ObstacleField((0, 10))
#       ObstacleField((0, 10))
