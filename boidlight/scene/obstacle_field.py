import numpy as np
import numpy as np
import numpy.typing as npt
import numpy.typing as npt
from boidlight.core.common_types import vec2i32, ObstacleRect
from boidlight.core.common_types import vec2i32, ObstacleRect
from boidlight.core.config import OBSTACLE_ROW_ALIGNMENT
from boidlight.core.config import OBSTACLE_ROW_ALIGNMENT
from boidlight.core.params import padded_size
from boidlight.core.params import padded_size

FREE: int = 255
BLOCKED: int = 0

class ObstacleField:
    """
    Static free/blocked mask at base resolution, one byte per cell (255 = free, 0 = blocked).
#   Static free/blocked mask at base resolution, one byte per cell (255 = free, 0 = blocked).
    Rows are stored with a padded stride so the upload satisfies the device unpack alignment.
#   Rows are stored with a padded stride so the upload satisfies the device unpack alignment.
    The field is rasterized once in the constructor and is read-only afterwards.
#   The field is rasterized once in the constructor and is read-only afterwards.
    """

    def __init__(self, size: vec2i32, rects: list[ObstacleRect] | None = None, row_alignment: int = OBSTACLE_ROW_ALIGNMENT) -> None:
#   def __init__(self, size: vec2i32, rects: list[ObstacleRect] | None = None, row_alignment: int = OBSTACLE_ROW_ALIGNMENT) -> None:
        w, h = size
#       w, h = size
        if w < 1 or h < 1:
#       if w < 1 or h < 1:
            raise ValueError(f"Obstacle field size must be positive, got {size}")
#           raise ValueError(f"Obstacle field size must be positive, got {size}")
        self.size: vec2i32 = (w, h)
#       self.size: vec2i32 = (w, h)
        self.row_alignment: int = row_alignment
#       self.row_alignment: int = row_alignment
        self.bytes_per_row: int = padded_size(w, row_alignment)
#       self.bytes_per_row: int = padded_size(w, row_alignment)

        self.padded: npt.NDArray[np.uint8] = np.zeros((h, self.bytes_per_row), dtype=np.uint8)
#       self.padded: npt.NDArray[np.uint8] = np.zeros((h, self.bytes_per_row), dtype=np.uint8)
        self.padded[:, :w] = FREE
#       self.padded[:, :w] = FREE

        self.rects: tuple[ObstacleRect, ...] = tuple(rects or ())
#       self.rects: tuple[ObstacleRect, ...] = tuple(rects or ())
        for rect in self.rects:
#       for rect in self.rects:
            self.add_rectangle(rect)
#           self.add_rectangle(rect)

        self.padded.flags.writeable = False
#       self.padded.flags.writeable = False
        pass
#       pass

    def add_rectangle(self, rect: ObstacleRect) -> None:
#   def add_rectangle(self, rect: ObstacleRect) -> None:
        # Cells in [floor(x*W), floor(x*W) + floor(w*W)) x [floor(y*H), floor(y*H) + floor(h*H)),
#       # Cells in [floor(x*W), floor(x*W) + floor(w*W)) x [floor(y*H), floor(y*H) + floor(h*H)),
        # clipped to the field. Overlaps only add blocked area.
#       # clipped to the field. Overlaps only add blocked area.
        w, h = self.size
#       w, h = self.size
        start_x: int = int(np.floor(rect["x"] * w))
#       start_x: int = int(np.floor(rect["x"] * w))
        start_y: int = int(np.floor(rect["y"] * h))
#       start_y: int = int(np.floor(rect["y"] * h))
        end_x: int = min(start_x + int(np.floor(rect["width"] * w)), w)
#       end_x: int = min(start_x + int(np.floor(rect["width"] * w)), w)
        end_y: int = min(start_y + int(np.floor(rect["height"] * h)), h)
#       end_y: int = min(start_y + int(np.floor(rect["height"] * h)), h)
        start_x = max(start_x, 0)
#       start_x = max(start_x, 0)
        start_y = max(start_y, 0)
#       start_y = max(start_y, 0)
        if end_x <= start_x or end_y <= start_y:
#       if end_x <= start_x or end_y <= start_y:
            return
#           return
        self.padded[start_y:end_y, start_x:end_x] = BLOCKED
#       self.padded[start_y:end_y, start_x:end_x] = BLOCKED
        pass
#       pass

    @property
#   @property
    def mask(self) -> npt.NDArray[np.uint8]:
#   def mask(self) -> npt.NDArray[np.uint8]:
        # (H, W) view without the row padding
#       # (H, W) view without the row padding
        return self.padded[:, :self.size[0]]
#       return self.padded[:, :self.size[0]]

    def to_bytes(self) -> bytes:
#   def to_bytes(self) -> bytes:
        return self.padded.tobytes()
#       return self.padded.tobytes()

    def blocked_count(self) -> int:
#   def blocked_count(self) -> int:
        return int(np.count_nonzero(self.mask == BLOCKED))
#       return int(np.count_nonzero(self.mask == BLOCKED))

    def is_free(self, x: int, y: int) -> bool:
#   def is_free(self, x: int, y: int) -> bool:
        return bool(self.mask[y, x] != BLOCKED)
#       return bool(self.mask[y, x] != BLOCKED)
