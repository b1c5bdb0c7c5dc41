import sys
import sys
import numpy as np
import numpy as np
from boidlight.core.config import default_obstacles
from boidlight.core.config import default_obstacles
from boidlight.renderer.reference_device import ReferenceDevice
from boidlight.renderer.reference_device import ReferenceDevice
from boidlight.renderer.orchestrator import FrameOrchestrator, FrameInput
from boidlight.renderer.orchestrator import FrameOrchestrator, FrameInput

def inspect(width: int, height: int, frames: int) -> None:
    print(f"Inspecting pipeline at {width}x{height} for {frames} frames...")
#   print(f"Inspecting pipeline at {width}x{height} for {frames} frames...")

    device: ReferenceDevice = ReferenceDevice(surface_size=(width, height))
#   device: ReferenceDevice = ReferenceDevice(surface_size=(width, height))
    orchestrator: FrameOrchestrator = FrameOrchestrator(device, obstacles=default_obstacles(), seed=0)
#   orchestrator: FrameOrchestrator = FrameOrchestrator(device, obstacles=default_obstacles(), seed=0)
    orchestrator.setup(timestamp=0.0)
#   orchestrator.setup(timestamp=0.0)
    assert orchestrator.graph is not None and orchestrator.pyramid is not None
#   assert orchestrator.graph is not None and orchestrator.pyramid is not None

    # Print Passes
#   # Print Passes
    print(f"Passes ({len(orchestrator.graph.passes)}):")
#   print(f"Passes ({len(orchestrator.graph.passes)}):")
    for i, current in enumerate(orchestrator.graph.passes):
#   for i, current in enumerate(orchestrator.graph.passes):
        print(f"  [{i}] {current.name:<12} program={current.program:<10} dispatch={current.dispatch_size()}")
#       print(f"  [{i}] {current.name:<12} program={current.program:<10} dispatch={current.dispatch_size()}")

    # Run a few frames with the pointer circling the center
#   # Run a few frames with the pointer circling the center
    for frame in range(frames):
#   for frame in range(frames):
        angle: float = frame * 0.1
#       angle: float = frame * 0.1
        pointer = (0.5 + 0.3 * float(np.cos(angle)), 0.5 + 0.3 * float(np.sin(angle)))
#       pointer = (0.5 + 0.3 * float(np.cos(angle)), 0.5 + 0.3 * float(np.sin(angle)))
        orchestrator.tick(FrameInput(pointer=pointer, timestamp=(frame + 1) / 60.0))
#       orchestrator.tick(FrameInput(pointer=pointer, timestamp=(frame + 1) / 60.0))

    # Print Levels
#   # Print Levels
    print(f"Levels ({orchestrator.pyramid.level_count}):")
#   print(f"Levels ({orchestrator.pyramid.level_count}):")
    for level in orchestrator.pyramid.levels:
#   for level in orchestrator.pyramid.levels:
        field = device.read_field(level.field)
#       field = device.read_field(level.field)
        print(f"  [{level.index}] {level.size[0]}x{level.size[1]} energy={float(np.sum(field[..., 3])):.4f}")
#       print(f"  [{level.index}] {level.size[0]}x{level.size[1]} energy={float(np.sum(field[..., 3])):.4f}")

    surface = device.read_surface()
#   surface = device.read_surface()
    print(f"Surface mean: {float(np.mean(surface[..., 0:3])):.4f}")
#   print(f"Surface mean: {float(np.mean(surface[..., 0:3])):.4f}")
    print(f"Status: {orchestrator.status_text}")
#   print(f"Status: {orchestrator.status_text}")
    orchestrator.shutdown()
#   orchestrator.shutdown()

if __name__ == "__main__":
    if len(sys.argv) not in (1, 4):
#   if len(sys.argv) not in (1, 4):
        print("Usage: python scripts/inspect_pipeline.py [width height frames]")
#       print("Usage: python scripts/inspect_pipeline.py [width height frames]")
        sys.exit(1)
#       sys.exit(1)
    if len(sys.argv) == 4:
#   if len(sys.argv) == 4:
        inspect(int(sys.argv[1]), int(sys.argv[2]), int(sys.argv[3]))
#       inspect(int(sys.argv[1]), int(sys.argv[2]), int(sys.argv[3]))
    else:
#   else:
        inspect(160, 120, 30)
#       inspect(160, 120, 30)
