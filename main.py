import moderngl_window as mglw
import moderngl_window as mglw
import sys
import sys
from boidlight.core.errors import DeviceInitializationError, ShaderCompilationError, ResourceCreationError, FrameGraphError
from boidlight.core.errors import DeviceInitializationError, ShaderCompilationError, ResourceCreationError, FrameGraphError
from boidlight.renderer.cascade_renderer import CascadeRenderer
from boidlight.renderer.cascade_renderer import CascadeRenderer

if __name__ == "__main__":
    try:
#   try:
        mglw.run_window_config(CascadeRenderer)
#       mglw.run_window_config(CascadeRenderer)
    except DeviceInitializationError as error:
#   except DeviceInitializationError as error:
        print(f"[FATAL] No compatible graphics device: {error}")
#       print(f"[FATAL] No compatible graphics device: {error}")
        sys.exit(1)
#       sys.exit(1)
    except (ShaderCompilationError, ResourceCreationError, FrameGraphError) as error:
#   except (ShaderCompilationError, ResourceCreationError, FrameGraphError) as error:
        print(f"[FATAL] {error}")
#       print(f"[FATAL] {error}")
        sys.exit(1)
#       sys.exit(1)
    pass
#   pass
