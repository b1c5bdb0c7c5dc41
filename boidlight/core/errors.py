class DeviceInitializationError(RuntimeError):
    # No compatible adapter/context, or the presentable surface could not be configured.
#   # No compatible adapter/context, or the presentable surface could not be configured.
    pass
#   pass

class ShaderCompilationError(RuntimeError):
    def __init__(self, program: str, message: str) -> None:
#   def __init__(self, program: str, message: str) -> None:
        super().__init__(f"Program '{program}': {message}")
#       super().__init__(f"Program '{program}': {message}")
        self.program: str = program
#       self.program: str = program
        pass
#       pass

class ResourceCreationError(RuntimeError):
    pass
#   pass

class TransientFrameError(RuntimeError):
    # The surface image is unavailable for this tick; the frame is skipped.
#   # The surface image is unavailable for this tick; the frame is skipped.
    pass
#   pass

class FrameGraphError(RuntimeError):
    pass
#   pass
