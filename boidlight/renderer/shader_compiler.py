import pathlib as pl
import pathlib as pl
import re
import re
from boidlight.core.errors import ShaderCompilationError
from boidlight.core.errors import ShaderCompilationError

SHADER_DIR: pl.Path = pl.Path(__file__).parent.parent.resolve(strict=False) / "shaders"

INCLUDE_PATTERN: re.Pattern[str] = re.compile(pattern=r'^\s*#include\s+"([^"]+)"', flags=re.MULTILINE)

# Every program the frame uses, including the small utility kernels (clear, copy).
# name -> (stage, file) pairs; compute programs have a single "compute" stage.
PROGRAM_TABLE: dict[str, dict[str, str]] = {
    "simulate": {"compute": "simulate_cs.glsl"},
    "clear": {"compute": "clear_cs.glsl"},
    "emit": {"compute": "emit_cs.glsl"},
    "diffuse": {"compute": "diffuse_cs.glsl"},
    "upsample": {"compute": "upsample_cs.glsl"},
    "copy": {"compute": "copy_cs.glsl"},
    "composite": {"vertex": "composite_vs.glsl", "fragment": "composite_fs.glsl"},
}

def resolve_includes(source: str, base_path: pl.Path, program: str = "<source>", stack: tuple[str, ...] = ()) -> str:
    """
    Recursively resolves #include "filename" directives in GLSL source code.
#   Recursively resolves #include "filename" directives in GLSL source code.
    Standard GLSL does not support #include, so this pre-processor manually inserts the code.
#   Standard GLSL does not support #include, so this pre-processor manually inserts the code.
    """
    def replace(match: re.Match[str]) -> str:
#   def replace(match: re.Match[str]) -> str:
        filename: str = match.group(1)
#       filename: str = match.group(1)
        included_path: pl.Path = base_path / filename
#       included_path: pl.Path = base_path / filename

        if filename in stack:
#       if filename in stack:
            raise ShaderCompilationError(program, f"circular include: {' -> '.join(stack + (filename,))}")
#           raise ShaderCompilationError(program, f"circular include: {' -> '.join(stack + (filename,))}")
        if not included_path.exists():
#       if not included_path.exists():
            raise ShaderCompilationError(program, f"included file not found: {included_path}")
#           raise ShaderCompilationError(program, f"included file not found: {included_path}")

        included_content: str = included_path.read_text(encoding="utf-8")
#       included_content: str = included_path.read_text(encoding="utf-8")
        # Nested includes resolve relative to the same shader directory
#       # Nested includes resolve relative to the same shader directory
        return resolve_includes(source=included_content, base_path=base_path, program=program, stack=stack + (filename,))
#       return resolve_includes(source=included_content, base_path=base_path, program=program, stack=stack + (filename,))

    return INCLUDE_PATTERN.sub(replace, source)
#   return INCLUDE_PATTERN.sub(replace, source)

class ProgramSource:
    def __init__(self, name: str, stages: dict[str, str]) -> None:
#   def __init__(self, name: str, stages: dict[str, str]) -> None:
        self.name: str = name
#       self.name: str = name
        self.stages: dict[str, str] = stages
#       self.stages: dict[str, str] = stages
        pass
#       pass

    @property
#   @property
    def is_compute(self) -> bool:
#   def is_compute(self) -> bool:
        return "compute" in self.stages
#       return "compute" in self.stages

class ProgramLibrary:
    # Program sources loaded uniformly at setup, keyed by program name.
#   # Program sources loaded uniformly at setup, keyed by program name.

    def __init__(self, programs: dict[str, ProgramSource]) -> None:
#   def __init__(self, programs: dict[str, ProgramSource]) -> None:
        self.programs: dict[str, ProgramSource] = programs
#       self.programs: dict[str, ProgramSource] = programs
        pass
#       pass

    @classmethod
#   @classmethod
    def load(cls, shader_dir: pl.Path = SHADER_DIR, table: dict[str, dict[str, str]] | None = None) -> "ProgramLibrary":
#   def load(cls, shader_dir: pl.Path = SHADER_DIR, table: dict[str, dict[str, str]] | None = None) -> "ProgramLibrary":
        table = table if table is not None else PROGRAM_TABLE
#       table = table if table is not None else PROGRAM_TABLE
        programs: dict[str, ProgramSource] = {}
#       programs: dict[str, ProgramSource] = {}
        for name, files in table.items():
#       for name, files in table.items():
            stages: dict[str, str] = {}
#           stages: dict[str, str] = {}
            for stage, filename in files.items():
#           for stage, filename in files.items():
                path: pl.Path = shader_dir / filename
#               path: pl.Path = shader_dir / filename
                if not path.exists():
#               if not path.exists():
                    raise ShaderCompilationError(name, f"source file not found: {path}")
#                   raise ShaderCompilationError(name, f"source file not found: {path}")
                stages[stage] = resolve_includes(path.read_text(encoding="utf-8"), shader_dir, program=name, stack=(filename,))
#               stages[stage] = resolve_includes(path.read_text(encoding="utf-8"), shader_dir, program=name, stack=(filename,))
            programs[name] = ProgramSource(name=name, stages=stages)
#           programs[name] = ProgramSource(name=name, stages=stages)
        return cls(programs)
#       return cls(programs)

    def __getitem__(self, name: str) -> ProgramSource:
#   def __getitem__(self, name: str) -> ProgramSource:
        return self.programs[name]
#       return self.programs[name]

    def __contains__(self, name: str) -> bool:
#   def __contains__(self, name: str) -> bool:
        return name in self.programs
#       return name in self.programs

    def names(self) -> list[str]:
#   def names(self) -> list[str]:
        return list(self.programs)
#       return list(self.programs)
