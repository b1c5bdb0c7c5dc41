import pytest
import pytest
from boidlight.core.errors import ShaderCompilationError
from boidlight.core.errors import ShaderCompilationError
from boidlight.renderer.shader_compiler import PROGRAM_TABLE, ProgramLibrary, resolve_includes
from boidlight.renderer.shader_compiler import PROGRAM_TABLE, ProgramLibrary, resolve_includes

def test_library_loads_every_program():
    library = ProgramLibrary.load()
#   library = ProgramLibrary.load()
    assert set(library.names()) == set(PROGRAM_TABLE)
#   assert set(library.names()) == set(PROGRAM_TABLE)
    for name in ("simulate", "clear", "emit", "diffuse", "upsample", "copy"):
#   for name in ("simulate", "clear", "emit", "diffuse", "upsample", "copy"):
        assert library[name].is_compute
#       assert library[name].is_compute
    assert not library["composite"].is_compute
#   assert not library["composite"].is_compute
    assert set(library["composite"].stages) == {"vertex", "fragment"}
#   assert set(library["composite"].stages) == {"vertex", "fragment"}

def test_includes_are_expanded():
    library = ProgramLibrary.load()
#   library = ProgramLibrary.load()
    source = library["emit"].stages["compute"]
#   source = library["emit"].stages["compute"]
    assert "#include" not in source
#   assert "#include" not in source
    assert "ivec2 ndc_to_texel(vec2 ndc, ivec2 size)" in source
#   assert "ivec2 ndc_to_texel(vec2 ndc, ivec2 size)" in source
    assert source.startswith("#version 430")
#   assert source.startswith("#version 430")

def test_nested_includes(tmp_path):
    (tmp_path / "a.glsl").write_text("float a() { return 1.0; }\n")
#   (tmp_path / "a.glsl").write_text("float a() { return 1.0; }\n")
    (tmp_path / "b.glsl").write_text('#include "a.glsl"\nfloat b() { return a(); }\n')
#   (tmp_path / "b.glsl").write_text('#include "a.glsl"\nfloat b() { return a(); }\n')
    source = resolve_includes('#include "b.glsl"\nvoid main() {}\n', tmp_path)
#   source = resolve_includes('#include "b.glsl"\nvoid main() {}\n', tmp_path)
    assert source.index("float a()") < source.index("float b()") < source.index("void main()")
#   assert source.index("float a()") < source.index("float b()") < source.index("void main()")

def test_circular_include_raises(tmp_path):
    (tmp_path / "a.glsl").write_text('#include "b.glsl"\n')
#   (tmp_path / "a.glsl").write_text('#include "b.glsl"\n')
    (tmp_path / "b.glsl").write_text('#include "a.glsl"\n')
#   (tmp_path / "b.glsl").write_text('#include "a.glsl"\n')
    with pytest.raises(ShaderCompilationError, match="circular include"):
#   with pytest.raises(ShaderCompilationError, match="circular include"):
        resolve_includes('#include "a.glsl"\n', tmp_path, program="loop")
#       resolve_includes('#include "a.glsl"\n', tmp_path, program="loop")

def test_missing_include_raises(tmp_path):
    with pytest.raises(ShaderCompilationError) as info:
#   with pytest.raises(ShaderCompilationError) as info:
        resolve_includes('#include "nowhere.glsl"\n', tmp_path, program="emit")
#       resolve_includes('#include "nowhere.glsl"\n', tmp_path, program="emit")
    assert info.value.program == "emit"
#   assert info.value.program == "emit"

def test_missing_program_file_raises(tmp_path):
    with pytest.raises(ShaderCompilationError):
#   with pytest.raises(ShaderCompilationError):
        ProgramLibrary.load(tmp_path, table={"simulate": {"compute": "simulate_cs.glsl"}})
#       ProgramLibrary.load(tmp_path, table={"simulate": {"compute": "simulate_cs.glsl"}})
