import pytest
import pytest
from boidlight.core.errors import FrameGraphError
from boidlight.core.errors import FrameGraphError
from boidlight.renderer.frame_graph import Binding, FrameGraph, Pass, PassKind
from boidlight.renderer.frame_graph import Binding, FrameGraph, Pass, PassKind
from boidlight.renderer.reference_device import ReferenceDevice
from boidlight.renderer.reference_device import ReferenceDevice
from boidlight.renderer.resources import ResourceKind
from boidlight.renderer.resources import ResourceKind
from boidlight.renderer.orchestrator import FrameOrchestrator
from boidlight.renderer.orchestrator import FrameOrchestrator

def make_orchestrator(size=(64, 48), level_count=3):
    orchestrator = FrameOrchestrator(ReferenceDevice(surface_size=size), agent_count=4, level_count=level_count, seed=1)
#   orchestrator = FrameOrchestrator(ReferenceDevice(surface_size=size), agent_count=4, level_count=level_count, seed=1)
    orchestrator.setup(timestamp=0.0)
#   orchestrator.setup(timestamp=0.0)
    return orchestrator
#   return orchestrator

def test_frame_pass_order():
    orchestrator = make_orchestrator()
#   orchestrator = make_orchestrator()
    assert orchestrator.graph.names() == [
#   assert orchestrator.graph.names() == [
        "simulate", "clear", "emit",
#       "simulate", "clear", "emit",
        "diffuse_0", "diffuse_1", "diffuse_2",
#       "diffuse_0", "diffuse_1", "diffuse_2",
        "upsample_1", "copy_1", "upsample_0", "copy_0",
#       "upsample_1", "copy_1", "upsample_0", "copy_0",
        "composite",
#       "composite",
    ]
#   ]

def test_frame_pass_order_for_two_levels():
    orchestrator = make_orchestrator(level_count=2)
#   orchestrator = make_orchestrator(level_count=2)
    assert orchestrator.graph.names() == ["simulate", "clear", "emit", "diffuse_0", "diffuse_1", "upsample_0", "copy_0", "composite"]
#   assert orchestrator.graph.names() == ["simulate", "clear", "emit", "diffuse_0", "diffuse_1", "upsample_0", "copy_0", "composite"]

def test_diffuse_sources_chain_through_levels():
    orchestrator = make_orchestrator()
#   orchestrator = make_orchestrator()
    graph = orchestrator.graph
#   graph = orchestrator.graph
    pyramid = orchestrator.pyramid
#   pyramid = orchestrator.pyramid
    assert graph.passes[graph.index("diffuse_0")].binding("source").handle is orchestrator.emission.field
#   assert graph.passes[graph.index("diffuse_0")].binding("source").handle is orchestrator.emission.field
    assert graph.passes[graph.index("diffuse_1")].binding("source").handle is pyramid.levels[0].field
#   assert graph.passes[graph.index("diffuse_1")].binding("source").handle is pyramid.levels[0].field
    assert graph.passes[graph.index("diffuse_2")].binding("source").handle is pyramid.levels[1].field
#   assert graph.passes[graph.index("diffuse_2")].binding("source").handle is pyramid.levels[1].field

def test_scratch_has_single_writer_and_reader():
    orchestrator = make_orchestrator()
#   orchestrator = make_orchestrator()
    for level in orchestrator.pyramid.levels[:-1]:
#   for level in orchestrator.pyramid.levels[:-1]:
        assert [p.name for p in orchestrator.graph.writers(level.scratch)] == [f"upsample_{level.index}"]
#       assert [p.name for p in orchestrator.graph.writers(level.scratch)] == [f"upsample_{level.index}"]
        assert [p.name for p in orchestrator.graph.readers(level.scratch)] == [f"copy_{level.index}"]
#       assert [p.name for p in orchestrator.graph.readers(level.scratch)] == [f"copy_{level.index}"]

def test_dispatch_size_rounds_up():
    device = ReferenceDevice(surface_size=(8, 8))
#   device = ReferenceDevice(surface_size=(8, 8))
    field = device.create_field("f", (800, 600))
#   field = device.create_field("f", (800, 600))
    assert Pass("p", "clear", (800, 600), (8, 8), [Binding(0, "target", field, "write")]).dispatch_size() == (100, 75)
#   assert Pass("p", "clear", (800, 600), (8, 8), [Binding(0, "target", field, "write")]).dispatch_size() == (100, 75)
    assert Pass("p", "clear", (801, 601), (8, 8), [Binding(0, "target", field, "write")]).dispatch_size() == (101, 76)
#   assert Pass("p", "clear", (801, 601), (8, 8), [Binding(0, "target", field, "write")]).dispatch_size() == (101, 76)
    assert Pass("p", "simulate", (10, 1), (64, 1), []).dispatch_size() == (1, 1)
#   assert Pass("p", "simulate", (10, 1), (64, 1), []).dispatch_size() == (1, 1)

def test_binding_rejects_unknown_access():
    device = ReferenceDevice(surface_size=(8, 8))
#   device = ReferenceDevice(surface_size=(8, 8))
    field = device.create_field("f", (8, 8))
#   field = device.create_field("f", (8, 8))
    with pytest.raises(ValueError):
#   with pytest.raises(ValueError):
        Binding(0, "target", field, "append")
#       Binding(0, "target", field, "append")

def test_read_before_write_is_rejected():
    device = ReferenceDevice(surface_size=(8, 8))
#   device = ReferenceDevice(surface_size=(8, 8))
    a = device.create_field("a", (8, 8))
#   a = device.create_field("a", (8, 8))
    b = device.create_field("b", (8, 8))
#   b = device.create_field("b", (8, 8))
    graph = FrameGraph([
#   graph = FrameGraph([
        Pass("copy", "copy", (8, 8), (8, 8), [Binding(0, "source", a, "read"), Binding(1, "target", b, "write")]),
#       Pass("copy", "copy", (8, 8), (8, 8), [Binding(0, "source", a, "read"), Binding(1, "target", b, "write")]),
    ])
#   ])
    with pytest.raises(FrameGraphError, match="before any pass wrote it"):
#   with pytest.raises(FrameGraphError, match="before any pass wrote it"):
        graph.validate()
#       graph.validate()

def test_read_and_write_in_one_pass_is_rejected():
    device = ReferenceDevice(surface_size=(8, 8))
#   device = ReferenceDevice(surface_size=(8, 8))
    a = device.create_field("a", (8, 8))
#   a = device.create_field("a", (8, 8))
    graph = FrameGraph([
#   graph = FrameGraph([
        Pass("clear", "clear", (8, 8), (8, 8), [Binding(0, "target", a, "write")]),
#       Pass("clear", "clear", (8, 8), (8, 8), [Binding(0, "target", a, "write")]),
        Pass("in_place", "copy", (8, 8), (8, 8), [Binding(0, "source", a, "read"), Binding(1, "target", a, "write")]),
#       Pass("in_place", "copy", (8, 8), (8, 8), [Binding(0, "source", a, "read"), Binding(1, "target", a, "write")]),
    ])
#   ])
    with pytest.raises(FrameGraphError, match="reads and writes"):
#   with pytest.raises(FrameGraphError, match="reads and writes"):
        graph.validate()
#       graph.validate()

def test_composite_must_be_last():
    device = ReferenceDevice(surface_size=(8, 8))
#   device = ReferenceDevice(surface_size=(8, 8))
    a = device.create_field("a", (8, 8))
#   a = device.create_field("a", (8, 8))
    graph = FrameGraph([
#   graph = FrameGraph([
        Pass("clear", "clear", (8, 8), (8, 8), [Binding(0, "target", a, "write")]),
#       Pass("clear", "clear", (8, 8), (8, 8), [Binding(0, "target", a, "write")]),
        Pass("composite", "composite", (8, 8), (1, 1), [Binding(0, "source", a, "read")], kind=PassKind.COMPOSITE),
#       Pass("composite", "composite", (8, 8), (1, 1), [Binding(0, "source", a, "read")], kind=PassKind.COMPOSITE),
        Pass("clear_again", "clear", (8, 8), (8, 8), [Binding(0, "target", a, "write")]),
#       Pass("clear_again", "clear", (8, 8), (8, 8), [Binding(0, "target", a, "write")]),
    ])
#   ])
    with pytest.raises(FrameGraphError, match="last"):
#   with pytest.raises(FrameGraphError, match="last"):
        graph.validate()
#       graph.validate()

def test_scratch_with_two_readers_is_rejected():
    device = ReferenceDevice(surface_size=(8, 8))
#   device = ReferenceDevice(surface_size=(8, 8))
    scratch = device.create_field("s", (8, 8), kind=ResourceKind.SCRATCH)
#   scratch = device.create_field("s", (8, 8), kind=ResourceKind.SCRATCH)
    a = device.create_field("a", (8, 8))
#   a = device.create_field("a", (8, 8))
    b = device.create_field("b", (8, 8))
#   b = device.create_field("b", (8, 8))
    graph = FrameGraph([
#   graph = FrameGraph([
        Pass("clear", "clear", (8, 8), (8, 8), [Binding(0, "target", scratch, "write")]),
#       Pass("clear", "clear", (8, 8), (8, 8), [Binding(0, "target", scratch, "write")]),
        Pass("copy_a", "copy", (8, 8), (8, 8), [Binding(0, "source", scratch, "read"), Binding(1, "target", a, "write")]),
#       Pass("copy_a", "copy", (8, 8), (8, 8), [Binding(0, "source", scratch, "read"), Binding(1, "target", a, "write")]),
        Pass("copy_b", "copy", (8, 8), (8, 8), [Binding(0, "source", scratch, "read"), Binding(1, "target", b, "write")]),
#       Pass("copy_b", "copy", (8, 8), (8, 8), [Binding(0, "source", scratch, "read"), Binding(1, "target", b, "write")]),
    ])
#   ])
    with pytest.raises(FrameGraphError, match="exactly one writer and one reader"):
#   with pytest.raises(FrameGraphError, match="exactly one writer and one reader"):
        graph.validate()
#       graph.validate()
