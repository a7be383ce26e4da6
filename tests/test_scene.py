import pytest

from trefoil.model.parameters import ShapeParameters
from trefoil.model.scene import SceneGraph, SceneObject
from trefoil.model.state import KnotState, ParameterSource
from trefoil.model.tube import rebuild_mesh


def test_add_remove_and_lookup():
    scene = SceneGraph()
    empty = SceneObject("empty")
    knot = SceneObject("knot", mesh=rebuild_mesh(ShapeParameters(segment_count=8)))
    scene.add(empty)
    scene.add(knot)
    assert len(scene) == 2
    assert knot in scene
    assert scene.first_with_mesh() is knot

    scene.remove(knot)
    assert knot not in scene
    assert scene.first_with_mesh() is None
    # unknown objects are ignored
    scene.remove(knot)
    assert len(scene) == 1


def test_for_each_visits_in_insertion_order():
    scene = SceneGraph()
    for name in "abc":
        scene.add(SceneObject(name))
    seen = []
    scene.for_each(lambda obj: seen.append(obj.name))
    assert seen == ["a", "b", "c"]


def test_mutation_during_traversal_is_refused():
    scene = SceneGraph()
    obj = SceneObject("a")
    scene.add(obj)

    with pytest.raises(RuntimeError):
        scene.for_each(lambda o: scene.add(SceneObject("b")))
    with scene.traversal():
        with pytest.raises(RuntimeError):
            scene.remove(obj)

    # the lock is released afterwards
    scene.add(SceneObject("c"))
    assert len(scene) == 2


def test_children_are_stored():
    parent = SceneObject("parent")
    parent.add(SceneObject("child"))
    assert [c.name for c in parent.children] == ["child"]


def test_knot_state_reset():
    state = KnotState(params=ShapeParameters(magnitude=4.0), rotation_speed=2.5, auto_rotate=False)
    state.reset()
    assert state.params == ShapeParameters()
    assert state.rotation_speed == 1.0
    assert state.auto_rotate is True


def test_plain_object_satisfies_parameter_source():
    class ScriptSource:
        def __init__(self):
            self.params = ShapeParameters()

        def get_params(self):
            return self.params

        def set_params(self, params):
            self.params = params

        def on_change(self, callback):
            pass

    assert isinstance(ScriptSource(), ParameterSource)
    assert not isinstance(object(), ParameterSource)
