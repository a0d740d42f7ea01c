"""Tests for the picking engine and its effect on the model selection."""

import numpy as np
import pytest

from protview.core.model import StructuralModel
from protview.geometry.camera import PerspectiveCamera
from protview.geometry.mesh import proxy_sphere
from protview.picking.color_identity import ColorIdentityPicker
from protview.picking.encoding import picking_colors
from protview.picking.engine import PickingEngine
from protview.picking.geometric import GeometricPicker
from protview.picking.modes import PickMode


class FixedPicker:
    """Picker stub that always reports the same result."""

    mode = PickMode.GEOMETRIC

    def __init__(self, index):
        self.index = index

    def pick(self, position):
        return self.index


@pytest.fixture
def two_atom_model(tmp_path, color_path, radius_path, atom_line, pdb_text):
    """Atoms on the z axis at +5 and -5 after centering."""
    path = tmp_path / "pair.pdb"
    path.write_text(pdb_text(atom_line(1, 0.0, 0.0, 10.0), atom_line(2, 0.0, 0.0, 0.0)))
    model = StructuralModel()
    model.load(color_path, radius_path, path)
    return model


def identity_buffer(model, atom_index, size=32):
    """A picking buffer fully covered by one atom."""
    colors = picking_colors(model.atom_count)
    pixels = np.zeros((size, size, 4), dtype=np.uint8)
    pixels[..., :3] = np.rint(colors[atom_index] * 255.0).astype(np.uint8)
    pixels[..., 3] = 255
    return pixels


def test_color_pick_toggles_selection(loaded_model):
    engine = PickingEngine(loaded_model)
    pixels = identity_buffer(loaded_model, 2)
    picker = ColorIdentityPicker(lambda: pixels, (32, 32), loaded_model.atom_count)
    assert engine.pick(picker, (16, 16)) == 2
    assert loaded_model.selection.indices() == frozenset({2})
    assert engine.pick(picker, (16, 16)) == 2
    assert loaded_model.selection.indices() == frozenset()


def test_no_pick_leaves_selection(loaded_model):
    loaded_model.selection.toggle(1)
    engine = PickingEngine(loaded_model)
    background = np.zeros((32, 32, 4), dtype=np.uint8)
    picker = ColorIdentityPicker(lambda: background, (32, 32), loaded_model.atom_count)
    assert engine.pick(picker, (16, 16)) is None
    assert loaded_model.selection.indices() == frozenset({1})


def test_out_of_range_index_is_rejected(loaded_model):
    engine = PickingEngine(loaded_model)
    assert engine.pick(FixedPicker(5), (0, 0)) is None
    assert engine.pick(FixedPicker(-1), (0, 0)) is None
    assert len(loaded_model.selection) == 0
    assert engine.pick(FixedPicker(4), (0, 0)) == 4


def test_geometric_pick_toggles_selection(two_atom_model):
    assert two_atom_model.atom(0).position == pytest.approx((0.0, 0.0, 5.0))
    engine = PickingEngine(two_atom_model)
    camera = PerspectiveCamera(eye=(0.0, 0.0, 30.0))
    picker = GeometricPicker(
        camera,
        proxy_sphere(subdivisions=1),
        two_atom_model.instance_transforms(),
        (64, 48),
    )
    assert engine.pick(picker, (32.2, 23.7)) == 0
    assert 0 in two_atom_model.selection
    assert engine.pick(picker, (1, 1)) is None
    assert two_atom_model.selection.indices() == frozenset({0})


def test_both_strategies_agree(two_atom_model):
    camera = PerspectiveCamera(eye=(0.0, 0.0, 30.0))
    geometric = GeometricPicker(
        camera,
        proxy_sphere(subdivisions=1),
        two_atom_model.instance_transforms(),
        (32, 32),
    )
    pixels = identity_buffer(two_atom_model, 0)
    color = ColorIdentityPicker(lambda: pixels, (32, 32), two_atom_model.atom_count)
    engine = PickingEngine(two_atom_model)
    assert engine.pick(geometric, (16.2, 15.7)) == 0
    assert engine.pick(color, (16, 16)) == 0
    assert len(two_atom_model.selection) == 0


def test_selection_cleared_on_reload(loaded_model, color_path, radius_path, pdb_path):
    engine = PickingEngine(loaded_model)
    engine.pick(FixedPicker(3), (0, 0))
    loaded_model.load(color_path, radius_path, pdb_path)
    assert len(loaded_model.selection) == 0
