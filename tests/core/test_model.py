"""Tests for the StructuralModel."""

import io
import math

import chex
import numpy as np
import pytest

from protview.core.config import LoadConfig, NumericErrorMode
from protview.core.model import StructuralModel, structure_name
from protview.io.parsing.dispatch import load_structure
from protview.io.parsing.registry import FormatNotSupportedError, InvalidSourceError

CENTERED_POSITIONS = np.array(
    [
        [-2.0, -1.0, 0.0],
        [0.0, 3.0, -2.0],
        [2.0, 0.0, 2.0],
        [1.0, -3.0, -0.5],
        [0.5, -0.5, -0.5],
    ],
)


class TestLoad:
    def test_load_populates_registry(self, loaded_model):
        assert loaded_model.atom_count == 5
        assert len(loaded_model) == 5
        assert not loaded_model.is_empty
        assert loaded_model.name == "mini"
        assert [atom.name for atom in loaded_model.atoms] == ["N", "C", "C", "O", "H"]

    def test_load_centers_structure(self, loaded_model):
        np.testing.assert_allclose(
            np.array([atom.position for atom in loaded_model.atoms]),
            CENTERED_POSITIONS,
        )
        assert loaded_model.lower_bound == pytest.approx((-2.0, -3.0, -2.0))
        assert loaded_model.upper_bound == pytest.approx((2.0, 3.0, 2.0))
        np.testing.assert_allclose(loaded_model.centering_transform, np.eye(4), atol=1e-12)

    def test_model_transform_records_centering(self, loaded_model):
        expected = np.eye(4)
        expected[:3, 3] = (0.0, -1.0, -1.0)
        np.testing.assert_allclose(loaded_model.model_transform, expected)

    def test_size_of_structure(self, loaded_model):
        assert loaded_model.size_of_structure == pytest.approx(math.sqrt(68.0))

    def test_properties_are_resolved(self, loaded_model):
        assert loaded_model.atom(0).color == (0.0, 0.0, 1.0)
        assert loaded_model.atom(1).radius == pytest.approx(1.70)
        assert loaded_model.atom(4).color == (0.0, 0.0, 0.0)
        assert loaded_model.atom(4).radius == 2.0
        assert loaded_model.tables.has_color("S")

    def test_load_returns_diagnostics(self, color_path, radius_path, pdb_path):
        diagnostics = StructuralModel().load(color_path, radius_path, pdb_path)
        assert diagnostics.atom_lines == 5
        assert diagnostics.default_color_names == ("H",)

    def test_load_from_streams(self, color_table_text, radius_table_text, pdb_path):
        model = StructuralModel()
        model.load(
            io.StringIO(color_table_text),
            io.StringIO(radius_table_text),
            io.StringIO(pdb_path.read_text()),
        )
        assert model.atom_count == 5
        assert model.name is None

    def test_infer_format(self, color_path, radius_path, tmp_path, pdb_path):
        path = tmp_path / "mini.xyz"
        path.write_text(pdb_path.read_text())
        with pytest.raises(FormatNotSupportedError):
            StructuralModel().load(color_path, radius_path, path, file_format=None)

    def test_load_uses_parsed_bounds(self, monkeypatch, color_path, radius_path, pdb_path):
        parsed_bounds = []

        def load_and_record(*args, **kwargs):
            parsed = load_structure(*args, **kwargs)
            parsed_bounds.append((parsed.lower_bound, parsed.upper_bound))
            return parsed

        def fail_extend(self, position):
            raise AssertionError("load must not re-accumulate bounds")

        monkeypatch.setattr("protview.core.model.load_structure", load_and_record)
        monkeypatch.setattr(StructuralModel, "extend", fail_extend)
        model = StructuralModel()
        model.load(color_path, radius_path, pdb_path)
        assert parsed_bounds == [((-2.0, -2.0, -1.0), (2.0, 4.0, 3.0))]
        np.testing.assert_allclose(model.model_transform[:3, 3], (0.0, -1.0, -1.0))
        assert model.size_of_structure == pytest.approx(math.sqrt(68.0))

    def test_reload_clears_selection(self, loaded_model, color_path, radius_path, pdb_path):
        loaded_model.selection.toggle(3)
        loaded_model.load(color_path, radius_path, pdb_path)
        assert len(loaded_model.selection) == 0

    def test_reload_with_fewer_atoms(
        self, loaded_model, color_path, radius_path, tmp_path, atom_line, pdb_text,
    ):
        loaded_model.selection.toggle(4)
        path = tmp_path / "single.pdb"
        path.write_text(pdb_text(atom_line(1, 3.0, 3.0, 3.0)))
        loaded_model.load(color_path, radius_path, path)
        assert loaded_model.atom_count == 1
        assert loaded_model.selection.indices() == frozenset()
        assert not loaded_model.selection.toggle(4)
        assert loaded_model.atom(0).position == (0.0, 0.0, 0.0)
        assert loaded_model.size_of_structure == pytest.approx(0.0)


class TestFailedLoad:
    """A failed load leaves the model as it was before the call."""

    def test_unreadable_structure(self, loaded_model, color_path, radius_path, tmp_path):
        loaded_model.selection.toggle(2)
        before = loaded_model.atoms
        with pytest.raises(InvalidSourceError):
            loaded_model.load(color_path, radius_path, tmp_path / "missing.pdb")
        assert loaded_model.atoms == before
        assert loaded_model.name == "mini"
        assert loaded_model.selection.indices() == frozenset({2})

    def test_unreadable_table(self, loaded_model, radius_path, pdb_path, tmp_path):
        before = loaded_model.atoms
        with pytest.raises(InvalidSourceError):
            loaded_model.load(tmp_path / "missing.txt", radius_path, pdb_path)
        assert loaded_model.atoms == before

    def test_malformed_atom_line(
        self, color_path, radius_path, tmp_path, atom_line, pdb_text,
    ):
        path = tmp_path / "broken.pdb"
        path.write_text(pdb_text(atom_line(1, 0.0, 0.0, 0.0), atom_line(2, 1.0, 1.0, 1.0)[:50]))
        model = StructuralModel()
        with pytest.raises(InvalidSourceError):
            model.load(color_path, radius_path, path)
        assert model.is_empty
        assert model.name is None

    def test_malformed_table_value_skip_mode(self, radius_path, pdb_path, tmp_path):
        colors = tmp_path / "colors.txt"
        colors.write_text("C;0.2;0.2;0.2\nN;x;0.0;1.0\n")
        model = StructuralModel()
        with pytest.raises(InvalidSourceError):
            model.load(colors, radius_path, pdb_path)
        model.load(colors, radius_path, pdb_path, LoadConfig(numeric_errors=NumericErrorMode.SKIP))
        assert model.atom(0).color == (0.0, 0.0, 0.0)
        assert model.atom(1).color == (0.2, 0.2, 0.2)


class TestBoundsAndCentering:
    def test_empty_model(self):
        model = StructuralModel()
        assert model.is_empty
        lower, upper = model.bounds()
        assert lower == (math.inf, math.inf, math.inf)
        assert upper == (-math.inf, -math.inf, -math.inf)
        model.finalize_bounds()
        assert model.size_of_structure == 0.0
        np.testing.assert_array_equal(model.centering_transform, np.eye(4))

    def test_extend_and_finalize(self):
        model = StructuralModel()
        model.extend((1.0, 2.0, 3.0))
        model.extend((-1.0, 0.0, 1.0))
        model.finalize_bounds()
        assert model.bounds() == ((-1.0, 0.0, 1.0), (1.0, 2.0, 3.0))
        assert model.size_of_structure == pytest.approx(math.sqrt(12.0))
        np.testing.assert_allclose(model.centering_transform[:3, 3], (0.0, -1.0, -2.0))

    def test_finalize_bounds_is_idempotent(self, loaded_model):
        loaded_model.move_to((5.0, 5.0, 5.0))
        first = (loaded_model.centering_transform, loaded_model.size_of_structure)
        loaded_model.finalize_bounds()
        second = (loaded_model.centering_transform, loaded_model.size_of_structure)
        np.testing.assert_array_equal(first[0], second[0])
        assert first[1] == second[1]

    def test_recenter_accumulates_model_transform(self, loaded_model):
        before = loaded_model.model_transform
        shift = np.eye(4)
        shift[:3, 3] = (1.0, 0.0, 0.0)
        loaded_model.recenter(shift)
        loaded_model.recenter(shift)
        np.testing.assert_allclose(loaded_model.model_transform, shift @ shift @ before)
        assert loaded_model.atom(0).position == pytest.approx((0.0, -1.0, 0.0))
        assert loaded_model.lower_bound == pytest.approx((0.0, -3.0, -2.0))

    def test_recenter_rejects_bad_shape(self, loaded_model):
        with pytest.raises(ValueError, match="4x4"):
            loaded_model.recenter(np.eye(3))

    def test_move_to(self, loaded_model):
        loaded_model.move_to((10.0, -4.0, 2.0))
        lower, upper = loaded_model.bounds()
        center = (np.asarray(lower) + np.asarray(upper)) / 2.0
        np.testing.assert_allclose(center, (10.0, -4.0, 2.0))
        assert loaded_model.size_of_structure == pytest.approx(math.sqrt(68.0))
        loaded_model.center()
        np.testing.assert_allclose(
            np.array([atom.position for atom in loaded_model.atoms]),
            CENTERED_POSITIONS,
            atol=1e-12,
        )

    def test_reset(self, loaded_model):
        loaded_model.selection.toggle(0)
        loaded_model.reset()
        assert loaded_model.is_empty
        assert loaded_model.name is None
        assert loaded_model.size_of_structure == 0.0
        assert len(loaded_model.selection) == 0
        assert loaded_model.tables.colors == {}
        np.testing.assert_array_equal(loaded_model.model_transform, np.eye(4))


class TestArrays:
    def test_array_views(self, loaded_model):
        chex.assert_shape(loaded_model.coordinates, (5, 3))
        chex.assert_shape(loaded_model.colors, (5, 3))
        chex.assert_shape(loaded_model.radii, (5,))
        chex.assert_trees_all_close(loaded_model.coordinates, CENTERED_POSITIONS.astype(np.float32))

    def test_empty_array_views(self):
        model = StructuralModel()
        chex.assert_shape(model.coordinates, (0, 3))
        chex.assert_shape(model.radii, (0,))

    def test_instance_transforms(self, loaded_model):
        transforms = loaded_model.instance_transforms()
        chex.assert_shape(transforms, (5, 4, 4))
        chex.assert_trees_all_close(transforms[0, :3, 3], CENTERED_POSITIONS[0].astype(np.float32))
        chex.assert_trees_all_close(transforms[1, 0, 0], np.float32(2.0 * 1.70), rtol=1e-6)
        chex.assert_trees_all_close(transforms[4, 1, 1], np.float32(4.0))


def test_structure_name(tmp_path):
    assert structure_name(tmp_path / "1crn.pdb") == "1crn"
    assert structure_name("structures/4hhb.ent") == "4hhb"
    assert structure_name(io.StringIO()) is None


def test_repr(loaded_model):
    assert repr(loaded_model) == "<StructuralModel mini: 5 atoms>"
