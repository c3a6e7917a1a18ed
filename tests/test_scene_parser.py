"""Tests for scene description parsing."""

import pytest
import json
from pathlib import Path

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.materials import Lambertian, SpecularReflection, SpecularFresnel, Emissive, Absorbing
from pathforge.scene_parser import SceneParser, SceneParseError, load_scene, parse_scene


SCENE = {
    "render": {"width": 32, "height": 18, "samples": 4, "max_depth": 8, "threads": 2},
    "camera": {"origin": [0, 1, -3]},
    "materials": {
        "0": {"type": "lambertian", "albedo": [0.5, 0.4, 0.3]},
        "1": {"type": "specular", "albedo": 0.8},
        "2": {"type": "fresnel", "ior": 1.5, "albedo": 0.9},
        "3": {"type": "emissive", "color": "#ffffff", "intensity": 2},
        "4": {"type": "absorbing"}
    },
    "objects": [
        {"type": "sphere", "center": [0, 1, 3], "radius": 1, "material": 2},
        {"type": "plane", "normal": [0, 1, 0], "offset": 0, "material": 0},
        {"type": "box", "center": {"x": 2, "y": 1.1, "z": 3}, "size": [2, 2, 0.5], "material": 1}
    ]
}


class TestParseDict:
    """Test parsing scene dictionaries."""

    def test_full_scene(self):
        scene, camera, settings = parse_scene(SCENE)

        assert len(scene.spheres) == 1
        assert len(scene.planes) == 1
        assert len(scene.boxes) == 1
        assert camera.origin == Point3(0, 1, -3)
        assert settings.width == 32
        assert settings.height == 18
        assert settings.samples_per_pixel == 4
        assert settings.max_depth == 8
        assert settings.num_threads == 2

    def test_materials(self):
        scene, _, _ = parse_scene(SCENE)

        assert isinstance(scene.material(0), Lambertian)
        assert scene.material(0).albedo == Color(0.5, 0.4, 0.3)
        assert isinstance(scene.material(1), SpecularReflection)
        assert isinstance(scene.material(2), SpecularFresnel)
        assert abs(scene.material(2).eta - 1.0 / 1.5) < 1e-12
        assert scene.material(3).emitted() == Color(2, 2, 2)
        assert isinstance(scene.material(4), Absorbing)

    def test_box_from_center(self):
        scene, _, _ = parse_scene(SCENE)
        box = scene.boxes[0]
        assert box.minimum == Point3(1, 0.1, 2.75)
        assert box.maximum == Point3(3, 2.1, 3.25)
        assert box.material == 1

    def test_defaults(self):
        scene, camera, settings = parse_scene({
            "objects": [{"type": "sphere", "center": [0, 0, 0], "radius": 1, "material": 3}]
        })
        assert sorted(scene.materials) == [0, 1, 2, 3]
        assert camera.origin == Point3(0, 1.5, -3)
        assert settings.width == 960

    def test_unknown_material_reference(self):
        with pytest.raises(SceneParseError):
            parse_scene({
                "materials": {"0": {"type": "lambertian"}},
                "objects": [{"type": "sphere", "material": 5}]
            })

    def test_unknown_material_type(self):
        with pytest.raises(SceneParseError):
            parse_scene({"materials": {"0": {"type": "velvet"}}})

    def test_unknown_object_type(self):
        with pytest.raises(SceneParseError):
            parse_scene({"objects": [{"type": "torus"}]})

    def test_bad_vector(self):
        with pytest.raises(SceneParseError):
            parse_scene({"objects": [{"type": "sphere", "center": [0, 1]}]})

    def test_non_numeric_vector_component(self):
        with pytest.raises(SceneParseError):
            parse_scene({"objects": [{"type": "sphere", "center": [0, "up", 3]}]})

    def test_non_numeric_object_material(self):
        with pytest.raises(SceneParseError):
            parse_scene({"objects": [{"type": "sphere", "material": "glass"}]})

    def test_non_numeric_radius(self):
        with pytest.raises(SceneParseError):
            parse_scene({"objects": [{"type": "sphere", "radius": "big"}]})

    def test_non_numeric_material_parameter(self):
        with pytest.raises(SceneParseError):
            parse_scene({"materials": {"0": {"type": "fresnel", "ior": "glass"}}})

    def test_bad_hex_color(self):
        with pytest.raises(SceneParseError):
            parse_scene({"materials": {"0": {"type": "lambertian", "albedo": "#zzzzzz"}}})

    def test_non_numeric_camera_origin(self):
        with pytest.raises(SceneParseError):
            parse_scene({"camera": {"origin": {"x": "left"}}})

    def test_bad_material_identifier(self):
        with pytest.raises(SceneParseError):
            parse_scene({"materials": {"glass": {"type": "fresnel"}}})

    def test_bad_render_settings(self):
        with pytest.raises(SceneParseError):
            parse_scene({"render": {"width": 0}})


class TestParseFile:
    """Test loading scene files."""

    def test_json_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(SCENE))
        scene, camera, settings = load_scene(path)
        assert len(scene) == 3

    def test_yaml_file(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "scene.yaml"
        path.write_text(
            "render:\n"
            "  width: 8\n"
            "  height: 8\n"
            "objects:\n"
            "  - {type: plane, normal: [0, 1, 0], offset: 0, material: 0}\n"
        )
        scene, _, settings = load_scene(path)
        assert len(scene.planes) == 1
        assert settings.width == 8

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("{not json")
        with pytest.raises(SceneParseError):
            load_scene(path)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "scene.txt"
        path.write_text("{}")
        with pytest.raises(SceneParseError):
            load_scene(path)

    def test_bundled_reference_scene(self):
        path = Path(__file__).parent.parent / "scenes" / "reference.json"
        scene, camera, settings = load_scene(path)
        assert len(scene.spheres) == 3
        assert len(scene.boxes) == 1
        assert isinstance(scene.material(3), Emissive)
