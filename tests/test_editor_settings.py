"""
Tests for editor settings and the tool catalog.
"""

import json

import pytest

from OE_Libs.EditorLib.editor_session import EditorSession
from OE_Libs.EditorLib.editor_settings import EditorSettings, load_settings, save_settings
from OE_Libs.EditorLib.tools import ToolType, coerce_tool, get_tool_catalog

from conftest import encode_pil, make_gradient


class TestToolCatalog:
    """Test tool lookup."""

    def test_catalog_covers_every_tool(self):
        """Should list every tool in display order."""
        tools = [info.tool for info in get_tool_catalog()]

        assert tools == list(ToolType)

    def test_coerce_is_case_insensitive(self):
        """Should accept tool names in any case."""
        assert coerce_tool("meme") is ToolType.MEME
        assert coerce_tool(" Picker ") is ToolType.PICKER
        assert coerce_tool(ToolType.CROP) is ToolType.CROP

    def test_coerce_unknown(self):
        """Should reject an unknown tool name."""
        with pytest.raises(ValueError, match="Unknown tool"):
            coerce_tool("brush")


class TestEditorSettings:
    """Test settings validation and normalization."""

    def test_defaults(self):
        """Should provide the documented defaults."""
        settings = EditorSettings()

        assert settings.tool is ToolType.RESIZE
        assert settings.output_format == "JPEG"
        assert settings.quality == 0.8
        assert settings.lock_aspect is True
        assert settings.resample == "bilinear"
        assert settings.text_inset == 10
        assert settings.download_basename == "edited-image"

    def test_normalization(self):
        """Should normalize tool, format, filter and colors."""
        settings = EditorSettings(
            initial_tool="meme",
            output_format="image/webp",
            resample="LANCZOS",
            fill_color="#FF0",
            stroke_color=(1, 2, 3),
        )

        assert settings.initial_tool == "MEME"
        assert settings.output_format == "WEBP"
        assert settings.resample == "lanczos"
        assert settings.fill_color == "#ffff00"
        assert settings.stroke_color == "#010203"

    @pytest.mark.parametrize("kwargs", [
        {"initial_tool": "lasso"},
        {"output_format": "gif"},
        {"quality": 0},
        {"quality": 1.5},
        {"resample": "hamming-ish"},
        {"text_inset": -1},
        {"fill_color": "#12"},
        {"download_basename": "   "},
    ])
    def test_invalid_values(self, kwargs):
        """Should raise ValueError for invalid field values."""
        with pytest.raises(ValueError):
            EditorSettings(**kwargs)

    def test_from_dict_ignores_unknown_keys(self):
        """Should ignore keys that are not settings fields."""
        settings = EditorSettings.from_dict({"quality": 0.5, "theme": "dark"})

        assert settings.quality == 0.5
        assert not hasattr(settings, "theme")


class TestSettingsFile:
    """Test JSON persistence."""

    def test_round_trip(self, tmp_path):
        """Should save and load equal settings."""
        settings = EditorSettings(initial_tool="CROP", output_format="png", font_path="/fonts/x.ttf")

        path = save_settings(settings, tmp_path / "nested" / "settings.json")
        loaded = load_settings(path)

        assert loaded == settings
        assert json.loads(path.read_text())["output_format"] == "PNG"

    def test_missing_file(self, tmp_path):
        """Should raise FileNotFoundError for a missing file."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.json")

    def test_malformed_json(self, tmp_path):
        """Should raise ValueError for malformed JSON."""
        path = tmp_path / "settings.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid settings file"):
            load_settings(path)

    def test_non_object_json(self, tmp_path):
        """Should raise ValueError when the JSON is not an object."""
        path = tmp_path / "settings.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError, match="JSON object"):
            load_settings(path)


class TestSessionUsesSettings:
    """Test that a session picks its defaults from settings."""

    def test_export_and_download_name(self):
        """Should take export settings and filename from settings."""
        settings = EditorSettings(output_format="PNG", quality=0.4, download_basename="out")
        session = EditorSession(settings=settings)
        session.load(encode_pil(make_gradient(20, 10).image))

        result = session.download_image()

        assert session.export_config.quality == 0.4
        assert result.filename == "out.png"

    def test_unlocked_resize_by_default(self):
        """Should start unlocked when settings say so."""
        session = EditorSession(settings=EditorSettings(lock_aspect=False))
        session.load(encode_pil(make_gradient(20, 10).image))

        params = session.set_resize_width(5)

        assert (params.width, params.height) == (5, 10)

    def test_explicit_tool_overrides_settings(self):
        """Should prefer an explicit initial tool over settings."""
        session = EditorSession(initial_tool="ROTATE", settings=EditorSettings(initial_tool="MEME"))

        assert session.active_tool is ToolType.ROTATE
