"""
Tests for the loading boundary — lbx.archive.LBXFile and lbx.config.

Loaders must never raise: every failure comes back as (False, reason).
"""

from __future__ import annotations

import pytest

from lbx import PALETTE_OFFSET, PALETTE_SIZE
from lbx._format.sanitize import SanitizeTable
from lbx._format.spec import ContainerType
from lbx.archive import LBXFile
from lbx.config import DEFAULT_CONFIG, load_config


@pytest.fixture
def text_lbx(tmp_path, make_lbx):
    path = tmp_path / "HELP.LBX"
    path.write_bytes(make_lbx([b"Press any key\x00\x00\x00", b"Second page"]))
    return path


@pytest.fixture
def image_lbx(tmp_path, make_lbx):
    path = tmp_path / "SHIPS.LBX"
    names = [(b"FRIGATE", b"small hull"), (b"CRUISER", b"medium hull")]
    path.write_bytes(make_lbx([b"\x01\x02", b"\x03"], type_tag=0, names=names))
    return path


@pytest.fixture
def palette_source(tmp_path):
    path = tmp_path / "FONTS.LBX"
    path.write_bytes(b"\x00" * PALETTE_OFFSET + bytes(range(256)) * 3)
    return path


# ---------------------------------------------------------------------------
# TestLoad
# ---------------------------------------------------------------------------

class TestLoad:

    def test_constructor_builds_sanitize_table(self):
        assert not SanitizeTable.is_built()
        LBXFile()
        assert SanitizeTable.is_built()

    def test_empty_before_load(self):
        lbx = LBXFile()
        assert lbx.entries == []
        assert lbx.raw == b""
        assert lbx.file_type is ContainerType.UNKNOWN
        assert lbx.get_text() == ""

    def test_load_text(self, text_lbx):
        lbx = LBXFile()
        ok, reason = lbx.load(text_lbx)
        assert ok is True
        assert reason is None
        assert lbx.file_type is ContainerType.TEXT
        assert [e.name for e in lbx.entries] == ["File 1", "File 2"]
        assert lbx.raw == text_lbx.read_bytes()
        assert lbx.get_text() == "Press any key"

    def test_load_image(self, image_lbx):
        lbx = LBXFile()
        ok, _ = lbx.load(str(image_lbx))
        assert ok
        assert lbx.file_type is ContainerType.IMAGE
        assert [e.name for e in lbx.entries] == ["FRIGATE ", "CRUISER "]
        assert lbx.entries[1].comment.strip() == "medium hull"

    def test_broken_signature(self, tmp_path, make_lbx):
        data = bytearray(make_lbx([b"x"]))
        data[2] = 0x00
        path = tmp_path / "BROKEN.LBX"
        path.write_bytes(bytes(data))
        lbx = LBXFile()
        ok, reason = lbx.load(path)
        assert ok is False
        assert reason == "This is not a valid LBX file."
        assert lbx.entries == []

    def test_too_short(self, tmp_path):
        path = tmp_path / "TINY.LBX"
        path.write_bytes(b"\x01\x00\xad")
        ok, reason = LBXFile().load(path)
        assert not ok
        assert "not a valid LBX" in reason

    def test_missing_file(self, tmp_path):
        ok, reason = LBXFile().load(tmp_path / "GONE.LBX")
        assert not ok
        assert reason.startswith("Failed to load LBX File GONE.LBX: ")

    def test_truncated_table(self, tmp_path):
        path = tmp_path / "CUT.LBX"
        path.write_bytes(b"\x05\x00\xad\xfe\x00\x00\x05\x00\x10\x00\x00\x00")
        ok, reason = LBXFile().load(path)
        assert not ok
        assert reason.startswith("Failed to load LBX File CUT.LBX: Offset table truncated")

    def test_oversized(self, text_lbx):
        ok, reason = LBXFile(max_size=10).load(text_lbx)
        assert not ok
        assert "exceeds maximum" in reason

    def test_failed_load_keeps_previous(self, text_lbx, tmp_path):
        lbx = LBXFile()
        assert lbx.load(text_lbx)[0]
        ok, _ = lbx.load(tmp_path / "GONE.LBX")
        assert not ok
        assert len(lbx.entries) == 2
        assert lbx.get_text() == "Press any key"

    def test_reload_replaces(self, text_lbx, image_lbx):
        lbx = LBXFile()
        lbx.load(text_lbx)
        lbx.load(image_lbx)
        assert lbx.file_type is ContainerType.IMAGE

    def test_load_bytes(self, make_lbx):
        lbx = LBXFile()
        assert lbx.load_bytes(make_lbx([b"hi"])) == (True, None)
        assert lbx.get_text() == "hi"
        ok, reason = lbx.load_bytes(b"garbage!")
        assert not ok
        assert reason == "This is not a valid LBX file."

    def test_load_bytes_truncated_table(self):
        lbx = LBXFile()
        ok, reason = lbx.load_bytes(b"\x05\x00\xad\xfe\x00\x00\x05\x00", name="HELP.LBX")
        assert not ok
        assert reason.startswith("Failed to load LBX File HELP.LBX: Offset table truncated")
        assert lbx.entries == []

    def test_load_bytes_default_name(self):
        ok, reason = LBXFile().load_bytes(b"\x01\x00\xad\xfe\x00\x00\x05\x00")
        assert not ok
        assert reason.startswith("Failed to load LBX File <memory>: ")

    def test_path_with_nul_byte(self):
        lbx = LBXFile()
        ok, reason = lbx.load("bad\x00name.lbx")
        assert ok is False
        assert reason.startswith("Failed to load LBX File ")
        assert lbx.entries == []

    def test_empty_archive_text(self, tmp_path, make_lbx):
        path = tmp_path / "EMPTY.LBX"
        path.write_bytes(make_lbx([]))
        lbx = LBXFile()
        assert lbx.load(path)[0]
        assert lbx.get_text() == ""


# ---------------------------------------------------------------------------
# TestExternalPalette
# ---------------------------------------------------------------------------

class TestExternalPalette:

    def test_none_before_load(self):
        assert LBXFile.external_palette() is None

    def test_load(self, palette_source):
        ok, reason = LBXFile.load_external_palette(palette_source)
        assert (ok, reason) == (True, None)
        palette = LBXFile.external_palette()
        assert len(palette) == 256
        assert palette[0] == (0, 1, 2)

    def test_short_source(self, tmp_path):
        path = tmp_path / "SHORT.LBX"
        path.write_bytes(b"\x00" * (PALETTE_OFFSET + PALETTE_SIZE - 1))
        ok, reason = LBXFile.load_external_palette(path)
        assert not ok
        assert reason.startswith("Failed to load external palette: ")
        assert LBXFile.external_palette() is None

    def test_missing_source(self, tmp_path):
        ok, reason = LBXFile.load_external_palette(tmp_path / "NOFONTS.LBX")
        assert not ok
        assert "Failed to load external palette" in reason

    def test_path_with_nul_byte(self):
        ok, reason = LBXFile.load_external_palette("bad\x00name.lbx")
        assert ok is False
        assert reason.startswith("Failed to load external palette: Cannot read")
        assert LBXFile.external_palette() is None

    def test_shared_across_instances(self, palette_source):
        LBXFile.load_external_palette(palette_source)
        assert LBXFile().external_palette() is LBXFile.external_palette()


# ---------------------------------------------------------------------------
# TestConfig
# ---------------------------------------------------------------------------

class TestConfig:

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in ("LBX_CONFIG", "LBX_PALETTE", "LBX_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path / "none.toml") == DEFAULT_CONFIG

    def test_file_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('palette_file = "/games/FONTS.LBX"\nlog_level = "INFO"\nbogus = 1\n')
        config = load_config(path)
        assert config["palette_file"] == "/games/FONTS.LBX"
        assert config["log_level"] == "INFO"
        assert "bogus" not in config

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('palette_file = "/a/FONTS.LBX"\n')
        monkeypatch.setenv("LBX_PALETTE", "/b/FONTS.LBX")
        assert load_config(path)["palette_file"] == "/b/FONTS.LBX"

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "elsewhere.toml"
        path.write_text('log_level = "DEBUG"\n')
        monkeypatch.setenv("LBX_CONFIG", str(path))
        assert load_config()["log_level"] == "DEBUG"

    def test_invalid_toml_falls_back(self, tmp_path, caplog):
        path = tmp_path / "config.toml"
        path.write_text("palette_file = [unterminated\n")
        config = load_config(path)
        assert config == DEFAULT_CONFIG
        assert "Failed to load config" in caplog.text

    def test_invalid_max_size(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("max_file_size = -5\n")
        assert load_config(path)["max_file_size"] == DEFAULT_CONFIG["max_file_size"]
