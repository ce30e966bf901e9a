"""Tests for erlangapp_tooling.layout."""

from pathlib import Path

import pytest


class TestResolveLayout:
    def test_defaults(self) -> None:
        from erlangapp_tooling.layout import DEFAULT_LAYOUT, resolve_layout

        assert resolve_layout(None) == DEFAULT_LAYOUT
        assert resolve_layout(None) is not DEFAULT_LAYOUT

    def test_overrides_known_keys_only(self) -> None:
        from erlangapp_tooling.layout import resolve_layout

        lay = resolve_layout({"crates_dir": "native", "bogus": "x"})
        assert lay["crates_dir"] == "native"
        assert lay["output_dir"] == "priv/crates"
        assert "bogus" not in lay


class TestBuildConfig:
    def test_default_paths(self, tmp_path: Path) -> None:
        from erlangapp_tooling.build import Platform
        from erlangapp_tooling.layout import BuildConfig

        config = BuildConfig.for_app(tmp_path, platform=Platform.WINDOWS)
        assert config.crates_root == tmp_path / "crates"
        assert config.output_root == tmp_path / "priv" / "crates"
        assert config.platform is Platform.WINDOWS
        assert config.profile == "debug"
        assert config.target_triple is None

    def test_release_profile(self, tmp_path: Path) -> None:
        from erlangapp_tooling.layout import BuildConfig

        assert BuildConfig.for_app(tmp_path, release=True).profile == "release"

    @pytest.mark.parametrize(
        ("profile", "expected"),
        [
            ("dev", "debug"),
            ("test", "debug"),
            ("release", "release"),
            ("bench", "release"),
            ("dist", "dist"),
        ],
    )
    def test_cargo_profile_maps_to_directory(
        self, tmp_path: Path, profile: str, expected: str
    ) -> None:
        from erlangapp_tooling.layout import BuildConfig

        config = BuildConfig.for_app(tmp_path, profile=profile)
        assert config.profile == expected
        assert config.release is (expected == "release")

    def test_platform_detected_when_not_given(self, tmp_path: Path) -> None:
        from erlangapp_tooling.build import detect_platform
        from erlangapp_tooling.layout import BuildConfig

        assert BuildConfig.for_app(tmp_path).platform is detect_platform()

    def test_layout_file_overrides_defaults(self, tmp_path: Path) -> None:
        from erlangapp_tooling.layout import BuildConfig

        (tmp_path / "erlangapp.yaml").write_text("layout:\n  crates_dir: native\n")
        config = BuildConfig.for_app(tmp_path)
        assert config.crates_root == tmp_path / "native"
        assert config.output_root == tmp_path / "priv" / "crates"

    def test_explicit_layout_wins_over_file(self, tmp_path: Path) -> None:
        from erlangapp_tooling.layout import BuildConfig

        (tmp_path / "erlangapp.yaml").write_text("layout:\n  output_dir: priv/native\n")
        config = BuildConfig.for_app(tmp_path, layout={"output_dir": "out"})
        assert config.output_root == tmp_path / "out"

    def test_invalid_layout_file_falls_back(self, tmp_path: Path, caplog) -> None:
        from erlangapp_tooling.layout import BuildConfig

        (tmp_path / "erlangapp.yaml").write_text("layout: [unclosed\n")
        config = BuildConfig.for_app(tmp_path)
        assert config.crates_root == tmp_path / "crates"
        assert "Could not parse" in caplog.text

    def test_non_mapping_layout_ignored(self, tmp_path: Path) -> None:
        from erlangapp_tooling.layout import load_layout_file

        (tmp_path / "erlangapp.yaml").write_text("layout:\n  - crates_dir\n")
        assert load_layout_file(tmp_path) is None
