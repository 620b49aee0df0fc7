"""Tests for formatter configuration."""

import pytest

from reportwire.config import FormatterConfiguration, split_format_descriptor


class TestSplitFormatDescriptor:
    """Test specifier[:target] parsing."""

    def test_specifier_only(self):
        assert split_format_descriptor("progress") == ("progress", None)

    def test_specifier_and_target(self):
        assert split_format_descriptor("json:reports/out.json") == ("json", "reports/out.json")

    def test_windows_drive_in_target(self):
        assert split_format_descriptor("json:C:\\out.json") == ("json", "C:\\out.json")

    def test_windows_drive_in_specifier(self):
        assert split_format_descriptor("C:\\fmt.py:out.txt") == ("C:\\fmt.py", "out.txt")

    def test_url_scheme_kept(self):
        assert split_format_descriptor("file:///fmt.py:out.txt") == ("file:///fmt.py", "out.txt")

    def test_empty_target_rejected(self):
        with pytest.raises(ValueError):
            split_format_descriptor("json:")


class TestFormatterConfiguration:
    """Test configuration construction."""

    def test_defaults(self):
        config = FormatterConfiguration()

        assert config.stdout == "progress"
        assert dict(config.files) == {}
        assert dict(config.options) == {}

    def test_is_read_only(self):
        """Files and options cannot be mutated after construction."""
        config = FormatterConfiguration(files={"a.txt": "summary"}, options={"k": 1})

        with pytest.raises(TypeError):
            config.files["b.txt"] = "json"
        with pytest.raises(TypeError):
            config.options["k"] = 2

    def test_from_formats_preserves_order(self):
        config = FormatterConfiguration.from_formats(
            ["summary:report.txt", "progress-bar", "json:out.json"]
        )

        assert config.stdout == "progress-bar"
        assert list(config.files.items()) == [("report.txt", "summary"), ("out.json", "json")]

    def test_from_formats_duplicate_target_keeps_position(self):
        config = FormatterConfiguration.from_formats(
            ["summary:a.txt", "json:b.json", "progress:a.txt"]
        )

        assert list(config.files.items()) == [("a.txt", "progress"), ("b.json", "json")]

    def test_from_formats_stdout_target(self):
        config = FormatterConfiguration.from_formats(["summary:stdout"], options={"x": 1})

        assert config.stdout == "summary"
        assert dict(config.files) == {}
        assert config.options["x"] == 1

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("REPORTWIRE_FORMAT", "summary")
        monkeypatch.setenv("REPORTWIRE_FORMAT_FILES", "report.txt=progress, out.json=json")
        monkeypatch.setenv("REPORTWIRE_FORMAT_OPTIONS", '{"colors_enabled": false}')

        config = FormatterConfiguration.from_env()

        assert config.stdout == "summary"
        assert list(config.files.items()) == [("report.txt", "progress"), ("out.json", "json")]
        assert config.options == {"colors_enabled": False}

    def test_from_env_defaults(self, monkeypatch):
        for key in ("FORMAT", "FORMAT_FILES", "FORMAT_OPTIONS"):
            monkeypatch.delenv(f"REPORTWIRE_{key}", raising=False)

        config = FormatterConfiguration.from_env()

        assert config.stdout == "progress"
        assert dict(config.files) == {}

    def test_from_env_invalid_pair(self, monkeypatch):
        monkeypatch.setenv("REPORTWIRE_FORMAT_FILES", "report.txt")

        with pytest.raises(ValueError):
            FormatterConfiguration.from_env()

    def test_from_env_options_must_be_object(self, monkeypatch):
        monkeypatch.setenv("REPORTWIRE_FORMAT_OPTIONS", "[1, 2]")

        with pytest.raises(ValueError):
            FormatterConfiguration.from_env()
