"""Unit tests for the properties file loader."""

import pytest

from stratus_di.infrastructure.properties import load_properties, parse_properties


class TestParseProperties:
    """Test cases for parse_properties."""

    def test_separators_and_whitespace(self):
        """Test both separators and trimming."""
        assert parse_properties("db.url = jdbc:x\ndb.user: admin\n") == {"db.url": "jdbc:x", "db.user": "admin"}

    def test_first_separator_wins(self):
        """Test that values may contain separators."""
        assert parse_properties("db.url=jdbc:postgres://host:5432/app") == {
            "db.url": "jdbc:postgres://host:5432/app"
        }

    def test_comments_and_blank_lines(self):
        """Test that comments and blank lines are ignored."""
        text = "# comment\n! also comment\n\nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_line_continuation(self):
        """Test that a trailing backslash joins the next line."""
        assert parse_properties("list=a,\\\n  b,\\\n  c\n") == {"list": "a,b,c"}

    def test_key_without_value(self):
        """Test that a bare key maps to an empty string."""
        assert parse_properties("flag") == {"flag": ""}

    def test_later_keys_override(self):
        """Test that the last definition wins."""
        assert parse_properties("a=1\na=2") == {"a": "2"}


class TestLoadProperties:
    """Test cases for load_properties."""

    def test_load_file(self, tmp_path):
        """Test reading a file from disk."""
        path = tmp_path / "app.properties"
        path.write_text("service.env=prod\n", encoding="utf-8")

        assert load_properties(path) == {"service.env": "prod"}

    def test_missing_file_raises(self, tmp_path):
        """Test that a missing file raises OSError."""
        with pytest.raises(OSError):
            load_properties(tmp_path / "missing.properties")
