"""
Unit tests for env loading and StackConfig.
"""

import dataclasses

import pytest

from wpstack.config import StackConfig, load_env


class TestLoadEnv:
    """Tests for the .env loader."""

    def test_missing_file_returns_none(self, tmp_path):
        assert load_env(tmp_path / ".env") is None

    def test_comments_blank_lines_and_quotes(self, tmp_path):
        """Comments and blank lines are ignored, quotes are stripped."""
        env = tmp_path / ".env"
        env.write_text('FOO=bar\n# comment\n\n\nBAZ="qux"\n')

        assert load_env(env) == {"FOO": "bar", "BAZ": "qux"}

    def test_single_quotes_and_whitespace(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("  DB_HOST = 'db.internal'  \nWP_HOME=http://localhost:8000\n")

        assert load_env(env) == {
            "DB_HOST": "db.internal",
            "WP_HOME": "http://localhost:8000",
        }

    def test_lines_without_equals_are_skipped(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("JUSTAKEY\nREAL=value\n")

        assert load_env(env) == {"REAL": "value"}

    def test_value_split_on_first_equals(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("DATABASE_URL=mysql://u:p@db/wp?ssl=true\n")

        assert load_env(env)["DATABASE_URL"] == "mysql://u:p@db/wp?ssl=true"

    def test_hash_inside_unquoted_value_is_kept(self, tmp_path):
        """Everything after the first = is the value, including ' #'."""
        env = tmp_path / ".env"
        env.write_text("WP_ADMIN_PASSWORD=s3cret #42\n")

        assert load_env(env) == {"WP_ADMIN_PASSWORD": "s3cret #42"}

    def test_backslashes_are_not_expanded(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text('DB_PASSWORD="a\\nb"\n')

        assert load_env(env) == {"DB_PASSWORD": "a\\nb"}

    def test_export_prefix_is_part_of_the_key(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("export WP_HOME=http://x\nWEB_PORT=8000\n")

        values = load_env(env)

        assert values["export WP_HOME"] == "http://x"
        assert "WP_HOME" not in values
        assert values["WEB_PORT"] == "8000"

    def test_unterminated_quote(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("DB_NAME='wordpress\nDB_USER=wp\n")

        values = load_env(env)

        assert values["DB_NAME"] == "wordpress"
        assert values["DB_USER"] == "wp"

    def test_password_reaches_config_intact(self, tmp_path):
        (tmp_path / ".env").write_text("WP_ADMIN_PASSWORD=s3cret #42\n")

        assert StackConfig.load(tmp_path).admin_password == "s3cret #42"

    def test_empty_values_are_kept(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("AUTH_KEY=''\nNONCE_KEY=\n")

        assert load_env(env) == {"AUTH_KEY": "", "NONCE_KEY": ""}


class TestStackConfig:
    """Tests for StackConfig construction."""

    def test_defaults(self):
        config = StackConfig.from_env(None)

        assert config.db_host == "mariadb"
        assert config.db_name == "wordpress"
        assert config.db_user == "wordpress"
        assert config.db_password == "wordpress"
        assert config.redis_port == 6379
        assert config.site_title == "My WordPress Site"
        assert config.admin_user == "admin"
        assert config.admin_password == "admin123"
        assert config.admin_email == "admin@example.com"
        assert config.home_url == "http://localhost:8080"
        assert config.admin_url == "http://localhost:8080/wp/wp-admin"

    def test_values_from_env(self):
        config = StackConfig.from_env({
            "DB_HOST": "db",
            "WP_TITLE": "Staging",
            "WP_HOME": "https://example.test/",
            "WEB_PORT": "8000",
        })

        assert config.db_host == "db"
        assert config.site_title == "Staging"
        assert config.web_port == 8000
        assert config.admin_url == "https://example.test/wp/wp-admin"

    def test_empty_value_keeps_default(self):
        config = StackConfig.from_env({"DB_PASSWORD": "", "WP_ADMIN_USER": "  "})

        assert config.db_password == "wordpress"
        assert config.admin_user == "admin"

    def test_bad_port_keeps_default(self):
        config = StackConfig.from_env({"REDIS_PORT": "not-a-port"})

        assert config.redis_port == 6379

    def test_load_overlays_environ(self, tmp_path):
        """Variables passed as environ take precedence over the file."""
        (tmp_path / ".env").write_text("DB_HOST=from-file\nDB_NAME=site\n")

        config = StackConfig.load(tmp_path, environ={"DB_HOST": "from-container", "UNRELATED": "x"})

        assert config.db_host == "from-container"
        assert config.db_name == "site"

    def test_load_without_file(self, tmp_path):
        assert StackConfig.load(tmp_path) == StackConfig()

    def test_config_is_frozen(self):
        config = StackConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.db_host = "elsewhere"
