"""Tests for keyfile provisioning."""

import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from replsetctl.exceptions import ConfigurationError
from replsetctl.keyfile import ensure_keyfile, has_keyfile_directive


class TestKeyfileDirective:
    def test_directive(self, tmp_path: Path) -> None:
        config = tmp_path / "mongod.conf"
        config.write_text("port = 27017\n  keyFile = /etc/mongo/key\n")
        assert has_keyfile_directive(config)

    def test_commented_out(self, tmp_path: Path) -> None:
        config = tmp_path / "mongod.conf"
        config.write_text("# keyFile = /etc/mongo/key\n")
        assert not has_keyfile_directive(config)

    def test_missing_config(self, tmp_path: Path) -> None:
        assert not has_keyfile_directive(tmp_path / "missing.conf")


class TestEnsureKeyfile:
    def test_external_keyfile(self, tmp_path: Path) -> None:
        config = tmp_path / "mongod.conf"
        config.write_text("keyFile = /etc/mongo/key\n")
        dest = tmp_path / "keyfile"

        assert ensure_keyfile(config, None, dest) == []
        assert not dest.exists()

    def test_writes_keyfile(self, tmp_path: Path) -> None:
        dest = tmp_path / "keyfile"

        args = ensure_keyfile(tmp_path / "mongod.conf", "s3cr3tk3y", dest)

        assert args == ["--keyFile", str(dest)]
        assert dest.read_text() == "s3cr3tk3y\n"
        assert stat.S_IMODE(dest.stat().st_mode) == 0o600

    def test_fixes_open_permissions(self, tmp_path: Path) -> None:
        dest = tmp_path / "keyfile"
        dest.write_text("old")
        dest.chmod(0o644)

        ensure_keyfile(tmp_path / "mongod.conf", "s3cr3tk3y", dest)

        assert dest.read_text() == "s3cr3tk3y\n"
        assert stat.S_IMODE(dest.stat().st_mode) == 0o600

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_value(self, tmp_path: Path, value: str | None) -> None:
        dest = tmp_path / "keyfile"

        with pytest.raises(ConfigurationError, match="MONGODB_KEYFILE_VALUE"):
            ensure_keyfile(tmp_path / "mongod.conf", value, dest)

        assert not dest.exists()

    def test_unwritable_directory(self, tmp_path: Path) -> None:
        dest = tmp_path / "keyfile"

        with (
            patch("replsetctl.keyfile.os.access", return_value=False),
            pytest.raises(ConfigurationError, match="Couldn't create") as exc_info,
        ):
            ensure_keyfile(tmp_path / "mongod.conf", "s3cr3tk3y", dest)

        details = exc_info.value.details
        assert details[0].startswith("CAUSE: current user doesn't have permissions")
        assert any("current user id" in line for line in details)
        assert any("directory permissions: d" in line for line in details)
        assert not dest.exists()
