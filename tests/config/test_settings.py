"""Tests for TruckflowSettings resolution."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from truckflow.config.settings import TruckflowSettings


class TestFromCli:
    def test_defaults_without_config(self, tmp_path: Path) -> None:
        s = TruckflowSettings.from_cli(yard_root=tmp_path)
        assert s.yard_root == tmp_path
        assert s.config_path is None
        assert s.store.db_name == "truckflow.db"
        assert s.weighbridge.unit == "kg"
        assert not s.json_output

    def test_toml_overrides(self, tmp_path: Path) -> None:
        (tmp_path / "truckflow.toml").write_text(
            '[store]\ndb_name = "north.db"\nlock_timeout_seconds = 2.5\n'
            '[weighbridge]\nunit = "t"\n'
        )
        s = TruckflowSettings.from_cli(yard_root=tmp_path)
        assert s.config_path == tmp_path / "truckflow.toml"
        assert s.store.db_name == "north.db"
        assert s.store.lock_timeout_seconds == 2.5
        assert s.store.busy_timeout_ms == 5000
        assert s.weighbridge.unit == "t"

    def test_yard_root_from_config_parent(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "truckflow.toml").write_text("")
        nested = tmp_path / "gate"
        nested.mkdir()
        monkeypatch.chdir(nested)
        s = TruckflowSettings.from_cli()
        assert s.yard_root.resolve() == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[weighbridge]\nunit = "lb"\n')
        s = TruckflowSettings.from_cli(config_path=str(cfg))
        assert s.weighbridge.unit == "lb"
        assert s.yard_root == tmp_path

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "truckflow.toml").write_text('[store]\ndb_name = "toml.db"\n')
        monkeypatch.setenv("TRUCKFLOW_STORE__DB_NAME", "env.db")
        s = TruckflowSettings.from_cli(yard_root=tmp_path)
        assert s.store.db_name == "env.db"

    def test_cli_flags_win(self, tmp_path: Path) -> None:
        s = TruckflowSettings.from_cli(yard_root=tmp_path, json_output=True, verbose=True)
        assert s.json_output
        assert s.verbose

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "truckflow.toml").write_text("[store\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            TruckflowSettings.from_cli(yard_root=tmp_path)

    def test_frozen(self, tmp_path: Path) -> None:
        s = TruckflowSettings.from_cli(yard_root=tmp_path)
        with pytest.raises(ValidationError):
            s.verbose = True  # type: ignore[misc]
