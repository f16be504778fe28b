from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from modelbridge.interfaces.cli import check, cli

WIDE = {"COLUMNS": "200"}


def _config(tmp_path: Path, models: dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"models": models}), encoding="utf-8")
    return path


def test_check_lists_resolved_models(tmp_path: Path) -> None:
    path = _config(
        tmp_path,
        {
            "Item": {"name": "shop_records.Item", "load_with": ["tags", "notes"]},
            "Tag": {"name": "shop_records.Tag"},
        },
    )

    result = CliRunner().invoke(check, ["--config", str(path)], env=WIDE)

    assert result.exit_code == 0
    assert "shop_records.ItemManager" in result.output
    assert "tags, notes" in result.output
    assert "(fallback)" in result.output


def test_check_fails_on_missing_name(tmp_path: Path) -> None:
    path = _config(tmp_path, {"Item": {"manager": "shop_records.ItemManager"}})

    result = CliRunner().invoke(check, ["--config", str(path)], env=WIDE)

    assert result.exit_code == 1
    assert "Model configuration failed" in result.output


def test_check_fails_on_unloadable_record_class(tmp_path: Path) -> None:
    path = _config(tmp_path, {"Item": {"name": "shop_records.Gadget"}})

    result = CliRunner().invoke(check, ["--config", str(path)], env=WIDE)

    assert result.exit_code == 1
    assert "shop_records.Gadget" in result.output


def test_check_without_models(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        check, ["--config", str(tmp_path / "missing.json")], env=WIDE
    )

    assert result.exit_code == 0
    assert "No models configured" in result.output


def test_cli_group_lists_check_command() -> None:
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "check" in result.output
