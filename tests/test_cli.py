"""Tests for the empdat command line."""
import json

import pytest
from click.testing import CliRunner

from empiresdat import profiles
from empiresdat.cli import cli
from empiresdat.dat.enums import UnitCategory
from empiresdat.profiles import Config, Profile, save_config

C = UnitCategory


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "cfg" / "config.toml"
    monkeypatch.setattr(profiles, "get_config_path", lambda: path)
    return path


@pytest.fixture
def dat_file(tmp_path, builder):
    path = tmp_path / "units.bin"
    path.write_bytes(
        builder.unit_record(C.TRAINABLE, name=b"Villager", unit_id=83)
        + builder.unit_record(C.TREE, name=b"Oak", unit_id=12)
        + builder.unit_record(C.BUILDING, name=b"Barracks", unit_id=112)
    )
    return path


@pytest.fixture
def runner():
    return CliRunner()


def test_categories(runner):
    result = runner.invoke(cli, ["categories"])
    assert result.exit_code == 0
    assert "building" in result.output
    assert "motion, commandable, battle, trainable, building" in result.output


def test_units_listing(runner, dat_file):
    result = runner.invoke(cli, ["--dat", str(dat_file), "units"])
    assert result.exit_code == 0, result.output
    assert "Villager" in result.output
    assert "Barracks" in result.output
    assert "3 of 3 units" in result.output


def test_units_category_filter(runner, dat_file):
    result = runner.invoke(cli, ["--dat", str(dat_file), "units", "--category", "tree"])
    assert result.exit_code == 0
    assert "Oak" in result.output
    assert "Villager" not in result.output
    assert "1 of 3 units" in result.output


def test_units_bad_category(runner, dat_file):
    result = runner.invoke(cli, ["--dat", str(dat_file), "units", "--category", "wizard"])
    assert result.exit_code == 2


def test_show(runner, dat_file):
    result = runner.invoke(cli, ["--dat", str(dat_file), "show", "112"])
    assert result.exit_code == 0
    assert "Unit 112: Barracks (building)" in result.output
    assert "building.construction_graphic_id" in result.output


def test_show_missing_unit(runner, dat_file):
    result = runner.invoke(cli, ["--dat", str(dat_file), "show", "4242"])
    assert result.exit_code == 1
    assert "Unit 4242 not found" in result.output


def test_export_json_to_file(runner, dat_file, tmp_path):
    out = tmp_path / "units.json"
    result = runner.invoke(cli, ["--dat", str(dat_file), "export", "-o", str(out)])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [u["name"] for u in data] == ["Villager", "Oak", "Barracks"]


def test_export_csv_stdout(runner, dat_file):
    result = runner.invoke(cli, ["--dat", str(dat_file), "export", "--format", "csv", "--count", "1"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].startswith("id,id2,category,name")
    assert len(lines) == 2


def test_decode_error_is_reported(runner, tmp_path):
    path = tmp_path / "bad.bin"
    path.write_bytes(b"\x07\x00\x00")
    result = runner.invoke(cli, ["--dat", str(path), "units"])
    assert result.exit_code == 1
    assert "Decode failed" in result.output
    assert "Invalid unit category tag: 7" in result.output


def test_profile_offset_used(runner, dat_file, tmp_path, builder):
    shifted = tmp_path / "shifted.bin"
    shifted.write_bytes(b"\xff" * 10 + dat_file.read_bytes())
    config = Config(default_profile="aoe")
    config.profiles["aoe"] = Profile(name="aoe", dat=shifted, offset=10)
    save_config(config)

    result = runner.invoke(cli, ["units", "--count", "2"])
    assert result.exit_code == 0, result.output
    assert "Oak" in result.output
    assert "Barracks" not in result.output


def test_no_dat_configured(runner):
    result = runner.invoke(cli, ["units"])
    assert result.exit_code == 2
    assert "No dat path provided" in result.output
