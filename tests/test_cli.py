import json

from family_views.cli import main
from family_views.host.family_definition import FamilyDefinition


def _write_family(tmp_path, scenario_family, name="family.rfa"):
    path = tmp_path / name
    FamilyDefinition.from_dict(scenario_family).write(str(path))
    return path


def test_cli_success_writes_manifest(tmp_path, scenario_family, capsys):
    _write_family(tmp_path, scenario_family)
    out_dir = tmp_path / "out"

    code = main(["--working-dir", str(tmp_path), "--output-dir", str(out_dir)])

    assert code == 0
    assert (out_dir / "views_manifest.json").exists()
    assert (out_dir / "views_manifest.csv").exists()
    stdout = capsys.readouterr().out
    assert "STATUS: SUCCESS" in stdout
    assert "4 - Symbol B Type B1" in stdout


def test_cli_missing_family_fails(tmp_path, capsys):
    code = main([str(tmp_path / "nope.rfa")])
    assert code == 1
    out = capsys.readouterr().out
    assert "STATUS: FAILED" in out
    assert "FamilyLoadError" in out


def test_cli_bad_config_exit_code(tmp_path, capsys):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"spacing_factor": -1}), encoding="utf-8")
    assert main(["--config", str(cfg)]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_cli_config_file_and_keep_default_view(tmp_path, scenario_family, capsys):
    _write_family(tmp_path, scenario_family, "desk.json")
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"family_file": "desk.json", "first_ordinal": 10}), encoding="utf-8")

    code = main(["--config", str(cfg), "--working-dir", str(tmp_path), "--keep-default-view"])

    assert code == 0
    assert "10 - Symbol A Type A1" in capsys.readouterr().out
