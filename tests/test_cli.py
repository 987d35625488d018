import json
from pathlib import Path

import pytest

from chartplan.cli import main

ROOT = Path(__file__).resolve().parents[1]
CONFIG_DIR = ROOT / "configs"
EXAMPLE = CONFIG_DIR / "examples" / "column.yaml"


def test_help_exits_cleanly(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])

    assert exc.value.code == 0
    assert "compile" in capsys.readouterr().out


def test_no_command_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main([])

    assert exc.value.code == 2
    assert "chartplan" in capsys.readouterr().out


def test_compile_writes_plan(tmp_path: Path) -> None:
    output = tmp_path / "plan.json"

    main(["compile", str(EXAMPLE), "--width", "600", "-o", str(output)])

    plan = json.loads(output.read_text(encoding="utf-8"))
    assert plan["plot_type"] == "column"
    assert plan["options"]["width"] == 600
    assert plan["geometry"]["position"] == ["month", "sales"]
    assert plan["geometry"]["widthRatio"] == {"column": 0.4}
    assert plan["elements"] == 4
    assert len(plan["overlays"][0]["tags"]) == 3
    assert plan["id"]


def test_compile_relayout_to_stdout(capsys) -> None:
    main(["compile", str(EXAMPLE), "--relayout", "800x400"])

    plan = json.loads(capsys.readouterr().out)
    assert plan["options"]["width"] == 800
    assert len(plan["overlays"]) == 1


def test_compile_unknown_type_exits_with_error(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["compile", str(EXAMPLE), "--type", "pie"])

    assert exc.value.code == 1


def test_run_uses_hydra_config(tmp_path: Path) -> None:
    output = tmp_path / "plan.json"

    main(
        [
            "run",
            "--config-path",
            str(CONFIG_DIR),
            f"plot.config='{EXAMPLE.as_posix()}'",
            "render.width=640",
            f"output.path='{output.as_posix()}'",
        ]
    )

    plan = json.loads(output.read_text(encoding="utf-8"))
    assert plan["options"]["width"] == 640
    assert plan["options"]["height"] == 400
    assert plan["geometry"]["type"] == "interval"


def test_cfg_prints_composed_config(capsys) -> None:
    main(["cfg", "--config-path", str(CONFIG_DIR), "plot.type=bar"])

    assert "type: bar" in capsys.readouterr().out


def test_list_types(capsys) -> None:
    main(["list-types"])

    lines = capsys.readouterr().out.splitlines()
    assert [line.split("\t")[0] for line in lines] == ["bar", "column", "scatter"]
    assert "column:click" in lines[1]
