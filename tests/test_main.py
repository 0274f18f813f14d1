import json
import os

import pytest

import main as main_module
from errors import AccessError, ConfigError, FormatError, WriteError
from main import GRAPH_FILE, MANIFEST_FILE, main, parse_config, run_inline, run_step

ROW = "Alice,555-0001,Bob,555-0002,NYC\n"


@pytest.mark.parametrize("config", [None, {}, {"leak": ""}, {"leak": "   "}, {"leak": 42}])
def test_missing_or_empty_leak_is_a_config_error(config):
    with pytest.raises(ConfigError):
        parse_config(config)


def test_unknown_config_keys_are_ignored():
    assert parse_config({"leak": "a.csv", "other": 1}).leak == "a.csv"


def test_config_error_happens_before_any_io(tmp_path):
    step_dir = tmp_path / "step"
    with pytest.raises(ConfigError):
        run_step({}, str(step_dir))
    assert not step_dir.exists()


def test_file_mode_writes_graph_and_manifest(write_leak, tmp_path):
    path = write_leak(ROW)
    step_dir = tmp_path / "step"
    run_step({"leak": path}, str(step_dir))

    graph = json.loads((step_dir / GRAPH_FILE).read_text(encoding="utf-8"))
    manifest = json.loads((step_dir / MANIFEST_FILE).read_text(encoding="utf-8"))

    assert graph["meta"] == {"source": path, "rows": 1, "type": "contact_graph"}
    assert len(graph["nodes"]) == 2
    assert manifest == {
        "artifacts": {"graph": {"path": "graph.json", "type": "application/json"}}
    }
    assert sorted(os.listdir(step_dir)) == [GRAPH_FILE, MANIFEST_FILE]


def test_inline_mode_returns_graph_json(write_leak, tmp_path):
    path = write_leak(ROW)
    graph = json.loads(run_inline({"leak": path}))
    assert graph["edges"] == [
        {"owner_phone": "555-0001", "contact_phone": "555-0002", "weight": 1},
    ]
    assert not (tmp_path / GRAPH_FILE).exists()


@pytest.mark.parametrize(
    "leak_name, error",
    [("missing.csv", AccessError), ("broken.csv", FormatError)],
)
def test_read_failures_write_nothing(tmp_path, leak_name, error):
    (tmp_path / "broken.csv").write_text('h\n"Alice,555-0001,Bob,555-0002,NYC\n', encoding="utf-8")
    step_dir = tmp_path / "step"
    with pytest.raises(error):
        run_step({"leak": str(tmp_path / leak_name)}, str(step_dir))
    assert not step_dir.exists()


def test_unwritable_step_dir_is_a_write_error(write_leak, tmp_path):
    step_dir = tmp_path / "not-a-dir"
    step_dir.write_text("", encoding="utf-8")
    with pytest.raises(WriteError):
        run_step({"leak": write_leak(ROW)}, str(step_dir))


def test_manifest_failure_removes_graph(write_leak, tmp_path):
    step_dir = tmp_path / "step"
    (step_dir / MANIFEST_FILE).mkdir(parents=True)

    with pytest.raises(WriteError):
        run_step({"leak": write_leak(ROW)}, str(step_dir))

    assert sorted(os.listdir(step_dir)) == [MANIFEST_FILE]


def test_manifest_failure_with_failing_cleanup_is_still_a_write_error(write_leak, tmp_path, monkeypatch):
    step_dir = tmp_path / "step"
    (step_dir / MANIFEST_FILE).mkdir(parents=True)

    def _refuse(path):
        raise PermissionError(f"cannot remove {path}")

    monkeypatch.setattr(main_module.os, "remove", _refuse)
    with pytest.raises(WriteError, match="failed to write manifest"):
        run_step({"leak": write_leak(ROW)}, str(step_dir))


def test_cli_file_mode(write_leak, tmp_path):
    step_dir = tmp_path / "out"
    assert main(["--leak", write_leak(ROW), "--step-dir", str(step_dir)]) == 0
    assert (step_dir / GRAPH_FILE).exists()
    assert (step_dir / MANIFEST_FILE).exists()


def test_cli_inline_mode_prints_graph(write_leak, capsys):
    assert main(["--leak", write_leak(ROW), "--inline"]) == 0
    graph = json.loads(capsys.readouterr().out)
    assert graph["meta"]["rows"] == 1


def test_cli_reads_config_file(write_leak, tmp_path, capsys):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"leak": write_leak(ROW)}), encoding="utf-8")
    assert main(["--config", str(config_path), "--inline"]) == 0
    assert len(json.loads(capsys.readouterr().out)["nodes"]) == 2


def test_cli_returns_1_on_errors(tmp_path):
    assert main(["--step-dir", str(tmp_path)]) == 1
    assert main(["--leak", str(tmp_path / "missing.csv"), "--step-dir", str(tmp_path)]) == 1
    assert not (tmp_path / GRAPH_FILE).exists()
