import importlib
import io
import os
import subprocess
import sys

from ossim.main import main, simulate
from ossim.utils.visualization import Visualizer

from conftest import CONFIG_TEXT, META_DATA_TEXT, PROGRAM, make_config, ops


def test_simulate_reorders_and_reports_identity():
    sink = io.StringIO()
    results = simulate(make_config(scheduling_code="SJF"), ops(PROGRAM), [sink])
    assert results['identity'] == [2, 1, 3]
    assert results['algorithm'] == "SJF"
    assert sink.getvalue().splitlines() == results['event_log']


def test_simulate_describe_writes_reports_first():
    sink = io.StringIO()
    simulate(make_config(processor=10), ops("A{begin}0; P{run}5; A{finish}0;"), [sink], describe=True)
    text = sink.getvalue()
    assert text.startswith("Configuration File Data\n")
    assert "Processor = 10 ms/cycle" in text
    assert "P{run}5 - 50 ms" in text
    assert "A{begin}0 -" not in text


def test_simulate_with_arrivals():
    arrivals = ["A{begin}0; O{monitor}1; A{finish}0;"]
    results = simulate(make_config(), ops("A{begin}0; A{finish}0;"), arrivals=arrivals,
                       arrival_interval_ms=1)
    assert results['arrivals'] == 3
    assert [p.ordinal for p in results['processes']] == [1, 2]


def test_main_logs_to_file_and_monitor(program_files, capsys, tmp_path):
    assert main([program_files("PS")]) == 0
    out = capsys.readouterr().out
    log_text = (tmp_path / "sim.lgf").read_text()
    assert out == log_text
    assert "OS: preparing process 3" in log_text.splitlines()[1]


def test_main_reports_errors(program_files, capsys):
    assert main([program_files("FIFO", meta_data="S{begin}0; S{finish}0.\n")]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_main_rejects_bad_extension(tmp_path, capsys):
    path = tmp_path / "sim.txt"
    path.write_text("")
    assert main([str(path)]) == 1
    assert ".conf extension" in capsys.readouterr().err


def test_main_saves_chart(program_files, tmp_path, capsys):
    chart = tmp_path / "timeline.png"
    assert main([program_files("SJF"), "--chart", str(chart), "--summary"]) == 0
    assert chart.exists() and chart.stat().st_size > 0
    assert "Process summary - SJF" in capsys.readouterr().out


def test_draw_timeline_without_data(capsys):
    Visualizer().draw_timeline([], "FIFO", show=False)
    assert "No timeline data" in capsys.readouterr().out


def test_module_entry_point(program_files):
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    result = subprocess.run(
        [sys.executable, '-m', 'ossim', program_files("RR")],
        capture_output=True,
        text=True,
        cwd=repo_root,
        check=False,
    )
    assert result.returncode == 0, result.stderr
    lines = [ln for ln in result.stdout.splitlines() if ln.strip()]
    assert lines[0].endswith("Simulator program starting")
    assert lines[-1].endswith("Simulator program ending")


def test_relative_log_path_follows_the_config_file(tmp_path, monkeypatch, capsys):
    config_dir = tmp_path / "sim"
    config_dir.mkdir()
    config_path = config_dir / "sim.conf"
    config_path.write_text(CONFIG_TEXT.replace("{code}", "FIFO").replace("{log_path}", "run.lgf"))
    (config_dir / "program.mdf").write_text(META_DATA_TEXT)
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    assert main([str(config_path)]) == 0
    assert (config_dir / "run.lgf").read_text() == capsys.readouterr().out
    assert not (elsewhere / "run.lgf").exists()


def test_importing_the_entry_module_does_not_run_it():
    module = importlib.import_module("ossim.__main__")
    assert module.main is main
