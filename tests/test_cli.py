import io
from datetime import datetime

from pumpctl.cli import ControllerShell, main
from pumpctl.controller import PumpController


def make_shell():
    ctl = PumpController(clock=lambda: datetime(2024, 1, 2, 3, 4, 5))
    out = io.StringIO()
    shell = ControllerShell(ctl, stdin=io.StringIO(""), stdout=out)
    return shell, out


def run(shell, *lines):
    shell.cmdqueue.extend([*lines, "quit"])
    shell.cmdloop()


def test_welcome_printed():
    shell, out = make_shell()
    run(shell)
    assert "03:04:05 | Welcome to Pump Controller v. 0.5.0!" in out.getvalue()


def test_add_and_list_segments():
    shell, out = make_shell()
    run(shell, "add 1.5 0 10", "segments")
    text = out.getvalue()
    assert "Time (min) | [Start] (mM) | [End] (mM)" in text
    assert "0: 1.5 | 0 | 10" in text
    assert shell.controller.table.row_count() == 1


def test_full_run_through_shell():
    shell, out = make_shell()
    run(shell, "add 0.25 0 10", "start", "tick", "tick 40")
    text = out.getvalue()
    assert "Protocol started." in text
    assert "Protocol ended on its own" in text
    assert not shell.controller.run_active


def test_bad_arguments_reported():
    shell, out = make_shell()
    run(shell, "add x 1 2", "bogus")
    text = out.getvalue()
    assert "error:" in text
    assert "unknown command 'bogus'" in text
    assert shell.controller.table.row_count() == 0


def test_settings_change_controls():
    shell, out = make_shell()
    run(shell, "settings 1.25 10 50", "confirm")
    controls = shell.controller.controls
    assert controls.flow_rate == 1.25
    assert controls.conc_max == 50
    assert "Flow Rate (mL/min): 1.25 | Pump A (mM): 10 | Pump B (mM): 50" in out.getvalue()


def test_clearlog_prints_notice():
    shell, out = make_shell()
    run(shell, "clearlog")
    assert [e.text for e in shell.controller.console.entries] == ["Console cleared!"]
    assert out.getvalue().rstrip().endswith("Console cleared!")


def test_main_runs_script(tmp_path, capsys):
    script = tmp_path / "cmds.txt"
    script.write_text("add 1 0 10\nstart\ntick\n", encoding="utf-8")
    assert main(["--script", str(script)]) == 0
    captured = capsys.readouterr().out
    assert "Welcome to Pump Controller" in captured
    assert "Protocol started." in captured