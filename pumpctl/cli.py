"""Command shell that drives the pump controller from a terminal."""

from __future__ import annotations

import argparse
import cmd
import sys
from pathlib import Path
from typing import IO, Sequence

from pumpctl.controller import PumpController
from pumpctl.ports import available_ports


class ControllerShell(cmd.Cmd):
    """Line commands for settings, segments and protocol runs."""

    prompt = "pumpctl> "

    def __init__(
        self,
        controller: PumpController | None = None,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
    ) -> None:
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.controller = controller if controller is not None else PumpController()
        self._shown = 0

    def _say(self, text: str) -> None:
        print(text, file=self.stdout)

    def _flush(self) -> None:
        entries = self.controller.console.entries
        for entry in entries[self._shown:]:
            self._say(entry.to_plain())
        self._shown = len(entries)

    def preloop(self) -> None:
        self._flush()

    def postcmd(self, stop: bool, line: str) -> bool:
        self._flush()
        return stop

    def onecmd(self, line: str) -> bool:
        try:
            return bool(super().onecmd(line))
        except (ValueError, IndexError, KeyError) as exc:
            self._say(f"error: {exc}")
            return False

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> None:
        self._say(f"error: unknown command {line.split()[0]!r}")

    def do_ports(self, arg: str) -> None:
        """List the serial ports present."""
        for name in available_ports():
            self._say(name)

    def do_coms(self, arg: str) -> None:
        """coms COND PUMP -- choose ports ("None" for no port)."""
        cond, pump = arg.split()
        self.controller.set_coms(cond, pump)

    def do_settings(self, arg: str) -> None:
        """settings FLOW PAC PBC -- change flow rate and pump concentrations."""
        flow, pac, pbc = arg.split()
        controls = self.controller.controls
        controls.flow_rate = float(flow)
        controls.pac = int(pac)
        controls.pbc = int(pbc)
        self.controller.settings_changed()

    def do_confirm(self, arg: str) -> None:
        """Confirm the settings."""
        self.controller.confirm_settings()

    def do_add(self, arg: str) -> None:
        """add MINUTES START END [AFTER_ROW] -- add a segment."""
        parts = arg.split()
        if len(parts) not in (3, 4):
            raise ValueError("add takes MINUTES START END [AFTER_ROW]")
        after = int(parts[3]) if len(parts) == 4 else None
        self.controller.add_segment(float(parts[0]), int(parts[1]), int(parts[2]), after)

    def do_rm(self, arg: str) -> None:
        """rm [ROW] -- remove a segment."""
        self.controller.remove_segment(int(arg) if arg.strip() else None)

    def do_clear(self, arg: str) -> None:
        """Remove every segment."""
        self.controller.clear_segments()

    def do_segments(self, arg: str) -> None:
        """Show the segment table."""
        table = self.controller.table
        self._say(" | ".join(table.header(c) for c in range(table.column_count())))
        for row in range(table.row_count()):
            cells = (table.cell(row, c) for c in range(table.column_count()))
            self._say(f"{table.header(row, horizontal=False)}: " + " | ".join(cells))

    def do_start(self, arg: str) -> None:
        """Start (or restart) the protocol."""
        self.controller.start_protocol()

    def do_stop(self, arg: str) -> None:
        """Stop the protocol."""
        self.controller.stop_protocol()

    def do_send(self, arg: str) -> None:
        """Send the flow rate to the pumps."""
        self.controller.send_protocol()

    def do_tick(self, arg: str) -> None:
        """tick [N] -- advance N time steps."""
        count = int(arg) if arg.strip() else 1
        for _ in range(count):
            self.controller.timer_tick()

    def do_clearlog(self, arg: str) -> None:
        """Clear the console."""
        self.controller.clear_console(True)
        self._shown = 0

    def do_save(self, arg: str) -> None:
        """save BASE -- write the console to BASE.txt and BASE_colors.md."""
        if not arg.strip():
            raise ValueError("save needs a file name")
        self.controller.save_console(arg.strip())

    def do_plot(self, arg: str) -> None:
        """plot FILE -- render the protocol chart to an image."""
        if not arg.strip():
            raise ValueError("plot needs a file name")
        out = self.controller.protocol_plot.render(Path(arg.strip()))
        self._say(f"plot written to {out}")

    def do_quit(self, arg: str) -> bool:
        """Leave the shell."""
        self._flush()
        self._say("bye")
        return True

    def do_EOF(self, arg: str) -> bool:
        """Leave the shell at end of input."""
        self._say("")
        return self.do_quit(arg)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pumpctl", description="Pump controller shell.")
    parser.add_argument("--script", type=Path, help="file of commands to run")
    args = parser.parse_args(argv)
    shell = ControllerShell(stdout=sys.stdout)
    if args.script is not None:
        lines = args.script.read_text(encoding="utf-8").splitlines()
        shell.cmdqueue.extend([*lines, "quit"])
    shell.cmdloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())