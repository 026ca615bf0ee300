# pumpctl

`pumpctl` drives two syringe pumps (Pump A at address 0, Pump B at address 1)
over one serial line and runs concentration-gradient protocols made of linear
segments. It also has a library class for reading a conductivity meter over a
serial line.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
pumpctl
```

starts an interactive shell. Every action is logged to a timestamped console,
and new console lines are printed after each command.

```
pumpctl --script commands.txt
```

runs the commands in a file, one per line, and then quits.

Shell commands:

| Command | What it does |
| --- | --- |
| `ports` | List the serial ports present. |
| `coms COND PUMP` | Choose the meter and pump ports (`None` for no port). Choosing a pump port opens it and asks both pumps for their version. |
| `settings FLOW PAC PBC` | Set flow rate (mL/min) and the concentrations of Pump A and Pump B (mM); settings must then be confirmed again. |
| `confirm` | Confirm the settings; the protocol plot's y axis spans PAC to PBC. |
| `add MINUTES START END [AFTER_ROW]` | Add a segment at the end, or after the given row. Zero-length segments are refused. |
| `rm [ROW]` | Remove a segment. |
| `clear` | Remove every segment. |
| `segments` | Show the segment table. |
| `start` | List the segments and start (or restart) the protocol on the next tick. |
| `stop` | Stop the protocol. |
| `send` | Send the flow rate to both pumps. |
| `tick [N]` | Advance N time steps (default 1). Each step also reads pump replies into the console. |
| `clearlog` | Clear the console. |
| `save BASE` | Write the console to `BASE.txt` (plain) and `BASE_colors.md` (HTML with colours). |
| `plot FILE` | Render the protocol chart to an image file. |
| `quit` | Leave the shell (end of input does the same). |

A run lasts one tick per sample of the protocol after the first; when the last
tick has passed the console reports that the protocol ended on its own.

## Library overview

- `pumpctl.protocol.Protocol` turns segments of `[duration_minutes, start, end]`
  into a time (minutes) / concentration trace sampled every `dt` seconds
  (0.5 by default) with `generate(segments)`. An empty list leaves it
  unchanged, segments without three values are skipped, and a segment shorter
  than one time step raises `ValueError`. `clear()` empties it.
- `pumpctl.segments.SegmentTable` holds the editable segment list.
  `add_segment(time_minutes, start_conc, end_conc, insert_row)` inserts a row
  (an out-of-range row appends), `remove_segment(pos)` removes one (an
  out-of-range position removes the last), `segments()` returns the rows as
  numbers (non-numeric cells read as 0.0), and `subscribe(callback)` registers
  a function that runs whenever the segments change. `insert_rows`,
  `move_rows` and `remove_rows` edit rows directly.
- `pumpctl.pumps` builds pump commands with `build_command(cmd, value)`,
  splits replies framed by STX/ETX bytes with `FrameParser.feed(data)`, and
  talks to the pumps through `PumpInterface` (`open_port`,
  `broadcast_command`, `send_to_pump`, `send_command`, `poll`,
  `close_port`; also usable as a context manager). Failures raise
  `PumpError`.
- `pumpctl.condmeter.CondMeter` sets the meter's clock on opening, reads
  measurements with `get_measurement()`, and, once both `set_min` and
  `set_max` are given, converts readings to concentration in mM. Replies are
  parsed by `parse_reply(data)`; failures raise `CondMeterError`.
- `pumpctl.plot.PlotModel` keeps the data, padded axis ranges and a vertical
  position marker for a chart and can `render(path)` it to an image file.
- `pumpctl.ports` lists serial ports with `available_ports()`, and
  `PortSelection` keeps the pump and meter choices from landing on the same
  port.
- `pumpctl.controller.PumpController` ties the table, protocol, plots, pumps
  and console together and tracks which inputs (`Controls`) are enabled;
  `pumpctl.console.Console` is its log. `pumpctl.cli.ControllerShell` is the
  shell built on it.

## Example

```python
from pumpctl.segments import SegmentTable
from pumpctl.protocol import Protocol

table = SegmentTable()
protocol = Protocol()
table.subscribe(lambda: protocol.generate(table.segments()))

table.add_segment(5, 0, 100, -1)
table.add_segment(2.5, 100, 100, -1)
print(len(protocol.x_values))
```

## What it does not do

- There is no graphical window; charts are only written to image files.
- The conductivity meter is not wired into the controller or the shell; use
  `CondMeter` from Python to read it.
- Time does not pass on its own: a protocol advances only through `tick`
  (or `PumpController.timer_tick`).
- `send` only sets the flow rate on the pumps; no gradient program is
  uploaded to them, and the shell has no commands to start or stop the pumps.
- The enabled state of controls is recorded but the shell does not enforce it.