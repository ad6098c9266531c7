"""
Gantt chart rendering for a schedule timeline.

Both renderers share one layout: the timeline is split into process and
idle blocks, each block gets a cell wide enough for its label, and time
marks sit under the cell boundaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

IDLE_LABEL = "idle"
COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


@dataclass(frozen=True)
class GanttBlock:
    label: str
    start_time: int
    end_time: int
    idle: bool = False

    @property
    def width(self) -> int:
        # One column per time unit, but never narrower than the label.
        return max(self.end_time - self.start_time, len(self.label)) + 2


def gantt_blocks(slices: Sequence[ScheduledSlice]) -> List[GanttBlock]:
    """
    Turn slices into consecutive blocks starting at t=0, inserting an idle
    block wherever the CPU had nothing to run.
    """
    blocks: List[GanttBlock] = []
    clock = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > clock:
            blocks.append(GanttBlock(IDLE_LABEL, clock, sl.start_time, idle=True))
        blocks.append(GanttBlock(f"P{sl.pid}", sl.start_time, sl.end_time))
        clock = sl.end_time
    return blocks


def _time_marks(blocks: Sequence[GanttBlock]) -> str:
    marks = str(blocks[0].start_time)
    col = 0
    for block in blocks:
        col += block.width + 1
        marks = marks.ljust(col) + str(block.end_time)
    return marks


def render_gantt(slices: Sequence[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart::

        +----+------+-----+
        | P1 | idle |  P2 |
        +----+------+-----+
        0    2      4     7
    """
    if not slices:
        return "(no execution)"

    blocks = gantt_blocks(slices)
    border = "+" + "+".join("-" * b.width for b in blocks) + "+"
    bar = "|" + "|".join(b.label.center(b.width) for b in blocks) + "|"
    return "\n".join([border, bar, border, _time_marks(blocks)])


def build_rich_gantt(slices: Sequence[ScheduledSlice]) -> Panel:
    """
    Rich version of ``render_gantt``: one colour per process, idle blocks dimmed.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart")

    blocks = gantt_blocks(slices)
    pid_to_color: Dict[str, str] = {}

    bar = Text("|")
    for block in blocks:
        if block.idle:
            style = "dim"
        else:
            color = pid_to_color.setdefault(block.label, COLORS[len(pid_to_color) % len(COLORS)])
            style = f"bold black on {color}"
        bar.append(block.label.center(block.width), style=style)
        bar.append("|")

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(Text(_time_marks(blocks)))
    return Panel.fit(grid, title="Gantt Chart")
