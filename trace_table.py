"""
Trace table rendering for a finished ``Trace``.

Rows follow the exam trace-table layout: one row per recorded step, one
column per scalar variable, and an Output column holding whatever that step
printed. Sequence variables are left out of the columns.
"""
import csv
from dataclasses import dataclass
from typing import List, Optional, Tuple

from snapshot import Snapshot, Trace
from values import format_value


@dataclass(frozen=True)
class TraceRow:
    step: int
    line: int               # 1-based source line
    cells: Tuple[str, ...]
    changed: Tuple[bool, ...]
    output: str


def format_cell(value) -> str:
    return '' if value is None else format_value(value)


def build_rows(trace: Trace, upto: Optional[int] = None) -> List[TraceRow]:
    """Rows for steps 1..*upto* (default: the whole trace)."""
    if upto is None:
        upto = len(trace) - 1
    var_names = trace.display_variables()
    rows = []
    for index in range(1, min(upto, len(trace) - 1) + 1):
        snap = trace[index]
        prev = trace[index - 1]
        cells, changed = [], []
        for name in var_names:
            current = format_cell(snap.variables.get(name))
            cells.append(current)
            changed.append(name in snap.variables and current != format_cell(prev.variables.get(name)))
        rows.append(TraceRow(
            step=index,
            line=snap.line_index + 1,
            cells=tuple(cells),
            changed=tuple(changed),
            output=', '.join(trace.new_output(index)),
        ))
    return rows


def table_headers(trace: Trace) -> List[str]:
    return ['Step', 'Line'] + trace.display_variables() + ['Output']


def format_trace_text(trace: Trace) -> str:
    """Format the trace as an ASCII table string."""
    rows = build_rows(trace)
    if not rows:
        return "No trace data recorded."
    body = [[str(r.step), str(r.line)] + list(r.cells) + [r.output] for r in rows]
    return _format_ascii_table(table_headers(trace), body)


def export_csv(trace: Trace, path: str):
    with open(path, 'w', encoding='utf-8', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(table_headers(trace))
        for r in build_rows(trace):
            writer.writerow([r.step, r.line, *r.cells, r.output])


def _format_ascii_table(headers, rows):
    """Render headers + rows as a fixed-width ASCII table."""
    col_w = [len(h) for h in headers]
    for row in rows:
        for i, c in enumerate(row):
            col_w[i] = max(col_w[i], len(str(c)))
    col_w = [min(w, 30) for w in col_w]

    def pad(s, w):
        return str(s)[:w].ljust(w)

    sep = '+' + '+'.join('-' * (w + 2) for w in col_w) + '+'
    hdr = '|' + '|'.join(f" {pad(h, w)} " for h, w in zip(headers, col_w)) + '|'
    lines = [sep, hdr, sep]
    for row in rows:
        lines.append('|' + '|'.join(f" {pad(c, w)} " for c, w in zip(row, col_w)) + '|')
    lines.append(sep)
    return '\n'.join(lines)


class TraceCursor:
    """Position within a finished trace; stepping is a pure index lookup."""

    def __init__(self, trace: Trace):
        self.trace = trace
        self.index = 0

    @property
    def current(self) -> Snapshot:
        return self.trace[self.index]

    @property
    def at_start(self) -> bool:
        return self.index == 0

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.trace) - 1

    def forward(self) -> bool:
        if self.at_end:
            return False
        self.index += 1
        return True

    def back(self) -> bool:
        if self.at_start:
            return False
        self.index -= 1
        return True

    def reset(self):
        self.index = 0

    def seek(self, index: int):
        self.index = max(0, min(index, len(self.trace) - 1))
