"""
Snapshot recording for the trace-table tracer.

A ``Snapshot`` is captured after every semantically meaningful line (a
condition evaluation, an assignment or a PRINT). Its variables are frozen
deep copies, so nothing the program does afterwards can reach back into an
earlier snapshot. The finished ``Trace`` is read-only; consumers only index
into it.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Sequence, Tuple

from values import format_value, is_sequence
from variable_store import VariableStore

# line_index of the snapshot taken before any line runs
NOT_STARTED = -1


@dataclass(frozen=True)
class Snapshot:
    line_index: int
    variables: Mapping[str, Any]
    output: Tuple[str, ...]

    @property
    def started(self) -> bool:
        return self.line_index != NOT_STARTED


class Trace:
    """Ordered, immutable sequence of snapshots for one run."""

    def __init__(self, snapshots: Sequence[Snapshot], variable_order: Sequence[str] = (),
                 halted_by_step_limit: bool = False):
        self._snapshots = tuple(snapshots)
        self.variable_order = tuple(variable_order)
        self.halted_by_step_limit = halted_by_step_limit

    def __len__(self) -> int:
        return len(self._snapshots)

    def __getitem__(self, index):
        return self._snapshots[index]

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._snapshots)

    def __repr__(self):
        return f"Trace({len(self)} snapshots, halted={self.halted_by_step_limit})"

    @property
    def final_output(self) -> Tuple[str, ...]:
        return self._snapshots[-1].output if self._snapshots else ()

    def display_variables(self) -> List[str]:
        """Names eligible for a scalar column: never a sequence in any snapshot."""
        return [name for name in self.variable_order if not self._ever_sequence(name)]

    def sequence_variables(self) -> List[str]:
        return [name for name in self.variable_order if self._ever_sequence(name)]

    def _ever_sequence(self, name: str) -> bool:
        return any(is_sequence(snap.variables.get(name)) for snap in self._snapshots)

    def new_output(self, index: int) -> Tuple[str, ...]:
        """Output lines produced by the step at *index*."""
        if index <= 0:
            return ()
        before = len(self._snapshots[index - 1].output)
        return self._snapshots[index].output[before:]

    def changed_variables(self, index: int) -> List[str]:
        """Names whose displayed value differs from the previous snapshot."""
        current = self._snapshots[index].variables
        previous = self._snapshots[index - 1].variables if index > 0 else {}
        changed = []
        for name, value in current.items():
            before = previous.get(name)
            if before is None or format_value(before) != format_value(value):
                changed.append(name)
        return changed

    def executed_lines(self, index: int) -> List[int]:
        """Distinct line indices recorded in snapshots before *index*."""
        seen = []
        for snap in self._snapshots[1:index]:
            if snap.started and snap.line_index not in seen:
                seen.append(snap.line_index)
        return seen


class SnapshotRecorder:
    def __init__(self):
        self.snapshots: List[Snapshot] = []
        self.variable_order: List[str] = []

    def record_initial(self):
        self.snapshots.append(Snapshot(NOT_STARTED, MappingProxyType({}), ()))

    def record(self, line_index: int, store: VariableStore, output: Sequence[str]):
        self.snapshots.append(Snapshot(line_index, store.freeze(), tuple(output)))

    def track(self, name: str):
        """Remember the order in which names are first bound."""
        if name not in self.variable_order:
            self.variable_order.append(name)

    def finish(self, halted_by_step_limit: bool = False) -> Trace:
        return Trace(self.snapshots, self.variable_order, halted_by_step_limit)
