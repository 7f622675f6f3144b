from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from values import CYCLE, as_index, is_sequence

# Upper bound for an indexed assignment that extends a sequence past its end.
MAX_SEQUENCE_LENGTH = 10000


def freeze_value(value: Any, _memo: Optional[Dict[int, Any]] = None) -> Any:
    """Deep, immutable copy of a Value: sequences become tuples.

    Like ``copy.deepcopy`` the memo maps already-copied sequences to their
    copies, so a sequence shared between names is frozen once. A sequence
    met again while its own copy is still being built is replaced by
    ``CYCLE``.
    """
    if not is_sequence(value):
        return value
    if _memo is None:
        _memo = {}
    key = id(value)
    if key in _memo:
        return _memo[key]
    _memo[key] = CYCLE
    frozen = tuple(freeze_value(v, _memo) for v in value)
    _memo[key] = frozen
    return frozen


class VariableStore:
    """Name -> Value bindings owned by a single execution run.

    Plain assignment replaces a binding wholesale, so a name may change type
    between assignments. Indexed assignment mutates an existing sequence in
    place and is silently ignored when the name does not hold one.
    """

    def __init__(self, bindings: Optional[Dict[str, Any]] = None):
        self._bindings: Dict[str, Any] = dict(bindings) if bindings else {}

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def get(self, name: str, default: Any = None) -> Any:
        return self._bindings.get(name, default)

    def names(self) -> List[str]:
        return list(self._bindings)

    def assign(self, name: str, value: Any):
        self._bindings[name] = value

    def read_index(self, name: str, index: Any) -> Any:
        """Element at *index*, or 0 when there is no such element."""
        seq = self._bindings.get(name)
        position = as_index(index)
        if not isinstance(seq, list) or position is None or position >= len(seq):
            return 0
        return seq[position]

    def assign_index(self, name: str, index: Any, value: Any) -> bool:
        """Store *value* at ``name[index]``; returns False when nothing changed."""
        seq = self._bindings.get(name)
        if not isinstance(seq, list):
            return False
        position = as_index(index)
        if position is None or position >= MAX_SEQUENCE_LENGTH:
            return False
        if position >= len(seq):
            seq.extend([0] * (position - len(seq) + 1))
        seq[position] = value
        return True

    def freeze(self) -> Mapping[str, Any]:
        memo: Dict[int, Any] = {}
        return MappingProxyType({name: freeze_value(v, memo) for name, v in self._bindings.items()})
