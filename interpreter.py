"""
Control-flow executor for the trace-table pseudocode dialect.

Runs a program line by line with an explicit program counter rather than by
recursing over a statement tree. Loops and branches are resolved by scanning
the classified lines for the matching WHILE / ENDWHILE / ELSEIF / ELSE /
ENDIF at the same nesting depth.

IF chains use a jump-target set: a false IF or ELSEIF arms the next branch
line of its chain and jumps there. An ELSEIF or ELSE that is reached without
being armed was reached by falling out of a branch that already ran, so it is
skipped to its ENDIF without evaluating anything.

Execution is lenient and never raises; a step budget guards against loops
that never end, and reaching it just ends the trace early.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Set, Tuple, Union

from ast_nodes import *
from evaluator import evaluate
from parser import Program, parse_program
from snapshot import SnapshotRecorder, Trace
from values import format_value, is_truthy
from variable_store import VariableStore

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Lines visited (structural ones included) before a run is cut off
MAX_STEPS = 500


@dataclass
class ExecutionContext:
    """Mutable state of one run; discarded once the trace is built."""
    program: Program
    store: VariableStore = field(default_factory=VariableStore)
    output: List[str] = field(default_factory=list)
    jump_targets: Set[int] = field(default_factory=set)
    recorder: SnapshotRecorder = field(default_factory=SnapshotRecorder)
    pc: int = 0
    steps: int = 0

    def record(self):
        self.recorder.record(self.pc, self.store, self.output)


class TraceInterpreter:
    def __init__(self, max_steps: int = MAX_STEPS):
        self.max_steps = max_steps
        self._line_handlers = {
            BlankLine: self.visit_PassLine,
            EndIfLine: self.visit_PassLine,
            UnknownLine: self.visit_PassLine,
            EndWhileLine: self.visit_EndWhileLine,
            WhileLine: self.visit_WhileLine,
            IfLine: self.visit_IfLine,
            ElseIfLine: self.visit_ElseIfLine,
            ElseLine: self.visit_ElseLine,
            PrintLine: self.visit_PrintLine,
            AssignLine: self.visit_AssignLine,
        }

    def run(self, source: Union[str, Iterable[str], Program]) -> Trace:
        """Execute *source* to completion and return its trace."""
        program = source if _is_program(source) else parse_program(source)
        ctx = ExecutionContext(program)
        ctx.recorder.record_initial()
        logger.debug("Tracing %d lines (max %d steps)", len(program), self.max_steps)

        too_deep = False
        while ctx.pc < len(program) and ctx.steps < self.max_steps:
            ctx.steps += 1
            line = program[ctx.pc]
            try:
                self._line_handlers[type(line)](ctx, line)
            except RecursionError:
                # a sequence nested too deeply to snapshot ends the trace here
                logger.warning("Value nested too deeply at line %d; trace ends early", ctx.pc + 1)
                too_deep = True
                break

        halted = not too_deep and ctx.pc < len(program)
        if halted:
            logger.warning("Stopped after %d steps at line %d (possible infinite loop)",
                           ctx.steps, ctx.pc + 1)
        logger.debug("Trace finished with %d snapshots", len(ctx.recorder.snapshots))
        return ctx.recorder.finish(halted_by_step_limit=halted)

    # ── Line visitors ──

    def visit_PassLine(self, ctx: ExecutionContext, line: Line):
        ctx.pc += 1

    def visit_EndWhileLine(self, ctx: ExecutionContext, line: EndWhileLine):
        loop_start = find_matching_while(ctx.program, ctx.pc)
        ctx.pc = loop_start if loop_start != -1 else ctx.pc + 1

    def visit_WhileLine(self, ctx: ExecutionContext, line: WhileLine):
        result = evaluate(line.condition, ctx.store)
        ctx.record()
        if is_truthy(result):
            ctx.pc += 1
        else:
            ctx.pc = find_matching_endwhile(ctx.program, ctx.pc) + 1

    def visit_IfLine(self, ctx: ExecutionContext, line: IfLine):
        self._branch(ctx, evaluate(line.condition, ctx.store))

    def visit_ElseIfLine(self, ctx: ExecutionContext, line: ElseIfLine):
        if not self._consume_jump_target(ctx):
            return
        self._branch(ctx, evaluate(line.condition, ctx.store))

    def visit_ElseLine(self, ctx: ExecutionContext, line: ElseLine):
        if not self._consume_jump_target(ctx):
            return
        ctx.record()
        ctx.pc += 1

    def visit_PrintLine(self, ctx: ExecutionContext, line: PrintLine):
        value = evaluate(line.expression, ctx.store)
        ctx.output.append(format_value(value))
        ctx.record()
        ctx.pc += 1

    def visit_AssignLine(self, ctx: ExecutionContext, line: AssignLine):
        value = evaluate(line.value, ctx.store)
        if line.subscript is not None:
            index = evaluate(line.subscript, ctx.store)
            ctx.store.assign_index(line.name, index, value)
        else:
            ctx.store.assign(line.name, value)
            ctx.recorder.track(line.name)
        ctx.record()
        ctx.pc += 1

    # ── Branch helpers ──

    def _branch(self, ctx: ExecutionContext, condition):
        """Record the condition, then enter the body or jump to the next branch."""
        ctx.record()
        if is_truthy(condition):
            ctx.pc += 1
            return
        target, is_branch = find_next_branch(ctx.program, ctx.pc)
        if is_branch:
            ctx.jump_targets.add(target)
        ctx.pc = target

    def _consume_jump_target(self, ctx: ExecutionContext) -> bool:
        """Disarm the current line; if it was never armed, skip past its ENDIF."""
        if ctx.pc in ctx.jump_targets:
            ctx.jump_targets.discard(ctx.pc)
            return True
        ctx.pc = find_endif_from_branch(ctx.program, ctx.pc) + 1
        return False


# ── Structure scans ──

def find_next_branch(program: Program, from_line: int) -> Tuple[int, bool]:
    """Next ELSEIF/ELSE of the chain opened at or before *from_line*.

    Returns ``(index, True)`` for a branch line, or ``(index past ENDIF,
    False)`` when the chain has no further branch.
    """
    depth = 0
    for i in range(from_line + 1, len(program)):
        line = program[i]
        if isinstance(line, IfLine):
            depth += 1
        elif isinstance(line, EndIfLine):
            if depth == 0:
                return i + 1, False
            depth -= 1
        elif depth == 0 and isinstance(line, BRANCH_LINES):
            return i, True
    return len(program), False


def find_endif_from_branch(program: Program, from_line: int) -> int:
    depth = 0
    for i in range(from_line + 1, len(program)):
        line = program[i]
        if isinstance(line, IfLine):
            depth += 1
        elif isinstance(line, EndIfLine):
            if depth == 0:
                return i
            depth -= 1
    return len(program) - 1


def find_matching_while(program: Program, endwhile_line: int) -> int:
    depth = 0
    for i in range(endwhile_line - 1, -1, -1):
        line = program[i]
        if isinstance(line, EndWhileLine):
            depth += 1
        elif isinstance(line, WhileLine):
            if depth == 0:
                return i
            depth -= 1
    return -1


def find_matching_endwhile(program: Program, while_line: int) -> int:
    depth = 0
    for i in range(while_line + 1, len(program)):
        line = program[i]
        if isinstance(line, WhileLine):
            depth += 1
        elif isinstance(line, EndWhileLine):
            if depth == 0:
                return i
            depth -= 1
    return len(program) - 1


def _is_program(source) -> bool:
    return isinstance(source, tuple) and all(isinstance(line, Line) for line in source)


def trace_program(source: Union[str, Iterable[str]], max_steps: int = MAX_STEPS) -> Trace:
    return TraceInterpreter(max_steps).run(source)
