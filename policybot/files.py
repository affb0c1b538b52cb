"""Predicates about the files changed by a pull request."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

from policybot.model import Predicate, PredicateResult, Regexp, Trigger, any_matches

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _get_changed_files(prctx):
    try:
        return prctx.changed_files()
    except Exception as exc:
        raise RuntimeError("failed to list changed files") from exc


@dataclass
class ChangedFiles(Predicate):
    """Satisfied when a changed file matches a path pattern and no ignore pattern."""

    paths: list[Regexp] = field(default_factory=list)
    ignore_paths: list[Regexp] = field(default_factory=list)

    def evaluate(self, prctx) -> PredicateResult:
        result = PredicateResult(
            value_phrase="changed files",
            condition_phrase="match",
            conditions_map={
                "path patterns": [str(p) for p in self.paths],
                "while ignoring": [str(p) for p in self.ignore_paths],
            },
        )
        files = _get_changed_files(prctx)

        changed: list[str] = []
        for f in files:
            changed.append(f.filename)
            if any_matches(self.ignore_paths, f.filename):
                continue
            if any_matches(self.paths, f.filename):
                result.values = [f.filename]
                result.description = f.filename + " was changed"
                result.satisfied = True
                return result

        result.values = changed
        result.description = "No changed files match the required patterns"
        result.satisfied = False
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT


@dataclass
class OnlyChangedFiles(Predicate):
    """Satisfied when files changed and every changed file matches a pattern."""

    paths: list[Regexp] = field(default_factory=list)

    def evaluate(self, prctx) -> PredicateResult:
        result = PredicateResult(
            value_phrase="changed files",
            condition_phrase="all match patterns",
            condition_values=[str(p) for p in self.paths],
        )
        files = _get_changed_files(prctx)

        changed: list[str] = []
        for f in files:
            changed.append(f.filename)
            if any_matches(self.paths, f.filename):
                continue
            result.values = [f.filename]
            result.description = "A changed file does not match the required pattern"
            result.satisfied = False
            return result

        files_changed = len(files) > 0
        result.values = changed
        result.description = "" if files_changed else "No files changed"
        result.satisfied = files_changed
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT


class CompareOp(enum.IntEnum):
    NONE = 0
    LESS_THAN = 1
    GREATER_THAN = 2


@dataclass(frozen=True)
class ComparisonExpr:
    """A comparison such as "< 100" or "> 10" against an integer."""

    op: CompareOp = CompareOp.NONE
    value: int = 0

    def is_empty(self) -> bool:
        return self.op == CompareOp.NONE and self.value == 0

    def evaluate(self, n: int) -> bool:
        if self.op == CompareOp.LESS_THAN:
            return n < self.value
        if self.op == CompareOp.GREATER_THAN:
            return n > self.value
        return False

    @classmethod
    def parse(cls, text: str) -> ComparisonExpr:
        """Parse an expression of the form "<N" or ">N"; blank text gives an empty expression."""
        text = text.strip()
        if not text:
            return cls()

        symbol = text[0]
        if symbol == "<":
            op = CompareOp.LESS_THAN
        elif symbol == ">":
            op = CompareOp.GREATER_THAN
        else:
            raise ValueError(f"invalid comparison operator: {symbol}")

        number = text[1:].lstrip(" \t")
        if not _INTEGER.fullmatch(number):
            raise ValueError(f"invalid comparison value: {number!r}")
        value = int(number)
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise ValueError(f"invalid comparison value: {number!r} is out of range")
        return cls(op=op, value=value)

    def __str__(self) -> str:
        if self.op == CompareOp.NONE:
            return ""
        if self.op == CompareOp.LESS_THAN:
            return f"< {self.value}"
        if self.op == CompareOp.GREATER_THAN:
            return f"> {self.value}"
        return f"?? (op:{int(self.op)}) {self.value}"


@dataclass
class ModifiedLines(Predicate):
    """Satisfied when added, deleted or total modified lines meet a comparison."""

    additions: ComparisonExpr = field(default_factory=ComparisonExpr)
    deletions: ComparisonExpr = field(default_factory=ComparisonExpr)
    total: ComparisonExpr = field(default_factory=ComparisonExpr)

    def evaluate(self, prctx) -> PredicateResult:
        files = _get_changed_files(prctx)
        result = PredicateResult(
            value_phrase="file modifications",
            condition_phrase="meet the modification conditions",
        )

        additions = sum(f.additions for f in files)
        deletions = sum(f.deletions for f in files)
        total = additions + deletions

        if not self.additions.is_empty():
            result.values = [f"+{additions}"]
            result.condition_values = [f"added lines {self.additions}"]
            if self.additions.evaluate(additions):
                result.satisfied = True
                return result

        if not self.deletions.is_empty():
            value = f"-{deletions}"
            condition = f"deleted lines {self.deletions}"
            if self.deletions.evaluate(deletions):
                result.values = [value]
                result.condition_values = [condition]
                result.satisfied = True
                return result
            result.values.append(value)
            result.condition_values.append(condition)

        if not self.total.is_empty():
            value = f"total {total}"
            condition = f"total modifications {self.total}"
            if self.total.evaluate(total):
                result.values = [value]
                result.condition_values = [condition]
                result.satisfied = True
                return result
            result.values.append(value)
            result.condition_values.append(condition)

        result.satisfied = False
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT