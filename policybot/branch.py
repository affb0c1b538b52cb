"""Predicates about the source and target branches of a pull request."""

from __future__ import annotations

import json
from dataclasses import dataclass

from policybot.model import Predicate, PredicateResult, Regexp, Trigger


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


@dataclass
class TargetsBranch(Predicate):
    """Satisfied when the target branch matches the pattern."""

    pattern: Regexp

    def evaluate(self, prctx) -> PredicateResult:
        target, _ = prctx.branches()
        matches = self.pattern.matches(target)
        description = ""
        if not matches:
            description = (
                f"Target branch {_quote(target)} does not match required pattern "
                f"{_quote(str(self.pattern))}"
            )
        return PredicateResult(
            satisfied=matches,
            description=description,
            values=[target],
            value_phrase="target branches",
            condition_phrase="match the required pattern",
            condition_values=[str(self.pattern)],
        )

    def trigger(self) -> Trigger:
        return Trigger.PULL_REQUEST


@dataclass
class FromBranch(Predicate):
    """Satisfied when the source branch matches the pattern."""

    pattern: Regexp

    def evaluate(self, prctx) -> PredicateResult:
        _, source = prctx.branches()
        matches = self.pattern.matches(source)
        description = ""
        if not matches:
            description = (
                f"Source branch {_quote(source)} does not match specified from_branch pattern "
                f"{_quote(str(self.pattern))}"
            )
        return PredicateResult(
            satisfied=matches,
            description=description,
            values=[source],
            value_phrase="source branches",
            condition_phrase="match the required pattern",
            condition_values=[str(self.pattern)],
        )

    def trigger(self) -> Trigger:
        return Trigger.STATIC