"""Predicate about commit statuses of a pull request."""

from __future__ import annotations

from dataclasses import dataclass, field

from policybot.model import Predicate, PredicateResult, Trigger


@dataclass
class HasSuccessfulStatus(Predicate):
    """Satisfied when every named status exists and is successful."""

    statuses: list[str] = field(default_factory=list)

    def evaluate(self, prctx) -> PredicateResult:
        try:
            latest = prctx.latest_statuses()
        except Exception as exc:
            raise RuntimeError("failed to list commit statuses") from exc

        result = PredicateResult(value_phrase="status checks", condition_phrase="exist and pass")

        missing = [name for name in self.statuses if name not in latest]
        failing = [name for name in self.statuses if latest.get(name) != "success"]

        if missing:
            result.values = missing
            result.description = "One or more statuses is missing: " + ", ".join(missing)
            result.satisfied = False
            return result

        if failing:
            result.values = failing
            result.description = "One or more statuses has not passed: " + ",".join(failing)
            result.satisfied = False
            return result

        result.values = list(self.statuses)
        result.satisfied = True
        return result

    def trigger(self) -> Trigger:
        return Trigger.STATUS