"""Predicate about the labels of a pull request."""

from __future__ import annotations

from dataclasses import dataclass, field

from policybot.model import Predicate, PredicateResult, Trigger


@dataclass
class HasLabels(Predicate):
    """Satisfied when the pull request carries every required label."""

    labels: list[str] = field(default_factory=list)

    def evaluate(self, prctx) -> PredicateResult:
        result = PredicateResult(value_phrase="labels", condition_phrase="contain the labels")
        if self.labels:
            try:
                present = prctx.labels()
            except Exception as exc:
                raise RuntimeError("failed to list pull request labels") from exc
            result.values = present
            for required in self.labels:
                if required.lower() not in present:
                    result.condition_values = [required]
                    result.description = "Missing label: " + required
                    result.satisfied = False
                    return result
        result.condition_values = list(self.labels)
        result.satisfied = True
        return result

    def trigger(self) -> Trigger:
        return Trigger.LABEL