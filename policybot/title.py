"""Predicate about the title of a pull request."""

from __future__ import annotations

from dataclasses import dataclass, field

from policybot.model import Predicate, PredicateResult, Regexp, Trigger, any_matches


@dataclass
class Title(Predicate):
    """Satisfied when the title matches a "matches" pattern or no "not_matches" pattern."""

    matches: list[Regexp] = field(default_factory=list)
    not_matches: list[Regexp] = field(default_factory=list)

    def evaluate(self, prctx) -> PredicateResult:
        title = prctx.title()
        result = PredicateResult(
            value_phrase="titles",
            values=[title],
            condition_phrase="meet the pattern requirement",
        )

        match_patterns = [str(p) for p in self.matches]
        not_match_patterns = [str(p) for p in self.not_matches]

        if self.matches and any_matches(self.matches, title):
            result.conditions_map = {"match": match_patterns}
            result.description = "PR Title matches a Match pattern"
            result.satisfied = True
            return result

        if self.not_matches and not any_matches(self.not_matches, title):
            result.conditions_map = {"not match": not_match_patterns}
            result.description = "PR Title doesn't match a NotMatch pattern"
            result.satisfied = True
            return result

        result.satisfied = False
        result.conditions_map = {"match": match_patterns, "not match": not_match_patterns}
        return result

    def trigger(self) -> Trigger:
        return Trigger.PULL_REQUEST