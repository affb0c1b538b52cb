"""Predicates about the author and contributors of a pull request."""

from __future__ import annotations

from dataclasses import dataclass

from policybot.model import Actors, Predicate, PredicateResult, Trigger


def _membership_conditions(actors: Actors) -> dict[str, list[str]]:
    return {
        "Organizations": list(actors.organizations),
        "Teams": list(actors.teams),
        "Users": list(actors.users),
    }


def _get_commits(prctx):
    try:
        return prctx.commits()
    except Exception as exc:
        raise RuntimeError("failed to get commits") from exc


def _contributors(prctx, commits) -> list[str]:
    users = {prctx.author()}
    for commit in commits:
        users.update(commit.users())
    return sorted(users)


@dataclass
class HasAuthorIn(Actors, Predicate):
    """Satisfied when the pull request author is one of the actors."""

    def evaluate(self, prctx) -> PredicateResult:
        author = prctx.author()
        member = self.is_actor(prctx, author)
        description = ""
        if not member:
            description = (
                f'The pull request author "{author}" does not meet '
                "the required membership conditions"
            )
        return PredicateResult(
            satisfied=member,
            description=description,
            value_phrase="authors",
            values=[author],
            condition_phrase="meet the required membership conditions",
            conditions_map=_membership_conditions(self),
        )

    def trigger(self) -> Trigger:
        return Trigger.STATIC


@dataclass
class OnlyHasContributorsIn(Actors, Predicate):
    """Satisfied when every contributor is one of the actors."""

    def evaluate(self, prctx) -> PredicateResult:
        commits = _get_commits(prctx)
        result = PredicateResult(
            value_phrase="contributors",
            condition_phrase="all meet the required membership conditions",
            conditions_map=_membership_conditions(self),
        )
        users = _contributors(prctx, commits)
        for user in users:
            if not self.is_actor(prctx, user):
                result.description = (
                    f'Contributor "{user}" does not meet the required membership conditions'
                )
                result.values = [user]
                result.satisfied = False
                return result
        result.values = users
        result.satisfied = True
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT


@dataclass
class HasContributorIn(Actors, Predicate):
    """Satisfied when at least one contributor is one of the actors."""

    def evaluate(self, prctx) -> PredicateResult:
        commits = _get_commits(prctx)
        result = PredicateResult(
            value_phrase="contributors",
            condition_phrase="meet the required membership conditions ",
            conditions_map=_membership_conditions(self),
        )
        users = _contributors(prctx, commits)
        for user in users:
            if self.is_actor(prctx, user):
                result.satisfied = True
                result.values = [user]
                return result
        result.description = "No contributors meet the required membership conditions"
        result.satisfied = False
        result.values = users
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT


@dataclass(frozen=True)
class AuthorIsOnlyContributor(Predicate):
    """Satisfied when the author is (or, with only=False, is not) the only contributor."""

    only: bool = True

    def evaluate(self, prctx) -> PredicateResult:
        commits = _get_commits(prctx)
        condition = (
            "they are the only contributors" if self.only else "they are not the only contributors"
        )
        author = prctx.author()
        result = PredicateResult(
            value_phrase="authors",
            condition_phrase="meet the condition",
            condition_values=[condition],
            values=[author],
        )

        for commit in commits:
            other_author = commit.author != author
            other_committer = not commit.committed_via_web and commit.committer != author
            if other_author or other_committer:
                if self.only:
                    result.description = (
                        f"Commit {commit.sha[:10]} was authored or committed by a different user"
                    )
                    result.satisfied = False
                else:
                    result.satisfied = True
                return result

        if self.only:
            result.satisfied = True
            return result
        result.description = f"All commits were authored and committed by {author}"
        result.satisfied = False
        return result

    def trigger(self) -> Trigger:
        return Trigger.COMMIT