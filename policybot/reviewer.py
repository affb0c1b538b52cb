"""Selection of reviewers to request on pending rules."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field

from policybot.model import Permission, ReviewerType

LOG_KEY_LEAF_NODE = "leaf_node"

_log = logging.getLogger(__name__)


class Status(enum.IntEnum):
    SKIPPED = 0
    PENDING = 1
    APPROVED = 2
    DISAPPROVED = 3


class RequestMode(enum.Enum):
    ALL_USERS = "all-users"
    RANDOM_USERS = "random-users"
    TEAMS = "teams"


@dataclass
class ReviewRequestRule:
    teams: list[str] = field(default_factory=list)
    users: list[str] = field(default_factory=list)
    organizations: list[str] = field(default_factory=list)
    permissions: list[Permission] = field(default_factory=list)
    required_count: int = 0
    mode: RequestMode | None = None


@dataclass
class Result:
    name: str = ""
    description: str = ""
    status: Status = Status.SKIPPED
    error: Exception | None = None
    review_request_rule: ReviewRequestRule | None = None
    children: list[Result] = field(default_factory=list)


@dataclass
class Selection:
    """Users and teams to request as reviewers."""

    users: list[str] = field(default_factory=list)
    teams: list[str] = field(default_factory=list)

    def difference(self, reviewers) -> Selection:
        """Return the users and teams not already among the reviewers, removed or not."""
        users = {r.name for r in reviewers if r.type == ReviewerType.USER}
        teams = {r.name for r in reviewers if r.type == ReviewerType.TEAM}
        return Selection(
            users=[u for u in self.users if u not in users],
            teams=[t for t in self.teams if t not in teams],
        )

    def is_empty(self) -> bool:
        return not self.users and not self.teams


def find_requests(result: Result) -> list[Result]:
    """Return all pending leaf results with review requests enabled."""
    if result.status != Status.PENDING:
        return []
    requests = [req for child in result.children for req in find_requests(child)]
    if not result.children and result.review_request_rule is not None and result.error is None:
        requests.append(result)
    return requests


def select_random_users(n: int, users: list[str], rng: random.Random) -> list[str]:
    """Select n distinct users at random, or all of them if there are not more than n."""
    if n == 0:
        return []
    if n >= len(users):
        return list(users)

    selected: set[int] = set()
    selections: list[str] = []
    for _ in range(n):
        attempts = 0
        while True:
            if attempts > n * 5:
                raise RuntimeError(f"failed to select random value for {n} {len(users)}")
            index = rng.randrange(len(users))
            if index not in selected:
                selected.add(index)
                selections.append(users[index])
                break
            attempts += 1
    return selections


def _team_members(prctx, teams: list[str]) -> dict[str, list[str]]:
    members = {}
    for team in teams:
        try:
            members[team] = prctx.team_members(team)
        except Exception as exc:
            raise RuntimeError(f"failed to get member listing for team {team}") from exc
    return members


def _org_members(prctx, orgs: list[str]) -> list[str]:
    members: list[str] = []
    for org in orgs:
        try:
            members.extend(prctx.organization_members(org))
        except Exception as exc:
            raise RuntimeError(f"failed to get member listing for org {org}") from exc
    return members


def _possible_reviewers(prctx, users: set[str], collaborators) -> list[str]:
    author = prctx.author()
    return sorted(c.name for c in collaborators if c.name != author and c.name in users)


def _requests_team(result: Result, team: str) -> bool:
    return team in result.review_request_rule.teams


def _requests_permission(result: Result, permission: Permission) -> bool:
    return permission in result.review_request_rule.permissions


def _select_team_reviewers(prctx, selection: Selection, result: Result, log) -> None:
    eligible = prctx.teams()
    owner = prctx.repository_owner()
    teams = [
        team
        for team, perm in eligible.items()
        if _requests_team(result, f"{owner}/{team}") or _requests_permission(result, perm)
    ]
    log.debug("Requesting %d teams for review", len(teams))
    selection.teams.extend(teams)


def _select_user_reviewers(prctx, selection: Selection, result: Result, rng, log) -> None:
    rule = result.review_request_rule
    all_users = set(rule.users)

    if rule.teams:
        log.debug("Selecting from teams for review")
        try:
            for members in _team_members(prctx, rule.teams).values():
                all_users.update(members)
        except RuntimeError as exc:
            log.warning(
                "failed to get member listing for teams, skipping team member selection: %s", exc
            )

    if rule.organizations:
        log.debug("Selecting from organizations for review")
        try:
            all_users.update(_org_members(prctx, rule.organizations))
        except RuntimeError as exc:
            log.warning("failed to get member listing for org, skipping org member selection: %s", exc)

    try:
        collaborators = prctx.repository_collaborators()
    except Exception as exc:
        raise RuntimeError("failed to list repository collaborators") from exc

    if rule.permissions:
        log.debug("Selecting from collaborators by permission for review")
        for collaborator in collaborators:
            if any(
                cp.via_repo and _requests_permission(result, cp.permission)
                for cp in collaborator.permissions
            ):
                all_users.add(collaborator.name)

    possible = _possible_reviewers(prctx, all_users, collaborators)
    if not possible:
        log.debug("Found 0 eligible reviewers; skipping review request")
        return

    if rule.mode == RequestMode.ALL_USERS:
        log.debug("Found %d eligible reviewers; selecting all", len(possible))
        selection.users.extend(possible)
    elif rule.mode == RequestMode.RANDOM_USERS:
        count = rule.required_count
        chosen = select_random_users(count, possible, rng)
        log.debug("Found %d eligible reviewers; randomly selecting %d", len(possible), count)
        selection.users.extend(chosen)


def select_reviewers(prctx, results: list[Result], rng: random.Random) -> Selection:
    """Select the users and teams to request for review on the given results."""
    selection = Selection()
    for child in results:
        log = logging.LoggerAdapter(_log, {LOG_KEY_LEAF_NODE: child.name})
        mode = child.review_request_rule.mode
        if mode == RequestMode.TEAMS:
            _select_team_reviewers(prctx, selection, child, log)
        elif mode in (RequestMode.ALL_USERS, RequestMode.RANDOM_USERS):
            _select_user_reviewers(prctx, selection, child, rng, log)
        else:
            raise ValueError(f"unknown reviewer selection mode: {mode}")
    return selection