"""Core types shared by policy predicates: results, patterns, pull request data and context."""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class Trigger(enum.IntFlag):
    """Events that may change the outcome of a predicate."""

    STATIC = 0
    COMMIT = 1
    COMMENT = 2
    REVIEW = 4
    PULL_REQUEST = 8
    LABEL = 16
    STATUS = 32


@dataclass
class PredicateResult:
    """Outcome of evaluating a predicate, with data to explain it."""

    satisfied: bool = False
    description: str = ""
    value_phrase: str = ""
    values: list[str] = field(default_factory=list)
    condition_phrase: str = ""
    condition_values: list[str] = field(default_factory=list)
    conditions_map: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Regexp:
    """A regular expression that matches anywhere in a string."""

    pattern: str
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def matches(self, s: str) -> bool:
        return self._compiled.search(s) is not None

    def __str__(self) -> str:
        return self.pattern


def any_matches(patterns, s: str) -> bool:
    """Return True if any of the patterns matches the string."""
    return any(pattern.matches(s) for pattern in patterns)


class SignatureType(enum.Enum):
    GPG = "GpgSignature"
    SMIME = "SmimeSignature"


@dataclass
class Signature:
    type: SignatureType = SignatureType.GPG
    is_valid: bool = False
    key_id: str = ""
    signer: str = ""
    state: str = ""


@dataclass
class Commit:
    sha: str = ""
    author: str = ""
    committer: str = ""
    committed_via_web: bool = False
    parents: list[str] = field(default_factory=list)
    signature: Signature | None = None

    def users(self) -> list[str]:
        """Return the non-empty author and committer of the commit."""
        return [user for user in (self.author, self.committer) if user]


class FileStatus(enum.Enum):
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"


@dataclass
class File:
    filename: str = ""
    status: FileStatus = FileStatus.MODIFIED
    additions: int = 0
    deletions: int = 0


class Permission(enum.Enum):
    NONE = "none"
    READ = "read"
    TRIAGE = "triage"
    WRITE = "write"
    MAINTAIN = "maintain"
    ADMIN = "admin"


@dataclass
class CollaboratorPermission:
    permission: Permission = Permission.NONE
    via_repo: bool = False


@dataclass
class Collaborator:
    name: str = ""
    permissions: list[CollaboratorPermission] = field(default_factory=list)


class ReviewerType(enum.Enum):
    USER = "user"
    TEAM = "team"


@dataclass
class Reviewer:
    name: str = ""
    type: ReviewerType = ReviewerType.USER
    removed: bool = False


def _raise_if(error: Exception | None) -> None:
    if error is not None:
        raise error


@dataclass
class StaticContext:
    """A pull request context backed by fixed values."""

    owner: str = ""
    author_value: str = ""
    title_value: str = ""
    branch_base_name: str = ""
    branch_head_name: str = ""
    commits_value: list[Commit] = field(default_factory=list)
    changed_files_value: list[File] = field(default_factory=list)
    labels_value: list[str] = field(default_factory=list)
    latest_statuses_value: dict[str, str] = field(default_factory=dict)
    team_memberships: dict[str, list[str]] = field(default_factory=dict)
    org_memberships: dict[str, list[str]] = field(default_factory=dict)
    teams_value: dict[str, Permission] = field(default_factory=dict)
    collaborators_value: list[Collaborator] = field(default_factory=list)

    commits_error: Exception | None = None
    changed_files_error: Exception | None = None
    labels_error: Exception | None = None
    latest_statuses_error: Exception | None = None
    team_membership_error: Exception | None = None
    org_membership_error: Exception | None = None
    teams_error: Exception | None = None
    collaborators_error: Exception | None = None

    def author(self) -> str:
        return self.author_value

    def title(self) -> str:
        return self.title_value

    def branches(self) -> tuple[str, str]:
        """Return the (base, head) branch names."""
        return self.branch_base_name, self.branch_head_name

    def commits(self) -> list[Commit]:
        _raise_if(self.commits_error)
        return list(self.commits_value)

    def changed_files(self) -> list[File]:
        _raise_if(self.changed_files_error)
        return list(self.changed_files_value)

    def labels(self) -> list[str]:
        _raise_if(self.labels_error)
        return list(self.labels_value)

    def latest_statuses(self) -> dict[str, str]:
        _raise_if(self.latest_statuses_error)
        return dict(self.latest_statuses_value)

    def is_team_member(self, team: str, user: str) -> bool:
        _raise_if(self.team_membership_error)
        return team in self.team_memberships.get(user, [])

    def is_org_member(self, org: str, user: str) -> bool:
        _raise_if(self.org_membership_error)
        return org in self.org_memberships.get(user, [])

    def teams(self) -> dict[str, Permission]:
        _raise_if(self.teams_error)
        return dict(self.teams_value)

    def team_members(self, team: str) -> list[str]:
        _raise_if(self.team_membership_error)
        return [user for user, teams in self.team_memberships.items() if team in teams]

    def organization_members(self, org: str) -> list[str]:
        _raise_if(self.org_membership_error)
        return [user for user, orgs in self.org_memberships.items() if org in orgs]

    def repository_collaborators(self) -> list[Collaborator]:
        _raise_if(self.collaborators_error)
        return list(self.collaborators_value)

    def repository_owner(self) -> str:
        return self.owner


@dataclass
class Actors:
    """A set of users, teams and organizations."""

    teams: list[str] = field(default_factory=list)
    users: list[str] = field(default_factory=list)
    organizations: list[str] = field(default_factory=list)

    def is_actor(self, prctx, user: str) -> bool:
        """Return True if the user is listed or belongs to a listed team or organization."""
        if user in self.users:
            return True
        for team in self.teams:
            try:
                member = prctx.is_team_member(team, user)
            except Exception as exc:
                raise RuntimeError(f"failed to get team membership for {team}") from exc
            if member:
                return True
        for org in self.organizations:
            try:
                member = prctx.is_org_member(org, user)
            except Exception as exc:
                raise RuntimeError(f"failed to get organization membership for {org}") from exc
            if member:
                return True
        return False


class Predicate(ABC):
    """A condition evaluated against a pull request."""

    @abstractmethod
    def evaluate(self, prctx) -> PredicateResult:
        """Determine whether the predicate is satisfied."""

    @abstractmethod
    def trigger(self) -> Trigger:
        """Return the events that may change the result."""