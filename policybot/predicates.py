"""A set of optional predicates as configured in a policy file."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields

from policybot.author import (
    AuthorIsOnlyContributor,
    HasAuthorIn,
    HasContributorIn,
    OnlyHasContributorsIn,
)
from policybot.branch import FromBranch, TargetsBranch
from policybot.files import ChangedFiles, ComparisonExpr, ModifiedLines, OnlyChangedFiles
from policybot.label import HasLabels
from policybot.model import Predicate, Regexp
from policybot.signature import HasValidSignatures, HasValidSignaturesBy, HasValidSignaturesByKeys
from policybot.status import HasSuccessfulStatus
from policybot.title import Title


def _mapping(key: str, value) -> Mapping:
    if not isinstance(value, Mapping):
        raise ValueError(f"{key}: expected a mapping, got {type(value).__name__}")
    return value


def _strings(key: str, value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError(f"{key}: expected a list of strings")
    result = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{key}: expected a list of strings")
        result.append(item)
    return result


def _regexp(key: str, pattern) -> Regexp:
    if not isinstance(pattern, str):
        raise ValueError(f"{key}: expected a pattern string")
    try:
        return Regexp(pattern)
    except re.error as exc:
        raise ValueError(f"{key}: invalid pattern {pattern!r}: {exc}") from exc


def _regexps(key: str, value) -> list[Regexp]:
    return [_regexp(key, p) for p in _strings(key, value)]


def _bool(key: str, value) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key}: expected a boolean")
    return value


def _comparison(key: str, value) -> ComparisonExpr:
    if value is None:
        return ComparisonExpr()
    try:
        return ComparisonExpr.parse(str(value))
    except ValueError as exc:
        raise ValueError(f"{key}: {exc}") from exc


def _actors(cls, key: str, value):
    data = _mapping(key, value)
    return cls(
        teams=_strings(f"{key}.teams", data.get("teams")),
        users=_strings(f"{key}.users", data.get("users")),
        organizations=_strings(f"{key}.organizations", data.get("organizations")),
    )


def _changed_files(key, value):
    data = _mapping(key, value)
    return ChangedFiles(
        paths=_regexps(f"{key}.paths", data.get("paths")),
        ignore_paths=_regexps(f"{key}.ignore", data.get("ignore")),
    )


def _only_changed_files(key, value):
    data = _mapping(key, value)
    return OnlyChangedFiles(paths=_regexps(f"{key}.paths", data.get("paths")))


def _targets_branch(key, value):
    data = _mapping(key, value)
    return TargetsBranch(pattern=_regexp(f"{key}.pattern", data.get("pattern", "")))


def _from_branch(key, value):
    data = _mapping(key, value)
    return FromBranch(pattern=_regexp(f"{key}.pattern", data.get("pattern", "")))


def _modified_lines(key, value):
    data = _mapping(key, value)
    return ModifiedLines(
        additions=_comparison(f"{key}.additions", data.get("additions")),
        deletions=_comparison(f"{key}.deletions", data.get("deletions")),
        total=_comparison(f"{key}.total", data.get("total")),
    )


def _title(key, value):
    data = _mapping(key, value)
    return Title(
        matches=_regexps(f"{key}.matches", data.get("matches")),
        not_matches=_regexps(f"{key}.not_matches", data.get("not_matches")),
    )


def _keys(key, value):
    data = _mapping(key, value)
    return HasValidSignaturesByKeys(key_ids=_strings(f"{key}.key_ids", data.get("key_ids")))


_PARSERS = {
    "changed_files": _changed_files,
    "only_changed_files": _only_changed_files,
    "has_author_in": lambda k, v: _actors(HasAuthorIn, k, v),
    "has_contributor_in": lambda k, v: _actors(HasContributorIn, k, v),
    "only_has_contributors_in": lambda k, v: _actors(OnlyHasContributorsIn, k, v),
    "author_is_only_contributor": lambda k, v: AuthorIsOnlyContributor(only=_bool(k, v)),
    "targets_branch": _targets_branch,
    "from_branch": _from_branch,
    "modified_lines": _modified_lines,
    "has_successful_status": lambda k, v: HasSuccessfulStatus(statuses=_strings(k, v)),
    "has_labels": lambda k, v: HasLabels(labels=_strings(k, v)),
    "title": _title,
    "has_valid_signatures": lambda k, v: HasValidSignatures(required=_bool(k, v)),
    "has_valid_signatures_by": lambda k, v: _actors(HasValidSignaturesBy, k, v),
    "has_valid_signatures_by_keys": _keys,
}


@dataclass
class Predicates:
    """Optional predicates; each one that is set takes part in evaluation."""

    changed_files: ChangedFiles | None = None
    only_changed_files: OnlyChangedFiles | None = None

    has_author_in: HasAuthorIn | None = None
    has_contributor_in: HasContributorIn | None = None
    only_has_contributors_in: OnlyHasContributorsIn | None = None
    author_is_only_contributor: AuthorIsOnlyContributor | None = None

    targets_branch: TargetsBranch | None = None
    from_branch: FromBranch | None = None

    modified_lines: ModifiedLines | None = None

    has_successful_status: HasSuccessfulStatus | None = None

    has_labels: HasLabels | None = None

    title: Title | None = None

    has_valid_signatures: HasValidSignatures | None = None
    has_valid_signatures_by: HasValidSignaturesBy | None = None
    has_valid_signatures_by_keys: HasValidSignaturesByKeys | None = None

    def predicates(self) -> list[Predicate]:
        """Return the predicates that are set, in a fixed order."""
        values = (getattr(self, f.name) for f in fields(self))
        return [value for value in values if value is not None]

    @classmethod
    def from_dict(cls, data) -> Predicates:
        """Build predicates from a configuration mapping; unknown keys are ignored."""
        if data is None:
            return cls()
        data = _mapping("predicates", data)
        kwargs = {}
        for key, parse in _PARSERS.items():
            value = data.get(key)
            if value is not None:
                kwargs[key] = parse(key, value)
        return cls(**kwargs)