# policybot

Building blocks for deciding whether a pull request satisfies a review policy,
and for choosing who should be asked to review it.

The package has two parts:

- **Predicates** check one property of a pull request: who wrote it, which
  branches it touches, which files changed and by how much, its labels, its
  status checks, its title and its commit signatures. Each returns a
  `PredicateResult` that says whether it is satisfied, what values it looked at
  and what conditions it applied.
- **Reviewer selection** walks a tree of evaluation results, finds the pending
  rules that ask for reviews, and picks the users or teams to request.

The package has no dependencies outside the standard library.

## Installation

```
pip install policybot
```

Install the `test` extra to run the test suite:

```
pip install "policybot[test]"
pytest
```

## Pull request data

Predicates read pull request data through a context object. `StaticContext`
in `policybot.model` holds that data in memory: `author_value`, `title_value`,
`branch_base_name`, `branch_head_name`, `commits_value`,
`changed_files_value`, `labels_value`, `latest_statuses_value`,
`team_memberships` and `org_memberships` (user to team or organisation names),
`teams_value`, `collaborators_value` and `owner`. Fields such as
`commits_error` or `labels_error` make the matching method raise, which is
handy in tests. Any object with the same methods (`author()`, `title()`,
`branches()`, `commits()`, `changed_files()`, `labels()`,
`latest_statuses()`, `is_team_member()`, `is_org_member()`, `teams()`,
`team_members()`, `organization_members()`, `repository_collaborators()`,
`repository_owner()`) can take its place.

```python
from policybot.model import Commit, StaticContext
from policybot.author import HasAuthorIn

prctx = StaticContext(
    author_value="ttest",
    commits_value=[Commit(sha="abcdef123456789", author="ttest", committer="ttest")],
)

pred = HasAuthorIn(users=["ttest"])
result = pred.evaluate(prctx)
print(result.satisfied, result.values)  # True ['ttest']
```

Patterns are `Regexp` objects; a pattern matches if it is found anywhere in
the string, so anchor it with `^` and `$` when a whole match is wanted.

## Predicates

| Class | Module | Checks |
| --- | --- | --- |
| `HasAuthorIn` | `policybot.author` | the author is one of the given users, teams or organisations |
| `HasContributorIn` | `policybot.author` | at least one author or committer is a member |
| `OnlyHasContributorsIn` | `policybot.author` | every author and committer is a member |
| `AuthorIsOnlyContributor` | `policybot.author` | the author did (`only=True`) or did not (`only=False`) write and commit every commit |
| `TargetsBranch`, `FromBranch` | `policybot.branch` | the target or source branch matches a pattern |
| `ChangedFiles`, `OnlyChangedFiles` | `policybot.files` | changed paths match patterns |
| `ModifiedLines` | `policybot.files` | added, deleted or total lines compare with a limit |
| `HasLabels` | `policybot.label` | the pull request carries every given label |
| `HasSuccessfulStatus` | `policybot.status` | the named status checks exist and passed |
| `Title` | `policybot.title` | the title matches a `matches` pattern, or no `not_matches` pattern |
| `HasValidSignatures`, `HasValidSignaturesBy`, `HasValidSignaturesByKeys` | `policybot.signature` | commits carry valid signatures, by members or by given GPG keys |

Every predicate has `evaluate(prctx)` and `trigger()`; the latter returns the
`Trigger` flags for the events that may change its outcome. When the context
fails to supply data, `evaluate` raises `RuntimeError` with the original
exception chained.

Line-count limits are written as text such as `"> 100"` or `"< 35"` and
parsed with `ComparisonExpr.parse`, which raises `ValueError` for an unknown
operator or a value that is not a 64-bit integer; blank text gives an empty
expression that is never checked.

A set of predicates can be built from a mapping, such as an already parsed
configuration file, with `Predicates.from_dict`; unknown keys are ignored and
malformed values raise `ValueError`. `Predicates.predicates()` returns the
configured ones in a fixed order:

```python
from policybot.predicates import Predicates

config = Predicates.from_dict({
    "targets_branch": {"pattern": "^main$"},
    "modified_lines": {"total": "> 500"},
    "has_labels": ["ready"],
})
results = [p.evaluate(prctx) for p in config.predicates()]
```

## Reviewer selection

```python
import random
from policybot.reviewer import find_requests, select_reviewers

pending = find_requests(root_result)
selection = select_reviewers(prctx, pending, random.Random(42))
to_request = selection.difference(existing_reviewers)
if not to_request.is_empty():
    ...
```

`root_result` is a `Result` tree and `existing_reviewers` a list of
`Reviewer` objects. `find_requests` returns the pending leaf results that have
a `ReviewRequestRule` and no error. `select_reviewers` honours each rule's
`RequestMode`: `TEAMS` requests teams by name or permission, `ALL_USERS`
requests every eligible collaborator, and `RANDOM_USERS` picks
`required_count` of them with `select_random_users`. The pull request author
is never selected, and a rule without a mode raises `ValueError`. Pass a
seeded `random.Random` to get repeatable choices. `Selection.difference`
leaves out anyone already listed as a reviewer, including reviewers that were
removed.

## What it does not do

The package only evaluates data it is given. It does not talk to a code
hosting service, receive webhooks, read policy files from disk, post statuses
or comments, or send review requests; a caller supplies a context object and
acts on the results. It also has no command-line interface.