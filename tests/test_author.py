import pytest

from policybot.author import (
    AuthorIsOnlyContributor,
    HasAuthorIn,
    HasContributorIn,
    OnlyHasContributorsIn,
)
from policybot.model import Commit, StaticContext, Trigger

ACTORS = dict(teams=["testorg/team"], users=["mhaypenny"], organizations=["testorg"])
CONDITIONS = {
    "Organizations": ["testorg"],
    "Teams": ["testorg/team"],
    "Users": ["mhaypenny"],
}
SHA = "abcdef123456789"
SHA1 = "0cb194c52ee7c6c82110b59ec51b959ecfcb2fa2"
SHA2 = "9df0f1cee4b58363b534dbb5e9070fceee23fa10"


def _commit(author, committer, sha=SHA, via_web=False):
    return Commit(sha=sha, author=author, committer=committer, committed_via_web=via_web)


@pytest.mark.parametrize(
    "ctx, satisfied, values",
    [
        (
            StaticContext(
                author_value="ttest",
                team_memberships={"ttest": ["boringorg/testers"]},
                org_memberships={"ttest": ["boringorg"]},
            ),
            False,
            ["ttest"],
        ),
        (StaticContext(author_value="mhaypenny"), True, ["mhaypenny"]),
        (
            StaticContext(
                author_value="mortonh",
                team_memberships={"mortonh": ["coolorg/approvers", "testorg/team"]},
            ),
            True,
            ["mortonh"],
        ),
        (
            StaticContext(
                author_value="mortonh",
                org_memberships={"mortonh": ["coolorg", "testorg"]},
            ),
            True,
            ["mortonh"],
        ),
    ],
    ids=["noMatch", "authorInUsers", "authorInTeams", "authorInOrgs"],
)
def test_has_author_in(ctx, satisfied, values):
    result = HasAuthorIn(**ACTORS).evaluate(ctx)
    assert result.satisfied is satisfied
    assert result.values == values
    assert result.conditions_map == CONDITIONS
    assert result.condition_values == []


def test_has_author_in_description():
    result = HasAuthorIn(**ACTORS).evaluate(StaticContext(author_value="ttest"))
    assert result.description == (
        'The pull request author "ttest" does not meet the required membership conditions'
    )
    assert HasAuthorIn(**ACTORS).trigger() == Trigger.STATIC


@pytest.mark.parametrize(
    "ctx",
    [
        StaticContext(
            author_value="ttest",
            commits_value=[_commit("ttest", "ttest"), _commit("mhaypenny", "mhaypenny")],
        ),
        StaticContext(
            author_value="ttest",
            commits_value=[_commit("ttest", "ttest"), _commit("ttest", "mhaypenny")],
        ),
        StaticContext(
            author_value="ttest",
            team_memberships={"mhaypenny": ["testorg/team"]},
            commits_value=[_commit("ttest", "ttest"), _commit("mhaypenny", "mhaypenny")],
        ),
        StaticContext(
            author_value="ttest",
            org_memberships={"mhaypenny": ["testorg"]},
            commits_value=[_commit("ttest", "ttest"), _commit("mhaypenny", "mhaypenny")],
        ),
    ],
    ids=["commitAuthorInUsers", "commitCommitterInUsers", "commitAuthorInTeam", "commitAuthorInOrg"],
)
def test_has_contributor_in(ctx):
    result = HasContributorIn(**ACTORS).evaluate(ctx)
    assert result.satisfied is True
    assert result.values == ["mhaypenny"]
    assert result.conditions_map == CONDITIONS


def test_has_contributor_in_none_match():
    ctx = StaticContext(author_value="ttest", commits_value=[_commit("zed", "alpha")])
    result = HasContributorIn(**ACTORS).evaluate(ctx)
    assert result.satisfied is False
    assert result.values == ["alpha", "ttest", "zed"]
    assert result.description == "No contributors meet the required membership conditions"


@pytest.mark.parametrize(
    "ctx, satisfied, values",
    [
        (
            StaticContext(author_value="ttest", commits_value=[_commit("mhaypenny", "mhaypenny")]),
            False,
            ["ttest"],
        ),
        (
            StaticContext(
                author_value="mhaypenny",
                commits_value=[_commit("mhaypenny", "mhaypenny"), _commit("ttest", "ttest")],
            ),
            False,
            ["ttest"],
        ),
        (
            StaticContext(
                author_value="mhaypenny",
                commits_value=[_commit("ttest1", "mhaypenny"), _commit("ttest2", "mhaypenny")],
            ),
            False,
            ["ttest1"],
        ),
        (
            StaticContext(
                author_value="ttest",
                team_memberships={"ttest": ["testorg/team"]},
                commits_value=[_commit("ttest", "ttest"), _commit("mhaypenny", "mhaypenny")],
            ),
            True,
            ["mhaypenny", "ttest"],
        ),
        (
            StaticContext(
                author_value="ttest",
                org_memberships={"ttest": ["testorg"]},
                commits_value=[_commit("ttest", "ttest"), _commit("mhaypenny", "mhaypenny")],
            ),
            True,
            ["mhaypenny", "ttest"],
        ),
    ],
    ids=[
        "authorNotInList",
        "containsCommitAuthorNotInList",
        "committersInListButAuthorsAreNot",
        "commitAuthorInTeam",
        "commitAuthorInOrg",
    ],
)
def test_only_has_contributors_in(ctx, satisfied, values):
    result = OnlyHasContributorsIn(**ACTORS).evaluate(ctx)
    assert result.satisfied is satisfied
    assert result.values == values
    assert result.conditions_map == CONDITIONS


def test_only_has_contributors_in_description():
    ctx = StaticContext(author_value="ttest")
    result = OnlyHasContributorsIn(**ACTORS).evaluate(ctx)
    assert result.description == (
        'Contributor "ttest" does not meet the required membership conditions'
    )


@pytest.mark.parametrize(
    "commits, satisfied",
    [
        ([_commit("mhaypenny", "mhaypenny", SHA1), _commit("mhaypenny", "mhaypenny", SHA2)], True),
        ([_commit("mhaypenny", "", SHA1, via_web=True)], True),
        ([_commit("mhaypenny", "mhaypenny", SHA1), _commit("ttest", "mhaypenny", SHA2)], False),
        ([_commit("mhaypenny", "mhaypenny", SHA1), _commit("mhaypenny", "ttest", SHA2)], False),
    ],
    ids=[
        "authorIsOnlyContributor",
        "authorIsOnlyContributorViaWeb",
        "authorIsNotOnlyAuthor",
        "authorIsNotOnlyCommitter",
    ],
)
def test_author_is_only_contributor(commits, satisfied):
    ctx = StaticContext(author_value="mhaypenny", commits_value=commits)
    result = AuthorIsOnlyContributor(True).evaluate(ctx)
    assert result.satisfied is satisfied
    assert result.values == ["mhaypenny"]
    assert result.condition_values == ["they are the only contributors"]
    assert result.conditions_map == {}


@pytest.mark.parametrize(
    "commits, satisfied",
    [
        ([_commit("mhaypenny", "mhaypenny", SHA1), _commit("mhaypenny", "mhaypenny", SHA2)], False),
        ([_commit("mhaypenny", "mhaypenny", SHA1), _commit("ttest", "mhaypenny", SHA2)], True),
        ([_commit("mhaypenny", "mhaypenny", SHA1), _commit("mhaypenny", "ttest", SHA2)], True),
    ],
    ids=["authorIsOnlyContributor", "authorIsNotOnlyAuthor", "authorIsNotOnlyCommitter"],
)
def test_author_is_not_only_contributor(commits, satisfied):
    ctx = StaticContext(author_value="mhaypenny", commits_value=commits)
    result = AuthorIsOnlyContributor(False).evaluate(ctx)
    assert result.satisfied is satisfied
    assert result.values == ["mhaypenny"]
    assert result.condition_values == ["they are not the only contributors"]


def test_author_is_only_contributor_descriptions():
    ctx = StaticContext(
        author_value="mhaypenny",
        commits_value=[_commit("ttest", "mhaypenny", SHA2)],
    )
    result = AuthorIsOnlyContributor(True).evaluate(ctx)
    assert result.description == "Commit 9df0f1cee4 was authored or committed by a different user"

    ctx = StaticContext(author_value="mhaypenny", commits_value=[_commit("mhaypenny", "mhaypenny")])
    result = AuthorIsOnlyContributor(False).evaluate(ctx)
    assert result.description == "All commits were authored and committed by mhaypenny"


def test_commit_errors_are_wrapped():
    ctx = StaticContext(author_value="a", commits_error=ValueError("boom"))
    for predicate in (
        HasContributorIn(**ACTORS),
        OnlyHasContributorsIn(**ACTORS),
        AuthorIsOnlyContributor(True),
    ):
        with pytest.raises(RuntimeError, match="failed to get commits"):
            predicate.evaluate(ctx)


def test_triggers():
    assert HasContributorIn().trigger() == Trigger.COMMIT
    assert OnlyHasContributorsIn().trigger() == Trigger.COMMIT
    assert AuthorIsOnlyContributor().trigger() == Trigger.COMMIT