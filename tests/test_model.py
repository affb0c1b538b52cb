import pytest

from policybot.model import (
    Actors,
    Commit,
    Permission,
    Predicate,
    Regexp,
    StaticContext,
    any_matches,
)


def test_regexp_matches_anywhere():
    pattern = Regexp("app/.*\\.go")
    assert pattern.matches("src/app/main.go")
    assert not pattern.matches("server/main.go")


def test_regexp_anchored():
    pattern = Regexp("^master$")
    assert pattern.matches("master")
    assert not pattern.matches("not-master")


def test_regexp_str_is_pattern():
    assert str(Regexp("(prod|staging)")) == "(prod|staging)"


def test_regexp_equality_by_pattern():
    first = Regexp("a.b")
    second = Regexp("a.b")
    other = Regexp("a.c")
    assert (first == second) is True
    assert (first == other) is False
    assert str(first) == str(second) == "a.b"
    assert first.matches("axb") is True
    assert other.matches("axb") is False


def test_any_matches():
    patterns = [Regexp("^a"), Regexp("b$")]
    assert any_matches(patterns, "abc")
    assert any_matches(patterns, "cab")
    assert not any_matches(patterns, "cac")
    assert not any_matches([], "anything")


def test_commit_users_skips_empty():
    assert Commit(sha="1", author="a", committer="b").users() == ["a", "b"]
    assert Commit(sha="1", author="a", committer="").users() == ["a"]


def test_context_branches_and_owner():
    ctx = StaticContext(owner="everyone", branch_base_name="main", branch_head_name="feature")
    assert ctx.branches() == ("main", "feature")
    assert ctx.repository_owner() == "everyone"


def test_context_memberships():
    ctx = StaticContext(
        team_memberships={"u1": ["org/t1"], "u2": ["org/t1", "org/t2"]},
        org_memberships={"u1": ["org"], "u3": ["other"]},
    )
    assert ctx.team_members("org/t1") == ["u1", "u2"]
    assert ctx.team_members("org/t2") == ["u2"]
    assert ctx.organization_members("org") == ["u1"]
    assert ctx.is_team_member("org/t2", "u2")
    assert not ctx.is_team_member("org/t2", "u1")
    assert ctx.is_org_member("other", "u3")
    assert not ctx.is_org_member("org", "u3")


def test_context_teams():
    ctx = StaticContext(teams_value={"team-admin": Permission.ADMIN})
    assert ctx.teams() == {"team-admin": Permission.ADMIN}


def test_context_raises_configured_error():
    ctx = StaticContext(commits_error=ValueError("boom"))
    with pytest.raises(ValueError, match="boom"):
        ctx.commits()


def test_actors_by_user():
    actors = Actors(users=["mhaypenny"])
    assert actors.is_actor(StaticContext(), "mhaypenny")
    assert not actors.is_actor(StaticContext(), "ttest")


def test_actors_by_team_and_org():
    actors = Actors(teams=["testorg/team"], organizations=["testorg"])
    ctx = StaticContext(
        team_memberships={"a": ["testorg/team"]},
        org_memberships={"b": ["testorg"], "c": ["boringorg"]},
    )
    assert actors.is_actor(ctx, "a")
    assert actors.is_actor(ctx, "b")
    assert not actors.is_actor(ctx, "c")


def test_actors_wraps_membership_error():
    actors = Actors(teams=["testorg/team"])
    ctx = StaticContext(team_membership_error=ValueError("boom"))
    with pytest.raises(RuntimeError, match="team membership") as info:
        actors.is_actor(ctx, "a")
    assert isinstance(info.value.__cause__, ValueError)


def test_predicate_is_abstract():
    with pytest.raises(TypeError):
        Predicate()