"""
Tests for deploy status resolution against a fake GitHub API.

Feature: reprac
"""

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from reprac.client import GitHubClient
from reprac.resolver import StatusResolver, recent_commits
from reprac.testing import FakeGitHubAPI, commit_json
from reprac.types import RefKind, RepositoryRef, RepoStatus, Status
from reprac.types.github import ComparedCommit, Comparison

RELEASE_SHA = "1" * 40
TAG_SHA = "2" * 40
TAG_OBJECT_SHA = "3" * 40


def resolve(api: FakeGitHubAPI, owner: str, repo: str) -> RepoStatus:
    async def scenario() -> RepoStatus:
        async with GitHubClient(token="test-token") as client:
            with api.patch(client):
                return await StatusResolver(client).resolve(RepositoryRef(owner, repo))

    return asyncio.run(scenario())


def test_release_at_branch_head_is_clean(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.add_release("acme", "web", "v1.2.0", RELEASE_SHA)
    fake_api.add_comparison("acme", "web", RELEASE_SHA, "main", ahead_by=0)

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.CLEAN
    assert status.commits_ahead == 0
    assert status.ref_name == "v1.2.0"
    assert status.ref_kind is RefKind.RELEASE
    assert status.default_branch == "main"
    assert status.recent_commits == ()
    assert not fake_api.was_called("/repos/acme/web/tags")


def test_tag_behind_main(fake_api: FakeGitHubAPI) -> None:
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    fake_api.add_repo("acme", "api")
    fake_api.add_tag("acme", "api", "v0.9.0", TAG_SHA)
    fake_api.add_comparison(
        "acme",
        "api",
        TAG_SHA,
        "main",
        ahead_by=3,
        commits=[
            commit_json(f"{i}" * 40, f"change {i}\n\nbody", base + timedelta(hours=i))
            for i in (4, 5, 6)
        ],
    )

    status = resolve(fake_api, "acme", "api")

    assert status.state is Status.BEHIND
    assert status.commits_ahead == 3
    assert status.ref_kind is RefKind.TAG
    assert [c.short_id for c in status.recent_commits] == ["6666666", "5555555", "4444444"]
    assert [c.headline for c in status.recent_commits] == ["change 6", "change 5", "change 4"]
    timestamps = [c.timestamp for c in status.recent_commits]
    assert timestamps == sorted(timestamps, reverse=True)


def test_no_tags_and_no_release(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "new")
    fake_api.no_tags("acme", "new")

    status = resolve(fake_api, "acme", "new")

    assert status.state is Status.NO_RELEASE
    assert status.ref_name == ""
    assert status.ref_kind is RefKind.NONE
    assert status.error_message == ""


def test_metadata_404_short_circuits(fake_api: FakeGitHubAPI) -> None:
    status = resolve(fake_api, "acme", "gone")

    assert status.state is Status.ERROR
    assert "not found" in status.error_message
    assert 0 < len(status.error_message) <= 40
    assert fake_api.paths == ["/repos/acme/gone"]


def test_metadata_timeout_is_an_error(fake_api: FakeGitHubAPI) -> None:
    fake_api.fail("/repos/acme/slow", httpx.ConnectTimeout("timed out"))

    status = resolve(fake_api, "acme", "slow")

    assert status.state is Status.ERROR
    assert status.error_message == "request timed out"
    assert len(fake_api.calls) == 1


def test_missing_default_branch_falls_back_to_main(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web", default_branch=None)
    fake_api.add_release("acme", "web", "v1.2.0", RELEASE_SHA)
    fake_api.add_comparison("acme", "web", RELEASE_SHA, "main", ahead_by=0)

    status = resolve(fake_api, "acme", "web")

    assert status.default_branch == "main"
    assert status.state is Status.CLEAN


def test_annotated_release_tag_is_dereferenced(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web", "develop")
    fake_api.add_release("acme", "web", "v2.0.0", RELEASE_SHA, annotated_sha=TAG_OBJECT_SHA)
    fake_api.add_comparison(
        "acme", "web", RELEASE_SHA, "develop", ahead_by=1, commits=[commit_json("a" * 40, "fix")]
    )

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.BEHIND
    assert fake_api.was_called(f"/repos/acme/web/git/tags/{TAG_OBJECT_SHA}")
    assert fake_api.was_called(f"/repos/acme/web/compare/{RELEASE_SHA}...develop")


def test_failed_dereference_uses_tag_object(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route(
        "/repos/acme/web/releases/latest", body={"tag_name": "v2.0.0"}
    )
    fake_api.route(
        "/repos/acme/web/git/ref/tags/v2.0.0",
        body={"object": {"type": "tag", "sha": TAG_OBJECT_SHA}},
    )
    fake_api.add_comparison("acme", "web", TAG_OBJECT_SHA, "main", ahead_by=0)

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.CLEAN
    assert status.ref_kind is RefKind.RELEASE


def test_unresolvable_release_falls_back_to_tag(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route("/repos/acme/web/releases/latest", body={"tag_name": "deleted"})
    fake_api.add_tag("acme", "web", "v1.0.0", TAG_SHA)
    fake_api.add_comparison("acme", "web", TAG_SHA, "main", ahead_by=0)

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.CLEAN
    assert status.ref_name == "v1.0.0"
    assert status.ref_kind is RefKind.TAG


def test_release_server_error_falls_back_to_tag(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route("/repos/acme/web/releases/latest", status_code=500, body={})
    fake_api.add_tag("acme", "web", "v1.0.0", TAG_SHA)
    fake_api.add_comparison("acme", "web", TAG_SHA, "main", ahead_by=0)

    assert resolve(fake_api, "acme", "web").state is Status.CLEAN


def test_tag_ref_lookup_failure_uses_listed_commit(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route(
        "/repos/acme/web/tags", body=[{"name": "v1.0.0", "commit": {"sha": TAG_SHA}}]
    )
    fake_api.add_comparison("acme", "web", TAG_SHA, "main", ahead_by=0)

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.CLEAN
    assert status.ref_name == "v1.0.0"


def test_tag_listing_failure_is_an_error(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route("/repos/acme/web/tags", status_code=500, body={})

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.ERROR
    assert status.error_message == "HTTP 500"
    assert status.default_branch == "main"


def test_compare_failure_is_an_error(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.add_release("acme", "web", "v1.2.0", RELEASE_SHA)

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.ERROR
    assert status.error_message == "not found"


def test_malformed_metadata_is_an_error(fake_api: FakeGitHubAPI) -> None:
    fake_api.route("/repos/acme/web", body=["not", "a", "repository"])

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.ERROR
    assert status.error_message == "malformed repository response"


def test_only_five_newest_commits_are_kept(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "busy")
    fake_api.add_tag("acme", "busy", "v3.0.0", TAG_SHA)
    fake_api.add_comparison(
        "acme",
        "busy",
        TAG_SHA,
        "main",
        ahead_by=250,
        commits=[commit_json(f"{i:040d}", f"commit {i}") for i in range(8)],
    )

    status = resolve(fake_api, "acme", "busy")

    assert status.commits_ahead == 250
    assert [c.headline for c in status.recent_commits] == [
        "commit 7",
        "commit 6",
        "commit 5",
        "commit 4",
        "commit 3",
    ]


@given(count=st.integers(min_value=0, max_value=20))
@settings(max_examples=50)
def test_recent_commits_keeps_newest_first(count: int) -> None:
    comparison = Comparison(
        ahead_by=count,
        commits=[ComparedCommit(sha=f"{i:040d}", message=f"m{i}") for i in range(count)],
    )

    result = recent_commits(comparison)

    assert len(result) == min(count, 5)
    assert [c.headline for c in result] == [f"m{i}" for i in reversed(range(count))][:5]


@pytest.mark.parametrize(
    "commit",
    [
        {"sha": "b" * 40, "commit": "oops"},
        {"sha": "b" * 40, "commit": {"message": "fix", "author": ["not", "a", "mapping"]}},
        {"sha": "b" * 40, "commit": {"message": 42}},
        "not a commit",
    ],
)
def test_malformed_compared_commit_is_an_error(fake_api: FakeGitHubAPI, commit: object) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.add_release("acme", "web", "v1.2.0", RELEASE_SHA)
    fake_api.route(
        f"/repos/acme/web/compare/{RELEASE_SHA}...main",
        body={"ahead_by": 1, "commits": [commit]},
    )

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.ERROR
    assert status.error_message == "malformed commit response"
    assert status.default_branch == "main"


@pytest.mark.parametrize(
    "tag",
    [
        {"name": "v1.0.0", "commit": "oops"},
        {"name": "v1.0.0", "commit": {"sha": ["2" * 40]}},
        {"name": 7, "commit": {"sha": TAG_SHA}},
    ],
)
def test_malformed_tag_listing_is_an_error(fake_api: FakeGitHubAPI, tag: object) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route("/repos/acme/web/tags", body=[tag])

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.ERROR
    assert status.error_message == "malformed tag response"


def test_malformed_release_falls_back_to_tag(fake_api: FakeGitHubAPI) -> None:
    fake_api.add_repo("acme", "web")
    fake_api.route("/repos/acme/web/releases/latest", body={"tag_name": ["v2.0.0"]})
    fake_api.add_tag("acme", "web", "v1.0.0", TAG_SHA)
    fake_api.add_comparison("acme", "web", TAG_SHA, "main", ahead_by=0)

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.CLEAN
    assert status.ref_name == "v1.0.0"


def test_non_string_default_branch_is_an_error(fake_api: FakeGitHubAPI) -> None:
    fake_api.route("/repos/acme/web", body={"default_branch": {"name": "main"}})

    status = resolve(fake_api, "acme", "web")

    assert status.state is Status.ERROR
    assert status.error_message == "malformed repository response"
