"""Tests for collector services using mocked clients."""

from unittest.mock import AsyncMock

import pytest

from github_transparency.exceptions import DecodeError, GitHubAPIError, GitHubNotFoundError
from github_transparency.models.activity import OSSProject, ReviewWithReactions
from github_transparency.models.contribution import StreakStats
from github_transparency.models.outcome import ResponseOutcome
from github_transparency.services.activity_collector import ActivityCollector
from github_transparency.services.commit_collector import CommitCollector
from github_transparency.services.contribution_collector import ContributionCollector
from github_transparency.services.oss_collector import OSSContributionCollector
from github_transparency.services.profile_collector import ProfileCollector
from github_transparency.services.repo_collector import RepoCollector

from .conftest import success, week


def pr_item(owner: str, repo: str, number: int = 1) -> dict:
    return {
        "number": number,
        "repository_url": f"https://api.github.com/repos/{owner}/{repo}",
    }


PROJECTS = [OSSProject.parse(f"org/project{i}") for i in range(7)]


class TestOSSContributionCollector:
    """Tests for the batched merged-PR tally."""

    @pytest.mark.asyncio
    async def test_batches_projects_into_combined_queries(self, mock_rest_client):
        """Test that seven projects at batch size 5 cost two searches."""
        mock_rest_client.search_issues.side_effect = [
            {
                "total_count": 3,
                "items": [
                    pr_item("org", "project0"),
                    pr_item("Org", "Project0", 2),
                    pr_item("org", "project4"),
                ],
            },
            {"total_count": 1, "items": [pr_item("org", "project6")]},
        ]

        collector = OSSContributionCollector(mock_rest_client, batch_size=5)
        result = await collector.collect("octocat", PROJECTS)

        assert mock_rest_client.search_issues.await_count == 2
        first_query = mock_rest_client.search_issues.await_args_list[0].args[0]
        assert first_query.count("repo:") == 5
        assert "author:octocat" in first_query
        assert "is:merged" in first_query
        assert result == {
            "org/project0": 2,
            "org/project1": 0,
            "org/project2": 0,
            "org/project3": 0,
            "org/project4": 1,
            "org/project5": 0,
            "org/project6": 1,
        }
        mock_rest_client.search_count.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ignores_items_from_other_repositories(self, mock_rest_client):
        """Test that unexpected repositories in results are not counted."""
        mock_rest_client.search_issues.return_value = {
            "total_count": 2,
            "items": [pr_item("org", "project0"), pr_item("someone", "else")],
        }

        result = await OSSContributionCollector(mock_rest_client).collect(
            "octocat", [PROJECTS[0]]
        )

        assert result == {"org/project0": 1}

    @pytest.mark.asyncio
    async def test_truncated_batch_is_recounted_per_project(self, mock_rest_client):
        """Test that total_count above one page switches to per-project counts."""
        mock_rest_client.search_issues.return_value = {
            "total_count": 250,
            "items": [pr_item("org", "project0")] * 100,
        }
        mock_rest_client.search_count.side_effect = [180, 70]

        result = await OSSContributionCollector(mock_rest_client).collect(
            "octocat", PROJECTS[:2]
        )

        assert result == {"org/project0": 180, "org/project1": 70}
        assert mock_rest_client.search_count.await_count == 2
        single_query = mock_rest_client.search_count.await_args_list[0].args[0]
        assert single_query.count("repo:") == 1

    @pytest.mark.asyncio
    async def test_failed_batch_falls_back_to_individual_counts(self, mock_rest_client):
        """Test that one project failing individually is counted as 0."""
        mock_rest_client.search_issues.side_effect = GitHubAPIError("boom", status_code=422)
        mock_rest_client.search_count.side_effect = [
            4,
            GitHubNotFoundError("gone"),
            2,
        ]

        result = await OSSContributionCollector(mock_rest_client).collect(
            "octocat", PROJECTS[:3]
        )

        assert result == {"org/project0": 4, "org/project1": 0, "org/project2": 2}

    @pytest.mark.asyncio
    async def test_all_failures_give_zeros(self, mock_rest_client):
        """Test that every requested project is present even if nothing works."""
        mock_rest_client.search_issues.side_effect = GitHubAPIError("boom", status_code=500)
        mock_rest_client.search_count.side_effect = GitHubAPIError("boom", status_code=500)

        failed: list[str] = []
        result = await OSSContributionCollector(mock_rest_client).collect(
            "octocat", PROJECTS, failed=failed
        )

        assert result == {project.key: 0 for project in PROJECTS}
        assert failed == [project.key for project in PROJECTS]

    @pytest.mark.asyncio
    async def test_unsearchable_username_gives_zeros(self, mock_rest_client):
        """Test that a username with whitespace falls back to 0 without requests."""
        failed: list[str] = []

        result = await OSSContributionCollector(mock_rest_client).collect(
            "bad name", [OSSProject(owner="a", repo="b")], failed=failed
        )

        assert result == {"a/b": 0}
        assert failed == ["a/b"]
        mock_rest_client.search_issues.assert_not_awaited()
        mock_rest_client.search_count.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_batch_result_falls_back(self, mock_rest_client):
        """Test that a search result of the wrong shape is counted per project."""
        mock_rest_client.search_issues.return_value = {"items": [None]}
        mock_rest_client.search_count.return_value = 3

        result = await OSSContributionCollector(mock_rest_client).collect(
            "octocat", [PROJECTS[0]]
        )

        assert result == {"org/project0": 3}

    @pytest.mark.asyncio
    async def test_no_projects(self, mock_rest_client):
        """Test that an empty project list makes no requests."""
        assert await OSSContributionCollector(mock_rest_client).collect("octocat", []) == {}
        mock_rest_client.search_issues.assert_not_awaited()


class TestActivityCollector:
    """Tests for PR, issue and review collection."""

    @pytest.mark.asyncio
    async def test_pull_requests_detailed_skips_failed_details(
        self, mock_rest_client, mock_graphql_client
    ):
        """Test that a PR whose detail request fails is left out."""
        mock_rest_client.search_issues.return_value = {
            "total_count": 3,
            "items": [
                pr_item("octocat", "hello", 1),
                pr_item("octocat", "hello", 2),
                pr_item("octocat", "world", 3),
            ],
        }

        async def get(endpoint, params=None, include_topics=False):
            if endpoint.endswith("/pulls/2"):
                raise GitHubNotFoundError("gone")
            return {
                "number": int(endpoint.rsplit("/", 1)[1]),
                "state": "closed",
                "created_at": "2024-01-01T00:00:00Z",
                "merged_at": "2024-01-01T01:30:00Z",
            }

        mock_rest_client.get.side_effect = get

        collector = ActivityCollector(mock_rest_client, mock_graphql_client, concurrency=2)
        prs = await collector.collect_pull_requests_detailed("octocat", limit=10)

        assert [pr.number for pr in prs] == [1, 3]
        assert all(pr.merge_time_minutes == 90 for pr in prs)
        assert mock_rest_client.search_issues.await_args.kwargs["sort"] == "created"
        assert mock_rest_client.search_issues.await_args.kwargs["per_page"] == 10

    @pytest.mark.asyncio
    async def test_pull_requests_search_failure_raises(
        self, mock_rest_client, mock_graphql_client
    ):
        """Test that the primary search failing propagates."""
        mock_rest_client.search_issues.side_effect = GitHubAPIError("boom", status_code=500)

        collector = ActivityCollector(mock_rest_client, mock_graphql_client)
        with pytest.raises(GitHubAPIError):
            await collector.collect_pull_requests_detailed("octocat")

    @pytest.mark.asyncio
    async def test_pull_request_counts(self, mock_rest_client, mock_graphql_client):
        """Test total and merged counts from two searches."""
        mock_rest_client.search_count.side_effect = [12, 9]

        counts = await ActivityCollector(
            mock_rest_client, mock_graphql_client
        ).collect_pull_request_counts("octocat")

        assert counts.total == 12
        assert counts.merged == 9
        merged_query = mock_rest_client.search_count.await_args_list[1].args[0]
        assert merged_query == "author:octocat type:pr is:merged"

    @pytest.mark.asyncio
    async def test_issues_created(self, mock_rest_client, mock_graphql_client):
        """Test parsing issues from search results."""
        mock_rest_client.search_issues.return_value = {
            "total_count": 1,
            "items": [
                {
                    "number": 7,
                    "title": "Bug",
                    "state": "open",
                    "user": {"login": "octocat"},
                    "created_at": "2024-02-01T10:00:00Z",
                    "repository_url": "https://api.github.com/repos/octocat/hello",
                }
            ],
        }

        issues = await ActivityCollector(
            mock_rest_client, mock_graphql_client
        ).collect_issues_created("octocat")

        assert len(issues) == 1
        assert issues[0].author == "octocat"
        assert issues[0].repo == "octocat/hello"
        assert "type:issue" in mock_rest_client.search_issues.await_args.args[0]

    @pytest.mark.asyncio
    async def test_issue_counts(self, mock_rest_client, mock_graphql_client):
        """Test opened and closed issue counts."""
        mock_rest_client.search_count.side_effect = [5, 3]

        counts = await ActivityCollector(
            mock_rest_client, mock_graphql_client
        ).collect_issue_counts("octocat")

        assert counts.opened == 5
        assert counts.closed == 3

    @pytest.mark.asyncio
    async def test_reviews_with_reactions(self, mock_rest_client, mock_graphql_client):
        """Test parsing review nodes and skipping empty ones."""
        mock_graphql_client.get_review_contributions.return_value = [
            {
                "pullRequestReview": {
                    "id": "R1",
                    "state": "APPROVED",
                    "submittedAt": "2024-03-01T12:00:00Z",
                    "reactionGroups": [
                        {"content": "THUMBS_UP", "users": {"totalCount": 2}},
                        {"content": "HEART", "users": {"totalCount": 1}},
                    ],
                    "comments": {"totalCount": 4},
                    "pullRequest": {
                        "number": 42,
                        "repository": {"nameWithOwner": "org/project"},
                    },
                }
            },
            {"pullRequestReview": None},
        ]

        reviews = await ActivityCollector(
            mock_rest_client, mock_graphql_client
        ).collect_reviews_with_reactions("octocat")

        assert len(reviews) == 1
        assert reviews[0].total_reactions == 3
        assert reviews[0].comment_count == 4
        assert reviews[0].repository == "org/project"

    @pytest.mark.asyncio
    async def test_review_counts_measure_approval(self, mock_rest_client, mock_graphql_client):
        """Test that approval rate comes from review states."""
        mock_rest_client.search_count.return_value = 40
        reviews = [
            ReviewWithReactions(id="1", state="APPROVED"),
            ReviewWithReactions(id="2", state="APPROVED"),
            ReviewWithReactions(id="3", state="APPROVED"),
            ReviewWithReactions(id="4", state="COMMENTED"),
        ]

        counts = await ActivityCollector(
            mock_rest_client, mock_graphql_client
        ).collect_review_counts("octocat", reviews=reviews)

        assert counts.total == 40
        assert counts.approved == 3
        assert counts.sampled == 4
        assert counts.approval_rate == 0.75
        mock_graphql_client.get_review_contributions.assert_not_awaited()


    @pytest.mark.asyncio
    async def test_review_with_null_state_is_decode_error(
        self, mock_rest_client, mock_graphql_client
    ):
        """Test that a review node with a null state raises DecodeError."""
        mock_graphql_client.get_review_contributions.return_value = [
            {"pullRequestReview": {"id": "R1", "state": None}}
        ]

        collector = ActivityCollector(mock_rest_client, mock_graphql_client)
        with pytest.raises(DecodeError):
            await collector.collect_reviews_with_reactions("octocat")

    @pytest.mark.asyncio
    async def test_malformed_issue_item_is_decode_error(
        self, mock_rest_client, mock_graphql_client
    ):
        """Test that a search item that is not an object raises DecodeError."""
        mock_rest_client.search_issues.return_value = {"total_count": 1, "items": ["oops"]}

        collector = ActivityCollector(mock_rest_client, mock_graphql_client)
        with pytest.raises(DecodeError):
            await collector.collect_issues_created("octocat")


class TestCommitCollector:
    """Tests for commit detail collection."""

    @pytest.mark.asyncio
    async def test_commits_with_stats(self, mock_rest_client):
        """Test listing commits and fetching their stats, skipping failures."""
        mock_rest_client.call.return_value = success(
            [{"sha": "aaa"}, {"sha": "bbb"}, {"sha": "ccc"}]
        )

        async def get(endpoint, params=None, include_topics=False):
            sha = endpoint.rsplit("/", 1)[1]
            if sha == "bbb":
                raise GitHubAPIError("boom", status_code=500)
            return {
                "sha": sha,
                "commit": {"message": f"commit {sha}", "author": {"date": "2024-01-01T00:00:00Z"}},
                "stats": {"additions": 10, "deletions": 2, "total": 12},
                "files": [{"filename": "README.md"}],
            }

        mock_rest_client.get.side_effect = get

        commits = await CommitCollector(mock_rest_client, concurrency=2).collect_commits_with_stats(
            "octocat", "hello", "octocat", limit=3
        )

        assert [c.sha for c in commits] == ["aaa", "ccc"]
        assert commits[0].additions == 10
        assert commits[0].files == ["README.md"]
        params = mock_rest_client.call.await_args.kwargs["params"]
        assert params["author"] == "octocat"
        assert params["per_page"] == 3

    @pytest.mark.asyncio
    async def test_commit_list_failure_raises(self, mock_rest_client):
        """Test that a failed commit list propagates."""
        mock_rest_client.call.return_value = ResponseOutcome.error(409)

        with pytest.raises(GitHubAPIError):
            await CommitCollector(mock_rest_client).collect_commits_with_stats(
                "octocat", "empty", "octocat"
            )

    @pytest.mark.asyncio
    async def test_get_commit_details_returns_none_on_error(self, mock_rest_client):
        """Test that a single failed commit lookup gives None."""
        mock_rest_client.get_commit.side_effect = GitHubNotFoundError("missing")

        assert await CommitCollector(mock_rest_client).get_commit_details("o", "r", "x") is None


    @pytest.mark.asyncio
    async def test_get_commit_details_malformed_payload(self, mock_rest_client):
        """Test that a commit payload of the wrong shape gives None."""
        mock_rest_client.get_commit.return_value = ["not", "a", "commit"]

        assert await CommitCollector(mock_rest_client).get_commit_details("o", "r", "x") is None


class TestContributionCollector:
    """Tests for GraphQL contribution collection."""

    @pytest.mark.asyncio
    async def test_collect_contributions_with_streak(self, mock_graphql_client):
        """Test calendar parsing and streak computation."""
        mock_graphql_client.get_contributions.return_value = {
            "totalCommitContributions": 20,
            "totalPullRequestContributions": 4,
            "totalPullRequestReviewContributions": 6,
            "contributionCalendar": {
                "totalContributions": 30,
                "weeks": [
                    week(("2024-06-09", 0), ("2024-06-10", 5), ("2024-06-11", 0)),
                    week(("2024-06-12", 2), ("2024-06-13", 3), ("2024-06-14", 0)),
                ],
            },
        }

        stats = await ContributionCollector(mock_graphql_client).collect_contributions("octocat")

        assert stats.total_contributions == 30
        assert stats.total_commits == 20
        assert stats.streak == StreakStats(current=2, longest=2)
        assert stats.calendar.get_busiest_day().count == 5

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_graphql_client):
        """Test that missing contribution data gives None."""
        mock_graphql_client.get_contributions.return_value = None

        assert await ContributionCollector(mock_graphql_client).collect_contributions("ghost") is None

    @pytest.mark.asyncio
    async def test_calendar_day_without_date_is_decode_error(self, mock_graphql_client):
        """Test that a calendar day missing its date raises DecodeError."""
        mock_graphql_client.get_contributions.return_value = {
            "contributionCalendar": {
                "weeks": [{"contributionDays": [{"contributionCount": 3}]}]
            }
        }

        with pytest.raises(DecodeError):
            await ContributionCollector(mock_graphql_client).collect_contributions("octocat")

    @pytest.mark.asyncio
    async def test_commit_timestamps_are_utc(self, mock_graphql_client):
        """Test that occurredAt offsets are converted to UTC date and hour."""
        mock_graphql_client.get_commit_contributions.return_value = [
            {
                "repository": {"name": "hello", "owner": {"login": "octocat"}},
                "contributions": {
                    "nodes": [
                        {"occurredAt": "2024-01-01T23:30:00-02:00"},
                        {"occurredAt": "2024-01-05T08:00:00Z"},
                    ]
                },
            },
            {"contributions": None},
        ]

        timestamps = await ContributionCollector(mock_graphql_client).collect_commit_timestamps(
            "octocat"
        )

        assert [(t.date, t.hour) for t in timestamps] == [("2024-01-02", 1), ("2024-01-05", 8)]
        from_arg = mock_graphql_client.get_commit_contributions.await_args.args[1]
        assert from_arg.endswith("+00:00")


class TestProfileAndRepoCollectors:
    """Tests for the primary data collectors."""

    @pytest.mark.asyncio
    async def test_collect_profile(self, mock_rest_client):
        """Test profile parsing."""
        mock_rest_client.get_authenticated_user = AsyncMock(
            return_value={
                "id": 1,
                "login": "octocat",
                "name": "The Octocat",
                "followers": 10,
                "created_at": "2011-01-25T18:44:36Z",
            }
        )

        profile = await ProfileCollector(mock_rest_client).collect_profile()

        assert profile.username == "octocat"
        assert profile.followers == 10
        assert profile.created_at.year == 2011

    @pytest.mark.asyncio
    async def test_collect_repos_all_pages(self, mock_rest_client):
        """Test that repositories from every page are summarised."""
        mock_rest_client.call.side_effect = [
            success(
                [
                    {
                        "name": "a",
                        "full_name": "octocat/a",
                        "private": True,
                        "language": "Python",
                        "stargazers_count": 3,
                        "topics": ["cli"],
                    },
                    {
                        "name": "b",
                        "full_name": "octocat/b",
                        "fork": True,
                        "language": "Python",
                        "stargazers_count": 1,
                    },
                ]
            ),
        ]

        summary = await RepoCollector(mock_rest_client, per_page=100).collect_repos()

        assert summary.count == 2
        assert summary.private_count == 1
        assert summary.fork_count == 1
        assert summary.total_stars == 4
        assert summary.languages == {"Python": 2}
        assert summary.topics == {"cli": 1}
        call = mock_rest_client.call.await_args
        assert call.args[0] == "/user/repos"
        assert call.kwargs["params"]["type"] == "all"
        assert call.kwargs["include_topics"] is True
