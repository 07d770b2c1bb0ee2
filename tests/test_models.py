"""Tests for data models."""

from datetime import date, datetime, timezone

import pytest

from github_transparency.exceptions import InvalidQueryError
from github_transparency.models.activity import (
    CommitDetail,
    OSSProject,
    PullRequestDetail,
    SearchIssue,
    TransparencyData,
    repository_from_url,
)
from github_transparency.models.contribution import (
    CommitTimestamp,
    ContributionCalendar,
    ContributionDay,
)
from github_transparency.models.outcome import OutcomeKind, ResponseOutcome
from github_transparency.models.repository import Repository, RepositorySummary
from github_transparency.models.user import UserProfile
from github_transparency.services.queries import SearchQuery, merged_prs_query


class TestUserProfile:
    """Tests for UserProfile model."""

    def test_from_api(self):
        """Test creating UserProfile from API response."""
        data = {
            "id": 583231,
            "login": "octocat",
            "name": "The Octocat",
            "bio": None,
            "company": "@github",
            "location": "San Francisco",
            "blog": "",
            "twitter_username": None,
            "public_repos": 8,
            "followers": 9000,
            "following": 9,
            "created_at": "2011-01-25T18:44:36Z",
        }

        profile = UserProfile.from_api(data)

        assert profile.username == "octocat"
        assert profile.company == "@github"
        assert profile.blog is None
        assert profile.public_repos == 8
        assert profile.created_at.year == 2011

    def test_from_api_missing_fields(self):
        """Test creating UserProfile with missing optional fields."""
        profile = UserProfile.from_api({"login": "minimal"})

        assert profile.username == "minimal"
        assert profile.name is None
        assert profile.followers == 0
        assert profile.created_at is None


class TestRepository:
    """Tests for Repository model."""

    def test_from_api(self):
        """Test creating Repository from API response."""
        data = {
            "id": 1,
            "name": "hello",
            "full_name": "octocat/hello",
            "owner": {"login": "octocat"},
            "private": True,
            "language": "Python",
            "stargazers_count": 5,
            "topics": ["cli", "github"],
            "license": {"key": "mit", "name": "MIT License"},
            "fork": False,
            "pushed_at": "2024-05-01T00:00:00Z",
        }

        repo = Repository.from_api(data)

        assert repo.owner == "octocat"
        assert repo.private is True
        assert repo.topics == ["cli", "github"]
        assert repo.license.key == "mit"
        assert repo.pushed_at.month == 5

    def test_summary_empty(self):
        """Test summarising no repositories."""
        summary = RepositorySummary.from_repos([])
        assert summary.count == 0
        assert summary.languages == {}


class TestContributionModels:
    """Tests for contribution calendar models."""

    def test_contribution_day_rejects_negative_count(self):
        """Test the non-negative count constraint."""
        with pytest.raises(ValueError):
            ContributionDay(date=date(2024, 1, 1), count=-1)

    def test_calendar_from_graphql(self):
        """Test calendar parsing and busiest day."""
        calendar = ContributionCalendar.from_graphql(
            {
                "totalContributions": 8,
                "weeks": [
                    {
                        "contributionDays": [
                            {"date": "2024-01-01", "contributionCount": 3},
                            {"date": "2024-01-02", "contributionCount": 5},
                        ]
                    }
                ],
            }
        )

        assert calendar.total_contributions == 8
        assert len(calendar.days) == 2
        assert calendar.get_busiest_day().date == date(2024, 1, 2)

    def test_empty_calendar_has_no_busiest_day(self):
        """Test busiest day on an empty calendar."""
        assert ContributionCalendar().get_busiest_day() is None

    def test_commit_timestamp_from_occurred_at(self):
        """Test conversion to UTC date and hour."""
        ts = CommitTimestamp.from_occurred_at("2024-03-10T22:15:00+05:00")
        assert ts.date == "2024-03-10"
        assert ts.hour == 17


class TestActivityModels:
    """Tests for commit, PR and issue models."""

    def test_commit_detail_from_api(self):
        """Test commit parsing with stats and files."""
        commit = CommitDetail.from_api(
            {
                "sha": "abc",
                "commit": {
                    "message": "Fix bug",
                    "author": {"date": "2024-01-01T12:00:00Z"},
                    "verification": {"verified": True},
                },
                "stats": {"additions": 3, "deletions": 1, "total": 4},
                "files": [{"filename": "a.py"}, {"filename": "b.py"}],
            }
        )

        assert commit.verified is True
        assert commit.total == 4
        assert commit.files == ["a.py", "b.py"]

    def test_pull_request_deleted_fork(self):
        """Test that a PR from a deleted fork has no head repo."""
        pr = PullRequestDetail.from_api(
            {
                "number": 5,
                "head": {"repo": None},
                "base": {"repo": {"full_name": "org/project"}},
                "merged_at": None,
            }
        )

        assert pr.head_repo is None
        assert pr.base_repo == "org/project"
        assert pr.is_merged is False

    def test_search_issue_merged_at(self):
        """Test that merged_at is read from the pull_request object."""
        issue = SearchIssue.from_api(
            {
                "number": 9,
                "pull_request": {"merged_at": "2024-02-02T00:00:00Z"},
                "reactions": {"total_count": 4},
                "repository_url": "https://api.github.com/repos/org/project",
            }
        )

        assert issue.merged_at is not None
        assert issue.reactions == 4
        assert issue.repo == "org/project"

    def test_repository_from_url(self):
        """Test owner/repo extraction."""
        assert repository_from_url("https://api.github.com/repos/a/b") == ("a", "b")
        assert repository_from_url("https://api.github.com/repos/a/b/issues") is None


class TestOSSProject:
    """Tests for OSS project parsing."""

    def test_parse(self):
        """Test owner/repo parsing and key normalisation."""
        project = OSSProject.parse("Python/CPython")
        assert project.owner == "Python"
        assert project.key == "python/cpython"

    @pytest.mark.parametrize("value", ["cpython", "/cpython", "python/", "a/b/c", ""])
    def test_parse_invalid(self, value):
        """Test rejection of malformed names."""
        with pytest.raises(ValueError):
            OSSProject.parse(value)


class TestSearchQuery:
    """Tests for search query construction."""

    def test_merged_prs_query(self):
        """Test combining repository qualifiers."""
        query = merged_prs_query("octocat", [("a", "b"), ("c", "d")])
        assert query == "author:octocat type:pr is:merged repo:a/b repo:c/d"

    def test_rejects_whitespace(self):
        """Test that qualifier values cannot inject extra terms."""
        with pytest.raises(ValueError):
            SearchQuery().author("octocat is:private")
        with pytest.raises(InvalidQueryError):
            SearchQuery().author("bad name")

    def test_reviewed_by(self):
        """Test the reviewed-by qualifier."""
        assert str(SearchQuery().reviewed_by("octocat").pull_requests()) == (
            "reviewed-by:octocat type:pr"
        )


class TestResponseOutcome:
    """Tests for outcome tagging."""

    def test_success(self):
        """Test a success outcome."""
        outcome = ResponseOutcome.success([1, 2])
        assert outcome.is_success
        assert outcome.unwrap() == [1, 2]

    def test_rate_limited_is_not_success(self):
        """Test a rate limited outcome."""
        outcome = ResponseOutcome.rate_limited(10)
        assert outcome.kind is OutcomeKind.RATE_LIMITED
        assert not outcome.is_success


def test_transparency_data_defaults():
    """Test that enrichment sections default to empty values."""
    data = TransparencyData(
        profile=UserProfile(username="octocat"),
        repositories=RepositorySummary(),
        collected_at=datetime.now(timezone.utc),
    )

    assert data.contributions is None
    assert data.pull_request_counts.total == 0
    assert data.oss_contributions == {}
    assert data.degraded == []
