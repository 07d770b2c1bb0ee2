"""GraphQL documents and search query construction.

GraphQL documents take every user-supplied value as a variable. Search
queries are assembled from tokens and sent as the ``q`` parameter, so httpx
does the URL encoding.
"""

from dataclasses import dataclass, field

from github_transparency.exceptions import InvalidQueryError

# Contribution calendar and totals
CONTRIBUTIONS_QUERY = """
query($username: String!) {
  user(login: $username) {
    contributionsCollection {
      totalCommitContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""

# Commit timestamps grouped by repository
COMMIT_TIMESTAMPS_QUERY = """
query($username: String!, $from: DateTime!) {
  user(login: $username) {
    contributionsCollection(from: $from) {
      commitContributionsByRepository(maxRepositories: 100) {
        repository {
          name
          owner {
            login
          }
        }
        contributions(first: 100) {
          nodes {
            occurredAt
          }
        }
      }
    }
  }
}
"""

# Code reviews with reaction groups
REVIEWS_WITH_REACTIONS_QUERY = """
query($username: String!, $first: Int!) {
  user(login: $username) {
    contributionsCollection {
      pullRequestReviewContributions(first: $first) {
        nodes {
          pullRequestReview {
            id
            state
            body
            submittedAt
            reactionGroups {
              content
              users {
                totalCount
              }
            }
            comments {
              totalCount
            }
            pullRequest {
              number
              repository {
                nameWithOwner
              }
            }
          }
        }
      }
    }
  }
}
"""


@dataclass
class SearchQuery:
    """Space-separated search qualifiers, ANDed by GitHub.

    Multiple ``repo:`` qualifiers are ORed by the search service.

    Example:
        >>> str(SearchQuery().author("octocat").pull_requests().merged())
        'author:octocat type:pr is:merged'
    """

    tokens: list[str] = field(default_factory=list)

    def _add(self, qualifier: str, value: str) -> "SearchQuery":
        value = value.strip()
        if not value or any(ch.isspace() for ch in value):
            raise InvalidQueryError(f"Invalid value for {qualifier}: {value!r}")
        self.tokens.append(f"{qualifier}:{value}")
        return self

    def author(self, username: str) -> "SearchQuery":
        return self._add("author", username)

    def reviewed_by(self, username: str) -> "SearchQuery":
        return self._add("reviewed-by", username)

    def pull_requests(self) -> "SearchQuery":
        self.tokens.append("type:pr")
        return self

    def issues(self) -> "SearchQuery":
        self.tokens.append("type:issue")
        return self

    def merged(self) -> "SearchQuery":
        self.tokens.append("is:merged")
        return self

    def closed(self) -> "SearchQuery":
        self.tokens.append("is:closed")
        return self

    def repo(self, owner: str, name: str) -> "SearchQuery":
        return self._add("repo", f"{owner}/{name}")

    def __str__(self) -> str:
        return " ".join(self.tokens)


def merged_prs_query(username: str, projects: list[tuple[str, str]]) -> str:
    """Merged PRs by ``username`` in any of ``projects`` (owner, repo)."""
    query = SearchQuery().author(username).pull_requests().merged()
    for owner, repo in projects:
        query.repo(owner, repo)
    return str(query)
