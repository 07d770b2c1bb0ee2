"""Output handlers for GitHub Transparency."""

from github_transparency.output.json_writer import build_report, write_json_report

__all__ = [
    "build_report",
    "write_json_report",
]
