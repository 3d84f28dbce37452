# GitHub API integration module

from .github_api import GITHUB_API_BASE, GitHubClient, GitHubError, summarize_repo

__all__ = ["GitHubClient", "GitHubError", "GITHUB_API_BASE", "summarize_repo"]
