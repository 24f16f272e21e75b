"""
Scaffold CLI - project scaffolding helpers and git commit-author history rewriting.

Rewrites author and committer identity across a repository's history with
git filter-branch, behind an explicit confirmation and with backup refs kept
under refs/original/.
"""

__version__ = "1.0.0"
__author__ = "Scaffold CLI Contributors"
