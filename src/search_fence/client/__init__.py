"""
Remote Search Package

Provides the Jira search client used to answer search blocks.
"""

from .jira_client import JiraClient, load_settings

__all__ = ["JiraClient", "load_settings"]
