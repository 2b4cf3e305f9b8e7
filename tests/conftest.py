"""
Shared test fixtures and configuration.

Environment variables are set BEFORE any package imports so Settings()
picks up test values instead of a developer's .env.
"""

import os
import sys

# Ensure the package and tests.mocks are importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ["GITACCOUNTS_USER_AGENT"] = "git-accounts-tests/1.0"
os.environ["GITACCOUNTS_HTTP_TIMEOUT_SECONDS"] = "5"

import pytest  # noqa: E402

from gitaccounts.core.config import Settings  # noqa: E402
from gitaccounts.services.fake_session import FakeSession  # noqa: E402
from tests.mocks.github import make_github_configuration  # noqa: E402
from tests.mocks.gitlab import make_gitlab_configuration  # noqa: E402


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def gitlab_config():
    """Token-authenticated configuration for a self-managed GitLab."""
    return make_gitlab_configuration()


@pytest.fixture
def github_config():
    """Token-authenticated configuration for a GitHub API root."""
    return make_github_configuration()


@pytest.fixture
def fake_session():
    return FakeSession()
