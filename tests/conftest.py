from datetime import datetime

import pytest

from vc_changelog.vcs.git_client import RawCommit


@pytest.fixture
def make_raw():
    """Factory for raw commit records with sensible defaults."""

    def _make(subject, hash="abc1234", body="", timestamp="2024-01-02T10:00:00+00:00"):
        return RawCommit(hash=hash, subject=subject, body=body, timestamp=timestamp)

    return _make


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 5, 12, 30)
