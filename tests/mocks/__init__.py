"""Mock objects for mirrordeploy testing."""

from tests.mocks.mock_git import MockMirrorRepo

__all__ = [
    "MockMirrorRepo",
]
