"""
Tests for the exception hierarchy.
"""

from glacier_sweeper.core.exceptions import (
    AuthError,
    DeletionError,
    GlacierSweepError,
    JobFailedError,
    JobQueryError,
    OperationCancelledError,
    StorageClientError,
)


class TestExceptions:
    """Tests for exception context and serialization."""

    def test_hierarchy(self):
        assert issubclass(AuthError, StorageClientError)
        assert issubclass(JobFailedError, JobQueryError)
        assert issubclass(DeletionError, GlacierSweepError)
        assert issubclass(OperationCancelledError, GlacierSweepError)

    def test_context_added_to_details(self):
        error = StorageClientError("boom", service="glacier", region="eu-west-1")

        assert error.details == {"service": "glacier", "region": "eu-west-1"}
        assert error.to_dict()["error_type"] == "StorageClientError"
        assert "Details:" in str(error)

    def test_caller_details_not_mutated(self):
        """Test that the dict passed in is copied, not extended in place."""
        details = {"error_code": "AccessDeniedException"}

        StorageClientError("denied", service="glacier", region="us-east-1", details=details)
        JobFailedError("failed", vault="v", job_id="job-1", details=details)
        DeletionError("gone", archive_id="a1", vault="v", details=details)
        GlacierSweepError("plain", details=details)

        assert details == {"error_code": "AccessDeniedException"}

    def test_without_details(self):
        error = GlacierSweepError("plain")

        assert error.details == {}
        assert str(error) == "plain"
