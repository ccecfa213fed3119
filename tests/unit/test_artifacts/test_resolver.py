"""
Unit tests for ArtifactResolver.
"""

import logging

import pytest

from cargolaunch.artifacts import ArtifactResolver, filter_artifacts
from cargolaunch.errors import AmbiguousMatchError, ArtifactResolutionError, NoMatchError
from cargolaunch.models import ArtifactFilter, CompilationArtifact

DEMO = CompilationArtifact("/p/target/debug/demo", "demo", "bin")
DEMO_TESTS = CompilationArtifact("/p/target/debug/deps/demo_tests-1a2b", "demo_tests", "test")
DEMO_LIB_TESTS = CompilationArtifact("/p/target/debug/deps/demo-3c4d", "demo", "lib")


@pytest.fixture
def resolver():
    return ArtifactResolver()


@pytest.mark.unit
class TestArtifactResolver:
    """Test cases for exactly-one resolution."""

    def test_filter_by_name(self, resolver):
        assert resolver.resolve([DEMO, DEMO_TESTS], ArtifactFilter(name="demo")) == DEMO.file_path

    def test_no_filter_with_two_candidates_is_ambiguous(self, resolver):
        with pytest.raises(AmbiguousMatchError):
            resolver.resolve([DEMO, DEMO_TESTS])

    def test_empty_filter_with_two_candidates_is_ambiguous(self, resolver):
        with pytest.raises(AmbiguousMatchError):
            resolver.resolve([DEMO, DEMO_TESTS], ArtifactFilter())

    def test_single_candidate_without_filter(self, resolver):
        assert resolver.resolve([DEMO_TESTS]) == DEMO_TESTS.file_path

    def test_name_and_kind_narrow_together(self, resolver):
        candidates = [DEMO, DEMO_TESTS, DEMO_LIB_TESTS]

        assert resolver.resolve(candidates, ArtifactFilter(name="demo", kind="lib")) == DEMO_LIB_TESTS.file_path

    def test_name_matching_two_kinds_is_ambiguous(self, resolver):
        with pytest.raises(AmbiguousMatchError) as exc_info:
            resolver.resolve([DEMO, DEMO_TESTS, DEMO_LIB_TESTS], ArtifactFilter(name="demo"))

        assert exc_info.value.matches == [DEMO, DEMO_LIB_TESTS]
        assert len(exc_info.value.artifacts) == 3

    def test_no_candidates(self, resolver):
        with pytest.raises(NoMatchError, match="no matching compilation artifacts"):
            resolver.resolve([])

    def test_filter_matches_nothing(self, resolver):
        with pytest.raises(NoMatchError) as exc_info:
            resolver.resolve([DEMO, DEMO_TESTS], ArtifactFilter(kind="example"))

        error = exc_info.value
        assert isinstance(error, ArtifactResolutionError)
        assert error.artifacts == [DEMO, DEMO_TESTS]
        assert error.matches == []
        assert error.artifact_filter == ArtifactFilter(kind="example")

    def test_candidates_logged_before_failure(self, resolver, caplog):
        with caplog.at_level(logging.INFO):
            with pytest.raises(NoMatchError):
                resolver.resolve([DEMO], ArtifactFilter(name="missing"))

        messages = [record.getMessage() for record in caplog.records]
        assert messages.index("Raw artifacts:") < messages.index("Filtered artifacts:")
        assert any("demo" in message for message in messages)


@pytest.mark.unit
def test_filter_artifacts_preserves_order():
    assert filter_artifacts([DEMO_LIB_TESTS, DEMO], ArtifactFilter(name="demo")) == [DEMO_LIB_TESTS, DEMO]
    assert filter_artifacts([DEMO, DEMO_TESTS]) == [DEMO, DEMO_TESTS]
