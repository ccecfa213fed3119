"""
Artifact resolution: pick exactly one artifact to debug.
"""

import logging
from typing import List, Optional, Sequence

from ..errors import AmbiguousMatchError, NoMatchError
from ..models.artifacts import ArtifactFilter, CompilationArtifact

logger = logging.getLogger(__name__)


def filter_artifacts(
    artifacts: Sequence[CompilationArtifact],
    artifact_filter: Optional[ArtifactFilter] = None,
) -> List[CompilationArtifact]:
    """Keep the artifacts matching every field set on the filter."""
    if artifact_filter is None:
        return list(artifacts)
    return [a for a in artifacts if artifact_filter.matches(a)]


class ArtifactResolver:
    """
    Applies an optional filter and insists on a single remaining artifact.

    Both the raw and the filtered candidate lists are logged before any
    error is raised, so a failed resolution can be diagnosed from the log.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or globals()["logger"]

    def resolve(
        self,
        artifacts: Sequence[CompilationArtifact],
        artifact_filter: Optional[ArtifactFilter] = None,
    ) -> str:
        """
        Return the file path of the only artifact matching ``artifact_filter``.

        Raises:
            NoMatchError: If no artifact matches
            AmbiguousMatchError: If more than one artifact matches
        """
        self._log_artifacts("Raw artifacts:", artifacts)
        matches = filter_artifacts(artifacts, artifact_filter)
        self._log_artifacts("Filtered artifacts:", matches)

        if not matches:
            raise NoMatchError(
                "Cargo has produced no matching compilation artifacts.",
                artifacts, matches, artifact_filter,
            )
        if len(matches) > 1:
            raise AmbiguousMatchError(
                "Cargo has produced more than one matching compilation artifact.",
                artifacts, matches, artifact_filter,
            )
        return matches[0].file_path

    def _log_artifacts(self, title: str, artifacts: Sequence[CompilationArtifact]) -> None:
        self.logger.info(title)
        for artifact in artifacts:
            self.logger.info(f"  {artifact}")
