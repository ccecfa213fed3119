"""
Collection and resolution of cargo compilation artifacts.
"""

from .collector import ArtifactCollector, DiagnosticSink
from .resolver import ArtifactResolver, filter_artifacts

__all__ = [
    "ArtifactCollector",
    "ArtifactResolver",
    "DiagnosticSink",
    "filter_artifacts",
]
