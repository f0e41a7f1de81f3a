"""Analysis engine orchestration."""

from analysis.artifact_store import ArtifactStore
from analysis.classifier import Classification, PendingArtifact, classify_artifacts
from analysis.engine_client import AnalysisEngineClient, AnalysisResponse
from analysis.orchestrator import AnalysisOrchestrator, GrantFailure, InsightGenerationResult

__all__ = [
    "AnalysisEngineClient",
    "AnalysisOrchestrator",
    "AnalysisResponse",
    "ArtifactStore",
    "Classification",
    "GrantFailure",
    "InsightGenerationResult",
    "PendingArtifact",
    "classify_artifacts",
]
