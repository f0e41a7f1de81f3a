"""Dataset intake wizard."""

from workflow.manager import WizardSessionManager
from workflow.models import (
    AccessRequest,
    AnalysisOption,
    GrantStepResult,
    ProcessingOptions,
    WorkflowContext,
    WorkflowStage,
)
from workflow.store import WorkflowStore

__all__ = [
    "AccessRequest",
    "AnalysisOption",
    "GrantStepResult",
    "ProcessingOptions",
    "WizardSessionManager",
    "WorkflowContext",
    "WorkflowStage",
    "WorkflowStore",
]
