"""BranchLift - preview environment orchestration demo."""

__version__ = "0.1.0"
