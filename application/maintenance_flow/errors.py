class MaintenanceFlowError(RuntimeError):
    """Base class for fatal maintenance flow failures."""


class BranchConflictError(MaintenanceFlowError):
    """Raised when the feature branch already exists and the policy forbids reuse."""


class DirtyWorkingTreeError(MaintenanceFlowError):
    """Raised when the repository has uncommitted changes before the updaters run."""
