from application.maintenance_flow.contracts import (
    BRANCH_CONFLICT_POLICIES,
    BranchConflictPolicy,
    FeatureBranch,
    MaintenanceFlowConfig,
    MaintenanceFlowDependencies,
    MaintenanceFlowResult,
    RunReport,
)
from application.maintenance_flow.errors import (
    BranchConflictError,
    DirtyWorkingTreeError,
    MaintenanceFlowError,
)
from application.maintenance_flow.use_case import run_maintenance_flow

__all__ = [
    "BRANCH_CONFLICT_POLICIES",
    "BranchConflictError",
    "BranchConflictPolicy",
    "DirtyWorkingTreeError",
    "FeatureBranch",
    "MaintenanceFlowConfig",
    "MaintenanceFlowDependencies",
    "MaintenanceFlowError",
    "MaintenanceFlowResult",
    "RunReport",
    "run_maintenance_flow",
]
