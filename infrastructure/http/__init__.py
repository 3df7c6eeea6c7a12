"""HTTP layer package"""

from infrastructure.http.schemas import RunMaintenanceRequest, RunMaintenanceResponse
from infrastructure.http.workflow_service import execute_workflow

__all__ = [
    "RunMaintenanceRequest",
    "RunMaintenanceResponse",
    "execute_workflow",
]
