from benchdesk.resources.activities import ActivitiesClient
from benchdesk.resources.analytics import AnalyticsClient
from benchdesk.resources.candidates import CandidatesClient
from benchdesk.resources.directory import EmployeesClient, VendorsClient, WorkingCandidatesClient
from benchdesk.resources.documents import DocumentsClient
from benchdesk.resources.system import SystemClient

__all__ = [
    "ActivitiesClient",
    "AnalyticsClient",
    "CandidatesClient",
    "DocumentsClient",
    "EmployeesClient",
    "SystemClient",
    "VendorsClient",
    "WorkingCandidatesClient",
]
