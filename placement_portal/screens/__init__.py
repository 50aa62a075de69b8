from .base import ModalState, PagedScreen, RequestGuard, Screen, fetch_parallel
from .applications import MyApplications, SelfApplications, SelfApplicationsReview, verification_state
from .approvals import ProfileApprovals, SkillApprovals
from .forum import Forum
from .jobs import CoordinatorJobs, JobDetail, Jobs
from .notifications import Notifications
from .scam import ScamDetector, ScamReportDetail, ScamReportsRepository
from .readiness import CriteriaConfig, JobReadiness, ReadinessReview
from .account import Profile, Settings
from .students import SkillsCatalogue, StudentDetail, Students

__all__ = [
    "ModalState", "PagedScreen", "RequestGuard", "Screen", "fetch_parallel",
    "MyApplications", "SelfApplications", "SelfApplicationsReview", "verification_state",
    "ProfileApprovals", "SkillApprovals", "Forum", "Notifications",
    "Jobs", "JobDetail", "CoordinatorJobs",
    "ScamDetector", "ScamReportDetail", "ScamReportsRepository",
    "CriteriaConfig", "JobReadiness", "ReadinessReview", "Profile", "Settings",
    "Students", "StudentDetail", "SkillsCatalogue",
]
