from .base import ApiClient, ApiError, ApiResponse, ResourceGroup
from .auth import AuthAPI
from .users import UsersAPI
from .jobs import JobsAPI
from .applications import ApplicationsAPI, SelfApplicationsAPI
from .community import NotificationsAPI, QuestionsAPI, SkillsAPI
from .admin import CampusesAPI, PlacementCyclesAPI, SettingsAPI, StatsAPI
from .readiness import JobReadinessAPI
from .scam import ScamReportsAPI, UtilsAPI

from placement_portal.events import SessionChannel
from placement_portal.log import get_logger
from placement_portal.storage import LocalStorage

log = get_logger(__name__)

__all__ = [
    "ApiClient", "ApiError", "ApiResponse", "ResourceGroup", "PortalAPI",
    "AuthAPI", "UsersAPI", "JobsAPI", "ApplicationsAPI", "SelfApplicationsAPI",
    "NotificationsAPI", "QuestionsAPI", "SkillsAPI", "CampusesAPI",
    "PlacementCyclesAPI", "SettingsAPI", "StatsAPI", "JobReadinessAPI",
    "ScamReportsAPI", "UtilsAPI",
]


class PortalAPI:
    """Every resource group bound to one ``ApiClient``: ``api.auth.login(...)``."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.auth = AuthAPI(client)
        self.users = UsersAPI(client)
        self.jobs = JobsAPI(client)
        self.applications = ApplicationsAPI(client)
        self.self_applications = SelfApplicationsAPI(client)
        self.skills = SkillsAPI(client)
        self.questions = QuestionsAPI(client)
        self.notifications = NotificationsAPI(client)
        self.settings = SettingsAPI(client)
        self.placement_cycles = PlacementCyclesAPI(client)
        self.campuses = CampusesAPI(client)
        self.stats = StatsAPI(client)
        self.job_readiness = JobReadinessAPI(client)
        self.scam_reports = ScamReportsAPI(client)
        self.utils = UtilsAPI(client)

    @classmethod
    def create(
        cls,
        storage: LocalStorage,
        *,
        base_url: str | None = None,
        channel: SessionChannel | None = None,
    ) -> "PortalAPI":
        client = ApiClient(storage, base_url=base_url, channel=channel)
        log.info("API client ready: %s", client.base_url)
        return cls(client)
