from app.services.buddy_request_service import BuddyRequestService
from app.services.conversation_service import ConversationService
from app.services.discovery_service import DiscoveryService
from app.services.plan_service import PackageService, PlanService
from app.services.roster_service import PackageRosterService, PlanRosterService
from app.services.user_service import UserService

__all__ = [
    "BuddyRequestService",
    "ConversationService",
    "DiscoveryService",
    "PackageRosterService",
    "PackageService",
    "PlanRosterService",
    "PlanService",
    "UserService",
]
