from app.models.buddy_request import BuddyRequest, BuddyRequestStatus
from app.models.conversation import ChatMessage, Conversation
from app.models.place import Place
from app.models.roster import Package, PackageParticipant, Plan, PlanBuddy
from app.models.user import User

__all__ = [
    "BuddyRequest",
    "BuddyRequestStatus",
    "ChatMessage",
    "Conversation",
    "Package",
    "PackageParticipant",
    "Place",
    "Plan",
    "PlanBuddy",
    "User",
]
