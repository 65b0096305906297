"""Database models."""

from models.match import Match
from models.message import Message
from models.profile import Profile
from models.safety import Report, UserBlock
from models.swipe import Swipe

__all__ = [
    "Profile",
    "Swipe",
    "Match",
    "Message",
    "UserBlock",
    "Report",
]
