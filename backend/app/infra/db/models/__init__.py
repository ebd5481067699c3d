"""Database models."""
from app.infra.db.models.user import UserModel, UserSettingsModel
from app.infra.db.models.social import FriendshipModel, BlockedUserModel
from app.infra.db.models.habit import HabitModel, DailyActivityModel
from app.infra.db.models.post import PostModel, CommentModel
from app.infra.db.models.chat import ChatRoomModel, ChatParticipantModel, MessageModel
from app.infra.db.models.challenge import ChallengeModel, ChallengeParticipantModel
from app.infra.db.models.notification import NotificationModel
from app.infra.db.models.badge import BadgeModel, UserBadgeModel
from app.infra.db.models.utility import ReminderModel, PomodoroSettingsModel, PomodoroSessionModel

__all__ = [
    "UserModel",
    "UserSettingsModel",
    "FriendshipModel",
    "BlockedUserModel",
    "HabitModel",
    "DailyActivityModel",
    "PostModel",
    "CommentModel",
    "ChatRoomModel",
    "ChatParticipantModel",
    "MessageModel",
    "ChallengeModel",
    "ChallengeParticipantModel",
    "NotificationModel",
    "BadgeModel",
    "UserBadgeModel",
    "ReminderModel",
    "PomodoroSettingsModel",
    "PomodoroSessionModel",
]
