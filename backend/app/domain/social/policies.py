"""Visibility policy: who may see which profile, post or room, and who may interact.

Every decision reads the current friendship/block edges; nothing is cached, so a
block or an accepted request takes effect on the very next call.
"""
from typing import Iterable

from app.domain.accounts.models import User, ProfileVisibility
from app.domain.chat.models import ChatRoom
from app.domain.social.models import ProfileAccess
from app.domain.social.repositories import SocialGraphRepository


def post_visible_to(viewer_id: str, author: User, friend_ids: set[str]) -> bool:
    """A post by author is visible to viewer_id iff own post, PUBLIC author, or FRIENDS author who is a friend."""
    if viewer_id == author.id:
        return True
    if author.profile_visibility == ProfileVisibility.PUBLIC:
        return True
    return author.profile_visibility == ProfileVisibility.FRIENDS and author.id in friend_ids


class VisibilityPolicy:
    """Authorization decisions over the social graph."""

    def __init__(self, graph: SocialGraphRepository):
        self.graph = graph

    async def can_view_profile(self, viewer_id: str, target: User) -> ProfileAccess:
        if await self.graph.is_blocked_between(viewer_id, target.id):
            return ProfileAccess.DENIED
        if viewer_id == target.id:
            return ProfileAccess.FULL
        if target.profile_visibility == ProfileVisibility.PUBLIC:
            return ProfileAccess.FULL
        if await self.graph.are_friends(viewer_id, target.id):
            return ProfileAccess.FULL
        if target.profile_visibility == ProfileVisibility.PRIVATE:
            return ProfileAccess.DENIED
        return ProfileAccess.RESTRICTED

    async def can_interact_in_chat(self, viewer_id: str, other_id: str) -> bool:
        return not await self.graph.is_blocked_between(viewer_id, other_id)

    async def can_interact_in_room(self, viewer_id: str, room: ChatRoom) -> bool:
        """Group rooms are exempt; direct rooms require no block with the counterpart."""
        if room.is_group:
            return True
        other_id = room.counterpart(viewer_id)
        if other_id is None:
            return True
        return await self.can_interact_in_chat(viewer_id, other_id)

    async def filter_blocked_from_room_list(self, viewer_id: str, rooms: Iterable[ChatRoom]) -> list[ChatRoom]:
        """Drop direct rooms whose counterpart is block-related to the viewer."""
        blocked = await self.graph.blocked_ids_for(viewer_id)
        return [
            room
            for room in rooms
            if room.is_group or room.counterpart(viewer_id) not in blocked
        ]

    async def can_send_friend_request(self, viewer_id: str, target_id: str) -> bool:
        if viewer_id == target_id:
            return False
        existing = await self.graph.find_friendship_between(viewer_id, target_id)
        return existing is None or not existing.is_active

    async def can_view_post(self, viewer_id: str, author: User) -> bool:
        """Single-post form of the feed rule; block-related authors are hidden too."""
        if viewer_id != author.id and await self.graph.is_blocked_between(viewer_id, author.id):
            return False
        friend_ids = set()
        if author.profile_visibility == ProfileVisibility.FRIENDS and viewer_id != author.id:
            if await self.graph.are_friends(viewer_id, author.id):
                friend_ids.add(author.id)
        return post_visible_to(viewer_id, author, friend_ids)
