"""Visibility policy against real repositories on SQLite."""
from datetime import datetime

from app.domain.accounts.models import ProfileVisibility
from app.domain.accounts.services import AuthService
from app.domain.chat.models import ChatRoom
from app.domain.social.models import FriendshipStatus, ProfileAccess
from app.domain.social.policies import VisibilityPolicy, post_visible_to
from app.infra.db.repositories.social_repo import SocialGraphRepositoryImpl
from app.infra.db.repositories.user_repo import UserRepositoryImpl


async def _user(db, username, visibility=ProfileVisibility.PUBLIC):
    user = await AuthService(db).signup(f"{username}@example.com", "secret123", username.title(), username)
    if visibility != ProfileVisibility.PUBLIC:
        user = await UserRepositoryImpl(db).update_fields(user.id, profile_visibility=visibility)
        await db.commit()
    return user


async def _befriend(graph, a, b):
    friendship = await graph.create_friendship(a.id, b.id)
    await graph.set_status(friendship.id, FriendshipStatus.ACCEPTED)


async def test_profile_access_by_visibility(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    viewer = await _user(db_session, "viewer")
    public = await _user(db_session, "pub")
    friends_only = await _user(db_session, "fri", ProfileVisibility.FRIENDS)
    private = await _user(db_session, "priv", ProfileVisibility.PRIVATE)

    assert await policy.can_view_profile(viewer.id, public) == ProfileAccess.FULL
    assert await policy.can_view_profile(viewer.id, friends_only) == ProfileAccess.RESTRICTED
    assert await policy.can_view_profile(viewer.id, private) == ProfileAccess.DENIED
    assert await policy.can_view_profile(viewer.id, viewer) == ProfileAccess.FULL


async def test_friendship_unlocks_private_profile(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    viewer = await _user(db_session, "viewer")
    private = await _user(db_session, "priv", ProfileVisibility.PRIVATE)

    await _befriend(graph, viewer, private)

    assert await policy.can_view_profile(viewer.id, private) == ProfileAccess.FULL


async def test_pending_request_does_not_count_as_friendship(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    viewer = await _user(db_session, "viewer")
    private = await _user(db_session, "priv", ProfileVisibility.PRIVATE)

    await graph.create_friendship(viewer.id, private.id)

    assert await policy.can_view_profile(viewer.id, private) == ProfileAccess.DENIED


async def test_block_denies_in_both_directions(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    alice = await _user(db_session, "alice")
    bob = await _user(db_session, "bob")
    await _befriend(graph, alice, bob)

    await graph.upsert_block(alice.id, bob.id)

    assert await policy.can_view_profile(alice.id, bob) == ProfileAccess.DENIED
    assert await policy.can_view_profile(bob.id, alice) == ProfileAccess.DENIED
    assert not await policy.can_interact_in_chat(bob.id, alice.id)
    assert not await policy.can_view_post(bob.id, alice)


async def test_unblock_restores_access_on_next_call(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    alice = await _user(db_session, "alice")
    bob = await _user(db_session, "bob")

    await graph.upsert_block(alice.id, bob.id)
    assert not await policy.can_interact_in_chat(alice.id, bob.id)

    assert await graph.delete_block(alice.id, bob.id)
    assert await policy.can_interact_in_chat(alice.id, bob.id)


async def test_group_rooms_exempt_from_block_filter(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    alice = await _user(db_session, "alice")
    bob = await _user(db_session, "bob")
    await graph.upsert_block(bob.id, alice.id)

    now = datetime.utcnow()
    direct = ChatRoom(id="d", is_group=False, name=None, created_at=now, updated_at=now,
                      participant_ids=[alice.id, bob.id])
    forum = ChatRoom(id="g", is_group=True, name="Forum", created_at=now, updated_at=now,
                     participant_ids=[alice.id, bob.id])

    visible = await policy.filter_blocked_from_room_list(alice.id, [direct, forum])

    assert [r.id for r in visible] == ["g"]
    assert await policy.can_interact_in_room(alice.id, forum)
    assert not await policy.can_interact_in_room(alice.id, direct)


async def test_friend_request_allowed_only_without_active_record(db_session):
    graph = SocialGraphRepositoryImpl(db_session)
    policy = VisibilityPolicy(graph)
    alice = await _user(db_session, "alice")
    bob = await _user(db_session, "bob")

    assert not await policy.can_send_friend_request(alice.id, alice.id)
    assert await policy.can_send_friend_request(alice.id, bob.id)

    friendship = await graph.create_friendship(alice.id, bob.id)
    assert not await policy.can_send_friend_request(bob.id, alice.id)

    await graph.set_status(friendship.id, FriendshipStatus.REJECTED)
    assert await policy.can_send_friend_request(bob.id, alice.id)


async def test_post_visibility_rule(db_session):
    viewer = await _user(db_session, "viewer")
    friends_only = await _user(db_session, "fri", ProfileVisibility.FRIENDS)
    private = await _user(db_session, "priv", ProfileVisibility.PRIVATE)

    assert post_visible_to(viewer.id, viewer, set())
    assert not post_visible_to(viewer.id, friends_only, set())
    assert post_visible_to(viewer.id, friends_only, {friends_only.id})
    # private authors' posts stay hidden even from friends
    assert not post_visible_to(viewer.id, private, {private.id})
