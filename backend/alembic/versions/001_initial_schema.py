"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-01-05 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

profile_visibility = sa.Enum('PUBLIC', 'FRIENDS', 'PRIVATE', name='profilevisibility')
friendship_status = sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', name='friendshipstatus')
notification_type = sa.Enum(
    'LIKE', 'COMMENT', 'FRIEND_REQUEST', 'MESSAGE', 'ACHIEVEMENT', name='notificationtype'
)
badge_type = sa.Enum('HABIT_COUNT', 'STREAK', 'SOCIAL', name='badgetype')


def upgrade() -> None:
    # Users and preferences
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(), nullable=True),
        sa.Column('profile_visibility', profile_visibility, nullable=False, server_default='PUBLIC'),
        sa.Column('signup_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'user_settings',
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('email_notifications', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('habit_reminders', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('weekly_reports', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('show_streak', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('show_activity', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id')
    )

    # Social graph
    op.create_table(
        'friendships',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('receiver_id', sa.String(), nullable=False),
        sa.Column('status', friendship_status, nullable=False, server_default='PENDING'),
        sa.Column('pair_key', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('pair_key')
    )
    op.create_index(op.f('ix_friendships_sender_id'), 'friendships', ['sender_id'])
    op.create_index(op.f('ix_friendships_receiver_id'), 'friendships', ['receiver_id'])

    op.create_table(
        'blocked_users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('blocker_id', sa.String(), nullable=False),
        sa.Column('blocked_id', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['blocker_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['blocked_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('blocker_id', 'blocked_id', name='uq_blocked_users_pair')
    )
    op.create_index(op.f('ix_blocked_users_blocker_id'), 'blocked_users', ['blocker_id'])
    op.create_index(op.f('ix_blocked_users_blocked_id'), 'blocked_users', ['blocked_id'])

    # Habits
    op.create_table(
        'habits',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('scheduled_time', sa.String(), nullable=True),
        sa.Column('streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_today', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('last_completed_date', sa.String(), nullable=True),
        sa.Column('is_private', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_habits_user_id'), 'habits', ['user_id'])

    op.create_table(
        'daily_activities',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('date', sa.String(), nullable=False),
        sa.Column('completed_habits', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('total_habits', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completion_rate', sa.Float(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_daily_activities_user_date')
    )
    op.create_index('ix_daily_activities_user_date', 'daily_activities', ['user_id', 'date'])

    # Feed
    op.create_table(
        'posts',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('author', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('liked_by', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('likes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_posts_user_id'), 'posts', ['user_id'])
    op.create_index(op.f('ix_posts_created_at'), 'posts', ['created_at'])

    op.create_table(
        'comments',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('post_id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('author', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('parent_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['comments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_comments_post_created', 'comments', ['post_id', 'created_at'])

    # Chat
    op.create_table(
        'chat_rooms',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('is_group', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chat_rooms_updated_at'), 'chat_rooms', ['updated_at'])

    op.create_table(
        'chat_participants',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('room_id', sa.String(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['room_id'], ['chat_rooms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'room_id', name='uq_chat_participants_user_room')
    )
    op.create_index(op.f('ix_chat_participants_user_id'), 'chat_participants', ['user_id'])
    op.create_index(op.f('ix_chat_participants_room_id'), 'chat_participants', ['room_id'])

    op.create_table(
        'messages',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('room_id', sa.String(), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('reply_to_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['room_id'], ['chat_rooms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reply_to_id'], ['messages.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_messages_room_created', 'messages', ['room_id', 'created_at'])

    # Challenges
    op.create_table(
        'challenges',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('participants', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('room_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['room_id'], ['chat_rooms.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'challenge_participants',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('challenge_id', sa.String(), nullable=False),
        sa.Column('habit_id', sa.String(), nullable=True),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['challenge_id'], ['challenges.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['habit_id'], ['habits.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'challenge_id', name='uq_challenge_participants_user_challenge')
    )
    op.create_index(op.f('ix_challenge_participants_user_id'), 'challenge_participants', ['user_id'])
    op.create_index(op.f('ix_challenge_participants_challenge_id'), 'challenge_participants', ['challenge_id'])

    # Notifications
    op.create_table(
        'notifications',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('type', notification_type, nullable=False),
        sa.Column('sender_id', sa.String(), nullable=True),
        sa.Column('entity_id', sa.String(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_user_created', 'notifications', ['user_id', 'created_at'])

    # Badges
    op.create_table(
        'badges',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False, server_default=''),
        sa.Column('icon', sa.String(), nullable=False, server_default=''),
        sa.Column('type', badge_type, nullable=False),
        sa.Column('threshold', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table(
        'user_badges',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('badge_id', sa.String(), nullable=False),
        sa.Column('unlocked_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['badge_id'], ['badges.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'badge_id', name='uq_user_badges_user_badge')
    )
    op.create_index(op.f('ix_user_badges_user_id'), 'user_badges', ['user_id'])

    # Utility
    op.create_table(
        'reminders',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('remind_at', sa.DateTime(), nullable=True),
        sa.Column('is_done', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reminders_user_id'), 'reminders', ['user_id'])

    op.create_table(
        'pomodoro_settings',
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('focus_minutes', sa.Integer(), nullable=False, server_default='25'),
        sa.Column('short_break_minutes', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('long_break_minutes', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('cycles_before_long', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('auto_start_breaks', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('auto_start_focus', sa.Boolean(), nullable=False, server_default='false'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id')
    )

    op.create_table(
        'pomodoro_sessions',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('planned_minutes', sa.Integer(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default='false'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_pomodoro_sessions_user_id'), 'pomodoro_sessions', ['user_id'])


def downgrade() -> None:
    op.drop_table('pomodoro_sessions')
    op.drop_table('pomodoro_settings')
    op.drop_table('reminders')
    op.drop_table('user_badges')
    op.drop_table('badges')
    op.drop_table('notifications')
    op.drop_table('challenge_participants')
    op.drop_table('challenges')
    op.drop_table('messages')
    op.drop_table('chat_participants')
    op.drop_table('chat_rooms')
    op.drop_table('comments')
    op.drop_table('posts')
    op.drop_table('daily_activities')
    op.drop_table('habits')
    op.drop_table('blocked_users')
    op.drop_table('friendships')
    op.drop_table('user_settings')
    op.drop_table('users')
    for enum_type in (badge_type, notification_type, friendship_status, profile_visibility):
        enum_type.drop(op.get_bind(), checkfirst=True)
