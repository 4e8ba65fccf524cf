"""
initial social schema: users, sessions, profile, friends, requests, relations,
messages, communities, events
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision: str = "20261018_initial"
down_revision: str | None = None
branch_labels = None
depends_on = None

relation_kind = sa.Enum("idol", "crush", "enemy", name="relation_kind")
message_kind = sa.Enum("note", "community", name="message_kind")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("login", sa.String(), nullable=False),
        sa.Column("password", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_login", "users", ["login"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_sessions_id", "user_sessions", ["id"])
    op.create_index("ix_user_sessions_token", "user_sessions", ["token"], unique=True)

    op.create_table(
        "profile_attributes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value", sa.String(), nullable=False, server_default=""),
        sa.UniqueConstraint("user_id", "key", name="uq_profile_attributes_user_key"),
    )
    op.create_index("ix_profile_attributes_id", "profile_attributes", ["id"])
    op.create_index("ix_profile_attributes_user_id", "profile_attributes", ["user_id"])

    op.create_table(
        "friends",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_min", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_max", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_min", "user_max", name="uq_friend_pair"),
        sa.CheckConstraint("user_min < user_max", name="ck_friend_min_lt_max"),
    )
    op.create_index("ix_friends_id", "friends", ["id"])
    op.create_index("ix_friends_user_min", "friends", ["user_min"])
    op.create_index("ix_friends_user_max", "friends", ["user_max"])

    op.create_table(
        "friend_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("requester_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("target_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("requester_id", "target_id", name="uq_friend_requests_pair"),
        sa.CheckConstraint("requester_id <> target_id", name="ck_friend_requests_not_self"),
    )
    op.create_index("ix_friend_requests_id", "friend_requests", ["id"])
    op.create_index("ix_friend_requests_requester_id", "friend_requests", ["requester_id"])
    op.create_index("ix_friend_requests_target_id", "friend_requests", ["target_id"])

    op.create_table(
        "user_relations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("target_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("kind", relation_kind, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "target_id", "kind", name="uq_user_relations_triple"),
        sa.CheckConstraint("user_id <> target_id", name="ck_user_relations_not_self"),
    )
    op.create_index("ix_user_relations_id", "user_relations", ["id"])
    op.create_index("ix_user_relations_user_kind", "user_relations", ["user_id", "kind"])
    op.create_index("ix_user_relations_target_kind", "user_relations", ["target_id", "kind"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("recipient_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sender_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("kind", message_kind, nullable=False),
        sa.Column("community_name", sa.String(), nullable=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_messages_id", "messages", ["id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_recipient_kind", "messages", ["recipient_id", "kind", "id"])

    op.create_table(
        "communities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False, server_default=""),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_communities_id", "communities", ["id"])
    op.create_index("ix_communities_name", "communities", ["name"], unique=True)
    op.create_index("ix_communities_owner_id", "communities", ["owner_id"])

    op.create_table(
        "community_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("community_id", sa.Integer(), sa.ForeignKey("communities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("community_id", "user_id", name="uq_community_members_community_user"),
    )
    op.create_index("ix_community_members_id", "community_members", ["id"])
    op.create_index("ix_community_members_community_id", "community_members", ["community_id"])
    op.create_index("ix_community_members_user_id", "community_members", ["user_id"])
    op.create_index("ix_community_members_user", "community_members", ["user_id", "community_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor_id", sa.Integer(), nullable=False),
        sa.Column("target_user_id", sa.Integer(), nullable=True),
        sa.Column("community_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_actor_id", "events", ["actor_id"])
    op.create_index("ix_events_target_user_id", "events", ["target_user_id"])


def downgrade() -> None:
    for table in (
        "events",
        "community_members",
        "communities",
        "messages",
        "user_relations",
        "friend_requests",
        "friends",
        "profile_attributes",
        "user_sessions",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    message_kind.drop(bind, checkfirst=True)
    relation_kind.drop(bind, checkfirst=True)
