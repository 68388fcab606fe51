"""artists, prsk_music and users master tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17

Uniqueness of artist name, (title, music_type) and user name only applies to
rows that are not soft-deleted, hence partial unique indexes.
"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by", sa.String(255), nullable=False),
        sa.Column(
            "is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
    ]


def _live_unique_index(name: str, table: str, columns: list[str]) -> None:
    op.create_index(
        name,
        table,
        columns,
        unique=True,
        postgresql_where=sa.text("is_deleted = false"),
        sqlite_where=sa.text("is_deleted = 0"),
    )


def upgrade() -> None:
    op.create_table(
        "artists",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("artist_name", sa.String(50), nullable=False),
        sa.Column("unit_name", sa.String(25), nullable=True),
        sa.Column("content", sa.String(20), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    _live_unique_index("uq_artists_artist_name_active", "artists", ["artist_name"])

    op.create_table(
        "prsk_music",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(30), nullable=False),
        sa.Column("artist_id", sa.Integer(), nullable=False),
        # MusicType code: 0 original, 1 3DMV, 2 2DMV
        sa.Column("music_type", sa.Integer(), nullable=False),
        sa.Column("specially", sa.Boolean(), nullable=True),
        sa.Column("lyrics_name", sa.String(50), nullable=True),
        sa.Column("music_name", sa.String(50), nullable=True),
        sa.Column("featuring", sa.String(10), nullable=True),
        sa.Column("youtube_link", sa.String(100), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["artist_id"], ["artists.id"]),
    )
    _live_unique_index(
        "uq_prsk_music_title_music_type_active",
        "prsk_music",
        ["title", "music_type"],
    )
    op.create_index("ix_prsk_music_artist", "prsk_music", ["artist_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_name", sa.String(20), nullable=False),
        sa.Column("password", sa.String(20), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    _live_unique_index("uq_users_user_name_active", "users", ["user_name"])


def downgrade() -> None:
    op.drop_index("uq_users_user_name_active", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_prsk_music_artist", table_name="prsk_music")
    op.drop_index("uq_prsk_music_title_music_type_active", table_name="prsk_music")
    op.drop_table("prsk_music")
    op.drop_index("uq_artists_artist_name_active", table_name="artists")
    op.drop_table("artists")
