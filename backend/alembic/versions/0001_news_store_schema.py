"""create news store tables

Revision ID: 0001_news_store
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_news_store"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return (
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def upgrade() -> None:
    op.create_table(
        "news_sets",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_news_sets"),
        sa.UniqueConstraint("user_id", "name", name="uq_news_sets_user_name"),
    )
    op.create_index("ix_news_sets_user_id", "news_sets", ["user_id"])

    op.create_table(
        "news_definitions",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("definition_type", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("class_name", sa.String(length=255), nullable=False, server_default="rss"),
        sa.Column("parameters", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_news_definitions"),
    )
    op.create_index(
        "uq_news_definitions_predefined_name",
        "news_definitions",
        ["name"],
        unique=True,
        postgresql_where=sa.text("definition_type = 'predefined'"),
        sqlite_where=sa.text("definition_type = 'predefined'"),
    )
    op.create_index("idx_news_definitions_type_name", "news_definitions", ["definition_type", "name"])

    op.create_table(
        "news_definition_roles",
        sa.Column("definition_id", sa.Uuid(), nullable=False),
        sa.Column("role_name", sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(
            ["definition_id"],
            ["news_definitions.id"],
            name="fk_news_definition_roles_definition_id_news_definitions",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("definition_id", "role_name", name="pk_news_definition_roles"),
    )

    op.create_table(
        "news_configurations",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("configuration_type", sa.String(length=20), nullable=False),
        sa.Column("news_definition_id", sa.Uuid(), nullable=False),
        sa.Column("news_set_id", sa.Uuid(), nullable=False),
        sa.Column("displayed", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("visible_only", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("subscribe_id", sa.String(length=255), nullable=True),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(
            ["news_definition_id"],
            ["news_definitions.id"],
            name="fk_news_configurations_news_definition_id_news_definitions",
        ),
        sa.ForeignKeyConstraint(
            ["news_set_id"],
            ["news_sets.id"],
            name="fk_news_configurations_news_set_id_news_sets",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_news_configurations"),
        sa.UniqueConstraint(
            "news_set_id",
            "news_definition_id",
            name="uq_news_configurations_set_definition",
        ),
    )
    op.create_index("ix_news_configurations_news_definition_id", "news_configurations", ["news_definition_id"])
    op.create_index("ix_news_configurations_news_set_id", "news_configurations", ["news_set_id"])
    op.create_index("ix_news_configurations_subscribe_id", "news_configurations", ["subscribe_id"])
    op.create_index(
        "idx_news_configurations_subscriber",
        "news_configurations",
        ["subscribe_id", "displayed"],
    )


def downgrade() -> None:
    op.drop_index("idx_news_configurations_subscriber", table_name="news_configurations")
    op.drop_index("ix_news_configurations_subscribe_id", table_name="news_configurations")
    op.drop_index("ix_news_configurations_news_set_id", table_name="news_configurations")
    op.drop_index("ix_news_configurations_news_definition_id", table_name="news_configurations")
    op.drop_table("news_configurations")

    op.drop_table("news_definition_roles")

    op.drop_index("idx_news_definitions_type_name", table_name="news_definitions")
    op.drop_index("uq_news_definitions_predefined_name", table_name="news_definitions")
    op.drop_table("news_definitions")

    op.drop_index("ix_news_sets_user_id", table_name="news_sets")
    op.drop_table("news_sets")
