"""Create catalog schema

Revision ID: 1f0c3a9d2b7e
Revises:
Create Date: 2023-10-19 11:45:14.000000

"""
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "1f0c3a9d2b7e"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "catalog_database",
        sa.Column("database_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("database_id"),
        sa.UniqueConstraint("name"),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "catalog_object",
        sa.Column("object_id", sa.Integer(), nullable=False),
        sa.Column(
            "kind", sa.Enum("TABLE", "VIEW", name="objectkind"), nullable=False
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("database_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["database_id"],
            ["catalog_database.database_id"],
        ),
        sa.PrimaryKeyConstraint("object_id"),
        sa.UniqueConstraint("database_id", "name"),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "catalog_table",
        sa.Column("object_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["object_id"],
            ["catalog_object.object_id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("object_id"),
    )
    op.create_table(
        "catalog_view",
        sa.Column("object_id", sa.Integer(), nullable=False),
        sa.Column("definition", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["object_id"],
            ["catalog_object.object_id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("object_id"),
    )
    op.create_table(
        "catalog_column",
        sa.Column("column_id", sa.Integer(), nullable=False),
        sa.Column("table_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("data_type", sa.Text(), nullable=False),
        sa.Column("is_primary_key", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(
            ["table_id"],
            ["catalog_table.object_id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("column_id"),
        sa.UniqueConstraint("table_id", "name"),
        sqlite_autoincrement=True,
    )
    op.create_table(
        "catalog_view_dependency",
        sa.Column("view_id", sa.Integer(), nullable=False),
        sa.Column("dependent_object_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["view_id"],
            ["catalog_view.object_id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["dependent_object_id"],
            ["catalog_object.object_id"],
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("view_id", "dependent_object_id"),
    )


def downgrade() -> None:
    op.drop_table("catalog_view_dependency")
    op.drop_table("catalog_column")
    op.drop_table("catalog_view")
    op.drop_table("catalog_table")
    op.drop_table("catalog_object")
    op.drop_table("catalog_database")
