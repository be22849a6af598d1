"""Create metamodel tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-16
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "meta_package",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("ns_uri", sa.String(), nullable=True),
        sa.Column("ns_prefix", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_meta_package"),
    )
    op.create_table(
        "meta_class",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("abstract", sa.Boolean(), nullable=False),
        sa.Column("interface", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_meta_class"),
        sa.UniqueConstraint("name", name="uq_meta_class_name"),
    )
    op.create_table(
        "meta_super_type",
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("super_type_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["class_id"],
            ["meta_class.id"],
            name="fk_meta_super_type_class_id_meta_class",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["super_type_id"],
            ["meta_class.id"],
            name="fk_meta_super_type_super_type_id_meta_class",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("class_id", "super_type_id", name="pk_meta_super_type"),
    )
    op.create_table(
        "meta_attribute",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type_name", sa.String(), nullable=False),
        sa.Column("lower_bound", sa.Integer(), nullable=False),
        sa.Column("upper_bound", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["class_id"],
            ["meta_class.id"],
            name="fk_meta_attribute_class_id_meta_class",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_meta_attribute"),
        sa.UniqueConstraint("class_id", "name", name="uq_meta_attribute_class_id"),
    )
    op.create_table(
        "meta_reference",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("class_id", sa.Integer(), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("containment", sa.Boolean(), nullable=False),
        sa.Column("lower_bound", sa.Integer(), nullable=False),
        sa.Column("upper_bound", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["class_id"],
            ["meta_class.id"],
            name="fk_meta_reference_class_id_meta_class",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_id"],
            ["meta_class.id"],
            name="fk_meta_reference_target_id_meta_class",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_meta_reference"),
        sa.UniqueConstraint("class_id", "name", name="uq_meta_reference_class_id"),
    )


def downgrade() -> None:
    op.drop_table("meta_reference")
    op.drop_table("meta_attribute")
    op.drop_table("meta_super_type")
    op.drop_table("meta_class")
    op.drop_table("meta_package")
