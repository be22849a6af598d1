"""SQLAlchemy table metadata for persisted metamodels.

One database holds one metamodel. Classes, attributes and references keep
their insertion order through autoincrement ids; super type lists carry an
explicit position because they are rebuilt in place.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

meta_package_table = Table(
    "meta_package",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String, nullable=False),
    Column("ns_uri", String, nullable=True),
    Column("ns_prefix", String, nullable=True),
)

meta_class_table = Table(
    "meta_class",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False, unique=True),
    Column("abstract", Boolean, nullable=False, default=False),
    Column("interface", Boolean, nullable=False, default=False),
)

meta_super_type_table = Table(
    "meta_super_type",
    metadata,
    Column(
        "class_id",
        Integer,
        ForeignKey("meta_class.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "super_type_id",
        Integer,
        ForeignKey("meta_class.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, nullable=False),
)

meta_attribute_table = Table(
    "meta_attribute",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "class_id",
        Integer,
        ForeignKey("meta_class.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String, nullable=False),
    Column("type_name", String, nullable=False),
    Column("lower_bound", Integer, nullable=False, default=0),
    # -1 means unbounded
    Column("upper_bound", Integer, nullable=False, default=1),
    UniqueConstraint("class_id", "name"),
)

meta_reference_table = Table(
    "meta_reference",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "class_id",
        Integer,
        ForeignKey("meta_class.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("target_id", Integer, ForeignKey("meta_class.id"), nullable=False),
    Column("name", String, nullable=False),
    Column("containment", Boolean, nullable=False, default=False),
    Column("lower_bound", Integer, nullable=False, default=0),
    Column("upper_bound", Integer, nullable=False, default=1),
    UniqueConstraint("class_id", "name"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the metamodel metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
