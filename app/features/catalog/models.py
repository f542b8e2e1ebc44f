"""
Resource, Verb and Permission catalog models.

The catalog is read-only from the role matrix's point of view:
- Resources form a forest through the nullable `pid` self reference
- Verbs are the small, fixed set of actions (create, read, ...)
- Permissions bind one resource to one verb
"""
from enum import IntEnum
from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database.base import Base, TimestampMixin, generate_ulid


class ResourceType(IntEnum):
    """Partition a resource is rendered in."""
    SYSTEM = 0
    GENERAL = 1


class Resource(Base, TimestampMixin):
    """
    Protectable entity or UI grouping node.

    A resource with no permission registered against it is a grouping node;
    there is no separate flag for that.
    """
    __tablename__ = "resources"

    # Primary key using ULID
    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)

    # Tree position
    pid: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("resources.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[int] = mapped_column(Integer, nullable=False, default=ResourceType.GENERAL, index=True)

    # Resource definition
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    key: Mapped[str] = mapped_column(String(100), nullable=False)  # front-end component registration key
    code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    parent: Mapped["Resource | None"] = relationship(
        "Resource",
        remote_side="Resource.id",
        lazy="selectin",
        join_depth=1
    )

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, code={self.code!r}, pid={self.pid})>"


class Verb(Base, TimestampMixin):
    """Action that can be granted on a resource (create, read, update, delete)."""
    __tablename__ = "verbs"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    action: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Verb(id={self.id}, action={self.action!r})>"


class Permission(Base, TimestampMixin):
    """
    Grant unit binding one resource to one verb.

    `resource_id` and `verb_id` are nullable because older catalog rows only
    carry the "<resource-code>:<verb-action>" code.
    """
    __tablename__ = "permissions"

    __table_args__ = (
        UniqueConstraint("resource_id", "verb_id", name="unique_resource_verb"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    resource_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    verb_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("verbs.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    code: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(150), nullable=True)

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, code={self.code!r})>"
