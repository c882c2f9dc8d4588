import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base

from .enums import SubjectKind, subject_kind_enum


class Reaction(Base):
    """A like (+1) or dislike (-1) by one user on one post or comment.

    A missing row means the user has no reaction. The unique key is what makes
    toggles safe across workers: the database, not the process, decides which of
    two concurrent inserts wins.
    """

    __tablename__ = "reactions"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    subject_type: Mapped[SubjectKind] = mapped_column(subject_kind_enum, nullable=False)
    # Points to posts.id or comments.id, polymorphic, no FK enforced
    subject_id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("users.id"), nullable=False
    )
    value: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        sa.UniqueConstraint(
            "subject_type", "subject_id", "user_id", name="uq_reactions_subject_user"
        ),
        sa.CheckConstraint("value IN (1, -1)", name="ck_reactions_value"),
        sa.Index("ix_reactions_subject", "subject_type", "subject_id"),
    )
