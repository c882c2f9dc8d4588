import enum

import sqlalchemy as sa


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class SubjectKind(str, enum.Enum):
    """The two reactable, deletable content kinds."""

    POST = "post"
    COMMENT = "comment"


class ReactionValue(int, enum.Enum):
    LIKE = 1
    DISLIKE = -1


# Reused across models so the type is declared once per metadata.
user_role_enum = sa.Enum(
    UserRole,
    name="user_role",
    values_callable=lambda e: [x.value for x in e],
)
subject_kind_enum = sa.Enum(
    SubjectKind,
    name="subject_kind",
    values_callable=lambda e: [x.value for x in e],
)
