from app.models.comment import Comment
from app.models.post import Post
from app.models.reaction import Reaction
from app.models.user import User

__all__ = [
    "User",
    "Post",
    "Comment",
    "Reaction",
]
