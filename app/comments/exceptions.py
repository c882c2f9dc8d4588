# Domain exceptions raised by the comments service layer.
# The controller layer catches these and converts them to HTTPException.


class InvalidParentError(Exception):
    """Parent comment is missing, deleted, or belongs to another post."""

    def __init__(self, parent_id) -> None:
        self.parent_id = parent_id
        super().__init__(f"Invalid parent comment {parent_id}")
