# Domain exceptions raised by the reactions service layer.
# The controller layer catches these and converts them to HTTPException.


class InvalidReactionValueError(Exception):
    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"Reaction value must be 1 or -1, got {value!r}")


class ReactionConflictError(Exception):
    """The reaction row changed under us between the insert attempt and the row lock."""
