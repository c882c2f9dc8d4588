# Domain exceptions raised by the moderation service layer.
# The controller layer catches these and converts them to HTTPException.


class TargetUserNotFoundError(Exception):
    def __init__(self, user_id) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class AdminImmuneError(Exception):
    """Admins are never moderation targets."""


class NoModerationIntentError(Exception):
    """The command carried no ban or mute intent."""
