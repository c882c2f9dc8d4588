# Domain exceptions raised by the users service layer.


class NoPasswordSetError(Exception):
    """Account has no local password to confirm with."""


class WrongPasswordError(Exception):
    pass
