class UserOperationException(Exception):
    pass


class EncodingError(UserOperationException, ValueError):
    """
    A value does not fit in the fixed width field it is packed into
    """


class MissingFieldError(UserOperationException):
    def __init__(self, field_names):
        self.field_names = tuple(field_names)
        super().__init__(
            f"UserOperation fields without value or default: {', '.join(self.field_names)}"
        )


class SigningError(UserOperationException):
    pass
