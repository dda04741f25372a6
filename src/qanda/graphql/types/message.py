import strawberry


@strawberry.type
class SuccessMessage:
    """Plain acknowledgement returned by mutations with no payload."""

    message: str
