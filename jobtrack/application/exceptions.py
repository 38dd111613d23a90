class StoreError(RuntimeError):
    """Raised when the request store cannot read or persist a record."""
    pass


class RequestNotFoundError(LookupError):
    """Raised when a service request id is unknown to the store."""
    pass


class NotifierError(RuntimeError):
    """Raised when a reminder could not be delivered (network errors, non-2xx responses)."""
    pass


class RequestExistsError(RuntimeError):
    """Raised when creating a service request whose id is already taken."""
    pass
