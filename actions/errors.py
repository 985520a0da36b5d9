"""Errors raised by the registry and dispatcher; front ends map them to responses."""


class RelayError(Exception):
    """Base class for everything the core reports back to a caller."""


class InvalidInput(RelayError):
    pass


class DuplicateName(RelayError):
    pass


class NotFound(RelayError):
    pass


class RequestConstructionError(RelayError):
    """The outbound request could not be built; no network call was made."""
