from __future__ import annotations


class SOSDispatchError(Exception):
    """Base class for every recoverable failure raised by the dispatch core."""


class InvalidCoordinate(SOSDispatchError, ValueError):
    pass


class InvalidLocation(InvalidCoordinate):
    """An incident report carried a location that cannot be placed on the map."""


class InvalidSeverity(SOSDispatchError, ValueError):
    pass


class NotFound(SOSDispatchError, KeyError):
    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} {identifier!r} not found")
        self.kind = kind
        self.identifier = identifier

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return self.args[0]


class InvalidTransition(SOSDispatchError):
    pass


class InvalidState(InvalidTransition):
    """Dispatch was requested for an incident that is no longer pending."""


class DuplicateResponder(InvalidTransition):
    pass


class NoAvailableResponders(SOSDispatchError):
    def __init__(self, message: str = "No available responders currently.") -> None:
        super().__init__(message)


class RosterError(SOSDispatchError):
    pass
