"""
utils/errors.py
---------------
Error taxonomy shared by the repository and handler layers.

Every failure the service reports is a NeighborhoodError carrying one
ErrorKind. Callers branch on `error.kind`; the handler layer maps kinds
to HTTP status codes.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    VALIDATION = "validation"
    DUPLICATE_TREE = "duplicate_tree"
    TREE_STANDING = "tree_standing"
    NO_SUCH_RECORD = "no_such_record"
    NO_TREES_AT_HOUSE = "no_trees_at_house"
    EMPTY_RESULT = "empty_result"
    PERSISTENCE = "persistence"


class NeighborhoodError(Exception):
    """
    A typed failure.

    Attributes:
        kind: The ErrorKind of the failure.
        message: Human-readable description. For PERSISTENCE errors this is
            server-side detail and is never sent to the client.
    """

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"NeighborhoodError({self.kind.name}, {self.message!r})"


def validation_error(message: str) -> NeighborhoodError:
    return NeighborhoodError(ErrorKind.VALIDATION, message)


def persistence_error(message: str) -> NeighborhoodError:
    return NeighborhoodError(ErrorKind.PERSISTENCE, message)
