"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """Stock on hand (or available to reserve) cannot cover the request."""


class InvalidTransitionError(ValidationError):
    """The target status is not reachable from the current status."""


class MissingCancellationReasonError(ValidationError):
    """Cancellation attempted without a reason."""


class UnauthorizedError(DomainException):
    """The acting user may not perform this operation."""


class ReservationInvariantError(DomainException):
    """Reserved quantity would leave the range ``0..quantity``.

    This signals a bookkeeping bug (e.g. releasing more than was reserved),
    not a user error.
    """


# Short aliases matching the names used by callers of the ledger.
InsufficientStock = InsufficientStockError
ItemNotFound = EntityNotFoundError
