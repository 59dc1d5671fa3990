"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AggregationError(DomainException):
    """Processing a transaction failed and its writes were rolled back"""

    pass


class StoreUnavailableError(AggregationError):
    """Backing store cannot be reached or refused the connection"""

    pass


class ConstraintViolationError(AggregationError):
    """A write collided with a uniqueness constraint"""

    pass


class QueryFailureError(AggregationError):
    """Statement failed or returned nothing where a value was required"""

    pass
