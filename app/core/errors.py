"""Errors raised by the restaurant and review services."""


class RestaurantServiceError(Exception):
    """Base class for service level failures."""


class InvalidArgument(RestaurantServiceError, ValueError):
    """Missing or malformed input, rejected before touching the store."""


class NotFound(RestaurantServiceError, LookupError):
    """Requested restaurant does not exist."""


class TransactionConflict(RestaurantServiceError):
    """Concurrent writers kept invalidating the transaction until retries ran out."""


class Unavailable(RestaurantServiceError):
    """The database could not be reached or refused the transaction."""


class SubscriptionSetupError(RestaurantServiceError, TypeError):
    """A live query was requested with an unusable callback or key."""
