from __future__ import annotations


class UniNinjaError(Exception):
    """
    Base class for every error raised by the gateway core.
    """


class AuthRejected(UniNinjaError):
    """
    Missing, malformed or unknown API credential (HTTP 401).
    """


class StoreUnavailable(UniNinjaError):
    """
    Connection or query failure against the document store (HTTP 503).
    """


class UpstreamUnavailable(UniNinjaError):
    """
    Unistats transport failure, non-2xx status or unparsable body.

    Raised to the resolver so GraphQL reports it on the affected field only.
    """


class ResolutionIncomplete(UniNinjaError):
    """
    An optional upstream value is present but unusable; the field is omitted.
    """


# Public text for StoreUnavailable; resolvers surface it in the GraphQL errors array.
STORE_LOOKUP_FAILED = "The UniNinja data store is unavailable."
