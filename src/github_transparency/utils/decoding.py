"""Conversion of malformed payload errors into DecodeError."""

from collections.abc import Iterator
from contextlib import contextmanager

from github_transparency.exceptions import DecodeError

# Raised by from_api/from_graphql on missing keys, nulls and wrong types.
# pydantic's ValidationError is a ValueError.
PAYLOAD_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


@contextmanager
def decoding(what: str) -> Iterator[None]:
    """Re-raise payload shape errors inside the block as DecodeError.

    Example:
        with decoding("contribution calendar"):
            stats = ContributionStats.from_graphql(data)
    """
    try:
        yield
    except PAYLOAD_ERRORS as e:
        raise DecodeError(f"Unexpected {what} payload: {e!r}") from e
