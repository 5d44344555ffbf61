"""Database defaults."""
import uuid

import ulid


def gen_ulid() -> uuid.UUID:
    """
    Generate a ULID.

    More info here: https://github.com/ulid/spec. 48 bits of timestamp followed by 80 bits of randomness, so ids sort
    by creation time and still aren't guessable.
    """
    return ulid.new().uuid
