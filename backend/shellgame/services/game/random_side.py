import secrets
from typing import Callable

from shellgame.models import Side

# Returns one random byte as an int in 0..255
ByteSource = Callable[[], int]


def random_byte() -> int:
    return secrets.token_bytes(1)[0]


def pick_ring_side(byte_source: ByteSource = random_byte) -> Side:
    """Pick the hiding hand from one unbiased random byte.

    256 is even, so reducing modulo 2 splits the byte evenly: even bytes
    hide the ring on the right, odd bytes on the left.
    """
    return Side.RIGHT if byte_source() % 2 == 0 else Side.LEFT
