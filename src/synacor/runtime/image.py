import struct

from synacor.common.hwconf import WORD_SIZE
from synacor.runtime.errors import LoadError


def unpack_image(data: bytes) -> list[int]:
    ''' Little-endian 16-bit words, no header '''

    if len(data) % WORD_SIZE != 0:
        raise LoadError(f'Image size {len(data)} is not a whole number of words')

    count = len(data) // WORD_SIZE
    return list(struct.unpack(f'<{count}H', data))


def pack_image(words: list[int]) -> bytes:
    return struct.pack(f'<{len(words)}H', *words)
