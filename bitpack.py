from typing import Tuple


def pack_bits(bitstring: str) -> Tuple[bytes, int]:
    """
    Converts a '0'/'1' bit-string into packed bytes, most significant bit first
    Returns (packed_bytes, pad_bits) where pad_bits is number of 0 bits added at the end
    """
    out = bytearray()
    acc = 0
    acc_bits = 0

    for ch in bitstring:
        if ch not in "01":
            raise ValueError(f"bit-string may only contain '0' and '1', got {ch!r}")
        acc = (acc << 1) | (1 if ch == '1' else 0)
        acc_bits += 1
        if acc_bits == 8:
            out.append(acc)
            acc = 0
            acc_bits = 0

    pad_bits = 0
    if acc_bits != 0:
        pad_bits = 8 - acc_bits
        out.append((acc << pad_bits) & 0xFF)

    return bytes(out), pad_bits


def unpack_bits(packed: bytes, pad_bits: int) -> str:
    """
    Inverse of pack_bits: expand bytes back to a bit-string, dropping the padding
    """
    if not 0 <= pad_bits <= 7:
        raise ValueError(f"pad_bits must be between 0 and 7, got {pad_bits}")
    if pad_bits and not packed:
        raise ValueError("pad_bits given for an empty payload")

    total_bits = len(packed) * 8 - pad_bits
    bits = ''.join(format(byte, '08b') for byte in packed)
    return bits[:total_bits]
