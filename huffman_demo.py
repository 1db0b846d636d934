"""
Huffman demo driver

Builds the code for a message, prints the frequency table, the tree and the
code table, then encodes and decodes the message. With the default message the
result is also checked against the known reference encoding.

How to run:
  python huffman_demo.py
  python huffman_demo.py --message "hello world" --pack
  python huffman_demo.py --decode 0010011
"""

import argparse
import sys
from typing import List, Optional

import huffman as huff
from bitpack import pack_bits
from huffman_print import format_code_table, format_frequencies, format_tree

REFERENCE_MESSAGE = "aabbccddbbeaebdddfffdbffddabbbbbcdefaabbcccccaabbddfffdcecc"
REFERENCE_ENCODING = (
    "0010011010111111010110100000010001001010111011011001101101100101"
    "0011010101010111010001100010011010111111111111111001001101001011"
    "1011011001111000111111"
)

EXIT_OK = 0
EXIT_FAILED_ALLOCATION = 1
EXIT_INVALID_ENCODED = 3
EXIT_EMPTY_MESSAGE = 4
EXIT_REFERENCE_MISMATCH = 5


def error(message: str, status: int) -> int:
    print(f"ERROR: {message}", file=sys.stderr)
    return status


def check_reference(encoded: str, decoded: str) -> List[str]:
    """Compare a run on REFERENCE_MESSAGE with the expected output, returns the failures"""
    failures = []
    if encoded != REFERENCE_ENCODING:
        failures.append(
            f"encoded message differs from reference ({len(encoded)} bits, expected {len(REFERENCE_ENCODING)})"
        )
    if decoded != REFERENCE_MESSAGE:
        failures.append("decoded message differs from the original")
    return failures


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Static Huffman coding demo")
    ap.add_argument("--message", type=str, default=REFERENCE_MESSAGE, help="Message to encode")
    ap.add_argument("--decode", type=str, default=None,
                    help="Bit-string to decode with the message's tree instead of the encoded message")
    ap.add_argument("--pack", action="store_true", help="Also print the packed bytes (hex) and pad bits")
    ap.add_argument("--quiet", action="store_true", help="Skip the frequency, tree and code table output")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    message = args.message

    try:
        result = huff.compress(message)
    except huff.EmptyAlphabetError:
        return error("empty message, nothing to encode", EXIT_EMPTY_MESSAGE)
    except MemoryError:
        return error("failed to allocate", EXIT_FAILED_ALLOCATION)

    if not args.quiet:
        for line in format_frequencies(result.frequencies):
            print(line)
        print(format_tree(result.root))
        for line in format_code_table(result.code_map):
            print(line)

    print(f"encoded message: {result.encoded}")
    if args.pack:
        packed, pad_bits = pack_bits(result.encoded)
        print(f"packed ({len(packed)} bytes, {pad_bits} pad bits): {packed.hex()}")

    bits = result.encoded if args.decode is None else args.decode
    try:
        decoded = huff.decode_text(bits, result.root)
    except huff.DecodeError as e:
        return error(f"invalid encoded message ({e})", EXIT_INVALID_ENCODED)
    except MemoryError:
        return error("failed to allocate", EXIT_FAILED_ALLOCATION)
    print(f"decoded message: {decoded}")

    if args.decode is None and message == REFERENCE_MESSAGE:
        failures = check_reference(result.encoded, decoded)
        if failures:
            for failure in failures:
                print(f"ERROR: {failure}", file=sys.stderr)
            return EXIT_REFERENCE_MISMATCH
        print("reference check passed")

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
