import heapq
import itertools
import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, List, Optional


# Errors

class HuffmanError(Exception):
    """Base class for every failure raised by the Huffman engine."""


class EmptyAlphabetError(HuffmanError, ValueError):
    def __init__(self):
        super().__init__("cannot build a Huffman tree: no symbol has a positive frequency")


class UnknownSymbolError(HuffmanError, LookupError):
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"symbol {symbol!r} is not in the code table")


class DecodeError(HuffmanError, ValueError):
    """The bit-string could not be turned back into a message."""


class TruncatedInputError(DecodeError):
    def __init__(self, position: int, decoded: int):
        self.position = position  # bits consumed
        self.decoded = decoded    # symbols produced before the stream ran out
        super().__init__(f"bit-string ended in the middle of a code after {position} bits")


class CorruptInputError(DecodeError):
    def __init__(self, position: int, bit: str):
        self.position = position
        self.bit = bit
        super().__init__(f"invalid bit {bit!r} at position {position}")


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("symbol", "frequency", "left", "right", "code")

    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol        # None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right
        self.code = None            # bit-path, filled in by generate_huffman_codes

    @classmethod
    def merge(cls, left: "HuffmanNode", right: "HuffmanNode") -> "HuffmanNode":
        return cls(None, left.frequency + right.frequency, left, right)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode({self.symbol!r}, {self.frequency})"
        return f"HuffmanNode(<internal>, {self.frequency})"


def count_frequencies(message: Iterable[Hashable]) -> Counter:
    return Counter(message)


# Queue tiers: merged nodes are served before waiting nodes of the same frequency
_MERGED = 0
_LEAF = 1


def build_huffman_tree(frequency_table) -> HuffmanNode: # frequency_table: mapping of symbol -> frequency
    """
    Greedy Huffman construction.

    Ties between equal frequencies are broken deterministically: the most
    recently merged node goes first, then older merged nodes, then leaves in
    ascending symbol order. The same table therefore always yields the same
    tree, and the same codes.
    """
    present = sorted(symbol for symbol, frequency in frequency_table.items() if frequency > 0)
    if not present:
        raise EmptyAlphabetError()

    priority_queue = [
        (frequency_table[symbol], _LEAF, index, HuffmanNode(symbol, frequency_table[symbol]))
        for index, symbol in enumerate(present)
    ]
    heapq.heapify(priority_queue)

    merges = itertools.count(1)
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)[3]
        right = heapq.heappop(priority_queue)[3]
        merged_node = HuffmanNode.merge(left, right)
        heapq.heappush(priority_queue, (merged_node.frequency, _MERGED, -next(merges), merged_node))

    return priority_queue[0][3]


def generate_huffman_codes(root: HuffmanNode) -> Dict[Hashable, str]:
    codes = {}

    # Edge case of a single distinct symbol: the root is a leaf and its path is empty
    # Give it "0" so that every encoded symbol still takes one bit
    if root.is_leaf:
        root.code = "0"
        codes[root.symbol] = "0"
        return codes

    def generate_codes_helper(node, current_code):
        node.code = current_code
        if node.is_leaf:
            codes[node.symbol] = current_code
            return
        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes


def huffman_encode(message: Iterable[Hashable], code_map: Dict[Hashable, str]) -> str:
    parts = []
    for symbol in message:
        try:
            parts.append(code_map[symbol])
        except KeyError:
            raise UnknownSymbolError(symbol) from None
    return ''.join(parts)


def huffman_decode(bitstring: str, root: HuffmanNode) -> List[Hashable]:
    """
    Walk the tree bit by bit, emitting a symbol at every leaf.

    Raises TruncatedInputError when the bits run out away from the root;
    nothing decoded so far is returned in that case.
    """
    if root.is_leaf:
        return _decode_single_leaf(bitstring, root)

    decoded = []
    current_node = root
    for position, bit in enumerate(bitstring):
        if bit == '0':
            current_node = current_node.left
        elif bit == '1':
            current_node = current_node.right
        else:
            raise CorruptInputError(position, bit)
        if current_node.is_leaf:
            decoded.append(current_node.symbol)
            current_node = root

    if current_node is not root:
        raise TruncatedInputError(len(bitstring), len(decoded))
    return decoded


def _decode_single_leaf(bitstring: str, root: HuffmanNode) -> List[Hashable]:
    for position, bit in enumerate(bitstring):
        if bit != '0':
            raise CorruptInputError(position, bit)
    return [root.symbol] * len(bitstring)


def decode_text(bitstring: str, root: HuffmanNode) -> str:
    return ''.join(huffman_decode(bitstring, root))


def decode_bytes(bitstring: str, root: HuffmanNode) -> bytes:
    return bytes(huffman_decode(bitstring, root))


@dataclass
class HuffmanResult:
    frequencies: Counter
    root: HuffmanNode
    code_map: Dict[Hashable, str]
    encoded: str

    @property
    def encoded_bits(self) -> int:
        return len(self.encoded)


def compress(message) -> HuffmanResult:
    """Run the whole pipeline for one message: count, build, generate codes, encode."""
    frequencies = count_frequencies(message)
    root = build_huffman_tree(frequencies)
    code_map = generate_huffman_codes(root)
    return HuffmanResult(frequencies, root, code_map, huffman_encode(message, code_map))


# Tree inspection helpers

def iter_nodes(root: Optional[HuffmanNode]) -> Iterator[HuffmanNode]:
    """Pre-order walk of the tree."""
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield node
        if not node.is_leaf:
            stack.append(node.right)
            stack.append(node.left)


def code_lengths(code_map: Dict[Hashable, str]) -> Dict[Hashable, int]:
    return {symbol: len(code) for symbol, code in code_map.items()}


def average_code_length(code_map: Dict[Hashable, str], frequency_table) -> float:
    total = sum(frequency_table[s] for s in code_map)
    if total == 0:
        return 0.0
    return sum(len(code) * frequency_table[s] for s, code in code_map.items()) / total


def entropy(frequency_table) -> float:
    """Shannon entropy in bits per symbol, the lower bound for average_code_length."""
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    h = 0.0
    for frequency in frequency_table.values():
        if frequency > 0:
            p = frequency / total
            h -= p * math.log2(p)
    return h
