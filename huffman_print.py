"""
Text rendering of the Huffman structures, for diagnostics

Non-printable symbols are shown as their hexadecimal value, e.g. "Hex: a"
for a newline.
"""

from typing import Dict, Hashable, List

from huffman import HuffmanNode


def format_symbol(symbol: Hashable) -> str:
    if isinstance(symbol, int):
        if 0x20 <= symbol <= 0x7e:
            return chr(symbol)
        return f"Hex: {symbol:x}"
    if isinstance(symbol, str) and len(symbol) == 1:
        if symbol.isprintable():
            return symbol
        return f"Hex: {ord(symbol):x}"
    return repr(symbol)


def format_frequencies(frequency_table) -> List[str]:
    return [
        f"{format_symbol(symbol)} : {frequency}"
        for symbol, frequency in sorted(frequency_table.items())
        if frequency > 0
    ]


def format_tree(root: HuffmanNode) -> str:
    """
    One-line nested rendering, e.g. ":59() {:24(0) {...}, :35(1) {...}}"

    Codes appear only once generate_huffman_codes has run on the tree.
    """
    parts = []

    def render(node):
        code = node.code if node.code is not None else ""
        if node.is_leaf:
            parts.append(f"{format_symbol(node.symbol)}:{node.frequency}({code})")
            return
        parts.append(f":{node.frequency}({code})")
        parts.append(" {")
        render(node.left)
        parts.append(", ")
        render(node.right)
        parts.append("}")

    render(root)
    return "".join(parts)


def format_code_table(code_map: Dict[Hashable, str]) -> List[str]:
    return [f"{format_symbol(symbol)}: {code}" for symbol, code in sorted(code_map.items())]
