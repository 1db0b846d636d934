import huffman as huff
from huffman_print import format_code_table, format_frequencies, format_symbol, format_tree

REFERENCE_MESSAGE = "aabbccddbbeaebdddfffdbffddabbbbbcdefaabbcccccaabbddfffdcecc"


def test_format_symbol_printable():
	assert format_symbol('a') == 'a'
	assert format_symbol(' ') == ' '
	assert format_symbol(65) == 'A'


def test_format_symbol_non_printable_as_hex():
	assert format_symbol('\n') == 'Hex: a'
	assert format_symbol(10) == 'Hex: a'
	assert format_symbol(0xff) == 'Hex: ff'


def test_format_frequencies_sorted_and_positive_only():
	ft = huff.count_frequencies(REFERENCE_MESSAGE)
	ft['z'] = 0
	assert format_frequencies(ft) == ["a : 8", "b : 15", "c : 11", "d : 12", "e : 4", "f : 9"]


def test_format_tree_reference():
	root = huff.build_huffman_tree(huff.count_frequencies(REFERENCE_MESSAGE))
	huff.generate_huffman_codes(root)
	assert format_tree(root) == (
		":59() {:24(0) {:12(00) {e:4(000), a:8(001)}, d:12(01)}, "
		":35(1) {b:15(10), :20(11) {f:9(110), c:11(111)}}}"
	)


def test_format_tree_before_codes():
	root = huff.build_huffman_tree({'x': 1, 'y': 2})
	assert format_tree(root) == ":3() {x:1(), y:2()}"


def test_format_tree_single_leaf():
	root = huff.build_huffman_tree({'a': 4})
	huff.generate_huffman_codes(root)
	assert format_tree(root) == "a:4(0)"


def test_format_code_table():
	codes = huff.compress(REFERENCE_MESSAGE).code_map
	assert format_code_table(codes) == ["a: 001", "b: 10", "c: 111", "d: 01", "e: 000", "f: 110"]


def test_format_code_table_bytes():
	codes = huff.compress(b"\n\nA").code_map
	assert format_code_table(codes) == ["Hex: a: 1", "A: 0"]
