import pytest

import huffman as huff
from bitpack import pack_bits, unpack_bits


def test_pack_empty():
	assert pack_bits("") == (b"", 0)
	assert unpack_bits(b"", 0) == ""


def test_pack_full_byte():
	assert pack_bits("10000001") == (b"\x81", 0)


def test_pack_pads_last_byte_with_zeros():
	assert pack_bits("101") == (b"\xa0", 5)
	assert pack_bits("111111111") == (b"\xff\x80", 7)


def test_unpack_drops_padding():
	assert unpack_bits(b"\xa0", 5) == "101"
	assert unpack_bits(b"\xff\x80", 7) == "111111111"


def test_pack_reference_encoding_round_trip():
	result = huff.compress("aabbccddbbeaebdddfffdbffddabbbbbcdefaabbcccccaabbddfffdcecc")
	packed, pad_bits = pack_bits(result.encoded)
	assert len(packed) == 19
	assert pad_bits == 2
	assert unpack_bits(packed, pad_bits) == result.encoded
	assert huff.decode_text(unpack_bits(packed, pad_bits), result.root) == "aabbccddbbeaebdddfffdbffddabbbbbcdefaabbcccccaabbddfffdcecc"


def test_pack_rejects_non_binary():
	with pytest.raises(ValueError):
		pack_bits("102")


def test_unpack_rejects_bad_padding():
	with pytest.raises(ValueError):
		unpack_bits(b"\x00", 8)
	with pytest.raises(ValueError):
		unpack_bits(b"\x00", -1)
	with pytest.raises(ValueError):
		unpack_bits(b"", 3)
