from typing import BinaryIO, Tuple

# Encode ASCII bytes from `s` into an array of bytes, with the high bit of the last byte set.
# If `s` is zero bytes long this will instead encode a single NUL character, because the encoding of an empty string is not well-formed.
# The high bit of the last byte is set instead of cleared (contrary to `encode_varint`) so these delimited strings are easy to pick out in hexdumps.
def encode_var_ascii(s: bytes) -> bytes:
	arr = bytearray()
	for byte in s:
		assert (byte & 0x80) == 0
		arr.append(byte)

	if len(arr) == 0:
		arr.append(0)

	arr[-1] |= 0x80

	return bytes(arr)

def encode_varint(i: int) -> bytes:
	assert i >= 0

	arr = bytearray()
	while len(arr) == 0 or i != 0:
		arr.append((i % 128) | 0x80)
		i //= 128

	arr.reverse()
	arr[-1] &= ~0x80

	return bytes(arr)

# Signed values are folded onto the unsigned varint space: 0, -1, 1, -2, 2, ...
def encode_zigzag(i: int) -> bytes:
	return encode_varint(i * 2 if i >= 0 else -i * 2 - 1)

# Decode a var-ascii string starting at `offset`.
# Returns the decoded string, and additionally how many bytes it occupied.
def decode_var_ascii(raw: bytes, offset: int = 0) -> Tuple[str, int]:
	array = bytearray()
	i = offset
	while raw[i] & 0x80 == 0:
		array.append(raw[i])
		i += 1

	array.append(raw[i] & ~0x80)
	i += 1

	if len(array) == 1 and array[0] == 0x00:
		return "", i - offset

	return bytes(array).decode("ascii"), i - offset

# decode a varint from the bytes in `raw`, starting at `offset`.
# Returns the decoded integer, and additionally how long that integer was.
def decode_varint(raw: bytes, offset: int = 0) -> Tuple[int, int]:
	value = 0

	i = offset
	while True:
		value *= 128
		value += raw[i] & 0x7F

		if raw[i] & 0x80 == 0:
			i += 1
			break

		i += 1

	return value, i - offset

def decode_zigzag(raw: bytes, offset: int = 0) -> Tuple[int, int]:
	value, length = decode_varint(raw, offset)
	if value & 1:
		return -(value + 1) // 2, length
	return value // 2, length

# Sequential reader over a run of varints, for record payloads.
class ByteReader:
	def __init__(self, raw: bytes, offset: int) -> None:
		self.raw = raw
		self.offset = offset

	def varint(self) -> int:
		value, length = decode_varint(self.raw, self.offset)
		self.offset += length
		return value

	def zigzag(self) -> int:
		value, length = decode_zigzag(self.raw, self.offset)
		self.offset += length
		return value

def align_file_to_u32(file: BinaryIO) -> None:
	location = file.tell()

	file.write(b"\x00" * (-location % 4))

assert decode_varint(b"\x23") == (0x23, 1)
assert decode_varint(b"\x8F\x04") == (0x0F * 128 + 0x04, 2)
assert decode_zigzag(encode_zigzag(-2)) == (-2, 1)
