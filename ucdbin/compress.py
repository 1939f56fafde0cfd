from collections import defaultdict

from .errors import UcdBuildError
from .util import decode_var_ascii, decode_varint, encode_var_ascii, encode_varint

# The string pool of a table. Every text field (names, categories, bidi classes, Unicode 1.0 names,
# ISO comments and aliases) is stored once in a prefix trie and referenced by the offset of its trie
# node; each node is `varint(distance back to the parent node)` followed by `var_ascii(suffix)`.
# Offset 0 is the empty string.
#
# All strings are registered first, so that `compress` only splits a string where the registered set
# actually branches.
class StringCompressor:
	def __init__(self) -> None:
		# One byte, so that index `0` is never used for a different prefix.
		self.prefix_trie_bytes = bytearray([0])
		self.prefixes: dict[bytes, int] = {b'': 0}

		self.occured: set[bytes] = set()
		self.unique_edges: defaultdict[bytes, int] = defaultdict(int)

	# `register` and `compress` for UCD text, which must be ASCII to fit the var-ascii encoding.
	def add(self, text: str) -> None:
		self.register(_ascii(text))

	def index(self, text: str) -> int:
		return self.compress(_ascii(text))

	def register(self, entry: bytes) -> None:
		if entry == b"": return
		if entry in self.occured:
			return

		self.occured.add(entry)
		self.unique_edges[entry[:-1]] += 1

		self.register(entry[:-1])

	# Always returns True if prefix is `b''`
	def should_use_prefix(self, prefix: bytes) -> bool:
		return prefix == b"" or self.unique_edges[prefix] > 1

	def compress(self, entry: bytes) -> int:
		if (existing := self.prefixes.get(entry)) is not None:
			return existing

		if len(entry) == 0:
			return 0

		chunk_size = 1

		while not self.should_use_prefix(entry[:-chunk_size]):
			chunk_size += 1

		prefix_index = self.compress(entry[:-chunk_size])
		suffix = entry[-chunk_size:]

		inserted_index = len(self.prefix_trie_bytes)

		self.prefix_trie_bytes.extend(encode_varint(inserted_index - prefix_index))
		self.prefix_trie_bytes.extend(encode_var_ascii(suffix))

		self.prefixes[entry] = inserted_index

		return inserted_index

# Rebuild the string at trie node `index`, where the trie starts at `trie` within `data`.
def read_string(data: bytes, trie: int, index: int) -> str:
	suffixes = []

	while index != 0:
		prefix_offset, prefix_len = decode_varint(data, trie + index)
		suffix, _ = decode_var_ascii(data, trie + index + prefix_len)

		suffixes.append(suffix)
		index -= prefix_offset

	suffixes.reverse()
	return "".join(suffixes)

def _ascii(text: str) -> bytes:
	try:
		return text.encode("ascii")
	except UnicodeEncodeError:
		raise UcdBuildError(f"non-ASCII text cannot be stored: {text!r}") from None
