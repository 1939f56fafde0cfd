import struct
from typing import Iterator, Optional, Tuple

from .compress import read_string
from .errors import ArtifactError
from .format import ENTRY_FORMAT, HEADER_FORMAT, MAGIC, NAME_ROW_FORMAT, NUMERIC_INTEGER, SECTIONS, VERSION, RecordField
from .phf import HashIndexView, codepoint_key, text_key
from .records import (
	CharacterRecord,
	Decomposition,
	DecompositionTag,
	Integer,
	NameAlias,
	NameAliasLabel,
	NameEntry,
	NumericType,
	Rational,
	is_codepoint,
)
from .util import ByteReader, decode_var_ascii

ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)
NAME_ROW_SIZE = struct.calcsize(NAME_ROW_FORMAT)

def _read_var_ascii_list(data: bytes, offset: int, size: int) -> list[str]:
	values = []
	i = 0
	while i < size:
		value, length = decode_var_ascii(data, offset + i)
		i += length
		values.append(value)
	return values

# Read-only view of a compiled table blob. Nothing is decoded ahead of time except the header;
# every lookup decodes just the entry it needs.
class UcdIndex:
	def __init__(self, data: bytes) -> None:
		if len(data) < struct.calcsize(HEADER_FORMAT):
			raise ArtifactError("table blob is truncated")

		magic, version, *locations = struct.unpack_from(HEADER_FORMAT, data, 0)
		if magic != MAGIC:
			raise ArtifactError(f"not a UCD table blob (magic {magic!r})")
		if version != VERSION:
			raise ArtifactError(f"unsupported UCD table version {version}, expected {VERSION}")

		self.data = data
		self.sections = {
			name: (locations[2 * i], locations[2 * i + 1])
			for i, name in enumerate(SECTIONS)
		}

		self.strings = self.sections["strings"][0]
		self.decomposition_tags = [DecompositionTag(value) for value in _read_var_ascii_list(data, *self.sections["decomposition_tags"])]
		self.alias_labels = [NameAliasLabel(value) for value in _read_var_ascii_list(data, *self.sections["alias_labels"])]

		self.record_index = HashIndexView(data, self.sections["record_index"][0])
		self.alias_index = HashIndexView(data, self.sections["alias_index"][0])
		self.name_index = HashIndexView(data, self.sections["name_index"][0])

	def string(self, index: int) -> str:
		return read_string(self.data, self.strings, index)

	def _entry(self, section: str, entry: int) -> Tuple[int, int]:
		return struct.unpack_from(ENTRY_FORMAT, self.data, self.sections[section][0] + entry * ENTRY_SIZE)

	def _find_codepoint(self, index: HashIndexView, entries: str, codepoint: int) -> Optional[int]:
		if not is_codepoint(codepoint):
			return None

		entry = index.find(codepoint_key(codepoint))
		if entry is None:
			return None

		key, offset = self._entry(entries, entry)
		if key != codepoint:
			return None

		return offset

	@property
	def record_count(self) -> int:
		return len(self.record_index)

	def record(self, codepoint: int) -> Optional[CharacterRecord]:
		offset = self._find_codepoint(self.record_index, "record_entries", codepoint)
		if offset is None:
			return None
		return self._decode_record(self.sections["records"][0] + offset)

	# Every codepoint with a record, in codepoint order.
	def codepoints(self) -> Iterator[int]:
		for entry in range(self.record_count):
			yield self._entry("record_entries", entry)[0]

	def aliases(self, codepoint: int) -> Tuple[NameAlias, ...]:
		offset = self._find_codepoint(self.alias_index, "alias_entries", codepoint)
		if offset is None:
			return ()

		reader = ByteReader(self.data, self.sections["aliases"][0] + offset)
		aliases = []
		for _ in range(reader.varint()):
			alias = self.string(reader.varint())
			aliases.append(NameAlias(codepoint, alias, self.alias_labels[reader.varint()]))

		return tuple(aliases)

	@property
	def name_count(self) -> int:
		return self.sections["names"][1] // NAME_ROW_SIZE

	def _name_row(self, row: int) -> NameEntry:
		key, string = struct.unpack_from(NAME_ROW_FORMAT, self.data, self.sections["names"][0] + row * NAME_ROW_SIZE)
		return NameEntry.from_key(key, self.string(string))

	# Name table rows in the order they were built.
	def name_entries(self) -> Iterator[NameEntry]:
		for row in range(self.name_count):
			yield self._name_row(row)

	def name_entry(self, name: str) -> Optional[NameEntry]:
		try:
			key = text_key(name)
		except UnicodeEncodeError:
			return None

		row = self.name_index.find(key)
		if row is None:
			return None

		entry = self._name_row(row)
		if entry.name != name:
			return None

		return entry

	def _decode_record(self, offset: int) -> CharacterRecord:
		reader = ByteReader(self.data, offset)
		codepoint = reader.varint()
		present = RecordField(reader.varint())

		def text(field: RecordField) -> str:
			return self.string(reader.varint()) if field in present else ""

		def optional(field: RecordField) -> Optional[int]:
			return reader.varint() if field in present else None

		name = text(RecordField.NAME)
		general_category = text(RecordField.GENERAL_CATEGORY)
		combining_class = optional(RecordField.COMBINING_CLASS) or 0
		bidi_class = text(RecordField.BIDI_CLASS)
		decomposition = self._decode_decomposition(reader) if RecordField.DECOMPOSITION in present else None
		numeric_decimal = optional(RecordField.NUMERIC_DECIMAL)
		numeric_digit = optional(RecordField.NUMERIC_DIGIT)
		numeric = self._decode_numeric(reader) if RecordField.NUMERIC in present else None

		return CharacterRecord(
			codepoint = codepoint,
			name = name,
			general_category = general_category,
			canonical_combining_class = combining_class,
			bidi_class = bidi_class,
			decomposition = decomposition,
			numeric_decimal = numeric_decimal,
			numeric_digit = numeric_digit,
			numeric = numeric,
			mirrored = RecordField.MIRRORED in present,
			unicode1_name = text(RecordField.UNICODE1_NAME),
			iso_comment = text(RecordField.ISO_COMMENT),
			simple_uppercase = optional(RecordField.UPPERCASE),
			simple_lowercase = optional(RecordField.LOWERCASE),
			simple_titlecase = optional(RecordField.TITLECASE),
		)

	def _decode_decomposition(self, reader: ByteReader) -> Decomposition:
		tag = reader.varint()
		length = reader.varint()
		codepoints = tuple(reader.varint() for _ in range(length))
		return Decomposition.from_codepoints(None if tag == 0 else self.decomposition_tags[tag - 1], codepoints)

	def _decode_numeric(self, reader: ByteReader) -> NumericType:
		if reader.varint() == NUMERIC_INTEGER:
			return Integer(reader.zigzag())

		numerator = reader.zigzag()
		return Rational(numerator, reader.zigzag())
