import logging, re
from typing import Callable, Optional

from .errors import UcdBuildError, UcdParseError
from .format import NUMERIC_INTEGER, NUMERIC_RATIONAL, RecordField
from .records import (
	DECOMPOSITION_CAPACITY,
	CharacterRecord,
	Decomposition,
	DecompositionTag,
	Integer,
	NameAlias,
	NameAliasLabel,
	NameEntry,
	NameSource,
	NumericType,
	Rational,
)
from .ucd import UcdRow, group_by_codepoint, parse_codepoint
from .util import encode_varint, encode_zigzag

logger = logging.getLogger(__name__)

DECOMPOSITION_TAGS = list(DecompositionTag)
ALIAS_LABELS = list(NameAliasLabel)

def parse_decomposition(codepoint: int, text: str, where: str) -> Optional[Decomposition]:
	if text == "":
		return None

	tag = None
	parts = text.split()
	if parts[0].startswith("<"):
		tag_text = parts.pop(0)
		try:
			tag = DecompositionTag(tag_text[1:-1])
		except ValueError:
			raise UcdParseError(f"unknown decomposition tag {tag_text}", where) from None

	if not parts:
		raise UcdParseError(f"empty decomposition mapping {text!r}", where)
	if len(parts) > DECOMPOSITION_CAPACITY:
		raise UcdBuildError(f"{where}: decomposition of {len(parts)} codepoints exceeds capacity {DECOMPOSITION_CAPACITY}")

	decomposition = Decomposition.from_codepoints(tag, tuple(parse_codepoint(part, where) for part in parts))

	# Stored as absent; readers treat absent as the identity mapping.
	if decomposition.is_identity(codepoint):
		return None

	return decomposition

NUMERIC_PATTERN = re.compile(r"(-?[0-9]+)(?:/([0-9]+))?")

def parse_numeric(text: str, where: str) -> Optional[NumericType]:
	if text == "":
		return None

	match = NUMERIC_PATTERN.fullmatch(text)
	if match is None or match[2] is not None and int(match[2]) == 0:
		raise UcdParseError(f"malformed numeric value {text!r}", where)

	if match[2] is not None:
		return Rational(int(match[1]), int(match[2]))
	return Integer(int(match[1]))

def parse_small_int(text: str, where: str, limit: int) -> int:
	if not (text.isascii() and text.isdigit()) or int(text) > limit:
		raise UcdParseError(f"expected an integer in 0..{limit}, found {text!r}", where)
	return int(text)

def parse_optional_codepoint(text: str, where: str) -> Optional[int]:
	if text == "":
		return None
	return parse_codepoint(text, where)

def encode_character_record(row: UcdRow) -> CharacterRecord:
	(_, name, general_category, combining_class, bidi_class, decomposition,
		decimal, digit, numeric, mirrored, unicode1_name, iso_comment,
		uppercase, lowercase, titlecase) = row.fields

	if mirrored not in ("Y", "N"):
		raise UcdParseError(f"expected Y or N for Bidi_Mirrored, found {mirrored!r}", row.where)

	return CharacterRecord(
		codepoint = row.codepoint,
		name = name,
		general_category = general_category,
		canonical_combining_class = parse_small_int(combining_class, row.where, 255),
		bidi_class = bidi_class,
		decomposition = parse_decomposition(row.codepoint, decomposition, row.where),
		numeric_decimal = None if decimal == "" else parse_small_int(decimal, row.where, 9),
		numeric_digit = None if digit == "" else parse_small_int(digit, row.where, 9),
		numeric = parse_numeric(numeric, row.where),
		mirrored = mirrored == "Y",
		unicode1_name = unicode1_name,
		iso_comment = iso_comment,
		simple_uppercase = parse_optional_codepoint(uppercase, row.where),
		simple_lowercase = parse_optional_codepoint(lowercase, row.where),
		simple_titlecase = parse_optional_codepoint(titlecase, row.where),
	)

def encode_character_records(rows: list[UcdRow]) -> list[CharacterRecord]:
	records = []

	for codepoint, group in group_by_codepoint(rows).items():
		if len(group) != 1:
			lines = ", ".join(row.where for row in group)
			raise UcdBuildError(f"U+{codepoint:04X} has {len(group)} UnicodeData.txt rows ({lines}); unsupported database revision")

		records.append(encode_character_record(group[0]))

	return records

def encode_name_alias(row: UcdRow) -> NameAlias:
	_, alias, label = row.fields

	try:
		return NameAlias(row.codepoint, alias, NameAliasLabel(label))
	except ValueError:
		raise UcdParseError(f"unknown alias label {label!r}", row.where) from None

# codepoint -> aliases, in file order
def encode_name_aliases(rows: list[UcdRow]) -> dict[int, list[NameAlias]]:
	return {
		codepoint: [encode_name_alias(row) for row in group]
		for codepoint, group in group_by_codepoint(rows).items()
	}

# Hangul syllable names are algorithmic, see Unicode chapter 3.12.
HANGUL_S_BASE = 0xAC00
HANGUL_L_COUNT = 19
HANGUL_V_COUNT = 21
HANGUL_T_COUNT = 28
HANGUL_N_COUNT = HANGUL_V_COUNT * HANGUL_T_COUNT
HANGUL_S_COUNT = HANGUL_L_COUNT * HANGUL_N_COUNT

JAMO_L = ["G", "GG", "N", "D", "DD", "R", "M", "B", "BB", "S", "SS", "", "J", "JJ", "C", "K", "T", "P", "H"]
JAMO_V = ["A", "AE", "YA", "YAE", "EO", "E", "YEO", "YE", "O", "WA", "WAE", "OE", "YO", "U", "WEO", "WE", "WI", "YU", "EU", "YI", "I"]
JAMO_T = ["", "G", "GG", "GS", "N", "NJ", "NH", "D", "L", "LG", "LM", "LB", "LS", "LT", "LP", "LH", "M", "B", "BS", "S", "SS", "NG", "J", "C", "K", "T", "P", "H"]

def hangul_syllable_name(codepoint: int) -> str:
	index = codepoint - HANGUL_S_BASE
	assert 0 <= index < HANGUL_S_COUNT

	l = index // HANGUL_N_COUNT
	v = (index % HANGUL_N_COUNT) // HANGUL_T_COUNT
	t = index % HANGUL_T_COUNT

	return "HANGUL SYLLABLE " + JAMO_L[l] + JAMO_V[v] + JAMO_T[t]

def cjk_ideograph_name(codepoint: int) -> str:
	return f"CJK UNIFIED IDEOGRAPH-{codepoint:04X}"

# Range names (`<CJK Ideograph, First>`) that expand to one derived name per codepoint.
def _range_naming(label: str) -> Optional[tuple[Callable[[int], str], NameSource]]:
	if label.startswith("Hangul Syllable"):
		return hangul_syllable_name, NameSource.HANGUL
	if label.startswith("CJK Ideograph"):
		return cjk_ideograph_name, NameSource.IDEOGRAPH
	return None

# Name table rows in source order: UnicodeData.txt names (with derived names for Hangul and CJK ranges), then aliases.
def encode_name_entries(unicode_data: list[UcdRow], name_aliases: list[UcdRow]) -> list[NameEntry]:
	entries = []

	rows = iter(unicode_data)
	for row in rows:
		name = row.fields[1]

		if not name.startswith("<"):
			entries.append(NameEntry(row.codepoint, name, NameSource.UNICODE_DATA))
			continue

		if not name.endswith(", First>"):
			# <control> and friends
			continue

		label = name[1:-len(", First>")]
		last = next(rows, None)
		if last is None or last.fields[1] != f"<{label}, Last>":
			raise UcdParseError(f"range <{label}, First> is not followed by its Last row", row.where)
		if last.codepoint < row.codepoint:
			raise UcdParseError(f"range <{label}> ends at U+{last.codepoint:04X} before it starts", last.where)

		naming = _range_naming(label)
		if naming is None:
			logger.debug("no derived names for range %s U+%04X..U+%04X", label, row.codepoint, last.codepoint)
			continue

		derive, source = naming
		if source == NameSource.HANGUL and not (HANGUL_S_BASE <= row.codepoint and last.codepoint < HANGUL_S_BASE + HANGUL_S_COUNT):
			raise UcdParseError(
				f"Hangul syllable range U+{row.codepoint:04X}..U+{last.codepoint:04X} is outside "
				f"U+{HANGUL_S_BASE:04X}..U+{HANGUL_S_BASE + HANGUL_S_COUNT - 1:04X}",
				row.where,
			)

		for codepoint in range(row.codepoint, last.codepoint + 1):
			entries.append(NameEntry(codepoint, derive(codepoint), source))

	for row in name_aliases:
		entries.append(NameEntry(row.codepoint, row.fields[1], NameSource.ALIAS))

	return entries

# Serializes records into the compact form described by `format.RecordField`.
# `intern` maps a string to its index in the table's string pool.
class RecordWriter:
	def __init__(self, intern: Callable[[str], int]) -> None:
		self.intern = intern

	def write(self, record: CharacterRecord) -> bytes:
		present = RecordField(0)
		payload = bytearray()

		def text(field: RecordField, value: str) -> None:
			nonlocal present
			if value != "":
				present |= field
				payload.extend(encode_varint(self.intern(value)))

		def optional(field: RecordField, value: Optional[int]) -> None:
			nonlocal present
			if value is not None:
				present |= field
				payload.extend(encode_varint(value))

		text(RecordField.NAME, record.name)
		text(RecordField.GENERAL_CATEGORY, record.general_category)
		optional(RecordField.COMBINING_CLASS, record.canonical_combining_class or None)
		text(RecordField.BIDI_CLASS, record.bidi_class)

		if record.decomposition is not None:
			present |= RecordField.DECOMPOSITION
			payload.extend(self._decomposition(record.decomposition))

		optional(RecordField.NUMERIC_DECIMAL, record.numeric_decimal)
		optional(RecordField.NUMERIC_DIGIT, record.numeric_digit)

		if record.numeric is not None:
			present |= RecordField.NUMERIC
			payload.extend(self._numeric(record.numeric))

		if record.mirrored:
			present |= RecordField.MIRRORED

		text(RecordField.UNICODE1_NAME, record.unicode1_name)
		text(RecordField.ISO_COMMENT, record.iso_comment)
		optional(RecordField.UPPERCASE, record.simple_uppercase)
		optional(RecordField.LOWERCASE, record.simple_lowercase)
		optional(RecordField.TITLECASE, record.simple_titlecase)

		return encode_varint(record.codepoint) + encode_varint(int(present)) + bytes(payload)

	# varint(tag discriminant + 1, or 0 for no tag), varint(length), then `length` codepoints
	def _decomposition(self, decomposition: Decomposition) -> bytes:
		out = bytearray()
		tag = 0 if decomposition.tag is None else DECOMPOSITION_TAGS.index(decomposition.tag) + 1
		out.extend(encode_varint(tag))
		out.extend(encode_varint(decomposition.length))
		for codepoint in decomposition.codepoints:
			out.extend(encode_varint(codepoint))
		return bytes(out)

	def _numeric(self, numeric: NumericType) -> bytes:
		if isinstance(numeric, Integer):
			return encode_varint(NUMERIC_INTEGER) + encode_zigzag(numeric.value)
		return encode_varint(NUMERIC_RATIONAL) + encode_zigzag(numeric.numerator) + encode_zigzag(numeric.denominator)

	# varint(count), then varint(string index), varint(label discriminant) per alias
	def write_aliases(self, aliases: list[NameAlias]) -> bytes:
		out = bytearray(encode_varint(len(aliases)))
		for alias in aliases:
			out.extend(encode_varint(self.intern(alias.alias)))
			out.extend(encode_varint(ALIAS_LABELS.index(alias.label)))
		return bytes(out)
