from dataclasses import dataclass
from enum import IntFlag, StrEnum
from typing import Optional, Tuple, Union

CODEPOINT_LIMIT = 0x110000

# The longest decomposition in UnicodeData.txt (U+FDFA) has 18 codepoints.
DECOMPOSITION_CAPACITY = 18

def is_codepoint(value: int) -> bool:
	return 0 <= value < CODEPOINT_LIMIT

def is_surrogate(codepoint: int) -> bool:
	return 0xD800 <= codepoint <= 0xDFFF

# Values are spelled exactly as in the `<tag>` prefix of a decomposition field.
class DecompositionTag(StrEnum):
	font = "font"
	no_break = "noBreak"
	initial = "initial"
	medial = "medial"
	final = "final"
	isolated = "isolated"
	circle = "circle"
	superscript = "super"
	subscript = "sub"
	vertical = "vertical"
	wide = "wide"
	narrow = "narrow"
	small = "small"
	square = "square"
	fraction = "fraction"
	compat = "compat"

class NameAliasLabel(StrEnum):
	correction = "correction"
	control = "control"
	alternate = "alternate"
	figment = "figment"
	abbreviation = "abbreviation"

@dataclass(frozen = True)
class Integer:
	value: int

@dataclass(frozen = True)
class Rational:
	numerator: int
	denominator: int

NumericType = Union[Integer, Rational]

@dataclass(frozen = True)
class Decomposition:
	tag: Optional[DecompositionTag]
	# Authoritative number of codepoints in `mapping`.
	length: int
	# Always DECOMPOSITION_CAPACITY entries; positions at or past `length` are 0.
	mapping: Tuple[int, ...]

	def __post_init__(self) -> None:
		assert len(self.mapping) == DECOMPOSITION_CAPACITY
		assert 0 <= self.length <= DECOMPOSITION_CAPACITY

	@classmethod
	def from_codepoints(cls, tag: Optional[DecompositionTag], codepoints: Tuple[int, ...]) -> "Decomposition":
		padding = (0,) * (DECOMPOSITION_CAPACITY - len(codepoints))
		return cls(tag, len(codepoints), tuple(codepoints) + padding)

	# What a row without a decomposition field maps to: just the character itself.
	@classmethod
	def identity(cls, codepoint: int) -> "Decomposition":
		return cls.from_codepoints(None, (codepoint,))

	def is_identity(self, codepoint: int) -> bool:
		return self.tag is None and self.mapping == Decomposition.identity(codepoint).mapping

	@property
	def codepoints(self) -> Tuple[int, ...]:
		return self.mapping[:self.length]

	# For display only; U+0000 never appears inside a real mapping.
	def display(self) -> Tuple[int, ...]:
		if 0 in self.mapping:
			return self.mapping[:self.mapping.index(0)]
		return self.mapping

@dataclass(frozen = True)
class CharacterRecord:
	codepoint: int
	name: str
	general_category: str
	canonical_combining_class: int
	bidi_class: str
	# None stands for the identity mapping, see `effective_decomposition`.
	decomposition: Optional[Decomposition]
	numeric_decimal: Optional[int]
	numeric_digit: Optional[int]
	numeric: Optional[NumericType]
	mirrored: bool
	unicode1_name: str
	iso_comment: str
	simple_uppercase: Optional[int]
	simple_lowercase: Optional[int]
	simple_titlecase: Optional[int]

	def effective_decomposition(self) -> Decomposition:
		if self.decomposition is None:
			return Decomposition.identity(self.codepoint)
		return self.decomposition

@dataclass(frozen = True)
class NameAlias:
	codepoint: int
	alias: str
	label: NameAliasLabel

# Name table keys: the low 33 bits hold the codepoint, the next four record where the name came from.
CODEPOINT_MASK = (1 << 33) - 1

class NameSource(IntFlag):
	UNICODE_DATA = 1 << 33
	ALIAS = 1 << 34
	HANGUL = 1 << 35
	IDEOGRAPH = 1 << 36

def pack_name_key(codepoint: int, unicode_data: bool = False, alias: bool = False, hangul: bool = False, ideograph: bool = False) -> int:
	if not is_codepoint(codepoint):
		raise ValueError(f"not a codepoint: {codepoint:#x}")

	source = NameSource(0)
	if unicode_data:
		source |= NameSource.UNICODE_DATA
	if alias:
		source |= NameSource.ALIAS
	if hangul:
		source |= NameSource.HANGUL
	if ideograph:
		source |= NameSource.IDEOGRAPH

	return codepoint | int(source)

def unpack_name_key(key: int) -> Tuple[int, bool, bool, bool, bool]:
	return (
		key & CODEPOINT_MASK,
		(key & NameSource.UNICODE_DATA) != 0,
		(key & NameSource.ALIAS) != 0,
		(key & NameSource.HANGUL) != 0,
		(key & NameSource.IDEOGRAPH) != 0,
	)

# One row of the name table, decoded.
@dataclass(frozen = True)
class NameEntry:
	codepoint: int
	name: str
	source: NameSource

	@classmethod
	def from_key(cls, key: int, name: str) -> "NameEntry":
		return cls(key & CODEPOINT_MASK, name, NameSource(key & ~CODEPOINT_MASK))

	@property
	def key(self) -> int:
		return self.codepoint | int(self.source)

	@property
	def alias(self) -> bool:
		return NameSource.ALIAS in self.source

# Everything known about the name of one character, merged from all name table rows.
@dataclass(frozen = True)
class UnicodeCharName:
	character: str
	codepoint: int
	# Some characters only have aliases, e.g. the controls.
	name: Optional[str]
	aliases: Tuple[str, ...]
	# Flags of the first row seen for this character.
	source: NameSource

	@property
	def unicode_data(self) -> bool:
		return NameSource.UNICODE_DATA in self.source

	@property
	def alias(self) -> bool:
		return NameSource.ALIAS in self.source

	@property
	def hangul(self) -> bool:
		return NameSource.HANGUL in self.source

	@property
	def ideograph(self) -> bool:
		return NameSource.IDEOGRAPH in self.source
