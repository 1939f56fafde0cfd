import pytest

from ucdbin.encode import (
	encode_character_record,
	encode_character_records,
	encode_name_aliases,
	encode_name_entries,
	hangul_syllable_name,
	parse_decomposition,
	parse_numeric,
)
from ucdbin.errors import UcdBuildError, UcdParseError
from ucdbin.records import (
	Decomposition,
	DecompositionTag,
	Integer,
	NameAliasLabel,
	NameSource,
	Rational,
)
from ucdbin.ucd import NAME_ALIASES_COLUMNS, UNICODE_DATA_COLUMNS, UcdRow, load_ucd, read_rows

def row(line: str) -> UcdRow:
	fields = tuple(line.split(";"))
	return UcdRow("UnicodeData.txt", 1, int(fields[0], 16), fields)

def test_plain_letter():
	record = encode_character_record(row("0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;N;;;;;"))

	assert record.codepoint == 0x41
	assert record.name == "LATIN CAPITAL LETTER A"
	assert record.general_category == "Lu"
	assert record.canonical_combining_class == 0
	assert record.bidi_class == "L"
	assert record.mirrored is False
	assert record.numeric is None
	assert record.simple_lowercase is None

def test_missing_decomposition_is_elided():
	record = encode_character_record(row("0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;N;;;;;"))

	assert record.decomposition is None

	effective = record.effective_decomposition()
	assert effective.tag is None
	assert effective.length == 1
	assert effective.mapping[0] == 0x41
	assert effective.mapping[1:] == (0,) * 17

def test_identity_decomposition_is_elided():
	assert parse_decomposition(0x41, "0041", "test:1") is None

def test_tagged_decomposition():
	decomposition = parse_decomposition(0xBC, "<fraction> 0031 2044 0034", "test:1")

	assert decomposition.tag is DecompositionTag.fraction
	assert decomposition.length == 3
	assert decomposition.codepoints == (0x31, 0x2044, 0x34)
	assert len(decomposition.mapping) == 18

def test_tag_spellings_follow_the_database():
	decomposition = parse_decomposition(0xA0, "<noBreak> 0020", "test:1")
	assert decomposition.tag is DecompositionTag.no_break

	decomposition = parse_decomposition(0xB2, "<super> 0032", "test:1")
	assert decomposition.tag is DecompositionTag.superscript

def test_singleton_decomposition_to_another_codepoint_is_kept():
	decomposition = parse_decomposition(0x212B, "00C5", "test:1")
	assert decomposition == Decomposition.from_codepoints(None, (0xC5,))

def test_unknown_tag_is_fatal():
	with pytest.raises(UcdParseError, match = "unknown decomposition tag <bogus>"):
		parse_decomposition(0x41, "<bogus> 0041", "test:1")

def test_decomposition_capacity_is_enforced():
	with pytest.raises(UcdBuildError, match = "exceeds capacity 18"):
		parse_decomposition(0xFDFA, " ".join(["0041"] * 19), "test:1")

def test_display_stops_at_first_zero():
	decomposition = Decomposition.from_codepoints(None, (0x41, 0x300))
	assert decomposition.display() == (0x41, 0x300)

	full = Decomposition.from_codepoints(DecompositionTag.isolated, tuple(range(1, 19)))
	assert full.display() == tuple(range(1, 19))

def test_numeric_values():
	assert parse_numeric("1/4", "test:1") == Rational(1, 4)
	assert parse_numeric("5", "test:1") == Integer(5)
	assert parse_numeric("-1/2", "test:1") == Rational(-1, 2)
	assert parse_numeric("1000000000000", "test:1") == Integer(1_000_000_000_000)
	assert parse_numeric("", "test:1") is None

@pytest.mark.parametrize("text", ["1/2/3", "1/0", "1_000", "\u0663", "1/-2", "0x10"])
def test_malformed_numeric_values_are_fatal(text):
	with pytest.raises(UcdParseError, match = "malformed numeric value"):
		parse_numeric(text, "test:1")

def test_digit_fields():
	record = encode_character_record(row("0035;DIGIT FIVE;Nd;0;EN;;5;5;5;N;;;;;"))

	assert record.numeric_decimal == 5
	assert record.numeric_digit == 5
	assert record.numeric == Integer(5)

def test_case_mappings_distinguish_absent_from_zero():
	record = encode_character_record(row("0061;LATIN SMALL LETTER A;Ll;0;L;;;;;N;;;0041;;0041"))
	assert record.simple_uppercase == 0x41
	assert record.simple_lowercase is None
	assert record.simple_titlecase == 0x41

	record = encode_character_record(row("0001;<control>;Cc;0;BN;;;;;N;;;0000;;"))
	assert record.simple_uppercase == 0

def test_invalid_fields_are_fatal():
	with pytest.raises(UcdParseError, match = "Bidi_Mirrored"):
		encode_character_record(row("0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;X;;;;;"))

	with pytest.raises(UcdParseError, match = "0..255"):
		encode_character_record(row("0041;LATIN CAPITAL LETTER A;Lu;256;L;;;;;N;;;;;"))

	with pytest.raises(UcdParseError, match = "0..255"):
		encode_character_record(row("00B2;SUPERSCRIPT TWO;No;\u00b2;EN;<super> 0032;;2;2;N;SUPERSCRIPT DIGIT TWO;;;;"))

	with pytest.raises(UcdParseError, match = "0..9"):
		encode_character_record(row("0662;ARABIC-INDIC DIGIT TWO;Nd;0;AN;;\u0662;2;2;N;;;;;"))

def test_more_than_one_row_per_codepoint_is_fatal():
	rows = [
		row("0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;N;;;;;"),
		row("0041;LATIN CAPITAL LETTER A AGAIN;Lu;0;L;;;;;N;;;;;"),
	]

	with pytest.raises(UcdBuildError, match = "U\\+0041 has 2 UnicodeData.txt rows"):
		encode_character_records(rows)

def test_records_are_ordered_by_codepoint():
	rows = [
		row("0061;LATIN SMALL LETTER A;Ll;0;L;;;;;N;;;0041;;0041"),
		row("0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;N;;;;0061;"),
	]
	assert [record.codepoint for record in encode_character_records(rows)] == [0x41, 0x61]

def test_name_aliases_group_in_file_order(ucd_dir):
	aliases = encode_name_aliases(list(read_rows(ucd_dir / "NameAliases.txt", NAME_ALIASES_COLUMNS)))

	assert [alias.alias for alias in aliases[0xFEFF]] == ["BYTE ORDER MARK", "BOM", "ZWNBSP"]
	assert aliases[0x41][0].label is NameAliasLabel.correction

def test_unknown_alias_label_is_fatal(make_ucd):
	ucd_dir = make_ucd([], ["0041;SOMETHING;nickname"])
	rows = list(read_rows(ucd_dir / "NameAliases.txt", NAME_ALIASES_COLUMNS))

	with pytest.raises(UcdParseError, match = "unknown alias label 'nickname'"):
		encode_name_aliases(rows)

@pytest.mark.parametrize("codepoint, name", [
	(0xAC00, "HANGUL SYLLABLE GA"),
	(0xAC01, "HANGUL SYLLABLE GAG"),
	(0xD4DB, "HANGUL SYLLABLE PWILH"),
	(0xD7A3, "HANGUL SYLLABLE HIH"),
])
def test_hangul_syllable_names(codepoint, name):
	assert hangul_syllable_name(codepoint) == name

def test_name_entries(ucd_dir):
	sources = load_ucd(ucd_dir)
	entries = encode_name_entries(sources.unicode_data, sources.name_aliases)

	by_codepoint = {}
	for entry in entries:
		by_codepoint.setdefault(entry.codepoint, []).append(entry)

	assert [entry.source for entry in by_codepoint[0x41]] == [NameSource.UNICODE_DATA, NameSource.ALIAS]
	assert [entry.name for entry in by_codepoint[0x0000]] == ["NULL", "NUL"]

	assert [entry.name for entry in entries if entry.source == NameSource.IDEOGRAPH] == [
		"CJK UNIFIED IDEOGRAPH-4E00",
		"CJK UNIFIED IDEOGRAPH-4E01",
		"CJK UNIFIED IDEOGRAPH-4E02",
	]
	assert [entry.name for entry in entries if entry.source == NameSource.HANGUL] == [
		"HANGUL SYLLABLE GA",
		"HANGUL SYLLABLE GAG",
		"HANGUL SYLLABLE GAGG",
		"HANGUL SYLLABLE GAGS",
	]

	# Surrogates and controls have no names.
	assert 0xD800 not in by_codepoint
	assert all(entry.alias for entry in by_codepoint[0x0001])

	# All UnicodeData.txt names come before the first alias.
	sources_in_order = [entry.source for entry in entries]
	assert sources_in_order.index(NameSource.ALIAS) == len(entries) - len(sources.name_aliases)

def test_unpaired_range_is_fatal(make_ucd):
	ucd_dir = make_ucd(["4E00;<CJK Ideograph, First>;Lo;0;L;;;;;N;;;;;"])
	rows = list(read_rows(ucd_dir / "UnicodeData.txt", UNICODE_DATA_COLUMNS))

	with pytest.raises(UcdParseError, match = "not followed by its Last row"):
		encode_name_entries(rows, [])

def test_backwards_range_is_fatal(make_ucd):
	ucd_dir = make_ucd([
		"4E02;<CJK Ideograph, First>;Lo;0;L;;;;;N;;;;;",
		"4E00;<CJK Ideograph, Last>;Lo;0;L;;;;;N;;;;;",
	])
	rows = list(read_rows(ucd_dir / "UnicodeData.txt", UNICODE_DATA_COLUMNS))

	with pytest.raises(UcdParseError, match = "^UnicodeData.txt:2: range <CJK Ideograph> ends at U\\+4E00"):
		encode_name_entries(rows, [])

def test_hangul_range_outside_the_syllable_block_is_fatal(make_ucd):
	ucd_dir = make_ucd([
		"0041;<Hangul Syllable, First>;Lo;0;L;;;;;N;;;;;",
		"0042;<Hangul Syllable, Last>;Lo;0;L;;;;;N;;;;;",
	])
	rows = list(read_rows(ucd_dir / "UnicodeData.txt", UNICODE_DATA_COLUMNS))

	with pytest.raises(UcdParseError, match = "^UnicodeData.txt:1: Hangul syllable range U\\+0041..U\\+0042 is outside U\\+AC00..U\\+D7A3"):
		encode_name_entries(rows, [])
