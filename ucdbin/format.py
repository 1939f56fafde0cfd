from enum import IntFlag

MAGIC = b"UCDTABLE"
VERSION = 1

# Sections of a table blob, in header order. Each gets an (offset, size) pair in the header.
SECTIONS = (
	# Prefix trie of every string in the table, see `compress.StringCompressor`.
	"strings",
	# var_ascii spellings of `DecompositionTag`, indexed by discriminant.
	"decomposition_tags",
	# var_ascii spellings of `NameAliasLabel`, indexed by discriminant.
	"alias_labels",
	"records",
	"record_entries",
	"record_index",
	"aliases",
	"alias_entries",
	"alias_index",
	# NAME_ROW_FORMAT rows in source order.
	"names",
	"name_index",
)

HEADER_FORMAT = "<8sI" + "II" * len(SECTIONS)

# (codepoint, offset into the records/aliases section)
ENTRY_FORMAT = "<II"
# (packed name key, string index)
NAME_ROW_FORMAT = "<QI"

# A record is varint(codepoint), varint(present fields), then one payload per present field in this order.
# Fields holding their default value are left out.
class RecordField(IntFlag):
	NAME = 1 << 0
	GENERAL_CATEGORY = 1 << 1
	COMBINING_CLASS = 1 << 2
	BIDI_CLASS = 1 << 3
	DECOMPOSITION = 1 << 4
	NUMERIC_DECIMAL = 1 << 5
	NUMERIC_DIGIT = 1 << 6
	NUMERIC = 1 << 7
	# Flag only, no payload.
	MIRRORED = 1 << 8
	UNICODE1_NAME = 1 << 9
	ISO_COMMENT = 1 << 10
	UPPERCASE = 1 << 11
	LOWERCASE = 1 << 12
	TITLECASE = 1 << 13

NUMERIC_INTEGER = 0
NUMERIC_RATIONAL = 1
