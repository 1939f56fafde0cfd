import logging
import threading

import pytest

from ucdbin.names import NameTable, merge_names
from ucdbin.records import NameEntry, NameSource, pack_name_key, unpack_name_key

def entry(codepoint: int, name: str, source: NameSource) -> NameEntry:
	return NameEntry(codepoint, name, source)

def test_packed_key_round_trip():
	key = pack_name_key(0x41, unicode_data = True)

	assert key == 0x41 | (1 << 33)
	assert unpack_name_key(key) == (0x41, True, False, False, False)

def test_packed_key_flags_are_independent():
	key = pack_name_key(0x10FFFF, alias = True, ideograph = True)

	assert unpack_name_key(key) == (0x10FFFF, False, True, False, True)
	assert NameEntry.from_key(key, "X").source == NameSource.ALIAS | NameSource.IDEOGRAPH
	assert NameEntry.from_key(key, "X").key == key

def test_packed_key_rejects_non_codepoints():
	with pytest.raises(ValueError):
		pack_name_key(0x110000)

def test_aliases_keep_row_order():
	names = merge_names([
		entry(0xFEFF, "ZERO WIDTH NO-BREAK SPACE", NameSource.UNICODE_DATA),
		entry(0xFEFF, "BYTE ORDER MARK", NameSource.ALIAS),
		entry(0xFEFF, "BOM", NameSource.ALIAS),
		entry(0xFEFF, "ZWNBSP", NameSource.ALIAS),
	])

	name = names["\ufeff"]
	assert name.name == "ZERO WIDTH NO-BREAK SPACE"
	assert name.aliases == ("BYTE ORDER MARK", "BOM", "ZWNBSP")
	assert name.codepoint == 0xFEFF
	assert name.character == "\ufeff"

def test_alias_only_character_has_no_primary_name():
	names = merge_names([
		entry(0x0000, "NULL", NameSource.ALIAS),
		entry(0x0000, "NUL", NameSource.ALIAS),
	])

	assert names["\x00"].name is None
	assert names["\x00"].aliases == ("NULL", "NUL")

def test_conflicting_primary_names_last_one_wins(caplog):
	with caplog.at_level(logging.WARNING, logger = "ucdbin.names"):
		names = merge_names([
			entry(0x41, "LATIN CAPITAL LETTER A", NameSource.UNICODE_DATA),
			entry(0x41, "LATIN LETTER A", NameSource.UNICODE_DATA),
		])

	assert names["A"].name == "LATIN LETTER A"
	assert "duplicate name for U+0041" in caplog.text

def test_repeated_identical_name_is_not_a_conflict(caplog):
	with caplog.at_level(logging.WARNING, logger = "ucdbin.names"):
		names = merge_names([
			entry(0x41, "LATIN CAPITAL LETTER A", NameSource.UNICODE_DATA),
			entry(0x41, "LATIN CAPITAL LETTER A", NameSource.UNICODE_DATA),
		])

	assert names["A"].name == "LATIN CAPITAL LETTER A"
	assert caplog.text == ""

# The flags of an aggregate come from whichever row created it; later rows for the same character
# do not add to them. Pinned as-is: changing this is a behaviour change, not a fix.
def test_flags_come_from_the_first_row_only():
	names = merge_names([
		entry(0x41, "LATIN CAPITAL LETTER A", NameSource.UNICODE_DATA),
		entry(0x41, "LATIN SMALL LETTER TURNED A", NameSource.ALIAS),
		entry(0x0000, "NULL", NameSource.ALIAS),
		entry(0x0000, "NULL CHARACTER", NameSource.UNICODE_DATA),
	])

	assert names["A"].source == NameSource.UNICODE_DATA
	assert names["A"].unicode_data and not names["A"].alias

	assert names["\x00"].source == NameSource.ALIAS
	assert names["\x00"].alias and not names["\x00"].unicode_data
	assert names["\x00"].name == "NULL CHARACTER"

def test_surrogates_are_skipped():
	names = merge_names([entry(0xD800, "SOMETHING", NameSource.UNICODE_DATA)])
	assert names == {}

def test_name_table_merges_once_across_threads():
	calls = []
	started = threading.Event()

	def entries():
		calls.append(1)
		started.wait(5)
		return [entry(0x41, "LATIN CAPITAL LETTER A", NameSource.UNICODE_DATA)]

	table = NameTable(entries)
	results = []

	threads = [threading.Thread(target = lambda: results.append(table.get("A"))) for _ in range(8)]
	for thread in threads:
		thread.start()
	started.set()
	for thread in threads:
		thread.join()

	assert len(calls) == 1
	assert len(results) == 8
	assert all(result is results[0] for result in results)
	assert results[0].name == "LATIN CAPITAL LETTER A"

def test_merged_names_are_read_only():
	table = NameTable(lambda: [entry(0x41, "LATIN CAPITAL LETTER A", NameSource.UNICODE_DATA)])

	with pytest.raises(TypeError):
		table.names["B"] = None
