import io
import os
import struct
from pathlib import Path
from typing import Iterable

from .compress import StringCompressor
from .encode import ALIAS_LABELS, DECOMPOSITION_TAGS, RecordWriter
from .errors import UcdBuildError
from .format import ENTRY_FORMAT, HEADER_FORMAT, MAGIC, NAME_ROW_FORMAT, SECTIONS, VERSION
from .phf import build_hash_index, codepoint_key, text_key
from .records import CharacterRecord, NameAlias, NameEntry
from .util import align_file_to_u32, encode_var_ascii

# Bytes literal line width in generated modules.
PYTHON_CHUNK_SIZE = 64

def _record_texts(record: CharacterRecord) -> Iterable[str]:
	return (record.name, record.general_category, record.bidi_class, record.unicode1_name, record.iso_comment)

def _duplicates(names: Iterable[str]) -> list[str]:
	seen = set()
	duplicates = []
	for name in names:
		if name in seen and name not in duplicates:
			duplicates.append(name)
		seen.add(name)
	return duplicates

def build_artifact(records: list[CharacterRecord], aliases: dict[int, list[NameAlias]], names: list[NameEntry]) -> bytes:
	duplicates = _duplicates(entry.name for entry in names)
	if duplicates:
		raise UcdBuildError(f"name table has duplicate names: {', '.join(duplicates[:5])}")

	compressor = StringCompressor()

	for record in records:
		for text in _record_texts(record):
			compressor.add(text)
	for codepoint_aliases in aliases.values():
		for alias in codepoint_aliases:
			compressor.add(alias.alias)
	for entry in names:
		compressor.add(entry.name)

	writer = RecordWriter(compressor.index)

	out = io.BytesIO()
	sections: dict[str, tuple[int, int]] = {}

	def write_section(name: str, payload: bytes) -> None:
		align_file_to_u32(out)
		sections[name] = (out.tell(), len(payload))
		out.write(payload)

	# Overwritten later with correct data.
	out.write(struct.pack(HEADER_FORMAT, b"", 0, *([0] * 2 * len(SECTIONS))))

	record_blob = bytearray()
	record_entries = bytearray()
	for record in records:
		record_entries.extend(struct.pack(ENTRY_FORMAT, record.codepoint, len(record_blob)))
		record_blob.extend(writer.write(record))

	write_section("records", record_blob)
	write_section("record_entries", record_entries)
	write_section("record_index", build_hash_index([codepoint_key(record.codepoint) for record in records]).to_bytes())

	alias_blob = bytearray()
	alias_entries = bytearray()
	for codepoint, codepoint_aliases in aliases.items():
		alias_entries.extend(struct.pack(ENTRY_FORMAT, codepoint, len(alias_blob)))
		alias_blob.extend(writer.write_aliases(codepoint_aliases))

	write_section("aliases", alias_blob)
	write_section("alias_entries", alias_entries)
	write_section("alias_index", build_hash_index([codepoint_key(codepoint) for codepoint in aliases]).to_bytes())

	name_rows = bytearray()
	for entry in names:
		name_rows.extend(struct.pack(NAME_ROW_FORMAT, entry.key, compressor.index(entry.name)))

	write_section("names", name_rows)
	write_section("name_index", build_hash_index([text_key(entry.name) for entry in names]).to_bytes())

	write_section("strings", bytes(compressor.prefix_trie_bytes))
	write_section("decomposition_tags", b"".join(encode_var_ascii(tag.value.encode("ascii")) for tag in DECOMPOSITION_TAGS))
	write_section("alias_labels", b"".join(encode_var_ascii(label.value.encode("ascii")) for label in ALIAS_LABELS))

	align_file_to_u32(out)

	header = []
	for name in SECTIONS:
		header.extend(sections[name])

	out.seek(0)
	out.write(struct.pack(HEADER_FORMAT, MAGIC, VERSION, *header))

	return out.getvalue()

# A Python module embedding `data` as a bytes literal, so importing it is all it takes to load the table.
def render_python_module(data: bytes) -> str:
	lines = [
		"# Generated by ucd-compile. Do not edit.\n",
		"\n",
		"DATA = (\n",
	]

	for start in range(0, len(data), PYTHON_CHUNK_SIZE):
		lines.append(f"\t{data[start:start + PYTHON_CHUNK_SIZE]!r}\n")

	lines.append(")\n")
	return "".join(lines)

# Writes next to `path` and renames over it, so a failed build never leaves a partial file behind.
def write_artifact(path: Path, data: bytes, python: bool) -> None:
	payload = render_python_module(data).encode("ascii") if python else data

	temporary = path.with_name(path.name + ".tmp")
	try:
		path.parent.mkdir(parents = True, exist_ok = True)
		with open(temporary, "wb") as file:
			file.write(payload)
		os.replace(temporary, path)
	except OSError as e:
		raise UcdBuildError(f"cannot write {path}: {e.strerror}") from e
	finally:
		if temporary.exists():
			temporary.unlink()
