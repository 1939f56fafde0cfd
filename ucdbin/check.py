import argparse, logging, sys
from typing import TextIO

from . import default_database
from .database import Database
from .errors import UcdError
from .records import CharacterRecord, Integer, NumericType

def parse_args(argv = None):
	parser = argparse.ArgumentParser(
		prog = 'ucd-check',
		description = "Dump a UCD table, either a binary blob written by `ucd-compile --format binary` or the embedded one.",
	)
	parser.add_argument(
		'filename',
		nargs = '?',
		type = argparse.FileType('rb'),
		help = "binary table blob (default: the table embedded in ucdbin)",
	)
	parser.add_argument(
		'-c', '--codepoint',
		type = lambda text: int(text.removeprefix("U+"), 16),
		help = "only show this codepoint (hex)",
	)
	parser.add_argument(
		'--names',
		action = 'store_true',
		help = "show merged names instead of records",
	)
	parser.add_argument(
		'-v', '--verbose',
		action = 'store_true',
	)

	return parser.parse_args(argv)

def format_numeric(numeric: NumericType) -> str:
	if isinstance(numeric, Integer):
		return str(numeric.value)
	return f"{numeric.numerator}/{numeric.denominator}"

def format_record(record: CharacterRecord) -> str:
	parts = [f"gc: {record.general_category}", f"ccc: {record.canonical_combining_class}", f"bidi: {record.bidi_class}"]

	if record.decomposition is not None:
		tag = f"<{record.decomposition.tag}> " if record.decomposition.tag is not None else ""
		parts.append("decomposition: " + tag + " ".join(f"{codepoint:04X}" for codepoint in record.decomposition.display()))
	if record.numeric is not None:
		parts.append(f"numeric: {format_numeric(record.numeric)}")
	if record.mirrored:
		parts.append("mirrored")
	for label, mapping in (("upper", record.simple_uppercase), ("lower", record.simple_lowercase), ("title", record.simple_titlecase)):
		if mapping is not None:
			parts.append(f"{label}: U+{mapping:04X}")

	return f"U+{record.codepoint:04X} {record.name!r} ({', '.join(parts)})"

def dump_records(database: Database, codepoints, out: TextIO) -> None:
	for codepoint in codepoints:
		record = database.lookup(codepoint)
		if record is None:
			print(f"U+{codepoint:04X} no record", file = out)
			continue

		print(format_record(record), file = out)
		for alias in database.lookup_aliases(codepoint):
			print(f"    alias {alias.alias!r} ({alias.label})", file = out)

def dump_names(database: Database, codepoints, out: TextIO) -> None:
	for codepoint in codepoints:
		name = database.lookup_name(codepoint)
		if name is None:
			print(f"U+{codepoint:04X} no name", file = out)
			continue

		flags = [flag for flag in ("unicode_data", "alias", "hangul", "ideograph") if getattr(name, flag)]
		print(f"U+{codepoint:04X} {name.name!r} aliases: {list(name.aliases)} (from: {', '.join(flags)})", file = out)

def main(argv = None) -> int:
	args = parse_args(argv)

	logging.basicConfig(level = logging.DEBUG if args.verbose else logging.INFO)

	try:
		if args.filename is not None:
			with args.filename:
				database = Database(args.filename.read())
		else:
			database = default_database()
	except UcdError as e:
		print(f"error: {e}", file = sys.stderr)
		return 1

	if args.codepoint is not None:
		codepoints = [args.codepoint]
	elif args.names:
		codepoints = sorted({entry.codepoint for entry in database.index.name_entries()})
	else:
		codepoints = database.index.codepoints()

	if args.names:
		dump_names(database, codepoints, sys.stdout)
	else:
		dump_records(database, codepoints, sys.stdout)

	return 0

if __name__ == '__main__':
	sys.exit(main())
