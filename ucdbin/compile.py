import argparse, logging, sys, time
from pathlib import Path

from .emit import build_artifact, write_artifact
from .encode import encode_character_records, encode_name_aliases, encode_name_entries
from .errors import UcdError
from .fetch import fetch_ucd
from .ucd import load_ucd

class TaskStatusReporter:
	def __init__(self, name):
		self.name = name
		self.start_time = time.time()

	def complete(self, status = "done"):
		duration_seconds = time.time() - self.start_time
		print(f"{status} in {duration_seconds:.3}s", file = sys.stderr)

	def __enter__(self):
		print(self.name + "...", file = sys.stderr, end = "")
		sys.stderr.flush()

	def __exit__(self, type_, _value, _traceback):
		self.complete("failed" if type_ is not None else "done")

class StatusReporter:
	def __init__(self, quiet: bool = False):
		self.quiet = quiet

	def start(self, name: str) -> TaskStatusReporter:
		if self.quiet:
			return _QuietTask()
		return TaskStatusReporter(name)

class _QuietTask:
	def __enter__(self):
		pass

	def __exit__(self, _type, _value, _traceback):
		pass

# Runs the whole build and returns the table blob. Raises `UcdError` on any problem with the sources.
def compile_tables(ucd_dir: Path, reporter: StatusReporter = None) -> bytes:
	reporter = reporter or StatusReporter(quiet = True)

	with reporter.start("Reading UCD files"):
		sources = load_ucd(ucd_dir)

	with reporter.start("Encoding records"):
		records = encode_character_records(sources.unicode_data)
		aliases = encode_name_aliases(sources.name_aliases)

	with reporter.start("Deriving name table"):
		names = encode_name_entries(sources.unicode_data, sources.name_aliases)

	with reporter.start("Building perfect hash tables"):
		data = build_artifact(records, aliases, names)

	logging.getLogger(__name__).info("%d records, %d aliased codepoints, %d names", len(records), len(aliases), len(names))

	return data

def parse_args(argv = None):
	parser = argparse.ArgumentParser(
		prog = 'ucd-compile',
		description = "Compile UnicodeData.txt and NameAliases.txt into a statically addressable lookup table",
	)
	parser.add_argument(
		'ucd_dir',
		type = Path,
		help = "directory holding UnicodeData.txt and NameAliases.txt",
	)
	parser.add_argument(
		'-o', '--out',
		required = True,
		type = Path,
	)
	parser.add_argument(
		'--format',
		choices = ["python", "binary"],
		help = "python embeds the table in a module; binary writes the raw blob (default: from the output suffix)",
	)
	parser.add_argument(
		'--fetch',
		metavar = "VERSION",
		help = "download the UCD files of this Unicode version into ucd_dir first",
	)
	parser.add_argument(
		'-v', '--verbose',
		action = 'store_true',
	)

	return parser.parse_args(argv)

def main(argv = None) -> int:
	args = parse_args(argv)

	logging.basicConfig(level = logging.DEBUG if args.verbose else logging.INFO, format = "%(levelname)s %(name)s: %(message)s")

	reporter = StatusReporter()
	python = args.format == "python" or (args.format is None and args.out.suffix == ".py")

	try:
		if args.fetch is not None:
			with reporter.start(f"Fetching Unicode {args.fetch}"):
				fetch_ucd(args.fetch, args.ucd_dir)

		data = compile_tables(args.ucd_dir, reporter)

		with reporter.start("Writing to file"):
			write_artifact(args.out, data, python)
	except UcdError as e:
		print(f"error: {e}", file = sys.stderr)
		return 1

	print(len(data) / 1024, "KiB", file = sys.stderr)
	return 0

if __name__ == "__main__":
	sys.exit(main())
