import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .errors import UcdParseError
from .records import CODEPOINT_LIMIT

logger = logging.getLogger(__name__)

UNICODE_DATA_FILE = "UnicodeData.txt"
NAME_ALIASES_FILE = "NameAliases.txt"

UNICODE_DATA_COLUMNS = 15
NAME_ALIASES_COLUMNS = 3

# One data line of a UCD file, split into its positional fields.
@dataclass(frozen = True)
class UcdRow:
	file: str
	line: int
	codepoint: int
	fields: tuple[str, ...]

	@property
	def where(self) -> str:
		return f"{self.file}:{self.line}"

HEX_DIGITS = frozenset("0123456789ABCDEFabcdef")

def parse_codepoint(text: str, where: str) -> int:
	if not 4 <= len(text) <= 6 or not HEX_DIGITS.issuperset(text):
		raise UcdParseError(f"malformed codepoint {text!r}", where)

	codepoint = int(text, 16)
	if codepoint >= CODEPOINT_LIMIT:
		raise UcdParseError(f"codepoint {text} is out of range", where)

	return codepoint

# Yields the rows of one UCD file in file order. Comments run from `#` to the end of the line; blank lines are skipped.
def read_rows(path: Path, columns: int) -> Iterator[UcdRow]:
	try:
		file = open(path, "rb")
	except OSError as e:
		raise UcdParseError(f"cannot read UCD file: {e.strerror}", str(path)) from e

	with file:
		for line_number, raw_line in enumerate(file, 1):
			where = f"{path.name}:{line_number}"

			try:
				line = raw_line.decode("utf-8")
			except UnicodeDecodeError as e:
				raise UcdParseError(f"invalid UTF-8 at byte {e.start}", where) from None

			line = line.split("#", 1)[0].strip()
			if not line:
				continue

			fields = tuple(field.strip() for field in line.split(";"))

			if len(fields) != columns:
				raise UcdParseError(f"expected {columns} fields, found {len(fields)}", where)

			yield UcdRow(path.name, line_number, parse_codepoint(fields[0], where), fields)

# Groups rows by codepoint; the result is ordered by codepoint, and rows for one codepoint keep their file order.
def group_by_codepoint(rows: list[UcdRow]) -> dict[int, list[UcdRow]]:
	grouped: defaultdict[int, list[UcdRow]] = defaultdict(list)
	for row in rows:
		grouped[row.codepoint].append(row)

	return dict(sorted(grouped.items()))

@dataclass
class UcdSources:
	unicode_data: list[UcdRow]
	name_aliases: list[UcdRow]

def load_ucd(ucd_dir: Path) -> UcdSources:
	if not ucd_dir.is_dir():
		raise UcdParseError("not a directory", str(ucd_dir))

	unicode_data = list(read_rows(ucd_dir / UNICODE_DATA_FILE, UNICODE_DATA_COLUMNS))
	name_aliases = list(read_rows(ucd_dir / NAME_ALIASES_FILE, NAME_ALIASES_COLUMNS))

	logger.debug("read %d %s rows and %d %s rows", len(unicode_data), UNICODE_DATA_FILE, len(name_aliases), NAME_ALIASES_FILE)

	return UcdSources(unicode_data, name_aliases)
