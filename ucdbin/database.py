from pathlib import Path
from typing import Optional, Tuple, Union

from .index import UcdIndex
from .names import NameTable
from .records import CharacterRecord, NameAlias, UnicodeCharName, is_codepoint

# One compiled table and the queries over it.
class Database:
	def __init__(self, data: bytes) -> None:
		self.index = UcdIndex(data)
		self.names = NameTable(self.index.name_entries)

	@classmethod
	def from_file(cls, path: Path) -> "Database":
		with open(path, "rb") as file:
			return cls(file.read())

	# The UnicodeData.txt record for `codepoint`, or None if it has none.
	def lookup(self, codepoint: int) -> Optional[CharacterRecord]:
		return self.index.record(codepoint)

	# The NameAliases.txt rows for `codepoint`, in file order. Empty if there are none.
	def lookup_aliases(self, codepoint: int) -> Tuple[NameAlias, ...]:
		return self.index.aliases(codepoint)

	# The merged name and aliases of `character`, or None if it has neither.
	# The first call merges the whole name table.
	def lookup_name(self, character: Union[str, int]) -> Optional[UnicodeCharName]:
		if isinstance(character, int):
			if not is_codepoint(character):
				return None
			character = chr(character)

		if len(character) != 1:
			return None

		return self.names.get(character)

	# The codepoint whose name or alias is exactly `name`.
	def lookup_codepoint(self, name: str) -> Optional[int]:
		entry = self.index.name_entry(name)
		if entry is None:
			return None
		return entry.codepoint
