import logging
import threading
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from .records import NameEntry, NameSource, UnicodeCharName, is_codepoint, is_surrogate

logger = logging.getLogger(__name__)

class _PendingName:
	def __init__(self, entry: NameEntry) -> None:
		self.codepoint = entry.codepoint
		self.name: Optional[str] = None
		self.aliases: list[str] = []
		# Taken from the entry that created this aggregate; later entries do not change it.
		self.source: NameSource = entry.source

	def freeze(self) -> UnicodeCharName:
		return UnicodeCharName(
			character = chr(self.codepoint),
			codepoint = self.codepoint,
			name = self.name,
			aliases = tuple(self.aliases),
			source = self.source,
		)

# Folds name table rows, in table order, into one aggregate per character.
# Aliases keep their row order. A character gets one primary name; if rows disagree, the last one wins.
def merge_names(entries: Iterable[NameEntry]) -> dict[str, UnicodeCharName]:
	pending: dict[str, _PendingName] = {}

	for entry in entries:
		if not is_codepoint(entry.codepoint) or is_surrogate(entry.codepoint):
			continue

		if logger.isEnabledFor(logging.DEBUG):
			logger.debug("merge U+%04X %r (%s)", entry.codepoint, entry.name, entry.source)

		character = chr(entry.codepoint)
		name = pending.get(character)
		if name is None:
			name = pending[character] = _PendingName(entry)

		if entry.alias:
			name.aliases.append(entry.name)
			continue

		if name.name is not None and name.name != entry.name:
			logger.warning("duplicate name for U+%04X: %r, existing: %r", entry.codepoint, entry.name, name.name)

		name.name = entry.name

	return {character: name.freeze() for character, name in pending.items()}

# The merged names of one table. The merge runs once, on first use, by whichever thread gets there
# first; threads arriving meanwhile wait for it. Afterwards reads take no lock.
class NameTable:
	def __init__(self, entries: Callable[[], Iterable[NameEntry]]) -> None:
		self._entries = entries
		self._lock = threading.Lock()
		self._names: Optional[Mapping[str, UnicodeCharName]] = None

	@property
	def names(self) -> Mapping[str, UnicodeCharName]:
		names = self._names
		if names is not None:
			return names

		with self._lock:
			if self._names is None:
				merged = merge_names(self._entries())
				logger.debug("merged names for %d characters", len(merged))
				self._names = MappingProxyType(merged)
			return self._names

	def get(self, character: str) -> Optional[UnicodeCharName]:
		return self.names.get(character)
