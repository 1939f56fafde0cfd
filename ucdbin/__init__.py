# Unicode Character Database lookups over a table compiled ahead of time. The table is produced by
# `ucd-compile` from `UnicodeData.txt` and `NameAliases.txt` and embedded in `ucdbin/_data.py`;
# nothing here reads or parses UCD files at runtime.

import importlib
import threading
from typing import Optional, Tuple, Union

from .database import Database
from .errors import ArtifactError, UcdBuildError, UcdError, UcdFetchError, UcdParseError
from .records import (
	CharacterRecord,
	Decomposition,
	DecompositionTag,
	Integer,
	NameAlias,
	NameAliasLabel,
	NameEntry,
	NameSource,
	NumericType,
	Rational,
	UnicodeCharName,
	pack_name_key,
	unpack_name_key,
)

__all__ = [
	"ArtifactError",
	"CharacterRecord",
	"Database",
	"Decomposition",
	"DecompositionTag",
	"Integer",
	"NameAlias",
	"NameAliasLabel",
	"NameEntry",
	"NameSource",
	"NumericType",
	"Rational",
	"UcdBuildError",
	"UcdError",
	"UcdFetchError",
	"UcdParseError",
	"UnicodeCharName",
	"default_database",
	"lookup",
	"lookup_aliases",
	"lookup_codepoint",
	"lookup_name",
	"pack_name_key",
	"unpack_name_key",
]

_DATA_MODULE = "ucdbin._data"

_default: Optional[Database] = None
_default_lock = threading.Lock()

# The database over the embedded table, opened on first use.
def default_database() -> Database:
	global _default

	database = _default
	if database is not None:
		return database

	with _default_lock:
		if _default is None:
			try:
				module = importlib.import_module(_DATA_MODULE)
			except ModuleNotFoundError as e:
				if e.name != _DATA_MODULE:
					raise
				raise ArtifactError("no compiled table; reinstall ucdbin, or run `ucd-compile ucd -o ucdbin/_data.py` in its source tree") from e
			_default = Database(module.DATA)
		return _default

def lookup(codepoint: int) -> Optional[CharacterRecord]:
	return default_database().lookup(codepoint)

def lookup_aliases(codepoint: int) -> Tuple[NameAlias, ...]:
	return default_database().lookup_aliases(codepoint)

def lookup_name(character: Union[str, int]) -> Optional[UnicodeCharName]:
	return default_database().lookup_name(character)

def lookup_codepoint(name: str) -> Optional[int]:
	return default_database().lookup_codepoint(name)
