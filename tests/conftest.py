from pathlib import Path

import pytest

from ucdbin.compile import compile_tables
from ucdbin.database import Database

DATA_DIR = Path(__file__).parent / "data"

@pytest.fixture(scope = "session")
def ucd_dir() -> Path:
	return DATA_DIR

@pytest.fixture(scope = "session")
def table(ucd_dir) -> bytes:
	return compile_tables(ucd_dir)

@pytest.fixture
def database(table) -> Database:
	return Database(table)

# Writes UnicodeData.txt / NameAliases.txt with the given lines into a fresh directory.
@pytest.fixture
def make_ucd(tmp_path):
	def make(unicode_data: list[str], name_aliases: list[str] = ()) -> Path:
		(tmp_path / "UnicodeData.txt").write_text("".join(line + "\n" for line in unicode_data), encoding = "utf-8")
		(tmp_path / "NameAliases.txt").write_text("".join(line + "\n" for line in name_aliases), encoding = "utf-8")
		return tmp_path

	return make
