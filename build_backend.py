# setuptools, plus compiling the vendored UCD files in `ucd/` into `ucdbin/_data.py` before a wheel
# (regular or editable) is built, so that an installed `ucdbin` always has its table.
import sys
from pathlib import Path

from setuptools import build_meta
from setuptools.build_meta import *

ROOT = Path(__file__).resolve().parent
UCD_DIR = ROOT / "ucd"
DATA_MODULE = ROOT / "ucdbin" / "_data.py"

def _is_current() -> bool:
	if not DATA_MODULE.exists():
		return False

	built = DATA_MODULE.stat().st_mtime
	return all(source.stat().st_mtime <= built for source in UCD_DIR.glob("*.txt"))

def compile_embedded_table() -> None:
	if _is_current():
		print(f"{DATA_MODULE.name} is up to date", file = sys.stderr)
		return

	from ucdbin.compile import StatusReporter, compile_tables
	from ucdbin.emit import write_artifact

	reporter = StatusReporter()
	data = compile_tables(UCD_DIR, reporter)

	with reporter.start(f"Writing {DATA_MODULE.relative_to(ROOT)}"):
		write_artifact(DATA_MODULE, data, python = True)

def build_wheel(wheel_directory, config_settings = None, metadata_directory = None):
	compile_embedded_table()
	return build_meta.build_wheel(wheel_directory, config_settings, metadata_directory)

def build_editable(wheel_directory, config_settings = None, metadata_directory = None):
	compile_embedded_table()
	return build_meta.build_editable(wheel_directory, config_settings, metadata_directory)
