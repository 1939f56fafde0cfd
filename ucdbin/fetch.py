import logging
from pathlib import Path
from typing import Optional

import requests

from .errors import UcdFetchError
from .ucd import NAME_ALIASES_FILE, UNICODE_DATA_FILE

logger = logging.getLogger(__name__)

UCD_URL = "https://www.unicode.org/Public/{version}/ucd/{name}"
TIMEOUT_SECONDS = 60

def download_ucd_file(name: str, version: str, session: Optional[requests.Session] = None) -> str:
	url = UCD_URL.format(version = version, name = name)
	logger.info("downloading %s", url)

	try:
		response = (session or requests).get(url, allow_redirects = True, timeout = TIMEOUT_SECONDS)
		response.raise_for_status()
	except requests.RequestException as e:
		raise UcdFetchError(f"cannot download {url}: {e}") from e

	return response.content.decode("utf-8")

# Downloads the files `ucd.load_ucd` needs into `destination`.
def fetch_ucd(version: str, destination: Path, session: Optional[requests.Session] = None) -> Path:
	destination.mkdir(parents = True, exist_ok = True)

	for name in (UNICODE_DATA_FILE, NAME_ALIASES_FILE):
		content = download_ucd_file(name, version, session)
		(destination / name).write_text(content, encoding = "utf-8")

	return destination
