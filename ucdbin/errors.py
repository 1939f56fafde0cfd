class UcdError(Exception):
	pass

# A source file is missing, or a line in it does not follow the UCD grammar.
class UcdParseError(UcdError):
	def __init__(self, message: str, where: str = None) -> None:
		if where is not None:
			message = f"{where}: {message}"
		super().__init__(message)
		self.where = where

# The sources parsed, but cannot be turned into tables.
class UcdBuildError(UcdError):
	pass

class UcdFetchError(UcdError):
	pass

# A compiled table blob is not in a format this version can read.
class ArtifactError(UcdError):
	pass
