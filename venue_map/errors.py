class VenueMapError(Exception):
    """Base class for errors raised by the venue map pipeline."""


class LoadError(VenueMapError):
    """The dataset could not be loaded; nothing downstream can run."""


class FetchError(LoadError):
    def __init__(self, source: str, reason: str, status_code: int | None = None) -> None:
        self.source = source
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Could not fetch {source}: {reason}")


class CsvFormatError(LoadError):
    """The fetched text is not CSV the parser can read."""

    def __init__(self, reason: str, line: int | None = None) -> None:
        self.reason = reason
        self.line = line
        where = f" at line {line}" if line is not None else ""
        super().__init__(f"Malformed CSV{where}: {reason}")


class ParseRowError(VenueMapError):
    """A single row could not be turned into a marker."""

    def __init__(self, line: int, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Row at line {line}: {reason}")
