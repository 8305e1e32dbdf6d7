from typing import Optional


class FileOrganizerError(Exception):
    """Base error for the project."""

class InvalidPathError(FileOrganizerError):
    pass

class DestinationError(FileOrganizerError):
    """The destination base directory or its report cannot be written."""

class ConfigError(FileOrganizerError):
    """Malformed config file."""

    def __init__(self, message: str, path=None, line: Optional[int] = None):
        self.path = path
        self.line = line
        where = ""
        if path is not None:
            where = f"{path}"
            if line is not None:
                where += f":{line}"
            where += ": "
        super().__init__(where + message)
