"""
TSP Solver - Exceptions
Error hierarchy raised by the domain model, the solvers and the file helpers.
"""


class TSPException(Exception):
    """Base class for every error raised by the TSP solver."""

    prefix = "TSP Error"

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(f"{self.prefix}: {message}" if message else self.prefix)

    def get_message(self) -> str:
        return self.message


class InvalidInputError(TSPException):
    prefix = "Invalid Input"


class InvalidGraphError(TSPException):
    """Operation needs more points than the graph holds."""

    prefix = "Invalid Graph"


class EmptyGraphError(TSPException):
    prefix = "Empty Graph"


class PointNotFoundError(TSPException):
    prefix = "Point Not Found"


class DuplicatePointError(TSPException):
    prefix = "Duplicate Point"


class InvalidIndexError(TSPException, IndexError):
    prefix = "Invalid Index"


class AlgorithmError(TSPException):
    prefix = "Algorithm Error"


class FileIOError(TSPException):
    """Load/save failure: missing file, unreadable or malformed content."""

    prefix = "File Error"
