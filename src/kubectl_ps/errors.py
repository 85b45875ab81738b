"""
Exceptions raised by kubectl-ps.

UsageError and its subclasses are fatal and reported with the usage text.
CollaboratorUnavailable is recoverable: the run continues without usage
columns. FetchFailure aborts the run before anything is printed.
"""

from __future__ import annotations


class KubePsError(Exception):
    """Base class for kubectl-ps errors."""


class UsageError(KubePsError):
    """Bad command line: grammar string, flag letter or scope."""


class UnknownFlag(UsageError):
    def __init__(self, letter: str) -> None:
        super().__init__(f"unknown flag letter {letter}")
        self.letter = letter


class InvalidFlag(UsageError):
    def __init__(self, letter: str, scope: str) -> None:
        if letter == "n":
            message = "flag n only valid for pods"
        else:
            message = "flags f/t only valid for nodes scope"
        super().__init__(message)
        self.letter = letter
        self.scope = scope


class MissingFamily(UsageError):
    def __init__(self) -> None:
        super().__init__("flags must include m and/or c")


class MissingMetric(UsageError):
    def __init__(self) -> None:
        super().__init__("flags must include at least one metric letter (rlupft)")


class UnknownScope(UsageError):
    def __init__(self, scope: str) -> None:
        super().__init__(f"unknown scope {scope}")
        self.scope = scope


class CollaboratorUnavailable(KubePsError):
    """The usage source (metrics-server) could not be reached."""


class FetchFailure(KubePsError):
    """Listing pods, nodes or namespaces failed."""

    def __init__(self, message: str, command: str = "") -> None:
        super().__init__(message)
        self.command = command
