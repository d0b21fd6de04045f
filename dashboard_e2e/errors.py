"""
Harness error taxonomy.

Every error here is scenario-fatal and never retried. The only error that is
swallowed anywhere in the harness is the known third-party page error matched
by the exception filter.
"""
from typing import List, Optional, Sequence


class HarnessError(Exception):
    """Base class for all harness failures."""

    pass


class NavigationError(HarnessError):
    """Raised when the target system cannot be reached in time."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = f"Could not navigate to {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MissingEntityError(HarnessError, AssertionError):
    """Raised when expected entity identifiers are absent from a view."""

    def __init__(self, missing: Sequence[str], url: Optional[str] = None):
        self.missing: List[str] = list(missing)
        self.id = self.missing[0] if self.missing else ""
        self.url = url
        where = f" on {url}" if url else ""
        super().__init__(f"Missing {len(self.missing)} expected entities{where}: {', '.join(self.missing)}")


class ForbiddenContentError(HarnessError, AssertionError):
    """Raised when a known error string appears in rendered page text."""

    def __init__(self, pattern: str, category: str = "", url: Optional[str] = None):
        self.pattern = pattern
        self.category = category
        self.url = url
        where = f" on {url}" if url else ""
        kind = f" ({category})" if category else ""
        super().__init__(f"Forbidden content{kind} found{where}: {pattern!r}")


class UnhandledPageError(HarnessError):
    """Raised when an uncaught client-side error is not covered by a suppression rule."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.message = message
        self.url = url
        where = f" on {url}" if url else ""
        super().__init__(f"Uncaught page error{where}: {message}")


class LocatorNotFound(HarnessError):
    """Raised when no selector strategy matches a required element."""

    def __init__(self, label: str, strategies: Sequence[str] = ()):
        self.label = label
        self.strategies = list(strategies)
        tried = f" (tried: {', '.join(self.strategies)})" if self.strategies else ""
        super().__init__(f"No element found for {label!r}{tried}")
