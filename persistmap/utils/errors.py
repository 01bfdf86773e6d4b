"""Custom exception hierarchy for persistmap.

All library exceptions inherit from :class:`PersistMapError`, which carries
an optional ``provider_name`` so callers can tell which backing store
(e.g. "sqlite", "memory") caused a failure.

    PersistMapError  (base -- catch-all for any persistmap error)
    +-- InvalidArgumentError  (malformed input, rejected before any state change)
    +-- AdapterError          (backing store failed on an awaited path)
    +-- ConfigurationError    (no adapter bound, not initialized, bad options)

Writing ``None`` as a value is *not* an error: it is silently ignored by
:meth:`PersistentMap.set`.  Failures of deferred (fire-and-forget) writes are
never raised at the call site; they are delivered through
:class:`~persistmap.core.receipts.WriteReceipt` instead.
"""


class PersistMapError(Exception):
    """Base exception for all persistmap errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[sqlite] database is locked``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class InvalidArgumentError(PersistMapError, ValueError):
    """Raised when an operation receives a malformed argument.

    Also a :class:`ValueError` so generic validation handlers still catch it.
    """

    def __init__(
        self,
        message: str = "Invalid argument",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AdapterError(PersistMapError):
    """Raised when the backing store fails on a path the map awaits.

    Covers single-key and batch fetches, bulk loads, and writes to adapters
    that do not defer them.  The original exception is chained as
    ``__cause__``.
    """

    def __init__(
        self,
        message: str = "Backing store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(PersistMapError):
    """Raised when a map is used in a way its configuration does not allow."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
