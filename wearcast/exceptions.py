"""Error types raised by the temperature derivation layer."""


class DerivationError(ValueError):
    """Base class for failures while deriving statistics from a weather series."""


class EmptySeries(DerivationError):
    """Raised when a latest-value accessor is called on a zero-length sequence."""

    def __init__(self, name: str = "series") -> None:
        self.name = name
        super().__init__(f"{name} has no samples")


class EmptyWindow(DerivationError):
    """Raised when an average is requested over a window with no samples.

    Happens when ``count_back`` is 0 or the series holds one sample or fewer.
    """

    def __init__(self, name: str = "window", count_back: int | None = None) -> None:
        self.name = name
        self.count_back = count_back
        detail = f" (count_back={count_back})" if count_back is not None else ""
        super().__init__(f"{name} is empty{detail}")
