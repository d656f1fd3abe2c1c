"""Exception hierarchy for Circbuf."""


class CircbufError(Exception):
    """Base exception for all Circbuf errors."""

    pass


class ConfigurationError(CircbufError):
    """Invalid combination of settings or strategy components."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class GeometryError(CircbufError):
    """Errors in geometric calculations."""

    pass


class DegenerateInputError(GeometryError):
    """A primitive received input it cannot work with, such as a zero-length direction."""

    def __init__(self, element: str, reason: str) -> None:
        self.element = element
        self.reason = reason
        super().__init__(f"Degenerate {element}: {reason}")

    def __reduce__(self):
        return (type(self), (self.element, self.reason))


class UnboundedCurveError(GeometryError):
    """An endpoint was requested at an infinite end of a curve."""

    def __init__(self, end: str) -> None:
        self.end = end
        super().__init__(f"Curve has no {end} point: the {end} end is infinite")

    def __reduce__(self):
        return (type(self), (self.end,))


class CurveContinuityError(GeometryError):
    """Consecutive elements of a curve do not connect."""

    def __init__(self, index: int, gap: float) -> None:
        self.index = index
        self.gap = gap
        super().__init__(
            f"Element {index} does not connect to element {index + 1} (gap {gap:.3g})"
        )

    def __reduce__(self):
        return (type(self), (self.index, self.gap))


class SplittingError(CircbufError):
    """The curve splitter could not resolve an intersection configuration."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Curve splitting failed: {reason}")

    def __reduce__(self):
        return (type(self), (self.reason,))


class CoincidentContoursError(SplittingError):
    """Two distinct contours share a stretch of boundary of positive length."""

    def __init__(self, first: int, second: int) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"contours {first} and {second} overlap along a common boundary"
        )

    def __reduce__(self):
        return (type(self), (self.first, self.second))


class TopologyWarning(UserWarning):
    """A closed curve does not actually close; the result is best effort."""

    pass
