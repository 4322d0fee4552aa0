"""Errors raised while resolving origin summits."""


class SummitError(Exception):
    """Base class for summit resolution errors tied to one origin."""

    def __init__(self, origin_name, reason):
        self.origin_name = origin_name
        self.reason = reason
        super().__init__(f"{origin_name}: {reason}")


class InvalidInputError(SummitError):
    """An origin has no windows, or a window has no usable sample counts."""


class DuplicateOriginError(SummitError):
    """Rows sharing an origin name disagree on the origin coordinates."""


class SummitResolutionError(Exception):
    """Raised in strict mode once every failing origin has been collected."""

    def __init__(self, failures):
        self.failures = list(failures)
        names = ", ".join(f.origin_name for f in self.failures[:5])
        if len(self.failures) > 5:
            names += ", ..."
        super().__init__(
            f"{len(self.failures)} origin(s) could not be resolved: {names}"
        )
