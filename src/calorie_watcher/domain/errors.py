"""Error taxonomy for estimation and goal computation."""


class CalorieWatcherError(Exception):
    """Base class for library errors."""


class InputParseError(CalorieWatcherError):
    """A quantity string could not be parsed."""


class UpstreamUnavailable(CalorieWatcherError):
    """A lookup or estimation collaborator timed out or failed in transport."""


class MalformedEstimate(CalorieWatcherError):
    """Model output was empty, not JSON, or not a JSON object."""


class ProfileIncomplete(CalorieWatcherError):
    """Onboarding fields required for goal computation are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Profile is missing required fields: {', '.join(missing)}")
