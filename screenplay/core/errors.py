"""Exception hierarchy for screenplay.

Errors fall into three families so callers can tell them apart without
inspecting messages:

- SetupError: authoring mistakes, raised while apps and scenarios are defined
- RuntimeFailure: problems while a scenario executes
- VerificationFailure: a runtime assertion about the UI did not hold
"""


class ScreenplayError(Exception):
    """Base class for all screenplay errors."""

    pass


class SetupError(ScreenplayError):
    """Invalid app map or scenario definition."""

    pass


class DuplicateNameError(SetupError):
    """A scenario title was used twice."""

    pass


class RuntimeFailure(ScreenplayError):
    """A step failed while running."""

    pass


class VerificationFailure(RuntimeFailure):
    """An assertion about the current screen failed."""

    pass


class InvariantViolation(RuntimeFailure):
    """Selection and execution disagree about what a device supports."""

    pass
