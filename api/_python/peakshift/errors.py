"""
Error types raised by the planner and the estimators.

Insufficient evidence is not an error: estimators return a result with
``available=False`` and a status string instead of raising.
"""


class MalformedInput(ValueError):
    """Request is missing a required field or carries an invalid value."""


class MalformedTime(MalformedInput):
    """Clock time is not a valid "HH:MM" string, or a delta is not a finite whole number."""


class UpstreamFetchFailure(RuntimeError):
    """The sample store could not be read. Not retried locally."""
