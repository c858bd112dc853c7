"""Exception taxonomy for the housing regression pipeline.

Every error subclasses :class:`PipelineError` (itself a ``ValueError``) so
callers can catch data problems in one place.  None of them is recovered
from inside the pipeline: the final comparison table is only worth
producing when every stage ran on clean data.
"""


class PipelineError(ValueError):
    """Base class for data problems that terminate a run."""


class SchemaMismatchError(PipelineError):
    """Input files disagree on their column layout."""


class MissingDataError(PipelineError):
    """Rows with missing cells were found where completeness is required."""


class InvalidTransformError(PipelineError):
    """A non-positive (or missing) value reached the log transform."""


class DegenerateFoldError(PipelineError):
    """A cross-validation fold has a constant target, so R² is undefined."""


class InsufficientDataError(PipelineError):
    """Too few rows to honour the requested split, fold or model size."""
