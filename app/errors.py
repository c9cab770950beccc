"""Exception taxonomy for the bill analysis pipeline."""


class BillAnalysisError(Exception):
    """Base class for every failure the analysis pipeline reports to callers."""


class UploadValidationError(BillAnalysisError):
    """The uploaded file failed presence, size or type checks."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(" ".join(violations))


class ExtractionFailed(BillAnalysisError):
    """The document could not be turned into a schema-valid bill record."""


class AuditFailed(BillAnalysisError):
    """The error-detection call did not yield a schema-valid audit result."""


class LetterGenerationFailed(BillAnalysisError):
    """The appeal letter could not be generated."""


class PersistenceFailed(BillAnalysisError):
    """The analysis store rejected the insert."""


class GenerationError(Exception):
    """The generative capability failed or returned schema-invalid output."""


class DocumentReadError(Exception):
    """The uploaded document could not be decoded or read."""
