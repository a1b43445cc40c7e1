"""
Error types raised by the assessment engine and its services.
"""


class AssessmentError(Exception):
    """Base class for all assessment engine errors."""
    pass


class UnrecognizedFrequency(AssessmentError, ValueError):
    """Raised when an amount is recorded at a cadence the normalizer does not know."""

    def __init__(self, frequency):
        self.frequency = frequency
        super().__init__(f"Unrecognized frequency: {frequency!r}")


class InvalidFinanceData(AssessmentError, ValueError):
    """Raised when an income, expense or loan record is malformed or contradictory."""
    pass


class InvalidHealthData(AssessmentError, ValueError):
    """Raised when a health profile, condition, expense or policy record is invalid."""
    pass


class MissingFinanceField(InvalidFinanceData, KeyError):
    """Raised when a financial record lacks a required field."""

    def __str__(self):
        return ValueError.__str__(self)


class MissingHealthField(InvalidHealthData, KeyError):
    """Raised when a health record lacks a required field."""

    def __str__(self):
        return ValueError.__str__(self)


class ConcurrentUpdateConflict(AssessmentError):
    """Raised when policy counters changed between read and write-back."""

    def __init__(self, policy_id: str, expected_version: int, actual_version: int):
        self.policy_id = policy_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Policy {policy_id} was updated concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )


class RecordNotFound(AssessmentError, LookupError):
    """Raised by repositories when a requested record does not exist."""
    pass


class ProfileNotFound(RecordNotFound):
    """Raised when a user has no health profile."""
    pass


class PolicyNotFound(RecordNotFound):
    """Raised when an insurance policy cannot be found."""
    pass
