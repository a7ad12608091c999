class InvariantViolation(Exception):
    """Base class for domain rule violations surfaced to callers."""

    status_code = 400


class UnknownSectionType(InvariantViolation):
    pass


class SectionNotFound(InvariantViolation):
    status_code = 404


class PageNotFound(InvariantViolation):
    status_code = 404


class SlugConflict(InvariantViolation):
    status_code = 409


class IllegalTransition(InvariantViolation):
    status_code = 409


class OrderValidationError(InvariantViolation):
    """Raised before submission when the capture form is incomplete."""

    status_code = 422

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))


class OrderSubmissionError(Exception):
    """The order-creation collaborator failed or returned no identifier."""


class StaleWrite(InvariantViolation):
    """An editor tried to save over a newer version of the page."""

    status_code = 409
