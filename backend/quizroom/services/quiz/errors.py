class QuizError(Exception):
    """Base class for quiz room errors."""


class CatalogError(QuizError):
    """Question data could not be loaded or is malformed."""


class ValidationError(QuizError):
    """Client input failed validation; the message is shown to that client."""
