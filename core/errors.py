"""Exception hierarchy for Basma."""

from typing import Optional


class BasmaError(Exception):
    """Base class for all Basma errors."""


class InvalidRequestError(BasmaError, ValueError):
    """Raised when an evaluation request fails validation."""


class ChainConfigurationError(BasmaError):
    """Raised when a prompt chain violates its structural invariants."""


class TemplateNotFoundError(BasmaError, LookupError):
    """Raised when no template exists for a requested step."""


class ModelResolutionError(BasmaError):
    """Base class for failures turning a model id into a callable handle."""


class ModelNotFoundError(ModelResolutionError, LookupError):
    def __init__(self, model_id: str):
        super().__init__(f"Model not found: {model_id}")
        self.model_id = model_id


class ModelInactiveError(ModelResolutionError):
    def __init__(self, model_id: str):
        super().__init__(f"Model is not active: {model_id}")
        self.model_id = model_id


class UnsupportedProviderError(ModelResolutionError):
    def __init__(self, provider: str):
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class EvaluationStateError(BasmaError):
    """Raised when an evaluation is updated after reaching a terminal state."""


class EvaluationError(BasmaError):
    """Fatal evaluation failure. The underlying cause is chained."""

    def __init__(self, message: str, evaluation_id: Optional[str] = None):
        super().__init__(message)
        self.evaluation_id = evaluation_id
