"""Error types raised while resolving and logging meals."""

from macro_tracker.domain.nutrition import MacroProfile


class MacroTrackerError(Exception):
    """Base class for application errors."""


class ValidationError(MacroTrackerError):
    """Caller-supplied data is structurally invalid."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or [message]


class ResolutionError(MacroTrackerError):
    """Nutrition values could not be resolved for an ingredient."""

    def __init__(self, message: str, ingredient: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.ingredient = ingredient


class NotFoundError(ResolutionError):
    """No reliable nutrition data exists for a name."""


class OutOfRangeError(ResolutionError):
    """Resolved per-100g values fall outside physical plausibility bounds."""

    def __init__(
        self, macros: MacroProfile, ingredient: str | None = None
    ) -> None:
        super().__init__(
            "Implausible per-100g values: "
            f"calories={macros.calories} protein={macros.protein} "
            f"carbs={macros.carbs} fat={macros.fat}",
            ingredient=ingredient,
        )
        self.macros = macros
