"""Computes the generated-feature output for a resolved reconciliation."""

from typing import FrozenSet, Optional

from .models import Resolved


class OutputComputer:
    """Decides whether a generated-features artifact is needed."""

    def compute(self, outcome: Resolved) -> Optional[FrozenSet[str]]:
        """Return the features to generate, or None when nothing new is needed.

        Raises:
            TypeError: If outcome is a conflict; conflicts must be surfaced instead.
        """
        if not isinstance(outcome, Resolved):
            raise TypeError(
                f"only resolved outcomes produce output, got {type(outcome).__name__}"
            )
        if not outcome.to_add:
            return None
        return frozenset(outcome.to_add)
