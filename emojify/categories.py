"""
Expression categories and their overlay asset names.

Eight mutually exclusive categories cover every combination of
left eye open, right eye open and smiling.
"""

from enum import Enum
from typing import Dict, Tuple


class ExpressionCategory(Enum):
    """Discrete facial expression selected for one face."""

    BOTH_OPEN_SMILE = "both_open_smile"
    BOTH_OPEN_FROWN = "both_open_frown"
    BOTH_CLOSED_SMILE = "both_closed_smile"
    BOTH_CLOSED_FROWN = "both_closed_frown"
    LEFT_OPEN_SMILE = "left_open_smile"      # right eye closed
    LEFT_OPEN_FROWN = "left_open_frown"      # right eye closed
    RIGHT_OPEN_SMILE = "right_open_smile"    # left eye closed
    RIGHT_OPEN_FROWN = "right_open_frown"    # left eye closed

    @classmethod
    def from_flags(
        cls, left_eye_open: bool, right_eye_open: bool, smiling: bool
    ) -> 'ExpressionCategory':
        """
        Look up the category for a (left open, right open, smiling) triple.

        Returns:
            ExpressionCategory: The single category for the combination.
        """
        return _DECISION_TABLE[(bool(left_eye_open), bool(right_eye_open), bool(smiling))]

    @property
    def asset_name(self) -> str:
        """Base file name of the overlay image drawn for this category."""
        return _ASSET_NAMES[self]

    @property
    def left_eye_open(self) -> bool:
        return self in (
            ExpressionCategory.BOTH_OPEN_SMILE,
            ExpressionCategory.BOTH_OPEN_FROWN,
            ExpressionCategory.LEFT_OPEN_SMILE,
            ExpressionCategory.LEFT_OPEN_FROWN,
        )

    @property
    def right_eye_open(self) -> bool:
        return self in (
            ExpressionCategory.BOTH_OPEN_SMILE,
            ExpressionCategory.BOTH_OPEN_FROWN,
            ExpressionCategory.RIGHT_OPEN_SMILE,
            ExpressionCategory.RIGHT_OPEN_FROWN,
        )

    @property
    def smiling(self) -> bool:
        return self in (
            ExpressionCategory.BOTH_OPEN_SMILE,
            ExpressionCategory.BOTH_CLOSED_SMILE,
            ExpressionCategory.LEFT_OPEN_SMILE,
            ExpressionCategory.RIGHT_OPEN_SMILE,
        )


# (left_eye_open, right_eye_open, smiling) -> category
_DECISION_TABLE: Dict[Tuple[bool, bool, bool], ExpressionCategory] = {
    (True, True, True): ExpressionCategory.BOTH_OPEN_SMILE,
    (True, True, False): ExpressionCategory.BOTH_OPEN_FROWN,
    (False, False, True): ExpressionCategory.BOTH_CLOSED_SMILE,
    (False, False, False): ExpressionCategory.BOTH_CLOSED_FROWN,
    (True, False, True): ExpressionCategory.LEFT_OPEN_SMILE,
    (True, False, False): ExpressionCategory.LEFT_OPEN_FROWN,
    (False, True, True): ExpressionCategory.RIGHT_OPEN_SMILE,
    (False, True, False): ExpressionCategory.RIGHT_OPEN_FROWN,
}

_ASSET_NAMES: Dict[ExpressionCategory, str] = {
    ExpressionCategory.BOTH_OPEN_SMILE: "smile",
    ExpressionCategory.BOTH_OPEN_FROWN: "frown",
    ExpressionCategory.BOTH_CLOSED_SMILE: "closed_smile",
    ExpressionCategory.BOTH_CLOSED_FROWN: "closed_frown",
    ExpressionCategory.LEFT_OPEN_SMILE: "leftwink",
    ExpressionCategory.LEFT_OPEN_FROWN: "leftwinkfrown",
    ExpressionCategory.RIGHT_OPEN_SMILE: "rightwink",
    ExpressionCategory.RIGHT_OPEN_FROWN: "rightwinkfrown",
}
