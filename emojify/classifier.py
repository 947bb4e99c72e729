"""
Threshold-based expression classifier.

Three inclusive threshold tests turn the face's probabilities into
booleans; the category is then a fixed table lookup. No training
required - works out of the box.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from emojify.categories import ExpressionCategory
from emojify.features import FaceDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierConfig:
    """Configuration for ExpressionClassifier.

    Attributes:
        left_eye_threshold: Minimum left-eye-open probability counted as open
        right_eye_threshold: Minimum right-eye-open probability counted as open
        smile_threshold: Minimum smiling probability counted as smiling
    """
    left_eye_threshold: float = 0.54
    right_eye_threshold: float = 0.57
    smile_threshold: float = 0.2

    def __post_init__(self):
        for name in ("left_eye_threshold", "right_eye_threshold", "smile_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in range [0, 1], got {value}")


class ExpressionClassifier:
    """
    Maps a FaceDescriptor to one of eight ExpressionCategory values.

    Usage:
        classifier = ExpressionClassifier()
        category = classifier.classify(face)
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()

    def flags(self, face: FaceDescriptor) -> Tuple[bool, bool, bool]:
        """
        Threshold the face's probabilities.

        Returns:
            Tuple of (left_eye_open, right_eye_open, smiling). A probability
            equal to its threshold counts as open / smiling.
        """
        config = self.config
        left_eye_open = face.left_eye_open_probability >= config.left_eye_threshold
        right_eye_open = face.right_eye_open_probability >= config.right_eye_threshold
        smiling = face.smiling_probability >= config.smile_threshold
        return left_eye_open, right_eye_open, smiling

    def classify(self, face: FaceDescriptor) -> ExpressionCategory:
        """
        Select the expression category for one face.

        Parameters:
            face (FaceDescriptor): Detected face with its three probabilities.

        Returns:
            ExpressionCategory: Exactly one category; the mapping is total.
        """
        category = ExpressionCategory.from_flags(*self.flags(face))
        logger.debug(
            f"classify: left={face.left_eye_open_probability:.3f} "
            f"right={face.right_eye_open_probability:.3f} "
            f"smile={face.smiling_probability:.3f} -> {category.name}"
        )
        return category


_default_classifier = ExpressionClassifier()


def classify(face: FaceDescriptor) -> ExpressionCategory:
    """Classify with the default thresholds (0.54 / 0.57 / 0.2)."""
    return _default_classifier.classify(face)
