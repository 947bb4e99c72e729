"""
FaceDescriptor dataclass for externally detected faces.

This module defines the record handed over by a face detector: the
bounding box of one face in image pixel space plus the three
classification probabilities (left eye open, right eye open, smiling).
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

import numpy as np

from emojify.errors import InvalidInputError


@dataclass(frozen=True)
class FaceDescriptor:
    """Detected face geometry and expression probabilities.

    Contains 7 values:
    - Position (2): top-left corner of the bounding box
    - Size (2): width and height of the bounding box, both positive
    - Probabilities (3): left eye open, right eye open, smiling

    All probabilities are in [0, 1]. Coordinates are in pixels and may
    be fractional or negative (faces partly outside the picture).
    """

    position: Tuple[float, float]
    width: float
    height: float

    left_eye_open_probability: float
    right_eye_open_probability: float
    smiling_probability: float

    NUM_VALUES = 7

    def __post_init__(self):
        try:
            if len(self.position) != 2:
                raise InvalidInputError(
                    f"position must be an (x, y) pair, got {self.position!r}"
                )
            x, y = (float(v) for v in self.position)
        except (TypeError, ValueError) as e:
            if isinstance(e, InvalidInputError):
                raise
            raise InvalidInputError(
                f"position must be an (x, y) pair of numbers, got {self.position!r}"
            ) from e
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidInputError(f"position must be finite, got {self.position!r}")
        object.__setattr__(self, "position", (x, y))

        for name in ("width", "height"):
            value = self._coerce(name)
            if not value > 0 or not math.isfinite(value):
                raise InvalidInputError(f"{name} must be positive, got {value}")

        for name in (
            "left_eye_open_probability",
            "right_eye_open_probability",
            "smiling_probability",
        ):
            value = self._coerce(name)
            # NaN fails both comparisons
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"{name} must be in [0, 1], got {value}")

    def _coerce(self, name: str) -> float:
        """Store field ``name`` as a float, raising InvalidInputError if it is not numeric."""
        raw = getattr(self, name)
        try:
            value = float(raw)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"{name} must be a number, got {raw!r}") from e
        object.__setattr__(self, name, value)
        return value

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    @property
    def center(self) -> Tuple[float, float]:
        """Center of the bounding box."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_array(self) -> np.ndarray:
        """
        Convert the descriptor to a flat numpy array.

        Returns:
            np.ndarray: Shape (7,) containing
                [x, y, width, height,
                 left_eye_open_probability, right_eye_open_probability,
                 smiling_probability]
        """
        return np.array([
            self.x,
            self.y,
            self.width,
            self.height,
            self.left_eye_open_probability,
            self.right_eye_open_probability,
            self.smiling_probability,
        ], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> 'FaceDescriptor':
        """
        Create a FaceDescriptor from a numpy array in ``to_array()`` order.

        Raises:
            InvalidInputError: If the array does not have exactly 7 elements
                or the values violate the descriptor invariants.
        """
        if len(arr) != cls.NUM_VALUES:
            raise InvalidInputError(
                f"Expected array of length {cls.NUM_VALUES}, got {len(arr)}"
            )

        return cls(
            position=(float(arr[0]), float(arr[1])),
            width=float(arr[2]),
            height=float(arr[3]),
            left_eye_open_probability=float(arr[4]),
            right_eye_open_probability=float(arr[5]),
            smiling_probability=float(arr[6]),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'left_eye_open': self.left_eye_open_probability,
            'right_eye_open': self.right_eye_open_probability,
            'smiling': self.smiling_probability,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'FaceDescriptor':
        """
        Create a FaceDescriptor from a mapping as written by ``to_dict()``.

        Raises:
            InvalidInputError: If a key is missing or a value is not numeric.
        """
        try:
            return cls(
                position=(float(data['x']), float(data['y'])),
                width=float(data['width']),
                height=float(data['height']),
                left_eye_open_probability=float(data['left_eye_open']),
                right_eye_open_probability=float(data['right_eye_open']),
                smiling_probability=float(data['smiling']),
            )
        except InvalidInputError:
            raise
        except KeyError as e:
            raise InvalidInputError(f"Face entry is missing key {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Face entry has a non-numeric value: {e}") from e
