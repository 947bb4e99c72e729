"""
Emojifier pipeline: classify every face, then composite its overlay.

Faces are processed strictly in input order; each compositing step takes
the previous step's output as its background, so all overlays accumulate
on one output image. An empty face list is reported as NoFacesFound
rather than raised.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

import numpy as np

from emojify.assets import AssetLookup
from emojify.categories import ExpressionCategory
from emojify.classifier import ExpressionClassifier
from emojify.compositor import Compositor, OverlayPlacement
from emojify.errors import AssetError
from emojify.features import FaceDescriptor

logger = logging.getLogger(__name__)

NO_FACES_MESSAGE = "No faces detected in the picture"


@dataclass
class EmojifyResult:
    """Outcome of emojifying a picture with at least one face.

    Attributes:
        image: Composited image, same shape and dtype as the source
        categories: Category chosen for each face, in input order
        placements: Where each face's overlay was drawn, in input order
    """
    image: np.ndarray
    categories: List[ExpressionCategory] = field(default_factory=list)
    placements: List[OverlayPlacement] = field(default_factory=list)

    faces_found: bool = field(default=True, init=False)

    @property
    def face_count(self) -> int:
        return len(self.categories)


@dataclass
class NoFacesFound:
    """Outcome when there was nothing to emojify.

    The caller decides how to tell the user; ``message`` is a ready-made
    notification text. ``image`` is a copy of the source picture, so
    writing to it never reaches the caller's array.
    """
    image: Optional[np.ndarray] = None
    message: str = NO_FACES_MESSAGE

    faces_found: bool = field(default=False, init=False)

    @property
    def face_count(self) -> int:
        return 0


Outcome = Union[EmojifyResult, NoFacesFound]


class Emojifier:
    """
    Classify-and-composite pipeline over all faces of one picture.

    Usage:
        emojifier = Emojifier()
        outcome = emojifier.emojify(picture, faces, OverlayLibrary("assets/"))
        if outcome.faces_found:
            cv2.imwrite("out.png", outcome.image)
    """

    def __init__(
        self,
        classifier: Optional[ExpressionClassifier] = None,
        compositor: Optional[Compositor] = None,
    ):
        self.classifier = classifier or ExpressionClassifier()
        self.compositor = compositor or Compositor()

    def emojify(
        self,
        picture: np.ndarray,
        faces: Sequence[FaceDescriptor],
        asset_for: AssetLookup,
    ) -> Outcome:
        """
        Overlay the matching expression image on every face.

        Parameters:
            picture (np.ndarray): Source image; never modified.
            faces (Sequence[FaceDescriptor]): Detected faces, drawn in this order.
            asset_for (AssetLookup): Returns the overlay image for a category.

        Returns:
            EmojifyResult with the composited image, or NoFacesFound when
            ``faces`` is empty.

        Raises:
            AssetError: If ``asset_for`` returns no image or an image format
                is unsupported.
            InvalidInputError: If a face is too small to draw on.
        """
        logger.debug(f"emojify: number of faces = {len(faces)}")

        if len(faces) == 0:
            logger.info(NO_FACES_MESSAGE)
            return NoFacesFound(image=picture.copy())

        working = picture.copy()
        result = EmojifyResult(image=working)

        for index, face in enumerate(faces):
            category = self.classifier.classify(face)
            overlay = asset_for(category)
            if overlay is None:
                raise AssetError(f"No overlay available for {category.name}")

            working, placement = self.compositor.composite_with_placement(
                working, overlay, face
            )
            result.categories.append(category)
            result.placements.append(placement)
            logger.debug(
                f"Face {index}: {category.name} -> {category.asset_name} "
                f"at {placement.origin}"
            )

        result.image = working
        logger.info(f"Emojified {result.face_count} face(s)")
        return result


def emojify(
    picture: np.ndarray,
    faces: Sequence[FaceDescriptor],
    asset_for: AssetLookup,
) -> Outcome:
    """Run the pipeline with default thresholds and scale factor."""
    return Emojifier().emojify(picture, faces, asset_for)
