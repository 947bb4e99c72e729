"""
Overlay asset library.

Looks up the decoded overlay image for an ExpressionCategory. Images are
read from a directory using the category's asset name, e.g.
``<asset_dir>/leftwink.png``, and cached per library instance.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Union

import cv2
import numpy as np

from emojify.categories import ExpressionCategory
from emojify.errors import AssetError

logger = logging.getLogger(__name__)

# Signature of the asset lookup the Emojifier consumes
AssetLookup = Callable[[ExpressionCategory], np.ndarray]


class OverlayLibrary:
    """
    Directory-backed lookup from category to overlay image.

    Usage:
        library = OverlayLibrary("assets/")
        overlay = library(ExpressionCategory.BOTH_OPEN_SMILE)
    """

    def __init__(
        self,
        asset_dir: Optional[Union[str, Path]] = None,
        extension: str = ".png",
    ):
        self.asset_dir = Path(asset_dir) if asset_dir is not None else None
        self.extension = extension if extension.startswith(".") else f".{extension}"
        self._cache: Dict[ExpressionCategory, np.ndarray] = {}

    @classmethod
    def from_images(
        cls, images: Mapping[ExpressionCategory, np.ndarray]
    ) -> 'OverlayLibrary':
        """Build a library from already decoded images."""
        library = cls()
        for category, image in images.items():
            library._cache[ExpressionCategory(category)] = image
        return library

    def path_for(self, category: ExpressionCategory) -> Path:
        if self.asset_dir is None:
            raise AssetError(f"No asset directory configured for {category.name}")
        return self.asset_dir / f"{category.asset_name}{self.extension}"

    def load(self, category: ExpressionCategory) -> np.ndarray:
        """
        Decode the overlay for ``category`` from disk, alpha channel kept.

        Raises:
            AssetError: If the file is missing or cannot be decoded.
        """
        path = self.path_for(category)
        if not path.exists():
            raise AssetError(f"Overlay asset not found: {path}")

        image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if image is None:
            raise AssetError(f"Failed to decode overlay asset: {path}")
        if image.dtype != np.uint8:
            raise AssetError(f"Overlay asset {path} has unsupported dtype {image.dtype}")

        logger.debug(f"Loaded overlay {path} with shape {image.shape}")
        return image

    def __call__(self, category: ExpressionCategory) -> np.ndarray:
        image = self._cache.get(category)
        if image is None:
            image = self.load(category)
            self._cache[category] = image
        return image

    def preload(self) -> None:
        """Decode all eight overlays up front."""
        for category in ExpressionCategory:
            self(category)
        logger.info(f"Preloaded {len(self._cache)} overlays from {self.asset_dir}")

    def __contains__(self, category: ExpressionCategory) -> bool:
        if category in self._cache:
            return True
        if self.asset_dir is None:
            return False
        return self.path_for(category).exists()
