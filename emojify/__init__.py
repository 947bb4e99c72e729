"""
Emojify Package

Classifies detected faces into eight eye/smile expressions and draws the
matching overlay image over each face of a picture.
"""

__version__ = "0.1.0"

from emojify.errors import EmojifyError, InvalidInputError, AssetError
from emojify.features import FaceDescriptor
from emojify.categories import ExpressionCategory
from emojify.classifier import ClassifierConfig, ExpressionClassifier, classify
from emojify.compositor import (
    CompositorConfig,
    Compositor,
    OverlayPlacement,
    compute_placement,
    draw_over,
)
from emojify.assets import OverlayLibrary
from emojify.emojifier import Emojifier, EmojifyResult, NoFacesFound, emojify
from emojify.config import EmojifyConfig, load_config, save_config

__all__ = [
    "EmojifyError",
    "InvalidInputError",
    "AssetError",
    "FaceDescriptor",
    "ExpressionCategory",
    "ClassifierConfig",
    "ExpressionClassifier",
    "classify",
    "CompositorConfig",
    "Compositor",
    "OverlayPlacement",
    "compute_placement",
    "draw_over",
    "OverlayLibrary",
    "Emojifier",
    "EmojifyResult",
    "NoFacesFound",
    "emojify",
    "EmojifyConfig",
    "load_config",
    "save_config",
]
