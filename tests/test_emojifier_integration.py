"""
End-to-end tests for the Emojifier pipeline.

Faces are classified and their overlays composited onto one working
image, using in-memory overlays so no asset files are needed.
"""

import numpy as np
import pytest
from hypothesis import given, settings
import hypothesis.strategies as st

from emojify.assets import OverlayLibrary
from emojify.categories import ExpressionCategory
from emojify.classifier import ClassifierConfig, ExpressionClassifier
from emojify.compositor import Compositor, CompositorConfig
from emojify.emojifier import (
    NO_FACES_MESSAGE,
    Emojifier,
    EmojifyResult,
    NoFacesFound,
    emojify,
)
from emojify.errors import AssetError, InvalidInputError
from emojify.features import FaceDescriptor


def category_color(category: ExpressionCategory):
    """Distinct BGR color per category so draws can be told apart."""
    index = list(ExpressionCategory).index(category)
    return (10 + index * 30, 255 - index * 30, 100)


def overlay_for(category: ExpressionCategory, size=(100, 100)) -> np.ndarray:
    image = np.zeros(size + (4,), dtype=np.uint8)
    image[:, :, :3] = category_color(category)
    image[:, :, 3] = 255
    return image


@pytest.fixture
def library() -> OverlayLibrary:
    return OverlayLibrary.from_images({
        category: overlay_for(category) for category in ExpressionCategory
    })


@pytest.fixture
def picture() -> np.ndarray:
    return np.zeros((400, 400, 3), dtype=np.uint8)


def face_at(x, y, size=100.0, left=0.9, right=0.9, smile=0.9) -> FaceDescriptor:
    return FaceDescriptor(
        position=(x, y),
        width=size,
        height=size,
        left_eye_open_probability=left,
        right_eye_open_probability=right,
        smiling_probability=smile,
    )


class TestSingleFace:
    """One open-eyed smiling face gets the smile overlay centered on it."""

    def test_both_open_smile_drawn_centered(self, picture, library):
        face = face_at(50.0, 50.0)

        outcome = emojify(picture, [face], library)

        assert isinstance(outcome, EmojifyResult)
        assert outcome.faces_found
        assert outcome.categories == [ExpressionCategory.BOTH_OPEN_SMILE]

        placement = outcome.placements[0]
        assert (placement.width, placement.height) == (90, 81)
        # x = 50 + 50 - 90 // 2, y = 50 + 50 - 81 // 3
        assert placement.origin == (55, 73)

        color = category_color(ExpressionCategory.BOTH_OPEN_SMILE)
        region = outcome.image[73:73 + 81, 55:55 + 90]
        assert np.all(region == color)
        assert outcome.image[72, 60].sum() == 0
        assert outcome.image[73 + 81, 60].sum() == 0

    def test_source_picture_untouched(self, picture, library):
        snapshot = picture.copy()
        outcome = emojify(picture, [face_at(50.0, 50.0)], library)

        assert np.array_equal(picture, snapshot)
        assert outcome.image is not picture
        assert outcome.image.shape == picture.shape
        assert outcome.image.dtype == picture.dtype

    def test_overlay_matches_category(self, picture, library):
        face = face_at(100.0, 100.0, left=0.1, right=0.9, smile=0.05)
        outcome = emojify(picture, [face], library)

        assert outcome.categories == [ExpressionCategory.RIGHT_OPEN_FROWN]
        x, y = outcome.placements[0].origin
        assert tuple(outcome.image[y + 1, x + 1]) == category_color(
            ExpressionCategory.RIGHT_OPEN_FROWN
        )


class TestNoFaces:
    """An empty face list SHALL yield NoFacesFound, not an error."""

    def test_empty_face_list(self, picture, library):
        outcome = emojify(picture, [], library)

        assert isinstance(outcome, NoFacesFound)
        assert not outcome.faces_found
        assert outcome.face_count == 0
        assert outcome.message == NO_FACES_MESSAGE
        assert np.array_equal(outcome.image, picture)

    def test_image_does_not_alias_source(self, picture, library):
        before = picture.copy()
        outcome = emojify(picture, [], library)

        assert outcome.image is not picture
        outcome.image[...] = 255
        assert np.array_equal(picture, before)

    def test_asset_lookup_not_called(self, picture):
        def lookup(category):
            raise AssertionError("lookup must not run without faces")

        outcome = Emojifier().emojify(picture, [], lookup)
        assert isinstance(outcome, NoFacesFound)


class TestMultipleFaces:
    """
    *For any* list of faces, overlays SHALL be drawn in input order, each
    placed by its own face's geometry.
    """

    def test_two_faces_both_present(self, picture, library):
        smiling = face_at(20.0, 20.0)
        winking = face_at(220.0, 220.0, left=0.9, right=0.1, smile=0.9)

        outcome = emojify(picture, [smiling, winking], library)

        assert outcome.face_count == 2
        assert outcome.categories == [
            ExpressionCategory.BOTH_OPEN_SMILE,
            ExpressionCategory.LEFT_OPEN_SMILE,
        ]
        for category, placement in zip(outcome.categories, outcome.placements):
            x, y = placement.origin
            region = outcome.image[y:y + placement.height, x:x + placement.width]
            assert np.all(region == category_color(category))

    def test_placements_independent_of_other_faces(self, picture, library):
        first = face_at(20.0, 20.0)
        second = face_at(220.0, 220.0, size=80.0)

        together = emojify(picture, [first, second], library)
        alone = emojify(picture, [second], library)

        assert together.placements[1] == alone.placements[0]

    def test_later_face_draws_over_earlier(self, picture, library):
        first = face_at(100.0, 100.0)
        second = face_at(100.0, 100.0, left=0.1, right=0.1, smile=0.1)

        outcome = emojify(picture, [first, second], library)

        x, y = outcome.placements[1].origin
        assert tuple(outcome.image[y + 5, x + 5]) == category_color(
            ExpressionCategory.BOTH_CLOSED_FROWN
        )

    @settings(max_examples=50, deadline=None)
    @given(
        faces=st.lists(
            st.builds(
                face_at,
                x=st.floats(min_value=-50.0, max_value=350.0),
                y=st.floats(min_value=-50.0, max_value=350.0),
                size=st.floats(min_value=20.0, max_value=200.0),
                left=st.floats(min_value=0.0, max_value=1.0),
                right=st.floats(min_value=0.0, max_value=1.0),
                smile=st.floats(min_value=0.0, max_value=1.0),
            ),
            min_size=1,
            max_size=5,
        )
    )
    def test_one_category_and_placement_per_face(self, faces):
        library = OverlayLibrary.from_images({
            category: overlay_for(category) for category in ExpressionCategory
        })
        picture = np.zeros((400, 400, 3), dtype=np.uint8)

        outcome = emojify(picture, faces, library)

        assert len(outcome.categories) == len(faces)
        assert len(outcome.placements) == len(faces)
        assert outcome.image.shape == picture.shape
        assert picture.sum() == 0


class TestConfiguredPipeline:
    """Custom thresholds and scaling flow through the pipeline."""

    def test_custom_components(self, picture, library):
        emojifier = Emojifier(
            classifier=ExpressionClassifier(ClassifierConfig(smile_threshold=0.95)),
            compositor=Compositor(CompositorConfig(compound_height_scale=False)),
        )

        outcome = emojifier.emojify(picture, [face_at(50.0, 50.0)], library)

        assert outcome.categories == [ExpressionCategory.BOTH_OPEN_FROWN]
        assert (outcome.placements[0].width, outcome.placements[0].height) == (90, 90)


class TestPipelineErrors:
    """Asset and geometry failures propagate; nothing partial is returned."""

    def test_missing_overlay(self, picture):
        with pytest.raises(AssetError):
            emojify(picture, [face_at(50.0, 50.0)], lambda category: None)

    def test_lookup_errors_propagate(self, picture):
        def lookup(category):
            raise AssetError("boom")

        with pytest.raises(AssetError, match="boom"):
            emojify(picture, [face_at(50.0, 50.0)], lookup)

    def test_unsupported_picture_format(self, library):
        picture = np.zeros((50, 50, 3), dtype=np.float64)
        with pytest.raises(AssetError):
            emojify(picture, [face_at(5.0, 5.0, size=20.0)], library)

    def test_face_too_small(self, picture, library):
        with pytest.raises(InvalidInputError):
            emojify(picture, [face_at(5.0, 5.0, size=1.0)], library)
