#!/usr/bin/env python3
"""
Emojify CLI: overlay expression images on the faces of a picture.

Usage:
    python -m emojify.cli.run \
        --image photo.jpg \
        --faces faces.json \
        --assets assets/ \
        --output emojified.png

Faces come from an external detector, written as JSON or YAML
(see ``emojify.faces_io``).
"""

import argparse
import logging
import sys
from typing import List, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_FACES = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Overlay expression images on detected faces",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Input / output
    parser.add_argument(
        "--image",
        type=str,
        default=None,
        help="Path to the source picture",
    )
    parser.add_argument(
        "--faces",
        type=str,
        default=None,
        help="Path to the detected faces file (JSON or YAML)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to write the composited picture",
    )
    parser.add_argument(
        "--assets",
        type=str,
        default=None,
        help="Directory holding the eight overlay images (overrides config)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (YAML or JSON)",
    )

    # Processing arguments
    parser.add_argument(
        "--scale-factor",
        type=float,
        default=None,
        help="Overlay width as a fraction of face width (overrides config)",
    )
    parser.add_argument(
        "--no-compound-height",
        action="store_true",
        help="Scale overlay height by the aspect ratio only",
    )

    # Output arguments
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    # Misc arguments
    parser.add_argument(
        "--create-config",
        type=str,
        default=None,
        metavar="PATH",
        help="Create a default config file and exit",
    )

    args = parser.parse_args(argv)
    if args.create_config is None:
        missing = [
            flag for flag, value in (
                ("--image", args.image),
                ("--faces", args.faces),
                ("--output", args.output),
            ) if value is None
        ]
        if missing:
            parser.error(f"the following arguments are required: {', '.join(missing)}")
    return args


class EmojifyRunner:
    """Loads inputs, runs the pipeline and writes the result."""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.config = None
        self.emojifier = None
        self.library = None

    def setup(self) -> None:
        """Build the pipeline from config file and command line overrides."""
        from emojify.assets import OverlayLibrary
        from emojify.classifier import ExpressionClassifier
        from emojify.compositor import Compositor
        from emojify.config import EmojifyConfig, load_config
        from emojify.emojifier import Emojifier

        if self.args.config:
            config = load_config(self.args.config)
        else:
            config = EmojifyConfig()

        # Override with command line args
        if self.args.assets:
            config.asset_dir = self.args.assets
        if self.args.scale_factor is not None:
            config.scale_factor = self.args.scale_factor
        if self.args.no_compound_height:
            config.compound_height_scale = False

        if config.asset_dir is None:
            raise ValueError("No overlay directory given; use --assets or set asset_dir")

        self.config = config
        self.emojifier = Emojifier(
            classifier=ExpressionClassifier(config.classifier_config()),
            compositor=Compositor(config.compositor_config()),
        )
        self.library = OverlayLibrary(config.asset_dir, extension=config.asset_extension)

    def run(self) -> int:
        """Emojify the picture; returns the process exit code."""
        import cv2

        from emojify.errors import AssetError
        from emojify.faces_io import load_faces

        picture = cv2.imread(self.args.image, cv2.IMREAD_UNCHANGED)
        if picture is None:
            raise AssetError(f"Failed to read picture: {self.args.image}")

        faces = load_faces(self.args.faces)
        outcome = self.emojifier.emojify(picture, faces, self.library)

        if not outcome.faces_found:
            logger.warning(outcome.message)
            return EXIT_NO_FACES

        for index, (category, placement) in enumerate(
            zip(outcome.categories, outcome.placements)
        ):
            logger.info(
                f"Face {index}: {category.name} "
                f"({placement.width}x{placement.height} at {placement.origin})"
            )

        try:
            written = cv2.imwrite(self.args.output, outcome.image)
        except cv2.error as e:
            raise AssetError(f"Failed to write picture: {self.args.output}: {e}") from e
        if not written:
            raise AssetError(f"Failed to write picture: {self.args.output}")
        logger.info(f"Wrote {self.args.output}")
        return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the emojify CLI."""
    args = parse_args(argv)

    # Set log level
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    # Handle create-config option
    if args.create_config:
        from emojify.config import create_default_config
        create_default_config(args.create_config)
        print(f"Created default config at: {args.create_config}")
        return EXIT_OK

    from emojify.errors import EmojifyError

    runner = EmojifyRunner(args)
    try:
        runner.setup()
        return runner.run()
    except (EmojifyError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
