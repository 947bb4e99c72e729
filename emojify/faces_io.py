"""
Reading and writing face descriptor files.

A faces file is a JSON or YAML document holding either a list of face
entries or a mapping with a ``faces`` list. Each entry has the keys
``x``, ``y``, ``width``, ``height``, ``left_eye_open``,
``right_eye_open`` and ``smiling``.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence, Union

import yaml

from emojify.errors import InvalidInputError
from emojify.features import FaceDescriptor

logger = logging.getLogger(__name__)


def _is_yaml(path: Path) -> bool:
    return path.suffix in ('.yaml', '.yml')


def parse_faces(data: Any) -> List[FaceDescriptor]:
    """
    Build FaceDescriptors from a decoded faces document.

    Raises:
        InvalidInputError: If the document is not a list of face mappings.
    """
    if isinstance(data, dict):
        if 'faces' not in data:
            raise InvalidInputError("Faces document has no 'faces' list")
        data = data['faces']
    if data is None:
        return []
    if not isinstance(data, list):
        raise InvalidInputError(
            f"Faces document must be a list, got {type(data).__name__}"
        )

    faces = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise InvalidInputError(f"Face entry {index} is not a mapping")
        faces.append(FaceDescriptor.from_dict(entry))
    return faces


def load_faces(path: Union[str, Path]) -> List[FaceDescriptor]:
    """
    Load face descriptors from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidInputError: If the file cannot be parsed or an entry is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Faces file not found: {path}")

    try:
        with open(path, 'r') as f:
            if _is_yaml(path):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidInputError(f"Failed to parse faces file {path}: {e}") from e

    faces = parse_faces(data)
    logger.info(f"Loaded {len(faces)} face(s) from {path}")
    return faces


def save_faces(faces: Sequence[FaceDescriptor], path: Union[str, Path]) -> None:
    """Write face descriptors as ``{"faces": [...]}`` in JSON or YAML."""
    path = Path(path)
    data = {'faces': [face.to_dict() for face in faces]}

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        if _is_yaml(path):
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info(f"Saved {len(faces)} face(s) to {path}")
