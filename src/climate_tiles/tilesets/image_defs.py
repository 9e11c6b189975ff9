"""
Registry of JSON image definitions.

Each `<name>.json` file in the definitions directory describes one image
(sprite frames, animations, offsets). Clients request definitions by image
name; a trailing digit marks a numbered variant that shares the base
definition (``"wolf2"`` resolves to ``wolf.json``).
"""

import logging
from pathlib import Path
from typing import Any

import orjson


class ImageDefRegistry:
    """Loads and serves JSON image definitions keyed by file stem."""

    def __init__(self, directory: Path | str):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.directory = Path(directory)
        self.definitions: dict[str, Any] = {}
        self._load()

    def _load(self):
        if not self.directory.exists() or not self.directory.is_dir():
            raise FileNotFoundError(f"Image definitions path not found: {self.directory}")

        self.logger.info(f"Loading image definitions from {self.directory}")
        for json_file in sorted(self.directory.glob("*.json")):
            try:
                self.definitions[json_file.stem] = orjson.loads(json_file.read_bytes())
            except orjson.JSONDecodeError as e:
                self.logger.warning(f"Error reading image definition {json_file}: {e}")
        self.logger.debug(f"total {len(self.definitions)} image definitions loaded")

    @staticmethod
    def base_name(name: str) -> str:
        """Strip a single trailing variant digit from an image name."""
        if name and name[-1].isdigit():
            return name[:-1]
        return name

    def get(self, name: str) -> Any:
        """Return the definition for an image name.

        Raises:
            KeyError: If no definition matches
        """
        key = self.base_name(name)
        if key not in self.definitions:
            raise KeyError(f"Image definition not found: {name}")
        return self.definitions[key]

    def image_def_packet(self, name: str) -> dict[str, Any]:
        """Build the response payload sent for an image definition request.

        The requested name is echoed unchanged, variant digit included.
        """
        return {"packet": "image_def", "name": name, "data": self.get(name)}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.base_name(name) in self.definitions

    def __len__(self) -> int:
        return len(self.definitions)

    def names(self) -> list[str]:
        return sorted(self.definitions)
