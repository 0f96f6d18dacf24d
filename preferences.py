"""
Preference Store - persists the selected Ollama model between runs.
"""

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".langtermrc"


@dataclass(frozen=True)
class Preference:
    model: str


class PreferenceStore:
    """Reads and writes the single `{"model": ...}` JSON object."""

    def __init__(self, path: Path = CONFIG_FILE):
        self.path = Path(path)

    def load(self) -> Optional[Preference]:
        """Return the stored preference, or None if missing or unusable."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("No usable preference at %s: %s", self.path, e)
            return None

        if not isinstance(data, dict):
            return None
        model = data.get("model")
        if not isinstance(model, str) or not model.strip():
            return None
        return Preference(model=model)

    def save(self, pref: Preference) -> None:
        """Write the preference, replacing any previous file.

        I/O errors propagate: saving only happens during interactive setup.
        """
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(asdict(pref), f, indent=2)
        logger.debug("Saved preference to %s", self.path)
