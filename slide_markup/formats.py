"""Output format presets (split level, canvas size, agenda layout)."""
from dataclasses import dataclass
from typing import Dict, List

DEFAULT_FORMAT = "seminar"


@dataclass(frozen=True)
class FormatConfig:
    """Per-format settings consumed by the slide pipeline."""
    name: str
    ratio: str
    split_level: int
    width: int
    height: int
    toc_max_columns: int
    toc_items_per_column: int
    description: str = ""

    @property
    def uses_h2_grid(self) -> bool:
        """H2 sections are laid out as columns only when slides are cut at H1."""
        return self.split_level == 1


_FORMATS: Dict[str, FormatConfig] = {
    "webinar": FormatConfig("webinar", "16:9", 2, 1920, 1080, 2, 12,
                            "Small online meetings"),
    "meeting": FormatConfig("meeting", "16:9", 2, 1920, 1080, 2, 10,
                            "Small meetings and team syncs"),
    "seminar": FormatConfig("seminar", "16:9", 2, 1920, 1080, 2, 8,
                            "Mid-sized seminars, trainings and study groups"),
    "conference": FormatConfig("conference", "16:9", 3, 1920, 1080, 2, 5,
                               "Large conferences and talks"),
    "instapost": FormatConfig("instapost", "4:5", 3, 1080, 1350, 1, 13,
                              "Portrait social media posts"),
    "instastory": FormatConfig("instastory", "9:16", 3, 1080, 1920, 1, 18,
                               "Stories and short vertical video"),
    "a4": FormatConfig("a4", "A4", 1, 1123, 1587, 1, 22,
                       "Printed handouts"),
}


def get_format(name: str = DEFAULT_FORMAT) -> FormatConfig:
    """
    Look up an output format by name.

    Raises:
        ValueError: If the name is malformed or no such format exists
    """
    if not name or not name.replace("_", "").replace("-", "").isalnum():
        raise ValueError(f"Invalid format name: {name!r}")

    config = _FORMATS.get(name.lower())
    if config is None:
        raise ValueError(
            f"Format '{name}' not found. Available formats: {list_available_formats()}"
        )
    return config


def list_available_formats() -> List[str]:
    return list(_FORMATS)


def validate_format(name: str) -> bool:
    """Check if a format exists."""
    try:
        get_format(name)
        return True
    except ValueError:
        return False
