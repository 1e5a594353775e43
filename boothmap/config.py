"""
Venue configuration.

The booth grid (section counts, base offsets, row positions), the coordinate
bands used to guess a section from a floor-map position, and the per-section
display colors are venue data. Defaults describe the current hall; a YAML file
can override any part of it.
"""

import math
import os
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple

import yaml

# (section, booth count, base x, row y positions bottom-up)
DEFAULT_SECTION_TABLE = [
    ("A", 30, 900, (2450,)),
    ("B", 44, 500, (2100, 1950)),
    ("C", 44, 500, (1700, 1550)),
    ("D", 44, 500, (1300, 1150)),
    ("E", 44, 500, (900, 750)),
    ("F", 36, 4650, (2100, 1950)),
    ("G", 36, 4650, (1700, 1550)),
    ("H", 36, 4650, (1300, 1150)),
    ("J", 36, 4650, (900, 750)),
    ("K", 56, 300, (400,)),
]

DEFAULT_SECTION_COLORS = {
    "A": {"fill": "#fef3c7", "stroke": "#f59e0b"},
    "B": {"fill": "#dbeafe", "stroke": "#3b82f6"},
    "C": {"fill": "#dcfce7", "stroke": "#10b981"},
    "D": {"fill": "#fce7f3", "stroke": "#ec4899"},
    "E": {"fill": "#e0e7ff", "stroke": "#6366f1"},
    "F": {"fill": "#fed7d7", "stroke": "#ef4444"},
    "G": {"fill": "#d1fae5", "stroke": "#059669"},
    "H": {"fill": "#fef2e2", "stroke": "#f97316"},
    "J": {"fill": "#f3e8ff", "stroke": "#8b5cf6"},
    "K": {"fill": "#fdf2f8", "stroke": "#d946ef"},
}


@dataclass(frozen=True)
class SectionSpec:
    """One lettered section of booths laid out in one or more facing rows."""
    name: str
    count: int
    base_x: float
    row_ys: Tuple[float, ...]

    @property
    def per_row(self) -> int:
        return math.ceil(self.count / len(self.row_ys))

    def to_dict(self) -> Dict:
        return {"name": self.name, "count": self.count, "base_x": self.base_x, "rows": list(self.row_ys)}

    @classmethod
    def from_dict(cls, data: Dict) -> 'SectionSpec':
        rows = data.get("rows", data.get("row_ys"))
        if not rows:
            raise ValueError(f"section {data.get('name')!r} has no rows")
        return cls(name=str(data["name"]).upper(), count=int(data["count"]),
                   base_x=data["base_x"], row_ys=tuple(rows))


@dataclass
class SectionBands:
    """
    Coordinate thresholds used to infer a section from an absolute position
    on the floor-map diagram.

    *_bands lists are (y upper bound, section) pairs checked in order; the
    matching *_default applies below the last bound.
    """
    bottom_y: float = 2000
    bottom_section: str = "A"
    left_x: float = 500
    left_bands: List[Tuple[float, str]] = field(default_factory=lambda: [(500, "E"), (1000, "D"), (1500, "C")])
    left_default: str = "B"
    right_x: float = 1500
    right_bands: List[Tuple[float, str]] = field(default_factory=lambda: [(500, "J"), (1000, "H"), (1500, "G")])
    right_default: str = "F"
    top_y: float = 200
    top_section: str = "K"
    default_section: str = "A"


def default_sections() -> List[SectionSpec]:
    return [SectionSpec(name, count, base_x, rows) for name, count, base_x, rows in DEFAULT_SECTION_TABLE]


@dataclass
class VenueConfig:
    """Floor layout configuration for one venue."""

    booth_width: float = 110
    booth_height: float = 110
    column_pitch: float = 120

    sections: List[SectionSpec] = None
    section_bands: SectionBands = None
    section_colors: Dict[str, Dict[str, str]] = None

    def __post_init__(self):
        if self.sections is None:
            self.sections = default_sections()

        if self.section_bands is None:
            self.section_bands = SectionBands()

        if self.section_colors is None:
            self.section_colors = {name: dict(colors) for name, colors in DEFAULT_SECTION_COLORS.items()}

    @property
    def total_booths(self) -> int:
        return sum(section.count for section in self.sections)

    @classmethod
    def from_yaml(cls, yaml_file: str) -> 'VenueConfig':
        """Load a venue config from YAML; missing keys keep their defaults."""
        if not os.path.exists(yaml_file):
            raise FileNotFoundError(f"Venue config not found: {yaml_file}")

        with open(yaml_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        config = cls()

        booth = config_data.get('booth', {})
        config.booth_width = booth.get('width', config.booth_width)
        config.booth_height = booth.get('height', config.booth_height)
        config.column_pitch = booth.get('pitch', config.column_pitch)

        # a section list replaces the default table as a whole
        if 'sections' in config_data:
            config.sections = [SectionSpec.from_dict(item) for item in config_data['sections']]

        if 'section_bands' in config_data:
            bands = asdict(config.section_bands)
            bands.update(config_data['section_bands'])
            for key in ('left_bands', 'right_bands'):
                bands[key] = [(bound, section) for bound, section in bands[key]]
            config.section_bands = SectionBands(**bands)

        if 'section_colors' in config_data:
            config.section_colors.update(config_data['section_colors'])

        return config

    def to_yaml(self, yaml_file: str):
        config_data = {
            'booth': {
                'width': self.booth_width,
                'height': self.booth_height,
                'pitch': self.column_pitch,
            },
            'sections': [section.to_dict() for section in self.sections],
            'section_bands': {
                key: [list(pair) for pair in value] if key.endswith('_bands') else value
                for key, value in asdict(self.section_bands).items()
            },
            'section_colors': self.section_colors,
        }

        with open(yaml_file, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, allow_unicode=True, indent=2, sort_keys=False)


def load_venue_config(path: Optional[str] = None) -> VenueConfig:
    """Load the venue config from path, or the built-in defaults when path is None."""
    if path is None:
        return VenueConfig()
    return VenueConfig.from_yaml(path)
