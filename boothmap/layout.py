import json
from dataclasses import dataclass, asdict, replace
from typing import Dict, List, Optional

from .config import SectionSpec, VenueConfig


@dataclass(frozen=True)
class BoothPosition:
    """A single booth cell on the floor plan."""
    code: str
    section: str
    number: int
    # Absolute floor-plan coordinates
    x: float
    y: float
    width: float
    height: float
    # Parent group id when read from a floor-map diagram
    group: Optional[str] = None

    @property
    def center(self):
        return (self.x + self.width / 2, self.y + self.height / 2)


def section_positions(section: SectionSpec, config: VenueConfig) -> List[BoothPosition]:
    """Booths 1..count of one section; each row holds per_row booths, left to right."""
    booths = []
    per_row = section.per_row
    for i in range(1, section.count + 1):
        row, column = divmod(i - 1, per_row)
        booths.append(BoothPosition(
            code=f"{section.name}{i}",
            section=section.name,
            number=i,
            x=section.base_x + column * config.column_pitch,
            y=section.row_ys[row],
            width=config.booth_width,
            height=config.booth_height,
        ))
    return booths


def generate_booth_layout(config: Optional[VenueConfig] = None) -> List[BoothPosition]:
    """
    Generates the static booth grid for the venue.
    Sections come out in config order, booth numbers ascending within each.
    """
    if config is None:
        config = VenueConfig()

    booths: List[BoothPosition] = []
    for section in config.sections:
        booths.extend(section_positions(section, config))
    return booths


def get_by_code(booths: List[BoothPosition], code: str) -> Optional[BoothPosition]:
    """Finds a booth by its code."""
    for booth in booths:
        if booth.code == code:
            return booth
    return None


def index_by_code(booths: List[BoothPosition]) -> Dict[str, BoothPosition]:
    return {booth.code: booth for booth in booths}


def load_layout(path: str = "data/layout.json") -> List[BoothPosition]:
    """Loads booth positions from a JSON file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return [BoothPosition(**item) for item in data]
    except FileNotFoundError:
        return []


def save_layout(booths: List[BoothPosition], path: str = "data/layout.json"):
    """Saves booth positions to a JSON file."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump([asdict(b) for b in booths], f, indent=4, ensure_ascii=False)


def convert_to_svg_coordinates(booth: BoothPosition, xml_bounds: Dict, svg_view_box: Dict) -> BoothPosition:
    """Scale a booth from diagram coordinates into an SVG viewBox."""
    scale_x = svg_view_box["width"] / xml_bounds["width"]
    scale_y = svg_view_box["height"] / xml_bounds["height"]
    return replace(
        booth,
        x=booth.x * scale_x,
        y=booth.y * scale_y,
        width=booth.width * scale_x,
        height=booth.height * scale_y,
    )


def layout_bounds(booths: List[BoothPosition]) -> Dict:
    """Bounding box of all booths."""
    if not booths:
        return {"min_x": 0, "min_y": 0, "max_x": 0, "max_y": 0, "width": 0, "height": 0}
    min_x = min(b.x for b in booths)
    min_y = min(b.y for b in booths)
    max_x = max(b.x + b.width for b in booths)
    max_y = max(b.y + b.height for b in booths)
    return {
        "min_x": min_x,
        "min_y": min_y,
        "max_x": max_x,
        "max_y": max_y,
        "width": max_x - min_x,
        "height": max_y - min_y,
    }
