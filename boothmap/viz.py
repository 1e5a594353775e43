import os
from typing import Dict, Iterable, List, Optional, Tuple

from PIL import Image, ImageDraw

from .config import VenueConfig
from .event_map import BoothSlot
from .layout import layout_bounds


class FloorPlanRenderer:
    """Floor plan preview: booth grid colored by section, occupied booths filled"""

    def __init__(self, config: VenueConfig = None, scale: float = 0.25, padding: int = 100):
        self.config = config or VenueConfig()
        self.scale = scale
        self.padding = padding

        self.background = (255, 255, 255, 255)
        self.empty_fill = (243, 244, 246, 255)       # Light gray
        self.empty_outline = (156, 163, 175, 255)    # Gray
        self.named_fill = (229, 231, 235, 255)       # Slightly darker gray
        self.highlight_outline = (255, 0, 255, 255)  # Magenta
        self.text_color = (31, 41, 55, 255)

    @staticmethod
    def parse_hex_color(hex_color: str, alpha: int = 255) -> Optional[Tuple[int, int, int, int]]:
        """Parse "#rrggbb" into an RGBA tuple, None when malformed"""
        if not hex_color or not hex_color.startswith('#') or len(hex_color) != 7:
            return None
        try:
            rgb = tuple(int(hex_color[i:i + 2], 16) for i in (1, 3, 5))
        except ValueError:
            return None
        return (*rgb, alpha)

    def get_section_colors(self, section: str) -> Tuple[Tuple[int, int, int, int], Tuple[int, int, int, int]]:
        """(fill, stroke) for a section, gray fallback"""
        colors = self.config.section_colors.get(section, {})
        fill = self.parse_hex_color(colors.get('fill', '')) or (209, 213, 219, 255)
        stroke = self.parse_hex_color(colors.get('stroke', '')) or (107, 114, 128, 255)
        return fill, stroke

    def canvas_size(self, bounds: Dict) -> Tuple[int, int]:
        width = int((bounds['width'] + 2 * self.padding) * self.scale) + 1
        height = int((bounds['height'] + 2 * self.padding) * self.scale) + 1
        return max(1, width), max(1, height)

    def to_canvas(self, x: float, y: float, bounds: Dict) -> Tuple[int, int]:
        """Convert floor-plan coordinates to canvas pixels"""
        return (
            int((x - bounds['min_x'] + self.padding) * self.scale),
            int((y - bounds['min_y'] + self.padding) * self.scale),
        )

    def render(self, slots: List[BoothSlot], output_path: str = None,
               highlight_codes: Iterable[str] = None, show_labels: bool = True) -> Image.Image:
        """Draw every slot; returns the image and saves it when output_path is given"""
        highlight = set(highlight_codes or [])
        bounds = layout_bounds([slot.position for slot in slots])

        img = Image.new('RGBA', self.canvas_size(bounds), self.background)
        draw = ImageDraw.Draw(img)

        for slot in slots:
            pos = slot.position
            x1, y1 = self.to_canvas(pos.x, pos.y, bounds)
            x2, y2 = self.to_canvas(pos.x + pos.width, pos.y + pos.height, bounds)

            fill, stroke = self.get_section_colors(pos.section)
            if slot.is_occupied:
                outline, width = stroke, 2
            else:
                fill = self.named_fill if slot.name else self.empty_fill
                outline, width = self.empty_outline, 1

            if slot.code in highlight:
                outline, width = self.highlight_outline, 4

            draw.rectangle([x1, y1, x2, y2], fill=fill, outline=outline, width=width)

            if show_labels:
                draw.text((x1 + 2, y1 + 2), slot.code, fill=self.text_color)

        if output_path:
            output_dir = os.path.dirname(output_path)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            img.convert('RGB').save(output_path)

        return img
