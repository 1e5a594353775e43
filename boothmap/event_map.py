"""
Booth ↔ listing correlation.

Builds the booth code -> listing summary map from listing records, joins it
against booth positions, and resolves human-readable names for empty booths
from the organizer's booth.json lookup.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .booth import booth_sort_key, expand_booth_codes, extract_booth
from .layout import BoothPosition

logger = logging.getLogger(__name__)


@dataclass
class BoothEvent:
    """One listing located at a booth."""
    event_id: str
    title: str
    booth_label: str
    booth_name: str
    images: List[str] = field(default_factory=list)
    has_preorder: bool = False
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None

    def to_dict(self) -> Dict:
        data = {
            "eventId": self.event_id,
            "title": self.title,
            "boothLabel": self.booth_label,
            "boothName": self.booth_name,
            "images": list(self.images),
            "hasPreorder": self.has_preorder,
        }
        if self.start_date_time is not None:
            data["startDateTime"] = self.start_date_time
        if self.end_date_time is not None:
            data["endDateTime"] = self.end_date_time
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'BoothEvent':
        return cls(
            event_id=data.get('eventId', ''),
            title=data.get('title', ''),
            booth_label=data.get('boothLabel', ''),
            booth_name=data.get('boothName', ''),
            images=list(data.get('images', [])),
            has_preorder=bool(data.get('hasPreorder', False)),
            start_date_time=data.get('startDateTime'),
            end_date_time=data.get('endDateTime'),
        )


@dataclass
class BoothEntry:
    """
    Map value for one booth code. The first listing seen for the code is
    the primary one; every listing at the booth is kept in all_events.
    """
    event_id: str
    title: str
    booth_label: str
    booth_name: str
    thumb: str = ""
    has_preorder: bool = False
    images: List[str] = field(default_factory=list)
    all_events: List[BoothEvent] = field(default_factory=list)

    @property
    def total_events(self) -> int:
        return len(self.all_events)

    def to_dict(self) -> Dict:
        """camelCase keys, as the web layer reads them"""
        return {
            "eventId": self.event_id,
            "title": self.title,
            "boothLabel": self.booth_label,
            "boothName": self.booth_name,
            "thumb": self.thumb,
            "hasPreorder": self.has_preorder,
            "images": list(self.images),
            "allEvents": [event.to_dict() for event in self.all_events],
            "totalEvents": self.total_events,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'BoothEntry':
        return cls(
            event_id=data.get('eventId', ''),
            title=data.get('title', ''),
            booth_label=data.get('boothLabel', ''),
            booth_name=data.get('boothName', ''),
            thumb=data.get('thumb', ''),
            has_preorder=bool(data.get('hasPreorder', False)),
            images=list(data.get('images', [])),
            all_events=[BoothEvent.from_dict(item) for item in data.get('allEvents', [])],
        )


@dataclass
class BoothSlot:
    """One grid cell joined with whatever is known about it."""
    position: BoothPosition
    entry: Optional[BoothEntry] = None
    name: Optional[str] = None

    @property
    def code(self) -> str:
        return self.position.code

    @property
    def is_occupied(self) -> bool:
        return self.entry is not None


def _listing_images(listing: Dict) -> List[str]:
    images = []
    for image in listing.get('images') or []:
        url = image.get('imageUrl') if isinstance(image, dict) else image
        if url and url not in images:
            images.append(url)
    # older listings carry a single imageUrl
    if not images and listing.get('imageUrl'):
        images.append(listing['imageUrl'])
    return images


def _has_preorder(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in ('yes', 'true')


def _optional_str(value) -> Optional[str]:
    return None if value is None else str(value)


def build_booth_event_map(listings: Iterable[Dict]) -> Dict[str, BoothEntry]:
    """
    建立 booth code 到 listing 摘要的映射

    Listings whose title has no booth code are skipped.
    """
    event_map: Dict[str, BoothEntry] = {}
    skipped = 0

    for listing in listings:
        title = listing.get('title') or ''
        parsed = extract_booth(title)
        if parsed is None:
            skipped += 1
            logger.debug(f"No booth code in title: {title!r}")
            continue

        event = BoothEvent(
            event_id=str(listing.get('_id') or listing.get('id') or ''),
            title=title,
            booth_label=parsed.label,
            booth_name=parsed.booth_name,
            images=_listing_images(listing),
            has_preorder=_has_preorder(listing.get('hasPreorder')),
            start_date_time=_optional_str(listing.get('startDateTime')),
            end_date_time=_optional_str(listing.get('endDateTime')),
        )

        for code in parsed.codes:
            entry = event_map.get(code)
            if entry is None:
                event_map[code] = BoothEntry(
                    event_id=event.event_id,
                    title=event.title,
                    booth_label=event.booth_label,
                    booth_name=event.booth_name,
                    thumb=event.images[0] if event.images else "",
                    has_preorder=event.has_preorder,
                    images=list(event.images),
                    all_events=[event],
                )
            else:
                entry.all_events.append(event)
                entry.images.extend(url for url in event.images if url not in entry.images)

    if skipped:
        logger.info(f"{skipped} listings without a booth code were skipped")

    return dict(sorted(event_map.items(), key=lambda item: booth_sort_key(item[0])))


def booth_event_map_to_dict(event_map: Dict[str, BoothEntry]) -> Dict[str, Dict]:
    return {code: entry.to_dict() for code, entry in event_map.items()}


def load_booth_event_map(path: str = "data/booth_map.json") -> Dict[str, BoothEntry]:
    """Loads a booth map written by booth_event_map_to_dict; missing file -> {}"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    return {code: BoothEntry.from_dict(item) for code, item in data.items()}


def load_booth_names(path: str = "booth.json") -> Dict[str, str]:
    """Loads the booth code -> display name lookup. Keys may be ranges like "G23-24"."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid booth names file {path}: {e}")
        return {}


def get_booth_name(booth_code: str, booth_names: Dict[str, str]) -> Optional[str]:
    """Exact key first, then any range key that covers the code."""
    if not booth_names:
        return None
    if booth_code in booth_names:
        return booth_names[booth_code]

    for key, name in booth_names.items():
        if '-' in key and booth_code in expand_booth_codes([key.upper()]):
            return name

    return None


def correlate_booths(positions: List[BoothPosition],
                     event_map: Dict[str, BoothEntry],
                     booth_names: Optional[Dict[str, str]] = None) -> List[BoothSlot]:
    """Join booth positions with the event map by code, keeping position order."""
    slots = [
        BoothSlot(
            position=position,
            entry=event_map.get(position.code),
            name=get_booth_name(position.code, booth_names or {}),
        )
        for position in positions
    ]

    unplaced = find_unplaced_codes(event_map, positions)
    if unplaced:
        logger.warning(f"Booth codes with listings but no grid cell: {', '.join(unplaced)}")

    return slots


def find_unplaced_codes(event_map: Dict[str, BoothEntry], positions: List[BoothPosition]) -> List[str]:
    placed = {position.code for position in positions}
    return [code for code in event_map if code not in placed]


def summarize_occupancy(slots: List[BoothSlot]) -> Dict[str, int]:
    occupied = sum(1 for slot in slots if slot.is_occupied)
    named_empty = sum(1 for slot in slots if not slot.is_occupied and slot.name)
    return {
        "total": len(slots),
        "occupied": occupied,
        "empty": len(slots) - occupied,
        "named_empty": named_empty,
    }


def load_stamp_rallies(path: str = "stamprally.json") -> List[Dict]:
    """Loads stamp rallies ({"stampRallies": [{"name", "booths"}, ...]})."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return []
    return data.get('stampRallies', []) if isinstance(data, dict) else data


def rally_booths(rally: Dict) -> List[str]:
    return expand_booth_codes(rally.get('booths', []))


def rallies_for_booth(booth_code: str, rallies: List[Dict]) -> List[Dict]:
    return [rally for rally in rallies if booth_code in rally_booths(rally)]
