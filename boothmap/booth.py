"""
Booth code parsing for listing titles.

Organizers type booth codes into listing titles by hand, so a title can carry
its code at the start, at the end, in parentheses or after "at"/"booth":

    "A1 - Coffee Shop"      -> label "A1",     codes ["A1"]
    "G13-14: Rình Ai Tắm"   -> label "G13-14", codes ["G13", "G14"]
    "D25-26 Túi rác"        -> label "D25-26", codes ["D25", "D26"]
    "Big Event at A12-13"   -> label "A12-13", codes ["A12", "A13"]
    "K25,26 - Title"        -> label "K25,26", codes ["K25", "K26"]

A booth code is a section of 0-2 letters followed by a number in [1, 999].
Nothing here raises on bad input: unparseable tokens are dropped and a title
without a usable code parses to None.
"""

import re
from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Optional, Tuple

MIN_BOOTH_NUMBER = 1
MAX_BOOTH_NUMBER = 999

# Range span limits. The compact "K25-26" shortcut and the general range
# expander use different limits.
COMPACT_RANGE_MAX_SPAN = 10
RANGE_MAX_SPAN = 15

_CODE_RE = re.compile(r"^([A-Z]*)(\d+)$", re.IGNORECASE)
_VALID_CODE_RE = re.compile(r"^[A-Z]{0,2}\d{1,3}$")
_SECTION_RE = re.compile(r"^[A-Z]*")
_DASH_RE = re.compile(r"[-–—]")
_PART_SPLIT_RE = re.compile(r"[,;]")

# Applied to the uppercased cluster
_COMPACT_PAIR_RE = re.compile(r"^([A-Z]+)(\d+),\s*(\d+)$")
_COMPACT_RANGE_RE = re.compile(r"^([A-Z]+)(\d+)-(\d+)$")
# A dash followed by a title word that is not itself a booth code ("A12-Shop")
_TRAILING_TITLE_RE = re.compile(r"[-–—](?=\s*[^\W\d_])(?!\s*[A-Z]{1,2}\d)")

# One or more codes joined by dashes, commas, semicolons or spaces.
# (?!\d) keeps a run of digits from being split across repetitions.
_CLUSTER = r"[A-Z]{0,2}\d{1,3}(?!\d)(?:[-–—,;\s]*[A-Z]{0,2}\d{1,3}(?!\d))*"
_DASH = r"[-–—]"
# A title made only of codes ("A1, A2", "A13 - A14") goes straight to the last rule
_CODES_ONLY_RE = re.compile(r"^" + _CLUSTER + r"$", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedBooth:
    """Booth information extracted from one listing title."""
    label: str
    codes: List[str] = field(default_factory=list)
    booth_name: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)


def _rule(pattern: str, code_group: int, name_groups: Tuple[int, ...]):
    return re.compile(pattern, re.IGNORECASE), code_group, name_groups


# Ordered extraction rules: (pattern, code group, name groups).
# Priority matters: the first rule whose cluster yields a code wins.
TITLE_RULES = [
    # 1. "A1 - Coffee Shop", "A12-13 - Title", "K25,26 - Title"
    #    A dash glued to the code ("D25-26 X", "D25-D26 X") must not be
    #    followed by another number or code, or the range would be split.
    _rule(r"^(" + _CLUSTER + r")(?:\s+" + _DASH + r"\s*|" + _DASH + r"\s+|"
          + _DASH + r"(?![A-Z]{0,2}\d{1,3}\b))(.+)$", 1, (2,)),
    # 2. "G13-14: Rình Ai Tắm"
    _rule(r"^([A-Z]{1,2}\d{1,3}(?:" + _DASH + r"\d{1,3})?)\s*:\s*(.+)$", 1, (2,)),
    # 3. "D25-26 Túi rác", "B5-6 3 Ngọn Nến"
    _rule(r"^([A-Z]{1,2}\d{1,3}" + _DASH + r"\d{1,3})\s+(.+)$", 1, (2,)),
    # 4. "K25,26 Title", "E1,2 Title"
    _rule(r"^([A-Z]{1,2}\d{1,3},\s*\d{1,3})\s+(.+)$", 1, (2,)),
    # 5. "A1 Title", "D25-D26 Title"
    _rule(r"^(" + _CLUSTER + r")\s+(.+)$", 1, (2,)),
    # 6. "Title (A1)", "Title (A12-13) extra"
    _rule(r"^(.+?)\s*\((" + _CLUSTER + r")\)(.*)$", 2, (1, 3)),
    # 7. "Title A12-13" (leaves "... at A1" / "... booth A1" to rule 8)
    _rule(r"^(.*?\S)(?<!\bat)(?<!\bbooth)\s+(" + _CLUSTER + r")$", 2, (1,)),
    # 8. "Big Event at A12-13", "Meet at booth A5", "Booth A5"
    _rule(r"^(?:(.*?)\s+)?(?:(?:at\s+)?booth|at)\s+(" + _CLUSTER + r")\s*(.*)$", 2, (1, 3)),
    # 9. "A1, A2"
    _rule(r"^(" + _CLUSTER + r")$", 1, ()),
]


def booth_sort_key(code: str) -> Tuple[str, int]:
    """Sort key: section alphabetically, then number numerically."""
    section = _SECTION_RE.match(code).group(0)
    digits = code[len(section):]
    return section, int(digits) if digits.isdigit() else 0


def is_valid_booth_code(code: str) -> bool:
    return bool(code) and bool(_VALID_CODE_RE.match(code.upper()))


def _split_code(token: str) -> Optional[Tuple[str, int]]:
    match = _CODE_RE.match(token.strip())
    if not match:
        return None
    number = int(match.group(2))
    if number < MIN_BOOTH_NUMBER or number > MAX_BOOTH_NUMBER:
        return None
    return match.group(1).upper(), number


def normalize_booth_code(token: str) -> Optional[str]:
    """
    Normalize a single code to canonical form.

    "a12" -> "A12", "B007" -> "B7", "12" -> "12", "A1000" -> None
    """
    if not token:
        return None
    parts = _split_code(token)
    if parts is None:
        return None
    section, number = parts
    return f"{section}{number}"


def expand_booth_range(range_str: str, max_span: Optional[int] = RANGE_MAX_SPAN) -> List[str]:
    """
    Expand a two-endpoint range into individual codes.

    "A12-14" -> A12, A13, A14; "K25-26" -> K25, K26 (end inherits the section).
    Endpoints from different sections, reversed ranges and spans wider than
    max_span come back as just the two endpoints: "A12-B14" -> A12, B14.
    max_span=None disables the span check.
    """
    range_parts = [part.strip() for part in _DASH_RE.split(range_str)]

    if len(range_parts) != 2:
        normalized = normalize_booth_code(range_str)
        return [normalized] if normalized else []

    start_str, end_str = range_parts
    start = _split_code(start_str)
    end = _split_code(end_str)

    if start is None or end is None:
        codes = []
        start_norm = normalize_booth_code(start_str)
        end_norm = normalize_booth_code(end_str)
        if start_norm:
            codes.append(start_norm)
        if end_norm and end_norm != start_norm:
            codes.append(end_norm)
        return codes

    start_section, start_num = start
    end_section, end_num = end
    end_section = end_section or start_section

    within_span = max_span is None or (end_num - start_num) <= max_span
    if start_section == end_section and start_num <= end_num and within_span:
        return [f"{start_section}{n}" for n in range(start_num, end_num + 1)]

    return [f"{start_section}{start_num}", f"{end_section}{end_num}"]


def _sorted_unique(codes: Iterable[str]) -> List[str]:
    return sorted(set(codes), key=booth_sort_key)


def parse_booth_code_string(code_str: str) -> List[str]:
    """
    Parse a code cluster into a sorted, de-duplicated list of codes.

    Handles "A1", "A12-13", "A1,A2", "A1, A2", "A13 - A14", "K25,26",
    "G19, 20" and "A7, 8, 9" (bare numbers inherit the previous section).
    """
    if not code_str or not code_str.strip():
        return []

    text = code_str.strip().upper()

    # "K25,26", "E1,2": section written once for two booths
    compact_match = _COMPACT_PAIR_RE.match(text)
    if compact_match:
        section, num1, num2 = compact_match.groups()
        codes = [normalize_booth_code(section + num1), normalize_booth_code(section + num2)]
        return _sorted_unique(code for code in codes if code)

    # "K25-26", "D25-26"
    range_match = _COMPACT_RANGE_RE.match(text)
    if range_match:
        section = range_match.group(1)
        start, end = int(range_match.group(2)), int(range_match.group(3))
        if start <= end and (end - start) <= COMPACT_RANGE_MAX_SPAN:
            codes = (normalize_booth_code(f"{section}{n}") for n in range(start, end + 1))
            return _sorted_unique(code for code in codes if code)

    # Drop a title word glued onto the codes with a dash ("G19, 20-Shop")
    title_split = _TRAILING_TITLE_RE.split(text, maxsplit=1)
    if len(title_split) > 1:
        text = title_split[0].strip()

    codes: List[str] = []
    for part in _PART_SPLIT_RE.split(text):
        part = part.strip()
        if not part:
            continue

        if _DASH_RE.search(part):
            codes.extend(expand_booth_range(part))
            continue

        # "A1 A2" and "A1 2" are space separated lists
        for token in part.split():
            _append_single_code(codes, token)

    return _sorted_unique(codes)


def _append_single_code(codes: List[str], token: str):
    # bare number after a sectioned code: "G19, 20" -> G20
    if token.isdigit() and codes:
        last_section = _SECTION_RE.match(codes[-1]).group(0)
        if last_section:
            inherited = normalize_booth_code(last_section + token)
            if inherited:
                codes.append(inherited)
            return

    normalized = normalize_booth_code(token)
    if normalized:
        codes.append(normalized)


def extract_booth(title: str) -> Optional[ParsedBooth]:
    """
    Locate the booth codes in a listing title.

    Rules in TITLE_RULES are tried in order; a rule whose cluster parses to
    no code is skipped. Returns None when no rule yields a code.
    """
    if not title or not title.strip():
        return None

    clean_title = title.strip()

    rules = TITLE_RULES
    if _CODES_ONLY_RE.match(clean_title):
        rules = TITLE_RULES[-1:]

    for pattern, code_group, name_groups in rules:
        match = pattern.match(clean_title)
        if not match:
            continue

        code_str = match.group(code_group)
        codes = parse_booth_code_string(code_str)
        if not codes:
            continue

        fragments = [match.group(i) or "" for i in name_groups]
        booth_name = " ".join(frag.strip() for frag in fragments if frag.strip())
        return ParsedBooth(label=code_str.strip().upper(), codes=codes, booth_name=booth_name)

    return None


def extract_all_booth_codes(title: str) -> List[str]:
    parsed = extract_booth(title)
    return list(parsed.codes) if parsed else []


def expand_booth_codes(booth_codes: Iterable[str]) -> List[str]:
    """Expand stamp-rally style code lists: ["G23-24", "A1"] -> ["G23", "G24", "A1"]."""
    expanded = []
    for code in booth_codes:
        if _DASH_RE.search(code):
            expanded.extend(expand_booth_range(code, max_span=None))
        else:
            normalized = normalize_booth_code(code)
            if normalized:
                expanded.append(normalized)
    return expanded
