"""
平面圖 XML 解析模組 (Floor-map XML Module)

從 draw.io 匯出的平面圖還原 booth 位置，作為固定 layout 的備援：
- 收集 group 元素的位置
- 解析帶數字標籤的 mxCell 與其 mxGeometry
- 依座標區間推斷 section（區間設定見 SectionBands）
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from .booth import MAX_BOOTH_NUMBER, MIN_BOOTH_NUMBER
from .config import SectionBands, VenueConfig
from .layout import BoothPosition, generate_booth_layout

logger = logging.getLogger(__name__)

# draw.io stores HTML labels escaped in the value attribute: "<b>12</b>"
_NUMBER_LABEL_RE = re.compile(r">\s*(\d+)\s*<")
_BARE_NUMBER_RE = re.compile(r"^\s*(\d+)\s*$")

DEFAULT_BOOTH_SIZE = 70.0


def _number_label(value: str) -> Optional[int]:
    match = _NUMBER_LABEL_RE.search(value) or _BARE_NUMBER_RE.match(value)
    return int(match.group(1)) if match else None


def _float_attr(tag, name: str, default: float) -> float:
    raw = tag.get(name)
    if raw is None or raw == '':
        return default
    return float(raw)


def _band_lookup(y: float, bands: List[Tuple[float, str]], default: str) -> str:
    for upper_bound, section in bands:
        if y < upper_bound:
            return section
    return default


def determine_section_from_position(x: float, y: float,
                                   groups: Dict[str, Tuple[float, float]],
                                   parent_id: str,
                                   bands: Optional[SectionBands] = None) -> str:
    """依絕對座標推斷 section；無法判斷時改用所屬 group 的位置"""
    if bands is None:
        bands = SectionBands()

    if y > bands.bottom_y:
        return bands.bottom_section
    if x < bands.left_x:
        return _band_lookup(y, bands.left_bands, bands.left_default)
    if x > bands.right_x:
        return _band_lookup(y, bands.right_bands, bands.right_default)
    if y < bands.top_y:
        return bands.top_section

    group_pos = groups.get(parent_id)
    if group_pos:
        group_x, group_y = group_pos
        if group_y > bands.bottom_y:
            return bands.bottom_section
        if group_x < bands.left_x:
            return bands.left_default
        if group_x > bands.right_x:
            return bands.right_default
        if group_y < bands.top_y:
            return bands.top_section

    return bands.default_section


def parse_floor_map_xml(xml_content: str, bands: Optional[SectionBands] = None) -> List[BoothPosition]:
    """
    解析 draw.io 平面圖 XML，回傳依 (section, number) 排序的 booth 位置

    Args:
        xml_content: draw.io XML 內容（未壓縮）
        bands: section 座標區間，預設為 SectionBands()

    Returns:
        BoothPosition 列表
    """
    # html.parser 會把標籤名稱轉成小寫
    soup = BeautifulSoup(xml_content, 'html.parser')
    cells = soup.find_all('mxcell')

    # 第一輪：收集 group 位置
    groups: Dict[str, Tuple[float, float]] = {}
    for cell in cells:
        style = cell.get('style') or ''
        if 'group' not in style:
            continue
        geometry = cell.find('mxgeometry')
        if geometry is not None:
            groups[cell.get('id') or ''] = (_float_attr(geometry, 'x', 0.0), _float_attr(geometry, 'y', 0.0))

    # 第二輪：解析數字標籤
    booths = []
    for cell in cells:
        number = _number_label(cell.get('value') or '')
        if number is None or not MIN_BOOTH_NUMBER <= number <= MAX_BOOTH_NUMBER:
            continue

        geometry = cell.find('mxgeometry')
        if geometry is None:
            continue

        x = _float_attr(geometry, 'x', 0.0)
        y = _float_attr(geometry, 'y', 0.0)
        parent = cell.get('parent') or ''
        section = determine_section_from_position(x, y, groups, parent, bands)

        booths.append(BoothPosition(
            code=f"{section}{number}",
            section=section,
            number=number,
            x=x,
            y=y,
            width=_float_attr(geometry, 'width', DEFAULT_BOOTH_SIZE),
            height=_float_attr(geometry, 'height', DEFAULT_BOOTH_SIZE),
            group=parent,
        ))

    logger.debug(f"平面圖解析完成：{len(groups)} 個 group，{len(booths)} 個 booth")
    return sorted(booths, key=lambda b: (b.section, b.number))


def load_floor_map(path: Optional[str], config: Optional[VenueConfig] = None) -> List[BoothPosition]:
    """
    讀取平面圖 XML；檔案不存在、解析失敗或沒有任何 booth 時，
    改用 generate_booth_layout 產生的固定 layout
    """
    if config is None:
        config = VenueConfig()

    if not path:
        return generate_booth_layout(config)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            xml_content = f.read()
        booths = parse_floor_map_xml(xml_content, config.section_bands)
    except Exception as e:
        logger.error(f"平面圖解析失敗，改用固定 layout: {path} ({e})")
        return generate_booth_layout(config)

    if not booths:
        logger.warning(f"平面圖中找不到 booth，改用固定 layout: {path}")
        return generate_booth_layout(config)

    logger.info(f"從平面圖載入 {len(booths)} 個 booth: {path}")
    return booths
