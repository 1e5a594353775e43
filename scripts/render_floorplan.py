#!/usr/bin/env python3
"""
平面圖預覽腳本

將 booth map 與 booth 位置（固定 layout 或 draw.io 平面圖）對應後輸出 PNG。
"""

import argparse
import logging
import sys
from pathlib import Path

# 添加項目根目錄到路徑
sys.path.insert(0, str(Path(__file__).parent.parent))

from boothmap.config import load_venue_config
from boothmap.event_map import (
    correlate_booths,
    load_booth_event_map,
    load_booth_names,
    load_stamp_rallies,
    rally_booths,
    summarize_occupancy,
)
from boothmap.floormap import load_floor_map
from boothmap.layout import load_layout, save_layout
from boothmap.viz import FloorPlanRenderer

# 設定日誌
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="輸出 booth 平面圖預覽 PNG。")
    parser.add_argument("--booth-map", default="data/booth_map.json", help="booth map JSON 路徑")
    parser.add_argument("--config", default=None, help="venue YAML 設定檔（預設使用內建設定）")
    parser.add_argument("--xml", default=None, help="draw.io 平面圖 XML（可選，失敗時改用固定 layout）")
    parser.add_argument("--layout", default=None, help="已儲存的 layout JSON（可選）")
    parser.add_argument("--export-layout", default=None, help="將使用的 layout 另存為 JSON")
    parser.add_argument("--booth-names", default="booth.json", help="booth 名稱對照 JSON")
    parser.add_argument("--stamp-rallies", default="stamprally.json", help="stamp rally JSON")
    parser.add_argument("--rally", default=None, help="要標示的 stamp rally 名稱")
    parser.add_argument("--scale", type=float, default=0.25, help="輸出縮放比例")
    parser.add_argument("--output", default="visualizations/floorplan.png", help="輸出 PNG 路徑")

    args = parser.parse_args(argv)

    try:
        config = load_venue_config(args.config)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    # 位置來源：layout JSON > 平面圖 XML > 固定 layout
    positions = load_layout(args.layout) if args.layout else []
    if not positions:
        positions = load_floor_map(args.xml, config)

    if args.export_layout:
        save_layout(positions, args.export_layout)
        logger.info(f"layout 已儲存: {args.export_layout}")

    event_map = load_booth_event_map(args.booth_map)
    if not event_map:
        logger.warning(f"booth map 為空或不存在，只畫空白平面圖: {args.booth_map}")
    booth_names = load_booth_names(args.booth_names)
    slots = correlate_booths(positions, event_map, booth_names)

    highlight = []
    if args.rally:
        rallies = [r for r in load_stamp_rallies(args.stamp_rallies) if r.get('name') == args.rally]
        if not rallies:
            logger.warning(f"找不到 stamp rally: {args.rally}")
        for rally in rallies:
            highlight.extend(rally_booths(rally))

    renderer = FloorPlanRenderer(config, scale=args.scale)
    renderer.render(slots, args.output, highlight_codes=highlight)

    stats = summarize_occupancy(slots)
    print(f"總計 {stats['total']} 個 booth：{stats['occupied']} 個有 listing，"
          f"{stats['empty']} 個空位（{stats['named_empty']} 個有名稱）")
    print(f"平面圖已儲存至: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
