#!/usr/bin/env python3
"""
由 listing 標題建立 booth map 的腳本

讀取 listing JSON（[{ "_id", "title", "images", "hasPreorder", ... }]），
解析標題中的 booth code，輸出 booth code → listing 摘要的 JSON。
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# 添加項目根目錄到路徑
sys.path.insert(0, str(Path(__file__).parent.parent))

from boothmap.booth import extract_booth
from boothmap.event_map import booth_event_map_to_dict, build_booth_event_map

# 設定日誌
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def load_listings(path: str):
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    # 也接受 {"data": [...]} 形式的匯出
    if isinstance(data, dict):
        data = data.get('data', [])
    return data


def main(argv=None):
    parser = argparse.ArgumentParser(description="解析 listing 標題並建立 booth map。")
    parser.add_argument("--listings", default="data/listings.json",
                        help="listing JSON 檔案路徑")
    parser.add_argument("--output", default="data/booth_map.json",
                        help="輸出的 booth map JSON 路徑")
    parser.add_argument("--show-unparsed", action="store_true",
                        help="列出無法解析 booth code 的標題")

    args = parser.parse_args(argv)

    try:
        listings = load_listings(args.listings)
    except FileNotFoundError:
        logger.error(f"找不到 listing 檔案: {args.listings}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"listing 檔案格式錯誤: {args.listings} ({e})")
        return 1

    logger.info(f"載入 {len(listings)} 筆 listing: {args.listings}")

    event_map = build_booth_event_map(listings)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(booth_event_map_to_dict(event_map), f, indent=2, ensure_ascii=False)

    multi = sum(1 for entry in event_map.values() if entry.total_events > 1)
    print(f"Booth map: {len(event_map)} 個 booth 有 listing，其中 {multi} 個有多筆")
    print(f"已儲存至: {output_path}")

    if args.show_unparsed:
        unparsed = [item.get('title', '') for item in listings if extract_booth(item.get('title') or '') is None]
        print(f"\n無法解析的標題 ({len(unparsed)}):")
        for title in unparsed:
            print(f"  - {title}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
