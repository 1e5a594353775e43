#!/usr/bin/env python3
"""
booth map 與平面圖腳本測試
"""

import json
import os
import sys
import tempfile

# 將專案根目錄加到 Python 路徑中
current_dir = os.path.dirname(__file__)
project_root = os.path.abspath(os.path.join(current_dir, '..'))
if project_root not in sys.path:
    sys.path.append(project_root)

from scripts import build_booth_map, render_floorplan


def test_build_booth_map_script():
    """測試 build_booth_map 腳本"""
    print("=== 測試 build_booth_map ===")

    listings = {"data": [
        {"_id": "e1", "title": "K25,26 - Title", "images": ["https://img/1.jpg"]},
        {"_id": "e2", "title": "No code here"},
    ]}

    with tempfile.TemporaryDirectory() as tmp_dir:
        listings_path = os.path.join(tmp_dir, "listings.json")
        with open(listings_path, 'w', encoding='utf-8') as f:
            json.dump(listings, f)

        output_path = os.path.join(tmp_dir, "out", "booth_map.json")
        code = build_booth_map.main(["--listings", listings_path, "--output", output_path, "--show-unparsed"])
        assert code == 0, f"腳本結束碼錯誤: {code}"

        with open(output_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        assert list(data) == ["K25", "K26"], f"輸出 booth code 錯誤: {list(data)}"
        assert data["K26"]["boothLabel"] == "K25,26" and data["K26"]["thumb"] == "https://img/1.jpg"
        print("pass - booth map 輸出正確")

        missing = os.path.join(tmp_dir, "missing.json")
        assert build_booth_map.main(["--listings", missing, "--output", output_path]) == 1
        print("pass - 缺少 listing 檔案回傳錯誤碼")


def test_render_floorplan_script():
    """測試 render_floorplan 腳本"""
    print("=== 測試 render_floorplan ===")

    with tempfile.TemporaryDirectory() as tmp_dir:
        booth_map_path = os.path.join(tmp_dir, "booth_map.json")
        with open(booth_map_path, 'w', encoding='utf-8') as f:
            json.dump({"A1": {"eventId": "e1", "title": "A1 - Coffee Shop", "boothLabel": "A1"}}, f)

        rally_path = os.path.join(tmp_dir, "stamprally.json")
        with open(rally_path, 'w', encoding='utf-8') as f:
            json.dump({"stampRallies": [{"name": "Spring", "booths": ["A1-3"]}]}, f)

        output_path = os.path.join(tmp_dir, "floorplan.png")
        layout_path = os.path.join(tmp_dir, "layout.json")
        code = render_floorplan.main([
            "--booth-map", booth_map_path,
            "--booth-names", os.path.join(tmp_dir, "missing.json"),
            "--stamp-rallies", rally_path,
            "--rally", "Spring",
            "--export-layout", layout_path,
            "--output", output_path,
        ])
        assert code == 0, f"腳本結束碼錯誤: {code}"
        assert os.path.exists(output_path), "PNG 未輸出"

        with open(layout_path, 'r', encoding='utf-8') as f:
            assert len(json.load(f)) == 406, "匯出的 layout 應為固定 layout"
        print("pass - 平面圖與 layout 輸出正確")

        code = render_floorplan.main(["--config", os.path.join(tmp_dir, "missing.yaml"),
                                      "--output", output_path])
        assert code == 1, "缺少設定檔應回傳錯誤碼"
        print("pass - 缺少設定檔回傳錯誤碼")


def run_all_tests():
    """執行所有測試"""
    print("開始執行腳本測試...\n")

    test_count = 0
    passed_count = 0

    tests = [
        ("build_booth_map", test_build_booth_map_script),
        ("render_floorplan", test_render_floorplan_script),
    ]

    for test_name, test_func in tests:
        test_count += 1
        try:
            result = test_func()
            if result is not False:
                passed_count += 1
        except Exception as e:
            print(f"fail - {test_name} 測試失敗: {e}\n")

    print("=" * 50)
    print(f"測試總結: {passed_count}/{test_count} 個測試通過")
    return passed_count == test_count


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
