#!/usr/bin/env python3
"""
平面圖 XML 解析測試

測試項目：
- section 座標區間推斷
- draw.io XML 解析
- 解析失敗時改用固定 layout
"""

import os
import sys
import tempfile

# 將專案根目錄加到 Python 路徑中
current_dir = os.path.dirname(__file__)
project_root = os.path.abspath(os.path.join(current_dir, '..'))
if project_root not in sys.path:
    sys.path.append(project_root)

from boothmap.config import SectionBands, VenueConfig
from boothmap.floormap import determine_section_from_position, load_floor_map, parse_floor_map_xml

SAMPLE_XML = """<mxfile host="app.diagrams.net">
  <diagram id="floor" name="Page-1">
    <mxGraphModel dx="1000" dy="1000">
      <root>
        <mxCell id="0" />
        <mxCell id="1" parent="0" />
        <mxCell id="g1" value="" style="group" parent="1" vertex="1" connectable="0">
          <mxGeometry x="100" y="300" width="200" height="200" as="geometry" />
        </mxCell>
        <mxCell id="c1" value="&lt;b&gt;12&lt;/b&gt;" style="rounded=0;html=1;" parent="1" vertex="1">
          <mxGeometry x="900" y="2100" width="60" height="60" as="geometry" />
        </mxCell>
        <mxCell id="c2" value="5" style="rounded=0;" parent="1" vertex="1">
          <mxGeometry x="300" y="700" as="geometry" />
        </mxCell>
        <mxCell id="c3" value="&lt;div&gt; 3 &lt;/div&gt;" style="rounded=0;html=1;" parent="1" vertex="1">
          <mxGeometry x="2000" y="1200" width="60" height="60" as="geometry" />
        </mxCell>
        <mxCell id="c4" value="1" style="rounded=0;" parent="g1" vertex="1">
          <mxGeometry x="1000" y="1000" width="60" height="60" as="geometry" />
        </mxCell>
        <mxCell id="c5" value="Stage" style="rounded=0;" parent="1" vertex="1">
          <mxGeometry x="1000" y="1000" width="300" height="100" as="geometry" />
        </mxCell>
        <mxCell id="c6" value="1000" style="rounded=0;" parent="1" vertex="1">
          <mxGeometry x="1000" y="1000" width="60" height="60" as="geometry" />
        </mxCell>
        <mxCell id="c7" value="9" style="rounded=0;" parent="1" vertex="1" />
      </root>
    </mxGraphModel>
  </diagram>
</mxfile>
"""


def test_determine_section_from_position():
    """測試 section 座標區間"""
    print("=== 測試 section 推斷 ===")

    groups = {"g_left": (100, 1000), "g_right": (2000, 1000), "g_top": (1000, 100), "g_bottom": (1000, 2100)}

    cases = [
        ((1000, 2100, ""), "A"),
        ((100, 2100, ""), "A"),
        ((300, 300, ""), "E"),
        ((300, 700, ""), "D"),
        ((300, 1200, ""), "C"),
        ((300, 1800, ""), "B"),
        ((2000, 300, ""), "J"),
        ((2000, 700, ""), "H"),
        ((2000, 1200, ""), "G"),
        ((2000, 1800, ""), "F"),
        ((1000, 100, ""), "K"),
        ((1000, 1000, "g_left"), "B"),
        ((1000, 1000, "g_right"), "F"),
        ((1000, 1000, "g_top"), "K"),
        ((1000, 1000, "g_bottom"), "A"),
        ((1000, 1000, "unknown"), "A"),
    ]
    for (x, y, parent), expected in cases:
        result = determine_section_from_position(x, y, groups, parent)
        assert result == expected, f"({x}, {y}, {parent!r}) 應為 {expected}，得到 {result}"
    print(f"pass - {len(cases)} 個座標推斷正確")

    bands = SectionBands(bottom_y=3000, default_section="Z")
    assert determine_section_from_position(1000, 2100, {}, "", bands) == "Z", "自訂區間未生效"
    print("pass - 自訂區間正確")


def test_parse_floor_map_xml():
    """測試 draw.io XML 解析"""
    print("=== 測試 XML 解析 ===")

    booths = parse_floor_map_xml(SAMPLE_XML)
    codes = [booth.code for booth in booths]
    assert codes == ["A12", "B1", "D5", "G3"], f"解析結果錯誤: {codes}"
    print("pass - 數字標籤解析與排序正確")

    a12, b1, d5, g3 = booths
    assert (a12.x, a12.y, a12.width, a12.height) == (900, 2100, 60, 60), f"A12 幾何錯誤: {a12}"
    assert (d5.width, d5.height) == (70, 70), f"缺少寬高應預設 70: {d5}"
    assert b1.group == "g1", f"group 錯誤: {b1.group}"
    assert a12.number == 12 and a12.section == "A"
    print("pass - 幾何與 group 正確")

    assert parse_floor_map_xml("") == []
    assert parse_floor_map_xml("<mxfile></mxfile>") == []
    print("pass - 空文件回傳空列表")


def test_load_floor_map_fallback():
    """測試失敗時改用固定 layout"""
    print("=== 測試固定 layout 備援 ===")

    config = VenueConfig()
    with tempfile.TemporaryDirectory() as tmp_dir:
        good = os.path.join(tmp_dir, "floor.xml")
        with open(good, 'w', encoding='utf-8') as f:
            f.write(SAMPLE_XML)
        booths = load_floor_map(good, config)
        assert len(booths) == 4, f"應使用 XML 結果: {len(booths)}"
        print("pass - 可解析時使用 XML 結果")

        empty = os.path.join(tmp_dir, "empty.xml")
        with open(empty, 'w', encoding='utf-8') as f:
            f.write("this is not a floor map")
        assert len(load_floor_map(empty, config)) == 406, "無 booth 時應使用固定 layout"
        print("pass - 無 booth 時使用固定 layout")

        broken = os.path.join(tmp_dir, "broken.xml")
        with open(broken, 'w', encoding='utf-8') as f:
            f.write('<mxCell value="7"><mxGeometry x="abc" y="1" /></mxCell>')
        assert len(load_floor_map(broken, config)) == 406, "解析失敗時應使用固定 layout"
        print("pass - 解析失敗時使用固定 layout")

        missing = os.path.join(tmp_dir, "missing.xml")
        assert len(load_floor_map(missing, config)) == 406, "缺少檔案時應使用固定 layout"
        print("pass - 缺少檔案時使用固定 layout")

    assert len(load_floor_map(None)) == 406


def run_all_tests():
    """執行所有測試"""
    print("開始執行平面圖解析測試...\n")

    test_count = 0
    passed_count = 0

    tests = [
        ("section 推斷", test_determine_section_from_position),
        ("XML 解析", test_parse_floor_map_xml),
        ("固定 layout 備援", test_load_floor_map_fallback),
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
