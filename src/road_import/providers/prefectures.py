"""Bounding boxes for the 47 prefectures, keyed by the name OSM uses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from road_import.errors import UnknownArea


@dataclass(frozen=True)
class BBox:
    south: float
    west: float
    north: float
    east: float

    def overpass(self) -> str:
        return f"{self.south},{self.west},{self.north},{self.east}"


PREFECTURE_BOUNDS: Dict[str, BBox] = {
    "北海道": BBox(41.4, 139.4, 45.5, 145.8),
    "青森県": BBox(40.2, 139.5, 41.6, 141.7),
    "岩手県": BBox(38.9, 140.8, 40.4, 142.1),
    "宮城県": BBox(37.8, 140.3, 38.9, 141.7),
    "秋田県": BBox(39.1, 139.6, 40.7, 141.0),
    "山形県": BBox(37.7, 139.5, 39.0, 140.7),
    "福島県": BBox(36.8, 139.3, 38.0, 141.1),
    "茨城県": BBox(35.7, 139.7, 36.9, 140.9),
    "栃木県": BBox(36.2, 139.3, 37.0, 140.3),
    "群馬県": BBox(36.0, 138.4, 36.7, 139.5),
    "埼玉県": BBox(35.7, 138.7, 36.3, 139.9),
    "千葉県": BBox(34.9, 139.7, 35.9, 140.9),
    "東京都": BBox(35.5, 138.9, 35.9, 139.9),
    "神奈川県": BBox(35.1, 138.9, 35.6, 139.8),
    "新潟県": BBox(36.7, 137.6, 38.6, 139.9),
    "富山県": BBox(36.3, 136.8, 36.9, 137.7),
    "石川県": BBox(36.0, 136.2, 37.9, 137.4),
    "福井県": BBox(35.3, 135.4, 36.4, 136.9),
    "山梨県": BBox(35.1, 138.2, 36.0, 139.2),
    "長野県": BBox(35.1, 137.3, 37.1, 138.9),
    "岐阜県": BBox(35.3, 136.5, 36.3, 137.9),
    "静岡県": BBox(34.6, 137.5, 35.4, 139.2),
    "愛知県": BBox(34.6, 136.7, 35.4, 137.8),
    "三重県": BBox(33.7, 135.8, 35.0, 136.9),
    "滋賀県": BBox(34.8, 135.8, 35.7, 136.5),
    "京都府": BBox(34.8, 134.9, 35.8, 135.9),
    "大阪府": BBox(34.3, 135.1, 35.0, 135.7),
    "兵庫県": BBox(34.3, 134.3, 35.7, 135.5),
    "奈良県": BBox(33.9, 135.7, 34.8, 136.2),
    "和歌山県": BBox(33.4, 135.1, 34.4, 136.0),
    "鳥取県": BBox(35.1, 133.2, 35.7, 134.5),
    "島根県": BBox(34.3, 131.8, 36.0, 133.5),
    "岡山県": BBox(34.3, 133.2, 35.4, 134.5),
    "広島県": BBox(34.0, 132.0, 35.1, 133.5),
    "山口県": BBox(33.7, 130.8, 34.7, 132.5),
    "徳島県": BBox(33.6, 133.5, 34.3, 134.8),
    "香川県": BBox(34.0, 133.4, 34.5, 134.5),
    "愛媛県": BBox(32.9, 132.4, 34.3, 133.4),
    "高知県": BBox(32.7, 132.5, 33.9, 134.3),
    "福岡県": BBox(33.0, 130.1, 34.0, 131.3),
    "佐賀県": BBox(33.0, 129.8, 33.6, 130.5),
    "長崎県": BBox(32.6, 128.7, 34.7, 130.4),
    "熊本県": BBox(32.0, 130.3, 33.3, 131.3),
    "大分県": BBox(32.8, 130.8, 33.7, 132.0),
    "宮崎県": BBox(31.4, 130.7, 32.9, 131.9),
    "鹿児島県": BBox(28.0, 128.3, 32.2, 131.5),
    "沖縄県": BBox(24.0, 122.9, 28.0, 132.0),
}


def prefecture_bbox(prefecture: str) -> BBox:
    try:
        return PREFECTURE_BOUNDS[prefecture]
    except KeyError:
        raise UnknownArea(f"Unknown prefecture: {prefecture!r}") from None
