"""
catalog.py
======================

出題パラメータとして選べる分野・言語・地域の固定カタログ。

- SUBJECTS: 出題分野（最初の 5 つが初期アンロック）
- LANGUAGES: 問題文と選択肢の出力言語
- REGIONS: 地域フォーカス（"Global" は地域を絞らない番兵値）
"""

from __future__ import annotations

from typing import List

SUBJECTS: List[str] = [
    "History", "Science", "Geography", "Art & Literature", "Music",
    "Politics", "Technology", "Cuisine", "Sports", "Mythology",
    "Folklore", "Architecture", "Cinema", "Economy",
]

LANGUAGES: List[str] = [
    "English", "Spanish", "French", "German", "Chinese",
    "Japanese", "Hindi", "Arabic", "Portuguese", "Russian",
    "Italian", "Korean", "Dutch", "Turkish",
]

GLOBAL_REGION = "Global"

# (id, 表示用アイコン)
REGIONS: List[tuple] = [
    (GLOBAL_REGION, "🌐"),
    ("Africa", "🗺️"),
    ("Asia", "🗺️"),
    ("Europe", "🗺️"),
    ("North America", "🗺️"),
    ("South America", "🗺️"),
    ("Oceania", "🗺️"),
    ("Middle East", "🧭"),
    ("Japan", "🇯🇵"),
    ("India", "🇮🇳"),
    ("Brazil", "🇧🇷"),
    ("Mexico", "🇲🇽"),
    ("Egypt", "🇪🇬"),
    ("France", "🇫🇷"),
    ("Germany", "🇩🇪"),
    ("South Korea", "🇰🇷"),
]

DEFAULT_SUBJECT = "History"
DEFAULT_LANGUAGE = "English"
DEFAULT_REGION = GLOBAL_REGION
DEFAULT_UNLOCKED_COUNT = 5


def region_ids() -> List[str]:
    return [rid for rid, _icon in REGIONS]


def region_icon(region_id: str) -> str:
    for rid, icon in REGIONS:
        if rid == region_id:
            return icon
    return "🗺️"


def default_unlocked_subjects() -> List[str]:
    """初期状態でアンロックされている分野（カタログ先頭 5 件）"""
    return list(SUBJECTS[:DEFAULT_UNLOCKED_COUNT])
