"""
Crew category normalization.

Crews created before the category list was standardized carry free-form
names; `normalize_categories` maps them onto the standard list.
"""

from typing import Iterable, List, Optional

STANDARD_CATEGORIES = [
    "러닝/마라톤", "등산/트레킹", "클라이밍", "풋살/축구", "독서 모임",
    "영어 회화", "배드민턴", "테니스", "골프", "맛집 투어",
    "캠핑/백패킹", "카페 투어", "영화 관람", "보드게임", "사진/출사",
    "와인/위스키", "댄스", "밴드/악기", "노래방", "반려동물",
    "주식/투자", "N잡/부업", "코딩/개발", "드로잉/미술", "전시회 관람",
    "볼링", "당구", "자전거", "요가/필라테스", "수영",
    "베이킹/쿠킹", "서핑", "스키/보드", "게임/e스포츠", "봉사활동",
    "글쓰기", "미라클모닝", "공예/DIY", "가드닝", "타로/사주",
    "드라이브", "명상", "보드(스케보)", "크로스핏", "애니/덕질", "동네 친구",
]  # fmt: skip

CATEGORY_MAPPING = {
    "캠핑": "캠핑/백패킹",
    "백패킹": "캠핑/백패킹",
    "차박": "캠핑/백패킹",
    "비박": "캠핑/백패킹",
    "등산": "등산/트레킹",
    "등산/산행": "등산/트레킹",
    "트레킹": "등산/트레킹",
    "국내트레킹": "등산/트레킹",
    "해외트레킹": "등산/트레킹",
    "산행": "등산/트레킹",
    "러닝": "러닝/마라톤",
    "마라톤": "러닝/마라톤",
    "조깅": "러닝/마라톤",
    "축구": "풋살/축구",
    "풋살": "풋살/축구",
    "독서": "독서 모임",
    "영어": "영어 회화",
    "사진": "사진/출사",
    "출사": "사진/출사",
    "와인": "와인/위스키",
    "위스키": "와인/위스키",
    "요가": "요가/필라테스",
    "필라테스": "요가/필라테스",
    "스키": "스키/보드",
    "보드": "스키/보드",
    "스노보드": "스키/보드",
    "베이킹": "베이킹/쿠킹",
    "쿠킹": "베이킹/쿠킹",
    "요리": "베이킹/쿠킹",
    "게임": "게임/e스포츠",
    "드로잉": "드로잉/미술",
    "미술": "드로잉/미술",
    "공예": "공예/DIY",
    "DIY": "공예/DIY",
    "밴드": "밴드/악기",
    "악기": "밴드/악기",
    "맛집": "맛집 투어",
    "카페": "카페 투어",
}


def map_category(category: str) -> Optional[str]:
    """
    Map one category name onto the standard list.

    Tries the explicit mapping, then an exact standard name, then a partial
    match in either direction. Returns None when nothing matches.
    """
    if category in CATEGORY_MAPPING:
        return CATEGORY_MAPPING[category]
    if category in STANDARD_CATEGORIES:
        return category
    lowered = category.lower()
    for standard in STANDARD_CATEGORIES:
        if lowered in standard.lower() or standard.split("/")[0].lower() in lowered:
            return standard
    return None


def normalize_categories(categories: Optional[Iterable[str]]) -> List[str]:
    """Map, drop unknown and de-duplicate categories, keeping first-seen order."""
    normalized: List[str] = []
    for category in categories or []:
        if not isinstance(category, str) or not category.strip():
            continue
        mapped = map_category(category.strip())
        if mapped and mapped not in normalized:
            normalized.append(mapped)
    return normalized
