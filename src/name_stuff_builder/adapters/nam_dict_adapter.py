"""gender.c 辞書（nam_dict.txt）アダプタ.

ISO-8859-1 の固定長フォーマット:
    - 0-1 桁: 性別コード（M, F, ?, ?M, ?F, 1M, 1F。`=` は同等名の行なので捨てる）
    - 3-28 桁: 名前（`<C^>` のようなエスケープで非 Latin-1 文字を表す）
    - 29 桁: `+` はウムラウト展開の重複行なので捨てる
    - 30 桁以降: 国ごとの頻度（16進1文字、空白/`$` は 0）

国ごとの頻度をカルチャーに寄せ、同じ名前は merge 規則（frequency は max、gender 不一致は U）で畳み込む。
"""

from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from name_stuff_builder.core.merge import aggregate_records
from name_stuff_builder.core.records import MAX_FREQUENCY, CultureDataset, GivenNameRecord, NameRecord, NameType

from .base_adapter import BaseAdapter

# 30 桁目からの位置 → 国コード
COUNTRY_COLUMNS = (
    "gb", "ie", "us", "it", "mt", "pt", "es", "fr", "be", "lu",
    "nl", "ef", "de", "at", "ch", "is", "dk", "no", "se", "fi",
    "ee", "lv", "lt", "pl", "cz", "sk", "hu", "ro", "bg", "ba",
    "hr", "xk", "mk", "me", "rs", "si", "al", "gr", "ru", "by",
    "md", "ua", "am", "az", "ge", "kz", "tr", "ar", "il", "cn",
    "in", "jp", "kr", "vn", "other",
)  # fmt: skip

CULTURE_GROUPS = {
    "en": ("gb", "ie", "us"),
    "de": ("de", "at", "ch", "ef"),
    "es": ("es",),
    "fr": ("fr", "be", "lu"),
    "it": ("it", "mt"),
    "pt": ("pt",),
    "nl": ("nl",),
    "pl": ("pl",),
    "ru": ("ru", "by", "md", "ua"),
    "nordic": ("is", "dk", "no", "se", "fi"),
    "baltic": ("ee", "lv", "lt"),
    "slavic": ("cz", "sk", "hu", "ro", "bg", "ba", "hr", "xk", "mk", "me", "rs", "si"),
    "greek": ("gr",),
    "albanian": ("al",),
    "caucasus": ("am", "az", "ge"),
    "turkic": ("tr", "kz"),
    "arab": ("ar",),
    "hebrew": ("il",),
    "chinese": ("cn",),
    "indian": ("in",),
    "japanese": ("jp",),
    "korean": ("kr",),
    "vietnamese": ("vn",),
}

COUNTRY_TO_CULTURES: dict[str, list[str]] = {}
for _culture, _countries in CULTURE_GROUPS.items():
    for _country in _countries:
        COUNTRY_TO_CULTURES.setdefault(_country, []).append(_culture)

GENDER_MAP = {
    "M": "M",
    "F": "F",
    "?": "U",
    "?M": "M?",
    "?F": "F?",
    "1M": "M",
    "1F": "F",
}

ESCAPES = {
    "<A/>": "Ā", "<a/>": "ā",
    "<A,>": "Ą", "<a,>": "ą",
    "<C´>": "Ć", "<c´>": "ć",
    "<C^>": "Č", "<c^>": "č",
    "<CH>": "Č", "<ch>": "č",
    "<d´>": "ď",
    "<DJ>": "Đ", "<dj>": "đ",
    "<E/>": "Ē", "<e/>": "ē",
    "<E´>": "Ė", "<e´>": "ė",
    "<E,>": "Ę", "<e,>": "ę",
    "<G^>": "Ğ", "<g^>": "ğ",
    "<G,>": "Ģ", "<g´>": "ģ",
    "<I/>": "Ī", "<i/>": "ī",
    "<I´>": "İ", "<i>": "ı",
    "<IJ>": "Ĳ", "<ij>": "ĳ",
    "<K,>": "Ķ", "<k,>": "ķ",
    "<L,>": "Ļ", "<l,>": "ļ",
    "<L´>": "Ľ", "<l´>": "ľ",
    "<L/>": "Ł", "<l/>": "ł",
    "<N,>": "Ņ", "<n,>": "ņ",
    "<N^>": "Ň", "<n^>": "ň",
    "<OE>": "Œ", "<oe>": "œ",
    "<R^>": "Ř", "<r^>": "ř",
    "<S,>": "Ş", "<s,>": "ş",
    "<S^>": "Š", "<s^>": "š",
    "<SCH>": "Š", "<sch>": "š",
    "<SH>": "Š", "<sh>": "š",
    "<T,>": "Ţ", "<t,>": "ţ",
    "<t´>": "ť",
    "<U/>": "Ū", "<u/>": "ū",
    "<U´>": "Ů", "<u´>": "ů",
    "<U,>": "Ų", "<u,>": "ų",
    "<Z´>": "Ź", "<z´>": "ź",
    "<Z^>": "Ž", "<z^>": "ž",
    "<ß>": "ẞ",
}  # fmt: skip

_ESCAPE = re.compile(r"<[^<>]{1,3}>")

NAME_START = 3
NAME_END = 29
MARKER_COLUMN = 29
FREQUENCY_START = 30


def decode_escapes(name: str) -> str:
    """`<C^>` 形式のエスケープを Unicode 文字に戻す（未知のエスケープはそのまま）.

    Examples:
        >>> decode_escapes("Lavi<c^>ka")
        'Lavička'
    """
    return _ESCAPE.sub(lambda m: ESCAPES.get(m.group(0), m.group(0)), name)


def parse_frequency(char: str) -> int:
    if char in (" ", "$", ""):
        return 0
    try:
        return min(int(char, 16), MAX_FREQUENCY)
    except ValueError:
        return 0


def parse_line(line: str) -> tuple[str, str, dict[str, int]] | None:
    """1行を (name, gender, 国コード → frequency) に分解する。対象外の行は None."""
    line = line.rstrip("\r\n")
    if line.startswith("#") or not line.strip():
        return None
    if len(line) > MARKER_COLUMN and line[MARKER_COLUMN] == "+":
        return None

    gender_code = line[0:2].strip()
    if gender_code == "=":
        return None

    name = decode_escapes(line[NAME_START:NAME_END].strip())
    if not name:
        return None

    columns = line[FREQUENCY_START:]
    frequencies: dict[str, int] = {}
    for pos, country in enumerate(COUNTRY_COLUMNS):
        freq = parse_frequency(columns[pos] if pos < len(columns) else "")
        if freq > 0:
            frequencies[country] = freq

    return name, GENDER_MAP.get(gender_code, "U"), frequencies


class NamDictAdapter(BaseAdapter):
    """nam_dict.txt からカルチャー別の given name を作るアダプタ."""

    name_type = NameType.GIVEN

    def __init__(self, file_path: Path | str) -> None:
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"nam_dict.txt not found: {self.file_path}")

    def read(self) -> dict[str, CultureDataset]:
        by_culture: dict[str, list[NameRecord]] = {}
        parsed = 0

        with open(self.file_path, encoding="iso-8859-1") as f:
            for line in f:
                entry = parse_line(line)
                if entry is None:
                    continue
                parsed += 1
                name, gender, frequencies = entry
                for country, freq in frequencies.items():
                    for culture in COUNTRY_TO_CULTURES.get(country, []):
                        by_culture.setdefault(culture, []).append(GivenNameRecord(name, gender, freq))

        logger.info(f"nam_dict: parsed {parsed} name entries into {len(by_culture)} cultures")
        return {culture: aggregate_records(records) for culture, records in sorted(by_culture.items())}
