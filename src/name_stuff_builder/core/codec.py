"""パイプ区切り行フォーマットの読み書き.

canonical ファイル・派生リストで共通の1行スキーマを扱います。

    given:  Name|Gender|Frequency|Tags
    family: Name|Frequency|Tags

- 行の構造は宣言された NameType で決める（フィールド数から種別を推測しない）
- `#` で始まる行と空行は無視する
- フィールド数違い・数値でない frequency・範囲外の frequency・未知の gender の行は黙って捨てる
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .records import (
    GENDERS,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    FamilyNameRecord,
    GivenNameRecord,
    NameRecord,
    NameType,
    clean_tags,
)

FIELD_SEPARATOR = "|"
TAG_SEPARATOR = ","
COMMENT_PREFIX = "#"

FORMAT_LINES = {
    NameType.GIVEN: "# format: name|gender|frequency|tags",
    NameType.FAMILY: "# format: name|frequency|tags",
}


def _parse_frequency(text: str) -> int | None:
    try:
        value = int(text.strip())
    except ValueError:
        return None
    if not MIN_FREQUENCY <= value <= MAX_FREQUENCY:
        return None
    return value


def _parse_tags(text: str) -> frozenset[str]:
    return clean_tags(text.split(TAG_SEPARATOR))


def parse_given_line(line: str) -> GivenNameRecord | None:
    """given 行（4フィールド）をパースする。壊れた行は None."""
    parts = line.strip().split(FIELD_SEPARATOR)
    if len(parts) != 4:
        return None

    name, gender, freq_text, tags_text = parts
    name = name.strip()
    gender = gender.strip()
    frequency = _parse_frequency(freq_text)
    if not name or gender not in GENDERS or frequency is None:
        return None

    return GivenNameRecord(name, gender, frequency, _parse_tags(tags_text))


def parse_family_line(line: str) -> FamilyNameRecord | None:
    """family 行（3フィールド）をパースする。壊れた行は None."""
    parts = line.strip().split(FIELD_SEPARATOR)
    if len(parts) != 3:
        return None

    name, freq_text, tags_text = parts
    name = name.strip()
    frequency = _parse_frequency(freq_text)
    if not name or frequency is None:
        return None

    return FamilyNameRecord(name, frequency, _parse_tags(tags_text))


LINE_PARSERS: dict[NameType, Callable[[str], NameRecord | None]] = {
    NameType.GIVEN: parse_given_line,
    NameType.FAMILY: parse_family_line,
}


def is_data_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIX)


def parse_lines(lines: Iterable[str], name_type: NameType) -> tuple[list[NameRecord], int]:
    """行の列をパースし、(レコード列, 捨てた行数) を返す."""
    parser = LINE_PARSERS[name_type]
    records: list[NameRecord] = []
    dropped = 0
    for line in lines:
        if not is_data_line(line):
            continue
        record = parser(line)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    return records, dropped


def format_tags(tags: Iterable[str]) -> str:
    """タグを重複除去・アルファベット順・空白なしのカンマ区切りにする."""
    return TAG_SEPARATOR.join(sorted({t.strip() for t in tags if t.strip()}))


def format_record_line(record: NameRecord) -> str:
    if isinstance(record, GivenNameRecord):
        return FIELD_SEPARATOR.join(
            [record.name, record.gender, str(record.frequency), format_tags(record.tags)]
        )
    return FIELD_SEPARATOR.join([record.name, str(record.frequency), format_tags(record.tags)])
