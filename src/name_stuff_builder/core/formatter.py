"""派生リストの出力フォーマット.

ファイル名: {type}_{tier}{variant}.txt（variant は "", "_raw", "_ascii", "_raw_ascii"）

- metadata モード: 3行のヘッダコメント + 1レコード1行（canonical と同じフィールド順）
- raw モード: ヘッダなし、1行1名
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .codec import COMMENT_PREFIX, FORMAT_LINES, format_record_line
from .records import RECORD_CLASSES, NameRecord, NameType
from .tiers import Tier


@dataclass(frozen=True)
class OutputVariant:
    raw: bool = False
    ascii: bool = False

    @property
    def suffix(self) -> str:
        suffix = ""
        if self.raw:
            suffix += "_raw"
        if self.ascii:
            suffix += "_ascii"
        return suffix


ALL_VARIANTS = (
    OutputVariant(),
    OutputVariant(raw=True),
    OutputVariant(ascii=True),
    OutputVariant(raw=True, ascii=True),
)


def artifact_name(name_type: NameType, tier: Tier, variant: OutputVariant) -> str:
    """出力ファイル名を返す.

    Examples:
        >>> artifact_name(NameType.GIVEN, Tier.SM, OutputVariant(raw=True, ascii=True))
        'given_sm_raw_ascii.txt'
    """
    return f"{name_type.value}_{tier.value}{variant.suffix}.txt"


def format_tier(records: Sequence[NameRecord], name_type: NameType, variant: OutputVariant) -> str:
    """tier のレコード列を出力テキストにする（末尾改行あり）.

    Raises:
        ValueError: name_type と異なる種別のレコードが含まれる場合
    """
    record_class = RECORD_CLASSES[name_type]
    lines: list[str] = []

    if not variant.raw:
        lines.append(f"# name-stuff {name_type.value} names")
        lines.append(FORMAT_LINES[name_type])
        lines.append(COMMENT_PREFIX)

    for record in records:
        if not isinstance(record, record_class):
            raise ValueError(f"{type(record).__name__} {record.name!r} in {name_type.value} list")
        lines.append(record.name if variant.raw else format_record_line(record))

    return "\n".join(lines) + "\n"
