"""名前レコードの型定義.

canonical ストアの1行に対応するレコードと、その周辺の定数（性別コード・タグ語彙）を定義します。

- GivenNameRecord: name|gender|frequency|tags
- FamilyNameRecord: name|frequency|tags
- CultureDataset: 小文字化した name → レコード（1カルチャー・1種別につき1つ）
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum


class NameType(str, Enum):
    """名前の種別（ファイル名の接頭辞にもなる）."""

    GIVEN = "given"
    FAMILY = "family"


GENDERS = frozenset({"M", "F", "U", "M?", "F?"})
UNISEX = "U"

MIN_FREQUENCY = 1
MAX_FREQUENCY = 13

TAG_VOCABULARY = frozenset(
    {
        "biblical",
        "mythological",
        "historical",
        "literary",
        "vintage",
        "modern",
        "archaic",
        "formal",
        "diminutive",
        "romanized",
        "variant",
    }
)

# 時代分類のうち「普通」扱いでタグにしないもの
NEUTRAL_ERA = "classic"


def name_key(name: str) -> str:
    """CultureDataset のキー（大文字小文字を区別しない）."""
    return name.lower()


def clean_tags(tags: Iterable[str]) -> frozenset[str]:
    """空要素・前後空白・中立 era を除いたタグ集合を返す."""
    return frozenset(t.strip() for t in tags if t.strip() and t.strip() != NEUTRAL_ERA)


@dataclass(frozen=True)
class GivenNameRecord:
    name: str
    gender: str
    frequency: int
    tags: frozenset[str] = field(default_factory=frozenset)

    @property
    def key(self) -> str:
        return name_key(self.name)

    def with_tags(self, tags: Iterable[str]) -> GivenNameRecord:
        return replace(self, tags=self.tags | clean_tags(tags))


@dataclass(frozen=True)
class FamilyNameRecord:
    name: str
    frequency: int
    tags: frozenset[str] = field(default_factory=frozenset)

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def gender(self) -> None:
        return None

    def with_tags(self, tags: Iterable[str]) -> FamilyNameRecord:
        return replace(self, tags=self.tags | clean_tags(tags))


NameRecord = GivenNameRecord | FamilyNameRecord
CultureDataset = dict[str, NameRecord]

# 種別ごとのレコード型（保存・出力時の型チェック用）
RECORD_CLASSES: dict[NameType, type[GivenNameRecord] | type[FamilyNameRecord]] = {
    NameType.GIVEN: GivenNameRecord,
    NameType.FAMILY: FamilyNameRecord,
}


def dataset_from_records(records: Iterable[NameRecord]) -> CultureDataset:
    """キー重複のないレコード列から CultureDataset を作る.

    重複キーがありうる入力は merge.aggregate_records() を使うこと。

    Raises:
        ValueError: 大文字小文字を無視して同じ name が2回以上現れた場合
    """
    dataset: CultureDataset = {}
    for record in records:
        if record.key in dataset:
            raise ValueError(f"Duplicate name key in dataset: {record.key!r}")
        dataset[record.key] = record
    return dataset


def sorted_records(dataset: CultureDataset) -> list[NameRecord]:
    """永続化・xl 出力向けの並び（name 昇順、大文字小文字無視）."""
    return sorted(dataset.values(), key=lambda r: (r.key, r.name))
