"""名前データのマージと衝突検出.

既存の canonical データ D と新規ソース S（同じカルチャー・同じ種別）を統合します。

ルール:
    - 片方にしか無いキーはそのまま引き継ぐ
    - 両方にあるキーは frequency を max、gender は一致すれば維持・不一致なら U
      （"M" と "M?" のような部分一致も不一致として U に倒す）
    - tags はアダプタが明示的に付けたものだけを追加する（中立 era の classic は付けない）
    - 表示用 name は既存側を優先する

入力辞書の反復順には依存しない（キーをソートして処理する）。
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from loguru import logger

from .records import (
    UNISEX,
    CultureDataset,
    FamilyNameRecord,
    GivenNameRecord,
    NameRecord,
    clean_tags,
)


@dataclass(frozen=True)
class GenderConflict:
    key: str
    name: str
    existing: str
    incoming: str


@dataclass
class MergeResult:
    """merge_datasets() の結果（統合後データと統計）."""

    dataset: CultureDataset
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    gender_conflicts: list[GenderConflict] = field(default_factory=list)


def resolve_gender(existing: str, incoming: str) -> str:
    """2つの gender を統合する.

    Examples:
        >>> resolve_gender("M", "M")
        'M'
        >>> resolve_gender("M", "M?")
        'U'
    """
    return existing if existing == incoming else UNISEX


def merge_records(existing: NameRecord, incoming: NameRecord) -> NameRecord:
    """同じキーを持つ2レコードを統合する.

    Raises:
        ValueError: given と family のレコードを混ぜようとした場合
    """
    if type(existing) is not type(incoming):
        raise ValueError(
            f"Cannot merge {type(incoming).__name__} into {type(existing).__name__} for {existing.key!r}"
        )

    frequency = max(existing.frequency, incoming.frequency)
    tags = existing.tags | clean_tags(incoming.tags)

    if isinstance(existing, GivenNameRecord):
        assert isinstance(incoming, GivenNameRecord)
        gender = resolve_gender(existing.gender, incoming.gender)
        return replace(existing, gender=gender, frequency=frequency, tags=tags)

    return replace(existing, frequency=frequency, tags=tags)


def merge_datasets(existing: CultureDataset, incoming: CultureDataset) -> MergeResult:
    """既存データに新規ソースをマージする（純粋関数、引数は変更しない）.

    Args:
        existing: 既存 canonical データ
        incoming: 新規ソースのデータ（同じカルチャー・種別）

    Returns:
        keys(existing) ∪ keys(incoming) を網羅する MergeResult

    Examples:
        >>> d = {"thor": GivenNameRecord("Thor", "M", 4, frozenset({"mythological"}))}
        >>> s = {"thor": GivenNameRecord("Thor", "M", 9)}
        >>> merged = merge_datasets(d, s).dataset["thor"]
        >>> (merged.frequency, sorted(merged.tags))
        (9, ['mythological'])
    """
    result = MergeResult(dataset={})

    for key in sorted(existing.keys() | incoming.keys()):
        old = existing.get(key)
        new = incoming.get(key)

        if old is None:
            assert new is not None
            result.dataset[key] = replace(new, tags=clean_tags(new.tags))
            result.added += 1
            continue

        if new is None:
            result.dataset[key] = old
            result.unchanged += 1
            continue

        merged = merge_records(old, new)
        if isinstance(old, GivenNameRecord) and isinstance(new, GivenNameRecord) and old.gender != new.gender:
            result.gender_conflicts.append(
                GenderConflict(key=key, name=old.name, existing=old.gender, incoming=new.gender)
            )

        result.dataset[key] = merged
        if merged == old:
            result.unchanged += 1
        else:
            result.updated += 1

    logger.debug(
        f"Merged {len(incoming)} incoming into {len(existing)} existing: "
        f"added={result.added}, updated={result.updated}, unchanged={result.unchanged}, "
        f"gender_conflicts={len(result.gender_conflicts)}"
    )
    return result


def aggregate_records(records: Iterable[NameRecord]) -> CultureDataset:
    """同一ソース内で重複しうるレコード列を畳み込んで CultureDataset にする.

    1つの名前が複数の国/年に現れるソース向け。マージと同じ規則で畳み込むが、
    表示用 name は frequency が最大のレコードのもの（同率なら文字列が小さい方）を採用するため、
    入力順に依存しない。
    """
    groups: dict[str, list[NameRecord]] = defaultdict(list)
    for record in records:
        groups[record.key].append(record)

    dataset: CultureDataset = {}
    for key in sorted(groups):
        group = groups[key]
        display = min(group, key=lambda r: (-r.frequency, r.name))
        tags = clean_tags(t for r in group for t in r.tags)

        if isinstance(display, GivenNameRecord):
            genders = {r.gender for r in group if isinstance(r, GivenNameRecord)}
            gender = display.gender if len(genders) == 1 else UNISEX
            dataset[key] = GivenNameRecord(display.name, gender, display.frequency, tags)
        else:
            dataset[key] = FamilyNameRecord(display.name, display.frequency, tags)

    return dataset
