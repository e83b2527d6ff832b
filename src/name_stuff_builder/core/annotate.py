"""出典タグ付け（mythological / biblical など）.

canonical データと「小文字 name → タグ集合」の照合表を突き合わせ、
照合表に載っている名前へ未付与のタグだけを追加する。

- 変換（annotate_dataset）は純粋関数。同じ照合表で2回適用しても結果は変わらない
- 書き込み判断は annotate_store() 側の責務（実際に変化したファイルだけ上書きする）
- 外部ソースへの問い合わせは ProvenanceLookup として注入する（テストでは StaticLookup を使う）
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Protocol

from loguru import logger

from .records import CultureDataset, NameType, name_key
from .store import CanonicalStore

LookupTable = dict[str, frozenset[str]]


class ProvenanceLookup(Protocol):
    """tag → そのタグに該当する名前集合 を返す問い合わせ能力."""

    def lookup(self, tag: str) -> set[str]: ...


class StaticLookup:
    """メモリ上の tag → 名前一覧 で応答する ProvenanceLookup."""

    def __init__(self, names_by_tag: Mapping[str, Iterable[str]]) -> None:
        self._names_by_tag = {tag: set(names) for tag, names in names_by_tag.items()}

    def lookup(self, tag: str) -> set[str]:
        return set(self._names_by_tag.get(tag, set()))


def build_lookup_table(lookup: ProvenanceLookup, tags: Iterable[str]) -> LookupTable:
    """問い合わせ結果から照合表（小文字 name → タグ集合）を作る."""
    collected: dict[str, set[str]] = defaultdict(set)
    for tag in sorted(set(tags)):
        names = lookup.lookup(tag)
        logger.info(f"[Tag] '{tag}': {len(names)} candidate names")
        for name in names:
            if name.strip():
                collected[name_key(name.strip())].add(tag)
    return {key: frozenset(found) for key, found in collected.items()}


def combine_lookup_tables(*tables: LookupTable) -> LookupTable:
    combined: dict[str, frozenset[str]] = {}
    for table in tables:
        for key, tags in table.items():
            combined[key] = combined.get(key, frozenset()) | tags
    return combined


def annotate_dataset(dataset: CultureDataset, table: LookupTable) -> CultureDataset:
    """照合表に一致するレコードへ未付与のタグを追加した新しいデータセットを返す.

    タグ以外のフィールドは変更しない。変化しないレコードは同じオブジェクトを引き継ぐ。
    """
    annotated: CultureDataset = {}
    for key, record in dataset.items():
        extra = table.get(key)
        if extra and not extra <= record.tags:
            annotated[key] = record.with_tags(extra)
        else:
            annotated[key] = record
    return annotated


def count_changed(before: CultureDataset, after: CultureDataset) -> int:
    return sum(1 for key, record in after.items() if before.get(key) != record)


def annotate_store(
    store: CanonicalStore,
    table: LookupTable,
    cultures: Iterable[str] | None = None,
    name_type: NameType = NameType.GIVEN,
) -> dict[str, int]:
    """canonical ストアの各カルチャーにタグ付けし、変化したファイルだけ書き戻す.

    Returns:
        カルチャー → タグが追加されたレコード数（変化なしのカルチャーは含めない）
    """
    tagged: dict[str, int] = {}
    for culture in cultures if cultures is not None else store.cultures():
        before = store.load(culture, name_type)
        if not before:
            continue

        after = annotate_dataset(before, table)
        if store.save_if_changed(culture, name_type, before, after):
            tagged[culture] = count_changed(before, after)
            logger.info(f"[Tag] {culture}: tagged {tagged[culture]} {name_type.value} names")

    logger.info(f"[Tag] Total tagged: {sum(tagged.values())}")
    return tagged
