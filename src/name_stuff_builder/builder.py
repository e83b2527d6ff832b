"""canonical ストアのビルダー（オーケストレーター）.

sources.yml に並べたベンダーソースを宣言順に取り込み、カルチャー別の canonical ファイルへマージする。
その後、出典ソース（Roscher 索引 / Wikidata）から照合表を作り、given name にタグを追加する。

入力の揺れ（列構成・表記・頻度の尺度）は adapter 側で canonical 形に寄せ、
ここでは「取り込み順（再現性）」「マージ統計と衝突レポート」「変化したファイルだけの書き戻し」を担う。
"""

from __future__ import annotations

import argparse
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path

import polars as pl
from loguru import logger

from name_stuff_builder.adapters.base_adapter import BaseAdapter
from name_stuff_builder.adapters.census_adapter import CensusSurnamesAdapter
from name_stuff_builder.adapters.nam_dict_adapter import NamDictAdapter
from name_stuff_builder.adapters.roscher_lookup import RoscherLexiconLookup
from name_stuff_builder.adapters.ssa_adapter import SsaBabyNamesAdapter
from name_stuff_builder.adapters.surnames_by_country_adapter import SurnamesByCountryAdapter
from name_stuff_builder.adapters.wikidata_lookup import WikidataLookup
from name_stuff_builder.config import BuildConfig, ProvenanceSpec, SourceSpec, configure_logging, load_build_config
from name_stuff_builder.core.annotate import (
    LookupTable,
    ProvenanceLookup,
    annotate_store,
    build_lookup_table,
    combine_lookup_tables,
)
from name_stuff_builder.core.conflicts import export_gender_conflicts, gender_conflicts_frame
from name_stuff_builder.core.merge import merge_datasets
from name_stuff_builder.core.store import CanonicalStore

SOURCES_SEPARATOR = " + "


@dataclass(frozen=True)
class SourceEffect:
    source: str
    culture: str
    added: int
    updated: int
    gender_conflicts: int
    written: bool


def make_adapter(spec: SourceSpec) -> BaseAdapter:
    if spec.kind == "nam_dict":
        return NamDictAdapter(spec.path)
    if spec.kind == "ssa":
        return SsaBabyNamesAdapter(spec.path, culture=spec.culture or "en")
    if spec.kind == "census_surnames":
        return CensusSurnamesAdapter(spec.path, culture=spec.culture or "en")
    if spec.kind == "surnames_by_country":
        return SurnamesByCountryAdapter(spec.path)
    raise ValueError(f"Unknown source kind: {spec.kind}")


def _append_source_label(existing: str | None, label: str) -> str:
    """ヘッダの sources 行にラベルを追加する（既にあればそのまま）."""
    labels = [s.strip() for s in existing.split(SOURCES_SEPARATOR)] if existing else []
    if label not in labels:
        labels.append(label)
    return SOURCES_SEPARATOR.join(labels)


def merge_source(
    store: CanonicalStore,
    adapter: BaseAdapter,
    source: str,
    label: str | None = None,
    conflict_frames: list[pl.DataFrame] | None = None,
) -> list[SourceEffect]:
    """1つのソースを全カルチャーの canonical ファイルへマージする.

    Returns:
        カルチャーごとの取り込み結果
    """
    effects: list[SourceEffect] = []
    name_type = adapter.name_type

    for culture, incoming in sorted(adapter.read().items()):
        if not incoming:
            continue

        before = store.load(culture, name_type)
        result = merge_datasets(before, incoming)
        sources = _append_source_label(store.read_sources(culture, name_type), label or source)
        written = store.save_if_changed(culture, name_type, before, result.dataset, sources=sources)

        if conflict_frames is not None and result.gender_conflicts:
            conflict_frames.append(gender_conflicts_frame(result.gender_conflicts, culture, source))

        effects.append(
            SourceEffect(
                source=source,
                culture=culture,
                added=result.added,
                updated=result.updated,
                gender_conflicts=len(result.gender_conflicts),
                written=written,
            )
        )
        logger.info(
            f"[Merge] {source} -> {culture}/{name_type.value}.txt: "
            f"+{result.added} new, {result.updated} updated, {len(result.dataset)} total"
        )

    return effects


def _lookup_table_for(spec: ProvenanceSpec, lookups: Mapping[str, ProvenanceLookup] | None) -> LookupTable:
    if lookups and spec.id in lookups:
        return build_lookup_table(lookups[spec.id], spec.tags)

    if spec.kind == "roscher":
        assert spec.path is not None
        return build_lookup_table(RoscherLexiconLookup(spec.path), spec.tags)
    if spec.kind == "wikidata":
        with WikidataLookup() as lookup:
            return build_lookup_table(lookup, spec.tags)
    raise ValueError(f"Unknown provenance kind: {spec.kind}")


def tag_store(
    config: BuildConfig,
    lookups: Mapping[str, ProvenanceLookup] | None = None,
    cultures: Iterable[str] | None = None,
) -> dict[str, int]:
    """有効な出典ソースすべての照合表で given name にタグを付ける.

    Args:
        config: ビルド設定
        lookups: provenance id → 差し替える ProvenanceLookup（テスト/オフライン用）
        cultures: 対象カルチャー（None の場合はストアの全カルチャー）

    Returns:
        カルチャー → タグが追加されたレコード数
    """
    store = CanonicalStore(config.data_dir)
    specs = [p for p in config.provenance if p.enabled]
    if not specs:
        logger.info("[Tag] No provenance sources enabled.")
        return {}

    table = combine_lookup_tables(*(_lookup_table_for(spec, lookups) for spec in specs))
    logger.info(f"[Tag] Lookup table covers {len(table)} names")
    return annotate_store(store, table, cultures=list(cultures) if cultures is not None else None)


def build_canonical(
    config: BuildConfig,
    lookups: Mapping[str, ProvenanceLookup] | None = None,
    skip_provenance: bool = False,
) -> list[SourceEffect]:
    """全ソースを取り込み、タグ付けまで行う.

    Args:
        config: ビルド設定
        lookups: provenance id → 差し替える ProvenanceLookup
        skip_provenance: True の場合はタグ付けフェーズを飛ばす

    Returns:
        ソース×カルチャーごとの取り込み結果
    """
    store = CanonicalStore(config.data_dir)
    store.root.mkdir(parents=True, exist_ok=True)

    effects: list[SourceEffect] = []
    conflict_frames: list[pl.DataFrame] = []

    # Phase 1: ソース取り込み（宣言順）
    for spec in config.sources:
        if not spec.enabled:
            logger.info(f"[Merge] Source disabled, skipping: {spec.id}")
            continue
        if not spec.path.exists():
            logger.warning(f"[Merge] Source path not found, skipping {spec.id}: {spec.path}")
            continue

        logger.info(f"[Merge] Reading {spec.id} ({spec.kind}) from {spec.path}")
        effects.extend(
            merge_source(
                store,
                make_adapter(spec),
                spec.id,
                label=spec.display_label,
                conflict_frames=conflict_frames,
            )
        )

    if config.report_dir:
        report = export_gender_conflicts(conflict_frames, config.report_dir)
        if report:
            logger.info(f"[Merge] Gender conflict report: {report}")

    # Phase 2: 出典タグ付け
    if skip_provenance:
        logger.info("[Tag] Skipped (--skip-provenance).")
    else:
        tag_store(config, lookups=lookups)

    logger.info(f"[COMPLETE] Canonical store built: {store.root}")
    return effects


def main() -> None:
    """CLI エントリポイント（取り込み + タグ付け）."""
    parser = argparse.ArgumentParser(description="Merge name sources into the canonical store")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("sources.yml"),
        help="Build configuration file (default: ./sources.yml)",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=None,
        help="Override the report output directory from the config",
    )
    parser.add_argument(
        "--skip-provenance",
        action="store_true",
        help="Only merge sources; do not run provenance tagging",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    config = load_build_config(args.config)
    if args.report_dir is not None:
        config = replace(config, report_dir=args.report_dir)

    build_canonical(config, skip_provenance=args.skip_provenance)


def tag_main() -> None:
    """CLI エントリポイント（タグ付けのみ）."""
    parser = argparse.ArgumentParser(description="Tag canonical given names from provenance sources")
    parser.add_argument("cultures", nargs="*", help="Culture codes to tag (default: all)")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("sources.yml"),
        help="Build configuration file (default: ./sources.yml)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    config = load_build_config(args.config)
    tag_store(config, cultures=args.cultures or None)


if __name__ == "__main__":
    main()
