"""派生リスト（sm / lg / xl）の生成.

canonical ストアを読み取り専用で使い、カルチャーごとに
スキップ除外 →（ASCII 版なら）ASCII 化 → tier 導出 → 出力 の順で lists/<culture>/ に書き出す。
出力は毎回すべて再計算する（派生物は独自の状態を持たない）。
"""

from __future__ import annotations

import argparse
from collections.abc import Iterable, Sequence
from pathlib import Path

from loguru import logger

from name_stuff_builder.config import configure_logging
from name_stuff_builder.core.formatter import ALL_VARIANTS, OutputVariant, artifact_name, format_tier
from name_stuff_builder.core.records import NameType
from name_stuff_builder.core.skips import SkipSet, filter_skips, load_skips
from name_stuff_builder.core.store import CanonicalStore
from name_stuff_builder.core.tiers import generate_tiers
from name_stuff_builder.core.transliterate import transliterate_dataset

DEFAULT_VARIANTS = (OutputVariant(),)


def generate_culture(
    store: CanonicalStore,
    culture: str,
    lists_dir: Path | str,
    skips: SkipSet,
    variants: Sequence[OutputVariant] = DEFAULT_VARIANTS,
) -> list[Path]:
    """1カルチャー分の派生リストを書き出す.

    given/family のファイルが無い種別は黙って飛ばす。
    フィルタ後に空になった種別・variant のファイルは作らない。
    """
    logger.info(f"[Generate] Processing {culture}...")
    culture_dir = Path(lists_dir) / culture
    written: list[Path] = []

    for name_type in NameType:
        if not store.exists(culture, name_type):
            continue

        loaded = store.load(culture, name_type)
        dataset = filter_skips(loaded, skips)
        if len(dataset) < len(loaded):
            logger.debug(f"  {name_type.value}: skipped {len(loaded) - len(dataset)} names")

        for variant in variants:
            # 変換後のキー（José → Jose）でもスキップ対象を除外する
            view = filter_skips(transliterate_dataset(dataset), skips) if variant.ascii else dataset
            if not view:
                continue

            culture_dir.mkdir(parents=True, exist_ok=True)
            for tier, records in generate_tiers(view).items():
                path = culture_dir / artifact_name(name_type, tier, variant)
                path.write_text(format_tier(records, name_type, variant), encoding="utf-8", newline="\n")
                logger.info(f"  {path.name}: {len(records)} names")
                written.append(path)

    return written


def generate_lists(
    store: CanonicalStore,
    lists_dir: Path | str,
    skips: SkipSet,
    cultures: Iterable[str] | None = None,
    variants: Sequence[OutputVariant] = DEFAULT_VARIANTS,
) -> list[Path]:
    """指定カルチャー（省略時はストアの全カルチャー）の派生リストを書き出す.

    Raises:
        CanonicalStoreError: canonical ストアのルートが読めない場合
    """
    available = store.cultures()
    targets = sorted(set(cultures)) if cultures else available

    written: list[Path] = []
    for culture in targets:
        if culture not in available:
            logger.warning(f"[Generate] No canonical data for culture '{culture}', skipping")
            continue
        written.extend(generate_culture(store, culture, lists_dir, skips, variants))

    logger.info(f"[COMPLETE] Wrote {len(written)} list files to {lists_dir}")
    return written


def main() -> None:
    """CLI エントリポイント."""
    parser = argparse.ArgumentParser(description="Generate size-tiered name lists")
    parser.add_argument("cultures", nargs="*", help="Culture codes to generate (default: all)")
    parser.add_argument("--raw", action="store_true", help="Output names only (no metadata)")
    parser.add_argument("--ascii", action="store_true", help="Transliterate to ASCII, dropping unmappable names")
    parser.add_argument(
        "--all-variants",
        action="store_true",
        help="Write all four variants (default, raw, ascii, raw+ascii) in one run",
    )
    parser.add_argument("--data-dir", type=Path, default=Path("data"), help="Canonical data directory")
    parser.add_argument("--lists-dir", type=Path, default=Path("lists"), help="Output directory")
    parser.add_argument("--skips", type=Path, default=Path("skips/skips.txt"), help="Skip list file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    variants = ALL_VARIANTS if args.all_variants else (OutputVariant(raw=args.raw, ascii=args.ascii),)
    skips = load_skips(args.skips)

    logger.info(f"Raw mode: {args.raw}, ASCII only: {args.ascii}, all variants: {args.all_variants}")
    generate_lists(
        CanonicalStore(args.data_dir),
        args.lists_dir,
        skips,
        cultures=args.cultures,
        variants=variants,
    )


if __name__ == "__main__":
    main()
