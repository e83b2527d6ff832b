"""名前データ構築のコア処理群.

- マージ（既存 canonical と新規ソースの統合、gender 衝突の解決）
- 出典タグ付け（冪等な追加のみ）
- 派生リスト生成（スキップ除外・ASCII 化・sm/lg/xl・出力フォーマット）
"""

from .annotate import StaticLookup, annotate_dataset, annotate_store, build_lookup_table
from .formatter import ALL_VARIANTS, OutputVariant, artifact_name, format_tier
from .merge import aggregate_records, merge_datasets, resolve_gender
from .records import FamilyNameRecord, GivenNameRecord, NameType
from .skips import SkipSet, filter_skips, load_skips
from .store import CanonicalStore
from .tiers import Tier, generate_tier, generate_tiers
from .transliterate import to_ascii, transliterate_dataset

__all__ = [
    "GivenNameRecord",
    "FamilyNameRecord",
    "NameType",
    "CanonicalStore",
    "merge_datasets",
    "aggregate_records",
    "resolve_gender",
    "StaticLookup",
    "build_lookup_table",
    "annotate_dataset",
    "annotate_store",
    "SkipSet",
    "load_skips",
    "filter_skips",
    "to_ascii",
    "transliterate_dataset",
    "Tier",
    "generate_tier",
    "generate_tiers",
    "OutputVariant",
    "ALL_VARIANTS",
    "artifact_name",
    "format_tier",
]
