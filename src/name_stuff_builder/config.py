"""ビルド設定（sources.yml）の読み込み.

例:

    data_dir: data
    lists_dir: lists
    skips_file: skips/skips.txt
    report_dir: reports
    sources:
      - id: gender-c
        kind: nam_dict
        path: sources/gender-c-original/nam_dict.txt
      - id: ssa
        kind: ssa
        culture: en
        path: sources/ssa-baby-names
        label: US SSA Baby Names (CC0)
    provenance:
      - id: roscher
        kind: roscher
        path: sources/roscher-lexicon
      - id: wikidata
        kind: wikidata
        tags: [biblical]

相対パスは設定ファイルのディレクトリ基準で解決する。
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from name_stuff_builder.adapters.roscher_lookup import PROVIDED_TAG as ROSCHER_TAG
from name_stuff_builder.adapters.wikidata_lookup import QUERIES as WIKIDATA_QUERIES
from name_stuff_builder.core.exceptions import SourceConfigError
from name_stuff_builder.core.records import TAG_VOCABULARY

SOURCE_KINDS = frozenset({"nam_dict", "ssa", "census_surnames", "surnames_by_country"})
# 単一カルチャーに書き込むソース
SINGLE_CULTURE_KINDS = frozenset({"ssa", "census_surnames"})

# 照合ソースの種類 → 提供できるタグ
PROVENANCE_TAGS = {
    "roscher": frozenset({ROSCHER_TAG}),
    "wikidata": frozenset(WIKIDATA_QUERIES),
}
PATH_REQUIRED_PROVENANCE = frozenset({"roscher"})


@dataclass(frozen=True)
class SourceSpec:
    id: str
    kind: str
    path: Path
    culture: str | None = None
    label: str | None = None
    enabled: bool = True

    @property
    def display_label(self) -> str:
        return self.label or self.id


@dataclass(frozen=True)
class ProvenanceSpec:
    id: str
    kind: str
    tags: tuple[str, ...]
    path: Path | None = None
    enabled: bool = True


@dataclass(frozen=True)
class BuildConfig:
    data_dir: Path
    lists_dir: Path
    skips_file: Path | None
    report_dir: Path | None = None
    sources: tuple[SourceSpec, ...] = ()
    provenance: tuple[ProvenanceSpec, ...] = ()


def _require(config_path: Path, entry: dict[str, Any], key: str, where: str) -> Any:
    value = entry.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise SourceConfigError(config_path, f"{where}: missing required key '{key}'")
    return value


def _resolve(base: Path, value: str | None) -> Path | None:
    if value is None:
        return None
    p = Path(value)
    return p if p.is_absolute() else base / p


def _parse_source(config_path: Path, base: Path, index: int, entry: object) -> SourceSpec:
    where = f"sources[{index}]"
    if not isinstance(entry, dict):
        raise SourceConfigError(config_path, f"{where}: expected a mapping, got {type(entry).__name__}")

    source_id = str(_require(config_path, entry, "id", where))
    kind = str(_require(config_path, entry, "kind", where))
    if kind not in SOURCE_KINDS:
        raise SourceConfigError(config_path, f"{where}: unknown kind '{kind}' (valid: {sorted(SOURCE_KINDS)})")

    culture = entry.get("culture")
    if kind in SINGLE_CULTURE_KINDS and not culture:
        raise SourceConfigError(config_path, f"{where}: kind '{kind}' requires 'culture'")

    path = _resolve(base, str(_require(config_path, entry, "path", where)))
    assert path is not None
    return SourceSpec(
        id=source_id,
        kind=kind,
        path=path,
        culture=str(culture) if culture else None,
        label=entry.get("label"),
        enabled=bool(entry.get("enabled", True)),
    )


def _parse_provenance(config_path: Path, base: Path, index: int, entry: object) -> ProvenanceSpec:
    where = f"provenance[{index}]"
    if not isinstance(entry, dict):
        raise SourceConfigError(config_path, f"{where}: expected a mapping, got {type(entry).__name__}")

    provenance_id = str(_require(config_path, entry, "id", where))
    kind = str(_require(config_path, entry, "kind", where))
    if kind not in PROVENANCE_TAGS:
        raise SourceConfigError(
            config_path, f"{where}: unknown kind '{kind}' (valid: {sorted(PROVENANCE_TAGS)})"
        )

    supported = PROVENANCE_TAGS[kind]
    tags = entry.get("tags")
    if tags is None:
        tags = sorted(supported)
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise SourceConfigError(config_path, f"{where}: 'tags' must be a list of strings")
    for tag in tags:
        if tag not in TAG_VOCABULARY:
            raise SourceConfigError(config_path, f"{where}: tag '{tag}' is not in the tag vocabulary")
        if tag not in supported:
            raise SourceConfigError(config_path, f"{where}: kind '{kind}' cannot provide tag '{tag}'")

    path_value = entry.get("path")
    if kind in PATH_REQUIRED_PROVENANCE and not path_value:
        raise SourceConfigError(config_path, f"{where}: kind '{kind}' requires 'path'")

    return ProvenanceSpec(
        id=provenance_id,
        kind=kind,
        tags=tuple(tags),
        path=_resolve(base, str(path_value)) if path_value else None,
        enabled=bool(entry.get("enabled", True)),
    )


def load_build_config(config_path: Path | str) -> BuildConfig:
    """sources.yml を読み込んで検証する.

    Raises:
        FileNotFoundError: 設定ファイルが存在しない場合
        SourceConfigError: YAML として不正、または内容が不正な場合
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SourceConfigError(config_path, f"invalid YAML ({e})") from e

    if not isinstance(data, dict):
        raise SourceConfigError(config_path, f"expected a mapping at top level, got {type(data).__name__}")

    base = config_path.parent
    sources_raw = data.get("sources") or []
    provenance_raw = data.get("provenance") or []
    if not isinstance(sources_raw, list) or not isinstance(provenance_raw, list):
        raise SourceConfigError(config_path, "'sources' and 'provenance' must be lists")

    sources = tuple(_parse_source(config_path, base, i, e) for i, e in enumerate(sources_raw))
    provenance = tuple(_parse_provenance(config_path, base, i, e) for i, e in enumerate(provenance_raw))

    for kind, specs in (("source", sources), ("provenance", provenance)):
        ids = [s.id for s in specs]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise SourceConfigError(config_path, f"duplicate {kind} id(s): {duplicates}")

    skips_value = data.get("skips_file", "skips/skips.txt")
    config = BuildConfig(
        data_dir=_resolve(base, str(data.get("data_dir", "data"))) or base / "data",
        lists_dir=_resolve(base, str(data.get("lists_dir", "lists"))) or base / "lists",
        skips_file=_resolve(base, str(skips_value)) if skips_value else None,
        report_dir=_resolve(base, str(data["report_dir"])) if data.get("report_dir") else None,
        sources=sources,
        provenance=provenance,
    )

    logger.info(
        f"Loaded {sum(s.enabled for s in sources)} enabled sources and "
        f"{sum(p.enabled for p in provenance)} provenance sources from {config_path}"
    )
    return config


def configure_logging(verbose: bool = False) -> None:
    """CLI 用に loguru の stderr シンクのレベルを切り替える."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
