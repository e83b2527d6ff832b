"""スキップリスト（派生リストから除外する名前）.

形式: 1行1エントリ `Name|ReasonCode`（`#` 行と空行は無視、照合は大文字小文字を区別しない）

スキップは派生リスト生成時だけに適用し、canonical ストアは決して書き換えない。
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from loguru import logger

from .codec import FIELD_SEPARATOR, is_data_line
from .records import CultureDataset, name_key


@dataclass(frozen=True)
class SkipSet:
    """小文字 name → 理由コード の読み取り専用集合."""

    reasons: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "reasons",
            MappingProxyType({name_key(k): v for k, v in self.reasons.items()}),
        )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name_key(name) in self.reasons

    def __len__(self) -> int:
        return len(self.reasons)

    def reason(self, name: str) -> str | None:
        return self.reasons.get(name_key(name))


def parse_skip_lines(lines: list[str]) -> SkipSet:
    """スキップリストの行をパースする.

    理由コードが欠けた行も名前は除外対象にする（ブラックリストは漏らさない側に倒す）。
    3フィールド以上の行と name が空の行は捨てる。
    """
    reasons: dict[str, str] = {}
    for line in lines:
        if not is_data_line(line):
            continue
        parts = line.strip().split(FIELD_SEPARATOR)
        if len(parts) > 2 or not parts[0].strip():
            continue
        name = parts[0].strip()
        reason = parts[1].strip() if len(parts) == 2 else ""
        reasons.setdefault(name_key(name), reason)
    return SkipSet(reasons)


def load_skips(path: Path | str | None) -> SkipSet:
    """スキップリストファイルを読み込む（無ければ空の SkipSet）."""
    if path is None:
        return SkipSet()
    path = Path(path)
    if not path.is_file():
        logger.debug(f"Skip list not found, nothing will be skipped: {path}")
        return SkipSet()

    skips = parse_skip_lines(path.read_text(encoding="utf-8").splitlines())
    logger.info(f"Loaded {len(skips)} skip entries from {path}")
    return skips


def filter_skips(dataset: CultureDataset, skips: SkipSet) -> CultureDataset:
    """スキップ対象を取り除いた新しいデータセットを返す（入力は変更しない）."""
    return {key: record for key, record in dataset.items() if key not in skips}
