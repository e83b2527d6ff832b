"""衝突検出結果の出力（レポート）.

マージ時の gender 不一致（既存と新規ソースで性別コードが違い U に倒したもの）を TSV として出力します。
"""

from __future__ import annotations

from pathlib import Path

import polars as pl

from .merge import GenderConflict

_SCHEMA = {
    "culture": pl.String,
    "source": pl.String,
    "name": pl.String,
    "existing": pl.String,
    "incoming": pl.String,
}


def gender_conflicts_frame(conflicts: list[GenderConflict], culture: str, source: str) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "culture": [culture] * len(conflicts),
            "source": [source] * len(conflicts),
            "name": [c.name for c in conflicts],
            "existing": [c.existing for c in conflicts],
            "incoming": [c.incoming for c in conflicts],
        },
        schema=_SCHEMA,
    )


def export_gender_conflicts(
    frames: list[pl.DataFrame],
    output_dir: Path | str,
) -> Path | None:
    """gender 不一致レポートを TSV ファイルとして出力する.

    Args:
        frames: gender_conflicts_frame() の戻り値のリスト
        output_dir: 出力ディレクトリ

    Returns:
        出力した TSV のパス（衝突が無ければ None、ファイルも作らない）
    """
    non_empty = [f for f in frames if len(f) > 0]
    if not non_empty:
        return None

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / "gender_conflicts.tsv"
    pl.concat(non_empty).sort(["culture", "name", "source"]).write_csv(path, separator="\t")
    return path
