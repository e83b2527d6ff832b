"""canonical ストア（カルチャー別のパイプ区切りファイル）.

レイアウト:
    <root>/<culture>/given.txt
    <root>/<culture>/family.txt

書き込みは「全体読み込み → メモリ上で変換 → 全体上書き」。ロックは取らないため、
同じカルチャー/種別への同時実行は呼び出し側で直列化すること。
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .codec import COMMENT_PREFIX, FORMAT_LINES, format_record_line, parse_lines
from .exceptions import CanonicalStoreError
from .merge import aggregate_records
from .records import RECORD_CLASSES, CultureDataset, NameType, sorted_records

SOURCES_PREFIX = "# sources:"


def render_dataset_file(
    dataset: CultureDataset,
    name_type: NameType,
    culture: str,
    sources: str | None = None,
) -> str:
    """canonical ファイルの内容（ヘッダ + name 順のレコード行）を組み立てる."""
    lines = [
        f"# name-stuff {name_type.value} names for culture: {culture}",
        FORMAT_LINES[name_type],
    ]
    if name_type is NameType.GIVEN:
        lines.append("# gender: M=male, F=female, U=unisex, M?=mostly male, F?=mostly female")
    lines.append("# frequency: 1-13 (higher = more common)")
    if sources:
        lines.append(f"{SOURCES_PREFIX} {sources}")
    lines.append(COMMENT_PREFIX)
    lines.extend(format_record_line(r) for r in sorted_records(dataset))
    return "\n".join(lines) + "\n"


class CanonicalStore:
    """カルチャー別 canonical ファイルの読み書き.

    Args:
        root: canonical データのルートディレクトリ（例: data/）
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def cultures(self) -> list[str]:
        """ルート直下のカルチャーディレクトリ名をソートして返す.

        Raises:
            CanonicalStoreError: ルートが存在しない/ディレクトリでない/読めない場合
        """
        if not self.root.exists():
            raise CanonicalStoreError(self.root, "directory does not exist")
        if not self.root.is_dir():
            raise CanonicalStoreError(self.root, "not a directory")
        try:
            return sorted(p.name for p in self.root.iterdir() if p.is_dir())
        except OSError as e:
            raise CanonicalStoreError(self.root, str(e)) from e

    def path_for(self, culture: str, name_type: NameType) -> Path:
        return self.root / culture / f"{name_type.value}.txt"

    def exists(self, culture: str, name_type: NameType) -> bool:
        return self.path_for(culture, name_type).is_file()

    def load(self, culture: str, name_type: NameType) -> CultureDataset:
        """canonical ファイルを読み込む（無ければ空）.

        壊れた行は捨て、同じキーが重複していればマージ規則で畳み込む。
        """
        path = self.path_for(culture, name_type)
        if not path.is_file():
            logger.debug(f"No {name_type.value} data for {culture}: {path}")
            return {}

        records, dropped = parse_lines(path.read_text(encoding="utf-8").splitlines(), name_type)
        if dropped:
            logger.debug(f"{path}: dropped {dropped} malformed line(s)")
        return aggregate_records(records)

    def read_sources(self, culture: str, name_type: NameType) -> str | None:
        """既存ファイルヘッダの `# sources:` 行の値を返す."""
        path = self.path_for(culture, name_type)
        if not path.is_file():
            return None
        for line in path.read_text(encoding="utf-8").splitlines():
            if not line.startswith(COMMENT_PREFIX):
                break
            if line.startswith(SOURCES_PREFIX):
                return line[len(SOURCES_PREFIX) :].strip() or None
        return None

    def save(
        self,
        culture: str,
        name_type: NameType,
        dataset: CultureDataset,
        sources: str | None = None,
    ) -> Path:
        """データセットでファイル全体を上書きする.

        Args:
            sources: ヘッダの sources 行（None の場合は既存ファイルの値を引き継ぐ）

        Raises:
            ValueError: name_type と異なる種別のレコードが含まれる場合
        """
        record_class = RECORD_CLASSES[name_type]
        for record in dataset.values():
            if not isinstance(record, record_class):
                raise ValueError(
                    f"{type(record).__name__} {record.name!r} cannot be saved as {name_type.value} data"
                )

        if sources is None:
            sources = self.read_sources(culture, name_type)

        path = self.path_for(culture, name_type)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            render_dataset_file(dataset, name_type, culture, sources), encoding="utf-8", newline="\n"
        )
        logger.debug(f"Wrote {len(dataset)} {name_type.value} names to {path}")
        return path

    def save_if_changed(
        self,
        culture: str,
        name_type: NameType,
        before: CultureDataset,
        after: CultureDataset,
        sources: str | None = None,
    ) -> bool:
        """変更があった場合だけ保存する（無意味な差分を出さないため）."""
        if before == after:
            return False
        self.save(culture, name_type, after, sources=sources)
        return True
