"""canonical ストアの健全性チェックを行い、TSVレポートを出力する。"""

from __future__ import annotations

import argparse
import csv
from collections.abc import Iterable, Sequence
from pathlib import Path

from name_stuff_builder.core.codec import LINE_PARSERS, is_data_line
from name_stuff_builder.core.records import TAG_VOCABULARY, NameType, sorted_records
from name_stuff_builder.core.skips import SkipSet, load_skips
from name_stuff_builder.core.store import CanonicalStore


def _write_tsv(path: Path, header: Sequence[str], rows: Iterable[Sequence[object]]) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter="\t")
        writer.writerow(list(header))
        count = 0
        for r in rows:
            writer.writerow(["" if v is None else v for v in r])
            count += 1
    return count


def _malformed_lines(path: Path, name_type: NameType) -> list[tuple[int, str]]:
    """パースで捨てられる行を (行番号, 行) で返す."""
    parser = LINE_PARSERS[name_type]
    found: list[tuple[int, str]] = []
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if is_data_line(line) and parser(line) is None:
            found.append((line_no, line))
    return found


def run_health_checks(data_dir: Path, out_dir: Path, skips: SkipSet | None = None) -> Path:
    store = CanonicalStore(data_dir)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    skips = skips or SkipSet()

    summary_rows: list[tuple[object, ...]] = []
    malformed_rows: list[tuple[object, ...]] = []
    unknown_tag_rows: list[tuple[object, ...]] = []
    skipped_rows: list[tuple[object, ...]] = []
    total_names = 0

    for culture in store.cultures():
        for name_type in NameType:
            if not store.exists(culture, name_type):
                continue

            path = store.path_for(culture, name_type)
            dataset = store.load(culture, name_type)
            malformed = _malformed_lines(path, name_type)
            tagged = sum(1 for r in dataset.values() if r.tags)

            for line_no, line in malformed:
                malformed_rows.append((culture, name_type.value, line_no, line))

            for record in sorted_records(dataset):
                for tag in sorted(record.tags - TAG_VOCABULARY):
                    unknown_tag_rows.append((culture, name_type.value, record.name, tag))
                if record.name in skips:
                    skipped_rows.append((culture, name_type.value, record.name, skips.reason(record.name)))

            summary_rows.append((culture, name_type.value, len(dataset), tagged, len(malformed)))
            total_names += len(dataset)

    _write_tsv(
        out_dir / "culture_summary.tsv",
        ["culture", "type", "names", "tagged", "malformed_lines"],
        summary_rows,
    )
    malformed_count = _write_tsv(
        out_dir / "malformed_lines.tsv", ["culture", "type", "line_no", "line"], malformed_rows
    )
    unknown_count = _write_tsv(
        out_dir / "unknown_tags.tsv", ["culture", "type", "name", "tag"], unknown_tag_rows
    )
    skipped_count = _write_tsv(
        out_dir / "skipped_names.tsv", ["culture", "type", "name", "reason"], skipped_rows
    )

    summary_out = out_dir / "store_health_summary.tsv"
    _write_tsv(
        summary_out,
        ["metric", "value"],
        [
            ("data_dir", str(data_dir)),
            ("cultures", len({r[0] for r in summary_rows})),
            ("total_names", total_names),
            ("malformed_lines", malformed_count),
            ("unknown_tags", unknown_count),
            ("skipped_names", skipped_count),
        ],
    )
    return summary_out


def main() -> None:
    p = argparse.ArgumentParser(description="Check canonical store health and write TSV reports.")
    p.add_argument("--data-dir", type=Path, default=Path("data"), help="Canonical data directory")
    p.add_argument("--out-dir", type=Path, required=True, help="Output directory for TSV reports")
    p.add_argument("--skips", type=Path, default=None, help="Optional skip list to cross-check")
    args = p.parse_args()

    summary = run_health_checks(args.data_dir, args.out_dir, load_skips(args.skips))
    print(f"Wrote health reports: {summary.parent}")


if __name__ == "__main__":
    main()
