"""ASCII 変換（ダイアクリティカルマークの除去）.

固定の変換表で1文字ずつ置き換え、それでも印字可能 ASCII（0x20-0x7E）以外の文字が残る名前は
ASCII 版の出力から除外する（崩れた文字のまま出さない）。通常版の出力には影響しない。
"""

from __future__ import annotations

from dataclasses import replace

from .records import CultureDataset, NameRecord, name_key

# 変換先 → 変換元文字（Latin-1 Supplement / Latin Extended-A の名前でよく使われる文字）
_ASCII_GROUPS = {
    "A": "ÀÁÂÃÄÅĀĂĄ",
    "a": "àáâãäåāăą",
    "AE": "Æ",
    "ae": "æ",
    "C": "ÇĆĈĊČ",
    "c": "çćĉċč",
    "D": "ÐĎĐ",
    "d": "ðďđ",
    "E": "ÈÉÊËĒĔĖĘĚ",
    "e": "èéêëēĕėęě",
    "G": "ĜĞĠĢ",
    "g": "ĝğġģ",
    "H": "ĤĦ",
    "h": "ĥħ",
    "I": "ÌÍÎÏĨĪĬĮİ",
    "i": "ìíîïĩīĭįı",
    "IJ": "Ĳ",
    "ij": "ĳ",
    "J": "Ĵ",
    "j": "ĵ",
    "K": "Ķ",
    "k": "ķĸ",
    "L": "ĹĻĽĿŁ",
    "l": "ĺļľŀł",
    "N": "ÑŃŅŇŊ",
    "n": "ñńņňŉŋ",
    "O": "ÒÓÔÕÖØŌŎŐ",
    "o": "òóôõöøōŏő",
    "OE": "Œ",
    "oe": "œ",
    "R": "ŔŖŘ",
    "r": "ŕŗř",
    "S": "ŚŜŞŠȘ",
    "s": "śŝşšș",
    "SS": "ẞ",
    "ss": "ß",
    "T": "ŢŤŦȚ",
    "t": "ţťŧț",
    "Th": "Þ",
    "th": "þ",
    "U": "ÙÚÛÜŨŪŬŮŰŲ",
    "u": "ùúûüũūŭůűų",
    "W": "Ŵ",
    "w": "ŵ",
    "Y": "ÝŶŸ",
    "y": "ýÿŷ",
    "Z": "ŹŻŽ",
    "z": "źżž",
}

ASCII_TABLE = str.maketrans({ch: target for target, chars in _ASCII_GROUPS.items() for ch in chars})


def to_ascii(name: str) -> str:
    """変換表で置き換える（表に無い文字はそのまま残る）.

    Examples:
        >>> to_ascii("José")
        'Jose'
        >>> to_ascii("Łukasz")
        'Lukasz'
    """
    return name.translate(ASCII_TABLE)


def is_printable_ascii(text: str) -> bool:
    return all(" " <= ch <= "~" for ch in text)


def transliterate_record(record: NameRecord) -> NameRecord | None:
    """ASCII 版のレコードを返す。変換しきれない名前は None（出力から除外）."""
    name = to_ascii(record.name)
    if not is_printable_ascii(name):
        return None
    if name == record.name:
        return record
    return replace(record, name=name)


def transliterate_dataset(dataset: CultureDataset) -> CultureDataset:
    """データセット全体を ASCII 化する.

    変換後に同じキーになるレコード（例: José と Jose）は1つに絞る。
    元から ASCII の綴り → frequency が高い方 → 元キーが小さい方 の順で優先する。
    """
    candidates: dict[str, list[tuple[bool, int, str, NameRecord]]] = {}
    for key, record in dataset.items():
        converted = transliterate_record(record)
        if converted is None:
            continue
        native = converted is record
        candidates.setdefault(name_key(converted.name), []).append(
            (not native, -record.frequency, key, converted)
        )

    return {new_key: min(found)[3] for new_key, found in sorted(candidates.items())}
