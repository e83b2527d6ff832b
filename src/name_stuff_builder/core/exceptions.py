"""Dataset builder exceptions.

カスタム例外クラスを定義します。
回復可能な入力の揺れ（壊れた行・存在しないオプションファイル・外部問い合わせ失敗）は
例外にせず、呼び出し側でスキップ/空結果として扱います。
"""

from __future__ import annotations

from pathlib import Path


class NameStuffError(Exception):
    """name_stuff_builder の例外基底クラス."""


class CanonicalStoreError(NameStuffError):
    """canonical ストアのルートが読めない（実行全体を中断する致命的エラー）.

    Attributes:
        root: canonical ストアのルートディレクトリ
        reason: 読めない理由
    """

    def __init__(self, root: Path | str, reason: str) -> None:
        self.root = Path(root)
        self.reason = reason
        super().__init__(f"Canonical store unreadable: {self.root} ({reason})")


class SourceConfigError(NameStuffError):
    """sources.yml の内容が不正.

    Attributes:
        config_path: 設定ファイルのパス
        detail: 不正箇所の説明
    """

    def __init__(self, config_path: Path | str, detail: str) -> None:
        self.config_path = Path(config_path)
        self.detail = detail
        super().__init__(f"Invalid source config {self.config_path}: {detail}")
