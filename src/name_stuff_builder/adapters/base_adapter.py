"""データソース統合用アダプタ（基底クラス）.

各種ベンダーソース（固定長辞書/年別CSV/国別CSVなど）を共通インターフェースで扱うための
抽象基底クラスを定義します。アダプタは canonical ストアに触れず、
canonical 形のレコード（GivenNameRecord / FamilyNameRecord）だけを返します。
"""

from abc import ABC, abstractmethod

from name_stuff_builder.core.records import CultureDataset, NameType


class BaseAdapter(ABC):
    """入力ソースアダプタの基底クラス.

    全てのデータソースアダプタはこのクラスを継承し、name_type と read() を実装します。
    """

    name_type: NameType

    @abstractmethod
    def read(self) -> dict[str, CultureDataset]:
        """データソースを読み込み、カルチャー → CultureDataset に変換する.

        Returns:
            カルチャーコード（例: "en", "nordic"）→ CultureDataset

        Raises:
            FileNotFoundError: ファイルが存在しない場合
        """
        ...
