"""name_stuff_builder: カルチャー別の名前データセット構築.

ベンダーソースの canonical ストアへのマージ、出典タグ付け、サイズ別リストの生成を提供する。
"""

__version__ = "0.1.0"
