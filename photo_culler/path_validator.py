"""
パス検証ユーティリティ

スキャン対象フォルダとエクスポート先の前提条件を検証します。
検証はファイルに触れる前に行い、失敗時は副作用なしでValidationErrorを送出します。
"""

import os
from pathlib import Path

from .exceptions import ValidationError


class PathValidator:
    """パス検証を行うユーティリティクラス"""

    @staticmethod
    def validate_directory(path: Path, label: str = "ディレクトリ") -> None:
        """
        ディレクトリの存在とアクセス権を検証

        Args:
            path: 検証するディレクトリパス
            label: エラーメッセージに使うパスの呼び名

        Raises:
            ValidationError: ディレクトリが存在しない、アクセス不可能、
                           またはディレクトリではない場合
        """
        if not path.exists():
            raise ValidationError(f"{label}が存在しません: {path}")

        if not path.is_dir():
            raise ValidationError(f"{label}ではありません: {path}")

        if not os.access(path, os.R_OK):
            raise ValidationError(f"{label}に読み取り権限がありません: {path}")

    @staticmethod
    def validate_export_destination(path: Path) -> None:
        """
        エクスポート先が既存のディレクトリかどうかを検証

        権限は検証しません。書き込みに失敗したファイルは
        ファイルごとの失敗として集計されます。

        Raises:
            ValidationError: エクスポート先が存在しない、またはディレクトリではない場合
        """
        label = "エクスポート先ディレクトリ"
        if not path.exists():
            raise ValidationError(f"{label}が存在しません: {path}")

        if not path.is_dir():
            raise ValidationError(f"{label}ではありません: {path}")

    @staticmethod
    def is_regular_file(path: Path) -> bool:
        """通常ファイルとして現在存在する場合True（アクセスエラーはFalse扱い）"""
        try:
            return path.is_file()
        except OSError:
            return False
