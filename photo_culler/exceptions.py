"""
カスタム例外クラス定義

Photo Cullerで使用する例外クラスを定義します。
"""


class ProcessingError(Exception):
    """処理エラーの基底クラス"""
    pass


class ValidationError(ProcessingError):
    """検証エラー（副作用が発生する前の前提条件違反）"""
    pass


class FileOperationError(ProcessingError):
    """ファイル操作エラー"""

    def __init__(self, path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class ExifReadError(ProcessingError):
    """Exif読取エラー"""
    pass


class BatchOperationError(ProcessingError):
    """一括操作中に1件以上のファイルで失敗した場合のエラー"""

    def __init__(self, message: str, result):
        super().__init__(message)
        self.result = result


class NothingExportedError(ProcessingError):
    """エクスポート対象のファイルが1件もなかった場合のエラー"""
    pass
