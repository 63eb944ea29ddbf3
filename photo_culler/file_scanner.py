"""
ファイルスキャナー

フォルダまたは明示的なファイルリストから、グループ化の対象となる
JPEGファイルとRAWファイルを検出し、PhotoFileInfoを作成します。
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

from .exceptions import FileOperationError
from .models import PhotoFileInfo
from .path_validator import PathValidator


class FileScanner:
    """フォルダとファイルリストをスキャンするクラス"""

    # JPEG拡張子（ドットなし、大文字で比較）
    JPEG_EXTENSIONS: FrozenSet[str] = frozenset({'JPG', 'JPEG'})

    # RAWファイル拡張子（ドットなし、大文字で比較）
    RAW_EXTENSIONS: FrozenSet[str] = frozenset({
        'ARW',  # Sony
        'CR2',  # Canon
        'NEF',  # Nikon
        'DNG',  # Adobe/Leica
        'ORF',  # Olympus
        'RAF',  # Fujifilm
        'SRW',  # Samsung
    })

    def __init__(self):
        """FileScannerを初期化"""
        self.logger = logging.getLogger(__name__)

    def list_directory(self, directory: Path) -> List[Path]:
        """
        フォルダ直下の通常ファイルを列挙（サブフォルダは検索しない）

        Args:
            directory: スキャンするフォルダ

        Returns:
            ファイル名順に並べたファイルパスのリスト

        Raises:
            ValidationError: フォルダが存在しない、またはフォルダではない場合
            FileOperationError: フォルダの列挙に失敗した場合
        """
        PathValidator.validate_directory(directory, label="フォルダ")

        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise FileOperationError(directory, f"フォルダの読み取りに失敗しました ({e})") from e

        # 列挙順はファイルシステム依存のため、ファイル名で並べ替える
        files = [entry for entry in entries if PathValidator.is_regular_file(entry)]
        return sorted(files, key=lambda p: p.name)

    def filter_existing_files(self, file_paths: Iterable) -> List[Path]:
        """
        現在通常ファイルとして存在するパスのみを残す（順序は維持）

        Args:
            file_paths: ファイルパスのリスト

        Returns:
            存在するファイルパスのリスト
        """
        existing = []
        for file_path in file_paths:
            path = Path(file_path)
            if PathValidator.is_regular_file(path):
                existing.append(path)
            else:
                self.logger.debug(f"存在しないファイルをスキップ: {path}")
        return existing

    def describe(self, file_path: Path) -> Optional[PhotoFileInfo]:
        """
        対象拡張子のファイルからPhotoFileInfoを作成

        Args:
            file_path: ファイルパス

        Returns:
            PhotoFileInfo（対象外の拡張子の場合はNone）
        """
        extension = self.get_extension(file_path)
        if not self.is_supported_extension(extension):
            return None

        try:
            size = file_path.stat().st_size
        except OSError as e:
            self.logger.debug(f"ファイルサイズ取得エラー（0として扱う）: {file_path} - {e}")
            size = 0

        return PhotoFileInfo(
            name=file_path.name,
            extension=extension,
            path=file_path,
            size=size,
        )

    def get_basename(self, file_path: Path) -> str:
        """
        ファイルパスからベース名（拡張子を除いたファイル名）を取得
        グループのキーになるため大文字小文字はそのまま保持する
        """
        return file_path.stem

    def get_extension(self, file_path: Path) -> str:
        """ドットを除いた大文字の拡張子を取得（拡張子なしの場合は空文字列）"""
        return file_path.suffix.lstrip('.').upper()

    def is_supported_extension(self, extension: str) -> bool:
        return self.is_jpeg_extension(extension) or self.is_raw_extension(extension)

    def is_jpeg_extension(self, extension: str) -> bool:
        return extension.upper() in self.JPEG_EXTENSIONS

    def is_raw_extension(self, extension: str) -> bool:
        return extension.upper() in self.RAW_EXTENSIONS
