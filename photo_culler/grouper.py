"""
グループ化処理モジュール

ファイルをベース名（拡張子を除いたファイル名）ごとにまとめ、JPEG/RAWの
スロットに割り当ててグループのステータスを決定します。
各グループにはJPEGメンバー（なければRAWメンバー）から読み取ったExif情報を付与します。
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .exceptions import ProcessingError
from .exif_reader import ExifReader
from .file_scanner import FileScanner
from .models import ExifData, GroupStatus, PhotoFileInfo, PhotoGroup


class PhotoGrouper:
    """JPEGファイルとRAWファイルをグループ化するクラス"""

    def __init__(self, exif_reader: Optional[ExifReader] = None,
                 file_scanner: Optional[FileScanner] = None):
        """
        PhotoGrouperを初期化

        Args:
            exif_reader: Exif情報読み取りオブジェクト
            file_scanner: ファイルスキャナー
        """
        self.exif_reader = exif_reader or ExifReader()
        self.file_scanner = file_scanner or FileScanner()
        self.logger = logging.getLogger(__name__)

    def group(self, sources: Union[str, os.PathLike, Iterable]) -> List[PhotoGroup]:
        """
        フォルダまたはファイルリストをグループ化

        Args:
            sources: フォルダパス、またはファイルパスのリスト

        Returns:
            IDの辞書順に並んだグループのリスト
        """
        if isinstance(sources, (str, os.PathLike)):
            return self.group_directory(Path(sources))
        return self.group_files(sources)

    def group_directory(self, directory: Path) -> List[PhotoGroup]:
        """
        フォルダ直下のファイルをグループ化

        Raises:
            ValidationError: フォルダが存在しない、またはフォルダではない場合
            FileOperationError: フォルダの列挙に失敗した場合
        """
        file_paths = self.file_scanner.list_directory(Path(directory))
        return self._build_groups(file_paths)

    def group_files(self, file_paths: Iterable) -> List[PhotoGroup]:
        """指定されたファイルをグループ化（存在しないファイルは除外）"""
        existing = self.file_scanner.filter_existing_files(file_paths)
        return self._build_groups(existing)

    def _build_groups(self, file_paths: List[Path]) -> List[PhotoGroup]:
        groups: Dict[str, PhotoGroup] = {}

        for file_path in file_paths:
            file_info = self.file_scanner.describe(file_path)
            if file_info is None:
                continue

            basename = self.file_scanner.get_basename(file_path)
            group = groups.get(basename)
            if group is None:
                group = PhotoGroup(id=basename, status=GroupStatus.UNMARKED)
                groups[basename] = group

            self._assign_slot(group, file_info)

        result = []
        for group in groups.values():
            if self._finalize(group):
                result.append(group)

        # 辞書の反復順序には依存せず、IDで並べ替える
        result.sort(key=lambda g: g.id)

        self.logger.debug(f"グループ化完了: {len(file_paths)}個のファイル -> {len(result)}個のグループ")
        return result

    def _assign_slot(self, group: PhotoGroup, file_info: PhotoFileInfo) -> None:
        """ファイルをJPEGまたはRAWのスロットに割り当てる（後から来たものが優先）"""
        if self.file_scanner.is_jpeg_extension(file_info.extension):
            previous = group.jpg
            group.jpg = file_info
        else:
            previous = group.raw
            group.raw = file_info

        if previous is not None:
            self.logger.warning(
                f"同じベース名のファイルが重複しています: {group.id} - "
                f"{previous.name} を {file_info.name} で置き換えます"
            )

    def _finalize(self, group: PhotoGroup) -> bool:
        """
        ステータスを決定してExif情報を付与

        Returns:
            グループを残す場合True（メンバーが1つもない場合False）
        """
        status = GroupStatus.derive(group.jpg is not None, group.raw is not None)
        if status is None:
            return False

        group.status = status
        group.exif = self._read_group_exif(group)
        self.logger.debug(f"グループ確定: {group.id} ({status.value})")
        return True

    def _read_group_exif(self, group: PhotoGroup) -> Optional[ExifData]:
        """JPEGメンバーを優先してExif情報を読み取る（失敗時はNone）"""
        source = group.jpg or group.raw
        try:
            return self.exif_reader.read_metadata(source.path)
        except ProcessingError as e:
            self.logger.debug(f"Exif読み取りエラー（処理継続）: {source.path} - {e}")
            return None
