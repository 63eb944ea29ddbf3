"""
カリング処理管理モジュール

UIシェルやCLIから呼び出される操作（Exif読み取り、スキャン、ゴミ箱移動、
エクスポート）をまとめて提供します。各操作は呼び出しごとに作業データを作り直し、
呼び出し間で状態を共有しません。
"""

import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .exceptions import ProcessingError
from .exif_reader import ExifReader
from .file_operator import FileOperator
from .grouper import PhotoGrouper
from .logger import ProgressLogger, create_default_logger
from .models import ExifData, ExportMode, ExportOperation, PhotoGroup

GroupLike = Union[PhotoGroup, Dict[str, Any]]


class CullManager:
    """カリング操作を担当するクラス"""

    def __init__(self, verbose: bool = False, log_file: Optional[Path] = None,
                 trash_func: Optional[Callable] = None,
                 progress_logger: Optional[ProgressLogger] = None):
        """
        CullManagerを初期化

        Args:
            verbose: 詳細ログを表示する場合True
            log_file: ログファイルのパス
            trash_func: ゴミ箱への移動に使う関数（省略時はsend2trash）
            progress_logger: 既存のロガー（省略時は新規作成）
        """
        self.progress_logger = progress_logger or create_default_logger(verbose=verbose, log_file=log_file)
        self.exif_reader = ExifReader()
        self.grouper = PhotoGrouper(self.exif_reader)
        self.file_operator = FileOperator(trash_func)
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    def read_metadata(self, file_path: str) -> ExifData:
        """
        単一ファイルのExif情報を読み取る

        Raises:
            FileOperationError: ファイルを開けない場合
            ExifReadError: Exif情報を解析できない場合
        """
        return self.exif_reader.read_metadata(Path(file_path))

    def scan_directory(self, folder_path: str) -> List[PhotoGroup]:
        """
        フォルダをスキャンしてグループのリストを返す

        Raises:
            ValidationError: フォルダが存在しない、またはフォルダではない場合
            FileOperationError: フォルダの列挙に失敗した場合
        """
        folder = Path(folder_path)
        self.progress_logger.log_scan_start(str(folder))
        start_time = time.time()

        try:
            groups = self.grouper.group_directory(folder)
        except ProcessingError as e:
            self.progress_logger.log_error(folder, "スキャンに失敗しました", e)
            raise

        self.progress_logger.log_scan_complete(groups, time.time() - start_time)
        return groups

    def scan_files(self, file_paths: Iterable[str]) -> List[PhotoGroup]:
        """指定されたファイルをグループ化（存在しないファイルは除外し、失敗しない）"""
        file_paths = list(file_paths)
        self.progress_logger.log_scan_start(f"{len(file_paths)}個のファイル")
        start_time = time.time()

        groups = self.grouper.group_files(file_paths)

        self.progress_logger.log_scan_complete(groups, time.time() - start_time)
        return groups

    def trash_groups(self, groups: Iterable[GroupLike]) -> List[str]:
        """
        グループのファイルをゴミ箱へ移動

        Raises:
            BatchOperationError: 1件以上のファイルで失敗した場合
        """
        groups = self._coerce_groups(groups)
        self.progress_logger.log_trash_start(len(groups))
        start_time = time.time()

        result = self.file_operator.trash(groups)
        self.progress_logger.log_trash_complete(result, time.time() - start_time)

        return self.file_operator.check_trash_result(result)

    def export_groups(self, groups: Iterable[GroupLike], mode, operation,
                      destination_folder: str) -> List[str]:
        """
        グループのファイルをエクスポート

        Raises:
            ValidationError: 引数またはエクスポート先が不正な場合
            BatchOperationError: 1件以上のファイルで失敗した場合
            NothingExportedError: エクスポートされたファイルが1件もない場合
        """
        groups = self._coerce_groups(groups)
        mode = ExportMode.parse(mode)
        operation = ExportOperation.parse(operation)
        destination = Path(destination_folder)

        self.progress_logger.log_export_start(len(groups), mode.value, operation.value, destination)
        start_time = time.time()

        try:
            result = self.file_operator.export_result(groups, mode, operation, destination)
        except ProcessingError as e:
            self.progress_logger.log_error(destination, "エクスポートを開始できません", e)
            raise

        self.progress_logger.log_export_complete(result, time.time() - start_time)
        return self.file_operator.check_export_result(result)

    def submit(self, operation: str, *args, **kwargs) -> Future:
        """
        操作をバックグラウンドのワーカーで実行

        Args:
            operation: 実行する操作名（例: 'scan_directory'）

        Returns:
            操作の結果を保持するFuture
        """
        func = getattr(self, operation, None)
        if operation.startswith('_') or operation == 'submit' or not callable(func):
            raise ValueError(f"不明な操作です: {operation}")

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='photo_culler')
        return self._executor.submit(func, *args, **kwargs)

    def shutdown(self) -> None:
        """バックグラウンドのワーカーを終了"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    @staticmethod
    def _coerce_groups(groups: Iterable[GroupLike]) -> List[PhotoGroup]:
        """辞書形式のグループをPhotoGroupに変換"""
        return [
            group if isinstance(group, PhotoGroup) else PhotoGroup.from_dict(group)
            for group in groups
        ]
