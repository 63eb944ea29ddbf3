"""
一括ファイル操作モジュール

グループのメンバーファイルをゴミ箱へ移動、またはエクスポート先へコピー/移動します。
ファイルごとの成否を集計し、失敗が1件でもあれば最後にまとめて報告します。
処理済みのファイルは失敗時にも元に戻しません。
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from send2trash import send2trash

from .exceptions import BatchOperationError, NothingExportedError
from .models import BatchResult, ExportMode, ExportOperation, PhotoFileInfo, PhotoGroup
from .path_validator import PathValidator


class FileOperator:
    """グループ単位でファイルを一括操作するクラス"""

    def __init__(self, trash_func: Optional[Callable] = None):
        """
        FileOperatorを初期化

        Args:
            trash_func: ファイルをゴミ箱へ移動する関数（省略時はsend2trash）
        """
        self.trash_func = trash_func or send2trash
        self.logger = logging.getLogger(__name__)

    def move_to_trash(self, groups: Iterable[PhotoGroup]) -> List[str]:
        """
        全グループのメンバーファイルをゴミ箱へ移動

        Args:
            groups: 対象グループ

        Returns:
            ゴミ箱へ移動したファイルパスのリスト

        Raises:
            BatchOperationError: 1件以上のファイルで移動に失敗した場合
        """
        return self.check_trash_result(self.trash(groups))

    @staticmethod
    def check_trash_result(result: BatchResult) -> List[str]:
        """ゴミ箱移動の結果を検査し、失敗があればまとめて送出"""
        if result.errors:
            message = "一部のファイルをゴミ箱に移動できませんでした:\n" + "\n".join(result.error_messages())
            raise BatchOperationError(message, result)
        return result.succeeded

    def trash(self, groups: Iterable[PhotoGroup]) -> BatchResult:
        """ゴミ箱への移動を実行し、結果を例外なしで返す"""
        result = BatchResult()

        for group in groups:
            for member in group.member_files():
                path = Path(member.path)

                # 外部で削除済みのファイルは失敗扱いにしない
                if not path.exists():
                    self.logger.debug(f"存在しないファイルをスキップ: {path}")
                    result.skipped += 1
                    continue

                try:
                    self.trash_func(str(path))
                except Exception as e:
                    # 1件の失敗で一括処理を中断せず、失敗として記録する
                    error_msg = f"ゴミ箱への移動に失敗しました: {path} ({e})"
                    self.logger.error(error_msg)
                    result.errors.append((path, error_msg))
                    continue

                self.logger.debug(f"ゴミ箱へ移動: {path}")
                result.succeeded.append(str(member.path))

        self.logger.debug(
            f"ゴミ箱への移動完了: 成功={len(result.succeeded)}, "
            f"スキップ={result.skipped}, 失敗={result.failed}"
        )
        return result

    def export(self, groups: Iterable[PhotoGroup], mode, operation, destination_dir: Path) -> List[str]:
        """
        グループのファイルをエクスポート先へコピーまたは移動

        Args:
            groups: 対象グループ
            mode: エクスポート対象（JPG、RAW、BOTH）
            operation: ファイル操作（COPY、MOVE）
            destination_dir: エクスポート先ディレクトリ

        Returns:
            処理結果メッセージのリスト

        Raises:
            ValidationError: 引数またはエクスポート先が不正な場合（ファイルには触れない）
            BatchOperationError: 1件以上のファイルで失敗した場合
            NothingExportedError: エクスポートされたファイルが1件もない場合
        """
        return self.check_export_result(self.export_result(groups, mode, operation, destination_dir))

    @staticmethod
    def check_export_result(result: BatchResult) -> List[str]:
        """エクスポートの結果を検査し、失敗または処理件数0の場合は送出"""
        if result.errors:
            message = (
                "エクスポート中にエラーが発生しました:\n"
                + "\n".join(result.error_messages())
                + f"\n\n{len(result.succeeded)}個のファイルを正常に処理しました"
            )
            raise BatchOperationError(message, result)

        if not result.succeeded:
            raise NothingExportedError("エクスポートされたファイルはありません")

        return result.succeeded

    def export_result(self, groups: Iterable[PhotoGroup], mode, operation,
                      destination_dir: Path) -> BatchResult:
        """エクスポートを実行し、結果を例外なしで返す（前提条件違反のみ送出）"""
        mode = ExportMode.parse(mode)
        operation = ExportOperation.parse(operation)
        destination_dir = Path(destination_dir)
        PathValidator.validate_export_destination(destination_dir)

        result = BatchResult()
        for group in groups:
            members = self._select_members(group, mode)
            if not members:
                self.logger.debug(f"対象ファイルがないためスキップ: {group.id} ({mode.value})")
                result.skipped += 1
                continue

            for member in members:
                message, error_msg = self._export_single_file(member, operation, destination_dir)
                if error_msg:
                    result.errors.append((Path(member.path), error_msg))
                else:
                    result.succeeded.append(message)

        self.logger.debug(
            f"エクスポート完了: 成功={len(result.succeeded)}, "
            f"スキップ={result.skipped}, 失敗={result.failed}"
        )
        return result

    def _select_members(self, group: PhotoGroup, mode: ExportMode) -> List[PhotoFileInfo]:
        """エクスポート対象に応じてメンバーファイルを選択"""
        if mode is ExportMode.JPG:
            return [group.jpg] if group.jpg else []
        if mode is ExportMode.RAW:
            return [group.raw] if group.raw else []
        return group.member_files()

    def _export_single_file(self, member: PhotoFileInfo, operation: ExportOperation,
                            destination_dir: Path):
        """
        単一ファイルをコピーまたは移動

        Returns:
            (成功メッセージ, エラーメッセージ) のタプル（どちらか一方がNone）
        """
        source_path = Path(member.path)
        target_path = destination_dir / source_path.name

        if not source_path.exists():
            error_msg = f"ソースファイルが存在しません: {source_path}"
            self.logger.warning(error_msg)
            return None, error_msg

        # 既存ファイルは上書きしない
        if target_path.exists():
            error_msg = f"エクスポート先に同名のファイルが既に存在します: {target_path}"
            self.logger.warning(error_msg)
            return None, error_msg

        try:
            if operation is ExportOperation.COPY:
                # shutil.copy2を使用してメタデータも保持
                shutil.copy2(source_path, target_path)
                message = f"コピーしました: {source_path.name} -> {target_path}"
            else:
                shutil.move(str(source_path), str(target_path))
                message = f"移動しました: {source_path.name} -> {target_path}"
        except OSError as e:
            verb = "コピー" if operation is ExportOperation.COPY else "移動"
            error_msg = f"{verb}に失敗しました: {source_path.name} ({e})"
            self.logger.error(error_msg)
            return None, error_msg

        self.logger.debug(message)
        return message, None
