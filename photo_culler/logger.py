"""
ロギングシステム

Photo Cullerのロギング機能を提供します。
標準出力とファイル出力の両方をサポートし、各操作のサマリーとエラーログを管理します。
"""

import logging
import sys
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .models import BatchResult, PhotoGroup


@dataclass
class LogConfig:
    """ログ設定"""
    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_file: Optional[Path] = None
    verbose: bool = False


class ProgressLogger:
    """操作サマリーとロギングを管理するクラス"""

    def __init__(self, config: LogConfig):
        self.config = config
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """ロガーのセットアップ"""
        logger = logging.getLogger('photo_culler')
        logger.setLevel(logging.DEBUG)

        # 既存のハンドラーをクリア
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        console_formatter = logging.Formatter('%(message)s')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # コンソールハンドラー（標準出力は結果表示に使うため標準エラー出力へ）
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.config.console_level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        # ファイルハンドラー（指定されている場合）
        if self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.config.log_file, encoding='utf-8')
            file_handler.setLevel(self.config.file_level)
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

        return logger

    def log_scan_start(self, source: str):
        """スキャン開始のログ"""
        self.logger.info(f"スキャン開始: {source}")

    def log_scan_complete(self, groups: List[PhotoGroup], processing_time: float):
        """スキャン完了のログ（ステータス別の件数を含む）"""
        counts = Counter(group.status.value for group in groups)
        with_exif = sum(1 for group in groups if group.exif is not None)

        self.logger.info(f"スキャン完了: {len(groups)}個のグループ")
        for status in sorted(counts):
            self.logger.info(f"  - {status}: {counts[status]}個")
        self.logger.info(f"  - Exif取得: {with_exif}個")
        self.logger.info(f"処理時間: {processing_time:.2f}秒")

    def log_trash_start(self, groups_count: int):
        """ゴミ箱移動開始のログ"""
        self.logger.info(f"ゴミ箱への移動開始: {groups_count}個のグループ")

    def log_trash_complete(self, result: BatchResult, processing_time: float):
        """ゴミ箱移動完了のログ"""
        self.logger.info("ゴミ箱への移動完了:")
        self.logger.info(f"  - 成功: {len(result.succeeded)}個")
        self.logger.info(f"  - スキップ: {result.skipped}個")
        self.logger.info(f"  - 失敗: {result.failed}個")
        self.logger.info(f"処理時間: {processing_time:.2f}秒")
        self._log_result_errors(result)

    def log_export_start(self, groups_count: int, mode: str, operation: str, destination: Path):
        """エクスポート開始のログ"""
        self.logger.info(f"エクスポート開始: {groups_count}個のグループ -> {destination}")
        self.logger.info(f"  - 対象: {mode}")
        self.logger.info(f"  - 操作: {operation}")

    def log_export_complete(self, result: BatchResult, processing_time: float):
        """エクスポート完了のログ"""
        self.logger.info("エクスポート完了:")
        self.logger.info(f"  - 成功: {len(result.succeeded)}個")
        self.logger.info(f"  - スキップ: {result.skipped}個")
        self.logger.info(f"  - 失敗: {result.failed}個")
        self.logger.info(f"処理時間: {processing_time:.2f}秒")
        self._log_result_errors(result)

    def _log_result_errors(self, result: BatchResult):
        if result.errors:
            self.logger.info(f"エラー詳細 ({len(result.errors)}件):")
            for file_path, error_msg in result.errors:
                self.logger.error(f"  - {file_path}: {error_msg}")

    def log_error(self, file_path: Path, error_message: str, exception: Optional[Exception] = None):
        """エラーログの詳細記録"""
        error_msg = f"エラー - {file_path}: {error_message}"

        if exception:
            error_msg += f" ({type(exception).__name__}: {str(exception)})"

        self.logger.error(error_msg)

        # 詳細なスタックトレースはファイルログのみに記録
        if exception and self.config.log_file:
            self.logger.debug("スタックトレース:", exc_info=exception)

    def log_warning(self, message: str):
        """警告メッセージのログ"""
        self.logger.warning(f"警告: {message}")

    def log_info(self, message: str):
        """情報メッセージのログ"""
        self.logger.info(message)

    def log_debug(self, message: str):
        """デバッグメッセージのログ"""
        self.logger.debug(message)


def create_default_logger(verbose: bool = False, log_file: Optional[Path] = None) -> ProgressLogger:
    """デフォルトのロガーを作成"""
    config = LogConfig(
        console_level=logging.DEBUG if verbose else logging.INFO,
        file_level=logging.DEBUG,
        log_file=log_file,
        verbose=verbose
    )
    return ProgressLogger(config)


def get_default_log_file() -> Path:
    """デフォルトのログファイルパスを取得"""
    log_dir = Path.home() / '.photo_culler' / 'logs'
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return log_dir / f'photo_culler_{timestamp}.log'
