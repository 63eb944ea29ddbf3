"""
Exif情報読み取りモジュール

JPEGファイルとRAWファイルからExif情報を読み取り、表示用に正規化します。
exifreadでExifセグメントをデコードし、7つのフィールド（シャッタースピード、絞り、
ISO感度、焦点距離、撮影日時、カメラ機種、レンズ）のみを扱います。
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import exifread

from .exceptions import ExifReadError, FileOperationError
from .models import ExifData

# exifreadのフィールド型番号
ASCII_FIELD_TYPE = 2
RATIONAL_FIELD_TYPES = (5, 10)  # RATIONAL, SRATIONAL

EXPOSURE_TIME_TAG = 'EXIF ExposureTime'
F_NUMBER_TAG = 'EXIF FNumber'
ISO_TAG = 'EXIF ISOSpeedRatings'
FOCAL_LENGTH_TAG = 'EXIF FocalLength'
DATETIME_TAGS = ('EXIF DateTimeOriginal', 'Image DateTime')
MODEL_TAG = 'Image Model'
LENS_MODEL_TAG = 'EXIF LensModel'


def _display_value(tag: Any) -> Optional[str]:
    """タグの汎用表示文字列（前後の引用符を除去、空の場合はNone）"""
    if tag is None:
        return None
    text = str(tag).strip('"')
    return text if text.strip() else None


def _first_rational(tag: Any) -> Optional[Tuple[int, int]]:
    """
    有理数型タグの最初の値を(分子, 分母)で取得

    Returns:
        (分子, 分母)のタプル（有理数型でない場合はNone）
    """
    if getattr(tag, 'field_type', None) not in RATIONAL_FIELD_TYPES:
        return None

    values = getattr(tag, 'values', None)
    if not values:
        return None

    value = values[0]
    # exifreadのRatioはバージョンによりnum/denまたはnumerator/denominatorを持つ
    num = getattr(value, 'num', None)
    den = getattr(value, 'den', None)
    if num is None or den is None:
        num = getattr(value, 'numerator', None)
        den = getattr(value, 'denominator', None)
    if num is None or den is None:
        return None
    return int(num), int(den)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_shutter_speed(tag: Any) -> Optional[str]:
    """
    露出時間をシャッタースピード表記に変換

    1秒以上は "2.0s"、1秒未満は "1/250" のような単位分数で表記します。
    有理数で格納されていない場合は汎用表示文字列を使います。
    """
    if tag is None:
        return None

    rational = _first_rational(tag)
    if rational is None:
        return _display_value(tag)

    num, den = rational
    if den == 0:
        return None

    speed = num / den
    if speed >= 1.0:
        return f"{speed:.1f}s"
    if num == 0:
        return None
    return f"1/{_round_half_up(den / num)}"


def format_aperture(tag: Any) -> Optional[str]:
    """F値を "f/2.8" 形式に変換"""
    rational = _first_rational(tag)
    if rational is None or rational[1] == 0:
        return None
    num, den = rational
    return f"f/{num / den:.1f}"


def format_iso(tag: Any) -> Optional[str]:
    """ISO感度を取得（複数値の場合は "100, 200" のようにカンマ区切り）"""
    if tag is None:
        return None

    values = getattr(tag, 'values', None)
    if isinstance(values, (list, tuple)) and len(values) > 1:
        return ", ".join(str(value) for value in values)
    return _display_value(tag)


def format_focal_length(tag: Any) -> Optional[str]:
    """焦点距離を "50mm" 形式に変換"""
    rational = _first_rational(tag)
    if rational is None or rational[1] == 0:
        return None
    num, den = rational
    return f"{num / den:.0f}mm"


def format_lens_model(tag: Any) -> Optional[str]:
    """
    レンズ名を取得

    一部のメーカーは '"<lens>","",""' のように空の引用符付き要素を
    続けて書き込むため、最初の空でない要素のみを採用します。
    """
    if tag is None:
        return None

    values = getattr(tag, 'values', None)
    if getattr(tag, 'field_type', None) == ASCII_FIELD_TYPE and isinstance(values, (str, bytes)):
        if isinstance(values, bytes):
            values = values.decode('utf-8', errors='replace')
        parts = [part.strip('\0').strip().strip('"') for part in values.split('\0')]
        parts = [part for part in parts if part]
        return parts[0] if parts else None

    cleaned = str(tag).strip('"').strip()
    lens = cleaned.split(',')[0].strip().strip('"')
    return lens or None


class ExifReader:
    """exifreadを使用したExif情報読み取りクラス"""

    def __init__(self):
        """ExifReaderを初期化"""
        self.logger = logging.getLogger(__name__)

    def read_metadata(self, file_path: Path) -> ExifData:
        """
        ファイルからExif情報を読み取り、表示用に正規化

        Args:
            file_path: 読み取り対象のファイルパス

        Returns:
            正規化されたExif情報（個々のフィールドは取得できない場合None）

        Raises:
            FileOperationError: ファイルを開けない場合
            ExifReadError: Exifセグメントが存在しない、または解析できない場合
        """
        file_path = Path(file_path)
        tags = self._read_tags(file_path)

        exif_data = ExifData(
            shutter_speed=format_shutter_speed(tags.get(EXPOSURE_TIME_TAG)),
            aperture=format_aperture(tags.get(F_NUMBER_TAG)),
            iso=format_iso(tags.get(ISO_TAG)),
            focal_length=format_focal_length(tags.get(FOCAL_LENGTH_TAG)),
            date_time=self._read_datetime(tags),
            model=_display_value(tags.get(MODEL_TAG)),
            lens=format_lens_model(tags.get(LENS_MODEL_TAG)),
        )
        self.logger.debug(f"Exif情報を取得: {file_path.name} -> {exif_data}")
        return exif_data

    def _read_tags(self, file_path: Path) -> Dict[str, Any]:
        """
        exifreadでExifタグを読み取る

        Raises:
            FileOperationError: ファイルを開けない場合
            ExifReadError: Exifの解析に失敗した場合
        """
        try:
            f = open(file_path, 'rb')
        except OSError as e:
            raise FileOperationError(file_path, f"ファイルを開けません ({e})") from e

        with f:
            try:
                tags = exifread.process_file(f, details=False)
            except Exception as e:
                raise ExifReadError(f"Exif読み取りエラー: {file_path} - {e}") from e

        if not tags:
            raise ExifReadError(f"Exif情報が見つかりません: {file_path}")
        return tags

    def _read_datetime(self, tags: Dict[str, Any]) -> Optional[str]:
        """撮影日時を優先順位に従って取得"""
        for tag_name in DATETIME_TAGS:
            value = _display_value(tags.get(tag_name))
            if value:
                return value
        return None
