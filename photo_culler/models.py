"""
データモデル定義

Photo Cullerで使用するデータクラスと列挙型を定義します。
UIシェルとの境界ではcamelCaseキーの辞書（JSON互換）に変換します。
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .exceptions import ValidationError


class GroupStatus(str, Enum):
    """グループの完全性ステータス"""
    UNMARKED = 'UNMARKED'  # 確定前のプレースホルダー
    COMPLETE = 'COMPLETE'
    JPG_ONLY = 'JPG_ONLY'
    RAW_ONLY = 'RAW_ONLY'

    @classmethod
    def derive(cls, has_jpg: bool, has_raw: bool) -> Optional['GroupStatus']:
        """
        メンバーの有無からステータスを導出

        Args:
            has_jpg: JPEGメンバーが存在する場合True
            has_raw: RAWメンバーが存在する場合True

        Returns:
            ステータス（両方とも存在しない場合はNone）
        """
        if has_jpg and has_raw:
            return cls.COMPLETE
        if has_jpg:
            return cls.JPG_ONLY
        if has_raw:
            return cls.RAW_ONLY
        return None


class _ParsableEnum(str, Enum):
    """文字列から大文字小文字を区別せずに変換できる列挙型"""

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            choices = ', '.join(member.value for member in cls)
            raise ValidationError(
                f"不明な値です: {value} (指定可能な値: {choices})"
            ) from None


class ExportMode(_ParsableEnum):
    """エクスポート対象の選択"""
    JPG = 'JPG'
    RAW = 'RAW'
    BOTH = 'BOTH'


class ExportOperation(_ParsableEnum):
    """エクスポート時のファイル操作"""
    COPY = 'COPY'
    MOVE = 'MOVE'


@dataclass(frozen=True)
class PhotoFileInfo:
    """グループを構成する個々のファイルの情報"""
    name: str
    extension: str  # ドットなし、大文字
    path: Path
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'extension': self.extension,
            'path': str(self.path),
            'size': self.size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PhotoFileInfo':
        path = Path(data['path'])
        return cls(
            name=data.get('name') or path.name,
            extension=(data.get('extension') or path.suffix.lstrip('.')).upper(),
            path=path,
            size=int(data.get('size') or 0),
        )


# フィールド名と境界でのキー名の対応
_EXIF_KEYS = (
    ('shutter_speed', 'shutterSpeed'),
    ('aperture', 'aperture'),
    ('iso', 'iso'),
    ('focal_length', 'focalLength'),
    ('date_time', 'dateTime'),
    ('model', 'model'),
    ('lens', 'lens'),
)


@dataclass(frozen=True)
class ExifData:
    """表示用に正規化されたExif情報"""
    shutter_speed: Optional[str] = None
    aperture: Optional[str] = None
    iso: Optional[str] = None
    focal_length: Optional[str] = None
    date_time: Optional[str] = None
    model: Optional[str] = None
    lens: Optional[str] = None

    def is_empty(self) -> bool:
        """すべてのフィールドが未設定の場合True"""
        return all(getattr(self, attr) is None for attr, _ in _EXIF_KEYS)

    def to_dict(self) -> Dict[str, str]:
        return {
            key: getattr(self, attr)
            for attr, key in _EXIF_KEYS
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExifData':
        return cls(**{attr: data.get(key) for attr, key in _EXIF_KEYS})


@dataclass
class PhotoGroup:
    """ベース名を共有するJPEG/RAWファイルのグループ"""
    id: str  # 拡張子を除いたファイル名（大文字小文字はそのまま）
    jpg: Optional[PhotoFileInfo] = None
    raw: Optional[PhotoFileInfo] = None
    status: GroupStatus = GroupStatus.UNMARKED
    exif: Optional[ExifData] = None

    def member_files(self) -> List[PhotoFileInfo]:
        """存在するメンバーファイル（JPEG、RAWの順）"""
        return [member for member in (self.jpg, self.raw) if member is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'jpg': self.jpg.to_dict() if self.jpg else None,
            'raw': self.raw.to_dict() if self.raw else None,
            'status': self.status.value,
            'exif': self.exif.to_dict() if self.exif else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PhotoGroup':
        jpg = data.get('jpg')
        raw = data.get('raw')
        exif = data.get('exif')
        status = data.get('status') or GroupStatus.UNMARKED.value
        try:
            status = GroupStatus(status)
        except ValueError:
            raise ValidationError(f"不明なグループステータスです: {status}") from None
        return cls(
            id=data['id'],
            jpg=PhotoFileInfo.from_dict(jpg) if jpg else None,
            raw=PhotoFileInfo.from_dict(raw) if raw else None,
            status=status,
            exif=ExifData.from_dict(exif) if exif else None,
        )


@dataclass
class BatchResult:
    """一括ファイル操作の結果"""
    succeeded: List[str] = field(default_factory=list)  # 処理済みパスまたは結果メッセージ
    errors: List[Tuple[Path, str]] = field(default_factory=list)  # (file_path, error_message)
    skipped: int = 0

    @property
    def failed(self) -> int:
        return len(self.errors)

    def error_messages(self) -> List[str]:
        return [message for _, message in self.errors]
