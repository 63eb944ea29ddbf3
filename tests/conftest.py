"""
テスト共通のフィクスチャ

一時フォルダと、Exif付きの最小限のJPEGファイルを作成するヘルパーを提供します。
"""

import struct
from pathlib import Path
from typing import Optional, Tuple

import pytest


# TIFFフィールド型
ASCII = 2
SHORT = 3
LONG = 4
RATIONAL = 5

# Exifタグ番号
TAG_MODEL = 0x0110
TAG_DATETIME = 0x0132
TAG_EXIF_OFFSET = 0x8769
TAG_EXPOSURE_TIME = 0x829A
TAG_F_NUMBER = 0x829D
TAG_ISO = 0x8827
TAG_DATETIME_ORIGINAL = 0x9003
TAG_FOCAL_LENGTH = 0x920A
TAG_LENS_MODEL = 0xA434


def _ascii(tag: int, text: str):
    payload = text.encode('utf-8') + b'\x00'
    return (tag, ASCII, len(payload), payload)


def _rational(tag: int, value: Tuple[int, int]):
    return (tag, RATIONAL, 1, struct.pack('<II', *value))


def _short(tag: int, value):
    values = value if isinstance(value, (list, tuple)) else (value,)
    return (tag, SHORT, len(values), struct.pack(f'<{len(values)}H', *values))


def _long(tag: int, value: int):
    return (tag, LONG, 1, struct.pack('<I', value))


def _build_ifd(entries, offset: int) -> bytes:
    """リトルエンディアンのIFDを構築（4バイトを超える値はIFDの直後に配置）"""
    entries = sorted(entries, key=lambda entry: entry[0])
    data_offset = offset + 2 + 12 * len(entries) + 4
    head = struct.pack('<H', len(entries))
    data = b''
    for tag, field_type, count, payload in entries:
        if len(payload) <= 4:
            head += struct.pack('<HHI', tag, field_type, count) + payload.ljust(4, b'\x00')
        else:
            head += struct.pack('<HHII', tag, field_type, count, data_offset + len(data))
            data += payload
            if len(data) % 2:
                data += b'\x00'
    head += struct.pack('<I', 0)
    return head + data


def build_exif_jpeg(model: Optional[str] = None,
                    exposure_time: Optional[Tuple[int, int]] = None,
                    f_number: Optional[Tuple[int, int]] = None,
                    iso=None,
                    focal_length: Optional[Tuple[int, int]] = None,
                    datetime_original: Optional[str] = None,
                    image_datetime: Optional[str] = None,
                    lens_model: Optional[str] = None) -> bytes:
    """指定したタグだけを持つExif付きJPEGのバイト列を作成"""
    ifd0_entries = []
    if model is not None:
        ifd0_entries.append(_ascii(TAG_MODEL, model))
    if image_datetime is not None:
        ifd0_entries.append(_ascii(TAG_DATETIME, image_datetime))

    exif_entries = []
    if exposure_time is not None:
        exif_entries.append(_rational(TAG_EXPOSURE_TIME, exposure_time))
    if f_number is not None:
        exif_entries.append(_rational(TAG_F_NUMBER, f_number))
    if iso is not None:
        exif_entries.append(_short(TAG_ISO, iso))
    if datetime_original is not None:
        exif_entries.append(_ascii(TAG_DATETIME_ORIGINAL, datetime_original))
    if focal_length is not None:
        exif_entries.append(_rational(TAG_FOCAL_LENGTH, focal_length))
    if lens_model is not None:
        exif_entries.append(_ascii(TAG_LENS_MODEL, lens_model))

    if exif_entries:
        # ポインタの値はIFD0の長さに影響しないため、仮の値で長さを求めてから再構築する
        provisional = _build_ifd(ifd0_entries + [_long(TAG_EXIF_OFFSET, 0)], 8)
        exif_offset = 8 + len(provisional)
        ifd0 = _build_ifd(ifd0_entries + [_long(TAG_EXIF_OFFSET, exif_offset)], 8)
        exif_ifd = _build_ifd(exif_entries, exif_offset)
    else:
        ifd0 = _build_ifd(ifd0_entries, 8)
        exif_ifd = b''

    tiff = b'II*\x00' + struct.pack('<I', 8) + ifd0 + exif_ifd
    app1 = b'Exif\x00\x00' + tiff
    return (
        b'\xff\xd8'
        + b'\xff\xe1' + struct.pack('>H', len(app1) + 2) + app1
        + b'\xff\xd9'
    )


def make_file(path: Path, content: bytes = b"dummy content") -> Path:
    """ファイルを作成（親フォルダも作成）"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def exif_jpeg_bytes():
    """Exif付きJPEGのバイト列を作成するファクトリー"""
    return build_exif_jpeg


@pytest.fixture
def write_file():
    """ファイルを作成するファクトリー"""
    return make_file


@pytest.fixture
def src(tmp_path: Path) -> Path:
    """空のスキャン対象フォルダ"""
    d = tmp_path / "source"
    d.mkdir()
    return d


@pytest.fixture
def dest(tmp_path: Path) -> Path:
    """空のエクスポート先フォルダ"""
    d = tmp_path / "dest"
    d.mkdir()
    return d


@pytest.fixture
def sample_exif_jpeg() -> bytes:
    """一般的な撮影設定のExifを持つJPEG"""
    return build_exif_jpeg(
        model="ILCE-7M4",
        exposure_time=(1, 250),
        f_number=(28, 10),
        iso=400,
        focal_length=(500, 10),
        datetime_original="2024:03:15 10:30:00",
        lens_model="FE 50mm F1.8",
    )
