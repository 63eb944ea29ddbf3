"""
ExifReaderのプロパティベーステスト

有理数・ASCIIで格納されたExif値の表示用フォーマットと、
実際のJPEGファイルからの読み取りを検証します。
"""

from dataclasses import dataclass, field
from typing import Any, List

import pytest
from hypothesis import given, strategies as st
from hypothesis import settings

from photo_culler.exceptions import ExifReadError, FileOperationError
from photo_culler.exif_reader import (
    ExifReader,
    format_aperture,
    format_focal_length,
    format_iso,
    format_lens_model,
    format_shutter_speed,
)
from photo_culler.models import ExifData


@dataclass
class FakeRatio:
    """exifreadのRatio相当（分母0も表現できる）"""
    num: int
    den: int


@dataclass
class FakeTag:
    """exifreadのIfdTag相当"""
    printable: str
    field_type: int = 2
    values: Any = field(default_factory=list)

    def __str__(self):
        return self.printable


def rational_tag(num: int, den: int) -> FakeTag:
    return FakeTag(printable=f"{num}/{den}", field_type=5, values=[FakeRatio(num, den)])


class TestShutterSpeed:
    """シャッタースピードのフォーマット"""

    def test_long_exposure(self):
        assert format_shutter_speed(rational_tag(2, 1)) == "2.0s"

    def test_fraction(self):
        assert format_shutter_speed(rational_tag(1, 250)) == "1/250"

    def test_unreduced_fraction(self):
        assert format_shutter_speed(rational_tag(10, 2500)) == "1/250"

    def test_exactly_one_second(self):
        assert format_shutter_speed(rational_tag(1, 1)) == "1.0s"

    def test_reciprocal_rounds_half_up(self):
        # 2/5秒 -> 1/2.5 -> 1/3
        assert format_shutter_speed(rational_tag(2, 5)) == "1/3"

    def test_zero_denominator_is_unset(self):
        assert format_shutter_speed(rational_tag(1, 0)) is None

    def test_zero_numerator_is_unset(self):
        assert format_shutter_speed(rational_tag(0, 100)) is None

    def test_non_rational_falls_back_to_display_value(self):
        tag = FakeTag(printable='"1/60"', field_type=2, values='1/60')
        assert format_shutter_speed(tag) == "1/60"

    def test_missing_tag(self):
        assert format_shutter_speed(None) is None

    @settings(max_examples=200)
    @given(
        num=st.integers(min_value=1, max_value=100_000),
        den=st.integers(min_value=1, max_value=100_000),
    )
    def test_shutter_speed_shape_property(self, num, den):
        """
        1秒以上は秒表記、1秒未満は単位分数表記になる
        """
        result = format_shutter_speed(rational_tag(num, den))

        if num / den >= 1.0:
            assert result == f"{num / den:.1f}s"
        else:
            assert result.startswith("1/")
            assert int(result[2:]) >= 1


class TestApertureAndFocalLength:
    """絞りと焦点距離のフォーマット"""

    def test_aperture(self):
        assert format_aperture(rational_tag(28, 10)) == "f/2.8"
        assert format_aperture(rational_tag(8, 1)) == "f/8.0"

    def test_focal_length(self):
        assert format_focal_length(rational_tag(500, 10)) == "50mm"
        assert format_focal_length(rational_tag(35, 1)) == "35mm"

    def test_zero_denominator_is_unset(self):
        assert format_aperture(rational_tag(28, 0)) is None
        assert format_focal_length(rational_tag(500, 0)) is None

    def test_non_rational_is_unset(self):
        tag = FakeTag(printable="2.8", field_type=2, values="2.8")
        assert format_aperture(tag) is None
        assert format_focal_length(tag) is None

    @settings(max_examples=100)
    @given(
        num=st.integers(min_value=0, max_value=10_000),
        den=st.integers(min_value=1, max_value=1_000),
    )
    def test_format_prefix_and_suffix_property(self, num, den):
        """絞りは "f/"、焦点距離は "mm" の形式を保つ"""
        assert format_aperture(rational_tag(num, den)).startswith("f/")
        assert format_focal_length(rational_tag(num, den)).endswith("mm")


class TestIso:
    """ISO感度の取得"""

    def test_single_value(self):
        assert format_iso(FakeTag(printable="400", field_type=3, values=[400])) == "400"

    def test_multiple_values_are_comma_separated(self):
        tag = FakeTag(printable="[100, 200]", field_type=3, values=[100, 200])
        assert format_iso(tag) == "100, 200"

    def test_missing_tag(self):
        assert format_iso(None) is None


class TestLensModel:
    """レンズ名の取得"""

    def test_ascii_value(self):
        tag = FakeTag(printable="FE 24-70mm F2.8 GM", values="FE 24-70mm F2.8 GM")
        assert format_lens_model(tag) == "FE 24-70mm F2.8 GM"

    def test_ascii_value_with_null_separated_entries(self):
        tag = FakeTag(printable="", values='\x00 "RF50mm F1.8 STM"\x00\x00')
        assert format_lens_model(tag) == "RF50mm F1.8 STM"

    def test_ascii_value_blank(self):
        tag = FakeTag(printable="", values="\x00  \x00")
        assert format_lens_model(tag) is None

    def test_non_ascii_value_with_trailing_empty_quotes(self):
        tag = FakeTag(printable='"XF35mmF1.4 R","",""', field_type=7, values=[])
        assert format_lens_model(tag) == "XF35mmF1.4 R"

    @settings(max_examples=100)
    @given(
        lens=st.text(
            alphabet=st.characters(whitelist_categories=('Lu', 'Ll', 'Nd'), max_codepoint=126),
            min_size=1,
            max_size=30
        ),
        trailing=st.integers(min_value=0, max_value=4),
    )
    def test_trailing_empty_entries_are_ignored_property(self, lens, trailing):
        """メーカーが付加する空の要素は無視され、最初のレンズ名のみが残る"""
        printable = '"' + lens + '"' + ',""' * trailing
        tag = FakeTag(printable=printable, field_type=7, values=[])
        assert format_lens_model(tag) == lens


class TestExifReaderFiles:
    """実際のファイルからの読み取り"""

    def setup_method(self):
        self.exif_reader = ExifReader()

    def test_reads_all_fields(self, src, sample_exif_jpeg):
        jpeg = src / "IMG_0001.JPG"
        jpeg.write_bytes(sample_exif_jpeg)

        exif = self.exif_reader.read_metadata(jpeg)

        assert exif == ExifData(
            shutter_speed="1/250",
            aperture="f/2.8",
            iso="400",
            focal_length="50mm",
            date_time="2024:03:15 10:30:00",
            model="ILCE-7M4",
            lens="FE 50mm F1.8",
        )

    def test_long_exposure_from_file(self, src, exif_jpeg_bytes):
        jpeg = src / "night.jpg"
        jpeg.write_bytes(exif_jpeg_bytes(exposure_time=(2, 1)))

        assert self.exif_reader.read_metadata(jpeg).shutter_speed == "2.0s"

    def test_missing_fields_are_unset(self, src, exif_jpeg_bytes):
        jpeg = src / "partial.jpg"
        jpeg.write_bytes(exif_jpeg_bytes(model="X100V"))

        exif = self.exif_reader.read_metadata(jpeg)

        assert exif.model == "X100V"
        assert exif.shutter_speed is None
        assert exif.aperture is None
        assert exif.iso is None
        assert exif.lens is None

    def test_multi_valued_iso_from_file(self, src, exif_jpeg_bytes):
        jpeg = src / "iso.jpg"
        jpeg.write_bytes(exif_jpeg_bytes(model="EOS R5", iso=(100, 200)))

        assert self.exif_reader.read_metadata(jpeg).iso == "100, 200"

    def test_falls_back_to_image_datetime(self, src, exif_jpeg_bytes):
        jpeg = src / "dt.jpg"
        jpeg.write_bytes(exif_jpeg_bytes(model="D850", image_datetime="2023:07:04 08:15:30"))

        assert self.exif_reader.read_metadata(jpeg).date_time == "2023:07:04 08:15:30"

    def test_file_without_exif_raises_decode_error(self, src):
        jpeg = src / "no_exif.jpg"
        jpeg.write_bytes(b"fake jpeg data without exif")

        with pytest.raises(ExifReadError):
            self.exif_reader.read_metadata(jpeg)

    def test_missing_file_raises_io_error(self, src):
        with pytest.raises(FileOperationError) as exc_info:
            self.exif_reader.read_metadata(src / "missing.jpg")
        assert exc_info.value.path == src / "missing.jpg"
