"""
コマンドラインインターフェース

Photo Cullerのメインエントリーポイントです。
argparseのサブコマンド機能を使用して、exif、scan、scan-files、trash、exportコマンドを提供します。
"""

import argparse
import json
import sys
from typing import List, Optional

from .cull_manager import CullManager
from .exceptions import BatchOperationError, NothingExportedError, ProcessingError, ValidationError
from .logger import get_default_log_file
from .models import ExifData, ExportMode, ExportOperation, GroupStatus, PhotoGroup

STATUS_CHOICES = [GroupStatus.COMPLETE.value, GroupStatus.JPG_ONLY.value, GroupStatus.RAW_ONLY.value]


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='詳細ログを表示し、ログファイルにも記録'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='結果をJSON形式で出力'
    )


def _add_group_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'source',
        type=str,
        nargs='?',
        help='対象のフォルダパス（--groups-json指定時は省略可）'
    )
    parser.add_argument(
        '--groups-json', '-g',
        type=str,
        help='scanコマンドの--json出力を読み込む（"-"で標準入力）'
    )
    parser.add_argument(
        '--status', '-s',
        nargs='+',
        choices=STATUS_CHOICES,
        help='指定したステータスのグループのみを対象にする'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    コマンドライン引数パーサーを作成

    Returns:
        設定済みのArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='photo-culler',
        description='JPEGとRAWのペアをまとめて選別・整理するツール',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  # フォルダ内のJPEG/RAWをグループ化して表示
  photo-culler scan /path/to/photos

  # RAWのみのグループをゴミ箱へ移動
  photo-culler trash /path/to/photos --status RAW_ONLY

  # JPEGとRAWの両方を別フォルダへコピー
  photo-culler export /path/to/photos --destination /path/to/selected --mode BOTH --operation COPY

詳細については各サブコマンドのヘルプを参照してください:
  photo-culler <command> --help
        """
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='利用可能なコマンド',
        metavar='<command>'
    )

    # exifコマンド（エイリアス: e）
    exif_parser = subparsers.add_parser(
        'exif',
        aliases=['e'],
        help='単一ファイルのExif情報を表示',
        description='指定されたファイルのExif情報（シャッタースピード、絞り、ISO感度など）を表示します。'
    )
    exif_parser.add_argument('file', type=str, help='画像ファイルのパス')
    _add_common_arguments(exif_parser)

    # scanコマンド（エイリアス: s）
    scan_parser = subparsers.add_parser(
        'scan',
        aliases=['s'],
        help='フォルダ内のファイルをグループ化して表示',
        description='指定されたフォルダ直下のJPEG/RAWファイルをベース名でグループ化します。'
    )
    scan_parser.add_argument('folder', type=str, help='スキャンするフォルダのパス')
    _add_common_arguments(scan_parser)

    # scan-filesコマンド（エイリアス: f）
    files_parser = subparsers.add_parser(
        'scan-files',
        aliases=['f'],
        help='指定したファイルをグループ化して表示',
        description='指定されたファイルをベース名でグループ化します。存在しないファイルは無視されます。'
    )
    files_parser.add_argument('files', type=str, nargs='+', help='画像ファイルのパス')
    _add_common_arguments(files_parser)

    # trashコマンド（エイリアス: t）
    trash_parser = subparsers.add_parser(
        'trash',
        aliases=['t'],
        help='グループのファイルをゴミ箱へ移動',
        description='対象グループのJPEGファイルとRAWファイルをゴミ箱へ移動します。',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  # JPEGのみのグループをゴミ箱へ移動
  photo-culler trash /path/to/photos --status JPG_ONLY

  # 事前に保存したグループ一覧を使用
  photo-culler scan /path/to/photos --json > groups.json
  photo-culler trash --groups-json groups.json
        """
    )
    _add_group_source_arguments(trash_parser)
    _add_common_arguments(trash_parser)

    # exportコマンド（エイリアス: x）
    export_parser = subparsers.add_parser(
        'export',
        aliases=['x'],
        help='グループのファイルを別フォルダへコピーまたは移動',
        description='対象グループのファイルをエクスポート先へコピーまたは移動します。既存ファイルは上書きしません。'
    )
    _add_group_source_arguments(export_parser)
    export_parser.add_argument(
        '--destination', '-d',
        type=str,
        required=True,
        help='エクスポート先のフォルダパス'
    )
    export_parser.add_argument(
        '--mode', '-m',
        choices=[mode.value for mode in ExportMode],
        default=ExportMode.BOTH.value,
        help='エクスポート対象（デフォルト: BOTH）'
    )
    export_parser.add_argument(
        '--operation', '-o',
        choices=[operation.value for operation in ExportOperation],
        default=ExportOperation.COPY.value,
        help='ファイル操作（デフォルト: COPY）'
    )
    _add_common_arguments(export_parser)

    return parser


def _create_manager(args) -> CullManager:
    log_file = get_default_log_file() if args.verbose else None
    return CullManager(verbose=args.verbose, log_file=log_file)


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _format_exif(exif: Optional[ExifData]) -> str:
    if exif is None or exif.is_empty():
        return "Exifなし"
    parts = [exif.shutter_speed, exif.aperture, f"ISO {exif.iso}" if exif.iso else None,
             exif.focal_length, exif.model, exif.lens, exif.date_time]
    return " | ".join(part for part in parts if part)


def _print_groups(groups: List[PhotoGroup]) -> None:
    for group in groups:
        members = ", ".join(member.name for member in group.member_files())
        print(f"{group.id:<30} {group.status.value:<9} {members}")
        print(f"{'':<30} {_format_exif(group.exif)}")
    print(f"合計: {len(groups)}個のグループ")


def _load_groups(args, manager: CullManager) -> List[PhotoGroup]:
    """
    コマンドの対象グループを取得

    Raises:
        ValidationError: 対象の指定が不正な場合
    """
    if args.groups_json:
        try:
            if args.groups_json == '-':
                data = json.load(sys.stdin)
            else:
                with open(args.groups_json, encoding='utf-8') as f:
                    data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"グループ一覧を読み込めません: {args.groups_json} ({e})") from e
        try:
            groups = [PhotoGroup.from_dict(item) for item in data]
        except (AttributeError, KeyError, TypeError) as e:
            raise ValidationError(f"グループ一覧の形式が不正です: {args.groups_json} ({e})") from e
    elif args.source:
        groups = manager.scan_directory(args.source)
    else:
        raise ValidationError("フォルダパスまたは--groups-jsonを指定してください")

    if args.status:
        groups = [group for group in groups if group.status.value in args.status]
    return groups


def handle_exif_command(args) -> int:
    """exifコマンドを処理"""
    manager = _create_manager(args)
    exif = manager.read_metadata(args.file)

    if args.json:
        _print_json(exif.to_dict())
    else:
        labels = (
            ('シャッタースピード', exif.shutter_speed),
            ('絞り', exif.aperture),
            ('ISO感度', exif.iso),
            ('焦点距離', exif.focal_length),
            ('撮影日時', exif.date_time),
            ('カメラ', exif.model),
            ('レンズ', exif.lens),
        )
        for label, value in labels:
            print(f"{label}: {value if value is not None else '-'}")
    return 0


def handle_scan_command(args) -> int:
    """scan / scan-filesコマンドを処理"""
    manager = _create_manager(args)
    if args.command in ['scan', 's']:
        groups = manager.scan_directory(args.folder)
    else:
        groups = manager.scan_files(args.files)

    if args.json:
        _print_json([group.to_dict() for group in groups])
    else:
        _print_groups(groups)
    return 0


def handle_trash_command(args) -> int:
    """trashコマンドを処理"""
    manager = _create_manager(args)
    groups = _load_groups(args, manager)
    moved = manager.trash_groups(groups)

    if args.json:
        _print_json(moved)
    else:
        for path in moved:
            print(f"🗑️  {path}")
        print(f"{len(moved)}個のファイルをゴミ箱へ移動しました")
    return 0


def handle_export_command(args) -> int:
    """exportコマンドを処理"""
    manager = _create_manager(args)
    groups = _load_groups(args, manager)
    messages = manager.export_groups(groups, args.mode, args.operation, args.destination)

    if args.json:
        _print_json(messages)
    else:
        for message in messages:
            print(message)
    return 0


HANDLERS = {
    'exif': handle_exif_command,
    'e': handle_exif_command,
    'scan': handle_scan_command,
    's': handle_scan_command,
    'scan-files': handle_scan_command,
    'f': handle_scan_command,
    'trash': handle_trash_command,
    't': handle_trash_command,
    'export': handle_export_command,
    'x': handle_export_command,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        終了コード（0: 成功、1: エラー）
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # コマンドが指定されていない場合はヘルプを表示
    if not args.command:
        parser.print_help()
        return 0

    try:
        return HANDLERS[args.command](args)
    except ValidationError as e:
        print(f"❌ 入力エラー: {e}", file=sys.stderr)
        return 1
    except NothingExportedError as e:
        print(f"⚠️  {e}", file=sys.stderr)
        return 1
    except BatchOperationError as e:
        print(f"❌ 一部のファイルで失敗しました:\n{e}", file=sys.stderr)
        return 1
    except ProcessingError as e:
        print(f"❌ 処理エラー: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ 予期しないエラー: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
