#!/usr/bin/env python3
"""
Photo Culler - 基本的な使用例

このスクリプトは、Photo Cullerの基本的な使用方法を示します。
プログラムから直接CullManagerの機能を呼び出す例を提供します。
"""

from pathlib import Path

from photo_culler import CullManager, GroupStatus
from photo_culler.exceptions import BatchOperationError, NothingExportedError, ProcessingError


def example_scan_and_export():
    """スキャンしてペアの揃ったグループをエクスポートする例"""
    print("=" * 60)
    print("Photo Culler - スキャンとエクスポート")
    print("=" * 60)

    # 例用のディレクトリパス（実際の使用時は適切なパスに変更してください）
    photo_directory = Path("~/Photos/2024/Shoot").expanduser()
    selected_directory = Path("~/Photos/2024/Selected").expanduser()

    print(f"撮影フォルダ: {photo_directory}")
    print(f"エクスポート先: {selected_directory}")
    print()

    if not photo_directory.exists():
        print(f"⚠️  撮影フォルダが存在しません: {photo_directory}")
        print("実際のディレクトリパスに変更してください。")
        return

    with CullManager(verbose=True) as manager:
        try:
            # ステップ1: グループ化
            print("ステップ1: JPEG/RAWのグループ化")
            print("-" * 40)
            groups = manager.scan_directory(str(photo_directory))
            for group in groups:
                print(f"  {group.id}: {group.status.value}")
            print()

            # ステップ2: ペアの揃ったグループをコピー
            print("ステップ2: COMPLETEのグループをエクスポート")
            print("-" * 40)
            selected_directory.mkdir(parents=True, exist_ok=True)
            complete = [g for g in groups if g.status is GroupStatus.COMPLETE]
            for message in manager.export_groups(complete, "BOTH", "COPY", str(selected_directory)):
                print(f"  {message}")

            print()
            print("✅ 処理が完了しました！")

        except NothingExportedError as e:
            print(f"⚠️  {e}")
        except BatchOperationError as e:
            print(f"❌ 一部のファイルで失敗しました:\n{e}")
        except ProcessingError as e:
            print(f"❌ エラーが発生しました: {e}")


def example_trash_orphans():
    """RAWのみのグループをゴミ箱へ移動する例"""
    print("=" * 60)
    print("Photo Culler - 対応するJPEGのないRAWの整理")
    print("=" * 60)

    photo_directory = Path("~/Photos/2024/Shoot").expanduser()
    if not photo_directory.exists():
        print(f"⚠️  撮影フォルダが存在しません: {photo_directory}")
        return

    with CullManager() as manager:
        try:
            # バックグラウンドでスキャン
            groups = manager.submit('scan_directory', str(photo_directory)).result()
            raw_only = [g for g in groups if g.status is GroupStatus.RAW_ONLY]
            print(f"RAWのみのグループ: {len(raw_only)}個")

            if raw_only and input("ゴミ箱へ移動しますか？ (y/N): ").lower() == 'y':
                trashed = manager.trash_groups(raw_only)
                print(f"✅ {len(trashed)}個のファイルをゴミ箱へ移動しました")

        except ProcessingError as e:
            print(f"❌ エラーが発生しました: {e}")


def main():
    """メイン関数 - 使用例を選択して実行"""
    print("Photo Culler - 使用例スクリプト")
    print()
    print("実行する例を選択してください:")
    print("1. スキャンとエクスポート")
    print("2. RAWのみのグループをゴミ箱へ移動")
    print("0. 終了")
    print()

    try:
        choice = input("選択 (0-2): ").strip()
        if choice == '1':
            example_scan_and_export()
        elif choice == '2':
            example_trash_orphans()
        elif choice != '0':
            print("無効な選択です。0-2の数字を入力してください。")
    except KeyboardInterrupt:
        print("\n\n処理が中断されました。")


if __name__ == '__main__':
    main()
