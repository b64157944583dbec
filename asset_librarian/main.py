"""
Asset Librarian - Main Entry Point

Builds the library services and exposes the operations on the command line.

Usage:
    python -m asset_librarian.main list stockshots
    python -m asset_librarian.main import-stockshot /shots/take.0001.exr --name Take
    python -m asset_librarian.main import-textures        # opens a file dialog
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from PyQt6.QtCore import QCoreApplication
from PyQt6.QtWidgets import QApplication

from .config import Config
from .core.records import ASSET_KINDS, BaseRecord
from .core.sequence_detector import detect_stockshot
from .core.exceptions import AssetLibraryError
from .events.progress import ProgressSink
from .services.catalog import Catalog
from .services.content_store import ContentStore
from .services.dialogs import FilePicker, QtFilePicker
from .services.ingestion import IngestionPipeline
from .services.library_service import LibraryService
from .services.media_tools import MediaTools
from .services.preview_renderer import PreviewRenderer
from .services.thumbnail_generator import ThumbnailGenerator
from .utils.logging_config import LoggingConfig
from .utils.path_utils import normalize_path


def create_library(
    storage_path: Optional[Path] = None,
    file_picker: Optional[FilePicker] = None,
    progress: Optional[ProgressSink] = None,
    tool_settings: Optional[Dict[str, Any]] = None
) -> LibraryService:
    """
    Build one instance of every library service.

    Args:
        storage_path: Storage root (default: configured library path)
        file_picker: Dialog implementation for the import/export pickers
        progress: Progress channel for stockshot imports
        tool_settings: ffmpeg / Blender settings (default: tool_settings.json)

    Returns:
        LibraryService wired to its collaborators
    """
    storage_path = Path(storage_path) if storage_path else Config.load_library_path()
    settings = dict(Config.DEFAULT_TOOL_SETTINGS)
    settings.update(tool_settings if tool_settings is not None else Config.load_tool_settings())

    content_store = ContentStore(storage_path)
    catalog = Catalog(Config.get_catalog_path(storage_path), content_store)

    media_tools = MediaTools(
        ffmpeg_path=settings['ffmpeg_path'],
        ffprobe_path=settings['ffprobe_path'],
        timeout=settings['ffmpeg_timeout']
    )
    renderer = PreviewRenderer(
        blender_path=settings['blender_path'],
        timeout=settings['blender_timeout']
    )
    thumbnails = ThumbnailGenerator(media_tools, renderer)
    pipeline = IngestionPipeline(content_store, catalog, thumbnails, progress)

    return LibraryService(content_store, catalog, pipeline, thumbnails, file_picker)


# ==================== COMMAND LINE ====================

def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseRecord):
        data = value.to_dict()
        data['thumbnail_path'] = value.thumbnail_path
        return data
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _print_json(value: Any):
    print(json.dumps(_jsonable(value), indent=2))


def _exit_code(result: Dict[str, Any]) -> int:
    _print_json(result)
    return 0 if result.get('success') else 1


def cmd_list(service: LibraryService, args: argparse.Namespace) -> int:
    _print_json(service.list_entries(args.kind))
    return 0


def cmd_import_asset(service: LibraryService, args: argparse.Namespace) -> int:
    if args.fbx:
        fbx_path, texture_paths = args.fbx, args.texture
        default_name = Path(fbx_path).stem
    else:
        picked = service.import_asset()
        if not picked['success']:
            return _exit_code(picked)
        fbx_path, texture_paths, default_name = (
            picked['fbx_path'], picked['texture_paths'], picked['default_name']
        )

    result = service.save_asset(fbx_path, texture_paths, args.name or default_name)
    if result['success'] and args.thumbnail:
        service.generate_model_thumbnail(result['asset'].id)
    return _exit_code(result)


def cmd_import_textures(service: LibraryService, args: argparse.Namespace) -> int:
    if args.files:
        paths, default_name = args.files, Path(args.files[0]).stem
    else:
        picked = service.import_textures()
        if not picked['success']:
            return _exit_code(picked)
        paths, default_name = picked['paths'], picked['default_name']

    return _exit_code(service.save_textures(paths, args.name or default_name))


def cmd_import_stockshot(service: LibraryService, args: argparse.Namespace) -> int:
    if args.files:
        try:
            selection = detect_stockshot(args.files)
        except AssetLibraryError as e:
            return _exit_code({'success': False, 'error': str(e)})
        paths, stockshot_type, default_name = selection.files, selection.type, selection.default_name
    else:
        picked = service.import_stockshot()
        if not picked['success']:
            return _exit_code(picked)
        paths, stockshot_type, default_name = picked['paths'], picked['type'], picked['default_name']

    return _exit_code(service.save_stockshot(paths, stockshot_type, args.name or default_name))


def cmd_rename(service: LibraryService, args: argparse.Namespace) -> int:
    return _exit_code(service.rename(args.kind, args.id, args.name))


def cmd_delete(service: LibraryService, args: argparse.Namespace) -> int:
    return _exit_code(service.delete(args.kind, args.id))


def cmd_export(service: LibraryService, args: argparse.Namespace) -> int:
    return _exit_code(service.download(args.kind, args.id, args.output))


def cmd_thumbnail(service: LibraryService, args: argparse.Namespace) -> int:
    return _exit_code(service.regenerate_thumbnail(args.kind, args.id))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='asset-librarian',
        description=f"{Config.APP_NAME} {Config.APP_VERSION}"
    )
    parser.add_argument('--storage', metavar='PATH',
                        help='Storage root (default: configured library path)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    list_parser = subparsers.add_parser('list', help='List entries of one kind')
    list_parser.add_argument('kind', choices=ASSET_KINDS)
    list_parser.set_defaults(func=cmd_list)

    asset_parser = subparsers.add_parser('import-asset', help='Import an FBX model with textures')
    asset_parser.add_argument('fbx', nargs='?', help='FBX file (opens a dialog when omitted)')
    asset_parser.add_argument('--texture', action='append', default=[], metavar='PATH',
                              help='Texture file (repeatable)')
    asset_parser.add_argument('--name', help='Display name (default: FBX file stem)')
    asset_parser.add_argument('--thumbnail', action='store_true',
                              help='Render a preview with Blender after saving')
    asset_parser.set_defaults(func=cmd_import_asset)

    textures_parser = subparsers.add_parser('import-textures', help='Import a texture set')
    textures_parser.add_argument('files', nargs='*', help='Texture files (opens a dialog when omitted)')
    textures_parser.add_argument('--name', help='Display name (default: first file stem)')
    textures_parser.set_defaults(func=cmd_import_textures)

    stockshot_parser = subparsers.add_parser('import-stockshot',
                                             help='Import a video or an image sequence')
    stockshot_parser.add_argument('files', nargs='*',
                                  help='Video, one frame of a sequence, or several frames '
                                       '(opens a dialog when omitted)')
    stockshot_parser.add_argument('--name', help='Display name (default: detected name)')
    stockshot_parser.set_defaults(func=cmd_import_stockshot)

    rename_parser = subparsers.add_parser('rename', help='Rename an entry')
    rename_parser.add_argument('kind', choices=ASSET_KINDS)
    rename_parser.add_argument('id')
    rename_parser.add_argument('name')
    rename_parser.set_defaults(func=cmd_rename)

    delete_parser = subparsers.add_parser('delete', help='Delete an entry and its files')
    delete_parser.add_argument('kind', choices=ASSET_KINDS)
    delete_parser.add_argument('id')
    delete_parser.set_defaults(func=cmd_delete)

    export_parser = subparsers.add_parser('export', help='Export an entry as a zip archive')
    export_parser.add_argument('kind', choices=ASSET_KINDS)
    export_parser.add_argument('id')
    export_parser.add_argument('output', nargs='?', help='Destination .zip (opens a dialog when omitted)')
    export_parser.set_defaults(func=cmd_export)

    thumbnail_parser = subparsers.add_parser('thumbnail', help='Regenerate an entry thumbnail')
    thumbnail_parser.add_argument('kind', choices=ASSET_KINDS)
    thumbnail_parser.add_argument('id')
    thumbnail_parser.set_defaults(func=cmd_thumbnail)

    return parser


def _needs_dialog(args: argparse.Namespace) -> bool:
    if args.command == 'import-asset':
        return not args.fbx
    if args.command in ('import-textures', 'import-stockshot'):
        return not args.files
    if args.command == 'export':
        return not args.output
    return False


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Asset Librarian

    Sets up logging, the Qt application object and the services, then
    runs one command.
    """
    args = build_parser().parse_args(argv)

    storage_path = normalize_path(args.storage) if args.storage else Config.load_library_path()
    try:
        logs_directory = Config.get_logs_directory(storage_path)
    except OSError as e:
        print(f"Could not open storage {storage_path}: {e}", file=sys.stderr)
        return 1
    LoggingConfig.setup_logging(
        logs_directory,
        level=logging.DEBUG if args.verbose else logging.INFO
    )
    logger = LoggingConfig.get_logger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")
    logger.info(f"Storage: {storage_path}")

    # Dialogs need a widget application; everything else runs headless
    if _needs_dialog(args):
        app = QApplication.instance() or QApplication(sys.argv[:1])
        file_picker = QtFilePicker()
    else:
        app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
        file_picker = None
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)

    progress = ProgressSink()
    progress.progress_updated.connect(
        lambda current, total, status: logger.info(f"[{current}/{total}] {status}")
    )

    try:
        service = create_library(storage_path, file_picker, progress)
    except AssetLibraryError as e:
        logger.error(f"Could not open library: {e}")
        return 1

    try:
        return args.func(service, args)
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
