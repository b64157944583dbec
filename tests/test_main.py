"""Tests for the composition root and command line."""

import json
import logging

import pytest

from asset_librarian.config import Config
from asset_librarian.main import build_parser, create_library, main
from asset_librarian.services.library_service import LibraryService

from tests.helpers import write_bytes, write_image


@pytest.fixture(autouse=True)
def isolated_app(tmp_path, monkeypatch):
    """Keep settings in tmp_path and drop the handlers main() installs"""
    monkeypatch.setattr(Config, 'get_user_data_dir', classmethod(lambda cls: tmp_path / 'user'))
    yield
    logger = logging.getLogger('asset_librarian')
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestBuildParser:
    """Tests for argument parsing."""

    def test_list_command(self):
        args = build_parser().parse_args(['list', 'textures'])

        assert args.command == 'list'
        assert args.kind == 'textures'

    def test_import_asset_textures(self):
        args = build_parser().parse_args(
            ['import-asset', 'chair.fbx', '--texture', 'a.png', '--texture', 'b.png', '--name', 'Chair']
        )

        assert args.fbx == 'chair.fbx'
        assert args.texture == ['a.png', 'b.png']
        assert args.name == 'Chair'

    def test_unknown_kind_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['delete', 'movies', 'some-id'])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCreateLibrary:
    """Tests for service wiring."""

    def test_builds_service_on_storage(self, storage):
        service = create_library(storage, tool_settings={'ffmpeg_path': '/opt/ffmpeg/ffmpeg'})
        try:
            assert isinstance(service, LibraryService)
            assert service.get_textures() == []
            assert Config.get_catalog_path(storage).exists()
        finally:
            service.close()


class TestMain:
    """Tests for running commands end to end."""

    def test_import_then_list(self, storage, sources, capsys):
        frames = [write_image(sources / f'fire.{i}.png', 8, 8) for i in (1, 2, 10)]

        code = main(['--storage', str(storage), 'import-stockshot', str(frames[1])])
        imported = json.loads(capsys.readouterr().out)

        assert code == 0
        assert imported['stockshot']['files'] == ['fire.1.png', 'fire.2.png', 'fire.10.png']
        assert imported['stockshot']['name'] == 'fire'

        assert main(['--storage', str(storage), 'list', 'stockshots']) == 0
        listed = json.loads(capsys.readouterr().out)
        assert [entry['id'] for entry in listed] == [imported['stockshot']['id']]
        assert listed[0]['thumbnail_path'].endswith('thumbnail.png')

    def test_failed_command_exit_code(self, storage, capsys):
        code = main(['--storage', str(storage), 'delete', 'assets', '00000000-0000-0000-0000-000000000000'])

        assert code == 1
        assert json.loads(capsys.readouterr().out)['success'] is False

    def test_storage_that_cannot_be_created(self, tmp_path, capsys):
        blocker = write_bytes(tmp_path / 'blocker', b'a file, not a folder')

        code = main(['--storage', str(blocker / 'library'), 'list', 'textures'])

        assert code == 1
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'Could not open storage' in captured.err

    def test_import_textures_with_name(self, storage, sources, capsys):
        texture = write_bytes(sources / 'rough.exr')

        main(['--storage', str(storage), 'import-textures', str(texture), '--name', 'Rough'])

        assert json.loads(capsys.readouterr().out)['texture']['name'] == 'Rough'
