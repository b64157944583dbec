"""Tests for LibraryService."""

import base64
import zipfile
from pathlib import Path

import pytest

from asset_librarian.config import Config
from asset_librarian.core.exceptions import ExternalToolError, StorageError
from asset_librarian.core.records import KIND_ASSETS, KIND_STOCKSHOTS, KIND_TEXTURES
from asset_librarian.services.library_service import LibraryService

from tests.helpers import write_bytes, write_image


def record_signal(signal):
    calls = []
    signal.connect(lambda *args: calls.append(args))
    return calls


@pytest.fixture
def texture_set(service, sources):
    files = [write_bytes(sources / 'normal.exr'), write_image(sources / 'albedo.png', 256, 256)]
    result = service.save_textures(files, 'Bricks')
    assert result['success']
    return result['texture']


@pytest.fixture
def sequence(service, sources):
    frames = [write_image(sources / f'smoke.{i:03d}.png', 16, 16) for i in range(25)]
    result = service.save_stockshot(frames, 'sequence', 'Smoke')
    assert result['success']
    return result['stockshot']


@pytest.fixture
def model(service, sources):
    fbx = write_bytes(sources / 'chair.fbx', b'model')
    textures = [write_bytes(sources / 'a.tga'), write_image(sources / 'b.jpg', fmt='JPEG')]
    result = service.save_asset(fbx, textures, 'Chair')
    assert result['success']
    return result['asset']


class TestListing:
    """Tests for listing entries."""

    def test_lists_resolve_thumbnails(self, service, texture_set, content_store):
        records = service.get_textures()

        assert [r.id for r in records] == [texture_set.id]
        assert records[0].thumbnail_path == str(content_store.thumbnail_path(KIND_TEXTURES, texture_set.id))

    def test_missing_thumbnail_is_none(self, service, model):
        assert service.get_assets()[0].thumbnail_path is None

    def test_empty_kinds(self, service):
        assert service.get_stockshots() == []

    def test_unknown_kind(self, service):
        errors = record_signal(service.operation_error)

        assert service.list_entries('movies') == []
        assert len(errors) == 1


class TestImportDialogs:
    """Tests for the picker-driven import steps."""

    def test_canceled_dialog(self, service):
        errors = record_signal(service.operation_error)

        assert service.import_stockshot() == {'success': False, 'canceled': True}
        assert service.import_textures() == {'success': False, 'canceled': True}
        assert service.import_asset() == {'success': False, 'canceled': True}
        assert errors == []

    def test_asset_textures_are_optional(self, service, picker):
        picker.open_responses = [['/models/chair.fbx'], None]

        result = service.import_asset()

        assert result == {
            'success': True,
            'fbx_path': '/models/chair.fbx',
            'texture_paths': [],
            'default_name': 'chair',
        }
        assert picker.open_calls[1][2] is True

    def test_stockshot_single_frame_expands(self, service, picker, sources):
        for i in range(1, 4):
            write_bytes(sources / f'take.{i:04d}.exr')
        picker.open_responses = [[str(sources / 'take.0003.exr')]]

        result = service.import_stockshot()

        assert result['success'] is True
        assert result['type'] == 'sequence'
        assert [Path(p).name for p in result['paths']] == ['take.0001.exr', 'take.0002.exr', 'take.0003.exr']
        assert result['default_name'] == 'take'

    def test_stockshot_video(self, service, picker):
        picker.open_responses = [['/clips/Explosion.mp4']]

        result = service.import_stockshot()

        assert result['type'] == 'video'
        assert result['default_name'] == 'Explosion'

    def test_without_picker(self, content_store, catalog, pipeline, thumbnails):
        service = LibraryService(content_store, catalog, pipeline, thumbnails)

        result = service.import_textures()

        assert result['success'] is False
        assert 'picker' in result['error']


class TestSave:
    """Tests for the save operations."""

    def test_save_emits_added(self, service, sources):
        added = record_signal(service.asset_added)

        result = service.save_textures([write_image(sources / 'a.png')], 'Tiles')

        assert added == [(KIND_TEXTURES, result['texture'].id)]
        assert result['texture'].thumbnail_path is not None

    def test_failed_save_reports_error(self, service, sources):
        errors = record_signal(service.operation_error)

        result = service.save_stockshot([sources / 'gone.mov'], 'video', 'Gone')

        assert result['success'] is False
        assert errors[0][0] == 'save stockshots'


class TestEdit:
    """Tests for rename and delete."""

    def test_rename(self, service, texture_set):
        updated = record_signal(service.asset_updated)

        result = service.rename(KIND_TEXTURES, texture_set.id, ' Old Bricks ')

        assert result['success'] is True
        assert result['record'].name == 'Old Bricks'
        assert service.get_textures()[0].name == 'Old Bricks'
        assert updated == [(KIND_TEXTURES, texture_set.id)]

    def test_rename_blank(self, service, texture_set):
        errors = record_signal(service.operation_error)

        assert service.rename(KIND_TEXTURES, texture_set.id, '')['success'] is False
        assert service.get_textures()[0].name == 'Bricks'
        assert len(errors) == 1

    def test_rename_unknown(self, service):
        result = service.rename(KIND_TEXTURES, '00000000-0000-0000-0000-000000000000', 'X')
        assert result['success'] is False

    def test_delete_removes_directory_and_record(self, service, sequence, content_store):
        removed = record_signal(service.asset_removed)

        assert service.delete(KIND_STOCKSHOTS, sequence.id) == {'success': True}

        assert not content_store.entry_path(KIND_STOCKSHOTS, sequence.id).exists()
        assert service.get_stockshots() == []
        assert removed == [(KIND_STOCKSHOTS, sequence.id)]

    def test_delete_unknown(self, service):
        result = service.delete(KIND_ASSETS, '00000000-0000-0000-0000-000000000000')

        assert result['success'] is False
        assert 'not found' in result['error']

    def test_delete_rejects_path_like_ids(self, service, storage):
        (storage / 'keep').mkdir(parents=True)

        assert service.delete(KIND_ASSETS, '../keep')['success'] is False
        assert (storage / 'keep').is_dir()


class TestDownload:
    """Tests for zip export."""

    def test_download_to_path(self, service, model, tmp_path):
        result = service.download(KIND_ASSETS, model.id, tmp_path / 'chair')

        assert result['success'] is True
        assert result['path'] == str(tmp_path / 'chair.zip')
        with zipfile.ZipFile(result['path']) as zf:
            assert zf.namelist() == ['chair.fbx', 'textures/a.tga', 'textures/b.jpg']

    def test_download_suggests_sanitized_name(self, service, picker, texture_set, tmp_path):
        service.rename(KIND_TEXTURES, texture_set.id, 'Walls/Bricks')
        picker.save_response = str(tmp_path / 'bricks.zip')

        result = service.download(KIND_TEXTURES, texture_set.id)

        assert result['success'] is True
        assert picker.save_calls[0][1] == 'Walls_Bricks.zip'
        assert result['file_count'] == 2

    def test_download_canceled(self, service, texture_set):
        assert service.download(KIND_TEXTURES, texture_set.id) == {'success': False, 'canceled': True}


class TestThumbnails:
    """Tests for thumbnail lookup and regeneration."""

    def test_thumbnail_file_wins(self, service, texture_set, content_store):
        expected = str(content_store.thumbnail_path(KIND_TEXTURES, texture_set.id))
        assert service.get_thumbnail(KIND_TEXTURES, texture_set.id) == expected

    def test_texture_fallback(self, service, texture_set, content_store):
        content_store.thumbnail_path(KIND_TEXTURES, texture_set.id).unlink()

        thumbnail = service.get_thumbnail(KIND_TEXTURES, texture_set.id)

        assert Path(thumbnail).name == 'albedo.png'

    def test_asset_fallback_to_first_displayable_texture(self, service, model):
        assert Path(service.get_thumbnail(KIND_ASSETS, model.id)).name == 'b.jpg'

    def test_sequence_fallback_to_representative_frame(self, service, sequence, content_store):
        content_store.thumbnail_path(KIND_STOCKSHOTS, sequence.id).unlink()

        assert Path(service.get_thumbnail(KIND_STOCKSHOTS, sequence.id)).name == 'smoke.002.png'

    def test_video_without_thumbnail(self, service, media_tools, sources):
        media_tools.extract_frame.side_effect = ExternalToolError("ffmpeg not found")
        clip = service.save_stockshot([write_bytes(sources / 'clip.mov')], 'video', 'Clip')['stockshot']

        assert service.get_thumbnail(KIND_STOCKSHOTS, clip.id) is None
        assert service.get_stockshot_frame(clip.id) is None

    def test_unknown_entries(self, service):
        assert service.get_thumbnail('movies', 'x') is None
        assert service.get_thumbnail(KIND_TEXTURES, '00000000-0000-0000-0000-000000000000') is None
        assert service.get_stockshot_frame('nope') is None

    def test_stockshot_frame_position(self, service, sequence):
        assert Path(service.get_stockshot_frame(sequence.id)).name == 'smoke.002.png'
        assert Path(service.get_stockshot_frame(sequence.id, 0.5)).name == 'smoke.012.png'

    def test_generate_model_thumbnail(self, service, model, renderer, content_store):
        updated = record_signal(service.asset_updated)

        result = service.generate_model_thumbnail(model.id)

        assert result['success'] is True
        entry = content_store.entry_path(KIND_ASSETS, model.id)
        renderer.render_preview.assert_called_once_with(entry / 'chair.fbx')
        assert result['thumbnail_path'] == str(entry / Config.THUMBNAIL_FILENAME)
        assert updated == [(KIND_ASSETS, model.id)]

    def test_regenerate_failure(self, service, model, renderer):
        renderer.render_preview.side_effect = ExternalToolError("Blender not found")

        result = service.regenerate_thumbnail(KIND_ASSETS, model.id)

        assert result['success'] is False
        assert 'Chair' in result['error']

    def test_regenerate_with_unavailable_storage(self, service, model, renderer, content_store, mocker):
        mocker.patch.object(
            content_store, 'kind_root',
            side_effect=StorageError("Could not create storage folder", "Permission denied")
        )

        result = service.regenerate_thumbnail(KIND_ASSETS, model.id)

        assert result['success'] is False
        assert 'Permission denied' in result['error']
        renderer.render_preview.assert_not_called()


class TestReadImageBase64:
    """Tests for data URL encoding."""

    def test_jpeg(self, sources):
        path = write_image(sources / 'photo.JPG', fmt='JPEG')

        url = LibraryService.read_image_base64(path)

        prefix = 'data:image/jpeg;base64,'
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]) == path.read_bytes()

    def test_unknown_extension_defaults_to_png(self, sources):
        path = write_bytes(sources / 'image.xyz', b'data')
        assert LibraryService.read_image_base64(path).startswith('data:image/png;base64,')

    def test_missing_file(self, tmp_path):
        assert LibraryService.read_image_base64(tmp_path / 'gone.png') is None
