"""Tests for ContentStore."""

import pytest

from asset_librarian.core.exceptions import StorageError
from asset_librarian.core.records import KIND_ASSETS, KIND_STOCKSHOTS, KIND_TEXTURES
from asset_librarian.utils.validators import validate_uuid_format

from tests.helpers import write_bytes


class TestCreateEntry:
    """Tests for entry creation."""

    def test_ids_are_unique_uuids(self, content_store):
        ids = {content_store.create_entry(KIND_TEXTURES)[0] for _ in range(50)}

        assert len(ids) == 50
        assert all(validate_uuid_format(entry_id) for entry_id in ids)
        assert content_store.list_existing_ids(KIND_TEXTURES) == ids

    def test_asset_entries_get_textures_folder(self, content_store):
        entry_id, directory = content_store.create_entry(KIND_ASSETS)

        assert directory == content_store.entry_path(KIND_ASSETS, entry_id)
        assert content_store.textures_path(entry_id).is_dir()

    def test_other_kinds_start_empty(self, content_store):
        _, directory = content_store.create_entry(KIND_STOCKSHOTS)
        assert list(directory.iterdir()) == []

    def test_unknown_kind(self, content_store):
        with pytest.raises(ValueError):
            content_store.create_entry('movies')


class TestCopy:
    """Tests for file copies."""

    def test_copy_batch_keeps_input_order(self, content_store, sources):
        files = [write_bytes(sources / f'frame.{i}.exr', bytes([i])) for i in range(7)]
        _, directory = content_store.create_entry(KIND_STOCKSHOTS)

        names = content_store.copy_batch(directory, files, max_workers=3)

        assert names == [f.name for f in files]
        assert (directory / 'frame.4.exr').read_bytes() == bytes([4])

    def test_copy_batch_reports_failures_after_settling(self, content_store, sources):
        good = write_bytes(sources / 'a.png')
        _, directory = content_store.create_entry(KIND_TEXTURES)

        with pytest.raises(StorageError) as exc_info:
            content_store.copy_batch(directory, [sources / 'missing.png', good])

        assert '1 of 2' in str(exc_info.value)
        assert (directory / 'a.png').exists()

    def test_copy_into_preserves_order(self, content_store, sources):
        files = [write_bytes(sources / name) for name in ('b.png', 'a.png')]
        _, directory = content_store.create_entry(KIND_TEXTURES)

        assert content_store.copy_into(directory, files) == ['b.png', 'a.png']

    def test_copy_batch_empty(self, content_store, tmp_path):
        assert content_store.copy_batch(tmp_path, []) == []


class TestRemoval:
    """Tests for cleanup and deletion."""

    def test_attempt_cleanup_removes_partial_entry(self, content_store, sources):
        entry_id, directory = content_store.create_entry(KIND_TEXTURES)
        content_store.copy_file(directory, write_bytes(sources / 'a.png'))

        assert content_store.attempt_cleanup(directory) is True
        assert entry_id not in content_store.list_existing_ids(KIND_TEXTURES)

    def test_attempt_cleanup_missing_directory(self, content_store, tmp_path):
        assert content_store.attempt_cleanup(tmp_path / 'nothing') is True

    def test_remove_entry(self, content_store):
        entry_id, directory = content_store.create_entry(KIND_ASSETS)

        content_store.remove_entry(KIND_ASSETS, entry_id)

        assert not directory.exists()
        # Second removal is a no-op
        content_store.remove_entry(KIND_ASSETS, entry_id)

    def test_list_existing_ids_ignores_files(self, content_store):
        entry_id, _ = content_store.create_entry(KIND_TEXTURES)
        write_bytes(content_store.kind_root(KIND_TEXTURES) / 'stray.txt')

        assert content_store.list_existing_ids(KIND_TEXTURES) == {entry_id}
