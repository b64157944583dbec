"""
Pytest fixtures for Asset Librarian tests.
"""

from unittest.mock import MagicMock

import pytest
from PyQt6.QtCore import QCoreApplication

from asset_librarian.config import Config
from asset_librarian.events.progress import ProgressSink
from asset_librarian.services.catalog import Catalog
from asset_librarian.services.content_store import ContentStore
from asset_librarian.services.ingestion import IngestionPipeline
from asset_librarian.services.library_service import LibraryService
from asset_librarian.services.media_tools import MediaTools
from asset_librarian.services.preview_renderer import PreviewRenderer
from asset_librarian.services.thumbnail_generator import ThumbnailGenerator

from tests.helpers import FakePicker, make_image


@pytest.fixture(scope='session', autouse=True)
def qapp():
    """Qt core application shared by the whole session"""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def png_bytes():
    """Encoded 640x360 PNG, as returned by ffmpeg or Blender"""
    from PyQt6.QtCore import QBuffer, QByteArray, QIODevice

    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    make_image(640, 360, 'blue').save(buffer, 'PNG')
    buffer.close()
    return data.data()


@pytest.fixture
def storage(tmp_path):
    return tmp_path / 'storage'


@pytest.fixture
def sources(tmp_path):
    """Folder holding files to import"""
    folder = tmp_path / 'sources'
    folder.mkdir()
    return folder


@pytest.fixture
def content_store(storage):
    return ContentStore(storage)


@pytest.fixture
def catalog(storage, content_store):
    catalog = Catalog(Config.get_catalog_path(storage), content_store)
    yield catalog
    catalog.close()


@pytest.fixture
def media_tools(png_bytes):
    tools = MagicMock(spec=MediaTools)
    tools.extract_frame.return_value = png_bytes
    tools.scale_to_fit.return_value = png_bytes
    return tools


@pytest.fixture
def renderer(png_bytes):
    mock = MagicMock(spec=PreviewRenderer)
    mock.render_preview.return_value = png_bytes
    return mock


@pytest.fixture
def thumbnails(media_tools, renderer):
    return ThumbnailGenerator(media_tools, renderer)


@pytest.fixture
def progress_events():
    """ProgressSink plus the list of events it emitted"""
    sink = ProgressSink()
    events = []
    sink.progress_event.connect(events.append)
    return sink, events


@pytest.fixture
def pipeline(content_store, catalog, thumbnails, progress_events):
    sink, _ = progress_events
    return IngestionPipeline(content_store, catalog, thumbnails, sink)


@pytest.fixture
def picker():
    return FakePicker()


@pytest.fixture
def service(content_store, catalog, pipeline, thumbnails, picker):
    return LibraryService(content_store, catalog, pipeline, thumbnails, picker)
