"""Tests for the report pipeline and ephemeral storage."""
import os
import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from conftest import RecordingWriter, make_image_bytes
from plant_report import LayoutConfig, ReportPipeline, ReportRequest
from plant_report.exceptions import StorageError
from plant_report.storage import ReportStorage
from plant_report.utils import report_filename, unique_storage_name


class WriterFactory:
    """Hands out RecordingWriters and remembers them."""

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.writers = []

    def __call__(self):
        writer = RecordingWriter(**self.kwargs)
        self.writers.append(writer)
        return writer


@pytest.fixture
def storage(tmp_path):
    return ReportStorage(str(tmp_path / "reports"))


@pytest.fixture
def pipeline(storage):
    return ReportPipeline(config=LayoutConfig(font_family="Helvetica"), storage=storage)


def staged_files(storage):
    if not os.path.isdir(storage.directory):
        return []
    return os.listdir(storage.directory)


def test_generate_returns_pdf_and_filename(pipeline, png_bytes):
    result = pipeline.generate(ReportRequest(text="A healthy fern.", image_bytes=png_bytes, mime_type="image/png"))

    assert result.is_complete
    assert result.pdf_bytes.startswith(b"%PDF")
    assert result.page_count == 1
    assert re.fullmatch(r"plant_analysis_report_\d{13}\.pdf", result.filename)


def test_empty_input_never_reaches_writer(storage):
    factory = WriterFactory()
    pipeline = ReportPipeline(config=LayoutConfig(font_family="Helvetica"), storage=storage, writer_factory=factory)

    result = pipeline.generate(ReportRequest(text=""))

    assert result.is_failed
    assert result.error_code == "empty_input"
    assert result.http_status == 400
    assert factory.writers == []


def test_gif_is_rejected_without_draw_commands(storage):
    factory = WriterFactory()
    pipeline = ReportPipeline(config=LayoutConfig(font_family="Helvetica"), storage=storage, writer_factory=factory)

    result = pipeline.generate(ReportRequest(text="text", image_bytes=b"GIF89a....", mime_type="image/gif"))

    assert result.error_code == "unsupported_image_format"
    assert result.http_status == 400
    assert result.pdf_bytes is None
    assert all(writer.draw_calls == [] for writer in factory.writers)


def test_undecodable_image_is_a_client_error(pipeline):
    result = pipeline.generate(ReportRequest(text="text", image_bytes=b"\x89PNG broken", mime_type="image/png"))

    assert result.error_code == "image_decode_error"
    assert result.http_status == 400


def test_non_positive_scale_comes_back_as_failed_result(pipeline, png_bytes):
    result = pipeline.generate(ReportRequest(text="x", image_bytes=png_bytes, mime_type="image/png", scale=0))

    assert result.is_failed
    assert result.error_code == "invalid_configuration"
    assert result.http_status == 400


def test_too_tall_image_is_reported(pipeline):
    tall = make_image_bytes("PNG", size=(10, 4000))
    result = pipeline.generate(ReportRequest(text="x", image_bytes=tall, mime_type="image/png", scale=1.0))

    assert result.error_code == "image_too_tall"
    assert result.http_status == 400


def test_render_failure_is_a_server_error(storage):
    pipeline = ReportPipeline(
        config=LayoutConfig(font_family="Helvetica"),
        storage=storage,
        writer_factory=WriterFactory(fail_on_save=True),
    )
    handoffs = []

    result = pipeline.export(ReportRequest(text="text"), lambda path, name: handoffs.append(path))

    assert result.error_code == "render_error"
    assert result.http_status == 500
    assert handoffs == []
    assert staged_files(storage) == []


def test_export_deletes_file_after_handoff(pipeline, storage):
    seen = {}

    def handoff(path, filename):
        seen["exists"] = os.path.exists(path)
        seen["size"] = os.path.getsize(path)
        seen["filename"] = filename
        with open(path, "rb") as f:
            seen["head"] = f.read(4)

    result = pipeline.export(ReportRequest(text="Water sparingly."), handoff)

    assert result.is_complete
    assert seen["exists"] and seen["size"] == len(result.pdf_bytes)
    assert seen["head"] == b"%PDF"
    assert seen["filename"] == result.filename
    assert staged_files(storage) == []


def test_export_deletes_file_when_handoff_fails(pipeline, storage):
    def handoff(path, filename):
        raise ConnectionResetError("client went away")

    result = pipeline.export(ReportRequest(text="Water sparingly."), handoff)

    assert result.is_failed
    assert result.error_code == "internal_error"
    assert staged_files(storage) == []


def test_concurrent_exports_use_distinct_files(pipeline, storage):
    def run(i):
        paths = []
        pipeline.export(ReportRequest(text=f"report {i}"), lambda path, name: paths.append(path))
        return paths[0]

    with ThreadPoolExecutor(max_workers=4) as executor:
        paths = list(executor.map(run, range(8)))

    assert len(set(paths)) == 8
    assert staged_files(storage) == []


def test_storage_staged_cleans_up_on_error(storage):
    with pytest.raises(RuntimeError):
        with storage.staged(b"%PDF-1.4", "report.pdf") as path:
            assert os.path.exists(path)
            raise RuntimeError("boom")
    assert not os.path.exists(path)
    assert staged_files(storage) == []


def test_storage_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")

    with pytest.raises(StorageError):
        ReportStorage(str(blocker)).write(b"data", "report.pdf")


def test_report_filename_pattern():
    assert report_filename(1700000000123) == "plant_analysis_report_1700000000123.pdf"


def test_unique_storage_name_keeps_prefix_and_extension():
    first = unique_storage_name("plant_analysis_report_1.pdf")
    second = unique_storage_name("plant_analysis_report_1.pdf")

    assert first != second
    assert first.startswith("plant_analysis_report_1_") and first.endswith(".pdf")


def test_copy_to_places_report_directly_in_target_dir(pipeline, tmp_path):
    downloads = tmp_path / "downloads"
    delivered = []

    result = pipeline.export(
        ReportRequest(text="Repot in spring."),
        lambda path, name: delivered.append(ReportStorage.copy_to(path, str(downloads))),
    )

    assert result.is_complete
    assert os.listdir(downloads) == [os.path.basename(delivered[0])]
    assert os.path.dirname(delivered[0]) == str(downloads)
    with open(delivered[0], "rb") as f:
        assert f.read() == result.pdf_bytes
