"""Integration tests for the complete upload pipeline."""

import io
import json
from unittest.mock import patch

import pytest
from PIL import Image

from image_upload.core.exceptions import (
    DecodeError,
    ImageNotFoundError,
    OriginalUploadFailed,
)
from image_upload.core.factories import UploadPipelineFactory
from image_upload.core.models import CompressSpec, StorageConfig
from image_upload.main import main
from image_upload.testing.fakes import (
    FakeLogger,
    RecordingOutcomeSink,
    create_test_image,
    setup_test_s3_environment,
)


TIMESTAMP = 1700000000000000000


@pytest.fixture
def fake_s3():
    return setup_test_s3_environment()


@pytest.fixture
def store(fake_s3):
    config = StorageConfig(bucket_name="test-bucket", region="us-west-2")
    return UploadPipelineFactory.create_store(config, s3_client=fake_s3, logger=FakeLogger())


class TestPipelineIntegration:
    """End-to-end runs of the factory-wired services over a fake S3 client."""

    def test_upload_then_lookup(self, fake_s3, store):
        service = UploadPipelineFactory.create_upload_service(
            store, logger=FakeLogger(), clock=lambda: TIMESTAMP
        )
        lookup = UploadPipelineFactory.create_lookup_service(store, logger=FakeLogger())

        result = service.process(
            create_test_image(640, 480),
            "holiday.JPG",
            [CompressSpec(width=320, height=240), CompressSpec(width=64, height=64)],
        )

        base = "https://test-bucket.s3.us-west-2.amazonaws.com"
        assert result.original.url == f"{base}/holiday_{TIMESTAMP}.jpg"
        assert [v.url for v in result.variants] == [
            f"{base}/holiday_320x240_{TIMESTAMP}.jpg",
            f"{base}/holiday_64x64_{TIMESTAMP}.jpg",
        ]

        bucket = fake_s3.get_bucket("test-bucket")
        stored = bucket.get_object(f"holiday_64x64_{TIMESTAMP}.jpg")
        assert stored.content_type == "image/jpeg"
        assert Image.open(io.BytesIO(stored.body)).size == (64, 64)

        info = lookup.get_image_info(f"holiday_320x240_{TIMESTAMP}.jpg")
        assert (info.width, info.height) == (320, 240)
        assert info.url == result.variants[0].url

        original = lookup.get_image_info(f"holiday_{TIMESTAMP}.jpg")
        assert (original.width, original.height) == (0, 0)

        keys = lookup.list_images()
        assert f"holiday_{TIMESTAMP}.jpg" in keys
        assert "notes.txt" in keys
        assert len(keys) == 5

    def test_s3_outage_fails_original(self, fake_s3, store):
        fake_s3.set_failure_mode(True)
        service = UploadPipelineFactory.create_upload_service(store, logger=FakeLogger())

        with pytest.raises(OriginalUploadFailed):
            service.process(create_test_image(), "a.png", [])

    def test_decode_failure_leaves_bucket_untouched(self, fake_s3, store):
        service = UploadPipelineFactory.create_upload_service(store, logger=FakeLogger())

        with pytest.raises(DecodeError):
            service.process(b"%PDF-1.4", "doc.png", [CompressSpec(width=1, height=1)])

        assert set(fake_s3.get_bucket("test-bucket").objects) == {
            "existing_1.jpg",
            "notes.txt",
        }

    def test_lookup_missing_and_outage(self, fake_s3, store):
        lookup = UploadPipelineFactory.create_lookup_service(store, logger=FakeLogger())

        with pytest.raises(ImageNotFoundError):
            lookup.get_image_info("missing.jpg")

        fake_s3.set_failure_mode(True)
        with pytest.raises(ImageNotFoundError):
            lookup.get_image_info("existing_1.jpg")

    def test_sink_wiring(self, store):
        sink = RecordingOutcomeSink()
        service = UploadPipelineFactory.create_upload_service(
            store,
            logger=FakeLogger(),
            outcome_sink=sink,
        )

        service.process(
            create_test_image(fmt="PNG"), "icon.png", [CompressSpec(width=16, height=16)]
        )

        assert len(sink.outcomes) == 1
        assert sink.outcomes[0].success
        assert sink.outcomes[0].key.startswith("icon_16x16_")


class TestCliIntegration:
    """The CLI driven against a store built on the fake S3 client."""

    def test_upload_command(self, tmp_path, store):
        path = tmp_path / "photo.png"
        path.write_bytes(create_test_image(200, 100, fmt="PNG"))

        with patch("image_upload.main._create_store", return_value=store), patch(
            "image_upload.main._print_json"
        ) as mock_print:
            with pytest.raises(SystemExit) as exc_info:
                main(["upload", str(path), "--size", "50x25"])

        assert exc_info.value.code == 0
        payload = mock_print.call_args[0][0]
        assert payload["original_image"]["width"] == 200
        assert payload["compressed_images"][0]["height"] == 25
        assert payload["message"] == "Image uploaded and processed successfully"
        json.dumps(payload)

    def test_list_command(self, store):
        with patch("image_upload.main._create_store", return_value=store), patch(
            "image_upload.main._print_json"
        ) as mock_print:
            with pytest.raises(SystemExit) as exc_info:
                main(["list"])

        assert exc_info.value.code == 0
        assert sorted(mock_print.call_args[0][0]) == ["existing_1.jpg", "notes.txt"]
