"""Tests for image input normalization."""

import asyncio
from io import BytesIO
from pathlib import Path
from unittest import mock

import httpx
import pytest
from PIL import Image

from sensitive_content_classifier.client import image_source
from sensitive_content_classifier.client.exceptions import (
    EncodingError,
    ResolutionError,
)
from sensitive_content_classifier.client.image_source import (
    FileImageSource,
    ImageStream,
    ImageStreamListener,
    MemoryImageSource,
    UrlImageSource,
    encode_image,
    resolve_first_frame,
    to_image_bytes,
)
from tests.utils.fake_image_source import StaticImageSource
from tests.utils.image_generation import create_animated_gif, create_test_image

PNG_SIGNATURE = b"\x89PNG"
RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)


def decode(data: bytes) -> Image.Image:
    with Image.open(BytesIO(data)) as img:
        img.load()
        return img.copy()


@pytest.mark.asyncio
async def test_bytes_pass_through_unchanged() -> None:
    data = create_test_image(img_format="JPEG")
    assert await to_image_bytes(data) == data


@pytest.mark.asyncio
async def test_bytearray_converted_to_bytes() -> None:
    result = await to_image_bytes(bytearray(b"abc"))
    assert result == b"abc"
    assert isinstance(result, bytes)


@pytest.mark.asyncio
async def test_decoded_image_encoded_as_png() -> None:
    image = Image.new("RGB", (8, 6), RED)

    result = await to_image_bytes(image)

    assert result.startswith(PNG_SIGNATURE)
    decoded = decode(result)
    assert decoded.size == (8, 6)
    assert decoded.getpixel((0, 0)) == RED


@pytest.mark.asyncio
async def test_mode_without_png_support_is_converted() -> None:
    image = Image.new("CMYK", (4, 4))

    result = await encode_image(image)

    assert result.startswith(PNG_SIGNATURE)


@pytest.mark.asyncio
async def test_encoder_failure_raises_encoding_error() -> None:
    image = mock.Mock(spec=Image.Image)
    image.mode = "RGB"
    image.save.side_effect = OSError("encoder unavailable")

    with pytest.raises(EncodingError, match="encoder unavailable"):
        await encode_image(image)


@pytest.mark.asyncio
async def test_encoder_without_output_raises_encoding_error() -> None:
    image = mock.Mock(spec=Image.Image)
    image.mode = "RGB"

    with pytest.raises(EncodingError, match="no data"):
        await encode_image(image)


@pytest.mark.asyncio
async def test_unsupported_input_type() -> None:
    with pytest.raises(TypeError, match="str"):
        await to_image_bytes("not an image")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_lazy_source_registers_and_removes_one_listener() -> None:
    source = StaticImageSource([Image.new("RGB", (4, 4), GREEN)])

    result = await to_image_bytes(source)

    assert decode(result).getpixel((0, 0)) == GREEN
    assert source.stream is not None
    assert source.stream.added == 1
    assert source.stream.removed == 1
    assert source.stream.listener_count == 0


@pytest.mark.asyncio
async def test_lazy_source_uses_first_frame_only() -> None:
    frames = [Image.new("RGB", (4, 4), color) for color in (RED, GREEN, BLUE)]
    source = StaticImageSource(frames)

    frame = await resolve_first_frame(source)
    # Let the producer observe that nobody is listening any more
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert frame.getpixel((0, 0)) == RED
    assert source.stream is not None
    assert source.stream.added == 1
    assert source.stream.removed == 1
    assert source.yielded == 1


@pytest.mark.asyncio
async def test_lazy_source_error_surfaces_as_resolution_error() -> None:
    source = StaticImageSource([], error=OSError("asset missing"))

    with pytest.raises(ResolutionError, match="asset missing"):
        await asyncio.wait_for(to_image_bytes(source), timeout=1)

    assert source.stream is not None
    assert source.stream.added == 1
    assert source.stream.removed == 1


@pytest.mark.asyncio
async def test_lazy_source_without_frames_does_not_hang() -> None:
    source = StaticImageSource([])

    with pytest.raises(ResolutionError, match="no frames"):
        await asyncio.wait_for(to_image_bytes(source), timeout=1)

    assert source.stream is not None
    assert source.stream.removed == 1


@pytest.mark.asyncio
async def test_cancelled_wait_removes_listener() -> None:
    never_ready = asyncio.Event()

    class BlockedSource(StaticImageSource):
        async def load_frames(self):  # type: ignore[override]  # noqa: ANN202
            await never_ready.wait()
            yield Image.new("RGB", (1, 1))

    source = BlockedSource([])
    task = asyncio.create_task(resolve_first_frame(source))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert source.stream is not None
    assert source.stream.added == 1
    assert source.stream.removed == 1

    # Let the producer finish now that nobody is listening
    never_ready.set()
    assert source.stream._task is not None
    await source.stream._task


@pytest.mark.asyncio
async def test_memory_source_decodes_animated_gif() -> None:
    source = MemoryImageSource(create_animated_gif([RED, GREEN, BLUE]))

    frame = await resolve_first_frame(source)

    assert frame.convert("RGB").getpixel((0, 0)) == RED


@pytest.mark.asyncio
async def test_memory_source_invalid_bytes() -> None:
    source = MemoryImageSource(b"definitely not an image")

    with pytest.raises(ResolutionError):
        await to_image_bytes(source)


@pytest.mark.asyncio
async def test_file_source(tmp_path: Path) -> None:
    path = tmp_path / "image.jpg"
    path.write_bytes(create_test_image(32, 24, img_format="JPEG"))

    result = await to_image_bytes(FileImageSource(path))

    assert result.startswith(PNG_SIGNATURE)
    assert decode(result).size == (32, 24)


@pytest.mark.asyncio
async def test_file_source_missing_file(tmp_path: Path) -> None:
    source = FileImageSource(tmp_path / "missing.png")

    with pytest.raises(ResolutionError, match="missing.png"):
        await to_image_bytes(source)


@pytest.mark.asyncio
async def test_url_source_fetches_image() -> None:
    image_bytes = create_test_image(20, 10)
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=image_bytes)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler)
    ) as http_client:
        source = UrlImageSource(
            "https://images.example.com/cat.png", http_client=http_client
        )
        result = await to_image_bytes(source)

    assert requested == ["https://images.example.com/cat.png"]
    assert decode(result).size == (20, 10)


@pytest.mark.asyncio
async def test_url_source_error_status() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler)
    ) as http_client:
        source = UrlImageSource(
            "https://images.example.com/gone.png", http_client=http_client
        )
        with pytest.raises(ResolutionError, match="404"):
            await to_image_bytes(source)


def test_stream_replays_latest_frame_to_late_listener() -> None:
    stream = ImageStream()
    frame = Image.new("RGB", (1, 1))
    stream.report_frame(frame)

    on_frame = mock.Mock()
    on_error = mock.Mock()
    stream.add_listener(ImageStreamListener(on_frame, on_error))

    on_frame.assert_called_once_with(frame)
    on_error.assert_not_called()


def test_stream_replays_error_to_late_listener() -> None:
    stream = ImageStream()
    error = RuntimeError("decode failed")
    stream.report_error(error)

    on_frame = mock.Mock()
    on_error = mock.Mock()
    stream.add_listener(ImageStreamListener(on_frame, on_error))

    on_error.assert_called_once_with(error)
    on_frame.assert_not_called()


def test_stream_skips_listener_removed_during_dispatch() -> None:
    stream = ImageStream()
    second = ImageStreamListener(mock.Mock(), mock.Mock())

    def remove_second(_: Image.Image) -> None:
        stream.remove_listener(second)

    stream.add_listener(ImageStreamListener(remove_second, mock.Mock()))
    stream.add_listener(second)
    stream.report_frame(Image.new("RGB", (1, 1)))

    second.on_frame.assert_not_called()  # type: ignore[attr-defined]
    assert stream.listener_count == 1


def test_listeners_compare_by_identity() -> None:
    callback = mock.Mock()
    first = ImageStreamListener(callback, callback)
    second = ImageStreamListener(callback, callback)
    stream = ImageStream()

    stream.add_listener(first)
    stream.add_listener(second)
    stream.remove_listener(second)

    assert stream.has_listener(first)
    assert not stream.has_listener(second)


@pytest.mark.asyncio
async def test_animated_source_decodes_only_first_frame() -> None:
    class TrackedMemorySource(MemoryImageSource):
        stream: ImageStream | None = None

        def resolve(self) -> ImageStream:
            self.stream = super().resolve()
            return self.stream

    source = TrackedMemorySource(
        create_animated_gif([RED, GREEN, BLUE, RED, GREEN])
    )

    with mock.patch(
        "sensitive_content_classifier.client.image_source._copy_frame",
        wraps=image_source._copy_frame,
    ) as copy_frame:
        frame = await resolve_first_frame(source)
        assert source.stream is not None
        assert source.stream._task is not None
        await source.stream._task

    assert frame.convert("RGB").getpixel((0, 0)) == RED
    copy_frame.assert_called_once()
