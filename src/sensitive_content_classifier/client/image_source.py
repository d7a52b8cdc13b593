"""Normalization of image inputs into encoded image bytes.

An image can reach the classifier in three shapes: already encoded bytes, a
decoded Pillow image, or a lazy source that still has to be read, fetched or
decoded. :func:`to_image_bytes` turns any of them into a single byte buffer.

Lazy sources publish their decoded frames through an :class:`ImageStream`.
Only the first frame is used; the listener is detached as soon as a frame or
an error arrives so animated sources do not keep a dangling subscriber.
"""

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

import httpx
from PIL import Image

from sensitive_content_classifier.client.exceptions import (
    EncodingError,
    ResolutionError,
)

logger = logging.getLogger(__name__)

DEFAULT_ENCODE_FORMAT = "PNG"
DEFAULT_FETCH_TIMEOUT = 30.0

# Modes Pillow can write as PNG without conversion
_PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})


@dataclass(frozen=True, eq=False)
class ImageStreamListener:
    """Pair of callbacks notified by an :class:`ImageStream`.

    Listeners compare by identity so the same callbacks can be registered
    twice as two distinct listeners.

    Attributes:
        on_frame: Called with each decoded frame.
        on_error: Called if the source fails to produce frames.

    """

    on_frame: Callable[[Image.Image], None]
    on_error: Callable[[BaseException], None]


class ImageStream:
    """Delivers the frames of a lazily resolved image to listeners.

    A listener registered after a frame or error was reported is notified of
    the most recent event straight away.
    """

    def __init__(self) -> None:
        """Initialize an empty stream."""
        self._listeners: list[ImageStreamListener] = []
        self._last_frame: Image.Image | None = None
        self._last_error: BaseException | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def listener_count(self) -> int:
        """Number of currently registered listeners."""
        return len(self._listeners)

    def has_listener(self, listener: ImageStreamListener) -> bool:
        """Check whether a listener is registered."""
        return listener in self._listeners

    def add_listener(self, listener: ImageStreamListener) -> None:
        """Register a listener and replay the latest event to it."""
        self._listeners.append(listener)
        if self._last_error is not None:
            listener.on_error(self._last_error)
        elif self._last_frame is not None:
            listener.on_frame(self._last_frame)

    def remove_listener(self, listener: ImageStreamListener) -> None:
        """Unregister a listener.

        Raises:
            ValueError: If the listener is not registered.

        """
        self._listeners.remove(listener)

    def report_frame(self, frame: Image.Image) -> None:
        """Notify listeners of a decoded frame."""
        self._last_frame = frame
        for listener in list(self._listeners):
            # Skip listeners removed by an earlier callback in this dispatch
            if self.has_listener(listener):
                listener.on_frame(frame)

    def report_error(self, error: BaseException) -> None:
        """Notify listeners that the source failed."""
        self._last_error = error
        for listener in list(self._listeners):
            if self.has_listener(listener):
                listener.on_error(error)

    def attach(self, task: asyncio.Task[None]) -> None:
        """Keep a reference to the task producing this stream's events."""
        self._task = task


class LazyImageSource(ABC):
    """Image data that must be resolved before pixels are available."""

    @abstractmethod
    def load_frames(self) -> AsyncIterator[Image.Image]:
        """Yield the decoded frames of the image in order."""

    def resolve(self) -> ImageStream:
        """Start resolving the image and return the stream of its frames.

        Must be called from a running event loop. Frames are produced by a
        background task; decoding stops early once every listener has left.
        """
        stream = ImageStream()
        stream.attach(asyncio.create_task(self._produce(stream)))
        return stream

    async def _produce(self, stream: ImageStream) -> None:
        delivered = False
        try:
            async with contextlib.aclosing(self.load_frames()) as frames:
                async for frame in frames:
                    stream.report_frame(frame)
                    delivered = True
                    if not stream.listener_count:
                        break
        except Exception as e:  # noqa: BLE001 - handed to the stream listeners
            logger.debug("Image source %r failed: %s", self, e)
            stream.report_error(e)
            return

        if not delivered:
            stream.report_error(ResolutionError("Image source has no frames"))


def _copy_frame(img: Image.Image, index: int) -> Image.Image | None:
    """Decode frame ``index`` of an opened image, or None past the last one."""
    try:
        img.seek(index)
    except EOFError:
        return None
    return img.copy()


class EncodedImageSource(LazyImageSource):
    """Lazy source backed by encoded image bytes that still need decoding."""

    @abstractmethod
    async def read_bytes(self) -> bytes:
        """Obtain the encoded image bytes."""

    async def load_frames(self) -> AsyncIterator[Image.Image]:
        """Decode the frames of the encoded image one at a time."""
        data = await self.read_bytes()
        img = await asyncio.to_thread(Image.open, BytesIO(data))
        try:
            index = 0
            while (
                frame := await asyncio.to_thread(_copy_frame, img, index)
            ) is not None:
                yield frame
                index += 1
        finally:
            img.close()


class MemoryImageSource(EncodedImageSource):
    """Lazy source for encoded image bytes held in memory."""

    def __init__(self, data: bytes) -> None:
        """Initialize with encoded image bytes."""
        self.data = data

    async def read_bytes(self) -> bytes:
        """Return the held bytes."""
        return self.data

    def __repr__(self) -> str:
        """Describe the source without dumping its bytes."""
        return f"MemoryImageSource({len(self.data)} bytes)"


class FileImageSource(EncodedImageSource):
    """Lazy source for an image file on disk."""

    def __init__(self, path: str | Path) -> None:
        """Initialize with the path of the image file."""
        self.path = Path(path)

    async def read_bytes(self) -> bytes:
        """Read the file in a worker thread."""
        return await asyncio.to_thread(self.path.read_bytes)

    def __repr__(self) -> str:
        """Describe the source by its path."""
        return f"FileImageSource({str(self.path)!r})"


class UrlImageSource(EncodedImageSource):
    """Lazy source for an image served over HTTP."""

    def __init__(
        self,
        url: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        """Initialize the URL source.

        Args:
            url: Location of the image.
            http_client: Client to fetch with. A short-lived client is created
                per fetch when omitted.
            timeout: Request timeout in seconds.

        """
        self.url = url
        self.http_client = http_client
        self.timeout = timeout

    async def read_bytes(self) -> bytes:
        """Download the image.

        Raises:
            httpx.HTTPError: If the request fails or returns an error status.

        """
        if self.http_client is not None:
            response = await self.http_client.get(
                self.url, timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient() as client:
                response = await client.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def __repr__(self) -> str:
        """Describe the source by its URL."""
        return f"UrlImageSource({self.url!r})"


ImageInput = bytes | bytearray | memoryview | Image.Image | LazyImageSource


async def encode_image(
    image: Image.Image, image_format: str = DEFAULT_ENCODE_FORMAT
) -> bytes:
    """Encode a decoded image into bytes.

    Args:
        image: The decoded image.
        image_format: Pillow format name. Defaults to lossless PNG.

    Returns:
        The encoded image bytes.

    Raises:
        EncodingError: If Pillow fails or produces no data.

    """

    def _encode() -> bytes:
        output = image
        if image_format.upper() == "PNG" and image.mode not in _PNG_MODES:
            output = image.convert("RGBA")
        buffer = BytesIO()
        output.save(buffer, format=image_format)
        return buffer.getvalue()

    try:
        data = await asyncio.to_thread(_encode)
    except (OSError, ValueError, KeyError) as e:
        err_msg = f"Failed to encode image as {image_format}: {e}"
        raise EncodingError(err_msg) from e

    if not data:
        raise EncodingError
    return data


async def resolve_first_frame(source: LazyImageSource) -> Image.Image:
    """Wait for the first frame of a lazy source.

    Exactly one listener is registered and it is removed as soon as the
    first frame or error arrives.

    Raises:
        ResolutionError: If the source reports an error instead of a frame.

    """
    stream = source.resolve()
    first_frame: asyncio.Future[Image.Image] = (
        asyncio.get_running_loop().create_future()
    )

    def _on_frame(frame: Image.Image) -> None:
        stream.remove_listener(listener)
        if not first_frame.done():
            first_frame.set_result(frame)

    def _on_error(error: BaseException) -> None:
        stream.remove_listener(listener)
        if not first_frame.done():
            first_frame.set_exception(error)

    listener = ImageStreamListener(on_frame=_on_frame, on_error=_on_error)
    stream.add_listener(listener)
    try:
        return await first_frame
    except ResolutionError:
        raise
    except Exception as e:
        err_msg = f"Failed to resolve {source!r}: {e}"
        raise ResolutionError(err_msg) from e
    finally:
        # Only still registered if the wait itself was cancelled
        if stream.has_listener(listener):
            stream.remove_listener(listener)


async def to_image_bytes(source: ImageInput) -> bytes:
    """Normalize any supported image input into encoded bytes.

    Encoded bytes pass through unchanged. Decoded images are encoded as PNG
    and lazy sources are resolved to their first frame first.

    Args:
        source: Encoded bytes, a Pillow image or a lazy image source.

    Returns:
        The encoded image bytes.

    Raises:
        EncodingError: If a decoded image cannot be encoded.
        ResolutionError: If a lazy source fails to resolve.
        TypeError: If the input is none of the supported shapes.

    """
    if isinstance(source, bytes | bytearray | memoryview):
        return bytes(source)
    if isinstance(source, Image.Image):
        return await encode_image(source)
    if isinstance(source, LazyImageSource):
        frame = await resolve_first_frame(source)
        return await encode_image(frame)

    msg = f"Unsupported image input: {type(source).__name__}"
    raise TypeError(msg)
