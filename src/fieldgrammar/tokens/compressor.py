"""Shared zstd compressor.

The compressor is created once, off the event loop, the first time any
caller needs it. Concurrent first callers wait on the same creation, even
when they run on different threads or event loops; if creation fails, the
next caller tries again.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Callable, Optional

import zstandard as zstd

from ..exceptions import CompressionError

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 19

# Largest payload decompress() will produce (1 MiB)
MAX_DECOMPRESSED_SIZE = 1 << 20


class ZstdCodec:
    """zstd compression and decompression contexts behind one lock.

    zstandard contexts must not be used from two threads at once, and
    compressed codec calls run on executor threads.

    Args:
        level: zstd compression level
        max_output_size: Largest decompressed payload accepted
    """

    def __init__(
        self, level: int = COMPRESSION_LEVEL, max_output_size: int = MAX_DECOMPRESSED_SIZE
    ) -> None:
        self.level = level
        self.max_output_size = max_output_size
        self._compressor = zstd.ZstdCompressor(level=level)
        self._decompressor = zstd.ZstdDecompressor()
        self._lock = threading.Lock()

    def compress(self, data: bytes) -> bytes:
        """Compress one zstd frame (content size recorded in the header).

        Raises:
            CompressionError: If zstd reports a failure
        """
        with self._lock:
            try:
                return self._compressor.compress(data)
            except zstd.ZstdError as e:
                raise CompressionError(f"Compression failed: {e}") from e

    def content_size(self, data: bytes) -> int:
        """Content size declared in the frame header, or -1 if the header omits it.

        Raises:
            CompressionError: If ``data`` does not start with a zstd frame header
        """
        try:
            return zstd.frame_content_size(data)
        except zstd.ZstdError as e:
            raise CompressionError(f"Decompression failed: {e}") from e

    def decompress(self, data: bytes) -> bytes:
        """Decompress one zstd frame of at most ``max_output_size`` bytes.

        The declared content size is checked before any output is allocated.

        Raises:
            CompressionError: If ``data`` is not a valid zstd frame or its
                content exceeds ``max_output_size``
        """
        declared = self.content_size(data)
        if declared > self.max_output_size:
            raise CompressionError(
                f"Decompression failed: frame declares {declared} bytes, "
                f"limit is {self.max_output_size}"
            )

        with self._lock:
            try:
                return self._decompressor.decompress(data, max_output_size=self.max_output_size)
            except zstd.ZstdError as e:
                raise CompressionError(f"Decompression failed: {e}") from e


class LazyCompressor:
    """Lazily created singleton around a codec factory.

    One creation is shared by every caller: a lock guards the pending
    future, and each event loop awaits it through ``asyncio.wrap_future``.

    Args:
        factory: Zero-argument callable building the codec; runs on the
            default executor of the loop that first asks for it
    """

    def __init__(self, factory: Callable[[], ZstdCodec] = ZstdCodec) -> None:
        self._factory = factory
        self._instance: Optional[ZstdCodec] = None
        self._pending: Optional[concurrent.futures.Future[ZstdCodec]] = None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._instance is not None

    async def get(self) -> ZstdCodec:
        """Return the codec, creating it on first use.

        Raises:
            CompressionError: If creation fails (a later call retries)
        """
        if self._instance is not None:
            return self._instance

        loop = asyncio.get_running_loop()
        with self._lock:
            if self._instance is not None:
                return self._instance
            pending = self._pending
            if pending is None:
                pending = self._pending = concurrent.futures.Future()
                # A running future cannot be cancelled by any single waiter
                pending.set_running_or_notify_cancel()
                loop.run_in_executor(None, self._create, pending)

        return await asyncio.shield(asyncio.wrap_future(pending))

    def _build(self) -> ZstdCodec:
        try:
            return self._factory()
        except CompressionError:
            raise
        except Exception as e:
            raise CompressionError(f"Could not initialize compressor: {e}") from e

    def _create(self, pending: concurrent.futures.Future[ZstdCodec]) -> None:
        try:
            instance = self._build()
        except CompressionError as e:
            with self._lock:
                self._pending = None
            pending.set_exception(e)
            return

        logger.debug("Initialized zstd compressor at level %d", instance.level)
        with self._lock:
            self._instance = instance
        pending.set_result(instance)

    def reset(self) -> None:
        """Forget the codec so the next get() creates a fresh one."""
        with self._lock:
            self._instance = None
            self._pending = None


_shared = LazyCompressor()


async def get_compressor() -> ZstdCodec:
    """Return the process-wide compressor, creating it on first use."""
    return await _shared.get()
