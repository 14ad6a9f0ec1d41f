"""Unit tests for the compressed schema codec and the shared compressor."""

from __future__ import annotations

import asyncio
import json
import threading
import time

import pytest
import zstandard as zstd

from fieldgrammar import (
    BoolField,
    CompressionError,
    CorruptTokenError,
    OptionalField,
    PointerField,
    Schema,
    UnresolvedPointerError,
)
from fieldgrammar.codec import base64url
from fieldgrammar.tokens import COMPRESSION_LEVEL, LazyCompressor, ZstdCodec, get_compressor
from fieldgrammar.tokens.compressed import decode_schema, encode_schema


def roundtrip(schema: Schema) -> Schema:
    async def run() -> Schema:
        return await decode_schema(await encode_schema(schema.name, schema.fields))

    return asyncio.run(run())


class TestCompressedCodec:
    """Test compressed schema tokens."""

    def test_every_kind(self, device_schema: Schema) -> None:
        assert roundtrip(device_schema) == device_schema

    def test_recursive(self, expression_schema: Schema) -> None:
        assert roundtrip(expression_schema) == expression_schema

    def test_no_depth_bound(self) -> None:
        """Trees deeper than the bit-packed limit are accepted."""
        node = BoolField("leaf")
        for level in range(12):
            node = OptionalField(f"o{level}", node)
        schema = Schema.create("Deep", [node])

        assert roundtrip(schema) == schema

    def test_alphabet(self, device_schema: Schema) -> None:
        token = asyncio.run(encode_schema(device_schema.name, device_schema.fields))
        assert base64url.is_token(token)

    def test_payload_is_camel_case_json(self, device_schema: Schema) -> None:
        """The compressed payload is the schema's JSON with camelCase keys."""
        token = asyncio.run(encode_schema(device_schema.name, device_schema.fields))
        document = json.loads(ZstdCodec().decompress(base64url.decode(token)))

        assert document["name"] == "Device"
        assert document["fields"][5]["maxLength"] == 5
        assert "version" not in document

    def test_invalid_characters(self) -> None:
        with pytest.raises(CorruptTokenError):
            asyncio.run(decode_schema("not*valid"))

    def test_not_zstd(self) -> None:
        """Bytes that are not a zstd frame are a compressor failure."""
        with pytest.raises(CompressionError, match="Decompression failed"):
            asyncio.run(decode_schema(base64url.encode(b"plain bytes")))

    def test_not_a_schema(self) -> None:
        """Valid zstd that holds no schema is a corrupt token."""
        token = base64url.encode(ZstdCodec().compress(b'{"name": "S", "fields": [{}]}'))
        with pytest.raises(CorruptTokenError, match="invalid schema JSON"):
            asyncio.run(decode_schema(token))

    def test_unresolved_pointer(self) -> None:
        token = asyncio.run(encode_schema("S", [PointerField("p", "missing")]))
        with pytest.raises(UnresolvedPointerError):
            asyncio.run(decode_schema(token))

    def test_oversized_frame_header(self) -> None:
        """A frame header claiming a huge payload is rejected before decompressing."""
        header = bytes.fromhex("28b52ffde0") + (2**50).to_bytes(8, "little")
        frame = header + bytes.fromhex("010000")
        token = base64url.encode(frame)

        with pytest.raises(CorruptTokenError, match="frame declares 1125899906842624 bytes"):
            asyncio.run(decode_schema(token))


class TestZstdCodec:
    """Test the zstd wrapper."""

    def test_roundtrip(self) -> None:
        codec = ZstdCodec()
        data = b"field grammar " * 100

        compressed = codec.compress(data)
        assert len(compressed) < len(data)
        assert codec.decompress(compressed) == data

    def test_default_level(self) -> None:
        assert ZstdCodec().level == COMPRESSION_LEVEL == 19

    def test_thread_safe(self) -> None:
        """Concurrent threads can share one codec."""
        codec = ZstdCodec()
        results: list[bool] = []

        def work(seed: int) -> None:
            data = bytes([seed]) * 5000
            for _ in range(20):
                results.append(codec.decompress(codec.compress(data)) == data)

        threads = [threading.Thread(target=work, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 160
        assert all(results)

    def test_declared_size_limit(self) -> None:
        """Frames declaring more than max_output_size are refused."""
        codec = ZstdCodec(max_output_size=1000)
        assert codec.content_size(codec.compress(b"a" * 5000)) == 5000

        with pytest.raises(CompressionError, match="frame declares 5000 bytes, limit is 1000"):
            codec.decompress(codec.compress(b"a" * 5000))

    def test_undeclared_size_limit(self) -> None:
        """Frames without a content size are still capped."""
        frame = zstd.ZstdCompressor(write_content_size=False).compress(b"a" * 5000)
        codec = ZstdCodec(max_output_size=1000)
        assert codec.content_size(frame) == -1

        with pytest.raises(CompressionError):
            codec.decompress(frame)
        assert ZstdCodec().decompress(frame) == b"a" * 5000


class TestLazyCompressor:
    """Test the lazily created shared compressor."""

    def test_created_once(self) -> None:
        """Concurrent first callers share one creation."""
        calls = []

        def factory() -> ZstdCodec:
            calls.append(1)
            time.sleep(0.05)
            return ZstdCodec()

        lazy = LazyCompressor(factory)

        async def run() -> list[ZstdCodec]:
            return await asyncio.gather(*(lazy.get() for _ in range(10)))

        instances = asyncio.run(run())

        assert len(calls) == 1
        assert all(instance is instances[0] for instance in instances)
        assert lazy.ready

    def test_created_once_across_threads(self) -> None:
        """Callers on separate threads and event loops share one creation."""
        calls = []

        def factory() -> ZstdCodec:
            calls.append(1)
            time.sleep(0.2)
            return ZstdCodec()

        lazy = LazyCompressor(factory)
        start = threading.Barrier(4)
        instances: list[ZstdCodec] = []

        def work() -> None:
            start.wait()
            instances.append(asyncio.run(lazy.get()))

        threads = [threading.Thread(target=work) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(instances) == 4
        assert all(instance is instances[0] for instance in instances)

    def test_reused_across_event_loops(self) -> None:
        lazy = LazyCompressor()
        first = asyncio.run(lazy.get())
        assert asyncio.run(lazy.get()) is first

    def test_failure_is_retried_by_next_call(self) -> None:
        """A failed creation is not cached."""
        attempts = []

        def factory() -> ZstdCodec:
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("out of memory")
            return ZstdCodec()

        lazy = LazyCompressor(factory)

        with pytest.raises(CompressionError, match="out of memory"):
            asyncio.run(lazy.get())
        assert not lazy.ready

        assert isinstance(asyncio.run(lazy.get()), ZstdCodec)
        assert len(attempts) == 2

    def test_cancelled_waiter_does_not_cancel_creation(self) -> None:
        """Cancelling one caller leaves the shared creation running."""

        def factory() -> ZstdCodec:
            time.sleep(0.05)
            return ZstdCodec()

        lazy = LazyCompressor(factory)

        async def run() -> ZstdCodec:
            impatient = asyncio.ensure_future(lazy.get())
            patient = asyncio.ensure_future(lazy.get())
            await asyncio.sleep(0)
            impatient.cancel()
            return await patient

        assert isinstance(asyncio.run(run()), ZstdCodec)
        assert lazy.ready

    def test_reset(self) -> None:
        lazy = LazyCompressor()
        first = asyncio.run(lazy.get())
        lazy.reset()

        assert not lazy.ready
        assert asyncio.run(lazy.get()) is not first

    def test_shared_instance(self) -> None:
        """get_compressor() always hands out the process-wide codec."""

        async def run() -> tuple[ZstdCodec, ZstdCodec]:
            return await asyncio.gather(get_compressor(), get_compressor())

        first, second = asyncio.run(run())
        assert first is second
        assert asyncio.run(get_compressor()) is first
