from __future__ import annotations

import math
import os
import struct
import tempfile
from pathlib import Path

from star_catalog.context import CatalogContext
from star_catalog.errors import CatalogWriteError, error_summary
from star_catalog.model import CatalogBlock, StarRecord

DOUBLE_PRECISION_FLAG = 0xFD
NEXT_BLOCK_MARKER = 0xFE
GAP_MARKER = 0xFF
MAX_NAME_BYTES = 255


def quantize_magnitude(magnitude: float) -> int:
    """Tenths of a magnitude offset by -2.0, clamped into one byte."""
    return max(0, min(255, math.floor((magnitude + 2.0) * 10.0 + 0.5)))


def _trailer(block: CatalogBlock, record: StarRecord) -> bytes:
    if block is CatalogBlock.DEEP_SKY:
        number = record.deep_sky_id.signed_number if record.deep_sky_id else 0
        return struct.pack(">hB", number, record.messier_number)
    if block is CatalogBlock.HIPPARCOS:
        return struct.pack(">BH", record.hip_number >> 16, record.hip_number & 0xFFFF)
    if block is CatalogBlock.BRIGHT_STAR:
        return struct.pack(">H", record.bsc_number)
    return b""


def encode_record(record: StarRecord, block: CatalogBlock, double_precision: bool) -> bytes:
    coordinate_format = ">dd" if double_precision else ">ff"
    name_bytes = record.name.encode("utf-8") if record.name else b""
    if len(name_bytes) > MAX_NAME_BYTES:
        raise CatalogWriteError(f"Name too long for catalog entry: {record.name!r}")

    try:
        return b"".join(
            [
                struct.pack(">BBBB", record.flamsteed, record.bayer_rank, record.sub_index, record.constellation),
                struct.pack(coordinate_format, record.ra, record.dec),
                struct.pack(">ff", record.pm_ra, record.pm_dec),
                struct.pack(">B", quantize_magnitude(record.magnitude)),
                _trailer(block, record),
                struct.pack(">B", len(name_bytes)),
                name_bytes,
            ]
        )
    except struct.error as error:
        raise CatalogWriteError(f"Cannot encode {block.name} record: {error}") from error


def encode_catalog(context: CatalogContext) -> bytes:
    """Serialize the registry in key order.

    Gaps are only legal in the FK5 block. Each block change is announced by
    one 0xFE per category advanced, so an empty block shows up as an extra
    marker rather than being silently merged into its neighbour.
    """
    double_precision = context.config.double_precision
    output = bytearray()
    if double_precision:
        output.append(DOUBLE_PRECISION_FLAG)

    current_block = CatalogBlock.FK5
    for key in context.registry.keys():
        block = context.block_of(key)
        record = context.registry.get(key)

        if record is None:
            if block is not CatalogBlock.FK5:
                raise CatalogWriteError(f"Registry key {key} missing from dense {block.name} block")
            output.append(GAP_MARKER)
            continue

        while current_block < block:
            output.append(NEXT_BLOCK_MARKER)
            current_block = CatalogBlock(current_block + 1)

        output.extend(encode_record(record, block, double_precision))

    return bytes(output)


def write_catalog(context: CatalogContext, path: Path) -> int:
    """Write the encoded catalog atomically; returns the byte count."""
    payload = encode_catalog(context)
    temp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "wb", delete=False, dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(payload)
        os.replace(temp_path, path)
    except OSError as error:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise CatalogWriteError(f"Failed writing {path}: {error_summary(error)}") from error

    return len(payload)
