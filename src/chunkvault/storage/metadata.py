"""
Metadata record management for Chunkvault entries.
"""

import json
from typing import Optional

from chunkvault.core.contracts import MetadataRecord
from chunkvault.storage.codec import ENCODINGS, compute_checksum


class MetadataManager:
    """Builds, serialises and parses the per-entry metadata record."""

    SCHEMA_VERSION = 1

    @staticmethod
    def create_metadata(stored_text: str, total_chunks: int, encoding: str = "plain") -> MetadataRecord:
        """
        Create a metadata record describing a stored text.

        Args:
            stored_text: Encoded text that was split into chunks
            total_chunks: Number of chunks written
            encoding: Value encoding ("plain" or "zstd")

        Returns:
            MetadataRecord object
        """
        return MetadataRecord(
            total_chunks=total_chunks,
            length=len(stored_text),
            checksum=compute_checksum(stored_text),
            encoding=encoding,
            version=MetadataManager.SCHEMA_VERSION,
        )

    @staticmethod
    def dump_metadata(record: MetadataRecord) -> str:
        """Serialise a metadata record to compact JSON."""
        return json.dumps(
            {
                "v": record.version,
                "total_chunks": record.total_chunks,
                "length": record.length,
                "checksum": record.checksum,
                "encoding": record.encoding,
            },
            separators=(",", ":"),
        )

    @staticmethod
    def load_metadata(raw: str) -> MetadataRecord:
        """
        Parse a metadata record.

        Args:
            raw: JSON text read from the metadata key

        Returns:
            MetadataRecord object

        Raises:
            ValueError: If the record is malformed or from an unknown schema
        """
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Metadata is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Metadata root is not a JSON object")

        version = data.get("v")
        if version != MetadataManager.SCHEMA_VERSION:
            raise ValueError(f"Unsupported metadata version: {version!r}")

        total_chunks = data.get("total_chunks")
        length = data.get("length")
        checksum = data.get("checksum")
        encoding = data.get("encoding", "plain")

        if not isinstance(total_chunks, int) or isinstance(total_chunks, bool) or total_chunks < 1:
            raise ValueError(f"Invalid total_chunks: {total_chunks!r}")
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            raise ValueError(f"Invalid length: {length!r}")
        if not isinstance(checksum, str) or not checksum:
            raise ValueError(f"Invalid checksum: {checksum!r}")
        if encoding not in ENCODINGS:
            raise ValueError(f"Unsupported encoding: {encoding!r}")

        return MetadataRecord(
            total_chunks=total_chunks,
            length=length,
            checksum=checksum,
            encoding=encoding,
            version=version,
        )

    @staticmethod
    def try_load_metadata(raw: Optional[str]) -> Optional[MetadataRecord]:
        """Parse a metadata record, returning None if absent or malformed."""
        if raw is None:
            return None
        try:
            return MetadataManager.load_metadata(raw)
        except ValueError:
            return None

    @staticmethod
    def validate_payload(record: MetadataRecord, stored_text: str) -> bool:
        """
        Check reassembled text against the record.

        Verifies:
        - Length matches record.length
        - xxhash32 checksum matches record.checksum

        Returns:
            True if both match, False otherwise
        """
        if len(stored_text) != record.length:
            return False
        return compute_checksum(stored_text) == record.checksum
