"""
Core data structures (dataclasses) for Chunkvault.

All core data structures are defined as explicit dataclasses.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Literal, Optional, Tuple

from chunkvault.core.keys import derive_chunk_key

LogLevel = Literal["info", "success", "error"]
LogFunction = Callable[[str, LogLevel], None]
ErrorHandler = Callable[[str], None]

EntryState = Literal["absent", "ok", "corrupt"]


@dataclass
class Config:
    """Configuration for the host store limits and chunking behaviour."""

    # Host store limits (the advertised limits are hard ceilings)
    max_value_size: int = 4096  # characters per value
    value_headroom: int = 96  # reserved below max_value_size
    max_key_length: int = 128
    max_keys: int = 1024

    # Compression
    compression: Literal["none", "zstd"] = "none"
    zstd_level: int = 3

    # Concurrency (1 = sequential)
    write_concurrency: int = 1
    read_concurrency: int = 1

    # Logical entries this instance is responsible for (used by erase)
    known_names: Tuple[str, ...] = ("userShare", "walletId")

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(
                f"value_headroom ({self.value_headroom}) leaves no room below "
                f"max_value_size ({self.max_value_size})"
            )
        if self.compression not in ("none", "zstd"):
            raise ValueError(f"Unsupported compression: {self.compression}")
        if self.write_concurrency < 1 or self.read_concurrency < 1:
            raise ValueError("Concurrency must be at least 1")
        self.known_names = tuple(self.known_names)

    @property
    def chunk_size(self) -> int:
        """Maximum payload characters per chunk."""
        return self.max_value_size - self.value_headroom

    @property
    def encoding(self) -> str:
        """Metadata encoding tag for values written with this config."""
        return "plain" if self.compression == "none" else self.compression


@dataclass
class Chunk:
    """
    One bounded-size slice of a logical entry.

    Index Convention:
    - index is zero-based and contiguous within an entry
    - concatenating payloads by ascending index reproduces the stored text
    """

    name: str  # logical entry name
    index: int
    total_count: int
    payload: str

    @property
    def key(self) -> str:
        return derive_chunk_key(self.name, self.index)


@dataclass
class MetadataRecord:
    """Pointer record written after all chunks of an entry are stored."""

    total_chunks: int
    length: int  # length of the stored (encoded) text
    checksum: str  # xxhash32 hex of the stored (encoded) text
    encoding: str = "plain"  # "plain" or "zstd"
    version: int = 1


@dataclass
class EntryReport:
    """Result of inspecting one logical entry without reading it back."""

    name: str
    state: EntryState
    metadata: Optional[MetadataRecord] = None
    present_chunks: List[int] = field(default_factory=list)
    missing_chunks: List[int] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "state": self.state,
            "metadata": None
            if self.metadata is None
            else {
                "v": self.metadata.version,
                "total_chunks": self.metadata.total_chunks,
                "length": self.metadata.length,
                "checksum": self.metadata.checksum,
                "encoding": self.metadata.encoding,
            },
            "present_chunks": self.present_chunks,
            "missing_chunks": self.missing_chunks,
            "errors": self.errors,
        }
