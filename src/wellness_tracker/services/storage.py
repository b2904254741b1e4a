"""File storage interface shared by upload features."""

from typing import Protocol


class FileStorage(Protocol):
    """Interface for bucket based object storage."""

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store bytes at a path and return the public URL."""

    def download(self, bucket: str, path: str) -> bytes:
        """Return the bytes stored at a path."""

    def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete objects from a bucket."""
