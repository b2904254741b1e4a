"""Supabase storage adapter."""

from dataclasses import dataclass

from supabase import Client

from wellness_tracker.services.storage import FileStorage


@dataclass
class SupabaseFileStorage(FileStorage):
    """Stores files in Supabase storage buckets."""

    client: Client

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Upload a file and return its public URL."""
        files = self.client.storage.from_(bucket)
        files.upload(path, data, {"content-type": content_type, "upsert": "true"})
        return files.get_public_url(path)

    def download(self, bucket: str, path: str) -> bytes:
        """Return the stored bytes."""
        return self.client.storage.from_(bucket).download(path)

    def remove(self, bucket: str, paths: list[str]) -> None:
        """Delete files from a bucket."""
        if paths:
            self.client.storage.from_(bucket).remove(paths)
