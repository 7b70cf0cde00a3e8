import asyncio
import posixpath
from datetime import datetime, timezone
from io import BytesIO
from typing import List, Optional

from minio import Minio
from minio.commonconfig import CopySource
from minio.error import S3Error

from cms_dashboard.configs.settings import settings
from cms_dashboard.schemas.media import MediaFileDescriptor, MediaFileInfo, MediaListResponse, MoveFileResponse
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "NotFound"}


def sanitize_path(path: Optional[str]) -> str:
    """Strip blanks and surrounding slashes from a store path"""
    if not path or not path.strip():
        return ""
    return path.strip().strip("/")


def unique_file_name(file_name: str, now: Optional[datetime] = None) -> str:
    """'report.pdf' -> 'report_20240115103000.pdf' so uploads never overwrite"""
    base_name = posixpath.basename((file_name or "").replace("\\", "/"))
    stem, ext = posixpath.splitext(base_name)
    timestamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")
    return f"{stem}_{timestamp}{ext}"


class MediaStoreService:
    """Binary media store backed by a single MinIO bucket.

    MinIO calls are blocking, so every call is pushed to a worker thread.
    Move is a server-side copy followed by a delete, not an atomic rename.
    """

    def __init__(self, client: Optional[Minio] = None, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.MINIO_BUCKET
        self.client = client or Minio(
            endpoint=settings.MINIO_URL.replace("http://", "").replace("https://", ""),
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SSL,
        )

    @staticmethod
    def media_url(path: str) -> str:
        return f"{settings.DASHBOARD_MEDIA_URL_PREFIX.rstrip('/')}/{path}"

    async def ensure_bucket(self) -> None:
        exists = await asyncio.to_thread(self.client.bucket_exists, self.bucket_name)
        if not exists:
            await asyncio.to_thread(self.client.make_bucket, self.bucket_name)
            logger.info(f"Created media bucket {self.bucket_name}")

    async def is_available(self) -> bool:
        try:
            return bool(await asyncio.to_thread(self.client.bucket_exists, self.bucket_name))
        except Exception as e:
            logger.error(f"Media store check failed: {e}")
            return False

    async def upload(
        self,
        data: bytes,
        file_name: str,
        content_type: Optional[str] = None,
        path: Optional[str] = None,
    ) -> MediaFileDescriptor:
        directory = sanitize_path(path)
        stored_name = unique_file_name(file_name)
        full_path = f"{directory}/{stored_name}" if directory else stored_name
        mime_type = content_type or "application/octet-stream"

        logger.info(f"Uploading {file_name} ({len(data)} bytes) to {full_path}")

        def _upload():
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=full_path,
                data=BytesIO(data),
                length=len(data),
                content_type=mime_type,
            )

        await asyncio.to_thread(_upload)
        stat = await self._stat(full_path)

        return MediaFileDescriptor(
            path=full_path,
            name=stored_name,
            size=len(data),
            mime_type=mime_type,
            created_utc=(stat.last_modified if stat and stat.last_modified else datetime.now(timezone.utc)),
            url=self.media_url(full_path),
        )

    async def list_files(self, path: Optional[str] = None) -> MediaListResponse:
        directory = sanitize_path(path)
        prefix = f"{directory}/" if directory else None

        def _list():
            return list(self.client.list_objects(self.bucket_name, prefix=prefix, recursive=False))

        objects = await asyncio.to_thread(_list)
        files: List[MediaFileInfo] = [
            MediaFileInfo(
                path=obj.object_name,
                name=posixpath.basename(obj.object_name),
                size=obj.size or 0,
                last_modified=obj.last_modified or datetime.now(timezone.utc),
                url=self.media_url(obj.object_name),
            )
            for obj in objects
            if not obj.is_dir
        ]
        return MediaListResponse(path=directory, files=files, total_count=len(files))

    async def get_file_info(self, path: str) -> Optional[MediaFileInfo]:
        stat = await self._stat(path)
        if stat is None:
            return None
        return MediaFileInfo(
            path=path,
            name=posixpath.basename(path),
            size=stat.size or 0,
            last_modified=stat.last_modified,
            url=self.media_url(path),
        )

    async def delete_file(self, path: str) -> bool:
        """Delete a file; False when there was nothing to delete"""
        if await self._stat(path) is None:
            return False
        await asyncio.to_thread(self.client.remove_object, self.bucket_name, path)
        logger.info(f"Deleted media file {path}")
        return True

    async def move_file(self, source_path: str, destination_path: str) -> Optional[MoveFileResponse]:
        """Copy then delete; None when the source does not exist"""
        if await self._stat(source_path) is None:
            return None

        def _copy():
            self.client.copy_object(
                self.bucket_name,
                destination_path,
                CopySource(self.bucket_name, source_path),
            )

        await asyncio.to_thread(_copy)
        await asyncio.to_thread(self.client.remove_object, self.bucket_name, source_path)
        logger.info(f"Moved media file {source_path} -> {destination_path}")

        return MoveFileResponse(
            old_path=source_path,
            new_path=destination_path,
            url=self.media_url(destination_path),
        )

    async def _stat(self, path: str):
        try:
            return await asyncio.to_thread(self.client.stat_object, self.bucket_name, path)
        except S3Error as e:
            if e.code in MISSING_OBJECT_CODES:
                return None
            raise
