"""
VideoAPI - Media Upload Service

Uploaded files are stored as <final>/<folder>/<escaped id><ext>, where folder
spreads ids over 256 directories (FNV-1a hash of the id) and the escaped id is
the URL-safe base64 of the id. A <escaped id>.meta JSON file next to it keeps
the plain form fields sent with the upload.
"""
import asyncio
import base64
import glob
import json
import logging
import os
import shutil
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import aiofiles

from app.crud.errors import (
    MediaRemovalError,
    MimeTypeNotSupportedError,
    MultipartNameError,
    MultipartNeedsContentTypeError,
    MultipartNoFileError,
    MultipartTooManyFilesError,
)
from app.policy.base import PRODUCERS, WRITERS, require_role
from app.schemas.media import Media, MediaUploaded
from app.services.auth import Claims
from app.store.sqlresource import Resource

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
FNV_OFFSET = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
FNV_MASK = 0xFFFFFFFFFFFFFFFF


def id_folder(media_id: str) -> str:
    """Low byte of the 64-bit FNV-1a hash of the id, as a three digit folder name."""
    value = FNV_OFFSET
    for byte in media_id.encode():
        value ^= byte
        value = (value * FNV_PRIME) & FNV_MASK
    return f"{value & 0xFF:03d}"


def escape_id(media_id: str) -> str:
    return base64.urlsafe_b64encode(media_id.encode()).decode()


class MediaService:
    """Stores the file behind a media record and keeps its media_url in sync."""

    def __init__(
        self,
        unpoliced: Resource[Media],
        tmp_folder: str,
        final_folder: str,
        mime_types: Dict[str, str],
        ffmpeg_path: str = "",
    ):
        for ext in mime_types.values():
            if not ext.startswith("."):
                raise ValueError("mimetype extensions must begin with `.`")
        self.unpoliced = unpoliced
        self.tmp_folder = tmp_folder
        self.final_folder = final_folder
        self.mime_types = dict(mime_types)
        self.ffmpeg_path = ffmpeg_path

    def check_mime_type(self, content_type: str) -> str:
        for media_type, ext in self.mime_types.items():
            if content_type.startswith(media_type):
                return ext
        raise MimeTypeNotSupportedError(f"mime type {content_type} not supported")

    def _prev_files(self, folder: str, escaped: str) -> List[str]:
        return glob.glob(os.path.join(self.final_folder, folder, f"{escaped}.*"))

    def _meta_file(self, folder: str, escaped: str) -> str:
        return os.path.join(self.final_folder, folder, f"{escaped}.meta")

    # ============================================================
    # Upload
    # ============================================================

    async def upload(self, media_id: str, form: Any, claims: Claims) -> bytes:
        """
        Attach the single file of a multipart form to an existing record.

        Plain form fields are kept in the .meta file only.
        """
        require_role(claims, "upload", *PRODUCERS, resource="media")

        params: Dict[str, str] = {"id": media_id}
        upload = None
        for name, value in form.multi_items():
            if not name:
                raise MultipartNameError()
            if isinstance(value, str):
                params[name] = unquote(value)
                continue
            if upload is not None:
                raise MultipartTooManyFilesError()
            upload = value
        if upload is None:
            raise MultipartNoFileError()
        if not upload.content_type:
            raise MultipartNeedsContentTypeError()
        ext = self.check_mime_type(upload.content_type)

        folder = id_folder(media_id)
        escaped = escape_id(media_id)
        tmp_path = await self._save_tmp_file(escaped, upload)
        try:
            if self.ffmpeg_path and ext.lower() == ".avi":
                tmp_path, ext = await self._transcode(tmp_path, ext)
            media_url = await self._commit(media_id, folder, escaped, ext, tmp_path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        params["media_url"] = media_url
        await self._write_meta(folder, escaped, params)
        logger.info(f"Stored media for '{media_id}' at {media_url}")
        return MediaUploaded(id=media_id, media_url=media_url).model_dump_json().encode()

    async def _save_tmp_file(self, escaped: str, upload: Any) -> str:
        os.makedirs(self.tmp_folder, exist_ok=True)
        tmp_path = os.path.join(self.tmp_folder, escaped)
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                while chunk := await upload.read(CHUNK_SIZE):
                    await f.write(chunk)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        return tmp_path

    async def _transcode(self, tmp_path: str, ext: str):
        """Remux an .avi upload to .mp4; keeps the original file if ffmpeg fails."""
        out_path = f"{tmp_path}.mp4"
        try:
            process = await asyncio.create_subprocess_exec(
                self.ffmpeg_path, "-fflags", "+genpts", "-i", tmp_path,
                "-c:v", "copy", "-c:a", "copy", "-y", out_path,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await process.wait()
        except OSError as e:
            logger.warning(f"ffmpeg could not be started: {e}")
            return tmp_path, ext
        if returncode != 0:
            logger.warning(f"ffmpeg failed with exit code {returncode} for {tmp_path}")
            if os.path.exists(out_path):
                os.remove(out_path)
            return tmp_path, ext
        logger.info(f"ffmpeg transcoded {tmp_path} to {out_path}")
        os.remove(tmp_path)
        return out_path, ".mp4"

    async def _commit(self, media_id: str, folder: str, escaped: str, ext: str, tmp_path: str) -> str:
        """
        Replace the stored file and record the new media_url.

        Previous files are renamed to .old first; they are deleted once the
        record is updated and restored if anything fails.
        """
        target = os.path.join(self.final_folder, folder)
        os.makedirs(target, exist_ok=True)
        renamed: Dict[str, str] = {}
        committed = False
        try:
            for match in self._prev_files(folder, escaped):
                os.rename(match, match + ".old")
                renamed[match] = match + ".old"

            final_name = f"{escaped}{ext}"
            final_path = os.path.join(target, final_name)
            shutil.move(tmp_path, final_path)
            media_url = f"{folder}/{final_name}"
            try:
                await self.unpoliced.put(media_id, Media(media_url=media_url))
            except Exception:
                os.remove(final_path)
                raise
            committed = True
            return media_url
        finally:
            for original, old in renamed.items():
                if committed:
                    os.remove(old)
                else:
                    os.rename(old, original)

    async def _write_meta(self, folder: str, escaped: str, params: Dict[str, str]) -> None:
        meta_path = self._meta_file(folder, escaped)
        try:
            async with aiofiles.open(meta_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(params, indent=2, ensure_ascii=False))
        except OSError as e:
            logger.warning(f"Could not write {meta_path}: {e}")

    # ============================================================
    # Delete
    # ============================================================

    async def delete(self, media_id: str, media_only: bool, claims: Claims) -> None:
        """Delete the record and its files, or only the files when media_only."""
        require_role(claims, "delete", *WRITERS, resource="media")
        if not media_only:
            await self.unpoliced.delete(media_id)
        self._remove_files(id_folder(media_id), escape_id(media_id))

    def _remove_files(self, folder: str, escaped: str) -> None:
        failed: Optional[OSError] = None
        for match in self._prev_files(folder, escaped):
            try:
                os.remove(match)
            except OSError as e:
                logger.error(f"Could not remove {match}: {e}")
                failed = failed or e
        if failed is not None:
            raise MediaRemovalError() from failed
