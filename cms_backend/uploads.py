"""
Storage abstraction for uploaded images: local disk and in-memory testing.
"""

from __future__ import annotations

import os
import random
import string
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Protocol

import aiofiles
import aiofiles.os

from cms_backend.errors import NotFoundError, StorageFailure, ValidationError

URL_PREFIX = "/uploads"
_BASE36 = string.digits + string.ascii_lowercase


class UploadStore(Protocol):
    """Defines the operations the API needs from upload storage."""

    async def put(self, filename: str, data: bytes) -> None:
        ...

    async def delete(self, filename: str) -> None:
        ...


def generate_filename(original_name: str) -> str:
    """``<epoch ms>-<9 base36 chars><original extension>``"""
    suffix = "".join(random.choices(_BASE36, k=9))
    extension = os.path.splitext(original_name or "")[1]
    return f"{int(time.time() * 1000)}-{suffix}{extension}"


def check_bare_filename(filename: str) -> str:
    if not filename or filename in (".", "..") or Path(filename).name != filename or "\\" in filename:
        raise ValidationError("Nome de arquivo inválido")
    return filename


async def save_image(
    uploads: UploadStore,
    *,
    original_name: str,
    content_type: str,
    data: bytes,
    allowed_types: Iterable[str],
    max_size: int,
) -> dict:
    """Validate an uploaded image, store it under a generated name and describe it."""
    if content_type not in list(allowed_types):
        raise ValidationError("Tipo de arquivo não permitido")
    if len(data) > max_size:
        raise ValidationError(f"Arquivo excede o tamanho máximo de {max_size} bytes")

    filename = generate_filename(original_name)
    await uploads.put(filename, data)
    return {
        "filename": filename,
        "original_name": original_name,
        "size": len(data),
        "url": f"{URL_PREFIX}/{filename}",
    }


class LocalUploadStore:
    def __init__(self, upload_dir: str | Path):
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def put(self, filename: str, data: bytes) -> None:
        path = self.upload_dir / check_bare_filename(filename)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise StorageFailure("Erro ao salvar arquivo") from e

    async def delete(self, filename: str) -> None:
        path = self.upload_dir / check_bare_filename(filename)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise NotFoundError("Arquivo não encontrado") from e
        except OSError as e:
            raise StorageFailure("Erro ao excluir arquivo") from e


@dataclass
class InMemoryUploadStore:
    """Test double for upload storage."""

    stored_objects: dict = field(default_factory=dict)

    async def put(self, filename: str, data: bytes) -> None:
        self.stored_objects[check_bare_filename(filename)] = data

    async def delete(self, filename: str) -> None:
        check_bare_filename(filename)
        if filename not in self.stored_objects:
            raise NotFoundError("Arquivo não encontrado")
        del self.stored_objects[filename]
