import asyncio
import os
import shutil
import uuid
from typing import BinaryIO

from eventhub import constant_file
from eventhub.logger import get_logger
from eventhub.result import ErrorType, Result

logger = get_logger(__name__)


class FileStorageService:
    """Stores uploaded files under ``base_path`` and hands back relative locators.

    Locators look like ``/images/eventImages/<uuid>.png`` and are what the
    ``images.stored_path`` column keeps. Disk work runs in a worker thread.
    """

    def __init__(self, base_path: str = constant_file.upload_base_path):
        if not base_path:
            raise ValueError("base_path cannot be empty.")
        self.base_path = os.path.abspath(base_path)

    def _absolute(self, relative_path: str) -> str:
        path = os.path.abspath(os.path.join(self.base_path, relative_path.lstrip("/")))
        if os.path.commonpath([path, self.base_path]) != self.base_path:
            raise ValueError("Path escapes the storage directory.")
        return path

    # ------------------ Save ------------------
    async def save_file(self, file: BinaryIO, filename: str, sub_directory: str) -> Result[str]:
        if file is None:
            return Result.failure("File is empty or null.", ErrorType.INVALID_INPUT)

        extension = os.path.splitext(filename or "")[1].lower()
        relative_path = f"{sub_directory.strip('/')}/{uuid.uuid4()}{extension}"

        def write_blocking():
            absolute_path = self._absolute(relative_path)
            os.makedirs(os.path.dirname(absolute_path), exist_ok=True)
            file.seek(0)
            with open(absolute_path, "wb") as buffer:
                shutil.copyfileobj(file, buffer)

        try:
            await asyncio.to_thread(write_blocking)
        except ValueError as e:
            return Result.failure(str(e), ErrorType.INVALID_INPUT)
        except OSError as e:
            logger.error("file_save_failed", path=relative_path, error=str(e))
            return Result.failure("Failed to save image file.", ErrorType.FILE_SYSTEM_ERROR)

        return Result.success("/" + relative_path)

    # ------------------ Delete ------------------
    async def delete_file(self, relative_path: str) -> Result[bool]:
        if not relative_path:
            return Result.success(True)

        def delete_blocking():
            absolute_path = self._absolute(relative_path)
            if os.path.exists(absolute_path):
                os.remove(absolute_path)

        try:
            await asyncio.to_thread(delete_blocking)
        except ValueError as e:
            return Result.failure(str(e), ErrorType.INVALID_INPUT)
        except OSError as e:
            logger.error("file_delete_failed", path=relative_path, error=str(e))
            return Result.failure("An unexpected error occurred while deleting the file.", ErrorType.FILE_SYSTEM_ERROR)

        return Result.success(True)

    def exists(self, relative_path: str) -> bool:
        return os.path.exists(self._absolute(relative_path))
