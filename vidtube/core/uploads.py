# ============================================================================
# FILE: vidtube/core/uploads.py
# ============================================================================
import os
import shutil
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import UploadFile

from vidtube.core.asset_store import remove_local_file


def stage_upload(upload: Optional[UploadFile], temp_dir: str) -> Optional[str]:
    """Copy an uploaded file to the temp directory and return its path"""
    if upload is None or not upload.filename:
        return None
    os.makedirs(temp_dir, exist_ok=True)
    _, ext = os.path.splitext(upload.filename)
    path = os.path.join(temp_dir, f"{uuid.uuid4().hex}{ext.lower()}")
    with open(path, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    return path


@contextmanager
def staged_uploads(temp_dir: str, *uploads: Optional[UploadFile]) -> Iterator[List[Optional[str]]]:
    """
    Stage uploads on disk for the duration of the block.

    Whatever is still on disk when the block exits (success or error) is
    removed, so validation failures never leave orphaned temp files.
    """
    paths: List[Optional[str]] = []
    try:
        for upload in uploads:
            paths.append(stage_upload(upload, temp_dir))
        yield paths
    finally:
        for path in paths:
            remove_local_file(path)
