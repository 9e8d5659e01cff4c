"""
StudyNotes — Media File Reading
================================

What:  Turns a local image/video/audio file into the payload of a media block:
       a base64 data URI plus its file metadata.
How:   1. Reject non-media block types, declared MIME types outside the
          block's family and oversize files (stat, no read)
       2. Read the bytes with aiofiles so the event loop never blocks
       3. Take the declared MIME type, or sniff it from the file header with
          python-magic when none is declared
       4. Require the MIME family to match the block (image/*, video/*, audio/*)
Who:   EditorSession.upload_media, which then calls EditorState.attach_media.

All rejections are ValidationError with a user-facing message and happen
before any state change or upload.
"""

import base64
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import aiofiles
import aiofiles.os

from studynotes.config import settings
from studynotes.exceptions import ValidationError
from studynotes.schemas.block import MEDIA_BLOCK_TYPES, MediaMetadata

logger = logging.getLogger(__name__)

# Enough of the header for libmagic to identify common media containers
SNIFF_BYTES = 2048

_WRONG_TYPE_MESSAGES = {
    "image": "Please select an image file",
    "video": "Please select a video file",
    "audio": "Please select an audio file",
}


def sniff_mime_type(header: bytes) -> str:
    """MIME type of a file from its leading bytes (libmagic signatures)."""
    import magic

    return magic.from_buffer(header, mime=True)


def _check_family(mime_type: str, block_type: str) -> None:
    if not mime_type.startswith(f"{block_type}/"):
        raise ValidationError(
            message=_WRONG_TYPE_MESSAGES[block_type],
            field="file",
            context={"mime_type": mime_type, "block_type": block_type},
        )


async def read_media_file(
    path: Union[str, Path],
    block_type: str,
    mime_type: Optional[str] = None,
    max_size: Optional[int] = None,
) -> Tuple[str, MediaMetadata]:
    """
    Read `path` for a block of `block_type`.

    Args:
        path:       File to embed
        block_type: "image", "video" or "audio"
        mime_type:  MIME type reported by the file picker, if any
        max_size:   Size limit in bytes (default: settings.max_media_size)

    Returns:
        (data URI, MediaMetadata with file name, size and MIME type)

    Raises:
        ValidationError: wrong block type, unreadable file, file too large,
                         or MIME type outside the block's family
    """
    if block_type not in MEDIA_BLOCK_TYPES:
        raise ValidationError(
            message=f"{block_type} blocks cannot hold media",
            field="type",
        )

    path = Path(path)
    limit = max_size if max_size is not None else settings.max_media_size

    if mime_type:
        _check_family(mime_type, block_type)

    try:
        stat = await aiofiles.os.stat(path)
        if stat.st_size > limit:
            raise ValidationError(
                message=(
                    f"File size ({stat.st_size / (1024 * 1024):.1f}MB) exceeds "
                    f"maximum of {limit / (1024 * 1024):.0f}MB."
                ),
                field="file",
                context={"max_size": limit, "actual_size": stat.st_size},
            )
        async with aiofiles.open(path, "rb") as f:
            data = await f.read()
    except OSError as e:
        logger.warning("Media file %s unreadable: %s", path, str(e))
        raise ValidationError(
            message="Could not read the selected file",
            field="file",
            context={"path": str(path), "error": str(e)},
        ) from e

    detected = mime_type
    if not detected:
        detected = sniff_mime_type(data[:SNIFF_BYTES])
        _check_family(detected, block_type)

    encoded = base64.b64encode(data).decode("ascii")
    metadata = MediaMetadata(file_name=path.name, file_size=len(data), file_type=detected)
    logger.debug("Read %s (%d bytes, %s)", path.name, len(data), detected)
    return f"data:{detected};base64,{encoded}", metadata
