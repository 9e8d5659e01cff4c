"""
StudyNotes — Media Reading Tests
=================================

What we test:
    ✅ Declared MIME types must match the block's family
    ✅ Undeclared MIME types are sniffed from the file header
    ✅ Size limit, unreadable files and directories
    ✅ A declared MIME type outside the family is rejected before reading
    ✅ Data URI and metadata of accepted files
"""

import base64
from unittest.mock import patch

import pytest

from studynotes.editor.media import read_media_file
from studynotes.exceptions import ValidationError
from studynotes.schemas.block import MediaMetadata

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class TestReadMediaFile:

    @pytest.mark.asyncio
    async def test_accepts_matching_declared_type(self, tmp_path):
        path = tmp_path / "diagram.png"
        path.write_bytes(PNG_HEADER)

        uri, metadata = await read_media_file(path, "image", mime_type="image/png")

        assert uri == "data:image/png;base64," + base64.b64encode(PNG_HEADER).decode()
        assert metadata == MediaMetadata(
            file_name="diagram.png", file_size=len(PNG_HEADER), file_type="image/png"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("block_type, mime, message", [
        ("image", "video/mp4", "Please select an image file"),
        ("video", "audio/mpeg", "Please select a video file"),
        ("audio", "application/pdf", "Please select an audio file"),
    ])
    async def test_rejects_other_families(self, tmp_path, block_type, mime, message):
        path = tmp_path / "file.bin"
        path.write_bytes(b"data")

        with pytest.raises(ValidationError) as exc_info:
            await read_media_file(path, block_type, mime_type=mime)
        assert exc_info.value.message == message
        assert exc_info.value.field == "file"

    @pytest.mark.asyncio
    async def test_sniffs_type_when_not_declared(self, tmp_path):
        path = tmp_path / "photo"
        path.write_bytes(PNG_HEADER)

        with patch("studynotes.editor.media.sniff_mime_type", return_value="image/png") as sniff:
            uri, metadata = await read_media_file(path, "image")

        sniff.assert_called_once_with(PNG_HEADER)
        assert uri.startswith("data:image/png;base64,")
        assert metadata.file_type == "image/png"

    @pytest.mark.asyncio
    async def test_sniffed_non_media_is_rejected(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"just text")

        with patch("studynotes.editor.media.sniff_mime_type", return_value="text/plain"):
            with pytest.raises(ValidationError, match="Please select a video file"):
                await read_media_file(path, "video")

    @pytest.mark.asyncio
    async def test_oversize_file_rejected_before_reading(self, tmp_path):
        path = tmp_path / "big.mp4"
        path.write_bytes(b"\x00" * 2048)

        with pytest.raises(ValidationError, match="exceeds"):
            await read_media_file(path, "video", mime_type="video/mp4", max_size=1024)

    @pytest.mark.asyncio
    async def test_missing_file_rejected(self, tmp_path):
        with pytest.raises(ValidationError, match="Could not read"):
            await read_media_file(tmp_path / "nope.png", "image", mime_type="image/png")

    @pytest.mark.asyncio
    async def test_non_media_block_type_rejected(self, tmp_path):
        path = tmp_path / "a.png"
        path.write_bytes(PNG_HEADER)
        with pytest.raises(ValidationError):
            await read_media_file(path, "paragraph", mime_type="image/png")

    @pytest.mark.asyncio
    async def test_directory_rejected(self, tmp_path):
        folder = tmp_path / "photo.png"
        folder.mkdir()
        with pytest.raises(ValidationError, match="Could not read"):
            await read_media_file(folder, "image", mime_type="image/png")

    @pytest.mark.asyncio
    async def test_permission_denied_rejected(self, tmp_path):
        path = tmp_path / "locked.png"
        path.write_bytes(PNG_HEADER)

        denied = PermissionError(13, "Permission denied")
        with patch("studynotes.editor.media.aiofiles.open", side_effect=denied):
            with pytest.raises(ValidationError) as exc_info:
                await read_media_file(path, "image", mime_type="image/png")
        assert exc_info.value.message == "Could not read the selected file"
        assert exc_info.value.field == "file"

    @pytest.mark.asyncio
    async def test_declared_wrong_family_rejected_without_reading(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"\x00" * 64)

        with patch("studynotes.editor.media.aiofiles.open") as opener, \
             patch("studynotes.editor.media.sniff_mime_type") as sniff:
            with pytest.raises(ValidationError, match="Please select an image file"):
                await read_media_file(path, "image", mime_type="video/mp4")

        opener.assert_not_called()
        sniff.assert_not_called()
