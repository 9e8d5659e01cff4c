"""
StudyNotes — Block Schema
==========================

What:  The data shape of one content unit of a note, shared by the API
       (request validation, response serialization) and the editor library.

Metadata is a tagged union keyed by block family:

    checkbox-list          → CheckboxMetadata {kind: "checkbox", checked}
    image / video / audio  → MediaMetadata    {kind: "media", fileName, fileSize, fileType}
    everything else        → no metadata of its own

Converting a block to another type keeps whatever metadata it carried, so a
paragraph may legitimately hold checkbox or media metadata. Untagged payloads
(no "kind") are tagged from the block type first and from their keys second.

Blocks are immutable; editors replace them with model_copy(update=...).
"""

from typing import Annotated, Any, Dict, FrozenSet, Literal, Optional, Tuple, Union, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

BlockType = Literal[
    "paragraph",
    "heading-1",
    "heading-2",
    "heading-3",
    "bullet-list",
    "numbered-list",
    "checkbox-list",
    "code",
    "image",
    "video",
    "audio",
]

BLOCK_TYPES: Tuple[str, ...] = get_args(BlockType)

LIST_BLOCK_TYPES: FrozenSet[str] = frozenset({"bullet-list", "numbered-list", "checkbox-list"})
MEDIA_BLOCK_TYPES: FrozenSet[str] = frozenset({"image", "video", "audio"})

_MEDIA_KEYS = ("fileName", "fileSize", "fileType", "file_name", "file_size", "file_type")


class CheckboxMetadata(BaseModel):
    """State of a checkbox-list item."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["checkbox"] = "checkbox"
    checked: bool = False


class MediaMetadata(BaseModel):
    """Original file details of an uploaded image, video or audio payload."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["media"] = "media"
    file_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fileName", "file_name"),
        serialization_alias="fileName",
    )
    file_size: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("fileSize", "file_size"),
        serialization_alias="fileSize",
    )
    file_type: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("fileType", "file_type"),
        serialization_alias="fileType",
    )


BlockMetadata = Annotated[Union[CheckboxMetadata, MediaMetadata], Field(discriminator="kind")]


def metadata_kind_for(block_type: Optional[str]) -> Optional[str]:
    """Returns the metadata tag a block of this type owns, or None."""
    if block_type == "checkbox-list":
        return "checkbox"
    if block_type in MEDIA_BLOCK_TYPES:
        return "media"
    return None


def _kind_from_keys(raw: Dict[str, Any]) -> Optional[str]:
    if "checked" in raw:
        return "checkbox"
    if any(key in raw for key in _MEDIA_KEYS):
        return "media"
    return None


class Block(BaseModel):
    """
    One unit of document content.

    Wire format:
        {"id": "block-1", "type": "checkbox-list", "content": "Buy milk",
         "metadata": {"kind": "checkbox", "checked": true}}
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Opaque id, unique within a note")
    type: BlockType = Field(description="Block type")
    content: str = Field(description="Text, or a data URI / URL for media blocks")
    metadata: Optional[BlockMetadata] = Field(
        default=None,
        description="Type-specific metadata (checkbox state or media file details)",
    )

    @model_validator(mode="before")
    @classmethod
    def tag_metadata(cls, data: Any) -> Any:
        """Adds the union tag to legacy metadata mappings that lack one."""
        if not isinstance(data, dict):
            return data
        raw = data.get("metadata")
        if not isinstance(raw, dict) or "kind" in raw:
            return data
        kind = metadata_kind_for(data.get("type")) or _kind_from_keys(raw)
        tagged = dict(data)
        tagged["metadata"] = {**raw, "kind": kind} if kind else None
        return tagged

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase metadata keys."""
        return self.model_dump(mode="json", by_alias=True)
