"""Models for capture metadata documents."""

from pydantic import BaseModel, ConfigDict, field_validator

REQUIRED_METADATA_FIELDS = ("photo_id", "side_flag", "bend", "timestamp")


class CaptureMetadata(BaseModel):
    """Metadata the capture device sends alongside each photo.

    Required fields are validated; any additional fields the device includes
    are kept and stored with the document.
    """

    model_config = ConfigDict(extra="allow")

    photo_id: str
    side_flag: str | int
    bend: str | int | float
    timestamp: str | int | float
    session_id: str | None = None

    @field_validator("photo_id", mode="before")
    @classmethod
    def _photo_id_as_text(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(*REQUIRED_METADATA_FIELDS)
    @classmethod
    def _not_blank(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_document(self, session_id: str) -> dict[str, object]:
        """Return the stored JSON document tagged with the resolved session."""
        document = self.model_dump(mode="json", exclude_none=True)
        document["session_id"] = session_id
        return document
