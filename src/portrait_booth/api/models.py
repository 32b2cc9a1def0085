"""Pydantic models for the kiosk JSON API."""

from pydantic import BaseModel, ConfigDict, Field

from portrait_booth.domain.placement import FitMode


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RemoveBackgroundRequest(_CamelModel):
    """Raw capture to strip the background from."""

    image: str = Field(min_length=1)


class ComposeRequest(_CamelModel):
    """Captured subject plus the layout and identity to compose for."""

    user_image: str = Field(alias="userImage", min_length=1)
    layout_id: str = Field(alias="layoutId", min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    consent: bool = False
    frame_width: int | None = Field(default=None, alias="frameWidth", gt=0)
    frame_height: int | None = Field(default=None, alias="frameHeight", gt=0)
    fit_mode: FitMode | None = Field(default=None, alias="fitMode")


class ComposeResponse(_CamelModel):
    """Composed image and its storage metadata."""

    success: bool = True
    message: str = "Image composed successfully"
    final_image_data: str = Field(alias="finalImageData")
    local_path: str = Field(alias="localPath")
    storage_url: str | None = Field(default=None, alias="storageUrl")
    storage_id: str | None = Field(default=None, alias="storageId")
    placement: dict[str, int]


class RetakeRequest(_CamelModel):
    """Storage id of the composition to discard."""

    storage_id: str = Field(alias="storageId", min_length=1)


class RetakeResponse(_CamelModel):
    """Outcome of the two retake deletions."""

    success: bool
    message: str
    asset_deleted: bool = Field(alias="assetDeleted")
    record_deleted: bool = Field(alias="recordDeleted")
    errors: list[str] = Field(default_factory=list)
