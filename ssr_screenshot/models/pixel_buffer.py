"""Raw pixel data passed between the codec, capture session and comparator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

CHANNELS = 4  # RGBA


class PixelBuffer(BaseModel):
    """Decoded RGBA image: row-major, 4 bytes per pixel."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    data: bytes = Field(repr=False)

    @model_validator(mode="after")
    def check_data_length(self) -> "PixelBuffer":
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ValueError(
                f"Pixel data has {len(self.data)} bytes, expected {expected} "
                f"for a {self.width}x{self.height} RGBA image"
            )
        return self

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def solid(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        """Build a buffer filled with a single colour."""
        return cls(width=width, height=height, data=bytes(rgba) * (width * height))


class CaptureResult(BaseModel):
    """A screenshot and the document it was taken from."""

    model_config = ConfigDict(frozen=True)

    buffer: PixelBuffer
    document_uri: str
