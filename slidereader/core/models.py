"""
Pydantic models for extracted presentation content.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Relationship(BaseModel):
    """A pointer from one slide part to another archive part."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Relationship id referenced from the slide XML")
    type: str = Field(default="", description="Relationship type URI")
    target: str = Field(..., description="Target path, usually relative to the slide")
    external: bool = Field(
        default=False, description="True when TargetMode is External"
    )


class TextElement(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    content: str


class ImageElement(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    path: str = Field(..., description="Durable path of the normalized image")


ContentElement = Annotated[
    Union[TextElement, ImageElement], Field(discriminator="type")
]


class Slide(BaseModel):
    """Ordered content of one slide, keyed by its number in the archive."""

    model_config = ConfigDict(populate_by_name=True)

    number: int = Field(..., gt=0, alias="slideNumber")
    content: list[ContentElement] = Field(default_factory=list)


class NormalizedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path: str = Field(..., description="Archive-internal source entry")
    output_path: str = Field(..., description="Durable output file path")
    format: str = Field(default="JPEG", description="Encoding of the output bytes")
