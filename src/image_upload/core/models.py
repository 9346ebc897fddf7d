"""Shared data models for the image upload pipeline."""

import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError


SUCCESS_MESSAGE = "Image uploaded and processed successfully"


class CompressSpec(BaseModel):
    """A requested output size for one variant."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def label(self) -> str:
        return f"{self.width}x{self.height}"


class ImageResult(BaseModel):
    """Describes one stored artifact, original or variant."""

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    url: str


class UploadResult(BaseModel):
    """Aggregate outcome of one upload request."""

    model_config = ConfigDict(populate_by_name=True)

    original: ImageResult = Field(serialization_alias="original_image")
    variants: List[ImageResult] = Field(
        default_factory=list, serialization_alias="compressed_images"
    )
    message: str = SUCCESS_MESSAGE


class StorageConfig(BaseModel):
    """Connection settings for the S3 artifact store."""

    bucket_name: str
    region: str = "us-east-1"
    endpoint: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    @classmethod
    def from_env(cls, **overrides: Optional[str]) -> "StorageConfig":
        """
        Build a config from environment variables.

        Keyword overrides that are not None win over the environment.

        Environment Variables:
            S3_BUCKET_NAME: Target bucket (required)
            AWS_REGION: Bucket region (defaults to us-east-1)
            S3_ENDPOINT: Custom endpoint for MinIO/LocalStack style deployments
            AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: Static credentials
        """
        values = {
            "bucket_name": os.getenv("S3_BUCKET_NAME"),
            "region": os.getenv("AWS_REGION"),
            "endpoint": os.getenv("S3_ENDPOINT"),
            "access_key_id": os.getenv("AWS_ACCESS_KEY_ID"),
            "secret_access_key": os.getenv("AWS_SECRET_ACCESS_KEY"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values["bucket_name"]:
            raise ConfigurationError(
                "S3 bucket name is required (set S3_BUCKET_NAME or pass --bucket)"
            )

        return cls(**{k: v for k, v in values.items() if v})
