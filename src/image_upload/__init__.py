"""Image upload pipeline: store an image and its resized variants in S3."""

__version__ = "0.1.0"
