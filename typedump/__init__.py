"""Render reconstructed binary type models to source and script artifacts."""

__version__ = "1.0.0"

PRODUCT_NAME = "typedump"
COPYRIGHT = "Copyright (c) typedump contributors"
