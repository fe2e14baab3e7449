"""Recipe storage backend with a nutrition-lookup proxy."""

__version__ = "0.1.0"
