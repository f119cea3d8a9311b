"""zix installer: fetch, verify and deploy the zix version manager."""

__version__ = "1.0.0"
