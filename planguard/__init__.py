"""planguard — policy checks for Terraform plans."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("planguard")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
