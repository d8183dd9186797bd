"""Package metadata and naming constants."""

from importlib.metadata import PackageNotFoundError, version

PACKAGE_NAME = "terraform-provider-ovh"
PACKAGE_NAME_PYTHON = PACKAGE_NAME.replace("-", "_")
DESCRIPTION = "OVH provider plugin: credential resolution, resource tables and OVH API handlers"

try:
    __version__ = version(PACKAGE_NAME)
except PackageNotFoundError:
    __version__ = "0.0.0"
VERSION = __version__

REPO_URL = "https://github.com/ovh/terraform-provider-ovh"
REPO_ISSUES_URL = f"{REPO_URL}/issues"
