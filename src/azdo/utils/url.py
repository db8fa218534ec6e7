"""
Azure DevOps organization URL utilities.
"""

from urllib.parse import urlparse

_VISUALSTUDIO_SUFFIX = ".visualstudio.com"
_DEV_AZURE_HOST = "dev.azure.com"


def organization_from_url(url: str) -> str:
    """
    Extract the organization name from an Azure DevOps URL.

    Supports ``https://dev.azure.com/<org>`` and
    ``https://<org>.visualstudio.com``.

    Args:
        url: Organization URL

    Returns:
        Organization name in lower case

    Raises:
        ValueError: If the URL is not an Azure DevOps organization URL
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"invalid organization URL {url!r}")

    host = parsed.hostname.lower()
    if host == _DEV_AZURE_HOST:
        segments = [s for s in parsed.path.split("/") if s]
        if not segments:
            raise ValueError(f"organization missing in URL {url!r}")
        return segments[0].lower()

    if host.endswith(_VISUALSTUDIO_SUFFIX):
        name = host[: -len(_VISUALSTUDIO_SUFFIX)]
        if name and "." not in name:
            return name

    raise ValueError(f"not an Azure DevOps organization URL {url!r}")


def normalize_organization_url(url: str) -> str:
    """Strip whitespace and trailing slashes from an organization URL"""
    return url.strip().rstrip("/")
