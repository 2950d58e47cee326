"""Looking up k0sctl releases from the GitHub releases API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import urlopen

from packaging.version import InvalidVersion, Version

TIMEOUT = 10.0
LATEST_RELEASE_URL = "https://api.github.com/repos/k0sproject/k0sctl/releases/latest"
RELEASES_URL = "https://api.github.com/repos/k0sproject/k0sctl/releases"


class ReleaseLookupError(Exception):
    """Raised when release information cannot be fetched or understood."""


@dataclass(frozen=True)
class Asset:
    """A downloadable file attached to a release."""

    name: str
    url: str


@dataclass(frozen=True)
class Release:
    """A published release."""

    url: str = ""
    tag_name: str = ""
    prerelease: bool = False
    assets: tuple[Asset, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Release:
        """Build a release from a GitHub API release object."""
        return cls(
            url=data.get("html_url", ""),
            tag_name=data.get("tag_name", ""),
            prerelease=bool(data.get("prerelease", False)),
            assets=tuple(
                Asset(name=a.get("name", ""), url=a.get("browser_download_url", ""))
                for a in data.get("assets") or ()
            ),
        )

    def is_newer(self, other: str) -> bool:
        """Tell whether this release's version is greater than *other*."""
        try:
            return parse_version(self.tag_name) > parse_version(other)
        except ValueError:
            return False


def parse_version(text: str) -> Version:
    """Parse a version string such as ``v1.2.3``; raise ValueError if invalid."""
    try:
        return Version(text.strip())
    except InvalidVersion as err:
        raise ValueError(f"invalid version {text!r}") from err


def fetch_json(url: str) -> Any:
    """GET *url* and return the decoded JSON body."""
    try:
        with urlopen(url, timeout=TIMEOUT) as response:
            status = response.status
            body = response.read()
    except HTTPError as err:
        raise ReleaseLookupError(f"backend returned http {err.code} for {url}") from err
    except URLError as err:
        raise ReleaseLookupError(f"request to {url} failed: {err.reason}") from err
    if status != 200:
        raise ReleaseLookupError(f"backend returned http {status} for {url}")
    try:
        return json.loads(body)
    except ValueError as err:
        raise ReleaseLookupError(f"invalid response from {url}: {err}") from err


def fetch_latest_release() -> Release:
    """Return the release GitHub marks as latest."""
    return Release.from_dict(fetch_json(LATEST_RELEASE_URL))


def fetch_latest_stable_release() -> Release:
    """Return the non-prerelease release with the highest version."""
    candidates = []
    for data in fetch_json(RELEASES_URL):
        release = Release.from_dict(data)
        if release.prerelease:
            continue
        try:
            candidates.append((parse_version(release.tag_name), release))
        except ValueError:
            continue
    if not candidates:
        raise ReleaseLookupError("no release found")
    return max(candidates, key=lambda pair: pair[0])[1]


def latest_release(preok: bool) -> Release:
    """Return the latest release, skipping prereleases unless *preok*."""
    try:
        release = fetch_latest_release()
    except ReleaseLookupError as err:
        raise ReleaseLookupError(f"failed to fetch the latest release: {err}") from err

    if release.prerelease and not preok:
        try:
            release = fetch_latest_stable_release()
        except ReleaseLookupError as err:
            raise ReleaseLookupError(
                f"failed to fetch the latest non-prerelease release: {err}"
            ) from err
    return release