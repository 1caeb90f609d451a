"""
Package resolution logic

This module handles:
- Mapping a requested Ember version to a builder compatibility tag
- Looking up the addon in the npm registry
- Checking that the package is actually an addon
"""

import json
import logging
import re
from typing import Optional
from urllib.parse import quote

import httpx

from addon_api.addon_request import AddonRequest, ResolvedAddon
from addon_api.errors import (
    InvalidAddon,
    RegistryError,
    RegistryParseError,
    UnsupportedVersion,
)

log = logging.getLogger("addon_api.resolver")


def resolve_builder_ember_version(
    ember_version: str, builder_ember_versions: dict[str, str]
) -> str:
    """Return the tag of the first builder whose pattern matches.

    Args:
        ember_version: Requested Ember version, e.g. "2.18.0"
        builder_ember_versions: Ordered mapping of tag to regular expression

    Returns:
        The compatibility tag, e.g. "2-18"

    Raises:
        UnsupportedVersion: if no pattern matches
    """
    for tag, pattern in builder_ember_versions.items():
        if re.search(pattern, ember_version):
            return tag

    supported = '", "'.join(builder_ember_versions.keys())
    raise UnsupportedVersion(
        f'No support for ember version "{ember_version}".\n'
        f'Supported versions: "{supported}"'
    )


def is_valid_addon(npm_data, keyword: str = "ember-addon") -> bool:
    """Check whether registry metadata describes an addon."""
    if not isinstance(npm_data, dict):
        return False
    if not npm_data.get("version"):
        return False
    keywords = npm_data.get("keywords")
    if not isinstance(keywords, list):
        return False
    return keyword in keywords


def registry_path(addon: str, addon_version: str) -> str:
    # scoped packages keep the "@" but their slash must be encoded
    return "/" + quote(addon, safe="@") + "/" + quote(addon_version, safe="")


class PackageResolver:
    """Resolves an addon request against the registry and builder table"""

    def __init__(
        self,
        registry_url: str,
        builder_ember_versions: dict[str, str],
        keyword: str = "ember-addon",
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.registry_url = registry_url.rstrip("/")
        self.builder_ember_versions = builder_ember_versions
        self.keyword = keyword
        self.timeout = timeout
        self.client = client

    async def resolve(self, addon_request: AddonRequest) -> ResolvedAddon:
        """
        Resolve an addon request.

        The Ember version is resolved first so that unsupported versions
        never reach the registry.

        Raises:
            UnsupportedVersion: no builder for the requested Ember version
            RegistryError: the registry could not be reached
            RegistryParseError: the registry answer is not JSON
            InvalidAddon: the package is not tagged as an addon
        """
        ember_version = resolve_builder_ember_version(
            addon_request.ember_version, self.builder_ember_versions
        )

        log.info("Resolving addon in NPM")
        npm_data = await self.fetch(addon_request.addon, addon_request.addon_version)

        if not is_valid_addon(npm_data, self.keyword):
            raise InvalidAddon(f"Not valid addon: {json.dumps(npm_data)}")

        return ResolvedAddon(
            name=addon_request.addon,
            version=npm_data["version"],
            ember_version=ember_version,
            is_already_built=None,
            is_valid_addon=True,
        )

    async def fetch(self, addon: str, addon_version: str):
        """Fetch and decode the registry document of one package version."""
        url = self.registry_url + registry_path(addon, addon_version)
        log.debug(f"GET {url}")

        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as e:
            raise RegistryError(f"Failed to fetch {url}: Error: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RegistryParseError(
                f"Failed to parse json from {url}: Error: {e}"
            ) from e
