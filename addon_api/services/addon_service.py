"""
Addon Service - resolves an addon and makes sure a build exists

The whole request is one ordered sequence:
1. Resolve the Ember version and the addon in the registry
2. Check whether the artifact is already stored
3. If not, write a "building" placeholder
4. If not, schedule the build
5. Return the location where the artifact will live

Each step either completes or aborts the request. Nothing is retried and a
placeholder written before a failed dispatch is left in place.
"""

import logging
from typing import Optional

from addon_api.addon_request import AddonRequest, ResolvedAddon
from addon_api.config import Settings, settings as default_settings
from addon_api.dispatch import BuildDispatcher, make_lambda_client
from addon_api.errors import AddonError, UnknownError
from addon_api.package_resolution import PackageResolver
from addon_api.storage import ArtifactStorage, make_s3_client

log = logging.getLogger("addon_api.service")


class AddonService:
    """
    Stateless orchestration of registry, storage and build dispatch.

    All collaborators are passed in at construction, nothing is read from
    module state while a request runs.
    """

    def __init__(
        self,
        settings: Settings,
        resolver: PackageResolver,
        storage: ArtifactStorage,
        dispatcher: BuildDispatcher,
    ):
        self.settings = settings
        self.resolver = resolver
        self.storage = storage
        self.dispatcher = dispatcher

    @classmethod
    def from_settings(cls, settings: Settings) -> "AddonService":
        """Wire the service to the real registry, S3 and Lambda."""
        resolver = PackageResolver(
            registry_url=settings.registry_url,
            builder_ember_versions=settings.builder_ember_versions,
            keyword=settings.addon_keyword,
            timeout=settings.registry_timeout,
        )
        storage = ArtifactStorage(
            bucket=settings.addon_bucket_name,
            client=make_s3_client(settings.aws_region, settings.s3_endpoint_url),
            filename=settings.artifact_filename,
        )
        dispatcher = BuildDispatcher(
            function_name=settings.scheduler_function_name,
            client=make_lambda_client(
                settings.aws_region, settings.lambda_endpoint_url
            ),
        )
        return cls(settings, resolver, storage, dispatcher)

    async def run(self, addon_request: AddonRequest) -> str:
        """
        Run the pipeline for one request.

        Args:
            addon_request: The addon to look up

        Returns:
            URL of the artifact (or of its placeholder while building)

        Raises:
            AddonError: any failure, unexpected ones wrapped in UnknownError
        """
        log.info(f"Running in env: {self.settings.env}")

        try:
            addon: ResolvedAddon = await self.resolver.resolve(addon_request)

            addon.is_already_built = await self.storage.exists(addon)
            if addon.is_already_built:
                log.info("Addon already built")
                return self.storage.url(addon)

            await self.storage.write_placeholder(addon)
            await self.dispatcher.dispatch(addon)
        except AddonError as e:
            log.info(f"Addon request failed: {e.detail}")
            raise
        except Exception as e:
            log.error(f"Unexpected error resolving addon: {e}", exc_info=True)
            raise UnknownError(e) from e

        return self.storage.url(addon)

    async def get_addon(self, addon_request: AddonRequest) -> dict:
        """
        Same as run() but reports the outcome as a dictionary.

        Returns:
            {"location": url} on success, otherwise the error's status,
            title and detail
        """
        try:
            location = await self.run(addon_request)
        except AddonError as e:
            return e.to_dict()
        return {"location": location}


# Singleton instance for easy access
_addon_service: Optional[AddonService] = None


def get_addon_service(settings: Optional[Settings] = None) -> AddonService:
    """
    Get or create the addon service singleton.

    Args:
        settings: Optional settings, replaces the current instance if given

    Returns:
        AddonService instance
    """
    global _addon_service
    if _addon_service is None or settings is not None:
        _addon_service = AddonService.from_settings(settings or default_settings)
    return _addon_service
