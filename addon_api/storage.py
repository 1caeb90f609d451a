"""S3 storage for built addons and their status documents."""

import asyncio
import json
import logging
from datetime import UTC, datetime
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from addon_api.addon_request import ResolvedAddon
from addon_api.errors import StorageWriteError

log = logging.getLogger("addon_api.storage")

MISSING_CODES = ("404", "NoSuchKey", "NotFound")


def placeholder_document() -> dict:
    """Status document written while a build is pending."""
    return {
        "status": "building",
        "status_date": datetime.now(UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z"),
        "addon_js": None,
        "addon_css": None,
        "error_log": None,
    }


class ArtifactStorage:
    """Existence check, placeholder writer and URL builder for one bucket."""

    def __init__(self, bucket: str, client, filename: str = "artifact.json"):
        self.bucket = bucket
        self.client = client
        self.filename = filename

    def key(self, addon: ResolvedAddon) -> str:
        return addon.artifact_key(self.filename)

    def url(self, addon: ResolvedAddon) -> str:
        return f"https://{self.bucket}/{self.key(addon)}"

    async def exists(self, addon: ResolvedAddon) -> bool:
        """
        Check whether an artifact (or a placeholder) is already stored.

        Errors never propagate: a failed check counts as "not built". Only
        unexpected error codes are logged as warnings.
        """
        log.info("Looking up addon in S3")
        key = self.key(addon)
        try:
            await asyncio.to_thread(
                self.client.head_object, Bucket=self.bucket, Key=key
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in MISSING_CODES:
                log.info(f"No artifact at {key}")
            else:
                log.warning(f"Existence check for {key} failed ({code}), assuming missing")
            return False
        except BotoCoreError as e:
            log.warning(f"Existence check for {key} failed ({e}), assuming missing")
            return False
        return True

    async def write_placeholder(self, addon: ResolvedAddon) -> None:
        """Register the addon as "building".

        Raises:
            StorageWriteError: if the object could not be written
        """
        log.info("Registering addon in S3")
        key = self.key(addon)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                ACL="public-read",
                Key=key,
                ContentType="application/json",
                CacheControl="max-age=0, no-cache",
                Body=json.dumps(placeholder_document()),
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageWriteError(f"Failed to write {key}: {e}") from e


def make_s3_client(region: str, endpoint_url: Optional[str] = None):
    """
    Create an S3 client for the given region and endpoint.

    Args:
        region: AWS region
        endpoint_url: Optional endpoint override, e.g. for a local stack

    Returns:
        boto3 S3 client
    """
    return boto3.client("s3", region_name=region, endpoint_url=endpoint_url)
