"""Dispatch of addon builds to the scheduler Lambda function.

The function is invoked with InvocationType "Event": Lambda acknowledges
the submission and runs the build on its own. Only the acknowledgment is
awaited here, the build result never is.
"""

import asyncio
import json
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from addon_api.addon_request import ResolvedAddon
from addon_api.errors import DispatchError

log = logging.getLogger("addon_api.dispatch")


class BuildDispatcher:
    """Schedules addon builds on a named Lambda function"""

    def __init__(self, function_name: str, client):
        self.function_name = function_name
        self.client = client

    async def dispatch(self, addon: ResolvedAddon) -> None:
        """
        Submit a build for the addon.

        Raises:
            DispatchError: if Lambda rejected or never received the invocation
        """
        log.info("Scheduling addon build")
        payload = addon.build_payload()
        try:
            response = await asyncio.to_thread(
                self.client.invoke,
                FunctionName=self.function_name,
                InvocationType="Event",
                Payload=json.dumps(payload),
            )
        except (BotoCoreError, ClientError) as e:
            raise DispatchError(
                f"Failed to invoke {self.function_name}: {e}"
            ) from e

        status_code = response.get("StatusCode")
        if status_code != 202:
            raise DispatchError(
                f"Failed to invoke {self.function_name}: unexpected status {status_code}"
            )

        log.debug(f"Build scheduled: {payload}")


def make_lambda_client(region: str, endpoint_url: Optional[str] = None):
    """Create a Lambda client for the given region and endpoint."""
    return boto3.client("lambda", region_name=region, endpoint_url=endpoint_url)
