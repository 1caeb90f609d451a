"""AWS Lambda entrypoint.

The event is `{"addon": ..., "addon_version": ..., "ember_version": ...}`.
On success the function returns `{"location": url}`; on failure it raises,
which Lambda reports as a failed invocation carrying the error message.
"""

import asyncio
import logging

from pydantic import ValidationError

from addon_api.addon_request import AddonRequest
from addon_api.config import settings
from addon_api.errors import InvalidEvent
from addon_api.services.addon_service import get_addon_service

log = logging.getLogger("addon_api")
log.setLevel(settings.log_level)


def handler(event: dict, context) -> dict:
    """Resolve the addon in the event and schedule its build if needed."""
    try:
        addon_request = AddonRequest.model_validate(event)
    except ValidationError as e:
        raise InvalidEvent(f"Invalid event: {e}") from e

    location = asyncio.run(get_addon_service().run(addon_request))
    return {"location": location}
