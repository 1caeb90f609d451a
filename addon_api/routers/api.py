import logging

from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from addon_api.addon_request import AddonRequest
from addon_api.services.addon_service import AddonService, get_addon_service

router = APIRouter()


def addon_service() -> AddonService:
    return get_addon_service()


def validation_failure(detail: str) -> dict:
    logging.info(f"Validation failure {detail = }")
    return {"status": 422, "title": "Unprocessable Entity", "detail": detail}


@router.post("/addon")
async def api_v1_addon_post(
    addon_request: AddonRequest,
    response: Response,
    service: AddonService = Depends(addon_service),
):
    """
    Look up an addon and make sure it gets built.

    Returns the location of the artifact. While the build is running the
    location serves a status document with `"status": "building"`.
    """
    content = await service.get_addon(addon_request)
    if "location" not in content:
        response.status_code = content["status"]
    return content


@router.get("/addon/{addon:path}/{addon_version}")
async def api_v1_addon_get(
    addon: str,
    addon_version: str,
    ember_version: str,
    response: Response,
    service: AddonService = Depends(addon_service),
):
    """Same as POST /addon but redirects to the artifact location."""
    try:
        addon_request = AddonRequest(
            addon=addon, addon_version=addon_version, ember_version=ember_version
        )
    except ValidationError as e:
        response.status_code = 422
        return validation_failure(str(e))

    content = await service.get_addon(addon_request)
    if "location" not in content:
        response.status_code = content["status"]
        return content

    return RedirectResponse(content["location"], status_code=302)


@router.get("/ember-versions")
def api_v1_ember_versions(service: AddonService = Depends(addon_service)):
    """Return the supported builder versions in resolution order

    Returns:
        versions: compatibility tags and the patterns they accept
    """
    return {
        "versions": [
            {"tag": tag, "pattern": pattern}
            for tag, pattern in service.settings.builder_ember_versions.items()
        ]
    }
