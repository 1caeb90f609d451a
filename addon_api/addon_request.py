"""
Request and record models for the addon pipeline.

AddonRequest is what the caller sends: the addon, its version and the
Ember version the build should target. ResolvedAddon is the record that
flows through the pipeline once the registry and the compatibility table
have been consulted.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field

NAME_PATTERN = r"^(@[\w.~-]+/)?[\w.~-]+$"
VERSION_PATTERN = r"^[\w.+-]+$"


class AddonRequest(BaseModel):
    """Input event of the addon lookup."""

    addon: Annotated[
        str,
        Field(
            examples=["ember-cli-x", "ember-power-select", "@scope/ember-thing"],
            description="""
                Name of the addon package in the registry. Scoped package
                names are accepted.
            """.strip(),
            pattern=NAME_PATTERN,
        ),
    ]

    addon_version: Annotated[
        str,
        Field(
            examples=["1.0.0", "2.3.1", "latest"],
            description="""
                Version (or dist-tag) of the addon. The registry resolves
                it to a concrete version.
            """.strip(),
            pattern=VERSION_PATTERN,
        ),
    ]

    ember_version: Annotated[
        str,
        Field(
            examples=["2.18.0", "3.4.2"],
            description="""
                Ember version the addon should be built for. It is matched
                against the supported builder versions to pick a build
                target.
            """.strip(),
        ),
    ]


class ResolvedAddon(BaseModel):
    """Addon after registry lookup and compatibility resolution."""

    name: str
    version: str
    ember_version: str  # compatibility tag, e.g. "2-18"
    is_already_built: Optional[bool] = None
    is_valid_addon: bool = False

    def artifact_key(self, filename: str = "artifact.json") -> str:
        """Object key of the built artifact (and of its placeholder)."""
        return f"{self.ember_version}/{self.name}/{self.version}/{filename}"

    def build_payload(self) -> dict:
        """Payload handed to the build function."""
        return {
            "addon": self.name,
            "addon_version": self.version,
            "ember_version": self.ember_version,
            "triggered_by": "api",
        }
