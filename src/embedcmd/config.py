"""
Settings for embedded command processing.

The host builds one ``EmbedSettings`` instance and passes it to the extension
registry, which hands it on to every command handler it constructs.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

DOTTED_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*")


class EmbedSettings(BaseModel):
    """
    Configuration shared by the registry, the embeddings and the handlers.

    Params:
        extension_packages: Packages searched, in order, for a module named
            after the command
        output_mode: Renderer mode handled by the render entry point
        date_formats: ``dt`` command formats keyed by variant name, ``""`` is
            the default; values have the form ``[css-class|]strftime-format``
        ellipsis: Suffix appended by the ``abstract`` command when truncating
    """

    model_config = ConfigDict(frozen=True)

    extension_packages: list[str] = Field(default_factory=lambda: ["embedcmd.ext"])
    output_mode: str = "xhtml"
    date_formats: dict[str, str] = Field(default_factory=dict)
    ellipsis: str = "…"

    @field_validator("extension_packages")
    @classmethod
    def _validate_packages(cls, packages: list[str]) -> list[str]:
        for package in packages:
            if not DOTTED_NAME_PATTERN.fullmatch(package):
                raise ValueError(f"Invalid extension package name: {package!r}")
        return packages

    def date_format(self, variant: str | None = None) -> tuple[str | None, str | None]:
        """
        Look up a ``dt`` format variant.

        Params:
            variant: Variant name, or None for the default format

        Returns:
            Tuple of (css_class, format); either may be None when not configured
        """
        config_value = self.date_formats.get(variant or "")
        if not config_value:
            return None, None

        css_class, bar, date_format = config_value.partition("|")
        if not bar:
            return None, config_value
        return css_class or None, date_format or None
