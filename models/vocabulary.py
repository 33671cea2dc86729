"""Locale vocabulary file model."""

from pydantic import BaseModel, ConfigDict, Field


class LocaleFile(BaseModel):
    """
    One <locale>.json vocabulary table.

    commands maps canonical block specs to localized block text.
    aliases maps extra accepted block text to a canonical spec.
    Other keys found in block-tool locale files are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    commands: dict[str, str] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
