import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigError
from .payments.calendar import DEFAULT_TIMEZONE
from .payments.report import DEFAULT_WINDOW_DAYS
from .sheets.models import SheetKind

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE = "0 10 * * *"

# environment variable -> settings key
ENV_OVERRIDES = {
    "NTFY_TOPIC": "ntfy_topic",
    "GOOGLE_CREDENTIALS": "credentials",
    "GOOGLE_CREDENTIALS_PATH": "credentials_path",
}


class SheetDescriptor(BaseModel):
    """One sheet to read payments from"""

    spreadsheet_id: str
    sheet_name: str
    kind: SheetKind = SheetKind.SCHEDULED
    month_offset: int = -1


class Settings(BaseModel):
    """Configuration for the payment reporter"""

    ntfy_topic: str
    ntfy_url: str = "https://ntfy.sh"
    notification_timeout: float = Field(default=30, gt=0)
    schedule: str = DEFAULT_SCHEDULE
    timezone: str = DEFAULT_TIMEZONE
    credentials: Optional[str] = None
    credentials_path: Optional[str] = None
    sheets: list[SheetDescriptor] = Field(min_length=1)
    coming_up_days: int = Field(default=DEFAULT_WINDOW_DAYS, ge=1)
    placeholders: bool = True
    on_sheet_error: Literal["abort", "skip"] = "abort"

    @model_validator(mode="before")
    @classmethod
    def expand_legacy_sheets(cls, data: Any) -> Any:
        """Accept the older single-spreadsheet layout

        `spreadsheet_id` with `recurring_payments_sheet` and
        `scheduled_payments_sheet` become two sheet descriptors, recurring first.
        """
        if not isinstance(data, dict) or "sheets" in data or "spreadsheet_id" not in data:
            return data
        data = dict(data)
        spreadsheet_id = data.pop("spreadsheet_id")
        sheets = []
        recurring = data.pop("recurring_payments_sheet", None)
        if recurring:
            sheets.append({"spreadsheet_id": spreadsheet_id, "sheet_name": recurring, "kind": SheetKind.MONTHLY})
        scheduled = data.pop("scheduled_payments_sheet", None)
        if scheduled:
            sheets.append({"spreadsheet_id": spreadsheet_id, "sheet_name": scheduled, "kind": SheetKind.SCHEDULED})
        data["sheets"] = sheets
        return data

    @model_validator(mode="after")
    def check_credentials(self) -> "Settings":
        if not self.credentials and not self.credentials_path:
            raise ValueError("either credentials or credentials_path must be set")
        return self


def parse_settings(contents: str) -> Settings:
    """Parse a YAML config document, applying environment overrides"""
    try:
        data = yaml.safe_load(contents) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse config: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping")

    for env_var, key in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            data[key] = value

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}") from e


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from `path`, or from $REMINDME_CONFIG"""
    load_dotenv()

    path = path or os.getenv("REMINDME_CONFIG")
    if not path:
        raise ConfigError("No config file given and REMINDME_CONFIG is not set")

    try:
        contents = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e

    settings = parse_settings(contents)
    logger.info(f"Loaded config from {path} with {len(settings.sheets)} sheet(s)")
    return settings
