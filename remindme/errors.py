class RemindMeError(Exception):
    """Base class for payment report errors"""

    pass


class MissingColumnError(RemindMeError):
    """A required header was not found in a sheet"""

    def __init__(self, column: str, sheet: str):
        self.column = column
        self.sheet = sheet
        super().__init__(f"[{sheet}] '{column}' was not found in sheet header")


class DateParseError(RemindMeError):
    """A due date cell could not be parsed as YYYY-MM-DD"""

    def __init__(self, sheet: str, value: str):
        self.sheet = sheet
        self.value = value
        super().__init__(f"[{sheet}] failed to parse due date value {value!r}")


class RowShapeError(RemindMeError):
    """A row is shorter than a required column"""

    def __init__(self, sheet: str, row_index: int, column: str):
        self.sheet = sheet
        self.row_index = row_index
        self.column = column
        super().__init__(f"[{sheet}] row {row_index + 1} has no cell for required column '{column}'")


class NoDataError(RemindMeError):
    """A sheet returned no data rows"""

    def __init__(self, sheet: str):
        self.sheet = sheet
        super().__init__(f"[{sheet}] no data found")


class CellTypeError(RemindMeError, TypeError):
    """A cell value cannot be interpreted as text"""

    def __init__(self, sheet: str, raw: object):
        self.sheet = sheet
        self.raw = raw
        super().__init__(f"[{sheet}] cell value {raw!r} of type {type(raw).__name__} is not text")


class NotificationError(RemindMeError):
    """Pushing a notification failed"""

    pass


class TimezoneError(RemindMeError):
    """The canonical timezone could not be loaded"""

    pass


class ConfigError(RemindMeError):
    """Configuration is missing or invalid"""

    pass
