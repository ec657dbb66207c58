"""Exception hierarchy for the award search tool server."""


class AwardsError(Exception):
    """Base exception for award search errors."""


class ConfigError(AwardsError):
    """Missing or invalid configuration -- the server cannot start."""


class SeatsAeroError(AwardsError):
    """Base exception for errors raised by the Seats.aero access layer."""


class LiveSearchAccessError(SeatsAeroError):
    """HTTP 403 from the live search endpoint -- commercial tier required."""

    def __init__(
        self,
        message: str = (
            "Live Search requires a commercial agreement with Seats.aero. "
            "Pro users cannot access this endpoint."
        ),
    ) -> None:
        super().__init__(message)


class ToolArgumentError(AwardsError):
    """Tool arguments failed validation against the tool's schema."""


class UnknownToolError(AwardsError):
    """No tool with the requested name is in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name
