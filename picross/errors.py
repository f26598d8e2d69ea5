"""Exception hierarchy shared by the level tools and the browser bridge."""


class PicrossError(Exception):
    """Base class for all picross errors."""


class LevelFormatError(PicrossError):
    """Raised when a level record does not match the level schema."""


class LegacyFormatError(LevelFormatError):
    """Raised when a legacy .non source cannot be converted."""


class BundleError(PicrossError):
    """Raised when the level bundle cannot be built. Nothing is written."""


class BridgeError(PicrossError):
    """Raised when a bridge request cannot be answered."""
