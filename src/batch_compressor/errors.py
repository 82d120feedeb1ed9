class BatchCompressorError(Exception):
    """Base error for the compression pipeline"""


class ConfigError(BatchCompressorError):
    """Missing or invalid runtime settings"""


class InvalidConfig(BatchCompressorError):
    """Transform configuration out of range"""


class DecodeError(BatchCompressorError):
    """Input bytes are malformed or not a supported raster image"""


class EncodeError(BatchCompressorError):
    """Encoder rejected the target format/quality combination"""


class EmptyArchive(BatchCompressorError):
    """Archive requested with no successful entries"""
