"""Configuration-related exceptions for docrag."""

from .base import DocRagError


class ConfigurationError(DocRagError):
    """Configuration or environment variable errors.

    Raised when required configuration is missing or invalid.
    """

    error_code = "RAG_CFG_001"


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "RAG_CFG_002"
