"""
Configuration module for the image info service.

Loads all configuration from environment variables with sensible defaults.
"""

import os


class Config:
    """
    Service configuration from environment variables.

    Loads all configuration values from environment variables with sensible defaults.
    All settings can be overridden by setting the corresponding environment variable.
    """

    def __init__(self):
        """
        Initialize configuration from environment variables.

        Environment Variables:
            LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO
            FLASK_HOST: Server bind address. Default: 0.0.0.0
            FLASK_PORT: Server bind port. Default: 8080
            MANIFEST_TIMEOUT: Timeout for manifest and token requests in seconds. Default: 30
            BLOB_TIMEOUT: Timeout for layer blob downloads in seconds. Default: 600
            TARGET_ARCHITECTURE: Platform architecture picked from manifest indexes. Default: amd64
            TARGET_OS: Platform OS picked from manifest indexes. Default: linux
            MAX_IMAGE_NAME_LENGTH: Maximum image name length. Default: 255
            MAX_TAG_LENGTH: Maximum tag length. Default: 128
        """
        # Logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

        # Server
        self.FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
        self.FLASK_PORT = int(os.getenv("FLASK_PORT", "8080"))

        # Outbound registry traffic
        self.MANIFEST_TIMEOUT = float(os.getenv("MANIFEST_TIMEOUT", "30"))  # seconds
        self.BLOB_TIMEOUT = float(os.getenv("BLOB_TIMEOUT", "600"))  # seconds

        # Platform selected from multi-platform manifest indexes
        self.TARGET_ARCHITECTURE = os.getenv("TARGET_ARCHITECTURE", "amd64")
        self.TARGET_OS = os.getenv("TARGET_OS", "linux")

        # Validation limits
        self.MAX_IMAGE_NAME_LENGTH = int(os.getenv("MAX_IMAGE_NAME_LENGTH", "255"))
        self.MAX_TAG_LENGTH = int(os.getenv("MAX_TAG_LENGTH", "128"))

    def __repr__(self):
        """String representation for logging."""
        return (
            f"Config(LOG_LEVEL={self.LOG_LEVEL}, "
            f"FLASK_HOST={self.FLASK_HOST}, "
            f"FLASK_PORT={self.FLASK_PORT}, "
            f"MANIFEST_TIMEOUT={self.MANIFEST_TIMEOUT}, "
            f"BLOB_TIMEOUT={self.BLOB_TIMEOUT}, "
            f"TARGET_PLATFORM={self.TARGET_OS}/{self.TARGET_ARCHITECTURE})"
        )


# Global config instance
config = Config()
