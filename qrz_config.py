"""
Centralized configuration for the QRZ XML client.

All configurable values are loaded from environment variables with sensible defaults.
"""

import os


def _float_env(name: str, default: str) -> float:
    """
    Get a float environment variable.

    Raises a ValueError naming the variable if the value is not a number.
    """
    value = os.getenv(name, default)
    try:
        return float(value)
    except ValueError:
        raise ValueError(
            f"Environment variable {name} must be a number of seconds, got {value!r}"
        )


class Config:
    """Client configuration loaded from environment variables."""

    # QRZ XML data service endpoint
    QRZ_XML_URL: str = os.getenv("QRZ_XML_URL", "http://xmldata.qrz.com/xml/current/")

    # Request timeout in seconds (connect + read)
    QRZ_TIMEOUT: float = _float_env("QRZ_TIMEOUT", "10.0")

    # Program identifier sent as the "agent" query parameter; unset sends none
    QRZ_AGENT: str = os.getenv("QRZ_AGENT", "")

    # HTTP User-Agent header
    QRZ_USER_AGENT: str = os.getenv("QRZ_USER_AGENT", "QRZXMLClient/0.1")


# Global config instance
config = Config()
