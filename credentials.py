"""Credential lookup for command generation"""

import os
from typing import Optional, Protocol

from logger import get_logger
from constants import ENV_GPT_API_KEY

# Optional keyring support
try:
    import keyring
    KEYRING_AVAILABLE = True
except ImportError:
    KEYRING_AVAILABLE = False


class TemplateGenerator(Protocol):
    """Turns a free-text request into a command template"""

    def generate(self, prompt_text: str) -> str:
        ...


class APIKeyManager:
    """Finds the generation API key in the environment, the keyring or the config"""

    SERVICE_NAME = "hoard"
    USERNAME = "gpt-api-key"

    def __init__(self, config_key: Optional[str] = None):
        self.logger = get_logger(self.__class__.__name__)
        self.config_key = config_key

    def get_api_key(self) -> Optional[str]:
        """
        Get API key from various sources in order of preference:
        1. Environment variable HOARD_GPT_API_KEY
        2. Keyring (if available)
        3. Config file
        """
        api_key = os.environ.get(ENV_GPT_API_KEY)
        if api_key:
            self.logger.debug("API key loaded from environment variable")
            return api_key

        if KEYRING_AVAILABLE:
            try:
                api_key = keyring.get_password(self.SERVICE_NAME, self.USERNAME)
                if api_key:
                    self.logger.debug("API key loaded from keyring")
                    return api_key
            except Exception as e:
                self.logger.debug(f"Failed to get API key from keyring: {e}")

        if self.config_key:
            self.logger.debug("API key loaded from config file")
            return self.config_key

        self.logger.debug("No API key configured")
        return None

    def has_api_key(self) -> bool:
        return bool(self.get_api_key())

    def store_api_key(self, api_key: str) -> bool:
        """Store API key in the system keyring"""
        if not api_key:
            return False

        if not KEYRING_AVAILABLE:
            self.logger.warning("Keyring not available - API key not stored")
            return False

        try:
            keyring.set_password(self.SERVICE_NAME, self.USERNAME, api_key)
            self.logger.info("API key stored securely in keyring")
            return True
        except Exception as e:
            self.logger.error(f"Failed to store API key in keyring: {e}")
            return False
