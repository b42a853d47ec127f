"""Custom exceptions for the Hoard CLI tool"""


class HoardError(Exception):
    """Base exception for all Hoard errors"""
    pass


class ConfigurationError(HoardError):
    """Raised when there's an issue with configuration"""
    pass


class DelimiterCollisionError(ConfigurationError):
    """Raised when the parameter start and end tokens are the same character"""
    pass


class StoreError(HoardError):
    """Raised when the trove file cannot be read or written"""
    pass


class GenerationError(HoardError):
    """Raised when a command template could not be generated from a prompt"""
    pass


class ValidationError(HoardError):
    """Raised when input validation fails"""
    pass
