"""
Exception Hierarchy

Custom exceptions for the message resolver.

The resolve path itself never raises these: parsing failures fall through
to less specific interpretations. They are raised while building a resolver
from configuration and when a caller asks for strict handling.
"""


class MessageResolverException(Exception):
    """Base exception for the message resolver"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Configuration Exceptions
class ConfigurationException(MessageResolverException):
    """Exception related to configuration"""
    pass


class InvalidConfigurationException(ConfigurationException):
    """Exception when configuration is invalid"""
    pass


class InvalidPatternException(ConfigurationException):
    """Exception when an extraction tag name cannot be used in the bracket grammar"""
    pass


# Resolution Exceptions
class ResolutionException(MessageResolverException):
    """Exception when a message could not be structured"""
    pass


# Utility functions
def format_exception_details(exception: MessageResolverException) -> str:
    """
    Format exception details for logging

    Args:
        exception: Resolver exception instance

    Returns:
        Formatted string with exception details
    """
    details_str = f"{exception.__class__.__name__}: {exception.message}"

    if exception.details:
        details_list = [f"  {k}: {v}" for k, v in exception.details.items()]
        details_str += "\nDetails:\n" + "\n".join(details_list)

    return details_str


def wrap_exception(original_exception: Exception, context: str) -> MessageResolverException:
    """
    Wrap a generic exception in a resolver exception

    Args:
        original_exception: Original exception
        context: Context describing where the exception occurred

    Returns:
        Wrapped ResolutionException
    """
    message = f"{context}: {str(original_exception)}"
    details = {
        'original_exception': original_exception.__class__.__name__,
        'original_message': str(original_exception)
    }

    return ResolutionException(message, details)
