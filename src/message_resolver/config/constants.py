"""
Constants and defaults for the message resolver.
"""

# Name under which the resolver identifies itself in logs
RESOLVER_NAME = "JsonMessage"

# Bracket tags extracted before key/value parsing, in extraction order
DEFAULT_TAG_NAMES = ("api", "proxy")

# Key used for messages that contain no key/value pairs
FALLBACK_TEXT_KEY = "text"

# Nested string-to-JSON unpack levels allowed per message
DEFAULT_MAX_DEPTH = 16

# Characters of a failing message echoed in the warning log
DEFAULT_TRUNCATE_LENGTH = 200

# Environment variables
ENV_COMPONENTS = "MESSAGE_RESOLVER_COMPONENTS"
ENV_EXTRA_TAGS = "MESSAGE_RESOLVER_EXTRA_TAGS"
ENV_MAX_DEPTH = "MESSAGE_RESOLVER_MAX_DEPTH"
ENV_TRUNCATE = "MESSAGE_RESOLVER_TRUNCATE"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FILE = "LOG_FILE"
ENV_LOG_JSON = "LOG_JSON"
ENV_DEBUG = "DEBUG"

# Separator for list-valued environment variables
LIST_SEPARATOR = ","

# Rotating file handler settings
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5
