"""Wire constants.

Keep these in one place to avoid magic numbers in the codec and session.
"""

# Command tags
NOTIFICATION = 2
ERROR_RESPONSE = 8

# Item identifiers, in the order they appear in a notification frame
DEVICE_TOKEN = 1
PAYLOAD = 2
IDENTIFIER = 3
EXPIRATION = 4
PRIORITY = 5

# Sizes
TOKEN_SIZE = 32
PAYLOAD_LIMIT = 2048
ERROR_RESPONSE_SIZE = 6

# Priority used for every notification sent through a Session
DEFAULT_PRIORITY = 10
