"""Exit codes for failures raised by the CLI itself.

Publish steps exit with the code of the command that failed (npm, node,
Gradle). The codes below cover the failures that happen before or around
those commands.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes owned by rnpublish.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: A publish step failed without an exit code of its own
    - 2: Environment error (not inside a git checkout, bad config file)
    - 3: User error (invalid release version)
    """

    OK = 0
    PUBLISH_ERROR = 1
    ENV_ERROR = 2
    USER_ERROR = 3
