# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Exceptions used by the greeting service."""


class ConfigInvalidError(Exception):
    """Exception raised when the service configuration is found to be invalid.

    Attrs:
        msg (str): Explanation of the error.
    """

    def __init__(self, msg: str):
        """Initialize a new instance of the ConfigInvalidError exception.

        Args:
            msg (str): Explanation of the error.
        """
        super().__init__(msg)
        self.msg = msg
