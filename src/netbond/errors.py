# SPDX-License-Identifier: BSD-2-Clause


class ConfigError(Exception):
    pass


class ConfigParseError(ConfigError):
    """The document is not well-formed: bad TOML, unknown key, wrong type or tag."""


class InvalidNetConfig(ConfigError):
    """The document parsed, but describes a device that must not be configured."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
