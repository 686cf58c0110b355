"""
Defines the exceptions raised by the configuration registry and the
mailer.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""


class ConfigurationError(Exception):
    """Base class for configuration problems."""


class MissingFieldError(ConfigurationError, ValueError):
    """
    Raised when a source is registered without a required field.

    The descriptor has already been stored when this is raised.
    """

    def __init__(self, label, field='dsn'):
        self.label = label
        self.field = field
        super().__init__(f'Missing {field.upper()} for source {label}!')


class MailError(Exception):
    """Raised when a message cannot be delivered."""
