"""
Defines the behaviour shared by all mail backends.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

from reportkit.config import get_mailer
from reportkit.errors import ConfigurationError
from reportkit.log import log


class BaseMailBackend:

    # Backends that talk to a server need a registered mailer.
    requires_mailer = True

    def __init__(self, mailer='default', fail_silently=False, **kwargs):
        self.mailer_name = mailer
        self.fail_silently = fail_silently
        self.settings = get_mailer(mailer)
        if self.settings is None and self.requires_mailer:
            log(
                f'No mailer registered as {mailer}!',
                status='error',
                raises=ConfigurationError,
            )

    def setting(self, key, default=None):
        if self.settings is None:
            return default
        return self.settings.get(key, default)

    def prepare(self, message):
        """
        Fill in the sender from the mailer's 'address' setting.
        """
        if not message.sender:
            message.sender = self.setting('address')
        return message

    def send(self, message):
        raise NotImplementedError

    def send_messages(self, messages):
        """
        Send several messages and return the number sent.
        """
        sent_count = 0
        for message in messages:
            if self.send(message):
                sent_count += 1
        return sent_count
