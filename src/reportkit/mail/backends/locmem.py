"""
Defines a mail backend that stores messages in memory. Used mainly for
unit testing an application.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

from reportkit import mail
from reportkit.mail.backends.base import BaseMailBackend


class MailBackend(BaseMailBackend):

    requires_mailer = False

    def __init__(self, *args, **kwargs):
        """
        Stores all delivered messages in a list.
        """
        super().__init__(*args, **kwargs)
        if not hasattr(mail, 'outbox'):
            mail.outbox = []

    def send(self, message):
        """
        Redirect message to mock outbox list.
        """
        if not message.all_recipients():
            return False
        mail.outbox.append(self.prepare(message))
        return True
