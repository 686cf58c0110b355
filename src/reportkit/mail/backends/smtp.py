"""
Defines a mail backend that sends messages over SMTP using the host,
port and credentials of a registered mailer.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

import logging
import smtplib

from reportkit.errors import MailError
from reportkit.mail.backends.base import BaseMailBackend


logger = logging.getLogger(__name__)

DEFAULT_PORT = 25


class MailBackend(BaseMailBackend):

    def _start(self, connection):
        """
        Start TLS if asked to and log in if the mailer has a user.
        """
        if self.setting('tls'):
            connection.starttls()
        user = self.setting('user')
        if user:
            connection.login(user, self.setting('password') or '')

    def send(self, message):
        """
        Send message using the mailer's SMTP server.
        """
        recipients = message.all_recipients()
        if not recipients:
            return False
        self.prepare(message)

        try:
            connection = smtplib.SMTP(
                self.setting('host'),
                int(self.setting('port', DEFAULT_PORT)),
            )
            try:
                self._start(connection)
                connection.sendmail(
                    message.sender,
                    recipients,
                    message.as_mime().as_string(),
                )
            finally:
                connection.quit()
        except (smtplib.SMTPException, OSError) as error:
            logger.error(
                f'Failed to send email with mailer '
                f'{self.mailer_name!r}: {error}'
            )
            if not self.fail_silently:
                raise MailError(
                    f'Failed to send email to {", ".join(recipients)}'
                ) from error
            return False

        logger.info(f'Email sent to {", ".join(recipients)}')
        return True
