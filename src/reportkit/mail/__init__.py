"""
Defines functions used to send mail with the mailers registered in
reportkit.config.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

from reportkit.config import get as get_config
from reportkit.mail import backends
from reportkit.mail.message import Message


DEFAULT_BACKEND = 'locmem'
DEFAULT_MAILER = 'default'


def get_connection(backend=None, mailer=None, **kwargs):
    """
    Load a mail backend and return an instance of it.

    Args:
        backend (str, optional): 'locmem', 'smtp' or 'aws'. Defaults to
            the MAIL_BACKEND setting, then 'locmem'.
        mailer (str, optional): Name of the registered mailer whose
            settings the backend uses. Defaults to 'default'.
    """
    _backend = backend or get_config('MAIL_BACKEND', DEFAULT_BACKEND)
    klass = backends.backend_classes.get(_backend)
    if klass is None:
        raise ValueError(
            f"Unknown mail backend {_backend!r}, expected one of "
            f"{', '.join(sorted(backends.backend_classes))}"
        )
    return klass(mailer=mailer or DEFAULT_MAILER, **kwargs)


def send_mail(
    subject,
    body,
    recipients,
    sender=None,
    html=None,
    mailer=None,
    connection=None
):
    """
    Send a message to the given recipients.

    Args:
        subject (str): The message subject
        body (str): The plain text body
        recipients (list): Addresses to send to
        sender (str, optional): From address. Defaults to the mailer's
            'address' setting.
        html (str, optional): HTML alternative body
        mailer (str, optional): Registered mailer to use
        connection (backend instance or None): the connection object
            that sends messages
    """
    message = Message(
        subject=subject,
        recipients=recipients,
        body=body,
        sender=sender,
        html=html,
    )
    mail = connection or get_connection(mailer=mailer)
    return mail.send(message)
