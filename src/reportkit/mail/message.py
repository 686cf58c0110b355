"""
Defines the message class passed to mail backends.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

import mimetypes
import os
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText


class Message:
    """
    Email message class.

    Args:
        subject (str): Email subject
        recipients (list): List of recipient email addresses
        body (str): Plain text body
        sender (str, optional): Sender email address. Backends fill this
            in from the mailer's 'address' setting when missing.
        cc (list, optional): List of CC recipients
        bcc (list, optional): List of BCC recipients
        reply_to (list, optional): List of reply-to addresses
        html (str, optional): HTML body content
        attachments (list, optional): List of (filename, content_type,
            data) tuples
        charset (str, optional): Character encoding. Defaults to 'UTF-8'
    """

    def __init__(self, subject='', recipients=None, body='', sender=None,
                 cc=None, bcc=None, reply_to=None, html=None,
                 attachments=None, charset='UTF-8'):
        self.subject = subject
        self.recipients = list(recipients or [])
        self.body = body
        self.sender = sender
        self.cc = list(cc or [])
        self.bcc = list(bcc or [])
        self.reply_to = list(reply_to or [])
        self.html = html
        self.attachments = list(attachments or [])
        self.charset = charset

    def attach(self, filename, content_type, data):
        """
        Attach a file to the message.

        Args:
            filename (str): Name of the file
            content_type (str): MIME type (e.g., 'application/pdf')
            data (bytes): File content as bytes
        """
        self.attachments.append((filename, content_type, data))

    def attach_file(self, filepath):
        """
        Attach a file from filesystem.
        """
        filename = os.path.basename(filepath)
        content_type, _ = mimetypes.guess_type(filepath)
        if content_type is None:
            content_type = 'application/octet-stream'
        with open(filepath, 'rb') as f:
            data = f.read()
        self.attach(filename, content_type, data)

    def all_recipients(self):
        return self.recipients + self.cc + self.bcc

    def as_mime(self):
        """
        Build a MIME message. BCC recipients are left out of the headers.
        """
        msg = MIMEMultipart('mixed')
        msg['Subject'] = self.subject
        msg['From'] = self.sender or ''
        msg['To'] = ', '.join(self.recipients)

        if self.cc:
            msg['Cc'] = ', '.join(self.cc)

        if self.reply_to:
            msg['Reply-To'] = ', '.join(self.reply_to)

        if self.html:
            body = MIMEMultipart('alternative')
            body.attach(MIMEText(self.body, 'plain', self.charset))
            body.attach(MIMEText(self.html, 'html', self.charset))
            msg.attach(body)
        else:
            msg.attach(MIMEText(self.body, 'plain', self.charset))

        for filename, content_type, data in self.attachments:
            part = MIMEBase(*content_type.split('/', 1))
            part.set_payload(data)
            encoders.encode_base64(part)
            part.add_header(
                'Content-Disposition',
                f'attachment; filename="{filename}"'
            )
            msg.attach(part)

        return msg
