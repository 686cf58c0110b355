"""
Defines a mail backend that sends messages using AWS SES v2.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

import logging
import os

import boto3
from botocore.exceptions import ClientError

from reportkit.config import get as get_config
from reportkit.errors import MailError
from reportkit.mail.backends.base import BaseMailBackend


logger = logging.getLogger(__name__)


class MailBackend(BaseMailBackend):

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.configuration_set = self.setting('configuration_set')
        self._client = None

    def _get_region(self):
        """
        Determines AWS region in order of priority:
        1. The mailer's 'region' setting
        2. The AWS_REGION registry setting
        3. AWS_REGION environment variable
        4. AWS_DEFAULT_REGION environment variable
        5. 'us-east-1'
        """
        region = (
            self.setting('region')
            or get_config('AWS_REGION')
            or os.environ.get('AWS_REGION')
            or os.environ.get('AWS_DEFAULT_REGION')
            or 'us-east-1'
        )
        return region

    @property
    def client(self):
        """
        Lazy initialization of boto3 SESv2 client.
        """
        if self._client is None:
            self._client = boto3.client(
                'sesv2',
                region_name=self._get_region()
            )
        return self._client

    def send(self, message):
        """
        Send message using AWS SES.
        """
        if not message.all_recipients():
            return False
        self.prepare(message)

        if message.attachments:
            params = self._build_raw_email(message)
        else:
            params = self._build_simple_email(message)

        if self.configuration_set:
            params['ConfigurationSetName'] = self.configuration_set

        try:
            response = self.client.send_email(**params)
        except ClientError as e:
            logger.error(
                f"Failed to send email: {e.response['Error']['Message']}"
            )
            if not self.fail_silently:
                raise MailError(
                    f'Failed to send email to {", ".join(message.recipients)}'
                ) from e
            return False

        logger.info(
            f"Email sent successfully. MessageId: {response['MessageId']}"
        )
        return True

    def _destination(self, message):
        destination = {'ToAddresses': message.recipients}
        if message.cc:
            destination['CcAddresses'] = message.cc
        if message.bcc:
            destination['BccAddresses'] = message.bcc
        return destination

    def _build_simple_email(self, message):
        body = {
            'Text': {
                'Data': message.body,
                'Charset': message.charset
            }
        }
        if message.html:
            body['Html'] = {
                'Data': message.html,
                'Charset': message.charset
            }

        params = {
            'FromEmailAddress': message.sender,
            'Destination': self._destination(message),
            'Content': {
                'Simple': {
                    'Subject': {
                        'Data': message.subject,
                        'Charset': message.charset
                    },
                    'Body': body,
                }
            },
        }
        if message.reply_to:
            params['ReplyToAddresses'] = message.reply_to
        return params

    def _build_raw_email(self, message):
        """
        Build raw email format for messages with attachments.
        """
        return {
            'Content': {
                'Raw': {
                    'Data': message.as_mime().as_bytes()
                }
            },
            'Destination': self._destination(message),
        }
