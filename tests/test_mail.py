"""Unit tests for the mail backends."""

import smtplib
from email import message_from_string
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from reportkit import config, mail
from reportkit.errors import ConfigurationError, MailError
from reportkit.mail import Message, get_connection, send_mail
from reportkit.mail.backends import aws, locmem, smtp


def _client_error():
    return ClientError(
        {'Error': {'Code': 'MessageRejected', 'Message': 'Not verified'}},
        'SendEmail',
    )


class TestMessage:

    def test_mime_headers_leave_out_bcc(self):
        message = Message(
            subject='Report',
            recipients=['a@example.com'],
            body='See attached',
            sender='reports@example.com',
            cc=['b@example.com'],
            bcc=['c@example.com'],
            reply_to=['d@example.com'],
        )
        mime = message.as_mime()
        assert mime['Subject'] == 'Report'
        assert mime['To'] == 'a@example.com'
        assert mime['Cc'] == 'b@example.com'
        assert mime['Reply-To'] == 'd@example.com'
        assert mime['Bcc'] is None
        assert message.all_recipients() == [
            'a@example.com', 'b@example.com', 'c@example.com'
        ]

    def test_html_alternative(self):
        message = Message(body='plain', html='<b>rich</b>')
        parts = [p.get_content_type() for p in message.as_mime().walk()]
        assert 'text/plain' in parts
        assert 'text/html' in parts

    def test_attach_file(self, tmp_path):
        path = tmp_path / 'report.csv'
        path.write_text('a,b\n1,2\n')
        message = Message()
        message.attach_file(str(path))

        filename, content_type, data = message.attachments[0]
        assert filename == 'report.csv'
        assert content_type == 'text/csv'
        assert data == b'a,b\n1,2\n'


class TestLocmem:

    def test_default_backend(self):
        assert isinstance(get_connection(), locmem.MailBackend)

    def test_send_mail_lands_in_outbox(self):
        config.set_mailer('default', address='reports@example.com')
        assert send_mail('Hi', 'Body', ['a@example.com']) is True

        assert len(mail.outbox) == 1
        sent = mail.outbox[0]
        assert sent.subject == 'Hi'
        assert sent.sender == 'reports@example.com'

    def test_works_without_a_mailer(self):
        send_mail('Hi', 'Body', ['a@example.com'], sender='me@example.com')
        assert mail.outbox[0].sender == 'me@example.com'

    def test_no_recipients_is_not_sent(self):
        assert send_mail('Hi', 'Body', []) is False
        assert mail.outbox == []

    def test_send_messages_counts(self):
        connection = get_connection()
        sent = connection.send_messages([
            Message(recipients=['a@example.com']),
            Message(recipients=[]),
            Message(recipients=['b@example.com']),
        ])
        assert sent == 2


class TestBackendSelection:

    def test_mail_backend_setting(self):
        config.set(MAIL_BACKEND='smtp')
        config.set_mailer('default', host='localhost')
        assert isinstance(get_connection(), smtp.MailBackend)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match='Unknown mail backend'):
            get_connection('pigeon')

    def test_network_backend_needs_mailer(self, capsys):
        with pytest.raises(ConfigurationError):
            get_connection('smtp', mailer='reports')
        assert 'No mailer registered as reports!' in capsys.readouterr().err


class TestSmtp:

    @pytest.fixture
    def smtp_class(self):
        with patch('reportkit.mail.backends.smtp.smtplib.SMTP') as smtp_class:
            yield smtp_class

    def test_sends_with_mailer_settings(self, smtp_class):
        config.set_mailer(
            'default',
            host='mail.chunkybacon.org',
            address='chunky@bacon.net',
            user='cartoon',
            password='fox',
            port=2525,
        )
        assert send_mail(
            'Weekly', 'Numbers', ['boss@example.com'],
            connection=get_connection('smtp'),
        ) is True

        smtp_class.assert_called_once_with('mail.chunkybacon.org', 2525)
        server = smtp_class.return_value
        server.login.assert_called_once_with('cartoon', 'fox')
        sender, recipients, raw = server.sendmail.call_args.args
        assert sender == 'chunky@bacon.net'
        assert recipients == ['boss@example.com']
        assert message_from_string(raw)['Subject'] == 'Weekly'
        server.quit.assert_called_once()

    def test_default_port_and_no_login(self, smtp_class):
        config.set_mailer('default', host='localhost')
        get_connection('smtp').send(Message(recipients=['a@example.com']))

        smtp_class.assert_called_once_with('localhost', 25)
        smtp_class.return_value.login.assert_not_called()
        smtp_class.return_value.starttls.assert_not_called()

    def test_starttls(self, smtp_class):
        config.set_mailer('default', host='localhost', tls=True)
        get_connection('smtp').send(Message(recipients=['a@example.com']))
        smtp_class.return_value.starttls.assert_called_once()

    def test_named_mailer(self, smtp_class):
        config.set_mailer('alerts', host='alerts.example.com')
        send_mail('Down', 'Body', ['ops@example.com'], mailer='alerts',
                  connection=get_connection('smtp', mailer='alerts'))
        smtp_class.assert_called_once_with('alerts.example.com', 25)

    def test_failure_raises_mail_error(self, smtp_class):
        config.set_mailer('default', host='localhost')
        smtp_class.return_value.sendmail.side_effect = smtplib.SMTPException()

        with pytest.raises(MailError):
            get_connection('smtp').send(Message(recipients=['a@example.com']))
        smtp_class.return_value.quit.assert_called_once()

    def test_login_failure_still_quits(self, smtp_class):
        config.set_mailer('default', host='localhost', user='u', password='p')
        server = smtp_class.return_value
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b'no')

        with pytest.raises(MailError):
            get_connection('smtp').send(Message(recipients=['a@example.com']))
        server.sendmail.assert_not_called()
        server.quit.assert_called_once()

    def test_starttls_failure_still_quits(self, smtp_class):
        config.set_mailer('default', host='localhost', tls=True)
        server = smtp_class.return_value
        server.starttls.side_effect = smtplib.SMTPNotSupportedError()

        with pytest.raises(MailError):
            get_connection('smtp').send(Message(recipients=['a@example.com']))
        server.quit.assert_called_once()

    def test_failure_can_be_silent(self, smtp_class):
        config.set_mailer('default', host='localhost')
        smtp_class.side_effect = ConnectionRefusedError()

        backend = get_connection('smtp', fail_silently=True)
        assert backend.send(Message(recipients=['a@example.com'])) is False


class TestAws:

    @pytest.fixture
    def client(self):
        with patch('reportkit.mail.backends.aws.boto3.client') as factory:
            client = MagicMock()
            client.send_email.return_value = {'MessageId': 'abc-123'}
            factory.return_value = client
            client.factory = factory
            yield client

    def test_simple_email(self, client):
        config.set_mailer(
            'default',
            address='reports@example.com',
            region='eu-west-2',
            configuration_set='reports',
        )
        backend = get_connection('aws')
        assert backend.send(Message(
            subject='Weekly',
            recipients=['a@example.com'],
            body='Numbers',
            html='<p>Numbers</p>',
            bcc=['b@example.com'],
        )) is True

        client.factory.assert_called_once_with(
            'sesv2', region_name='eu-west-2'
        )
        params = client.send_email.call_args.kwargs
        assert params['FromEmailAddress'] == 'reports@example.com'
        assert params['ConfigurationSetName'] == 'reports'
        assert params['Destination'] == {
            'ToAddresses': ['a@example.com'],
            'BccAddresses': ['b@example.com'],
        }
        body = params['Content']['Simple']['Body']
        assert body['Text']['Data'] == 'Numbers'
        assert body['Html']['Data'] == '<p>Numbers</p>'

    def test_attachments_use_raw_email(self, client):
        config.set_mailer('default', address='reports@example.com')
        message = Message(recipients=['a@example.com'], body='See file')
        message.attach('report.csv', 'text/csv', b'a,b\n')

        get_connection('aws').send(message)

        params = client.send_email.call_args.kwargs
        assert b'report.csv' in params['Content']['Raw']['Data']
        assert 'FromEmailAddress' not in params

    def test_region_from_registry_setting(self, client, monkeypatch):
        monkeypatch.delenv('AWS_REGION', raising=False)
        config.set_mailer('default', address='reports@example.com')
        config.set(AWS_REGION='ap-southeast-1')

        get_connection('aws').send(Message(recipients=['a@example.com']))

        client.factory.assert_called_once_with(
            'sesv2', region_name='ap-southeast-1'
        )

    def test_region_fallback(self, client, monkeypatch):
        monkeypatch.delenv('AWS_REGION', raising=False)
        monkeypatch.delenv('AWS_DEFAULT_REGION', raising=False)
        config.set_mailer('default', address='reports@example.com')

        get_connection('aws').send(Message(recipients=['a@example.com']))

        client.factory.assert_called_once_with(
            'sesv2', region_name='us-east-1'
        )

    def test_client_error(self, client):
        config.set_mailer('default', address='reports@example.com')
        client.send_email.side_effect = _client_error()

        with pytest.raises(MailError):
            get_connection('aws').send(Message(recipients=['a@example.com']))

        backend = get_connection('aws', fail_silently=True)
        assert backend.send(Message(recipients=['a@example.com'])) is False

    def test_backend_class_is_registered(self):
        config.set_mailer('default', address='reports@example.com')
        assert isinstance(get_connection('aws'), aws.MailBackend)
