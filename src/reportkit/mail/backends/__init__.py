from reportkit.mail.backends import aws, locmem, smtp


backend_classes = {
    'aws': aws.MailBackend,
    'locmem': locmem.MailBackend,
    'smtp': smtp.MailBackend,
}
