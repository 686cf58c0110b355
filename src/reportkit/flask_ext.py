"""
Defines a Flask extension for loading reportkit configuration from a
Flask app.

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

from reportkit import config as reportkit_config


PREFIX = 'REPORTKIT_'


class Reportkit:
    """
    Flask extension for reportkit.

    Usage:

        from reportkit.flask_ext import Reportkit
        reportkit = Reportkit()

        def create_app():
            app = Flask(__name__)
            app.config['REPORTKIT_SOURCES'] = {
                'default': {'dsn': 'dbi:mysql:blinkybase', 'user': 'root'},
            }
            app.config['REPORTKIT_LOG_FILE'] = 'reports.log'
            app.config['REPORTKIT_MAIL_BACKEND'] = 'smtp'
            reportkit.init_app(app)
            return app
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """
        Bind reportkit configuration values from the Flask app to the
        shared registry.
        """
        registry = reportkit_config.get_registry()
        reportkit_keys = {
            key[len(PREFIX):]: app.config[key]
            for key in app.config
            if key.startswith(PREFIX)
        }

        log_file = reportkit_keys.pop('LOG_FILE', None)
        if log_file:
            registry.log_file = log_file

        debug_mode = reportkit_keys.pop('DEBUG_MODE', None)
        if debug_mode is None:
            debug_mode = app.config.get('DEBUG', False)
        registry.debug_mode = debug_mode

        for name, options in reportkit_keys.pop('SOURCES', {}).items():
            registry.set_source(name, options)
        for name, options in reportkit_keys.pop('MAILERS', {}).items():
            registry.set_mailer(name, options)

        registry.load_dict(reportkit_keys)
        app.extensions = getattr(app, 'extensions', {})
        app.extensions['reportkit'] = self

    @staticmethod
    def get_config(key, default=None):
        """
        Read reportkit settings inside view functions.
        """
        return reportkit_config.get(key, default)
