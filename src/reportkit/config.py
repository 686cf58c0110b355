"""
Defines a global configuration registry used by other modules.

The registry holds named data sources, named mailers, the active log
file, a debug flag and any other values an application wants to share.

Usage:

    from reportkit import config

    with config.configure() as settings:
        settings.log_file = 'reports.log'
        settings.debug_mode = True
        settings.set_source(
            'default',
            dsn='dbi:mysql:somedb:db.blixy.org',
            user='root',
            password='chunky_bacon',
        )
        settings.report_title = 'Monthly sales'

    config.default_source().dsn    # 'dbi:mysql:somedb:db.blixy.org'
    config.get('report_title')     # 'Monthly sales'

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

import logging
import os
from contextlib import contextmanager

from reportkit.errors import MissingFieldError
from reportkit.log import LOG_ONLY, Issue, report


_log = logging.getLogger(__name__)

SINK_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class Descriptor:
    """
    Read-only collection of named settings.

    Fields that were never supplied read as None. Fields named
    after a method ('get', 'keys', 'to_dict') are only reachable
    by item access, e.g. descriptor['keys'].
    """

    def __init__(self, options=None, **fields):
        values = dict(options or {})
        values.update(fields)
        object.__setattr__(self, '_fields', values)

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self._fields.get(name)

    def __setattr__(self, name, value):
        raise AttributeError(
            f'{type(self).__name__} is read-only; register it again instead'
        )

    def __getitem__(self, key):
        return self._fields[key]

    def __contains__(self, key):
        return key in self._fields

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._fields == other._fields

    __hash__ = None

    def __repr__(self):
        fields = ', '.join(f'{k}={v!r}' for k, v in self._fields.items())
        return f'{type(self).__name__}({fields})'

    def get(self, key, default=None):
        return self._fields.get(key, default)

    def keys(self):
        return self._fields.keys()

    def to_dict(self):
        return dict(self._fields)


class SourceDescriptor(Descriptor):
    """
    Connection settings for a data source.

    Known fields are 'dsn' (required), 'user' and 'password'. Any other
    field is kept as given.
    """


class MailerDescriptor(Descriptor):
    """
    Settings for a mailer: 'host', 'address', 'user', 'password',
    'port' and 'auth_type', plus anything backend specific.
    """


class Config:
    """
    Configuration registry.

    Names that are not part of this class act as free-form settings:

        config.report_title = 'Sales'
        config.report_title     # 'Sales'
        config.never_set        # None

    This includes misspelled method names: config.set_sorce reads as
    None, so calling it fails with a TypeError rather than an
    AttributeError.

    The registry does no locking. Configure it once at startup from a
    single thread and treat it as read-mostly afterwards.
    """

    def __init__(self):
        object.__setattr__(self, '_sources', {})
        object.__setattr__(self, '_mailers', {})
        object.__setattr__(self, '_extras', {})
        object.__setattr__(self, '_debug_mode', False)
        object.__setattr__(self, '_logger', None)
        object.__setattr__(self, '_log_file', None)

    def __getattr__(self, name):
        # Only reached when normal lookup fails.
        if name.startswith('_'):
            raise AttributeError(name)
        return self._extras.get(name)

    def __setattr__(self, name, value):
        if name.startswith('_'):
            object.__setattr__(self, name, value)
            return
        attr = getattr(type(self), name, None)
        if isinstance(attr, property):
            object.__setattr__(self, name, value)
        elif attr is not None:
            raise AttributeError(
                f"'{name}' is a {type(self).__name__} method and cannot "
                'be used as a setting name'
            )
        else:
            self._extras[name] = value

    # Sources

    @property
    def sources(self):
        return self._sources

    def set_source(self, name, options=None, *, strict=True, **fields):
        """
        Register a data source, replacing any source with the same name.

        Args:
            name (str): The source name. 'default' is used when no
                source is requested by name.
            options (dict, optional): Source settings. Keyword arguments
                are merged over these.
            strict (bool): Raise MissingFieldError when the source has
                no DSN. The source is stored and the problem is logged
                either way.

        Example:

            config.set_source('default', user='root', password='clyde',
                              dsn='dbi:mysql:blinkybase')
        """
        self._sources[name] = SourceDescriptor(options, **fields)
        _log.debug('Registered source %r', name)
        issue = self.check_source(name)
        if issue is not None:
            report(issue, config=self)
            if strict:
                raise issue.error
        return self._sources[name]

    def get_source(self, name):
        """
        Return the source registered under name, or None.
        """
        return self._sources.get(name)

    def check_source(self, name):
        """
        Return an Issue if the named source has no DSN, otherwise None.
        """
        source = self._sources.get(name)
        if source is None or source.dsn:
            return None
        error = MissingFieldError(name, 'dsn')
        return Issue(
            message=str(error),
            status='fatal',
            level=LOG_ONLY,
            error=error,
        )

    @property
    def default_source(self):
        return self.get_source('default')

    # Mailers

    @property
    def mailers(self):
        return self._mailers

    def set_mailer(self, name, options=None, **fields):
        """
        Register a mailer, replacing any mailer with the same name.

        Example:

            config.set_mailer('default', host='mail.chunkybacon.org',
                              address='chunky@bacon.net', port=25)
        """
        self._mailers[name] = MailerDescriptor(options, **fields)
        _log.debug('Registered mailer %r', name)
        return self._mailers[name]

    def get_mailer(self, name):
        return self._mailers.get(name)

    @property
    def default_mailer(self):
        return self.get_mailer('default')

    # Log sink

    def set_log_file(self, path):
        """
        Send log() output to the file at path.

        Any previously active log file is flushed and closed once the
        new one is open. If path cannot be opened the old one stays.
        """
        path = os.fspath(path)
        handler = logging.FileHandler(path)
        handler.setFormatter(logging.Formatter(SINK_FORMAT))
        sink = logging.Logger(f'reportkit.sink:{path}', logging.DEBUG)
        sink.addHandler(handler)
        self.close()
        self._logger = sink
        self._log_file = path
        _log.debug('Logging to %s', path)
        return sink

    @property
    def log_file(self):
        return self._log_file

    @log_file.setter
    def log_file(self, path):
        self.set_log_file(path)

    @property
    def logger(self):
        return self._logger

    def close(self):
        """
        Close the active log file, if any.
        """
        sink = self._logger
        if sink is None:
            return
        for handler in list(sink.handlers):
            handler.flush()
            handler.close()
            sink.removeHandler(handler)
        self._logger = None
        self._log_file = None

    # Debug mode

    @property
    def debug_mode(self):
        """
        When True, messages logged with level 'log_only' are printed too.
        """
        return self._debug_mode

    @debug_mode.setter
    def debug_mode(self, value):
        self._debug_mode = bool(value)

    # Free-form settings

    @property
    def extras(self):
        return dict(self._extras)

    def set(self, **kwargs):
        self._extras.update(kwargs)

    def load_dict(self, dict_items):
        self._extras.update(dict_items)

    def get(self, key, default=None):
        return self._extras.get(key, default)


_registry = None


def get_registry():
    """
    Return the shared registry, creating it on first use.
    """
    global _registry
    if _registry is None:
        _registry = Config()
    return _registry


def reset_registry():
    """
    Discard the shared registry. Mostly useful in tests.
    """
    global _registry
    if _registry is not None:
        _registry.close()
    _registry = None


@contextmanager
def configure():
    yield get_registry()


def set_source(name, options=None, *, strict=True, **fields):
    return get_registry().set_source(
        name, options, strict=strict, **fields
    )


def get_source(name):
    return get_registry().get_source(name)


def check_source(name):
    return get_registry().check_source(name)


def default_source():
    return get_registry().default_source


def set_mailer(name, options=None, **fields):
    return get_registry().set_mailer(name, options, **fields)


def get_mailer(name):
    return get_registry().get_mailer(name)


def default_mailer():
    return get_registry().default_mailer


def set_log_file(path):
    return get_registry().set_log_file(path)


def logger():
    return get_registry().logger


def debug_mode():
    return get_registry().debug_mode


def set_debug_mode(value):
    get_registry().debug_mode = value


def set(**kwargs):
    get_registry().set(**kwargs)


def load_dict(dict_items):
    get_registry().load_dict(dict_items)


def get(key, default=None):
    return get_registry().get(key, default)
