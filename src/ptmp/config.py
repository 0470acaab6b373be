""" Client configuration. Settings are resolved in three layers, each one
    overriding the last:

    1. the built-in :data:`defaults`;
    2. the JSON file ``client.json`` in the configuration :func:`directory`,
       if present;
    3. ``PTMP_*`` environment variables, see :data:`environment`.
"""

import os
import threading

from . import json
from .protocol import constants


defaults = dict()
defaults['address'] = '127.0.0.1'
defaults['port'] = constants.DEFAULT_IPC_PORT
defaults['username'] = None
defaults['app_id'] = None
defaults['keep_alive_period'] = constants.DEFAULT_KEEP_ALIVE_PERIOD
defaults['reserved'] = constants.DEFAULT_RESERVED
defaults['authentication'] = constants.AUTHENTICATION_CLEARTEXT
defaults['transport'] = 'tcp'
defaults['timeout'] = None
defaults['strict'] = False

# Environment variable names, and the conversion applied to their values.

environment = dict()
environment['address'] = ('PTMP_ADDRESS', str)
environment['port'] = ('PTMP_PORT', int)
environment['username'] = ('PTMP_USERNAME', str)
environment['app_id'] = ('PTMP_APP_ID', str)
environment['keep_alive_period'] = ('PTMP_KEEPALIVE', int)
environment['transport'] = ('PTMP_TRANSPORT', str)
environment['timeout'] = ('PTMP_TIMEOUT', float)
environment['strict'] = ('PTMP_STRICT', lambda value: value.lower() in ('1', 'true', 'yes'))

filename = 'client.json'

_cache = None
_cache_lock = threading.Lock()


class Configuration:
    """ A convenience class to represent the resolved settings. To first
        order an instance acts like a read-only dictionary.
    """

    def __init__(self, settings):
        self._settings = dict(settings)

    def __contains__(self, key):
        return key in self._settings

    def __getitem__(self, key):
        try:
            return self._settings[key]
        except KeyError:
            raise KeyError('unknown setting: ' + str(key)) from None

    def __len__(self):
        return len(self._settings)

    def __repr__(self):
        return 'Configuration(' + repr(self._settings) + ')'

    def get(self, key, default=None):
        return self._settings.get(key, default)

    def keys(self):
        return tuple(self._settings.keys())


# end of class Configuration



def load(reload=False):
    """ Return the :class:`Configuration` for this process. The result is
        cached; pass *reload* as True to read the file and environment anew.
    """

    global _cache

    with _cache_lock:
        if _cache is not None and not reload:
            return _cache

        settings = dict(defaults)
        settings.update(_load_file())
        settings.update(_load_environment())

        if settings['transport'] not in ('tcp', 'zmq'):
            raise ValueError('unknown transport in configuration: ' + repr(settings['transport']))

        _cache = Configuration(settings)
        return _cache


def _load_file():

    base_dir = directory()
    path = os.path.join(base_dir, filename)

    try:
        with open(path, 'rb') as contents:
            raw = contents.read()
    except FileNotFoundError:
        return dict()

    loaded = json.loads(raw)

    if not isinstance(loaded, dict):
        raise ValueError('configuration file must hold a JSON object: ' + path)

    unknown = set(loaded) - set(defaults)
    if unknown:
        raise ValueError('unknown settings in ' + path + ': ' + ', '.join(sorted(unknown)))

    return loaded


def _load_environment():

    found = dict()

    for key, (variable, convert) in environment.items():
        try:
            value = os.environ[variable]
        except KeyError:
            continue

        try:
            found[key] = convert(value)
        except ValueError:
            raise ValueError('invalid value for ' + variable + ': ' + repr(value)) from None

    return found



def directory(default=None):
    """ Return the directory location where we should be loading
        configuration files. This defaults to ``$HOME/.ptmp``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``PTMP_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['PTMP_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['PTMP_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('PTMP_HOME and HOME environment variables not set, cannot determine PTMP configuration directory')

    found = os.path.join(home, '.ptmp')

    directory.found = found
    return found

directory.found = None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
