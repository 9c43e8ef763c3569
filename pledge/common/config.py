# -*- coding: utf-8 -*-

"""Manages the settings of the promise engine.

Settings are loaded from a configuration file. If they don't exist, default
values are provided. The file is optional: without any call to ``load()``,
all entries have their default value.

The file is an ini file with a single ``[config]`` section:

    [config]
    unhandled_grace_period = 0.5
    log_unhandled = off
"""

import configparser
import logging
import os.path

from . import path as pledge_path

_logger = logging.getLogger(__name__)


# Default config dict. Values not present in this dict are not valid.
# Each entry contains the type expected, and the default value.
_default_config = {
    'unhandled_grace_period': {'type': float, 'default': 0.1},
    'log_unhandled': {'type': bool, 'default': True}
}

# Actual config parser
_config_parser = configparser.ConfigParser()
_config_parser.add_section('config')


def _get_config_file_path():
    return os.path.join(pledge_path.get_config_dir(), 'pledge.ini')


def load(path=None):
    """Find and load the config file.

    Args:
        path (str, optional): config file to read. Default to ``pledge.ini``
            in the user config directory.
    Returns:
        bool: True if the file has been read.
    """
    config_file_path = path or _get_config_file_path()

    if not _config_parser.read(config_file_path):
        _logger.warning('Unable to load config file: %s', config_file_path)
        return False
    _logger.debug('Config file %s loaded.', config_file_path)
    return True


def get(key):
    """Find and return a configuration entry

    If the entry is not specified in the config file, a default value is
    returned. If the value in the file is invalid, a warning is logged and the
    default value is returned.

    Args:
        key (string): the entry key.
    Returns:
        The corresponding value found.
    Raises:
        KeyError: if the config entry doesn't exists.
    """
    if key not in _default_config:
        raise KeyError(key)
    entry_type = _default_config[key]['type']
    try:
        if entry_type is bool:
            return _config_parser.getboolean('config', key)
        elif entry_type is float:
            return _config_parser.getfloat('config', key)
        else:
            return _config_parser.get('config', key)
    except configparser.NoOptionError:
        return _default_config[key]['default']
    except ValueError:
        _logger.warning('Invalid value for config entry "%s": %r. Default '
                        'value will be used.', key,
                        _config_parser.get('config', key))
        return _default_config[key]['default']


def set(key, value):
    """Set a configuration entry, in memory.

    Args:
        key (string): the entry key.
        value: the new value to set. It will be converted to string. If None,
            the entry is reset to its default value.
    Raises:
        KeyError: if the config entry is not valid.
    """
    if key not in _default_config:
        raise KeyError(key)
    if value is None:
        _config_parser.remove_option('config', key)
    else:
        _config_parser.set('config', key, str(value))


def save(path=None):
    """Write the current configuration in the config file.

    Args:
        path (str, optional): destination file. Default to ``pledge.ini``
            in the user config directory.
    Returns:
        bool: True if the file has been written.
    """
    if path is None:
        pledge_path.get_config_dir(create=True)
        path = _get_config_file_path()
    try:
        with open(path, 'w') as config_file:
            _config_parser.write(config_file)
        _logger.debug('Config file %s modified.', path)
        return True
    except IOError:
        _logger.warning('Unable to write in the config file', exc_info=True)
        return False


def reset():
    """Forget all entries set or loaded; defaults apply again."""
    _config_parser.remove_section('config')
    _config_parser.add_section('config')
