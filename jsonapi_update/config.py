# Configuration settings should be set in app.config
# The defaults are kept as JsonApiUpdate class attributes, environment variables override them
# when no flask app is available
import os
import logging
from flask import current_app
from functools import lru_cache
import jsonapi_update
from typing import Optional, Union


@lru_cache(maxsize=128)
def get_config(option: str) -> Optional[Union[int, str]]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    :rtype: string
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # RuntimeError: working outside of application context
        result = getattr(jsonapi_update.JsonApiUpdate, option, os.environ.get(option, None))
    if result is None:
        result = os.environ.get(option, None)
    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return jsonapi_update.log.getEffectiveLevel() < logging.INFO
