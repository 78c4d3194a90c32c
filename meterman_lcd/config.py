"""Build a decoder from a description.

A description is a dict (usually loaded from JSON) of the form::

    {
      "options": {"threshold_percent": 50, "history": 5},
      "offset": [0, 0],
      "templates": [{"name": "A", "bbox": [60, 0, 60, 100, 0, 100], "width": 8, "dp": [65, 95]}],
      "digits": [{"template": "A", "x": 10, "y": 20, "min": 100, "max": 30000}]
    }

offset is added to every digit position.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Union

from .const import (
    CONF_BBOX, CONF_DIGITS, CONF_DP, CONF_MAX, CONF_MIN, CONF_NAME,
    CONF_OFFSET, CONF_OPTIONS, CONF_TEMPLATE, CONF_TEMPLATES, CONF_WIDTH,
    CONF_X, CONF_Y,
)
from .decoder import LcdDecoder
from .exceptions import ConfigError
from .schema import DECODER_SCHEMA, validate

_LOGGER = logging.getLogger(__name__)


def load_config(src: Union[str, os.PathLike, Dict[str, Any]]) -> Dict[str, Any]:
    """Validate a description given as a dict, a JSON string or a JSON file path."""
    if isinstance(src, dict):
        data = src
    else:
        text = str(src)
        if os.path.isfile(text):
            try:
                with open(text, encoding="utf-8") as fp:
                    text = fp.read()
            except OSError as err:
                raise ConfigError(f"{src}: {err}") from err
        try:
            data = json.loads(text)
        except ValueError as err:
            raise ConfigError(f"Invalid JSON configuration: {err}") from err
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")
    return validate(DECODER_SCHEMA, data)


def create_decoder(src: Union[str, os.PathLike, Dict[str, Any]], **overrides: Any) -> LcdDecoder:
    """Create a decoder with all templates and digits from the description."""
    conf = load_config(src)
    options = dict(conf[CONF_OPTIONS])
    options.update(overrides)
    dec = LcdDecoder(**options)
    xoff, yoff = conf[CONF_OFFSET]
    for t in conf[CONF_TEMPLATES]:
        dec.add_template(t[CONF_NAME], t[CONF_BBOX], t[CONF_WIDTH], t[CONF_DP])
    for i, d in enumerate(conf[CONF_DIGITS]):
        levels = None
        if CONF_MIN in d:
            levels = (d[CONF_MIN], d[CONF_MAX])
        try:
            dec.add_digit(d[CONF_TEMPLATE], d[CONF_X] + xoff, d[CONF_Y] + yoff, levels)
        except ConfigError as err:
            raise ConfigError(f"Invalid digit #{i}: {err}") from err
    _LOGGER.debug("Created %r", dec)
    return dec
