from __future__ import annotations

from typing import Any, Dict

import voluptuous as vol

from .const import (
    CONF_BBOX, CONF_DIGITS, CONF_DP, CONF_HISTORY, CONF_INVERSE, CONF_MAX,
    CONF_MAX_LEVELS, CONF_MIN, CONF_NAME, CONF_OFF_MARGIN, CONF_OFF_TRACKING,
    CONF_OFFSET, CONF_ON_MARGIN, CONF_OPTIONS, CONF_SAVED_LEVELS,
    CONF_TEMPLATE, CONF_TEMPLATES, CONF_THRESHOLD, CONF_WIDTH, CONF_X, CONF_Y,
    DEFAULT_HISTORY, DEFAULT_INVERSE, DEFAULT_MAX_LEVELS, DEFAULT_OFF_MARGIN,
    DEFAULT_OFF_TRACKING, DEFAULT_ON_MARGIN, DEFAULT_SAVED_LEVELS,
    DEFAULT_THRESHOLD,
)
from .exceptions import ConfigError


def _int(min_v=None, max_v=None):
    return vol.All(vol.Coerce(int), vol.Range(min=min_v, max=max_v))


def _ints(count=None):
    if count is None:
        return [vol.Coerce(int)]
    return vol.All([vol.Coerce(int)], vol.Length(min=count, max=count))


def _saved_within_max(opts: Dict[str, Any]) -> Dict[str, Any]:
    if opts[CONF_SAVED_LEVELS] > opts[CONF_MAX_LEVELS]:
        raise vol.Invalid(
            f"{CONF_SAVED_LEVELS} ({opts[CONF_SAVED_LEVELS]}) exceeds "
            f"{CONF_MAX_LEVELS} ({opts[CONF_MAX_LEVELS]})"
        )
    return opts


OPTIONS_SCHEMA = vol.All(
    vol.Schema({
        vol.Optional(CONF_THRESHOLD, default=DEFAULT_THRESHOLD): _int(0, 100),
        vol.Optional(CONF_HISTORY, default=DEFAULT_HISTORY): _int(1),
        vol.Optional(CONF_MAX_LEVELS, default=DEFAULT_MAX_LEVELS): _int(1),
        vol.Optional(CONF_SAVED_LEVELS, default=DEFAULT_SAVED_LEVELS): _int(1),
        vol.Optional(CONF_ON_MARGIN, default=DEFAULT_ON_MARGIN): _int(0),
        vol.Optional(CONF_OFF_MARGIN, default=DEFAULT_OFF_MARGIN): _int(0),
        vol.Optional(CONF_INVERSE, default=DEFAULT_INVERSE): vol.Boolean(),
        vol.Optional(CONF_OFF_TRACKING, default=DEFAULT_OFF_TRACKING): vol.Boolean(),
    }),
    _saved_within_max,
)

TEMPLATE_SCHEMA = vol.Schema({
    vol.Required(CONF_NAME): vol.All(str, vol.Length(min=1)),
    # TR, BR and BL as offsets from the implied (0, 0) top left.
    vol.Required(CONF_BBOX): _ints(),
    vol.Required(CONF_WIDTH): _int(1),
    vol.Optional(CONF_DP, default=list): _ints(),
})

DIGIT_SCHEMA = vol.Schema({
    vol.Required(CONF_TEMPLATE): str,
    vol.Required(CONF_X): vol.Coerce(int),
    vol.Required(CONF_Y): vol.Coerce(int),
    # Initial levels are given as a pair or not at all.
    vol.Inclusive(CONF_MIN, "levels"): vol.Coerce(int),
    vol.Inclusive(CONF_MAX, "levels"): vol.Coerce(int),
})

DECODER_SCHEMA = vol.Schema({
    vol.Optional(CONF_OPTIONS, default=dict): OPTIONS_SCHEMA,
    vol.Optional(CONF_OFFSET, default=lambda: [0, 0]): _ints(2),
    vol.Required(CONF_TEMPLATES): [TEMPLATE_SCHEMA],
    vol.Optional(CONF_DIGITS, default=list): [DIGIT_SCHEMA],
})


def validate(schema, data: Any) -> Any:
    """Run a schema, reporting failures as ConfigError."""
    try:
        return schema(data)
    except vol.Invalid as err:
        raise ConfigError(f"Invalid configuration: {err}") from err
