"""Settings persistence and the publish configuration object.

Settings live in ~/.config/orgpress/settings.json and are merged over
_DEFAULTS on load. build_config() turns a settings dict into the frozen
PublishConfig handed to the reader and dispatcher.
"""

import json
import os
from dataclasses import dataclass, field

from config import (
    DEFAULT_PAGES_DIR,
    DEFAULT_POSTS_DIR,
    DEFAULT_SOURCE_DIR,
    SETTINGS_FILE,
    SOURCE_EXTENSIONS,
)
from services.schema import CLASSIC_SCHEMA, SCHEMAS, RequiredFieldSchema
from services.transcode import LIST_STYLES

_SETTINGS_FILE = SETTINGS_FILE

_DEFAULTS = {
    "source_dir": DEFAULT_SOURCE_DIR,
    "posts_dir": DEFAULT_POSTS_DIR,
    "pages_dir": DEFAULT_PAGES_DIR,
    "extensions": SOURCE_EXTENSIONS,
    "post_layout": "post",
    "page_layout": "default",
    "schema": CLASSIC_SCHEMA.name,
    "required_overrides": {},
    "keep_blank": False,
    "empty_is_present": True,
    "list_style": "inline",
    "default_author": "",
    "extra_fields": [],
    "max_workers": 4,
}


@dataclass(frozen=True)
class PublishConfig:
    source_dir: str = DEFAULT_SOURCE_DIR
    posts_dir: str = DEFAULT_POSTS_DIR
    pages_dir: str = DEFAULT_PAGES_DIR
    extensions: tuple[str, ...] = tuple(SOURCE_EXTENSIONS)
    post_layout: str = "post"
    page_layout: str = "default"
    schema: RequiredFieldSchema = CLASSIC_SCHEMA
    keep_blank: bool = False
    empty_is_present: bool = True
    list_style: str = "inline"
    default_author: str = ""
    extra_fields: frozenset[str] = field(default_factory=frozenset)
    max_workers: int = 4


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def validate_settings(data: dict) -> list[str]:
    """Return a list of problems with *data*. Only keys present are checked."""
    errors = []
    for key in ("source_dir", "posts_dir", "pages_dir", "post_layout", "page_layout"):
        if key in data and (not isinstance(data[key], str) or not data[key].strip()):
            errors.append(f"{key} must be a non-empty string")
    if "default_author" in data and not isinstance(data["default_author"], str):
        errors.append("default_author must be a string")
    for key in ("extensions", "extra_fields"):
        if key in data and not _is_str_list(data[key]):
            errors.append(f"{key} must be a list of strings")
    for key in ("keep_blank", "empty_is_present"):
        if key in data and not isinstance(data[key], bool):
            errors.append(f"{key} must be a boolean")
    if "schema" in data and data["schema"] not in SCHEMAS:
        errors.append(f"schema must be one of {sorted(SCHEMAS)}")
    if "list_style" in data and data["list_style"] not in LIST_STYLES:
        errors.append('list_style must be "inline" or "block"')
    if "required_overrides" in data:
        ro = data["required_overrides"]
        if not isinstance(ro, dict) or not all(isinstance(v, bool) for v in ro.values()):
            errors.append("required_overrides must be an object of {field: bool}")
    if "max_workers" in data:
        mw = data["max_workers"]
        if not isinstance(mw, int) or isinstance(mw, bool) or not (1 <= mw <= 32):
            errors.append("max_workers must be an integer between 1 and 32")
    return errors


def load_settings() -> dict:
    """Load the settings file merged over defaults. Unknown keys are dropped."""
    try:
        with open(_SETTINGS_FILE) as f:
            saved = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        saved = {}
    if not isinstance(saved, dict):
        saved = {}

    settings = {}
    for key, default_val in _DEFAULTS.items():
        value = saved.get(key, default_val)
        if isinstance(value, dict):
            value = dict(value)
        elif isinstance(value, list):
            value = list(value)
        settings[key] = value
    return settings


def save_settings(settings: dict) -> None:
    """Persist known keys only."""
    os.makedirs(os.path.dirname(_SETTINGS_FILE), exist_ok=True)
    data = {k: settings[k] for k in _DEFAULTS if k in settings}
    with open(_SETTINGS_FILE, "w") as f:
        json.dump(data, f, indent=2)


def build_config(settings: dict = None) -> PublishConfig:
    """Build a PublishConfig from a settings dict (loaded from disk when omitted)."""
    if settings is None:
        settings = load_settings()
    merged = {**_DEFAULTS, **settings}
    errors = validate_settings(merged)
    if errors:
        raise ValueError("Invalid settings: " + "; ".join(errors))

    schema = SCHEMAS[merged["schema"]].with_overrides(merged["required_overrides"])
    return PublishConfig(
        source_dir=os.path.expanduser(merged["source_dir"]),
        posts_dir=os.path.expanduser(merged["posts_dir"]),
        pages_dir=os.path.expanduser(merged["pages_dir"]),
        extensions=tuple(merged["extensions"]),
        post_layout=merged["post_layout"],
        page_layout=merged["page_layout"],
        schema=schema,
        keep_blank=merged["keep_blank"],
        empty_is_present=merged["empty_is_present"],
        list_style=merged["list_style"],
        default_author=merged["default_author"],
        extra_fields=frozenset(merged["extra_fields"]),
        max_workers=merged["max_workers"],
    )
