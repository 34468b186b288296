"""Shared constants and path configuration for orgpress."""

import os

SETTINGS_DIR = os.path.expanduser("~/.config/orgpress")
SETTINGS_FILE = os.path.join(SETTINGS_DIR, "settings.json")

DEFAULT_SOURCE_DIR = os.path.expanduser("~/org/blog")
DEFAULT_SITE_DIR = os.path.expanduser("~/site")
DEFAULT_POSTS_DIR = os.path.join(DEFAULT_SITE_DIR, "_posts")
DEFAULT_PAGES_DIR = DEFAULT_SITE_DIR
SOURCE_EXTENSIONS = [".org"]
PORT = 4244
