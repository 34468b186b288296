"""Front matter rendering, and loading a rendered block back as YAML."""

import datetime as _dt

import yaml

DELIMITER = "---"


def render(metadata: dict[str, str]) -> str:
    """Render `---`, one `key: value` line per entry in order, `---`, blank line."""
    lines = [DELIMITER]
    lines.extend(f"{key}: {value}" for key, value in metadata.items())
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n\n"


def parse_front_matter(content: str) -> tuple[dict, str]:
    """Extract YAML front matter and body from *content*.

    Returns ({}, content) when there is no delimited block. Raises
    yaml.YAMLError when the block exists but is not valid YAML.
    """
    if not content.startswith(DELIMITER):
        return {}, content

    lines = content.split("\n")
    end_idx = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    raw = yaml.safe_load("\n".join(lines[1:end_idx])) or {}
    if not isinstance(raw, dict):
        raise yaml.YAMLError(f"Front matter is a {type(raw).__name__}, not a mapping")
    # Dates come back as datetime objects; keep downstream code on plain strings.
    front_matter = {
        k: v.isoformat() if isinstance(v, _dt.date | _dt.datetime) else v for k, v in raw.items()
    }
    body = "\n".join(lines[end_idx + 1 :]).lstrip("\n")
    return front_matter, body
