"""Actionable error catalog for mongobackup."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_setting": {
        "what": "{name} environment variable is required.",
        "next": "Export {name} in the job environment before running the backup.",
    },
    "dump_failed": {
        "what": "Backup failed: {error}",
        "next": "Check that mongodump is installed and the MongoDB credentials are valid.",
    },
    "upload_failed": {
        "what": "Upload failed: {error}",
        "next": "Check the bucket name and Google Cloud credentials. The local archive was kept.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
