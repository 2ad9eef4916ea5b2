# src/dvln/meta.py
"""Program identity and build metadata."""

import getpass
import sys
from dataclasses import dataclass
from pathlib import Path


# --- program identity --------------------------------------------------------

PROGRAM_PACKAGE = "dvln"
PROGRAM_SCRIPT = "dvln"
PROGRAM_DISPLAY = "dvln"
# prefix for every environment variable that feeds a setting (DVLN_DEBUG, ...)
PROGRAM_ENV = "DVLN"
# base name of the user config file (cfg.json, cfg.toml, cfg.yaml, ...)
PROGRAM_CONFIG = "cfg"

__version__ = "0.0.1"
API_VERSION = "0.1"
BUILD_DATE = "2015-06-01"

# Filled in by the release build; blank for local checkouts.
COMMIT_SHA1 = ""


@dataclass(frozen=True)
class Metadata:
    """Version information shown by `dvln version` and `dvln --version`."""

    version: str
    api_version: str
    build_date: str
    commit: str
    exec_name: str

    def as_dict(self, verbosity: str = "regular") -> dict[str, str]:
        """Return the fields visible at the given verbosity, JSON key names."""
        data = {"toolVersion": self.version}
        if verbosity == "terse":
            return data
        data["apiVersion"] = self.api_version
        data["buildDate"] = self.build_date
        if verbosity == "verbose":
            data["execName"] = self.exec_name
            if self.commit:
                data["commit"] = self.commit
        return data

    def as_text(self, verbosity: str = "regular") -> str:
        labels = {
            "toolVersion": "Version",
            "apiVersion": "API Rev",
            "buildDate": "Build Date",
            "execName": "Exec Name",
            "commit": "Commit",
        }
        return "\n".join(
            f"{labels[key]}: {value}" for key, value in self.as_dict(verbosity).items()
        )


def get_metadata() -> Metadata:
    exec_name = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else PROGRAM_SCRIPT
    return Metadata(
        version=__version__,
        api_version=API_VERSION,
        build_date=BUILD_DATE,
        commit=COMMIT_SHA1,
        exec_name=exec_name,
    )


def current_user() -> str | None:
    """Return the invoking user's login name, None if it cannot be determined."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None
