"""INI helpers: user-facing comments written into settings.conf."""

from datetime import UTC, datetime

from davkeep.constants import (
    CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    SECTION_DEFAULT,
    SECTION_DEVICE,
    SECTION_DIRECTORY,
    SECTION_NETWORK,
    SECTION_RESTORE,
    SECTION_WEBDAV,
)


class ConfigCommentManager:
    """Manages configuration file comments for user-friendly documentation."""

    @staticmethod
    def get_file_header() -> str:
        """Generate file header comment with description and timestamp."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# davkeep Configuration
# Settings for backing up and restoring configuration to WebDAV or disk.
# The WebDAV password is not stored here; use `davkeep password --save`.
#
# Last updated: {timestamp}
# Configuration version: {CONFIG_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Get comments written above each section."""
        return {
            SECTION_DEFAULT: "# Logging levels: DEBUG, INFO, WARNING, ERROR\n",
            SECTION_WEBDAV: (
                "\n# WebDAV server holding cloud backups\n"
                "# url: collection URL, e.g. https://dav.example.com/backups\n"
            ),
            SECTION_DEVICE: (
                "\n# Identity recorded in backup metadata and filenames\n"
            ),
            SECTION_NETWORK: "\n# Request timeout for WebDAV calls\n",
            SECTION_RESTORE: (
                "\n# Time given to the database to release its files\n"
                "# before a restore overwrites them\n"
            ),
            SECTION_DIRECTORY: (
                "\n# app_config: directory that is backed up and restored\n"
                "# tmp: scratch directory (empty = system temp directory)\n"
            ),
        }
