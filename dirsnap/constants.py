import zipfile

from .version import FormatVersion


# Metadata layout written into every new snapshot
FORMAT_VERSION = FormatVersion(1, 0, 0)

# Naming
SNAPSHOT_PREFIX = "snapshot"
ARCHIVE_EXTENSION = ".zip"
MAX_DISAMBIGUATOR = 2**31 - 1  # signed 32-bit counter range

# Reserved entry holding version + comment. Relative file paths never start
# with "/", so the bare root marker cannot collide with a payload entry.
METADATA_ENTRY_NAME = "/"

# File copy retries for externally locked files
RETRIES = 5
RETRY_DELAY_SECONDS = 1.0

COMPRESSION = zipfile.ZIP_DEFLATED
