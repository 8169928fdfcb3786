"""Constants for PdfIt."""

from pathlib import Path

# Application constants
APP_NAME = "pdfit"

# Default paths
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "pdfit.yaml"
DEFAULT_SCRATCH_PREFIX = "pdfit-lo-"

# Config file locations (in order of priority)
CONFIG_LOCATIONS = [
    Path.cwd() / DEFAULT_CONFIG_FILE,
    Path.home() / ".config" / APP_NAME / "config.yaml",
]

# Input discovery
DEFAULT_SOURCE_EXTENSIONS = [".doc", ".docx"]
TARGET_EXTENSION = ".pdf"

# Backends
BACKEND_EXCLUSIVE_SESSION = "exclusive_session"
BACKEND_EXTERNAL_PROCESS = "external_process"
BACKENDS = [BACKEND_EXCLUSIVE_SESSION, BACKEND_EXTERNAL_PROCESS]

# Default parallelism per backend when not configured
DEFAULT_PARALLELISM = {
    BACKEND_EXCLUSIVE_SESSION: 2,
    BACKEND_EXTERNAL_PROCESS: 4,
}

# Office automation is unstable with many live instances
DEFAULT_SESSION_CEILING = 4

# Scheduling
DEFAULT_CHUNK_SIZE = 50
DEFAULT_CHUNK_PAUSE = 0.5  # seconds between chunks
DEFAULT_PROGRESS_STEP = 5  # percent

# Timeout settings (seconds)
DEFAULT_CONVERSION_TIMEOUT = 60

# Skip policy
DEFAULT_MTIME_TOLERANCE = 0.0

# Reporting
DEFAULT_FAILURE_PREVIEW = 10

# LibreOffice install locations checked before PATH
LIBREOFFICE_WINDOWS_PATHS = [
    r"C:\Program Files\LibreOffice\program\soffice.exe",
    r"C:\Program Files (x86)\LibreOffice\program\soffice.exe",
]
LIBREOFFICE_MACOS_PATH = "/Applications/LibreOffice.app/Contents/MacOS/soffice"

# Department lookup query for the database naming source
DEFAULT_DEPARTMENT_QUERY = (
    "SELECT section_id, department_name, section_name FROM departments"
)
