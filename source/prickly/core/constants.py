APP_VERSION = "0.3.0"
APP_TITLE = "prickly - param file editor"

RUNTIME_DIR_NAME = "PricklyParamEditor"
SETTINGS_FILENAME = "prickly_settings.json"
LABELS_FILENAME = "ParamLabels.csv"

DIAG_LOG_FILENAME = "prickly_diagnostics.log"
DIAG_LOG_MAX_BYTES = 512 * 1024
DIAG_LOG_KEEP_BYTES = 256 * 1024
DIAG_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Autocomplete candidates kept per keystroke; bounds prefix scans over large label files.
AUTOCOMPLETE_LIMIT_DEFAULT = 64
AUTOCOMPLETE_LIMIT_MAX = 4096
# Readers give up on the label lock after this long and fall back to derived hashes.
LABEL_LOCK_TIMEOUT_SECONDS = 0.05

DOCUMENT_FORMAT_NAME = "prickly-param"
DOCUMENT_FORMAT_VERSION = 1
DOCUMENT_GZIP_SUFFIX = ".gz"
DOCUMENT_FILETYPES = (
    ("Param JSON", "*.json"),
    ("Param JSON (gzip)", "*.json.gz"),
    ("All Files", "*.*"),
)

STATUS_LOADED = "Loaded"
STATUS_SAVED = "Saved"
STATUS_EDITED = "Edited"
STATUS_EMPTY = "No params loaded. Press Ctrl+O to open a file"
