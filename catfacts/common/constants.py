"""Application constants."""

USER_AGENT = "catfacts-collector/0.1 (+sample corpus; contact: configured-email)"
DEFAULT_CONFIG_PATH = "config/collector.yml"
KEY_POLICIES = ("index", "id")
INDEX_KEY_TEMPLATE = "record-{index:04d}"
ENTRY_SUFFIX = ".json"
RUN_META_DIRNAME = "run_meta"
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "state",
    "iteration",
    "key",
    "event",
    "status",
    "http_status",
    "duration_ms",
    "error_code",
    "message",
)
