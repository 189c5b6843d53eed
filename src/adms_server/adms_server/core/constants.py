"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# Response tokens understood by the terminals.
ACK_TOKEN = "OK"
ERROR_TOKEN = "ERROR"

# Serial recorded when a terminal pushes data without identifying itself.
UNKNOWN_DEVICE_SN = "UNKNOWN"

# Asks the terminal to re-upload its whole attendance log through /iclock/querydata.
SYNC_ATTLOG_COMMAND = "C:99:DATA QUERY - tablename=ATTLOG,fielddesc=*,filter=*"

ATTLOG_HEADER_MARKER = "ATTLOG"
OPLOG_MARKER = "OPLOG"

PUNCH_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_ATTENDANCE_LIMIT = 100
MAX_ATTENDANCE_LIMIT = 1000
DEFAULT_COMMAND_LIST_LIMIT = 50
DEFAULT_COMMAND_INFLIGHT_TIMEOUT = 600
DEFAULT_OFFLINE_AFTER_SECONDS = 300
