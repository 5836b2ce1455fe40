"""Core tools: logs, configuration, environment files, docs."""

from .application_info import ApplicationInfo
from .get_config import GetConfig
from .last_error import LastError
from .list_env_vars import ListEnvVars
from .read_log_entries import ReadLogEntries
from .search_docs import SearchDocs

TOOLS = [
    ApplicationInfo,
    GetConfig,
    LastError,
    ListEnvVars,
    ReadLogEntries,
    SearchDocs,
]
