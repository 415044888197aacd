from .exc import *
from .formatting import StatusResponse
from .protocol import StatusOptions, StatusQuery, get_status, status_fe01
from .srv import SRVRecord, resolve_srv
