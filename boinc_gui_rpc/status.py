"""Daemon status codes returned in ``error_num`` fields.

Values mirror the BOINC client's ``error_numbers.h``.
"""

from __future__ import annotations

from enum import IntEnum

from .classifier import ClassifiedResponse, RpcDomainResult

STATUS_FIELD = "error_num"


class ErrorCode(IntEnum):
    """BOINC status codes. Zero is success, negative values are failures."""

    SUCCESS = 0
    SELECT = -100
    MALLOC = -101
    READ = -102
    WRITE = -103
    FREAD = -104
    FWRITE = -105
    IO = -106
    CONNECT = -107
    FOPEN = -108
    RENAME = -109
    UNLINK = -110
    OPEN_DIR = -111
    XML_PARSE = -112
    GET_HOST_BY_NAME = -113
    GIVEUP_DOWNLOAD = -114
    GIVEUP_UPLOAD = -115
    NULL = -116
    NEG = -117
    BUFFER_OVERFLOW = -118
    MD5_FAILED = -119
    RSA_FAILED = -120
    OPEN = -121
    DUP2 = -122
    NO_SIGNATURE = -123
    THREAD = -124
    SIGNAL_CATCH = -125
    BAD_FORMAT = -126
    UPLOAD_TRANSIENT = -127
    UPLOAD_PERMANENT = -128
    IDLE_PERIOD = -129
    ALREADY_ATTACHED = -130
    FILE_TOO_BIG = -131
    GETRUSAGE = -132
    BENCHMARK_FAILED = -133
    BAD_HEX_FORMAT = -134
    GET_ADDR_INFO = -135
    DB_NOT_FOUND = -136
    DB_NOT_UNIQUE = -137
    DB_CANT_CONNECT = -138
    GETS = -139
    SCANF = -140
    READDIR = -143
    SHMGET = -144
    SHMCTL = -145
    SHMAT = -146
    FORK = -147
    EXEC = -148
    NOT_EXITED = -149
    NOT_IMPLEMENTED = -150
    GETHOSTNAME = -151
    NETOPEN = -152
    SOCKET = -153
    FCNTL = -154
    AUTHENTICATOR = -155
    SCHED_SHMEM = -156
    ASYNCSELECT = -157
    BAD_RESULT_STATE = -158
    DB_CANT_INIT = -159
    NOT_UNIQUE = -160
    NOT_FOUND = -161
    NO_EXIT_STATUS = -162
    FILE_MISSING = -163
    KILL = -164
    SEMGET = -165
    SEMCTL = -166
    SEMOP = -167
    FTOK = -168
    SOCKS_UNKNOWN_FAILURE = -169
    SOCKS_REQUEST_FAILED = -170
    SOCKS_BAD_USER_PASS = -171
    SOCKS_UNKNOWN_SERVER_VERSION = -172
    SOCKS_UNSUPPORTED = -173
    SOCKS_CANT_REACH_HOST = -174
    SOCKS_CONN_REFUSED = -175
    TIMER_INIT = -176
    INVALID_PARAM = -178
    SIGNAL_OP = -179
    BIND = -180
    LISTEN = -181
    TIMEOUT = -182
    PROJECT_DOWN = -183
    HTTP_TRANSIENT = -184
    RESULT_START = -185
    RESULT_DOWNLOAD = -186
    RESULT_UPLOAD = -187
    BAD_USERNAME = -188
    INVALID_URL = -189
    MAJOR_VERSION = -190
    NO_OPTION = -191
    MKDIR = -192
    INVALID_EVENT = -193
    ALREADY_RUNNING = -194
    NO_APP_VERSION = -195
    WU_USER_RULE = -196
    ABORTED_VIA_GUI = -197
    INSUFFICIENT_RESOURCE = -198
    RETRY = -199
    WRONG_SIZE = -200
    USER_PERMISSION = -201
    SHMEM_NAME = -202
    NO_NETWORK_CONNECTION = -203
    IN_PROGRESS = -204
    BAD_EMAIL_ADDR = -205
    BAD_PASSWD = -206
    NON_UNIQUE_EMAIL = -207
    ACCT_CREATION_DISABLED = -208
    ATTACH_FAIL_INIT = -209
    ATTACH_FAIL_DOWNLOAD = -210
    ATTACH_FAIL_PARSE = -211
    ATTACH_FAIL_BAD_KEY = -212
    ATTACH_FAIL_FILE_WRITE = -213
    ATTACH_FAIL_SERVER_ERROR = -214
    SIGNING_KEY = -215
    FFLUSH = -216
    FSYNC = -217
    TRUNCATE = -218
    WRONG_URL = -219
    DUP_NAME = -220
    GETGRNAM = -222
    CHOWN = -223
    HTTP_PERMANENT = -224
    BAD_FILENAME = -225
    TOO_MANY_EXITS = -226
    RMDIR = -227
    SYMLINK = -229
    DB_CONN_LOST = -230
    CRYPTO = -231
    ABORTED_ON_EXIT = -232
    PROC_PARSE = -235
    STATFS = -236
    PIPE = -237
    NEED_HTTPS = -238


# The only status that keeps a poll loop going. Other negative codes are terminal.
IN_PROGRESS = ErrorCode.IN_PROGRESS


def status_code_of(
    response: ClassifiedResponse, field: str = STATUS_FIELD
) -> int | None:
    """Return the embedded status of a domain result, or None for other outcomes.

    A domain result without the field reports success (0).
    """
    if not isinstance(response, RpcDomainResult):
        return None
    return response.document.get_int(field, ErrorCode.SUCCESS)


def describe_status(code: int) -> str:
    """Return the ErrorCode name for ``code`` or the bare number if unknown."""
    try:
        return ErrorCode(code).name
    except ValueError:
        return str(code)
