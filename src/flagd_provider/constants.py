class FlagdService:
    """flagd evaluation API service and method names."""

    NAME = "flagd.evaluation.v1.Service"

    RESOLVE_BOOLEAN = "ResolveBoolean"
    RESOLVE_STRING = "ResolveString"
    RESOLVE_INT = "ResolveInt"
    RESOLVE_FLOAT = "ResolveFloat"
    # HTTP only, the JSON API does not tell integers and floats apart
    RESOLVE_NUMBER = "ResolveNumber"
    RESOLVE_OBJECT = "ResolveObject"


class ConfigDefaults:
    HOST = "localhost"
    PORT = 8013
    TLS = False
    CONNECT_TIMEOUT = 5.0


class EnvKey:
    HOST = "FLAGD_HOST"
    PORT = "FLAGD_PORT"
    TLS = "FLAGD_TLS"
    CERT_PATH = "FLAGD_SERVER_CERT_PATH"
    CONNECT_TIMEOUT = "FLAGD_CONNECT_TIMEOUT"


class HttpWire:
    CONTENT_TYPE = "application/json"
    FLAG_KEY = "flagKey"
    CONTEXT = "context"
    VALUE = "value"
    VARIANT = "variant"
    REASON = "reason"
    FLAG_METADATA = "flagMetadata"
    ERROR_CODE = "code"
    ERROR_MESSAGE = "message"
    NOT_FOUND_CODE = "not_found"
    DEFAULT_ERROR_CODE = "general"
    DEFAULT_ERROR_MESSAGE = "Unknown error"
