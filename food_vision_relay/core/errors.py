class RelayError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400, details: dict | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class NormalizationError(RelayError):
    pass


class ParseError(NormalizationError):
    def __init__(self, excerpt: str):
        super().__init__(
            'PARSE_FAILED',
            'Upstream returned text that is not valid JSON.',
            status_code=502,
            details={'text': excerpt},
        )
        self.excerpt = excerpt


class SchemaError(NormalizationError):
    def __init__(self):
        super().__init__('SCHEMA_FAILED', 'Upstream JSON does not match the expected shape.', status_code=502)


class UpstreamTimeout(RelayError):
    def __init__(self, timeout_ms: int):
        super().__init__(
            'UPSTREAM_TIMEOUT',
            f'Upstream did not answer within {timeout_ms} ms.',
            status_code=504,
            details={'timeout_ms': timeout_ms},
        )


class UpstreamFailure(RelayError):
    def __init__(self, message: str, details: dict | None = None):
        super().__init__('VISION_FAILED', message, status_code=500, details=details)


class NoOutputText(RelayError):
    def __init__(self):
        super().__init__('NO_OUTPUT_TEXT', 'Upstream response carried no output text.', status_code=502)
