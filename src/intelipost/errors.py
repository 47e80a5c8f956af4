from enum import Enum
from typing import Optional


class QuoteError(Exception):
    code = 'QUOTE_ERROR'

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ConfigurationError(QuoteError):
    code = 'NOT_CONFIGURED'


class ShipmentValidationError(QuoteError):
    code = 'INVALID_SHIPMENT'

    def __init__(self, message: str, code: Optional[str] = None, side: Optional[str] = None):
        super().__init__(message, code)
        self.side = side


class DataIntegrityError(QuoteError):
    code = 'DATA_INTEGRITY'


class ZeroWeightError(DataIntegrityError):
    code = 'ZERO_WEIGHT'


class MissingDimensionsError(QuoteError):
    code = 'MISSING_DIMENSIONS'

    def __init__(self, lines: list):
        super().__init__(f'{len(lines)} product(s) without dimensions')
        self.lines = lines


class TransportErrorKind(str, Enum):
    TIMEOUT = 'timeout'
    CONNECTION = 'connection'
    HTTP_STATUS = 'http_status'
    INVALID_RESPONSE = 'invalid_response'


class TransportError(QuoteError):
    code = 'TRANSPORT_ERROR'

    def __init__(self, kind: TransportErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
