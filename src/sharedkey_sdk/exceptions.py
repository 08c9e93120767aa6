"""
Exception classes for SharedKey Python SDK
"""

from typing import Optional, Dict, Any


class SharedKeySDKError(Exception):
    """Base exception for all SharedKey SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidCredentialError(SharedKeySDKError):
    """Exception raised when an account name or account key cannot be used for signing"""
    
    def __init__(self, message: str, error_code: str = "INVALID_CREDENTIAL", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class MissingDateHeaderError(SharedKeySDKError):
    """Exception raised when neither x-ms-date nor Date is present at signing time"""
    
    def __init__(self, message: str = "Failed to sign request: x-ms-date or date header must be present",
                 error_code: str = "MISSING_DATE_HEADER", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class ValidationError(SharedKeySDKError):
    """Exception raised for malformed request input"""
    pass


class ConfigurationError(SharedKeySDKError):
    """Exception raised for configuration loading and validation errors"""
    
    def __init__(self, message: str, error_code: str = "INVALID_CONFIG", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)


class TransportError(SharedKeySDKError):
    """Exception raised when the downstream transport fails to deliver a request"""
    
    def __init__(self, message: str, error_code: str = "TRANSPORT_ERROR", 
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status
