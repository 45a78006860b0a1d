"""Custom exceptions for the Polo deep-link service."""


class DeepLinkError(Exception):
    """Base exception for deep-link handling."""

    pass


class NotOurSchemeError(DeepLinkError):
    """Raised when a URL does not use the deep-link scheme."""

    pass


class MalformedLinkError(DeepLinkError):
    """Raised when a link has no query string or cannot be decoded."""

    pass


class IncompletePairError(DeepLinkError):
    """Raised when a ref/sig pair has only one of its two members."""

    pass


class NoRefPairError(DeepLinkError):
    """Raised when neither the my nor the their ref pair is present."""

    pass


class UnknownProgramError(DeepLinkError, ValueError):
    """Raised when a sig value is not a supported activation program."""

    pass


class OperationStoreError(DeepLinkError):
    """Raised when the operation store fails while resolving a link."""

    pass
