"""Error types raised by LinkVerify."""


class LinkVerifyError(Exception):
    """Base class for all LinkVerify errors."""


class ValidationError(LinkVerifyError, ValueError):
    """A PPRL request or sensitive field is malformed."""


class DecodeError(LinkVerifyError, ValueError):
    """A serialized Bloom filter could not be decoded."""
