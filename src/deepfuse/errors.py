"""
Exception types raised by deepfuse.

Hook exceptions and option validation errors (pydantic.ValidationError)
propagate to the caller unwrapped; these types cover the failures the
package itself detects.
"""


class DeepfuseError(Exception):
    """Base class for errors raised by deepfuse."""

    pass


class InvalidMergeArgumentError(DeepfuseError, TypeError):
    """Raised when a value passed as a structure to merge is not a mapping."""

    pass


class PropertyDefinitionError(DeepfuseError, TypeError):
    """Raised for an invalid descriptor record or a forbidden redefinition."""

    pass


class PropertyAccessError(DeepfuseError, TypeError):
    """Raised when writing a read-only key or deleting a non-configurable one."""

    pass
