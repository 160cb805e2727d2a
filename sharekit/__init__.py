"""Cross-stage property handoff kernel.

This package is independent of `multi_image`. It knows how to collect shared
properties for an image, write them to a handoff file at the end of
configuration, and read them back in the next stage. Deciding when a stage's
configuration phase ends is left to the caller.
"""

from sharekit.arguments import CallArguments, exclude_together, require_all_of, require_any_of
from sharekit.calls import ShareSession
from sharekit.consumer import Found, LookupResult, NotFound, Scope, get_shared, load_handoff, lookup
from sharekit.errors import (
    ConflictingArguments,
    DuplicateOutput,
    GenerationClosed,
    InvalidArgumentType,
    InvalidCall,
    MissingRequiredArgument,
    PropertyTypeMismatch,
    ShareError,
    UnknownCall,
    UnsupportedValue,
)
from sharekit.generator import GeneratedHandoff, HandoffGenerator, ScheduledHandoff
from sharekit.handoff_file import IMAGE_TARGETS, SHARED_VARS, parse_handoff, read_handoff, render_handoff
from sharekit.registry import RESHARE_IMAGE, PropertyRegistry

__all__ = [
    "IMAGE_TARGETS",
    "RESHARE_IMAGE",
    "SHARED_VARS",
    "CallArguments",
    "ConflictingArguments",
    "DuplicateOutput",
    "Found",
    "GeneratedHandoff",
    "GenerationClosed",
    "HandoffGenerator",
    "InvalidArgumentType",
    "InvalidCall",
    "LookupResult",
    "MissingRequiredArgument",
    "NotFound",
    "PropertyRegistry",
    "PropertyTypeMismatch",
    "ScheduledHandoff",
    "Scope",
    "ShareError",
    "ShareSession",
    "UnknownCall",
    "UnsupportedValue",
    "exclude_together",
    "get_shared",
    "load_handoff",
    "lookup",
    "parse_handoff",
    "read_handoff",
    "render_handoff",
    "require_all_of",
    "require_any_of",
]
