"""Error taxonomy for share calls.

`InvalidCall` and its subclasses are always fatal: the configuration run must
stop at the offending call. A lookup that finds nothing is not an error; see
`sharekit.consumer.NotFound`.
"""

from __future__ import annotations


class ShareError(Exception):
    """Base class for every error raised by `sharekit`."""


class InvalidCall(ShareError):
    """A share call was made with arguments that cannot be honoured."""


class MissingRequiredArgument(InvalidCall):
    def __init__(self, call: str, candidates: tuple[str, ...]):
        self.call = call
        self.candidates = tuple(candidates)
        super().__init__(f"{call}(...) missing a required argument: {' '.join(self.candidates)}")


class ConflictingArguments(InvalidCall):
    def __init__(self, call: str, primary: str, excluded: str):
        self.call = call
        self.primary = primary
        self.excluded = excluded
        super().__init__(f"{call}({primary} ...) cannot be used with argument: {excluded}")


class InvalidArgumentType(InvalidCall):
    pass


class UnknownCall(InvalidCall):
    pass


class PropertyTypeMismatch(InvalidCall):
    def __init__(self, image: str, name: str, *, existing: str, requested: str):
        self.image = image
        self.name = name
        super().__init__(
            f"Shared property {image}.{name} is a {existing}; cannot {requested} it "
            "(use a non-append set to replace the value)"
        )


class UnsupportedValue(InvalidCall):
    pass


class DuplicateOutput(InvalidCall):
    pass


class GenerationClosed(ShareError):
    """Raised when the generation phase has already run."""
