"""
Errors raised while expanding ``@ImageCache``.

Each error kind renders a fixed message. All of them are terminal for a
single invocation.
"""

from ...core.generator import GeneratorError


class ImageCacheError(GeneratorError):
    """Base class for ``@ImageCache`` expansion failures."""

    kind = "ImageCacheError"

    def __init__(self, macro_name: str = "ImageCache"):
        self.macro_name = macro_name
        super().__init__(self.message)

    @property
    def attribute(self) -> str:
        return f"@{self.macro_name}"

    @property
    def message(self) -> str:
        return f"{self.attribute} failed"

    def __str__(self) -> str:
        return self.message


class InternalError(ImageCacheError):
    kind = "InternalError"

    @property
    def message(self) -> str:
        return f"{self.attribute} produced an internal error, please report"


class OnlyVariableDeclaration(ImageCacheError):
    kind = "OnlyVariableDeclaration"

    @property
    def message(self) -> str:
        return f"{self.attribute} only allows variable declarations"


class OnlyOneBinding(ImageCacheError):
    kind = "OnlyOneBinding"

    @property
    def message(self) -> str:
        return f"{self.attribute} only allows a single binding per declaration"


class MustBeType(ImageCacheError):
    kind = "MustBeType"

    def __init__(self, identifier: str, expected_type: str, macro_name: str = "ImageCache"):
        self.identifier = identifier
        self.expected_type = expected_type
        super().__init__(macro_name)

    @property
    def message(self) -> str:
        return f"{self.attribute} requires {self.identifier} to be of type {self.expected_type}"


class MustHaveSuffix(ImageCacheError):
    kind = "MustHaveSuffix"

    def __init__(self, identifier: str, suffix: str, macro_name: str = "ImageCache"):
        self.identifier = identifier
        self.suffix = suffix
        super().__init__(macro_name)

    @property
    def message(self) -> str:
        return f"{self.attribute} requires {self.identifier} to have the suffix {self.suffix}"


class EmptyPrefix(ImageCacheError):
    kind = "EmptyPrefix"

    def __init__(self, identifier: str, suffix: str = "Data", macro_name: str = "ImageCache"):
        self.identifier = identifier
        self.suffix = suffix
        super().__init__(macro_name)

    @property
    def message(self) -> str:
        return f"{self.attribute} requires {self.identifier} to have a prefix before {self.suffix}"


class OsNotSupported(ImageCacheError):
    kind = "OsNotSupported"

    def __init__(self, platform: str = "", macro_name: str = "ImageCache"):
        self.platform = platform
        super().__init__(macro_name)

    @property
    def message(self) -> str:
        return f"{self.attribute} does not support this OS"


class MustBeBoolLiteral(ImageCacheError):
    kind = "MustBeBoolLiteral"

    @property
    def message(self) -> str:
        return f"{self.attribute} requires its argument to be a boolean literal"


class TooManyArguments(ImageCacheError):
    kind = "TooManyArguments"

    def __init__(self, count: int, macro_name: str = "ImageCache"):
        self.count = count
        super().__init__(macro_name)

    @property
    def message(self) -> str:
        return f"{self.attribute} accepts at most one argument, got {self.count}"
