class ScriptEngineError(Exception):
    """Base class for errors raised by the script engine."""


class ValidationPayloadError(ScriptEngineError):
    """The scoring service returned something that is not a validation result."""


class AdaptationPayloadError(ScriptEngineError):
    """The adaptation service returned something without adapted text."""
