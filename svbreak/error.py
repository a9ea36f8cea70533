

class NotSpecifiedError(Exception):
    """
    raised when information is required for a function but has not been given

    for example if a breakpoint is scored before any evidence has been attached
    """
    pass


class MissingTagError(KeyError):
    """
    raised when a read is missing an annotation tag which should have been added by an upstream step
    """
    pass


class ParseError(ValueError):
    """
    raised when a serialized breakpoint row cannot be read back into a breakpoint
    """
    pass
