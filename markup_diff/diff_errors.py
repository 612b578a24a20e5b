class UndiffableContentError(ValueError):
    """
    Raised when the content provided to a differ is not something it can
    compare. For example, if a number or a list was provided instead of text.
    """


class UndecodableContentError(ValueError):
    """
    Raised when content was provided as bytes that could not be decoded as
    UTF-8 text.
    """
