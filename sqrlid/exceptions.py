class SqrlIdException(Exception):
    '''Base class to extend in order to throw exception in sqrlid.

    It takes as first argument a message and, optionally, the chain of the
    elements (block index, item name) that caused the exception.
    '''

    def __init__(self, message='', chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)

    def __str__(self):
        if not self.chain:
            return self.message

        return '%s (at %s)' % (self.message, '.'.join(str(_) for _ in self.chain))


class ArgumentError(SqrlIdException, ValueError):
    '''A required input is missing or empty.'''
    pass


class FormatError(SqrlIdException):
    '''The data doesn't follow the identity container format.'''
    pass


class SchemaError(SqrlIdException):
    '''A block definition is malformed or disagrees with the data types.

    This is useful when is not possible to let an inconsistent definition
    slip through the parsing.'''
    pass
