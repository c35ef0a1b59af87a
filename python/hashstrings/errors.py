class HashStringsError (Exception):
    '''Base class for everything that aborts the generation of one file.'''


class SpecError (HashStringsError):
    '''The input file describes something that can't be turned into a table.

        :param filename: the file being processed, if known.
        :param line: the line the problem was found on, if the parser knows it.

    '''
    def __init__(self, message, filename=None, line=None):
        super().__init__(message)
        self.message  = message
        self.filename = filename
        self.line     = line

    def __str__(self):
        if self.filename is None:
            return self.message
        if self.line is None:
            return '{} in "{}"'.format(self.message, self.filename)
        return '{} in "{}" at line {}'.format(self.message, self.filename, self.line)


class CollisionError (HashStringsError):
    '''Two different texts produced the same hash; the search tree can't hold both.'''
    def __init__(self, first, second):
        super().__init__('hash collision between "{}" and "{}" (0x{:016x})'.format(
            first.text, second.text, first.hash))
        self.first  = first
        self.second = second


class CapacityError (HashStringsError):
    '''Something ran out of space in one of the fixed-width fields of the output.'''
