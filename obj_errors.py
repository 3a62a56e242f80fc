"""
OBJ Parse Errors
Exceptions raised while reading Wavefront .obj data
"""


class ObjError(Exception):
    """Base class for every error raised while parsing an OBJ"""


class ExpectedTerm(ObjError):
    """Expected a term on the given line but none was found"""

    def __init__(self, line):
        self.line = line
        super().__init__(f"Expected term on line {line}")


class ExpectedIdx(ObjError):
    """Expected an index on the given line but something else was found"""

    def __init__(self, line):
        self.line = line
        super().__init__(f"Expected index on line {line}")


class ExpectedName(ObjError):
    """Expected an object or group name but something else was found"""

    def __init__(self, line):
        self.line = line
        super().__init__(f"Expected object or group name on line {line}")


class InvalidIndex(ObjError):
    """
    An index that does not refer to an existing attribute

    Attributes:
        index: The offending signed index, as written in the file (or as
               resolved, for indices caught by the final bounds check)
        line: 1-based source line, None when raised after parsing
    """

    def __init__(self, index, line=None):
        self.index = index
        self.line = line
        message = f"Invalid index '{index}'"
        if line is not None:
            message += f" on line {line}"
        super().__init__(message)
