from .expressions import *
from .parser import ParseError, parse
from .results import (
    EOS,
    ExpectedFailure,
    Failure,
    Result,
    Success,
    UnexpectedFailure,
)
from .sequences import (
    DEFAULT_CHUNK_SIZE,
    EMPTY,
    Nil,
    Node,
    Sequence,
    as_sequence,
    from_pull,
    from_reader,
    from_stream,
    lazy_sequence,
)
