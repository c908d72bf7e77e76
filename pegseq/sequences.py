"""
Lazy sequences: immutable, memoizing linked lists over a single-pass source.

A sequence is a chain of `Node` objects, one per position, ending in an
exhausted node (or in the shared empty sequence `EMPTY`). A node is handed
out before anything is known about it. Its token is pulled from the
underlying iterator the first time somebody looks at it (`head`,
`is_empty`, `bool()`, `tail`) and cached. Asking a node for its `tail`
pulls nothing past that node: the tail is another unread node.

Every later request, from any parser branch, gets the identical node back,
so the source is read at most once per position and backtracking is just
holding on to an old node.
"""

import codecs
import threading


# Number of characters (or bytes) read from a stream at a time.
DEFAULT_CHUNK_SIZE = 4096

# Number of tokens a sequence shows in its repr.
_REPR_LIMIT = 8

# Node states.
_UNREAD = 'unread'
_TOKEN = 'token'
_END = 'end'


class Nil:
    """The empty sequence. Use the `EMPTY` singleton."""
    __slots__ = ()

    pos = None

    @property
    def head(self):
        raise IndexError('head of empty sequence')

    @property
    def tail(self):
        return self

    @property
    def is_empty(self):
        return True

    def is_forced(self):
        return True

    def take(self, n):
        return []

    def drop(self, n):
        return self

    def __bool__(self):
        return False

    def __iter__(self):
        return iter(())

    def __repr__(self):
        return 'EMPTY'

    def __reduce__(self):
        return 'EMPTY'


EMPTY = Nil()


class _Source:
    __slots__ = 'iterator', 'lock'

    def __init__(self, iterable):
        self.iterator = iter(iterable)
        self.lock = threading.Lock()

    def pull(self):
        for item in self.iterator:
            return _TOKEN, item
        # Drop the exhausted iterator so the source can be released.
        self.iterator = iter(())
        return _END, None


class Node:
    """One position of a lazy sequence.

    `pos` is known up front. Whether the position holds a token, and which
    one, is decided when the node is first read.
    """
    __slots__ = 'pos', '_source', '_state', '_head', '_tail'

    def __init__(self, source, pos):
        self.pos = pos
        self._source = source
        self._state = _UNREAD
        self._head = None
        self._tail = None

    def _force(self):
        state = self._state
        if state is _UNREAD:
            source = self._source
            with source.lock:
                state = self._state
                if state is _UNREAD:
                    state, head = source.pull()
                    if state is _TOKEN:
                        self._head = head
                        self._tail = Node(source, self.pos + 1)
                    else:
                        self._tail = EMPTY
                    self._source = None
                    self._state = state
        return state

    @property
    def head(self):
        if self._force() is _END:
            raise IndexError('head of empty sequence')
        return self._head

    @property
    def tail(self):
        self._force()
        return self._tail

    @property
    def is_empty(self):
        return self._force() is _END

    def is_forced(self):
        """Tells whether this position has already been read from the source."""
        return self._state is not _UNREAD

    def take(self, n):
        """Returns a list of (at most) the first `n` tokens."""
        result = []
        seq = self
        while len(result) < n and seq:
            result.append(seq.head)
            seq = seq.tail
        return result

    def drop(self, n):
        seq = self
        while n > 0 and seq:
            seq = seq.tail
            n -= 1
        return seq

    def __bool__(self):
        return self._force() is _TOKEN

    # Static so that the generator does not keep the first node (and thus
    # every node after it) alive while iterating.
    @staticmethod
    def _iter(seq):
        while seq:
            yield seq.head
            seq = seq.tail

    def __iter__(self):
        return self._iter(self)

    def __repr__(self):
        items = []
        seq = self
        while seq._state is _TOKEN:
            if len(items) == _REPR_LIMIT:
                break
            items.append(repr(seq._head))
            seq = seq._tail
        if seq._state is not _END:
            items.append('...')
        return f'<{", ".join(items)}>'


Sequence = (Node, Nil)


def lazy_sequence(iterable, start=0):
    """Wraps any iterable (a string, a list, a generator, ...) in a sequence.

    Nothing is read until a parser looks at a position, and then only that
    position.
    """
    return Node(_Source(iterable), start)


def from_pull(pull, sentinel=None):
    """Wraps a `pull()` function that returns `sentinel` once exhausted."""
    return lazy_sequence(iter(pull, sentinel))


def from_reader(reader, chunk_size=DEFAULT_CHUNK_SIZE):
    """Wraps a text stream, reading it `chunk_size` characters at a time."""
    _check_chunk_size(chunk_size)
    return lazy_sequence(_read_chars(reader, chunk_size))


def from_stream(stream, encoding='utf-8', errors='strict',
        chunk_size=DEFAULT_CHUNK_SIZE):
    """Wraps a binary stream, decoding its bytes into characters.

    The stream is read `chunk_size` bytes at a time. A character whose bytes
    are split between two chunks comes out whole.
    """
    _check_chunk_size(chunk_size)
    decoder = codecs.getincrementaldecoder(encoding)(errors)
    return lazy_sequence(_decode_chars(stream, decoder, chunk_size))


def _check_chunk_size(chunk_size):
    if chunk_size < 1:
        raise ValueError(f'Expected a positive chunk size, got {chunk_size!r}')


def _read_chars(reader, chunk_size):
    while True:
        chunk = reader.read(chunk_size)
        if not chunk:
            return
        yield from chunk


def _decode_chars(stream, decoder, chunk_size):
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            yield from decoder.decode(b'', final=True)
            return
        yield from decoder.decode(chunk)


def as_sequence(obj):
    return obj if isinstance(obj, Sequence) else lazy_sequence(obj)
