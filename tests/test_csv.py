from collections import namedtuple
import io

import pytest
from pegseq import *


CsvFile = namedtuple('CsvFile', 'header, records')


class CsvParser:
    """Grammar from RFC 4180. Also accepts a bare "\\n" as a line break."""

    def __init__(self, separator=',', parse_header=True):
        cr = eq('\r')
        lf = eq('\n')
        crlf = seq(cr, lf) | lf
        comma = eq(separator)
        dquote = eq('"')
        textdata = satisfy(
            lambda c: c != '"' and c != separator and ' ' <= c <= '~',
            name='textdata',
        )
        escaped = bind(
            dquote,
            many(textdata | comma | cr | lf | seq(dquote, dquote, result('"'))),
            dquote,
            lambda _, chars, __: result(''.join(chars)),
        )
        non_escaped = many(textdata) * ''.join
        field = escaped | non_escaped
        record = bind(field, many(comma >> field), lambda f, fs: result([f] + fs))

        if parse_header:
            header_line = optional(record << crlf)
        else:
            header_line = result(None)

        def build(header, first, rest, _):
            records = [first] + rest
            while records and records[-1] == ['']:
                records.pop()
            return result(CsvFile(header, records))

        self.file = bind(header_line, record, many(crlf >> record), optional(crlf), build)

    def parse(self, source):
        return parse(self.file << eos, source)


def test_header_and_record():
    data = '"aaa","bbb","ccc"\r\nzzz,yyy,xxx'
    assert CsvParser().parse(data) == CsvFile(
        header=['aaa', 'bbb', 'ccc'],
        records=[['zzz', 'yyy', 'xxx']],
    )


def test_without_header():
    data = 'a,b\r\nc,d\r\n'
    assert CsvParser(parse_header=False).parse(data) == CsvFile(
        header=None,
        records=[['a', 'b'], ['c', 'd']],
    )


def test_escaped_fields():
    data = '"a,b","c""d","e\r\nf"\r\n1,,3\r\n'
    result = CsvParser(parse_header=False).parse(data)
    assert result.records == [
        ['a,b', 'c"d', 'e\r\nf'],
        ['1', '', '3'],
    ]


def test_other_separator_and_line_feeds():
    data = 'name;note\nbob;likes, commas\n'
    assert CsvParser(separator=';').parse(data) == CsvFile(
        header=['name', 'note'],
        records=[['bob', 'likes, commas']],
    )


def test_from_reader():
    rows = '\r\n'.join(f'{i},{i * i}' for i in range(500))
    source = from_reader(io.StringIO('x,y\r\n' + rows), chunk_size=64)
    result = CsvParser().parse(source)
    assert result.header == ['x', 'y']
    assert len(result.records) == 500
    assert result.records[-1] == ['499', '249001']


def test_unterminated_quote():
    with pytest.raises(ParseError):
        CsvParser().parse('"abc\r\ndef')
