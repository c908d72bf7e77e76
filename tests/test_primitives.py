from pegseq import *


def test_any():
    seq = lazy_sequence('any')
    r = any_(seq)
    assert isinstance(r, Success)
    assert r.value == 'a'
    assert list(r.next) == ['n', 'y']

    r = any_('')
    assert isinstance(r, UnexpectedFailure)
    assert r.message == 'EOS'
    assert r.next.is_empty


def test_eos():
    seq = lazy_sequence('not eos')
    r = eos(seq)
    assert isinstance(r, ExpectedFailure)
    assert r.message == 'EOS'
    assert r.next is seq

    r = eos('')
    assert isinstance(r, Success)
    assert r.value is EOS
    assert r.next.is_empty


def test_satisfy():
    seq = lazy_sequence('satisfy')
    r = satisfy(lambda c: c == 's')(seq)
    assert isinstance(r, Success)
    assert r.value == 's'
    assert r.next is seq.tail

    r = satisfy(lambda c: c == 'n')(seq)
    assert isinstance(r, ExpectedFailure)
    assert r.next is seq
    assert r.message == 'Satisfying satisfy(<lambda>)'

    r = satisfy(str.isupper, name='uppercase')(seq)
    assert r.message == 'Satisfying satisfy(uppercase)'

    seq = lazy_sequence('')
    r = satisfy(str.isalpha)(seq)
    assert r == UnexpectedFailure('EOS', seq)


def test_eq_and_neq():
    seq = lazy_sequence('satisfy')
    r = eq('s')(seq)
    assert isinstance(r, Success)
    assert r.value == 's'

    r = eq('x')(seq)
    assert isinstance(r, ExpectedFailure)
    assert r.message == "Satisfying eq('x')"

    r = neq('!')(seq)
    assert isinstance(r, Success)
    assert r.value == 's'

    r = neq('s')(seq)
    assert isinstance(r, ExpectedFailure)


def test_primitives_work_on_any_tokens():
    r = eq(1)([1, 2])
    assert r.value == 1

    r = eq(None)([None])
    assert r.is_success

    r = many(neq(0))([3, 2, 1, 0, 5])
    assert r.value == [3, 2, 1]
    assert r.next.head == 0


def test_contains():
    digit = contains('0123456789')
    assert digit('7').value == '7'
    assert not digit('x').is_success

    sign = contains('+', '-')
    assert sign('-').value == '-'
    assert not sign('*').is_success
    assert repr(sign) == "contains('+', '-')"

    keyword = contains(['if', 'else'])
    assert keyword(['else', 'x']).value == 'else'
    assert not keyword(['elif']).is_success

    # Unhashable tokens are not in the set, but they do not break it.
    assert not keyword([['if']]).is_success

    assert isinstance(contains('ab')(''), UnexpectedFailure)
    assert isinstance(contains('ab')(EMPTY), UnexpectedFailure)


def test_contains_with_a_single_string_means_its_characters():
    letters = contains('if')
    assert letters('i').value == 'i'
    assert letters('f').value == 'f'
    assert not letters(['if']).is_success

    word = contains(['if'])
    assert word(['if']).value == 'if'
    assert not word('i').is_success


def test_token():
    r = token('token')('token is here')
    assert r.is_success
    assert r.value == 'token'
    assert ''.join(r.next) == ' is here'

    r = token('token', value=42)('token is here')
    assert r.value == 42

    r = token(['begin', 'end'])(['begin', 'end', 'x'])
    assert r.value == ['begin', 'end']
    assert r.next.head == 'x'

    seq = lazy_sequence('tokyo')
    r = token('token')(seq)
    assert r == ExpectedFailure("Token 'token'", seq)

    seq = lazy_sequence('tok')
    r = token('token')(seq)
    assert r == UnexpectedFailure('EOS', seq)


def test_result_and_expected():
    seq = lazy_sequence('ignore this')
    r = result('a')(seq)
    assert r == Success('a', seq)

    r = expected('something else')(seq)
    assert r == ExpectedFailure('something else', seq)


def test_plain_functions_are_parsers():
    def two(seq):
        return Success(2, seq)

    r = seq(any_, two)('x')
    assert r.value == 2

    p = or_(expected('no'), two)
    assert p('').value == 2
