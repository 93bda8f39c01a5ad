# Copyright (c) 2013-2025 NASK. All rights reserved.

"""
Small, generic helpers.
"""


def ascii_str(obj):

    r"""
    Safely convert the given object to an ASCII-only :class:`str`.

    Non-ASCII characters are escaped using Python literal notation
    (``\x...``, ``\u...``, ``\U...``); no encoding/decoding exceptions
    are raised.

    >>> ascii_str('')
    ''
    >>> ascii_str('Ala ma kota\nA kot?\n2=2 ')   # pure ASCII str => unchanged
    'Ala ma kota\nA kot?\n2=2 '
    >>> ascii_str('Ech, ale błąd!')       # non-pure-ASCII-str => escaped
    'Ech, ale b\\u0142\\u0105d!'
    >>> ascii_str(b'Ech, ale b\xc5\x82\xc4\x85d!')   # UTF-8 bytes => decoded + escaped
    'Ech, ale b\\u0142\\u0105d!'
    >>> ascii_str(ValueError('Ech, ale błąd!'))
    'Ech, ale b\\u0142\\u0105d!'
    >>> ascii_str(42)
    '42'
    """
    if isinstance(obj, str):
        s = obj
    elif isinstance(obj, (bytes, bytearray, memoryview)):
        s = bytes(obj).decode('utf-8', 'surrogateescape')
    else:
        try:
            s = str(obj)
        except ValueError:
            s = repr(obj)
    return s.encode('ascii', 'backslashreplace').decode('ascii')


def limit_str(s, char_limit, cut_indicator='[...]', middle_cut=False):
    r"""
    Shorten the given text string (`s`) to the specified number of
    characters (`char_limit`) by replacing exceeding stuff with the
    given `cut_indicator` ("[...]" by default).

    By default, the cut is made at the end of the string but doing it in
    the middle of the string can be requested by specifying `middle_cut`
    as True.

    The `char_limit` number (an `int`) must be greater than or equal to
    the length of `cut_indicator`; otherwise ValueError is raised.

    >>> limit_str('Alą mą ĸóŧą', 10)
    'Alą m[...]'
    >>> limit_str('Alą mą ĸóŧą', 11)
    'Alą mą ĸóŧą'
    >>> limit_str('Alą mą ĸóŧą', 5)
    '[...]'
    >>> limit_str('Alą mą ĸóŧą', 4)                             # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...
    >>> limit_str('Alą mą ĸóŧą', 10, middle_cut=True)
    'Alą[...]ŧą'
    >>> limit_str('Alą mą ĸóŧą', 9, cut_indicator='~')
    'Alą mą ĸ~'
    """
    if char_limit < len(cut_indicator):
        raise ValueError('char_limit={!a} is lower than the length of '
                         'cut_indicator={!a}'.format(char_limit, cut_indicator))
    if len(s) <= char_limit:
        return s
    kept = char_limit - len(cut_indicator)
    if middle_cut:
        left = (kept + 1) // 2
        right = kept - left
        return s[:left] + cut_indicator + (s[len(s) - right:] if right else '')
    return s[:kept] + cut_indicator


def str_to_bool(s):
    """
    Return True or False, given one of the known strings (see examples below).

    >>> str_to_bool('1'), str_to_bool('yes'), str_to_bool('True'), str_to_bool('on')
    (True, True, True, True)
    >>> str_to_bool('0'), str_to_bool('nO'), str_to_bool('f'), str_to_bool('off')
    (False, False, False, False)

    Other string values cause ValueError:

    >>> str_to_bool('unknown')        # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...

    Non-str values cause TypeError:

    >>> str_to_bool(b'yes')           # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    TypeError: ...
    """
    if not isinstance(s, str):
        raise TypeError('{!a} is not a str'.format(s))
    try:
        return _STR_TO_BOOL[s.lower()]
    except KeyError:
        raise ValueError('{!a} is not a valid boolean value (should be one of: {})'.format(
            s, ', '.join(sorted(_STR_TO_BOOL)))) from None


_STR_TO_BOOL = {
    '1': True, 'y': True, 'yes': True, 't': True, 'true': True, 'on': True,
    '0': False, 'n': False, 'no': False, 'f': False, 'false': False, 'off': False,
}
