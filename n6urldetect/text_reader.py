# Copyright (c) 2025 NASK. All rights reserved.

from n6urldetect.exceptions import EndOfInputError


class InputTextReader:

    """
    A repositionable cursor over an immutable text.

    The reader keeps only an integer index into the text it was
    created for, so any number of rewinds (`go_back()`, `seek()`) is
    cheap and nothing is ever copied.

    >>> reader = InputTextReader('HELLO WORLD')
    >>> reader.read() + reader.read()
    'HE'
    >>> reader.go_back()
    >>> reader.read()
    'E'
    >>> reader.position
    2
    >>> reader.peek(3)
    'LLO'
    >>> reader.seek(10)
    >>> reader.read()
    'D'
    >>> reader.eof()
    True
    >>> reader.read()                                   # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    EndOfInputError: end of input reached (position: 11)
    """

    def __init__(self, content):
        if not isinstance(content, str):
            raise TypeError('{!a} is not a str'.format(content))
        self._content = content
        self._length = len(content)
        self._position = 0

    @property
    def content(self):
        return self._content

    @property
    def position(self):
        return self._position

    def read(self):
        """
        Return the next character, moving the cursor forward.

        Raises:
            `EndOfInputError` if the end of the text has been reached.
        """
        position = self._position
        if position >= self._length:
            raise EndOfInputError(position)
        self._position = position + 1
        return self._content[position]

    def peek(self, number_of_chars):
        """
        Return (at most) the given number of next characters, without
        moving the cursor.
        """
        return self._content[self._position:self._position + number_of_chars]

    def peek_char(self, offset):
        """
        Return the character at the given `offset` from the cursor,
        without moving the cursor.

        >>> reader = InputTextReader('abc')
        >>> reader.peek_char(0), reader.peek_char(2)
        ('a', 'c')
        """
        index = self._position + offset
        if not 0 <= index < self._length:
            raise EndOfInputError(index)
        return self._content[index]

    def can_read_chars(self, number_of_chars):
        """
        >>> reader = InputTextReader('abc')
        >>> reader.can_read_chars(3), reader.can_read_chars(4)
        (True, False)
        """
        return self._position + number_of_chars <= self._length

    def eof(self):
        return self._position >= self._length

    def go_back(self):
        """
        Rewind the cursor by one character (never below the beginning).
        """
        if self._position > 0:
            self._position -= 1

    def seek(self, position):
        """
        Set the cursor at the given absolute position.

        No bounds check is made: after seeking beyond the end, `eof()`
        is simply true.
        """
        self._position = max(position, 0)


class CandidateBuffer:

    """
    The span of a reader's text (`content[start:end]`) accumulated as
    the current URL candidate.

    The buffer never copies the text: "appending" the character just
    read only moves the span's end (or, if the buffer is empty or that
    character does not directly follow the span, makes the span start
    at that character).

    >>> reader = InputTextReader('xy http')
    >>> buf = CandidateBuffer(reader)
    >>> reader.seek(3)
    >>> for _ in range(4):
    ...     _ = reader.read()
    ...     buf.append_last_read()
    >>> buf.text, buf.start, buf.end, len(buf)
    ('http', 3, 7, 4)
    >>> buf.delete_last()
    >>> buf.text
    'htt'
    >>> buf.substring(1)
    'tt'
    >>> buf.clear()
    >>> len(buf), buf.text
    (0, '')
    """

    def __init__(self, reader):
        self._reader = reader
        self._content = reader.content
        self.start = 0
        self.end = 0

    def __repr__(self):
        return '<{} {!r} [{}:{}]>'.format(
            type(self).__qualname__,
            self.text,
            self.start,
            self.end)

    def __len__(self):
        return self.end - self.start

    @property
    def text(self):
        return self._content[self.start:self.end]

    def substring(self, begin):
        return self._content[self.start + begin:self.end]

    def last_char(self):
        return self._content[self.end - 1] if self.end > self.start else ''

    def append_last_read(self):
        position = self._reader.position - 1
        if self.end == self.start or self.end != position:
            self.start = position
        self.end = position + 1

    def delete_last(self):
        if self.end > self.start:
            self.end -= 1

    def truncate(self, length):
        self.end = min(self.end, self.start + length)

    def cut_front(self, new_start):
        self.start = min(max(self.start, new_start), self.end)

    def clear(self):
        self.start = self.end = self._reader.position
