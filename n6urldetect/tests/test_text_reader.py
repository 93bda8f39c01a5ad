# Copyright (c) 2025 NASK. All rights reserved.

import unittest

from n6urldetect.exceptions import EndOfInputError
from n6urldetect.text_reader import (
    CandidateBuffer,
    InputTextReader,
)


CONTENT = 'HELLO WORLD'


class TestInputTextReader(unittest.TestCase):

    def setUp(self):
        self.reader = InputTextReader(CONTENT)

    def test_read_all(self):
        chars = []
        while not self.reader.eof():
            chars.append(self.reader.read())
        self.assertEqual(''.join(chars), CONTENT)
        self.assertEqual(self.reader.position, len(CONTENT))

    def test_read_beyond_end(self):
        self.reader.seek(len(CONTENT))
        with self.assertRaises(EndOfInputError) as cm:
            self.reader.read()
        self.assertEqual(cm.exception.position, len(CONTENT))
        self.assertIsInstance(cm.exception, IndexError)

    def test_peek(self):
        self.assertEqual(self.reader.peek(5), 'HELLO')
        self.assertEqual(self.reader.position, 0)
        self.reader.seek(8)
        self.assertEqual(self.reader.peek(10), 'RLD')

    def test_peek_char(self):
        self.reader.read()
        self.assertEqual(self.reader.peek_char(0), 'E')
        self.assertEqual(self.reader.peek_char(-1), 'H')
        self.assertEqual(self.reader.peek_char(9), 'D')
        with self.assertRaises(EndOfInputError):
            self.reader.peek_char(10)
        with self.assertRaises(EndOfInputError):
            self.reader.peek_char(-2)

    def test_seek(self):
        self.reader.seek(6)
        self.assertEqual(self.reader.read(), 'W')
        self.reader.seek(-5)
        self.assertEqual(self.reader.position, 0)
        self.reader.seek(100)
        self.assertTrue(self.reader.eof())
        self.assertEqual(self.reader.peek(3), '')

    def test_go_back(self):
        self.reader.go_back()
        self.assertEqual(self.reader.position, 0)
        self.reader.read()
        self.reader.read()
        self.reader.go_back()
        self.assertEqual(self.reader.read(), 'E')

    def test_can_read_chars(self):
        self.assertTrue(self.reader.can_read_chars(len(CONTENT)))
        self.assertFalse(self.reader.can_read_chars(len(CONTENT) + 1))
        self.reader.seek(len(CONTENT))
        self.assertTrue(self.reader.can_read_chars(0))
        self.assertFalse(self.reader.can_read_chars(1))

    def test_non_str_content(self):
        with self.assertRaises(TypeError):
            InputTextReader(b'HELLO')


class TestCandidateBuffer(unittest.TestCase):

    def setUp(self):
        self.reader = InputTextReader('ab cdef')
        self.buffer = CandidateBuffer(self.reader)

    def _read_and_append(self, n):
        for _ in range(n):
            self.reader.read()
            self.buffer.append_last_read()

    def test_empty(self):
        self.assertEqual(len(self.buffer), 0)
        self.assertEqual(self.buffer.text, '')
        self.assertEqual(self.buffer.last_char(), '')

    def test_append_contiguous(self):
        self._read_and_append(2)
        self.assertEqual(self.buffer.text, 'ab')
        self.assertEqual((self.buffer.start, self.buffer.end), (0, 2))
        self.assertEqual(self.buffer.last_char(), 'b')

    def test_append_non_contiguous_restarts_span(self):
        self._read_and_append(2)
        self.reader.read()
        self._read_and_append(2)
        self.assertEqual(self.buffer.text, 'cd')
        self.assertEqual((self.buffer.start, self.buffer.end), (3, 5))

    def test_delete_last_and_truncate(self):
        self.reader.seek(3)
        self._read_and_append(4)
        self.buffer.delete_last()
        self.assertEqual(self.buffer.text, 'cde')
        self.buffer.truncate(1)
        self.assertEqual(self.buffer.text, 'c')
        self.buffer.truncate(10)
        self.assertEqual(self.buffer.text, 'c')
        self.buffer.delete_last()
        self.buffer.delete_last()
        self.assertEqual(len(self.buffer), 0)

    def test_cut_front(self):
        self.reader.seek(3)
        self._read_and_append(4)
        self.buffer.cut_front(5)
        self.assertEqual(self.buffer.text, 'ef')
        self.buffer.cut_front(0)
        self.assertEqual(self.buffer.text, 'ef')
        self.buffer.cut_front(100)
        self.assertEqual(self.buffer.text, '')

    def test_substring(self):
        self.reader.seek(3)
        self._read_and_append(4)
        self.assertEqual(self.buffer.substring(0), 'cdef')
        self.assertEqual(self.buffer.substring(2), 'ef')
        self.assertEqual(self.buffer.substring(4), '')

    def test_clear(self):
        self._read_and_append(2)
        self.buffer.clear()
        self.assertEqual(len(self.buffer), 0)
        self.assertEqual(self.buffer.start, 2)
        self._read_and_append(2)
        self.assertEqual(self.buffer.text, ' c')
