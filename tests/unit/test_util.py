import logging
import os
import shutil
import tempfile
import unittest
from unittest import mock

from svbreak import util as _util
from svbreak.constants import HEADER
from svbreak.discordant import DiscordantCluster
from svbreak.error import ParseError

from .mock import REFERENCES, build_breakpoint


class TestLog(unittest.TestCase):

    @mock.patch('svbreak.util.logging.log')
    def test_message(self, log):
        _util.Log()('loaded', 3, 'breakpoints')
        level, message = log.call_args[0]
        self.assertEqual(logging.INFO, level)
        self.assertTrue(message.endswith(' loaded 3 breakpoints'))

    @mock.patch('svbreak.util.logging.log')
    def test_indent(self, log):
        with _util.Log().indent() as indented:
            indented('message')
        self.assertTrue(log.call_args[0][1].endswith('  message'))

    @mock.patch('svbreak.util.logging.log')
    def test_level(self, log):
        _util.Log()('message', level=logging.DEBUG)
        self.assertEqual(logging.DEBUG, log.call_args[0][0])


class TestBashExpands(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        for name in ['a.tab', 'b.tab', 'c.txt']:
            with open(os.path.join(self.temp_dir, name), 'w') as fh:
                fh.write('')

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_glob_and_braces(self):
        result = _util.bash_expands(os.path.join(self.temp_dir, '{a,c}.*'))
        self.assertEqual(['a.tab', 'c.txt'], sorted([os.path.basename(f) for f in result]))
        result = _util.bash_expands(os.path.join(self.temp_dir, '*.tab'))
        self.assertEqual(2, len(result))

    def test_no_match(self):
        with self.assertRaises(FileNotFoundError):
            _util.bash_expands(os.path.join(self.temp_dir, '*.bam'))


class TestDedup(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_sort(self):
        bps = [build_breakpoint(300, 400), build_breakpoint(100, 5000), build_breakpoint(100, 200)]
        self.assertEqual([100, 100, 300], [bp.b1.gr.start for bp in _util.sort_breakpoints(bps)])
        self.assertEqual(200, _util.sort_breakpoints(bps)[0].b2.gr.start)

    def test_keeps_best_supported(self):
        bps = [
            build_breakpoint(100, 5000, tsplit=2, cname='c1'),
            build_breakpoint(300, 400, tsplit=1),
            build_breakpoint(100, 5000, tsplit=9, cname='c2'),
            build_breakpoint(100, 5000, tsplit=9, dc=DiscordantCluster(tcount=1), cname='c3'),
        ]
        result = _util.dedup_breakpoints(bps)
        self.assertEqual(2, len(result))
        self.assertEqual('c3', result[0].cname)
        self.assertEqual(300, result[1].b1.gr.start)

    def test_swapped_ends_are_duplicates(self):
        swapped = build_breakpoint(100, 5000, tsplit=1, cname='swapped')
        swapped.b1, swapped.b2 = swapped.b2, swapped.b1
        bps = [build_breakpoint(100, 5000, tsplit=4, cname='c1'), build_breakpoint(100, 6000, cname='c2'), swapped]
        result = _util.dedup_breakpoints(bps)
        self.assertEqual([(100, 5000), (100, 6000)], [(bp.b1.gr.start, bp.b2.gr.start) for bp in result])
        self.assertEqual(['c1', 'c2'], [bp.cname for bp in result])

    def test_swapped_ends_with_more_support_kept(self):
        swapped = build_breakpoint(100, 5000, tsplit=9, cname='swapped')
        swapped.b1, swapped.b2 = swapped.b2, swapped.b1
        bps = [build_breakpoint(100, 5000, tsplit=4), build_breakpoint(100, 6000), swapped]
        result = _util.dedup_breakpoints(bps)
        self.assertEqual(2, len(result))
        self.assertEqual('swapped', result[0].cname)
        self.assertEqual(100, result[0].b1.gr.start)

    def test_swapped_rows_merged(self):
        swapped = build_breakpoint(100, 5000, tsplit=1)
        swapped.b1, swapped.b2 = swapped.b2, swapped.b1
        filename = os.path.join(self.temp_dir, 'swapped.tab')
        _util.write_breakpoints(filename, [build_breakpoint(100, 5000, tsplit=4), build_breakpoint(100, 6000), swapped])
        result = _util.dedup_breakpoints(_util.read_breakpoints(filename, REFERENCES))
        self.assertEqual([5000, 6000], [bp.b2.gr.start for bp in result])

    def test_empty(self):
        self.assertEqual([], _util.dedup_breakpoints([]))

    def test_remove_exact_duplicates(self):
        bps = [build_breakpoint(tsplit=1), build_breakpoint(tsplit=2), build_breakpoint(tsplit=1)]
        result = _util.remove_exact_duplicates(bps)
        self.assertEqual([1, 2], [bp.tsplit for bp in result])


class TestReadWriteBreakpoints(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.filename = os.path.join(self.temp_dir, 'breakpoints.tab')
        self.bps = [
            build_breakpoint(100, 5000, num_align=2, tsplit=8, evidence='ASSMB', quality=40, read_names='t000_r1'),
            build_breakpoint(1029, 1035, isindel=True, num_align=1, tcigar=3, evidence='INDEL', quality=15),
        ]

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_round_trip(self):
        _util.write_breakpoints(self.filename, self.bps)
        result = _util.read_breakpoints(self.filename, REFERENCES)
        self.assertEqual(self.bps, result)
        self.assertEqual('t000_r1', result[0].read_names)

    def test_header(self):
        _util.write_breakpoints(self.filename, self.bps, noreads=True)
        with open(self.filename) as fh:
            lines = fh.readlines()
        self.assertEqual(3, len(lines))
        self.assertEqual(list(HEADER[:-1]), lines[0].rstrip('\n').split('\t'))
        self.assertEqual(38, len(lines[1].split('\t')))

    def test_skips_comments_and_blank_lines(self):
        _util.write_breakpoints(self.filename, self.bps)
        with open(self.filename, 'a') as fh:
            fh.write('# comment\n\n')
        self.assertEqual(2, len(_util.read_breakpoints(self.filename, REFERENCES)))

    def test_bad_row(self):
        with open(self.filename, 'w') as fh:
            fh.write('1\t100\t+\n')
        with self.assertRaises(ParseError):
            _util.read_breakpoints(self.filename, REFERENCES)
