import unittest

from svbreak.coverage import ArrayCoverage, BamCoverage

from .mock import Mock, MockFunction


class TestArrayCoverage(unittest.TestCase):

    def setUp(self):
        self.coverage = ArrayCoverage()
        self.coverage.add('1', 10, [1, 2, 3])

    def test_coverage_at(self):
        self.assertEqual(1, self.coverage.coverage_at('1', 10))
        self.assertEqual(2, self.coverage.coverage_at('1', 11))

    def test_outside(self):
        self.assertEqual(0, self.coverage.coverage_at('1', 9))
        self.assertEqual(0, self.coverage.coverage_at('1', 13))
        self.assertEqual(0, self.coverage.coverage_at('2', 10))

    def test_add_overlapping(self):
        self.coverage.add('1', 12, [1, 1])
        self.assertEqual([1, 2, 4, 1], [self.coverage.coverage_at('1', p) for p in range(10, 14)])

    def test_add_before(self):
        self.coverage.add('1', 5, [7])
        self.assertEqual(7, self.coverage.coverage_at('1', 5))
        self.assertEqual(0, self.coverage.coverage_at('1', 6))
        self.assertEqual(3, self.coverage.coverage_at('1', 12))


class TestBamCoverage(unittest.TestCase):

    def setUp(self):
        self.bam = Mock(references=('1', '2'), count_coverage=MockFunction(([1], [0], [2], [0])), close=MockFunction(None))

    def test_coverage_at(self):
        coverage = BamCoverage(self.bam)
        self.assertEqual(3, coverage.coverage_at('1', 100))

    def test_unknown_chromosome(self):
        coverage = BamCoverage(self.bam)
        self.assertEqual(0, coverage.coverage_at('X', 100))

    def test_keep_read(self):
        coverage = BamCoverage(self.bam, min_mapping_quality=20)
        read = Mock(is_unmapped=False, is_secondary=False, is_qcfail=False, is_duplicate=False, mapping_quality=30)
        self.assertTrue(coverage._keep_read(read))
        read.mapping_quality = 10
        self.assertFalse(coverage._keep_read(read))
        read.mapping_quality = 30
        read.is_duplicate = True
        self.assertFalse(coverage._keep_read(read))
