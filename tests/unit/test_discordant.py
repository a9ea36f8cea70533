import unittest

from svbreak.discordant import DiscordantCluster
from svbreak.interval import GenomicRegion


class TestDiscordantCluster(unittest.TestCase):

    def setUp(self):
        self.cluster = DiscordantCluster(
            GenomicRegion(0, 100, 200), GenomicRegion(1, 500, 600, '-'),
            tcount=5, ncount=2, mapq1=40, mapq2=35.5, read_names=['t000_r1', 'n000_r2']
        )

    def test_count(self):
        self.assertEqual(7, self.cluster.count)
        self.assertFalse(self.cluster.is_empty())

    def test_default_is_empty(self):
        cluster = DiscordantCluster()
        self.assertTrue(cluster.is_empty())
        self.assertEqual(-1, cluster.mapq1)
        self.assertTrue(cluster.id)

    def test_ids_are_unique(self):
        self.assertNotEqual(DiscordantCluster().id, DiscordantCluster().id)

    def test_copy(self):
        copy = self.cluster.copy()
        self.assertEqual(self.cluster.id, copy.id)
        self.assertEqual(self.cluster.reg1, copy.reg1)
        copy.tcount = 100
        copy.read_names.append('t000_r3')
        self.assertEqual(5, self.cluster.tcount)
        self.assertEqual(2, len(self.cluster.read_names))

    def test_to_region_string(self):
        self.assertEqual('1:100-200(+)__2:500-600(-)', self.cluster.to_region_string(['1', '2']))
        self.assertEqual('0:100-200(+)__1:500-600(-)', self.cluster.to_region_string())
