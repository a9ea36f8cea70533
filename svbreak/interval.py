import bisect

from .constants import STRAND


class Interval:
    """
    closed integer interval, coordinates are inclusive on both ends
    """

    def __init__(self, start, end=None):
        """
        Args:
            start (int): the start of the interval (inclusive)
            end (int): the end of the interval (inclusive)
        """
        self.start = int(start)
        self.end = int(end) if end is not None else self.start
        if self.start > self.end:
            raise AttributeError('interval start > end is not allowed', self.start, self.end)

    def __getitem__(self, index):
        try:
            index = int(index)
        except ValueError:
            raise IndexError('index input accessor must be an integer', index)
        if index == 0:
            return self.start
        elif index == 1:
            return self.end
        raise IndexError('index input accessor is out of bounds: 1 or 2 only', index)

    @classmethod
    def overlaps(cls, first, other):
        """
        checks if two intervals have any portion of their given ranges in common

        Example:
            >>> Interval.overlaps(Interval(1, 4), Interval(5, 7))
            False
            >>> Interval.overlaps((1, 10), (10, 11))
            True
        """
        if first[1] < other[0]:
            return False
        elif first[0] > other[1]:
            return False
        return True

    def __len__(self):
        """
        Example:
            >>> len(Interval(1, 11))
            11
        """
        return self.end - self.start + 1

    def __lt__(self, other):
        if self[0] < other[0]:
            return True
        elif self[0] == other[0] and self[1] < other[1]:
            return True
        return False

    def __eq__(self, other):
        try:
            return self[0] == other[0] and self[1] == other[1]
        except (TypeError, IndexError):
            return False

    def __hash__(self):
        return hash((self[0], self[1]))

    def __repr__(self):
        return '{}({}, {})'.format(self.__class__.__name__, self.start, self.end)

    @classmethod
    def min_nonoverlapping(cls, *intervals):
        """
        for a list of intervals, orders them and merges any overlap to return a list of non-overlapping intervals

        Example:
            >>> Interval.min_nonoverlapping((1, 10), (7, 8), (6, 14), (17, 20))
            [Interval(1, 14), Interval(17, 20)]
        """
        if not intervals:
            return []
        intervals = sorted(intervals, key=lambda x: (x[0], x[1]))
        merged = [Interval(intervals[0][0], intervals[0][1])]
        for curr in intervals[1:]:
            if Interval.overlaps(merged[-1], curr):
                merged[-1] = Interval(merged[-1].start, max(merged[-1].end, curr[1]))
            else:
                merged.append(Interval(curr[0], curr[1]))
        return merged


class GenomicRegion(Interval):
    """
    a stranded interval on a reference sequence. Coordinates are 1-based and inclusive.
    The reference is identified by its index in the reference header (as for pysam reference_id)
    """

    @property
    def key(self):
        return (self.chr, self.start, self.end, self.strand)

    def __init__(self, chr, start, end=None, strand=STRAND.POS):
        """
        Args:
            chr (int): the reference id
            start (int): the genomic start position
            end (int): the genomic end position, defaults to the start
            strand (STRAND): the strand

        Examples:
            >>> GenomicRegion(0, 100)
            >>> GenomicRegion(0, 100, 200, '-')
        """
        Interval.__init__(self, start, end)
        self.chr = int(chr)
        self.strand = STRAND.enforce(strand)

    def __repr__(self):
        return 'GenomicRegion({0}:{1}{2}{3})'.format(
            self.chr,
            self.start,
            '-' + str(self.end) if self.end != self.start else '',
            self.strand
        )

    def __eq__(self, other):
        if not hasattr(other, 'key'):
            return False
        return self.key == other.key

    def __lt__(self, other):
        return self.key < other.key

    def __le__(self, other):
        return self.key <= other.key

    def __hash__(self):
        return hash(self.key)

    def is_empty(self):
        return self.chr == 0 and self.start == 0 and self.end == 0

    def pad(self, padding):
        """
        Returns:
            GenomicRegion: a copy of this region extended by the padding on both sides (not below position 1)
        """
        return GenomicRegion(self.chr, max(1, self.start - padding), self.end + padding, self.strand)

    def overlaps_region(self, other):
        """
        Returns:
            bool: True when both regions are on the same reference and their intervals overlap
        """
        return self.chr == other.chr and Interval.overlaps(self, other)

    def point_string(self, chr_name=None):
        """
        Example:
            >>> GenomicRegion(0, 100, strand='-').point_string('chr1')
            'chr1:100(-)'
        """
        return '{}:{}({})'.format(self.chr if chr_name is None else chr_name, self.start, self.strand)


class RegionCollection:
    """
    non-overlapping unstranded regions grouped by reference id, supports single position overlap queries
    """

    def __init__(self, regions=None):
        self._starts = {}
        self._regions = {}
        self.update(regions or [])

    def update(self, regions):
        """
        add a batch of regions. Each reference id touched is merged once

        Args:
            regions (:class:`list` of :class:`GenomicRegion`): the regions to add
        """
        by_chr = {}
        for region in regions:
            by_chr.setdefault(region.chr, []).append(Interval(region.start, region.end))
        for chr_id, intervals in by_chr.items():
            merged = Interval.min_nonoverlapping(*(self._regions.get(chr_id, []) + intervals))
            self._regions[chr_id] = merged
            self._starts[chr_id] = [r.start for r in merged]

    def __len__(self):
        return sum(len(regions) for regions in self._regions.values())

    def overlaps(self, region):
        """
        Args:
            region (GenomicRegion): the query region

        Returns:
            bool: True if the query overlaps any region in the collection
        """
        starts = self._starts.get(region.chr, [])
        index = bisect.bisect_right(starts, region.end) - 1
        if index < 0:
            return False
        return Interval.overlaps(self._regions[region.chr][index], region)
