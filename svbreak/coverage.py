"""
base-pair coverage providers. Anything with a ``coverage_at(chr_name, pos)`` method can be given to
:meth:`~svbreak.breakpoint.BreakPoint.add_allelic_fraction`; these are the two implementations used by the command line
"""
import threading

import numpy as np
import pysam


class ArrayCoverage:
    """
    in-memory per base depth, stored as one numpy array per reference sequence
    """

    def __init__(self):
        self._depth = {}

    def add(self, chr_name, start, depths):
        """
        Args:
            chr_name (str): the reference name
            start (int): 1-based position of the first value in depths
            depths (list of int): consecutive per base depths
        """
        depths = np.asarray(depths, dtype=np.int64)
        if chr_name in self._depth:
            offset, current = self._depth[chr_name]
            new_offset = min(offset, start)
            new_end = max(offset + len(current), start + len(depths))
            merged = np.zeros(new_end - new_offset, dtype=np.int64)
            merged[offset - new_offset:offset - new_offset + len(current)] += current
            merged[start - new_offset:start - new_offset + len(depths)] += depths
            self._depth[chr_name] = (new_offset, merged)
        else:
            self._depth[chr_name] = (start, depths)

    def coverage_at(self, chr_name, pos):
        """
        Returns:
            int: the depth at the 1-based position, 0 where nothing was recorded
        """
        if chr_name not in self._depth:
            return 0
        offset, depths = self._depth[chr_name]
        index = pos - offset
        if index < 0 or index >= len(depths):
            return 0
        return int(depths[index])


class BamCoverage:
    """
    per base depth computed on demand from an indexed bam file

    pysam file handles cannot be read from several threads at once so queries are serialized
    """

    def __init__(self, bam, min_mapping_quality=0):
        """
        Args:
            bam (str or pysam.AlignmentFile): path to an indexed bam file or an open handle
            min_mapping_quality (int): reads below this mapping quality are not counted
        """
        self.bam = pysam.AlignmentFile(bam, 'rb') if isinstance(bam, str) else bam
        self.min_mapping_quality = min_mapping_quality
        self._lock = threading.Lock()

    def _keep_read(self, read):
        return not any([
            read.is_unmapped,
            read.is_secondary,
            read.is_qcfail,
            read.is_duplicate,
            read.mapping_quality < self.min_mapping_quality
        ])

    def coverage_at(self, chr_name, pos):
        if chr_name not in self.bam.references:
            return 0
        with self._lock:
            counts = self.bam.count_coverage(
                chr_name, pos - 1, pos, quality_threshold=0, read_callback=self._keep_read)
        return int(np.sum(counts))

    def close(self):
        self.bam.close()
